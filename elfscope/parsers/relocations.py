"""
Relocation Table Views
=======================

Decodes ``SHT_REL`` and ``SHT_RELA`` sections.  The ``r_info`` word is
kept opaque: how it splits into a symbol index and a relocation type
depends on the target machine and word width (``ELF32_R_SYM`` shifts by
8, ``ELF64_R_SYM`` by 32, MIPS64 packs three types), so that is left to
callers that know the architecture.

Record layouts::

    Elf32_Rel  (8 bytes):  r_offset r_info
    Elf64_Rel  (16 bytes): r_offset r_info
    Elf32_Rela (12 bytes): r_offset r_info r_addend(signed)
    Elf64_Rela (24 bytes): r_offset r_info r_addend(signed)
"""

from __future__ import annotations

from typing import Iterator

from elfscope.core.constants import SHT_REL, SHT_RELA
from elfscope.core.models import RelocationAddendEntry, RelocationEntry
from elfscope.parsers.sections import Section
from elfscope.parsers.strings import require_type


class RelocationTable:
    """Sequence of :class:`~elfscope.core.models.RelocationEntry` records.

    Raises:
        TypeMismatchError: If the section is not ``SHT_REL``.
    """

    _shapes: dict[bool, str] = {False: "II", True: "QQ"}
    _sizes: dict[bool, int] = {False: 8, True: 16}

    def __init__(self, section: Section) -> None:
        require_type(section, SHT_REL)
        self._section = section
        # sections only hold a weak reference; the view pins the image
        self._image = section.image

    @property
    def section(self) -> Section:
        return self._section

    @property
    def entry_size(self) -> int:
        return self._sizes[self._section.image.is_64bit]

    def __len__(self) -> int:
        return self._section.size // self.entry_size

    def __iter__(self) -> Iterator[RelocationEntry]:
        image = self._section.image
        shape = self._shapes[image.is_64bit]
        entry_size = self.entry_size

        offset = self._section.offset
        for _ in range(len(self)):
            r_offset, r_info = image.source.read_struct(shape, offset)
            yield RelocationEntry(offset=r_offset, info=r_info)
            offset += entry_size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(section={self._section.index}, entries={len(self)})"


class RelocationAddendTable:
    """Sequence of :class:`~elfscope.core.models.RelocationAddendEntry` records.

    Raises:
        TypeMismatchError: If the section is not ``SHT_RELA``.
    """

    _shapes: dict[bool, str] = {False: "IIi", True: "QQq"}
    _sizes: dict[bool, int] = {False: 12, True: 24}

    def __init__(self, section: Section) -> None:
        require_type(section, SHT_RELA)
        self._section = section
        # sections only hold a weak reference; the view pins the image
        self._image = section.image

    @property
    def section(self) -> Section:
        return self._section

    @property
    def entry_size(self) -> int:
        return self._sizes[self._section.image.is_64bit]

    def __len__(self) -> int:
        return self._section.size // self.entry_size

    def __iter__(self) -> Iterator[RelocationAddendEntry]:
        image = self._section.image
        shape = self._shapes[image.is_64bit]
        entry_size = self.entry_size

        offset = self._section.offset
        for _ in range(len(self)):
            r_offset, r_info, r_addend = image.source.read_struct(shape, offset)
            yield RelocationAddendEntry(offset=r_offset, info=r_info, addend=r_addend)
            offset += entry_size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(section={self._section.index}, entries={len(self)})"
