"""
Section Table Decoder
======================

Decodes the section header table and wraps each raw descriptor in a
:class:`Section` carrying its index and a weak reference to the owning
:class:`~elfscope.core.image.ElfImage`.

The table is walked ``e_shnum`` times from ``e_shoff``, advancing by
``e_shentsize`` rather than by the size of the decoded structure so that
vendor-extended entries are skipped over correctly.

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2, "Sections".
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any

from elfscope.core.constants import (
    SHT_HIOS,
    SHT_HIPROC,
    SHT_HIUSER,
    SHT_LOOS,
    SHT_LOPROC,
    SHT_LOUSER,
    SHT_NOBITS,
    name_of,
    section_flags_str,
)
from elfscope.core.models import SectionHeader
from elfscope.errors import ElfError

if TYPE_CHECKING:
    from elfscope.core.image import ElfImage

logger = logging.getLogger("elfscope.sections")

# Elf32_Shdr: 40 bytes, Elf64_Shdr: 64 bytes
_SHDR32_SHAPE: str = "IIIIIIIIII"
_SHDR64_SHAPE: str = "IIQQQQIIQQ"


class Section:
    """One entry of the section header table.

    The descriptor fields are exposed as read-only attributes; ``name``
    and :meth:`data` are resolved through the owning image.
    """

    __slots__ = ("_header", "_index", "_image_ref")

    def __init__(self, image: ElfImage, index: int, header: SectionHeader) -> None:
        self._header = header
        self._index = index
        self._image_ref = weakref.ref(image)

    # ------------------------------------------------------------------ #
    #  Identity
    # ------------------------------------------------------------------ #

    @property
    def index(self) -> int:
        """Zero-based position in the section header table."""
        return self._index

    @property
    def header(self) -> SectionHeader:
        """The raw decoded descriptor."""
        return self._header

    @property
    def image(self) -> ElfImage:
        image = self._image_ref()
        if image is None:
            raise ElfError(f"Owning image of section [{self._index}] is gone")
        return image

    @property
    def name(self) -> str:
        """Section name, or ``""`` when the image has no name table."""
        names = self.image.section_names
        if names is None:
            return ""
        return names[self._header.name_offset]

    # ------------------------------------------------------------------ #
    #  Descriptor fields
    # ------------------------------------------------------------------ #

    @property
    def type(self) -> int:
        return self._header.type

    @property
    def flags(self) -> int:
        return self._header.flags

    @property
    def address(self) -> int:
        return self._header.address

    @property
    def offset(self) -> int:
        return self._header.offset

    @property
    def size(self) -> int:
        return self._header.size

    @property
    def link(self) -> int:
        return self._header.link

    @property
    def info(self) -> int:
        return self._header.info

    @property
    def alignment(self) -> int:
        return self._header.alignment

    @property
    def entry_size(self) -> int:
        return self._header.entry_size

    # ------------------------------------------------------------------ #
    #  Derived attributes
    # ------------------------------------------------------------------ #

    @property
    def type_name(self) -> str:
        return name_of("section_type", self._header.type)

    @property
    def flags_str(self) -> str:
        return section_flags_str(self._header.flags)

    def has_flag(self, flag: int) -> bool:
        """Return ``True`` if every bit of *flag* is set."""
        return self._header.flags & flag == flag

    @property
    def is_os(self) -> bool:
        """Type falls in the OS-specific range."""
        return SHT_LOOS <= self._header.type <= SHT_HIOS

    @property
    def is_proc(self) -> bool:
        """Type falls in the processor-specific range."""
        return SHT_LOPROC <= self._header.type <= SHT_HIPROC

    @property
    def is_user(self) -> bool:
        """Type falls in the application range."""
        return SHT_LOUSER <= self._header.type <= SHT_HIUSER

    def data(self) -> bytes:
        """Return the raw section bytes.

        ``SHT_NOBITS`` sections occupy no file space, so their content is
        always empty whatever their declared size.
        """
        if self._header.type == SHT_NOBITS:
            return b""
        return self.image.source.read_bytes(self._header.offset, self._header.size)

    # ------------------------------------------------------------------ #
    #  Dunder helpers
    # ------------------------------------------------------------------ #

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Section):
            return NotImplemented
        return self._index == other._index and self._header == other._header

    def __hash__(self) -> int:
        return hash((self._index, self._header.offset, self._header.type))

    def __repr__(self) -> str:
        return (
            f"Section(index={self._index}, type={self.type_name}, "
            f"offset=0x{self._header.offset:x}, size=0x{self._header.size:x})"
        )


def read_section_table(image: ElfImage) -> tuple[Section, ...]:
    """Decode every section descriptor of *image*.

    Returns:
        Sections in table order; the length always equals ``e_shnum``.
    """
    header = image.header
    source = image.source
    shape = _SHDR64_SHAPE if image.is_64bit else _SHDR32_SHAPE

    sections: list[Section] = []
    offset = header.sh_offset
    for index in range(header.sh_count):
        sections.append(Section(image, index, _to_section_header(source.read_struct(shape, offset))))
        offset += header.sh_entry_size

    logger.debug("Decoded %d section headers at 0x%x", len(sections), header.sh_offset)
    return tuple(sections)


def _to_section_header(fields: tuple[int, ...]) -> SectionHeader:
    (
        sh_name, sh_type, sh_flags, sh_addr,
        sh_offset, sh_size, sh_link, sh_info,
        sh_addralign, sh_entsize,
    ) = fields
    return SectionHeader(
        name_offset=sh_name,
        type=sh_type,
        flags=sh_flags,
        address=sh_addr,
        offset=sh_offset,
        size=sh_size,
        link=sh_link,
        info=sh_info,
        alignment=sh_addralign,
        entry_size=sh_entsize,
    )
