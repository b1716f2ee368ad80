"""
String Table Views
===================

String tables hold concatenated NUL-terminated strings referenced by
byte offset.  Linkers may store one name as the suffix of another
("tail merging"): ``"printf\\0"`` at offset 10 also serves ``"f"`` at
offset 15.  Lookups therefore fall back to the nearest preceding string
start and return the matching suffix.

Two views share the decoder:
    - :class:`StringTable` for ``SHT_STRTAB`` sections
    - :class:`DebugStringTable` for ``.debug_str``, whose contents the
      standard leaves unspecified (usually typed ``SHT_PROGBITS``)
"""

from __future__ import annotations

import bisect
from functools import cached_property
from typing import Iterator, Optional

from elfscope.core.constants import SHT_STRTAB
from elfscope.core.models import StringEntry
from elfscope.errors import TypeMismatchError
from elfscope.parsers.sections import Section


def require_type(section: Section, *types: int) -> None:
    """Refuse to view *section* unless its declared type is one of *types*.

    Raises:
        TypeMismatchError: On any other declared type.
    """
    if section.type not in types:
        raise TypeMismatchError(section.index, section.type, types)


def split_strings(data: bytes) -> dict[int, bytes]:
    """Split *data* on NUL bytes into an offset -> bytes mapping.

    Bytes after the last NUL are not a complete string and are dropped.
    """
    strings: dict[int, bytes] = {}
    start = 0
    end = data.find(b"\x00")
    while end != -1:
        strings[start] = data[start:end]
        start = end + 1
        end = data.find(b"\x00", start)
    return strings


class StringTable:
    """Offset-addressed view of a string table section.

    Usage::

        names = StringTable(section)
        names[1]          # string starting at offset 1
        names[5]          # suffix of the string covering offset 5
        for entry in names:
            print(entry.offset, entry.value)

    Args:
        section:    The string table section.
        hold_image: Keep the owning image alive for the life of the view.
                    The image passes ``False`` for the table it caches.

    Raises:
        TypeMismatchError: If the section is not ``SHT_STRTAB``.
    """

    required_types: Optional[tuple[int, ...]] = (SHT_STRTAB,)

    def __init__(self, section: Section, *, hold_image: bool = True) -> None:
        if self.required_types is not None:
            require_type(section, *self.required_types)
        self._section = section
        # sections only hold a weak reference; the view pins the image
        self._image = section.image if hold_image else None

    @property
    def section(self) -> Section:
        return self._section

    @cached_property
    def _strings(self) -> dict[int, bytes]:
        return split_strings(self._section.data())

    @cached_property
    def _offsets(self) -> list[int]:
        return sorted(self._strings)

    # ------------------------------------------------------------------ #
    #  Lookup
    # ------------------------------------------------------------------ #

    def lookup(self, offset: int) -> str:
        """Return the string referenced by *offset*.

        An exact string start returns that string.  Any other offset
        resolves to the tail of the nearest preceding string.  Offsets
        past the decoded data resolve to ``""``; lookups never fail.
        """
        strings = self._strings
        raw = strings.get(offset)
        if raw is None:
            position = bisect.bisect_right(self._offsets, offset) - 1
            if position < 0:
                return ""
            start = self._offsets[position]
            raw = strings[start][offset - start:]
        return raw.decode("ascii", errors="replace")

    def __getitem__(self, offset: int) -> str:
        return self.lookup(offset)

    # ------------------------------------------------------------------ #
    #  Enumeration
    # ------------------------------------------------------------------ #

    def __iter__(self) -> Iterator[StringEntry]:
        strings = self._strings
        for offset in self._offsets:
            yield StringEntry(
                offset=offset,
                value=strings[offset].decode("ascii", errors="replace"),
            )

    def __len__(self) -> int:
        return len(self._strings)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(section={self._section.index}, entries={len(self)})"


class DebugStringTable(StringTable):
    """String view over ``.debug_str``.

    The section's type is not checked: its contents are unspecified by
    the standard and producers mark it ``SHT_PROGBITS``.
    """

    required_types = None
