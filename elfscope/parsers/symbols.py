"""
Symbol Table View
==================

Decodes ``SHT_SYMTAB`` and ``SHT_DYNSYM`` sections.  Each record's name
is resolved through the companion string table chosen by the section's
type: ``.strtab`` for the full symbol table, ``.dynstr`` for the dynamic
one.

Record layouts::

    Elf32_Sym (16 bytes): st_name st_value st_size st_info st_other st_shndx
    Elf64_Sym (24 bytes): st_name st_info st_other st_shndx st_value st_size

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2, "Symbol Table".
"""

from __future__ import annotations

from functools import cached_property
from typing import Iterator

from elfscope.core.constants import (
    SECTION_DYNSTR,
    SECTION_STRTAB,
    SHT_DYNSYM,
    SHT_SYMTAB,
)
from elfscope.core.models import SymbolEntry
from elfscope.errors import MissingSectionError
from elfscope.parsers.sections import Section
from elfscope.parsers.strings import StringTable, require_type

_SYM32_SHAPE: str = "IIIBBH"
_SYM64_SHAPE: str = "IBBHQQ"
_SYM32_SIZE: int = 16
_SYM64_SIZE: int = 24

_COMPANION_NAMES: dict[int, str] = {
    SHT_SYMTAB: SECTION_STRTAB,
    SHT_DYNSYM: SECTION_DYNSTR,
}


class SymbolTable:
    """Sequence of :class:`~elfscope.core.models.SymbolEntry` records.

    Iteration decodes the section from its first record on every call.

    Raises:
        TypeMismatchError: If the section is neither SYMTAB nor DYNSYM.
    """

    def __init__(self, section: Section) -> None:
        require_type(section, SHT_SYMTAB, SHT_DYNSYM)
        self._section = section
        # sections only hold a weak reference; the view pins the image
        self._image = section.image

    @property
    def section(self) -> Section:
        return self._section

    @cached_property
    def string_table(self) -> StringTable:
        """Companion string table used for symbol names.

        Raises:
            MissingSectionError: If the image has no such section.
        """
        wanted = _COMPANION_NAMES[self._section.type]
        for table in self._section.image.string_tables():
            if table.section.name == wanted:
                return table
        raise MissingSectionError(wanted)

    @property
    def entry_size(self) -> int:
        return _SYM64_SIZE if self._section.image.is_64bit else _SYM32_SIZE

    def __len__(self) -> int:
        return self._section.size // self.entry_size

    def __iter__(self) -> Iterator[SymbolEntry]:
        image = self._section.image
        names = self.string_table
        is_64bit = image.is_64bit
        shape = _SYM64_SHAPE if is_64bit else _SYM32_SHAPE
        entry_size = self.entry_size

        offset = self._section.offset
        for _ in range(len(self)):
            fields = image.source.read_struct(shape, offset)
            if is_64bit:
                st_name, st_info, st_other, st_shndx, st_value, st_size = fields
            else:
                st_name, st_value, st_size, st_info, st_other, st_shndx = fields
            yield SymbolEntry(
                name_offset=st_name,
                info=st_info,
                other=st_other,
                section_index=st_shndx,
                value=st_value,
                size=st_size,
                name=names[st_name],
            )
            offset += entry_size

    def __repr__(self) -> str:
        return f"SymbolTable(section={self._section.index}, entries={len(self)})"
