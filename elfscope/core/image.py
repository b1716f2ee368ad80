"""
ELF Image Facade
=================

:class:`ElfImage` owns the byte source of one ELF file and exposes its
header, its section table, and discovery queries returning typed section
views.  Everything derived from the bytes is computed on first use and
cached for the lifetime of the image.

Usage::

    with ElfImage.from_path("/usr/lib/libz.so.1") as image:
        print(image.header.machine)
        for table in image.symbol_tables():
            for symbol in table:
                print(symbol.name, hex(symbol.value))

Sections refer back to their image weakly, so keep the image (or a view
built from one of its sections) referenced while sections are in use.
A section taken from a temporary image, as in
``ElfImage.from_bytes(data).section_by_name(".strtab")``, is orphaned as
soon as the expression ends and raises :class:`~elfscope.errors.ElfError`
on first use.  Typed views hold the image strongly.
"""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from elfscope.core.constants import (
    SECTION_DEBUG_STR,
    SHN_UNDEF,
    SHT_DYNSYM,
    SHT_NOTE,
    SHT_REL,
    SHT_RELA,
    SHT_STRTAB,
    SHT_SYMTAB,
)
from elfscope.core.models import Header, Identification
from elfscope.errors import ElfError, InvalidFormatError, RangeOverflowError
from elfscope.parsers.header import configure_byte_order, read_header, read_identification
from elfscope.parsers.loader import ByteSource
from elfscope.parsers.notes import NoteTable
from elfscope.parsers.relocations import RelocationAddendTable, RelocationTable
from elfscope.parsers.sections import Section, read_section_table
from elfscope.parsers.strings import DebugStringTable, StringTable
from elfscope.parsers.symbols import SymbolTable

logger = logging.getLogger("elfscope.image")

SectionView = Union[StringTable, SymbolTable, RelocationTable, RelocationAddendTable, NoteTable]

# Declared section type -> typed view
VIEW_TYPES: dict[int, type] = {
    SHT_STRTAB: StringTable,
    SHT_SYMTAB: SymbolTable,
    SHT_DYNSYM: SymbolTable,
    SHT_REL: RelocationTable,
    SHT_RELA: RelocationAddendTable,
    SHT_NOTE: NoteTable,
}

DEBUG_STRING_SECTIONS: tuple[str, ...] = (SECTION_DEBUG_STR,)


class ElfImage:
    """A decoded ELF image.

    The identification is validated and the byte order configured at
    construction; the file header is decoded immediately after.

    Args:
        source: Byte source holding the image.  The image takes ownership
                and closes it on :meth:`close`.

    Raises:
        InvalidFormatError: If the identification magic is wrong or the
            file is too short to hold one.
        UnsupportedEncodingError: If the byte-order tag is unknown.
    """

    def __init__(self, source: ByteSource) -> None:
        self._source: Optional[ByteSource] = source
        try:
            ident = read_identification(source)
        except RangeOverflowError as exc:
            raise InvalidFormatError(
                f"Image too short for ELF identification ({source.size} bytes)"
            ) from exc
        if not ident.is_valid:
            raise InvalidFormatError(f"Invalid ELF magic: {ident.magic!r}")

        configure_byte_order(source, ident)
        self._identification = ident
        self._header = read_header(source, ident)

    # ------------------------------------------------------------------ #
    #  Construction helpers
    # ------------------------------------------------------------------ #

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> ElfImage:
        """Decode an in-memory image."""
        return cls(ByteSource.from_bytes(data))

    @classmethod
    def from_path(cls, path: Union[str, Path], *, use_mmap: bool = True) -> ElfImage:
        """Open and decode an image file.

        The file handle is released if the header turns out to be invalid.
        """
        source = ByteSource.from_path(path, use_mmap=use_mmap)
        try:
            return cls(source)
        except ElfError:
            source.close()
            raise

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    @property
    def source(self) -> ByteSource:
        if self._source is None:
            raise ElfError("Image is closed")
        return self._source

    @property
    def identification(self) -> Identification:
        return self._identification

    @property
    def header(self) -> Header:
        return self._header

    @property
    def is_64bit(self) -> bool:
        return self._identification.is_64bit

    @property
    def word_size(self) -> int:
        """Native integer width in bytes: 8 for ELF64, 4 for ELF32."""
        return 8 if self.is_64bit else 4

    @property
    def byte_order(self) -> str:
        return self.source.endianness

    # ------------------------------------------------------------------ #
    #  Sections
    # ------------------------------------------------------------------ #

    @cached_property
    def sections(self) -> tuple[Section, ...]:
        """All section descriptors in table order."""
        return read_section_table(self)

    @cached_property
    def section_names(self) -> Optional[StringTable]:
        """The section-name string table, or ``None`` if the image has none."""
        index = self._header.sh_string_index
        if index == SHN_UNDEF:
            return None
        # cached on the image, so the table must not hold the image in turn
        table = self.string_section(index, hold_image=False)
        if table is None:
            logger.warning(
                "Section-name table index %d does not designate a string table; "
                "section names will be empty",
                index,
            )
        return table

    def sections_by_type(self, section_type: int) -> Iterator[Section]:
        """Yield the sections whose declared type is *section_type*."""
        for section in self.sections:
            if section.type == section_type:
                yield section

    def section_by_name(self, name: str) -> Optional[Section]:
        """Return the first section called *name*, or ``None``."""
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def string_section(self, index: int, *, hold_image: bool = True) -> Optional[StringTable]:
        """Return the string table at section *index*, or ``None``.

        ``None`` is also returned when that section is not ``SHT_STRTAB``.
        *hold_image* is passed through to :class:`StringTable`.
        """
        if 0 <= index < len(self.sections):
            section = self.sections[index]
            if section.type == SHT_STRTAB:
                return StringTable(section, hold_image=hold_image)
        return None

    # ------------------------------------------------------------------ #
    #  Typed views
    # ------------------------------------------------------------------ #

    def view(self, section: Section) -> Optional[SectionView]:
        """Build the typed view matching *section*'s declared type.

        Returns ``None`` for section types without a dedicated view.
        """
        view_type = VIEW_TYPES.get(section.type)
        if view_type is None:
            return None
        return view_type(section)

    def string_tables(self) -> Iterator[StringTable]:
        for section in self.sections_by_type(SHT_STRTAB):
            yield StringTable(section)

    def symbol_tables(self) -> Iterator[SymbolTable]:
        for section in self.sections:
            if section.type in (SHT_SYMTAB, SHT_DYNSYM):
                yield SymbolTable(section)

    def relocation_tables(self) -> Iterator[RelocationTable]:
        for section in self.sections_by_type(SHT_REL):
            yield RelocationTable(section)

    def relocation_addend_tables(self) -> Iterator[RelocationAddendTable]:
        for section in self.sections_by_type(SHT_RELA):
            yield RelocationAddendTable(section)

    def note_tables(self) -> Iterator[NoteTable]:
        for section in self.sections_by_type(SHT_NOTE):
            yield NoteTable(section)

    def debug_string_tables(self) -> Iterator[DebugStringTable]:
        for section in self.sections:
            if section.name in DEBUG_STRING_SECTIONS:
                yield DebugStringTable(section)

    def debug_strings(self) -> Optional[DebugStringTable]:
        """Return the ``.debug_str`` view, or ``None`` if absent."""
        return next(self.debug_string_tables(), None)

    # ------------------------------------------------------------------ #
    #  Lifetime
    # ------------------------------------------------------------------ #

    @property
    def closed(self) -> bool:
        return self._source is None

    def close(self) -> None:
        """Release the byte source.  Further reads raise :class:`ElfError`."""
        if self._source is not None:
            self._source.close()
            self._source = None

    def __enter__(self) -> ElfImage:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"ElfImage(ELF{64 if self.is_64bit else 32}, "
            f"machine={self._header.machine}, sections={self._header.sh_count})"
        )
