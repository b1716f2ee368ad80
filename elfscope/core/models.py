"""
ElfScope Data Models
=====================

Pydantic-based records produced by the ELF decoders.  Every record is a
frozen value object: decoding the same bytes twice yields models that
compare equal field for field.

The on-disk 32-bit and 64-bit layouts are decoded into these
width-independent records by the parsers; nothing downstream needs to
know which layout a value came from.

References:
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer

from elfscope.core.constants import (
    ELF_MAGIC,
    ELFCLASS64,
    ELFDATA2LSB,
    ELFDATA2MSB,
)


# ---------------------------------------------------------------------------
# Identification & header
# ---------------------------------------------------------------------------

class Identification(BaseModel):
    """The 16-byte ``e_ident`` prefix of an ELF image.

    Attributes:
        magic: Four signature bytes, ``\\x7fELF`` for a valid image.
        elf_class: Word class (1 = 32-bit, 2 = 64-bit).
        data_encoding: Byte-order tag (1 = little, 2 = big).
        version: Identification version, normally 1.
        os_abi: Target OS / ABI tag.
        abi_version: ABI version.
        padding: Seven reserved bytes.
    """
    model_config = ConfigDict(frozen=True)

    magic: bytes = b""
    elf_class: int = 0
    data_encoding: int = 0
    version: int = 0
    os_abi: int = 0
    abi_version: int = 0
    padding: bytes = b""

    @property
    def is_valid(self) -> bool:
        """``True`` iff the magic bytes equal the ELF signature."""
        return self.magic == ELF_MAGIC

    @property
    def is_64bit(self) -> bool:
        return self.elf_class == ELFCLASS64

    @property
    def byte_order(self) -> Optional[str]:
        """``"little"``, ``"big"``, or ``None`` for an unknown tag."""
        if self.data_encoding == ELFDATA2LSB:
            return "little"
        if self.data_encoding == ELFDATA2MSB:
            return "big"
        return None

    @field_serializer("magic", "padding")
    def _hex_bytes(self, value: bytes) -> str:
        return value.hex()


class Header(BaseModel):
    """Width-independent ELF file header.

    Both the ``Elf32_Ehdr`` and ``Elf64_Ehdr`` layouts map onto this
    record; addresses and offsets keep their full value regardless of
    the source word size.
    """
    model_config = ConfigDict(frozen=True)

    file_type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    ph_offset: int = 0
    sh_offset: int = 0
    flags: int = 0
    header_size: int = 0
    ph_entry_size: int = 0
    ph_count: int = 0
    sh_entry_size: int = 0
    sh_count: int = 0
    sh_string_index: int = 0


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class SectionHeader(BaseModel):
    """Raw section descriptor, one entry of the section header table.

    Attributes:
        name_offset: Offset of the name in the section-name string table.
        type: Section type tag (``SHT_*``).
        flags: Attribute bits (``SHF_*``).
        address: Virtual address when loaded, or 0.
        offset: File offset of the first byte.
        size: Declared size in bytes.
        link: Section index link; meaning depends on the type.
        info: Extra information; meaning depends on the type.
        alignment: Address alignment constraint.
        entry_size: Size of one fixed-size entry, 0 if not a table.
    """
    model_config = ConfigDict(frozen=True)

    name_offset: int = 0
    type: int = 0
    flags: int = 0
    address: int = 0
    offset: int = 0
    size: int = 0
    link: int = 0
    info: int = 0
    alignment: int = 0
    entry_size: int = 0


class StringEntry(BaseModel):
    """A string constant and the byte offset where it starts."""
    model_config = ConfigDict(frozen=True)

    offset: int = 0
    value: str = ""


class SymbolEntry(BaseModel):
    """A symbol table record with its resolved name.

    ``binding``, ``type`` and ``visibility`` are derived from the packed
    ``info`` and ``other`` bytes.
    """
    model_config = ConfigDict(frozen=True)

    name_offset: int = 0
    info: int = 0
    other: int = 0
    section_index: int = 0
    value: int = 0
    size: int = 0
    name: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def binding(self) -> int:
        return self.info >> 4

    @computed_field  # type: ignore[prop-decorator]
    @property
    def type(self) -> int:
        return self.info & 0xF

    @computed_field  # type: ignore[prop-decorator]
    @property
    def visibility(self) -> int:
        return self.other & 0x3


class RelocationEntry(BaseModel):
    """A relocation record without addend.

    ``info`` packs the symbol index and the relocation type; the split is
    processor and word-width specific and is left to the caller.
    """
    model_config = ConfigDict(frozen=True)

    offset: int = 0
    info: int = 0


class RelocationAddendEntry(RelocationEntry):
    """A relocation record carrying an explicit signed addend."""

    addend: int = 0


class NoteEntry(BaseModel):
    """A vendor note record.

    Attributes:
        type: Note type word.
        name: Owner name (e.g. ``GNU``).
        descriptor: Descriptor decoded as a NUL-terminated string.
        raw_descriptor: Exact descriptor bytes.
    """
    model_config = ConfigDict(frozen=True)

    type: int = 0
    name: str = ""
    descriptor: str = ""
    raw_descriptor: bytes = b""

    @field_serializer("raw_descriptor")
    def _hex_descriptor(self, value: bytes) -> str:
        return value.hex()


# ---------------------------------------------------------------------------
# Inspection report
# ---------------------------------------------------------------------------

class SectionSummary(BaseModel):
    """Display-ready description of one section."""
    index: int = 0
    name: str = ""
    type: str = ""
    flags: str = ""
    header: SectionHeader = Field(default_factory=SectionHeader)


class StringTableReport(BaseModel):
    section: str = ""
    entries: list[StringEntry] = Field(default_factory=list)


class SymbolTableReport(BaseModel):
    section: str = ""
    symbols: list[SymbolEntry] = Field(default_factory=list)


class RelocationTableReport(BaseModel):
    section: str = ""
    entries: list[RelocationEntry] = Field(default_factory=list)


class RelocationAddendTableReport(BaseModel):
    section: str = ""
    entries: list[RelocationAddendEntry] = Field(default_factory=list)


class NoteTableReport(BaseModel):
    section: str = ""
    notes: list[NoteEntry] = Field(default_factory=list)


class ImageReport(BaseModel):
    """Everything decoded from a single ELF image.

    Attributes:
        path: Filesystem path of the image.
        size: File size in bytes.
        identification: Decoded ``e_ident`` prefix.
        header: Decoded file header, ``None`` if decoding failed early.
        sections: Section table summaries.
        string_tables: Contents of every STRTAB section.
        symbol_tables: Contents of every SYMTAB / DYNSYM section.
        relocation_tables: Contents of every REL section.
        relocation_addend_tables: Contents of every RELA section.
        note_tables: Contents of every NOTE section.
        debug_strings: Contents of the ``.debug_str`` section, if any.
        error: Decoding error message; empty on success.
    """
    path: str = ""
    size: int = 0
    identification: Optional[Identification] = None
    header: Optional[Header] = None
    sections: list[SectionSummary] = Field(default_factory=list)
    string_tables: list[StringTableReport] = Field(default_factory=list)
    symbol_tables: list[SymbolTableReport] = Field(default_factory=list)
    relocation_tables: list[RelocationTableReport] = Field(default_factory=list)
    relocation_addend_tables: list[RelocationAddendTableReport] = Field(default_factory=list)
    note_tables: list[NoteTableReport] = Field(default_factory=list)
    debug_strings: list[StringEntry] = Field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error
