"""
ELF Identification & Header Decoder
====================================

Reads the 16-byte identification prefix, configures the byte source's
byte order from it, and decodes the file header that follows.

The ELF32 and ELF64 headers carry the same fields at different widths:

    ELF32 (offsets 16..51):  e_type e_machine e_version e_entry(4)
                             e_phoff(4) e_shoff(4) e_flags ...
    ELF64 (offsets 16..63):  e_type e_machine e_version e_entry(8)
                             e_phoff(8) e_shoff(8) e_flags ...

Both are mapped onto a single :class:`~elfscope.core.models.Header` in
:func:`_to_header`.

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2, Figure 1-3.
"""

from __future__ import annotations

import logging

from elfscope.core.constants import EI_NIDENT, ELFDATA2LSB, ELFDATA2MSB
from elfscope.core.models import Header, Identification
from elfscope.errors import InvalidFormatError, UnsupportedEncodingError
from elfscope.parsers.loader import ByteSource

logger = logging.getLogger("elfscope.header")

# e_ident: magic, class, data, version, osabi, abiversion, pad
_IDENT_SHAPE: str = "4sBBBBB7s"

# Fields following e_ident
_EHDR32_SHAPE: str = "HHIIIIIHHHHHH"
_EHDR64_SHAPE: str = "HHIQQQIHHHHHH"


def read_identification(source: ByteSource) -> Identification:
    """Decode the identification prefix at offset 0.

    No validation happens here; check :attr:`Identification.is_valid`.
    """
    magic, elf_class, data, version, osabi, abi_version, padding = (
        source.read_struct(_IDENT_SHAPE, 0)
    )
    return Identification(
        magic=magic,
        elf_class=elf_class,
        data_encoding=data,
        version=version,
        os_abi=osabi,
        abi_version=abi_version,
        padding=padding,
    )


def configure_byte_order(source: ByteSource, ident: Identification) -> None:
    """Set the byte source's endianness from the identification tag.

    Raises:
        UnsupportedEncodingError: If the tag is neither LSB nor MSB.
    """
    if ident.data_encoding == ELFDATA2LSB:
        source.endianness = "little"
    elif ident.data_encoding == ELFDATA2MSB:
        source.endianness = "big"
    else:
        raise UnsupportedEncodingError(
            f"Unsupported ELF data encoding: {ident.data_encoding}"
        )


def read_header(source: ByteSource, ident: Identification) -> Header:
    """Decode the file header located right after the identification.

    Raises:
        InvalidFormatError: If the identification magic is wrong.
    """
    if not ident.is_valid:
        raise InvalidFormatError(
            f"Invalid ELF magic: {ident.magic!r}"
        )
    shape = _EHDR64_SHAPE if ident.is_64bit else _EHDR32_SHAPE
    header = _to_header(source.read_struct(shape, EI_NIDENT))
    logger.debug(
        "ELF%d %s-endian header: type=%d machine=%d shnum=%d",
        64 if ident.is_64bit else 32,
        source.endianness,
        header.file_type,
        header.machine,
        header.sh_count,
    )
    return header


def _to_header(fields: tuple[int, ...]) -> Header:
    # Both layouts share the field order; only the widths differ.
    (
        e_type, e_machine, e_version, e_entry,
        e_phoff, e_shoff, e_flags, e_ehsize,
        e_phentsize, e_phnum, e_shentsize, e_shnum,
        e_shstrndx,
    ) = fields
    return Header(
        file_type=e_type,
        machine=e_machine,
        version=e_version,
        entry=e_entry,
        ph_offset=e_phoff,
        sh_offset=e_shoff,
        flags=e_flags,
        header_size=e_ehsize,
        ph_entry_size=e_phentsize,
        ph_count=e_phnum,
        sh_entry_size=e_shentsize,
        sh_count=e_shnum,
        sh_string_index=e_shstrndx,
    )
