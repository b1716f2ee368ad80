"""
ElfScope -- ELF Image Decoder
==============================

ElfScope decodes Executable and Linkable Format images without relying
on an external linker, loader, or the host's native ELF support.

Capabilities:
    - Identification and header decoding for ELF32/ELF64, LSB/MSB
    - Lazy section table materialization with name resolution
    - String tables with tail-merged name lookup
    - Symbol tables paired with their companion string tables
    - Relocation tables, with and without addend
    - Vendor note records
    - Raw ``.debug_str`` string blobs

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from elfscope.core.image import ElfImage
from elfscope.errors import (
    ElfError,
    InvalidFormatError,
    MissingSectionError,
    RangeOverflowError,
    TypeMismatchError,
    UnsupportedEncodingError,
)
from elfscope.parsers.loader import ByteSource

__version__ = "1.0.0"
__all__ = [
    "ByteSource",
    "ElfImage",
    "ElfError",
    "InvalidFormatError",
    "MissingSectionError",
    "RangeOverflowError",
    "TypeMismatchError",
    "UnsupportedEncodingError",
]
