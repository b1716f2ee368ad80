"""
ElfScope Parsers
=================

Byte source, identification and header decoding, the section table, and
one typed view per section kind (strings, symbols, relocations, notes).
"""

from elfscope.parsers.loader import ByteSource
from elfscope.parsers.notes import NoteTable
from elfscope.parsers.relocations import RelocationAddendTable, RelocationTable
from elfscope.parsers.sections import Section
from elfscope.parsers.strings import DebugStringTable, StringTable
from elfscope.parsers.symbols import SymbolTable

__all__ = [
    "ByteSource",
    "DebugStringTable",
    "NoteTable",
    "RelocationAddendTable",
    "RelocationTable",
    "Section",
    "StringTable",
    "SymbolTable",
]
