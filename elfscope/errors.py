"""
ElfScope Exceptions
====================

Every decoding failure raised by ElfScope derives from :class:`ElfError`
so that callers (the engine, the CLI) can catch one type per file and
move on to the next image.

Truncated note records are the only condition absorbed locally; they end
the note enumeration instead of raising.
"""

from __future__ import annotations


class ElfError(Exception):
    """Base exception for all ELF decoding failures."""

    pass


class InvalidFormatError(ElfError):
    """The identification magic is not ``\\x7fELF``."""

    pass


class UnsupportedEncodingError(ElfError):
    """The identification byte-order tag is neither LSB nor MSB."""

    pass


class TypeMismatchError(ElfError):
    """A typed view was built over a section of the wrong declared type."""

    def __init__(self, section_index: int, actual: int, expected: tuple[int, ...]) -> None:
        self.section_index = section_index
        self.actual = actual
        self.expected = expected
        wanted = "|".join(f"0x{value:x}" for value in expected)
        super().__init__(
            f"Section [{section_index}] has type 0x{actual:x}, "
            f"expected {wanted}"
        )


class MissingSectionError(ElfError):
    """A section required to resolve names is not present in the image."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Required section not found: {name}")


class RangeOverflowError(ElfError):
    """A file offset or length falls outside the addressable image range."""

    pass
