"""Builds small synthetic ELF images for the test suite.

Images hold an identification, a file header, the section contents and a
trailing section header table.  A ``.shstrtab`` section is appended
automatically and designated as the section-name table.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from elfscope.core.constants import (
    ELF_MAGIC,
    ELFCLASS32,
    ELFCLASS64,
    ELFDATA2LSB,
    ELFDATA2MSB,
    EM_386,
    EM_X86_64,
    ET_REL,
    SHF_ALLOC,
    SHF_EXECINSTR,
    SHF_WRITE,
    SHT_DYNSYM,
    SHT_NOBITS,
    SHT_NOTE,
    SHT_PROGBITS,
    SHT_REL,
    SHT_RELA,
    SHT_STRTAB,
    SHT_SYMTAB,
)


@dataclass
class _Pending:
    name: str
    sh_type: int
    data: bytes
    flags: int
    link: int
    info: int
    align: int
    entsize: int
    addr: int
    size: int | None


class ElfFactory:
    """Assemble an ELF image section by section.

    Usage::

        factory = ElfFactory(bits=64, endian="little")
        factory.add_section(".strtab", SHT_STRTAB, b"\\0main\\0")
        blob = factory.build()
    """

    def __init__(self, bits: int = 64, endian: str = "little") -> None:
        self.bits = bits
        self.endian = endian
        self.prefix = "<" if endian == "little" else ">"
        self._sections: list[_Pending] = []

    @property
    def word(self) -> str:
        return "Q" if self.bits == 64 else "I"

    @property
    def word_size(self) -> int:
        return 8 if self.bits == 64 else 4

    # ------------------------------------------------------------------ #
    #  Sections
    # ------------------------------------------------------------------ #

    def add_section(
        self,
        name: str,
        sh_type: int,
        data: bytes = b"",
        *,
        flags: int = 0,
        link: int = 0,
        info: int = 0,
        align: int = 1,
        entsize: int = 0,
        addr: int = 0,
        size: int | None = None,
    ) -> int:
        """Queue a section and return its index in the header table."""
        self._sections.append(
            _Pending(name, sh_type, data, flags, link, info, align, entsize, addr, size)
        )
        return len(self._sections)

    # ------------------------------------------------------------------ #
    #  Record packers
    # ------------------------------------------------------------------ #

    def symbol(
        self,
        name: int,
        value: int = 0,
        size: int = 0,
        info: int = 0,
        other: int = 0,
        shndx: int = 0,
    ) -> bytes:
        if self.bits == 64:
            return struct.pack(self.prefix + "IBBHQQ", name, info, other, shndx, value, size)
        return struct.pack(self.prefix + "IIIBBH", name, value, size, info, other, shndx)

    def rel(self, offset: int, info: int) -> bytes:
        return struct.pack(self.prefix + self.word * 2, offset, info)

    def rela(self, offset: int, info: int, addend: int) -> bytes:
        shape = "QQq" if self.bits == 64 else "IIi"
        return struct.pack(self.prefix + shape, offset, info, addend)

    def note(self, name: bytes, desc: bytes, note_type: int) -> bytes:
        """One note record padded to the native word size.

        *name* and *desc* are stored verbatim, so include the NUL
        terminator when the record should carry one.
        """
        record = struct.pack(self.prefix + self.word * 3, len(name), len(desc), note_type)
        record += name + desc
        remainder = len(record) % self.word_size
        if remainder:
            record += b"\x00" * (self.word_size - remainder)
        return record

    # ------------------------------------------------------------------ #
    #  Assembly
    # ------------------------------------------------------------------ #

    def build(
        self,
        *,
        shstrndx: int | None = None,
        data_encoding: int | None = None,
        with_shstrtab: bool = True,
        e_type: int = ET_REL,
        entry: int = 0,
        flags: int = 0,
    ) -> bytes:
        sections = list(self._sections)
        if with_shstrtab:
            sections.append(_Pending(".shstrtab", SHT_STRTAB, b"", 0, 0, 0, 1, 0, 0, None))

        names = bytearray(b"\x00")
        name_offsets: list[int] = []
        for pending in sections:
            name_offsets.append(len(names))
            names += pending.name.encode("ascii") + b"\x00"
        if with_shstrtab:
            sections[-1].data = bytes(names)

        ehsize = 64 if self.bits == 64 else 52
        shentsize = 64 if self.bits == 64 else 40

        body = bytearray()
        offsets: list[int] = []
        for pending in sections:
            while (ehsize + len(body)) % 8:
                body.append(0)
            offsets.append(ehsize + len(body))
            if pending.sh_type != SHT_NOBITS:
                body += pending.data
        while (ehsize + len(body)) % 8:
            body.append(0)
        shoff = ehsize + len(body)

        table = bytearray(b"\x00" * shentsize)
        shape = "IIQQQQIIQQ" if self.bits == 64 else "IIIIIIIIII"
        for pending, name_offset, offset in zip(sections, name_offsets, offsets):
            size = pending.size if pending.size is not None else len(pending.data)
            table += struct.pack(
                self.prefix + shape,
                name_offset,
                pending.sh_type,
                pending.flags,
                pending.addr,
                offset,
                size,
                pending.link,
                pending.info,
                pending.align,
                pending.entsize,
            )

        shnum = len(sections) + 1
        if shstrndx is None:
            shstrndx = shnum - 1 if with_shstrtab else 0
        if data_encoding is None:
            data_encoding = ELFDATA2LSB if self.endian == "little" else ELFDATA2MSB

        ident = ELF_MAGIC + bytes([
            ELFCLASS64 if self.bits == 64 else ELFCLASS32,
            data_encoding,
            1,
            0,
            0,
        ]) + b"\x00" * 7

        header_shape = "HHIQQQIHHHHHH" if self.bits == 64 else "HHIIIIIHHHHHH"
        header = struct.pack(
            self.prefix + header_shape,
            e_type,
            EM_X86_64 if self.bits == 64 else EM_386,
            1,
            entry,
            0,
            shoff,
            flags,
            ehsize,
            0,
            0,
            shentsize,
            shnum,
            shstrndx,
        )
        return ident + header + bytes(body) + bytes(table)


# ---------------------------------------------------------------------------
# Reference image shared by most tests
# ---------------------------------------------------------------------------

SAMPLE_STRTAB = b"\x00main\x00printf\x00"
SAMPLE_DYNSTR = b"\x00puts\x00"
SAMPLE_DEBUG_STR = b"int\x00unsigned char\x00"
SAMPLE_SECTION_NAMES = [
    "",
    ".text",
    ".strtab",
    ".symtab",
    ".rel.text",
    ".rela.text",
    ".note.gnu",
    ".bss",
    ".debug_str",
    ".dynstr",
    ".dynsym",
    ".shstrtab",
]
BUILD_ID = bytes(range(1, 9))


def build_sample(bits: int = 64, endian: str = "little", **build_args) -> bytes:
    """An object file exercising every typed section view.

    Section indexes follow :data:`SAMPLE_SECTION_NAMES`.
    """
    f = ElfFactory(bits, endian)
    sym_size = 24 if bits == 64 else 16

    f.add_section(".text", SHT_PROGBITS, b"\x90" * 16, flags=SHF_ALLOC | SHF_EXECINSTR, align=16)
    f.add_section(".strtab", SHT_STRTAB, SAMPLE_STRTAB)
    f.add_section(
        ".symtab",
        SHT_SYMTAB,
        f.symbol(0)
        + f.symbol(1, value=0x1000, size=16, info=(1 << 4) | 2, shndx=1)
        + f.symbol(6, info=(1 << 4) | 0, other=2)
        + f.symbol(11, value=0x20, info=(2 << 4) | 1, shndx=1),
        link=2,
        info=1,
        align=8,
        entsize=sym_size,
    )
    f.add_section(".rel.text", SHT_REL, f.rel(0x10, 0x0201) + f.rel(0x20, 0x0302), link=3, info=1)
    f.add_section(".rela.text", SHT_RELA, f.rela(0x30, 0x0101, -4), link=3, info=1)
    f.add_section(
        ".note.gnu",
        SHT_NOTE,
        f.note(b"GNU\x00", BUILD_ID, 3) + f.note(b"Go\x00", b"1.0\x00", 4),
        flags=SHF_ALLOC,
        align=4,
    )
    f.add_section(".bss", SHT_NOBITS, flags=SHF_ALLOC | SHF_WRITE, size=0x100)
    f.add_section(".debug_str", SHT_PROGBITS, SAMPLE_DEBUG_STR)
    f.add_section(".dynstr", SHT_STRTAB, SAMPLE_DYNSTR, flags=SHF_ALLOC)
    f.add_section(
        ".dynsym",
        SHT_DYNSYM,
        f.symbol(0) + f.symbol(1, info=(1 << 4) | 2),
        flags=SHF_ALLOC,
        link=9,
        entsize=sym_size,
    )
    return f.build(**build_args)
