"""
ELF Constants
==============

Numeric constants of the Executable and Linkable Format together with
name tables used for display.  Values are kept as plain integers so that
vendor-specific or corrupt values never fail to decode; the name tables
are consulted only when rendering.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Linux man page: elf(5).
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Identification
# ---------------------------------------------------------------------------

ELF_MAGIC: bytes = b"\x7fELF"
EI_NIDENT: int = 16

# ELF Class (32-bit vs 64-bit)
ELFCLASSNONE: int = 0
ELFCLASS32: int = 1
ELFCLASS64: int = 2

# Data encoding (endianness)
ELFDATANONE: int = 0
ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

# Version
EV_NONE: int = 0
EV_CURRENT: int = 1

# OS / ABI
ELFOSABI_NONE: int = 0
ELFOSABI_HPUX: int = 1
ELFOSABI_NETBSD: int = 2
ELFOSABI_GNU: int = 3
ELFOSABI_SOLARIS: int = 6
ELFOSABI_AIX: int = 7
ELFOSABI_IRIX: int = 8
ELFOSABI_FREEBSD: int = 9
ELFOSABI_TRU64: int = 10
ELFOSABI_MODESTO: int = 11
ELFOSABI_OPENBSD: int = 12
ELFOSABI_OPENVMS: int = 13
ELFOSABI_NSK: int = 14
ELFOSABI_AROS: int = 15
ELFOSABI_FENIXOS: int = 16
ELFOSABI_CLOUDABI: int = 17
ELFOSABI_OPENVOS: int = 18

_OSABI_NAMES: dict[int, str] = {
    ELFOSABI_NONE: "UNIX - System V",
    ELFOSABI_HPUX: "HP-UX",
    ELFOSABI_NETBSD: "NetBSD",
    ELFOSABI_GNU: "GNU/Linux",
    ELFOSABI_SOLARIS: "Solaris",
    ELFOSABI_AIX: "AIX",
    ELFOSABI_IRIX: "IRIX",
    ELFOSABI_FREEBSD: "FreeBSD",
    ELFOSABI_TRU64: "Tru64",
    ELFOSABI_MODESTO: "Novell Modesto",
    ELFOSABI_OPENBSD: "OpenBSD",
    ELFOSABI_OPENVMS: "OpenVMS",
    ELFOSABI_NSK: "HP Non-Stop Kernel",
    ELFOSABI_AROS: "AROS",
    ELFOSABI_FENIXOS: "FenixOS",
    ELFOSABI_CLOUDABI: "CloudABI",
    ELFOSABI_OPENVOS: "OpenVOS",
}


# ---------------------------------------------------------------------------
# File header
# ---------------------------------------------------------------------------

ET_NONE: int = 0
ET_REL: int = 1   # Relocatable
ET_EXEC: int = 2  # Executable
ET_DYN: int = 3   # Shared object / PIE
ET_CORE: int = 4  # Core dump
ET_LOPROC: int = 0xFF00
ET_HIPROC: int = 0xFFFF

_ET_NAMES: dict[int, str] = {
    ET_NONE: "NONE",
    ET_REL: "REL (Relocatable)",
    ET_EXEC: "EXEC (Executable)",
    ET_DYN: "DYN (Shared object)",
    ET_CORE: "CORE (Core dump)",
}

# Machine architectures
EM_NONE: int = 0
EM_M32: int = 1
EM_SPARC: int = 2
EM_386: int = 3
EM_68K: int = 4
EM_88K: int = 5
EM_860: int = 7
EM_MIPS: int = 8
EM_MIPS_RS3_LE: int = 10
EM_PARISC: int = 15
EM_SPARC32PLUS: int = 18
EM_PPC: int = 20
EM_PPC64: int = 21
EM_S390: int = 22
EM_ARM: int = 40
EM_ALPHA: int = 41
EM_SH: int = 42
EM_SPARCV9: int = 43
EM_IA_64: int = 50
EM_X86_64: int = 62
EM_AARCH64: int = 183
EM_RISCV: int = 243
EM_LOONGARCH: int = 258

_EM_NAMES: dict[int, str] = {
    EM_NONE: "None",
    EM_M32: "WE32100",
    EM_SPARC: "SPARC",
    EM_386: "x86",
    EM_68K: "MC68000",
    EM_88K: "MC88000",
    EM_860: "Intel 80860",
    EM_MIPS: "MIPS",
    EM_MIPS_RS3_LE: "MIPS RS3000 LE",
    EM_PARISC: "PA-RISC",
    EM_SPARC32PLUS: "SPARC32+",
    EM_PPC: "PowerPC",
    EM_PPC64: "PowerPC64",
    EM_S390: "S/390",
    EM_ARM: "ARM",
    EM_ALPHA: "Alpha",
    EM_SH: "SuperH",
    EM_SPARCV9: "SPARC v9",
    EM_IA_64: "IA-64",
    EM_X86_64: "x86_64",
    EM_AARCH64: "AArch64",
    EM_RISCV: "RISC-V",
    EM_LOONGARCH: "LoongArch",
}


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

# Special section indices
SHN_UNDEF: int = 0
SHN_LORESERVE: int = 0xFF00
SHN_LOPROC: int = 0xFF00
SHN_HIPROC: int = 0xFF1F
SHN_LOOS: int = 0xFF20
SHN_HIOS: int = 0xFF3F
SHN_ABS: int = 0xFFF1
SHN_COMMON: int = 0xFFF2
SHN_XINDEX: int = 0xFFFF

# Section header types
SHT_NULL: int = 0
SHT_PROGBITS: int = 1
SHT_SYMTAB: int = 2
SHT_STRTAB: int = 3
SHT_RELA: int = 4
SHT_HASH: int = 5
SHT_DYNAMIC: int = 6
SHT_NOTE: int = 7
SHT_NOBITS: int = 8
SHT_REL: int = 9
SHT_SHLIB: int = 10
SHT_DYNSYM: int = 11
SHT_INIT_ARRAY: int = 14
SHT_FINI_ARRAY: int = 15
SHT_PREINIT_ARRAY: int = 16
SHT_GROUP: int = 17
SHT_SYMTAB_SHNDX: int = 18
SHT_LOOS: int = 0x60000000
SHT_HIOS: int = 0x6FFFFFFF
SHT_LOPROC: int = 0x70000000
SHT_HIPROC: int = 0x7FFFFFFF
SHT_LOUSER: int = 0x80000000
SHT_HIUSER: int = 0xFFFFFFFF

_SHT_NAMES: dict[int, str] = {
    SHT_NULL: "NULL",
    SHT_PROGBITS: "PROGBITS",
    SHT_SYMTAB: "SYMTAB",
    SHT_STRTAB: "STRTAB",
    SHT_RELA: "RELA",
    SHT_HASH: "HASH",
    SHT_DYNAMIC: "DYNAMIC",
    SHT_NOTE: "NOTE",
    SHT_NOBITS: "NOBITS",
    SHT_REL: "REL",
    SHT_SHLIB: "SHLIB",
    SHT_DYNSYM: "DYNSYM",
    SHT_INIT_ARRAY: "INIT_ARRAY",
    SHT_FINI_ARRAY: "FINI_ARRAY",
    SHT_PREINIT_ARRAY: "PREINIT_ARRAY",
    SHT_GROUP: "GROUP",
    SHT_SYMTAB_SHNDX: "SYMTAB_SHNDX",
}

# Section header flags
SHF_WRITE: int = 0x1
SHF_ALLOC: int = 0x2
SHF_EXECINSTR: int = 0x4
SHF_MERGE: int = 0x10
SHF_STRINGS: int = 0x20
SHF_INFO_LINK: int = 0x40
SHF_LINK_ORDER: int = 0x80
SHF_OS_NONCONFORMING: int = 0x100
SHF_GROUP: int = 0x200
SHF_MASKOS: int = 0x0FF00000
SHF_MASKPROC: int = 0xF0000000

# Flag letters in readelf order
_SHF_LETTERS: list[tuple[int, str]] = [
    (SHF_WRITE, "W"),
    (SHF_ALLOC, "A"),
    (SHF_EXECINSTR, "X"),
    (SHF_MERGE, "M"),
    (SHF_STRINGS, "S"),
    (SHF_INFO_LINK, "I"),
    (SHF_LINK_ORDER, "L"),
    (SHF_OS_NONCONFORMING, "O"),
    (SHF_GROUP, "G"),
]

# Well-known section names
SECTION_BSS: str = ".bss"
SECTION_COMMENT: str = ".comment"
SECTION_DATA: str = ".data"
SECTION_DEBUG: str = ".debug"
SECTION_DEBUG_STR: str = ".debug_str"
SECTION_DYNAMIC: str = ".dynamic"
SECTION_DYNSTR: str = ".dynstr"
SECTION_DYNSYM: str = ".dynsym"
SECTION_INTERP: str = ".interp"
SECTION_SHSTRTAB: str = ".shstrtab"
SECTION_STRTAB: str = ".strtab"
SECTION_SYMTAB: str = ".symtab"
SECTION_TEXT: str = ".text"


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

# Symbol binding
STB_LOCAL: int = 0
STB_GLOBAL: int = 1
STB_WEAK: int = 2
STB_LOOS: int = 10
STB_HIOS: int = 12
STB_LOPROC: int = 13
STB_HIPROC: int = 15

_STB_NAMES: dict[int, str] = {
    STB_LOCAL: "LOCAL",
    STB_GLOBAL: "GLOBAL",
    STB_WEAK: "WEAK",
    STB_LOOS: "GNU_UNIQUE",
}

# Symbol types
STT_NOTYPE: int = 0
STT_OBJECT: int = 1
STT_FUNC: int = 2
STT_SECTION: int = 3
STT_FILE: int = 4
STT_COMMON: int = 5
STT_TLS: int = 6
STT_LOOS: int = 10
STT_HIOS: int = 12
STT_LOPROC: int = 13
STT_HIPROC: int = 15

_STT_NAMES: dict[int, str] = {
    STT_NOTYPE: "NOTYPE",
    STT_OBJECT: "OBJECT",
    STT_FUNC: "FUNC",
    STT_SECTION: "SECTION",
    STT_FILE: "FILE",
    STT_COMMON: "COMMON",
    STT_TLS: "TLS",
    STT_LOOS: "GNU_IFUNC",
}

# Symbol visibility
STV_DEFAULT: int = 0
STV_INTERNAL: int = 1
STV_HIDDEN: int = 2
STV_PROTECTED: int = 3

_STV_NAMES: dict[int, str] = {
    STV_DEFAULT: "DEFAULT",
    STV_INTERNAL: "INTERNAL",
    STV_HIDDEN: "HIDDEN",
    STV_PROTECTED: "PROTECTED",
}


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

NAME_TABLES: dict[str, dict[int, str]] = {
    "osabi": _OSABI_NAMES,
    "type": _ET_NAMES,
    "machine": _EM_NAMES,
    "section_type": _SHT_NAMES,
    "binding": _STB_NAMES,
    "symbol_type": _STT_NAMES,
    "visibility": _STV_NAMES,
}


def name_of(table: str, value: int) -> str:
    """Return the display name of *value* in the named table.

    Unknown values render as hexadecimal instead of failing, so corrupt
    or vendor-specific images can always be printed.
    """
    names = NAME_TABLES[table]
    if value in names:
        return names[value]
    if table == "section_type":
        if SHT_LOOS <= value <= SHT_HIOS:
            return f"LOOS+0x{value - SHT_LOOS:x}"
        if SHT_LOPROC <= value <= SHT_HIPROC:
            return f"LOPROC+0x{value - SHT_LOPROC:x}"
        if SHT_LOUSER <= value <= SHT_HIUSER:
            return f"LOUSER+0x{value - SHT_LOUSER:x}"
    return f"0x{value:x}"


def section_flags_str(flags: int) -> str:
    """Convert a section flags bitmask to readelf-style letters.

    Args:
        flags: Section header flags value (sh_flags).

    Returns:
        String like ``"WAX"`` for Write+Alloc+Exec, ``"-"`` when empty.
    """
    parts = [letter for bit, letter in _SHF_LETTERS if flags & bit]
    if flags & SHF_MASKOS:
        parts.append("o")
    if flags & SHF_MASKPROC:
        parts.append("p")
    return "".join(parts) if parts else "-"
