"""Tests for identification and file header decoding."""

import pytest

from elf_factory import ElfFactory, build_sample
from elfscope import ElfImage
from elfscope.core.constants import (
    ELFCLASS32,
    ELFCLASS64,
    ELFDATA2LSB,
    ELFDATA2MSB,
    EM_386,
    EM_X86_64,
    ET_DYN,
    ET_REL,
)
from elfscope.errors import InvalidFormatError, RangeOverflowError, UnsupportedEncodingError
from elfscope.parsers.header import read_identification
from elfscope.parsers.loader import ByteSource


def test_identification(sample_image, layout):
    bits, endian = layout
    ident = sample_image.identification
    assert ident.is_valid
    assert ident.elf_class == (ELFCLASS64 if bits == 64 else ELFCLASS32)
    assert ident.data_encoding == (ELFDATA2LSB if endian == "little" else ELFDATA2MSB)
    assert ident.byte_order == endian
    assert ident.version == 1
    assert len(ident.padding) == 7
    assert sample_image.is_64bit is (bits == 64)
    assert sample_image.word_size == bits // 8
    assert sample_image.byte_order == endian


def test_header_fields(sample_image, layout):
    bits, _ = layout
    header = sample_image.header
    assert header.file_type == ET_REL
    assert header.machine == (EM_X86_64 if bits == 64 else EM_386)
    assert header.version == 1
    assert header.header_size == (64 if bits == 64 else 52)
    assert header.sh_entry_size == (64 if bits == 64 else 40)
    assert header.sh_count == 12
    assert header.sh_string_index == 11
    assert header.ph_count == 0


def test_entry_and_flags_keep_full_width(layout):
    bits, endian = layout
    entry = 0x0000_7FFF_0040_1000 if bits == 64 else 0x0804_8000
    image = ElfImage.from_bytes(
        ElfFactory(bits, endian).build(e_type=ET_DYN, entry=entry, flags=0x5000_0200)
    )
    assert image.header.file_type == ET_DYN
    assert image.header.entry == entry
    assert image.header.flags == 0x5000_0200


def test_decoding_is_deterministic(sample_bytes):
    first = ElfImage.from_bytes(sample_bytes)
    second = ElfImage.from_bytes(sample_bytes)
    assert first.identification == second.identification
    assert first.header == second.header
    assert [s.header for s in first.sections] == [s.header for s in second.sections]
    assert list(first.symbol_tables()) != []
    for left, right in zip(first.symbol_tables(), second.symbol_tables()):
        assert list(left) == list(right)


def test_identification_serializes_bytes_as_hex(sample_image):
    dumped = sample_image.identification.model_dump(mode="json")
    assert dumped["magic"] == "7f454c46"
    assert dumped["padding"] == "00" * 7


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_bad_magic(index):
    blob = bytearray(build_sample())
    blob[index] ^= 0xFF
    assert read_identification(ByteSource.from_bytes(blob)).is_valid is False
    with pytest.raises(InvalidFormatError):
        ElfImage.from_bytes(bytes(blob))


@pytest.mark.parametrize("blob", [b"", b"\x7fEL", b"\x7fELF\x02\x01"])
def test_too_short_for_identification(blob):
    with pytest.raises(InvalidFormatError):
        ElfImage.from_bytes(blob)


@pytest.mark.parametrize("encoding", [0, 3, 0xFF])
def test_unknown_data_encoding(encoding):
    with pytest.raises(UnsupportedEncodingError):
        ElfImage.from_bytes(ElfFactory().build(data_encoding=encoding))


def test_truncated_header():
    ident_only = build_sample()[:16]
    with pytest.raises(RangeOverflowError):
        ElfImage.from_bytes(ident_only)


def test_unknown_class_uses_32bit_layout():
    blob = bytearray(build_sample(32, "little"))
    blob[4] = 0
    image = ElfImage.from_bytes(bytes(blob))
    assert not image.is_64bit
    assert image.word_size == 4
    assert image.header.sh_count == 12
