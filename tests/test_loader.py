"""Tests for the byte source."""

import pytest

from elfscope.errors import ElfError, RangeOverflowError
from elfscope.parsers.loader import ByteSource


def test_read_struct_honours_endianness():
    source = ByteSource.from_bytes(b"\x01\x02\x03\x04")
    assert source.read_struct("I", 0) == (0x04030201,)
    source.endianness = "big"
    assert source.read_struct("I", 0) == (0x01020304,)
    assert source.read_struct("H", 2) == (0x0304,)


def test_unknown_endianness_is_rejected():
    source = ByteSource.from_bytes(b"\x00")
    with pytest.raises(ValueError):
        source.endianness = "middle"
    assert source.endianness == "little"


def test_read_bytes_and_size():
    source = ByteSource.from_bytes(b"abcdef")
    assert source.size == 6
    assert source.read_bytes(2, 3) == b"cde"
    assert source.read_bytes(6, 0) == b""


@pytest.mark.parametrize(
    ("offset", "length"),
    [(4, 4), (7, 1), (-1, 1), (0x1_0000_0000, 0), (0, 0x1_0000_0000)],
)
def test_out_of_range_reads_raise(offset, length):
    source = ByteSource.from_bytes(b"\x00" * 6)
    with pytest.raises(RangeOverflowError):
        source.read_bytes(offset, length)


def test_read_struct_past_end_raises():
    source = ByteSource.from_bytes(b"\x00\x00\x00")
    with pytest.raises(RangeOverflowError):
        source.read_struct("I", 0)


def test_read_cstring():
    source = ByteSource.from_bytes(b"abc\x00def")
    assert source.read_cstring(0) == "abc"
    assert source.read_cstring(1) == "bc"
    # no terminator: runs to the end of the image
    assert source.read_cstring(4) == "def"
    assert source.read_cstring(7) == ""


def test_closed_source_refuses_reads():
    source = ByteSource.from_bytes(b"abcd")
    source.close()
    assert source.closed
    with pytest.raises(ElfError):
        source.read_bytes(0, 1)


@pytest.mark.parametrize("use_mmap", [True, False])
def test_from_path(tmp_path, use_mmap):
    path = tmp_path / "blob.bin"
    path.write_bytes(b"\x10\x20\x30\x40")
    with ByteSource.from_path(path, use_mmap=use_mmap) as source:
        assert source.name == str(path)
        assert source.size == 4
        assert source.read_struct("I", 0) == (0x40302010,)
    assert source.closed


def test_from_path_empty_file(tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    with ByteSource.from_path(path) as source:
        assert source.size == 0
        with pytest.raises(RangeOverflowError):
            source.read_bytes(0, 1)


def test_from_path_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ByteSource.from_path(tmp_path / "missing")
