"""
Byte Source
============

Endianness-aware primitive reader over an ELF image.  The decoders never
touch the underlying buffer directly; they ask the byte source for
fixed-shape structures, raw byte ranges, and NUL-terminated strings at a
file offset.

Two backings are supported:
    - an in-memory ``bytes`` buffer (:meth:`ByteSource.from_bytes`)
    - a read-only memory map of a file (:meth:`ByteSource.from_path`)

Offsets and lengths are limited to unsigned 32 bits and to the image
bounds; anything else raises :class:`~elfscope.errors.RangeOverflowError`.
"""

from __future__ import annotations

import logging
import mmap
import struct
from functools import lru_cache
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from elfscope.errors import ElfError, RangeOverflowError

logger = logging.getLogger("elfscope.loader")

_MAX_OFFSET: int = 0xFFFFFFFF

_BYTE_ORDER_PREFIX: dict[str, str] = {
    "little": "<",
    "big": ">",
}


@lru_cache(maxsize=64)
def _compiled(fmt: str) -> struct.Struct:
    return struct.Struct(fmt)


class ByteSource:
    """Read-only, offset-addressed view of an ELF image.

    Usage::

        with ByteSource.from_path("/usr/lib/libc.so.6") as source:
            source.endianness = "little"
            e_type, e_machine = source.read_struct("HH", 16)

    Args:
        buffer: Any object supporting the buffer protocol.
        handle: Open file object backing *buffer*, closed together with it.
        name:   Label used in log and error messages.
    """

    def __init__(
        self,
        buffer: Union[bytes, bytearray, memoryview, mmap.mmap],
        *,
        handle: Optional[BinaryIO] = None,
        name: str = "<memory>",
    ) -> None:
        self._buffer: Any = buffer
        self._handle = handle
        self._name = name
        self._size = len(buffer)
        self._endianness = "little"

    # ------------------------------------------------------------------ #
    #  Construction helpers
    # ------------------------------------------------------------------ #

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview]) -> ByteSource:
        """Wrap an in-memory image."""
        return cls(bytes(data))

    @classmethod
    def from_path(cls, path: Union[str, Path], *, use_mmap: bool = True) -> ByteSource:
        """Open a file-backed image.

        Args:
            path: Filesystem path to the image.
            use_mmap: Map the file instead of reading it into memory.
                      Empty files are always read, as they cannot be mapped.
        """
        file_path = Path(path)
        if not use_mmap or file_path.stat().st_size == 0:
            return cls(file_path.read_bytes(), name=str(file_path))

        fh = open(file_path, "rb")
        try:
            mapped = mmap.mmap(fh.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError):
            fh.close()
            raise
        logger.debug("Mapped %s (%d bytes)", file_path, len(mapped))
        return cls(mapped, handle=fh, name=str(file_path))

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        """Image size in bytes."""
        return self._size

    @property
    def closed(self) -> bool:
        return self._buffer is None

    @property
    def endianness(self) -> str:
        """Byte order applied to multi-byte reads: ``"little"`` or ``"big"``."""
        return self._endianness

    @endianness.setter
    def endianness(self, value: str) -> None:
        if value not in _BYTE_ORDER_PREFIX:
            raise ValueError(f"Unknown byte order: {value!r}")
        self._endianness = value

    # ------------------------------------------------------------------ #
    #  Reads
    # ------------------------------------------------------------------ #

    def read_struct(self, shape: str, offset: int) -> tuple[Any, ...]:
        """Decode a fixed-size structure at *offset*.

        Args:
            shape: :mod:`struct` format characters without a byte-order
                   prefix; the configured endianness is applied.
            offset: File offset of the first byte.

        Returns:
            Tuple of decoded field values.
        """
        packer = _compiled(_BYTE_ORDER_PREFIX[self._endianness] + shape)
        self._check_range(offset, packer.size)
        return packer.unpack_from(self._buffer, offset)

    def read_bytes(self, offset: int, length: int) -> bytes:
        """Return *length* raw bytes starting at *offset*."""
        self._check_range(offset, length)
        return bytes(self._buffer[offset:offset + length])

    def read_cstring(self, offset: int, encoding: str = "ascii") -> str:
        """Read a NUL-terminated string starting at *offset*.

        A string running to the end of the image without a terminator is
        returned as-is.
        """
        self._check_range(offset, 0)
        end = self._buffer.find(b"\x00", offset)
        if end == -1:
            end = self._size
        return bytes(self._buffer[offset:end]).decode(encoding, errors="replace")

    # ------------------------------------------------------------------ #
    #  Lifetime
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Release the buffer and any backing file handle."""
        if isinstance(self._buffer, mmap.mmap):
            self._buffer.close()
        self._buffer = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> ByteSource:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    def _check_range(self, offset: int, length: int) -> None:
        if self._buffer is None:
            raise ElfError(f"Byte source is closed: {self._name}")
        if offset < 0 or length < 0 or offset > _MAX_OFFSET or length > _MAX_OFFSET:
            raise RangeOverflowError(
                f"Range 0x{offset:x}+0x{length:x} is not addressable"
            )
        if offset + length > self._size:
            raise RangeOverflowError(
                f"Range 0x{offset:x}+0x{length:x} exceeds image size "
                f"0x{self._size:x} ({self._name})"
            )
