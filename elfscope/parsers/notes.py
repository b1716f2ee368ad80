"""
Note Table View
================

Walks the length-prefixed record stream of an ``SHT_NOTE`` section::

    namesz | descsz | type | name[namesz] | desc[descsz] | padding

The three header fields are native-width words (4 bytes for ELF32, 8 for
ELF64) and each record is padded to the next word boundary after its
descriptor.  A zero ``namesz`` ends the stream.  Records that would run
past the section end stop the walk without raising: producers in the
wild emit truncated trailing notes.
"""

from __future__ import annotations

import logging
from typing import Iterator

from elfscope.core.constants import SHT_NOTE
from elfscope.core.models import NoteEntry
from elfscope.parsers.sections import Section
from elfscope.parsers.strings import require_type

logger = logging.getLogger("elfscope.notes")


def _c_string(raw: bytes) -> str:
    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    return raw.decode("ascii", errors="replace")


class NoteTable:
    """Sequence of :class:`~elfscope.core.models.NoteEntry` records.

    Raises:
        TypeMismatchError: If the section is not ``SHT_NOTE``.
    """

    def __init__(self, section: Section) -> None:
        require_type(section, SHT_NOTE)
        self._section = section
        # sections only hold a weak reference; the view pins the image
        self._image = section.image

    @property
    def section(self) -> Section:
        return self._section

    def __iter__(self) -> Iterator[NoteEntry]:
        image = self._section.image
        source = image.source
        word_size = image.word_size
        word = "Q" if word_size == 8 else "I"

        cursor = self._section.offset
        end = cursor + self._section.size

        while cursor + word_size <= end:
            (namesz,) = source.read_struct(word, cursor)
            cursor += word_size
            if namesz == 0:
                break
            if cursor + namesz > end:
                logger.debug(
                    "Note name length %d overruns section [%d]; stopping",
                    namesz, self._section.index,
                )
                break
            if cursor + 2 * word_size > end:
                logger.debug("Truncated note header in section [%d]", self._section.index)
                break

            (descsz,) = source.read_struct(word, cursor)
            cursor += word_size
            (note_type,) = source.read_struct(word, cursor)
            cursor += word_size

            if cursor + namesz + descsz > end:
                logger.debug(
                    "Note payload (%d+%d bytes) overruns section [%d]; stopping",
                    namesz, descsz, self._section.index,
                )
                break

            name = source.read_bytes(cursor, namesz)
            cursor += namesz
            descriptor = source.read_bytes(cursor, descsz)
            cursor += descsz

            remainder = cursor % word_size
            if remainder:
                cursor += word_size - remainder

            yield NoteEntry(
                type=note_type,
                name=_c_string(name),
                descriptor=_c_string(descriptor),
                raw_descriptor=descriptor,
            )

    def __repr__(self) -> str:
        return f"NoteTable(section={self._section.index})"
