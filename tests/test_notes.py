"""Tests for note record enumeration."""

import struct

import pytest

from elf_factory import BUILD_ID
from elfscope import ElfImage
from elfscope.core.constants import SHT_NOTE, SHT_PROGBITS
from elfscope.errors import TypeMismatchError
from elfscope.parsers.notes import NoteTable


def _notes(factory, data):
    factory.add_section(".note", SHT_NOTE, data)
    image = ElfImage.from_bytes(factory.build())
    return list(NoteTable(image.section_by_name(".note")))


def _words(factory, *values):
    return struct.pack(factory.prefix + factory.word * len(values), *values)


def test_sample_notes(sample_image):
    notes = list(NoteTable(sample_image.section_by_name(".note.gnu")))
    assert [(n.name, n.type) for n in notes] == [("GNU", 3), ("Go", 4)]
    assert notes[0].raw_descriptor == BUILD_ID
    assert notes[1].descriptor == "1.0"
    assert notes[1].raw_descriptor == b"1.0\x00"


def test_records_realign_to_word_size(factory):
    # odd name and descriptor lengths force padding after each record
    data = factory.note(b"A\x00", b"xyz", 1) + factory.note(b"Linux\x00", b"\x01", 2)
    notes = _notes(factory, data)
    assert [(n.name, n.descriptor, n.type) for n in notes] == [
        ("A", "xyz", 1),
        ("Linux", "\x01", 2),
    ]


def test_zero_name_length_ends_stream(factory):
    data = (
        factory.note(b"GNU\x00", b"", 1)
        + _words(factory, 0, 0, 0)
        + factory.note(b"Hidden\x00", b"", 2)
    )
    assert [n.name for n in _notes(factory, data)] == ["GNU"]


def test_name_length_past_section_end(factory):
    data = factory.note(b"GNU\x00", b"", 1) + _words(factory, 0x1000, 0, 7)
    notes = _notes(factory, data)
    assert [n.name for n in notes] == ["GNU"]


def test_descriptor_past_section_end(factory):
    data = _words(factory, 4, 0x400, 1) + b"GNU\x00"
    assert _notes(factory, data) == []


def test_truncated_header(factory):
    # only the name length word is present
    assert _notes(factory, _words(factory, 1)) == []


def test_trailing_bytes_shorter_than_a_word(factory):
    data = factory.note(b"GNU\x00", b"", 1) + b"\x01\x02"
    assert [n.name for n in _notes(factory, data)] == ["GNU"]


def test_empty_section(factory):
    assert _notes(factory, b"") == []


def test_iteration_is_restartable(sample_image):
    table = NoteTable(sample_image.section_by_name(".note.gnu"))
    assert list(table) == list(table)


def test_note_tables_discovery(sample_image):
    assert [t.section.name for t in sample_image.note_tables()] == [".note.gnu"]


def test_type_mismatch(factory):
    factory.add_section(".data", SHT_PROGBITS, b"\x00" * 12)
    image = ElfImage.from_bytes(factory.build())
    with pytest.raises(TypeMismatchError):
        NoteTable(image.section_by_name(".data"))


def test_raw_descriptor_serialized_as_hex(sample_image):
    note = next(iter(NoteTable(sample_image.section_by_name(".note.gnu"))))
    assert note.model_dump(mode="json")["raw_descriptor"] == BUILD_ID.hex()
