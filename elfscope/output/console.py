"""
ElfScope Console Output
========================

Rich terminal display of :class:`~elfscope.core.models.ImageReport`
records, laid out the way ``readelf`` groups its output: file header,
section headers, then one table per string, symbol, relocation and note
section.

Long tables are cut at a configurable row limit with a caption stating
how many rows were shown.
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.markup import escape

from shared.console import ScopeConsole

from elfscope.core.constants import name_of
from elfscope.core.models import (
    Header,
    Identification,
    ImageReport,
    NoteTableReport,
    SectionSummary,
    StringEntry,
    SymbolTableReport,
)


def _hex(value: int) -> str:
    return f"0x{value:x}"


def _limited(rows: Sequence[Any], limit: int) -> tuple[Sequence[Any], str | None]:
    """Cut *rows* to *limit* entries; return them with a caption if cut."""
    if limit <= 0 or len(rows) <= limit:
        return rows, None
    return rows[:limit], f"showing {limit} of {len(rows)} entries"


class ElfConsoleOutput:
    """Rich terminal display for image reports.

    Usage::

        output = ElfConsoleOutput(limit=20)
        output.display(report)

    Args:
        console: Optional ScopeConsole instance.  A new one is created if
                 not provided.
        limit:   Maximum rows per table; ``0`` shows everything.
    """

    def __init__(self, console: ScopeConsole | None = None, *, limit: int = 50) -> None:
        self._console: ScopeConsole = console or ScopeConsole()
        self._limit = limit

    def display(self, report: ImageReport) -> None:
        """Render every part of *report* that has content."""
        self._console.section(escape(report.path))

        if not report.ok:
            self._console.error(escape(report.error))
            return

        if report.identification is not None and report.header is not None:
            self.display_header(report.identification, report.header, report.size)

        if report.sections:
            self.display_sections(report.sections)

        for table in report.string_tables:
            self.display_strings(f"String table {table.section}", table.entries)

        for symbols in report.symbol_tables:
            self.display_symbols(symbols)

        for relocations in report.relocation_tables:
            self._table(
                f"Relocations {relocations.section}",
                ["#", "Offset", "Info"],
                [
                    (i, _hex(entry.offset), _hex(entry.info))
                    for i, entry in enumerate(relocations.entries)
                ],
                justify=["right", "right", "right"],
            )

        for relocations in report.relocation_addend_tables:
            self._table(
                f"Relocations {relocations.section}",
                ["#", "Offset", "Info", "Addend"],
                [
                    (i, _hex(entry.offset), _hex(entry.info), entry.addend)
                    for i, entry in enumerate(relocations.entries)
                ],
                justify=["right", "right", "right", "right"],
            )

        for notes in report.note_tables:
            self.display_notes(notes)

        if report.debug_strings:
            self.display_strings(".debug_str", report.debug_strings)

        self._console.divider()

    def display_header(self, ident: Identification, header: Header, size: int) -> None:
        self._console.panel(
            "ELF Header",
            [
                ("Size", f"{size:,} bytes"),
                ("Class", "ELF64" if ident.is_64bit else "ELF32"),
                ("Data", f"{ident.byte_order or 'unknown'} endian"),
                ("OS/ABI", name_of("osabi", ident.os_abi)),
                ("ABI Version", ident.abi_version),
                ("Type", name_of("type", header.file_type)),
                ("Machine", name_of("machine", header.machine)),
                ("Entry point", _hex(header.entry)),
                ("Flags", _hex(header.flags)),
                ("Section headers", f"{header.sh_count} at {_hex(header.sh_offset)}"),
                ("Program headers", f"{header.ph_count} at {_hex(header.ph_offset)}"),
                ("Name table index", header.sh_string_index),
            ],
        )
        self._console.blank()

    def display_sections(self, sections: Sequence[SectionSummary]) -> None:
        self._table(
            "Section Headers",
            ["#", "Name", "Type", "Address", "Offset", "Size", "EntSize", "Flags", "Link", "Info", "Align"],
            [
                (
                    s.index,
                    s.name,
                    s.type,
                    _hex(s.header.address),
                    _hex(s.header.offset),
                    _hex(s.header.size),
                    _hex(s.header.entry_size),
                    s.flags,
                    s.header.link,
                    s.header.info,
                    s.header.alignment,
                )
                for s in sections
            ],
            justify=["right", "left", "left", "right", "right", "right", "right", "left", "right", "right", "right"],
        )

    def display_strings(self, title: str, entries: Sequence[StringEntry]) -> None:
        self._table(
            title,
            ["Offset", "String"],
            [(_hex(entry.offset), entry.value) for entry in entries],
            justify=["right", "left"],
        )

    def display_symbols(self, table: SymbolTableReport) -> None:
        self._table(
            f"Symbol table {table.section}",
            ["#", "Value", "Size", "Type", "Bind", "Vis", "Ndx", "Name"],
            [
                (
                    i,
                    _hex(sym.value),
                    sym.size,
                    name_of("symbol_type", sym.type),
                    name_of("binding", sym.binding),
                    name_of("visibility", sym.visibility),
                    sym.section_index,
                    sym.name,
                )
                for i, sym in enumerate(table.symbols)
            ],
            justify=["right", "right", "right", "left", "left", "left", "right", "left"],
        )

    def display_notes(self, table: NoteTableReport) -> None:
        self._table(
            f"Notes {table.section}",
            ["Owner", "Type", "Data size", "Description"],
            [
                (note.name, _hex(note.type), len(note.raw_descriptor), note.raw_descriptor.hex())
                for note in table.notes
            ],
            justify=["left", "right", "right", "left"],
        )

    def _table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Any],
        *,
        justify: Sequence[str],
    ) -> None:
        # Cell text comes from the image and may contain markup brackets
        rows = [tuple(escape(str(cell)) for cell in row) for row in rows]
        shown, caption = _limited(rows, self._limit)
        self._console.table(escape(title), columns, shown, caption=caption, justify=justify)
        self._console.blank()
