"""
ElfScope Inspection Engine
===========================

Turns filesystem paths into :class:`~elfscope.core.models.ImageReport`
records.  The engine is the only place that knows about files on disk,
size limits, and directory walking; everything below it works on an
:class:`~elfscope.core.image.ElfImage`.

Inspection Pipeline:
    1. Enumerate candidate files (directories walked with the configured
       glob pattern, optionally recursively)
    2. Skip files above the configured size limit
    3. Open the image (memory-mapped unless disabled)
    4. Decode identification, header and section table
    5. Decode every string, symbol, relocation and note table
    6. Decode ``.debug_str`` when present

A decoding failure is recorded on the report of the file that caused it;
the remaining files are still inspected.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from shared.config import ScopeConfig
from shared.logger import ScopeLogger

from elfscope.core.image import ElfImage
from elfscope.core.models import (
    ImageReport,
    NoteTableReport,
    RelocationAddendTableReport,
    RelocationTableReport,
    SectionSummary,
    StringTableReport,
    SymbolTableReport,
)
from elfscope.errors import ElfError
from elfscope.parsers.sections import Section


def _label(section: Section) -> str:
    """Section name, or its bracketed index when it has none."""
    return section.name or f"[{section.index}]"


class ScopeEngine:
    """Decode ELF files into reports.

    Usage::

        engine = ScopeEngine()
        for path in engine.discover(["/usr/lib"]):
            report = engine.inspect(path)
            print(report.path, len(report.sections))

    Args:
        config: ElfScope configuration.  Defaults are used if not provided.
        logger: Logger instance.  Defaults to an ``engine`` logger that
                uses whatever handlers are already installed.
    """

    def __init__(
        self,
        config: ScopeConfig | None = None,
        logger: ScopeLogger | None = None,
    ) -> None:
        self._config: ScopeConfig = config or ScopeConfig()
        self._logger: ScopeLogger = logger or ScopeLogger("engine", configure=False)

    @property
    def config(self) -> ScopeConfig:
        return self._config

    # ------------------------------------------------------------------ #
    #  File discovery
    # ------------------------------------------------------------------ #

    def discover(self, paths: Iterable[str | Path]) -> Iterator[Path]:
        """Yield the files to inspect for *paths*.

        Files are yielded as given.  Directories are expanded with
        ``reader.file_pattern``, descending into subdirectories when
        ``reader.recursive`` is set; their matches are sorted.
        """
        reader = self._config.reader
        for raw in paths:
            path = Path(raw)
            if not path.is_dir():
                yield path
                continue
            matches = path.rglob(reader.file_pattern) if reader.recursive \
                else path.glob(reader.file_pattern)
            found = sorted(match for match in matches if match.is_file())
            self._logger.debug(
                "Found %d file(s) matching %r in %s", len(found), reader.file_pattern, path
            )
            yield from found

    # ------------------------------------------------------------------ #
    #  Inspection
    # ------------------------------------------------------------------ #

    def inspect(self, path: str | Path) -> ImageReport:
        """Decode one file into an :class:`ImageReport`.

        Never raises for decoding or I/O failures; the report's ``error``
        field carries the message instead.
        """
        file_path = Path(path)
        report = ImageReport(path=str(file_path))

        with self._logger.image(str(file_path)):
            try:
                report.size = file_path.stat().st_size
            except OSError as exc:
                report.error = f"Cannot stat file: {exc}"
                self._logger.error(report.error)
                return report

            max_size = self._config.reader.max_file_size
            if report.size > max_size:
                report.error = (
                    f"File too large: {report.size:,} bytes (max: {max_size:,} bytes)"
                )
                self._logger.warning(report.error)
                return report

            with self._logger.timed(f"inspect {file_path.name}"):
                try:
                    with ElfImage.from_path(
                        file_path, use_mmap=self._config.reader.use_mmap
                    ) as image:
                        self._collect(image, report)
                except ElfError as exc:
                    report.error = f"{type(exc).__name__}: {exc}"
                    self._logger.error("Decoding failed: %s", exc)
                except OSError as exc:
                    report.error = f"Cannot read file: {exc}"
                    self._logger.error(report.error)

            if report.ok:
                self._logger.info(
                    "Decoded %d sections, %d symbols",
                    len(report.sections),
                    sum(len(table.symbols) for table in report.symbol_tables),
                )
        return report

    def inspect_all(self, paths: Iterable[str | Path]) -> list[ImageReport]:
        """Inspect every file :meth:`discover` yields for *paths*."""
        return [self.inspect(path) for path in self.discover(paths)]

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _collect(image: ElfImage, report: ImageReport) -> None:
        report.identification = image.identification
        report.header = image.header

        report.sections = [
            SectionSummary(
                index=section.index,
                name=section.name,
                type=section.type_name,
                flags=section.flags_str,
                header=section.header,
            )
            for section in image.sections
        ]

        report.string_tables = [
            StringTableReport(section=_label(table.section), entries=list(table))
            for table in image.string_tables()
        ]
        report.symbol_tables = [
            SymbolTableReport(section=_label(table.section), symbols=list(table))
            for table in image.symbol_tables()
        ]
        report.relocation_tables = [
            RelocationTableReport(section=_label(table.section), entries=list(table))
            for table in image.relocation_tables()
        ]
        report.relocation_addend_tables = [
            RelocationAddendTableReport(section=_label(table.section), entries=list(table))
            for table in image.relocation_addend_tables()
        ]
        report.note_tables = [
            NoteTableReport(section=_label(table.section), notes=list(table))
            for table in image.note_tables()
        ]

        debug_strings = image.debug_strings()
        if debug_strings is not None:
            report.debug_strings = list(debug_strings)
