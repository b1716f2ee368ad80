"""
ElfScope Console Interface
===========================

Rich-powered console abstraction used by the ElfScope command line.

The class wraps :class:`rich.console.Console` and adds helpers for section
rules, severity-coloured messages, key/value panels and tables drawn
with one palette.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------
_SCOPE_THEME = Theme(
    {
        "scope.section": "bold bright_magenta",
        "scope.success": "bold green",
        "scope.warning": "bold yellow",
        "scope.error": "bold red",
        "scope.info": "bold bright_blue",
        "scope.dim": "dim white",
        "scope.key": "bold bright_white",
    }
)

_BORDER = "bright_cyan"
_HEADER = "bold bright_magenta"


class ScopeConsole:
    """Styled console front end for ElfScope output.

    Usage::

        con = ScopeConsole()
        con.section("Sections")
        con.table("Symbols", ["Name", "Value"], rows)
        con.success("3 images decoded")

    Args:
        quiet:  Suppress all output.
        record: Keep a record of the output for :meth:`export_text`.
        width:  Force a terminal width (``None`` detects it).
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        width: int | None = None,
    ) -> None:
        self._console = Console(
            theme=_SCOPE_THEME,
            quiet=quiet,
            record=record,
            width=width,
            highlight=False,
        )

    # ------------------------------------------------------------------ #
    #  Structure
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a section rule titled *title*."""
        self._console.rule(f"  {title}  ", style="scope.section", characters="─")
        self._console.print()

    def panel(self, title: str, fields: Sequence[tuple[str, Any]]) -> None:
        """Render aligned ``key: value`` pairs inside a bordered panel."""
        width = max((len(key) for key, _ in fields), default=0)
        body = "\n".join(
            f"[scope.key]{key + ':':<{width + 1}}[/scope.key] {value}"
            for key, value in fields
        )
        self._console.print(
            Panel(body, title=f"[bold {_BORDER}]{title}[/bold {_BORDER}]",
                  border_style=_BORDER, padding=(0, 2))
        )

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(f"[scope.success][✔] {message}[/scope.success]")

    def warning(self, message: str) -> None:
        self._console.print(f"[scope.warning][⚠] WARNING:[/scope.warning] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[scope.error][✘] ERROR:[/scope.error] {message}")

    def info(self, message: str) -> None:
        self._console.print(f"[scope.info][ℹ][/scope.info] {message}")

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        justify: Sequence[str] | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row tuples; each cell is stringified.
            caption:  Optional footer caption.
            justify:  Optional per-column justification
                      (``"left"``, ``"right"``, ``"center"``).
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style=_BORDER,
            header_style=_HEADER,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            align = justify[idx] if justify and idx < len(justify) else "left"
            tbl.add_column(col_name, style=style, justify=align)  # type: ignore[arg-type]

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._console.print()

    def divider(self, style: str = "dim") -> None:
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Return recorded output as plain text (requires ``record=True``)."""
        return self._console.export_text()
