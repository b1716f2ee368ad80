"""
ElfScope CLI -- ELF Image Inspector
====================================

Click-based command-line interface decoding one or more ELF images and
printing their header, sections, strings, symbols, relocations and notes.

Usage::

    # Inspect a single library
    elfscope /usr/lib/libz.so.1

    # Every shared object below a directory
    elfscope /usr/lib --pattern "*.so*" --recursive

    # Machine-readable output
    elfscope /usr/bin/ls --json
    elfscope /usr/bin/ls --output report.json

The exit status is 0 when every image decoded and 1 otherwise.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys

import click

from shared.config import ScopeConfig
from shared.console import ScopeConsole
from shared.logger import ScopeLogger

from elfscope import __version__
from elfscope.core.engine import ScopeEngine
from elfscope.output.console import ElfConsoleOutput
from elfscope.output.report import ElfReportGenerator


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command("elfscope")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "--pattern", "-p",
    default=None,
    help="Glob applied inside directories (default from config: '*').",
)
@click.option(
    "--recursive", "-r",
    is_flag=True,
    default=False,
    help="Descend into subdirectories.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the report as JSON to stdout.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this file.",
)
@click.option(
    "--limit", "-l",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum rows per table; 0 shows everything.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to an elfscope.toml configuration file.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(__version__, prog_name="elfscope")
def elfscope_cli(
    paths: tuple[str, ...],
    pattern: str | None,
    recursive: bool,
    json_output: bool,
    output_path: str | None,
    limit: int | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """ElfScope -- decode ELF images.

    PATHS are ELF files or directories to search for them.

    Examples:

    \b
        elfscope /bin/true
        elfscope build/ --pattern "*.o" --recursive --limit 0
        elfscope libfoo.so --output libfoo.json
    """
    console = ScopeConsole()

    try:
        config = ScopeConfig.load(config_path)
    except (OSError, ValueError) as exc:
        console.error(f"Cannot load configuration: {exc}")
        sys.exit(2)

    if pattern is not None:
        config.reader.file_pattern = pattern
    if recursive:
        config.reader.recursive = True
    if limit is not None:
        config.reader.display_limit = limit

    logger = ScopeLogger.from_config("cli", config, verbose=verbose)
    engine = ScopeEngine(config=config, logger=ScopeLogger("engine", configure=False))

    try:
        reports = engine.inspect_all(paths)
    except KeyboardInterrupt:
        console.warning("Inspection interrupted by user.")
        sys.exit(130)

    if not reports:
        logger.warning("No files matched %r", config.reader.file_pattern)
        if not json_output:
            console.warning(f"No files matched '{config.reader.file_pattern}'.")
        sys.exit(1)

    generator = ElfReportGenerator()
    failed = [report for report in reports if not report.ok]

    if json_output:
        click.echo(generator.render_json(reports))
    else:
        display = ElfConsoleOutput(console=console, limit=config.reader.display_limit)
        for report in reports:
            display.display(report)

        console.blank()
        console.info(f"Images: {len(reports)}  Decoded: {len(reports) - len(failed)}  Failed: {len(failed)}")

    if output_path:
        saved = generator.generate_json(reports, output_path)
        logger.info("JSON report saved to %s", saved)
        if not json_output:
            console.success(f"JSON report saved: {saved}")

    if failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for the ``elfscope`` console script."""
    elfscope_cli()


if __name__ == "__main__":
    main()
