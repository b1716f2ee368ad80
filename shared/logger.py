"""
ElfScope Structured Logger
===========================

Provides :class:`ScopeLogger`, a logging facade that emits human-friendly
Rich console output on stderr and, optionally, plain or JSON-lines logs
to a rotating file.

Library modules log through ``logging.getLogger("elfscope.<module>")``;
a :class:`ScopeLogger` bound to a component (``"cli"``, ``"engine"``)
attaches its handlers to the ``elfscope`` root so those records are
rendered the same way.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

if TYPE_CHECKING:
    from shared.config import ScopeConfig

_ROOT_LOGGER = "elfscope"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)


# ========================== JSON Formatter =================================


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "INFO",
          "logger": "elfscope.engine",
          "message": "...",
          "component": "engine",
          "image": "/usr/lib/libz.so.1",
          "context": { ... },
          "exc_info": "..."
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("component", "image"):
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        context = getattr(record, "scope_context", None)
        if context is not None:
            entry["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ========================== Rich Console Handler ===========================


class _ConsoleHandler(RichHandler):
    """:class:`rich.logging.RichHandler` writing to stderr with the ElfScope theme."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(
            console=Console(theme=_LOG_THEME, stderr=True),
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


# ========================== ScopeLogger ====================================


class ScopeLogger:
    """Structured, context-aware logger for ElfScope components.

    Each instance is bound to a *component* and can carry the image
    currently being decoded via :meth:`image`.

    Usage::

        log = ScopeLogger("engine", log_file="elfscope.log", json_logs=True)
        with log.image("/usr/lib/libz.so.1"):
            log.info("Decoded %d sections", 27)

    Args:
        component:      Component name; the logger is ``elfscope.<component>``.
        log_level:      Minimum severity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file:       Rotating log file path; ``None`` or ``""`` disables it.
        json_logs:      Emit JSON lines to the log file.
        max_bytes:      Maximum log-file size before rotation (default 10 MiB).
        backup_count:   Number of rotated backup files to keep.
        console_output: Attach a Rich console handler on stderr.
        configure:      Install the handlers on the ``elfscope`` root,
                        closing any installed before.  With ``False`` the
                        logger only binds *component* and the handler
                        options are ignored.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
        configure: bool = True,
    ) -> None:
        self._component = component
        self._image: str | None = None
        self._logger = logging.getLogger(f"{_ROOT_LOGGER}.{component}")
        if not configure:
            return

        level = getattr(logging, log_level.upper(), logging.INFO)

        # Handlers live on the package root so library loggers share them
        root = logging.getLogger(_ROOT_LOGGER)
        root.setLevel(level)
        root.propagate = False
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

        if console_output:
            root.addHandler(_ConsoleHandler(level=level))

        if log_file:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(level)
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    logging.Formatter(
                        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            root.addHandler(fh)

    @classmethod
    def from_config(
        cls,
        component: str,
        config: ScopeConfig,
        *,
        verbose: bool = False,
    ) -> ScopeLogger:
        """Build a logger from the ``[global]`` configuration section."""
        settings = config.global_settings
        level = "DEBUG" if verbose or settings.debug else settings.log_level
        return cls(
            component,
            log_level=level,
            log_file=settings.log_file or None,
            json_logs=settings.log_json,
        )

    # ------------------------------------------------------------------ #
    #  Context management -- current image
    # ------------------------------------------------------------------ #

    class _ImageContext:
        """Context manager that temporarily binds the image path."""

        def __init__(self, parent: ScopeLogger, image: str) -> None:
            self._parent = parent
            self._image = image
            self._prev: str | None = None

        def __enter__(self) -> ScopeLogger:
            self._prev = self._parent._image
            self._parent._image = self._image
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._image = self._prev

    def image(self, path: str) -> _ImageContext:
        """Return a context manager that tags every record with *path*."""
        return self._ImageContext(self, path)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Move non-standard keyword arguments into the record's *extra*."""
        extra = kwargs.pop("extra", {}) or {}

        context: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                context[key] = kwargs.pop(key)

        extra["component"] = self._component
        extra["image"] = self._image
        if context:
            extra["scope_context"] = context

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Context manager for measuring and logging elapsed time."""

        def __init__(self, logger_inst: ScopeLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> ScopeLogger._TimingContext:
            self._start = time.perf_counter()
            self._logger.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.debug("Completed: %s (%.3f sec)", self._label, self.elapsed)

        @property
        def elapsed(self) -> float:
            """Seconds elapsed since entering the context."""
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start / finish and elapsed time."""
        return self._TimingContext(self, label)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def component(self) -> str:
        return self._component
