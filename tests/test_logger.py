"""Tests for the structured logger."""

import json
import logging

import pytest

from shared.config import ScopeConfig
from shared.logger import ScopeLogger

from elfscope.core.engine import ScopeEngine


@pytest.fixture(autouse=True)
def _reset_handlers():
    yield
    root = logging.getLogger("elfscope")
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


def test_json_lines_carry_component_and_image(tmp_path):
    log_file = tmp_path / "logs" / "elfscope.log"
    log = ScopeLogger("engine", log_file=log_file, json_logs=True, console_output=False)
    with log.image("/lib/libz.so"):
        log.info("Decoded %d sections", 27, machine="x86_64")
    log.warning("outside")

    first, second = (json.loads(line) for line in log_file.read_text().splitlines())
    assert first["message"] == "Decoded 27 sections"
    assert first["level"] == "INFO"
    assert first["logger"] == "elfscope.engine"
    assert first["component"] == "engine"
    assert first["image"] == "/lib/libz.so"
    assert first["context"] == {"machine": "x86_64"}
    assert "image" not in second


def test_library_loggers_share_handlers(tmp_path):
    log_file = tmp_path / "plain.log"
    ScopeLogger("cli", log_file=log_file, console_output=False)
    logging.getLogger("elfscope.loader").warning("mapped nothing")
    assert "mapped nothing" in log_file.read_text()
    assert "elfscope.loader" in log_file.read_text()


def test_level_filters_records(tmp_path):
    log_file = tmp_path / "filtered.log"
    log = ScopeLogger("cli", log_level="WARNING", log_file=log_file, console_output=False)
    log.info("hidden")
    log.error("shown")
    text = log_file.read_text()
    assert "hidden" not in text
    assert "shown" in text


def test_from_config_verbose_forces_debug():
    log = ScopeLogger.from_config("cli", ScopeConfig(), verbose=True)
    assert log.component == "cli"
    assert logging.getLogger("elfscope").level == logging.DEBUG


def test_timed_reports_elapsed():
    log = ScopeLogger("engine", console_output=False)
    with log.timed("work") as timer:
        pass
    assert timer.elapsed >= 0.0


def test_reconfiguring_closes_replaced_file_handler(tmp_path):
    log_file = tmp_path / "a.log"
    ScopeLogger("cli", log_file=log_file, console_output=False)
    (first,) = logging.getLogger("elfscope").handlers
    ScopeLogger("engine", log_file=log_file, console_output=False)
    assert first not in logging.getLogger("elfscope").handlers
    assert first.stream is None or first.stream.closed


def test_bound_logger_keeps_installed_handlers(tmp_path):
    log_file = tmp_path / "shared.log"
    ScopeLogger("cli", log_file=log_file, console_output=False)
    installed = list(logging.getLogger("elfscope").handlers)

    engine_log = ScopeLogger("engine", configure=False)
    engine_log.warning("from the engine")

    assert logging.getLogger("elfscope").handlers == installed
    assert "from the engine" in log_file.read_text()


def test_default_engine_does_not_strip_handlers(tmp_path):
    log_file = tmp_path / "cli.log"
    ScopeLogger("cli", log_file=log_file, console_output=False)
    installed = list(logging.getLogger("elfscope").handlers)
    ScopeEngine()
    assert logging.getLogger("elfscope").handlers == installed
