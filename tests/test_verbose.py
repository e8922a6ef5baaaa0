"""Tests for verbose logging."""

import logging
from pathlib import Path

from prettytest.verbose import setup_logger


def test_logger_creates_debug_log(tmp_path: Path):
    """Logger should create the debug file when one is given."""
    debug_file = tmp_path / "debug.log"
    logger = setup_logger(debug_file=debug_file, verbose=False)

    assert not logger.disabled
    assert logger.level == logging.DEBUG
    assert debug_file.exists()


def test_logger_writes_to_file(tmp_path: Path):
    debug_file = tmp_path / "debug.log"
    logger = setup_logger(debug_file=debug_file, verbose=False)

    logger.debug("test message")

    content = debug_file.read_text()
    assert "test message" in content
    assert "[" in content  # timestamp


def test_verbose_mode_adds_stderr_handler(tmp_path: Path):
    logger = setup_logger(debug_file=tmp_path / "debug.log", verbose=True)

    handler_types = [type(h).__name__ for h in logger.handlers]
    assert sorted(handler_types) == ["FileHandler", "StreamHandler"]


def test_silent_without_file_or_verbose():
    logger = setup_logger()
    assert [type(h).__name__ for h in logger.handlers] == ["NullHandler"]
    assert logger.propagate is False


def test_logger_creates_parent_directories(tmp_path: Path):
    debug_file = tmp_path / "nested" / "dir" / "debug.log"
    setup_logger(debug_file=debug_file, verbose=False)

    assert debug_file.exists()


def test_setup_twice_replaces_handlers(tmp_path: Path):
    """Reconfiguring a logger must not leak the previous run's handlers."""
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"

    setup_logger(first, logger_name="prettytest_repeat")
    logger = setup_logger(second, logger_name="prettytest_repeat")
    logger.debug("only in second")

    assert len(logger.handlers) == 1
    assert "only in second" not in first.read_text()
    assert "only in second" in second.read_text()


def test_unique_logger_names_are_isolated(tmp_path: Path):
    log1 = tmp_path / "one.log"
    log2 = tmp_path / "two.log"
    logger1 = setup_logger(log1, logger_name="prettytest_one")
    logger2 = setup_logger(log2, logger_name="prettytest_two")

    logger1.debug("from one")
    logger2.debug("from two")

    assert "from two" not in log1.read_text()
    assert "from one" not in log2.read_text()
