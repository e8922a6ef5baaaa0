"""Pytest configuration and fixtures."""

import io
import logging
import sys

import pytest

from prettytest import BDDFormatter, ErrorLog, Suite, TDDFormatter


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up prettytest loggers after each test to prevent handler leaks."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("prettytest")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


class ProbeSuite(Suite):
    """Suite without registered tests, bound by hand in unit tests."""


@pytest.fixture
def bound_suite():
    """A suite bound to a fresh TestFunc and error log."""
    suite = ProbeSuite()
    error_log = ErrorLog()
    test_func = suite.lookup("test_probe")
    suite.bind(test_func, error_log)
    return suite, test_func, error_log


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def tdd(output):
    return TDDFormatter(out=output, color=False)


@pytest.fixture
def bdd(output):
    return BDDFormatter(description="Stacks", out=output, color=False)


@pytest.fixture
def drop_modules():
    """Forget modules imported from temporary suite files."""
    names: list[str] = []
    saved_path = list(sys.path)
    yield names
    for name in names:
        sys.modules.pop(name, None)
    sys.path[:] = saved_path
