"""Errors raised by the harness itself, as opposed to recorded test failures."""


class HarnessError(Exception):
    """Base class for faults that abort a run instead of failing a test."""


class CallerResolutionError(HarnessError):
    """Stack introspection was requested at a depth that does not exist."""


class SuiteDefinitionError(HarnessError):
    """A suite class declares an ambiguous or invalid registration table."""


class UnboundSuiteError(HarnessError):
    """An assertion primitive was called while no test was bound to the suite."""


class RunFailedError(AssertionError):
    """Raised by RunResult.raise_on_failure() so host test frameworks report it."""
