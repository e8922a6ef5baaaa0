"""Base data structures for the assertion system."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class Assertion:
    """One recorded check made by a test.

    Attributes:
        test_name: Name of the test (or hook) the assertion belongs to.
        filename: Source file of the call site.
        line: Line number of the call site.
        message: Human-readable detail, shown in the error log on failure.
        passed: Outcome of the check itself.
        negated: Set when a later ``not_()`` consumed this failure as the
            expected outcome. A negated assertion no longer counts as failing.
    """

    test_name: str
    filename: str
    line: int
    message: str
    passed: bool = True
    negated: bool = False

    @property
    def failed(self) -> bool:
        return not self.passed and not self.negated

    def __bool__(self) -> bool:
        return self.passed
