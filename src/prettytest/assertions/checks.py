"""Condition evaluators behind the assertion primitives.

Each check returns ``(passed, message)`` where message is the default text
reported when the check fails.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

CheckResult = tuple[bool, str]


def check_equal(expected: Any, actual: Any) -> CheckResult:
    return expected == actual, f"Expected {actual!r} to be equal to {expected!r}"


def check_not_equal(expected: Any, actual: Any) -> CheckResult:
    return (
        expected != actual,
        f"Expected {actual!r} to be not equal to {expected!r}",
    )


def check_true(value: Any) -> CheckResult:
    return bool(value), "Expected value to be true"


def check_false(value: Any) -> CheckResult:
    return not value, "Expected value to be false"


def check_path(path: str | Path) -> CheckResult:
    return Path(path).exists(), f"Path {path} doesn't exist"


def check_none(value: Any) -> CheckResult:
    return value is None, f"Value {value!r} is not None"


def check_not_none(value: Any) -> CheckResult:
    return value is not None, "Expected a value but got None"
