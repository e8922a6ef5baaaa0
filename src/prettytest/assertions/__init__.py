"""Assertion system used by suites."""

from prettytest.assertions.base import Assertion
from prettytest.assertions.checkers import (
    Checker,
    equals,
    has_len,
    is_instance,
    is_none,
    matches,
    not_none,
)
from prettytest.assertions.checks import (
    check_equal,
    check_false,
    check_none,
    check_not_equal,
    check_not_none,
    check_path,
    check_true,
)

__all__ = [
    "Assertion",
    "Checker",
    "check_equal",
    "check_false",
    "check_none",
    "check_not_equal",
    "check_not_none",
    "check_path",
    "check_true",
    "equals",
    "has_len",
    "is_instance",
    "is_none",
    "matches",
    "not_none",
]
