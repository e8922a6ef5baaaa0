"""prettytest: a small assertion-based test harness with readable reports.

Features:

  * a simple assertion vocabulary for better readability
  * explicit hook and test registration through decorators
  * expected failures, pending tests and assertion negation
  * TDD and BDD console formatters, junit.xml and HTML reports
"""

from prettytest.assertions.base import Assertion
from prettytest.assertions.checkers import Checker
from prettytest.exceptions import (
    CallerResolutionError,
    HarnessError,
    RunFailedError,
    SuiteDefinitionError,
    UnboundSuiteError,
)
from prettytest.formatters import BDDFormatter, Formatter, TDDFormatter
from prettytest.results import ErrorEntry, ErrorLog, FinalReport, Status, TestFunc
from prettytest.runner import Runner, RunResult, SuiteResult, run
from prettytest.suite import Suite, after, after_all, before, before_all, test

__all__ = [
    "Assertion",
    "BDDFormatter",
    "CallerResolutionError",
    "Checker",
    "ErrorEntry",
    "ErrorLog",
    "FinalReport",
    "Formatter",
    "HarnessError",
    "RunFailedError",
    "RunResult",
    "Runner",
    "Status",
    "Suite",
    "SuiteDefinitionError",
    "SuiteResult",
    "TDDFormatter",
    "TestFunc",
    "UnboundSuiteError",
    "after",
    "after_all",
    "before",
    "before_all",
    "run",
    "test",
]
