from __future__ import annotations

from typing import TYPE_CHECKING

from prettytest.formatters.base import Formatter, green, red, yellow
from prettytest.results import FinalReport, Status, TestFunc

if TYPE_CHECKING:
    from prettytest.suite import Suite

FORMAT_TAG = "\t{label}\t"


class TDDFormatter(Formatter):
    """A plain TDD-like formatter.

    Legend:

    * F  - test failed
    * OK - test passed
    * EF - an expected failure occurred
    * NA - no assertions found
    * PE - pending test
    """

    LABELS = {
        Status.FAIL: ("F", red),
        Status.MUST_FAIL: ("EF", green),
        Status.PASS: ("OK", green),
        Status.PENDING: ("PE", yellow),
        Status.NO_ASSERTIONS: ("NA", yellow),
    }

    def print_suite_info(self, suite: Suite) -> None:
        self.echo(f"\n{suite.package}.{suite.name}:\n")

    def print_status(self, test_func: TestFunc) -> None:
        text, paint = self.LABELS[test_func.status]
        label = FORMAT_TAG.format(label=paint(text))
        # pending tests report no assertions, whatever ran before pending()
        count = 0 if test_func.status is Status.PENDING else len(test_func.assertions)
        self.echo(f"{label}{test_func.name:<30}({count} assertion(s))")

    def print_final_report(self, report: FinalReport) -> None:
        self.echo(
            f"\n{report.total} tests, {report.passed} passed, {report.failed} failed, "
            f"{report.expected_failures} expected failures, {report.pending} pending, "
            f"{report.no_assertions} with no assertions"
        )

    def test_name_pattern(self) -> str:
        return r"^test"
