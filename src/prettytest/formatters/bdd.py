from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from prettytest.formatters.base import Formatter, green, red, yellow
from prettytest.results import FinalReport, Status, TestFunc

if TYPE_CHECKING:
    from prettytest.suite import Suite


class BDDFormatter(Formatter):
    """A formatter à la rspec: ``should_*`` tests read as sentences."""

    def __init__(
        self,
        description: str | None = None,
        out: TextIO | None = None,
        color: bool | None = None,
    ) -> None:
        super().__init__(out=out, color=color)
        self.description = description

    def print_suite_info(self, suite: Suite) -> None:
        title = self.description or suite.description or suite.name
        self.echo(f"\n{title}:")

    def print_status(self, test_func: TestFunc) -> None:
        should_text = test_func.name.replace("_", " ")
        status = test_func.status
        if status is Status.FAIL:
            self.echo(f"- {red(should_text)}")
        elif status in (Status.PASS, Status.MUST_FAIL):
            self.echo(f"- {green(should_text)}")
        elif status is Status.PENDING:
            self.echo(f"- {yellow(should_text)}\t(Not Yet Implemented)")
        else:
            self.echo(f"- {yellow(should_text)}\t(No assertions found)")

    def print_final_report(self, report: FinalReport) -> None:
        self.echo(
            f"\n{report.total} examples, {report.passed} passed, {report.failed} failed, "
            f"{report.expected_failures} expected failures, {report.pending} pending, "
            f"{report.no_assertions} with no assertions"
        )

    def test_name_pattern(self) -> str:
        return r"^should_"
