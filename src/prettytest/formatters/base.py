"""Formatter interface and the pieces shared by both console formatters."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import typer

from prettytest.results import ErrorEntry, FinalReport, Status, TestFunc

if TYPE_CHECKING:
    from prettytest.suite import Suite


def green(text: str) -> str:
    return typer.style(text, fg=typer.colors.GREEN)


def red(text: str) -> str:
    return typer.style(text, fg=typer.colors.RED)


def yellow(text: str) -> str:
    return typer.style(text, fg=typer.colors.YELLOW)


class Formatter(ABC):
    """Renders run events.

    Args:
        out: Stream to write to (defaults to stdout at write time).
        color: Force ANSI colours on (True) or off (False). None lets click
            decide from whether ``out`` is a terminal.
    """

    def __init__(self, out: TextIO | None = None, color: bool | None = None) -> None:
        self.out = out
        self.color = color

    def echo(self, message: str = "", nl: bool = True) -> None:
        typer.echo(message, file=self.out or sys.stdout, nl=nl, color=self.color)

    @abstractmethod
    def print_suite_info(self, suite: Suite) -> None:
        """Called once per suite, before its hooks and tests run."""
        ...

    @abstractmethod
    def print_status(self, test_func: TestFunc) -> None:
        """Called once per test after its status has been reconciled."""
        ...

    @abstractmethod
    def print_final_report(self, report: FinalReport) -> None: ...

    @abstractmethod
    def test_name_pattern(self) -> str:
        """Regular expression a registered test name must match to run."""
        ...

    def print_error_log(self, entries: list[ErrorEntry]) -> None:
        current_header = None
        for entry in entries:
            test_func = entry.test_func
            if current_header != test_func.qualified_name:
                header = test_func.qualified_name
                if test_func.status is Status.MUST_FAIL:
                    header += " (expected failure)"
                self.echo(f"\n{header}:")
            filename = Path(entry.assertion.filename).name
            self.echo(f"\t({filename}:{entry.assertion.line}) {entry.assertion.message}")
            current_header = test_func.qualified_name
