"""Per-test bookkeeping, the run error log and the final tally."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from prettytest.assertions.base import Assertion


class Status(str, Enum):
    NO_ASSERTIONS = "no_assertions"
    PASS = "pass"
    FAIL = "fail"
    MUST_FAIL = "must_fail"
    PENDING = "pending"


@dataclass(eq=False)
class TestFunc:
    """Aggregate record of one test (or hook) method within one run."""

    __test__ = False

    name: str
    suite_name: str
    assertions: list[Assertion] = field(default_factory=list)
    pending: bool = False
    must_fail: bool = False
    hook: bool = False
    duration_seconds: float = 0.0
    final_status: Status | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.suite_name}.{self.name}"

    @property
    def status(self) -> Status:
        if self.final_status is not None:
            return self.final_status
        if self.pending:
            return Status.PENDING
        if not self.assertions:
            return Status.NO_ASSERTIONS
        if any(a.failed for a in self.assertions):
            return Status.FAIL
        return Status.PASS

    @property
    def failures(self) -> list[Assertion]:
        return [a for a in self.assertions if a.failed]

    def record(self, assertion: Assertion) -> Assertion:
        self.assertions.append(assertion)
        return assertion

    def reconcile(self) -> bool:
        """Apply the must-fail expectation and freeze the terminal status.

        Returns False when the expectation was declared but not met, in which
        case the caller is responsible for logging the synthetic failure.
        """
        status = self.status
        if not self.must_fail:
            self.final_status = status
            return True
        if status is Status.FAIL:
            self.final_status = Status.MUST_FAIL
            return True
        self.final_status = Status.FAIL
        return False


@dataclass
class ErrorEntry:
    suite_name: str
    test_func: TestFunc
    assertion: Assertion


class ErrorLog:
    """Ordered failure records of a single run."""

    def __init__(self) -> None:
        self._entries: list[ErrorEntry] = []

    @property
    def entries(self) -> list[ErrorEntry]:
        return list(self._entries)

    def append(self, suite_name: str, test_func: TestFunc, assertion: Assertion) -> ErrorEntry:
        entry = ErrorEntry(suite_name, test_func, assertion)
        self._entries.append(entry)
        return entry

    def discard(self, assertion: Assertion) -> bool:
        """Remove the entry recorded for ``assertion``. Returns whether one existed."""
        for i in range(len(self._entries) - 1, -1, -1):
            if self._entries[i].assertion is assertion:
                del self._entries[i]
                return True
        return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))


@dataclass
class FinalReport:
    passed: int = 0
    failed: int = 0
    expected_failures: int = 0
    pending: int = 0
    no_assertions: int = 0

    @property
    def total(self) -> int:
        return (
            self.passed
            + self.failed
            + self.expected_failures
            + self.pending
            + self.no_assertions
        )

    def add(self, status: Status) -> None:
        if status is Status.PASS:
            self.passed += 1
        elif status is Status.FAIL:
            self.failed += 1
        elif status is Status.MUST_FAIL:
            self.expected_failures += 1
        elif status is Status.PENDING:
            self.pending += 1
        else:
            self.no_assertions += 1
