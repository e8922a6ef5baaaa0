from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, TYPE_CHECKING

import numpy as np

from prettytest.results import Status

if TYPE_CHECKING:
    from prettytest.runner import RunResult

_PASSING = (Status.PASS, Status.MUST_FAIL)


@dataclass
class MetricStatistics:
    """Statistics for a single metric across iterations."""

    avg: float | None
    min: float | None
    max: float | None
    stddev: float | None

    def to_dict(self) -> dict[str, float | None]:
        return asdict(self)


@dataclass
class TestSummary:
    """Outcome of one test across repeated runs."""

    __test__ = False

    name: str
    statuses: list[Status]
    pass_rate: float
    duration: MetricStatistics

    @property
    def flaky(self) -> bool:
        return len(set(self.statuses)) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "statuses": [s.value for s in self.statuses],
            "pass_rate": self.pass_rate,
            "flaky": self.flaky,
            "duration": self.duration.to_dict(),
        }


@dataclass
class AggregatedRun:
    """Aggregated results across multiple iterations of the same suites."""

    count: int
    failed_count: int
    tests: dict[str, TestSummary]

    @property
    def flaky(self) -> list[str]:
        return [name for name, summary in self.tests.items() if summary.flaky]

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "failed_count": self.failed_count,
            "flaky": self.flaky,
            "tests": {k: v.to_dict() for k, v in self.tests.items()},
        }


def compute_stats(values: list[float | int | None]) -> MetricStatistics:
    """Compute avg, min, max, stddev for a list of numeric values."""
    nums = [v for v in values if v is not None]
    if not nums:
        return MetricStatistics(avg=None, min=None, max=None, stddev=None)

    arr = np.array(nums)
    return MetricStatistics(
        avg=round(float(np.mean(arr)), 4),
        min=round(float(np.min(arr)), 4),
        max=round(float(np.max(arr)), 4),
        stddev=round(float(np.std(arr)), 4),
    )


def result_key(package: str, qualified_name: str) -> str:
    return f"{package}.{qualified_name}"


def aggregate_runs(run_results: list[RunResult]) -> AggregatedRun:
    """Aggregate repeated runs into per-test pass rates and duration stats."""
    statuses: dict[str, list[Status]] = {}
    durations: dict[str, list[float]] = {}

    for result in run_results:
        for suite in result.suites:
            for test_func in suite.tests:
                key = result_key(suite.package, test_func.qualified_name)
                statuses.setdefault(key, []).append(test_func.status)
                durations.setdefault(key, []).append(test_func.duration_seconds)

    tests: dict[str, TestSummary] = {}
    for key, test_statuses in statuses.items():
        passing = sum(1 for s in test_statuses if s in _PASSING)
        tests[key] = TestSummary(
            name=key,
            statuses=test_statuses,
            pass_rate=round(passing / len(test_statuses) * 100, 1),
            duration=compute_stats(durations[key]),
        )

    return AggregatedRun(
        count=len(run_results),
        failed_count=sum(1 for r in run_results if r.failed),
        tests=tests,
    )
