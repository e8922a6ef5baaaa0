from __future__ import annotations

import logging
import re
import time
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

import yaml

from prettytest.assertions.base import Assertion
from prettytest.exceptions import HarnessError, RunFailedError
from prettytest.formatters import Formatter, TDDFormatter
from prettytest.results import ErrorEntry, ErrorLog, FinalReport, Status, TestFunc
from prettytest.suite import Role, Suite

MUST_FAIL_MESSAGE = "Test was expected to fail"


@dataclass
class SuiteResult:
    name: str
    package: str
    description: str | None
    tests: list[TestFunc] = field(default_factory=list)
    hooks: list[TestFunc] = field(default_factory=list)


@dataclass
class RunResult:
    report: FinalReport
    error_log: ErrorLog
    suites: list[SuiteResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        if self.report.failed:
            return True
        return any(
            hook.status is Status.FAIL for suite in self.suites for hook in suite.hooks
        )

    @property
    def errors(self) -> list[ErrorEntry]:
        return self.error_log.entries

    def raise_on_failure(self) -> None:
        if not self.failed:
            return
        lines = [
            f"{e.test_func.qualified_name} ({e.assertion.filename}:{e.assertion.line}) "
            f"{e.assertion.message}"
            for e in self.error_log
        ]
        failed_hooks = sum(
            1 for suite in self.suites for hook in suite.hooks if hook.status is Status.FAIL
        )
        summary = f"{self.report.failed} test(s) failed"
        if failed_hooks:
            summary += f", {failed_hooks} hook(s) failed"
        raise RunFailedError(summary + "\n" + "\n".join(lines))


class Runner:
    """Runs suites sequentially and reports through a formatter."""

    def __init__(
        self,
        suites: Sequence[Suite],
        formatter: Formatter | None = None,
        name_filter: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self.suites = list(suites)
        self.formatter = formatter or TDDFormatter()
        try:
            self.name_filter = re.compile(name_filter) if name_filter else None
        except re.error as e:
            raise ValueError(f"invalid name filter {name_filter!r}: {e}") from e
        self.test_pattern = re.compile(self.formatter.test_name_pattern())
        self.logger = logger or logging.getLogger("prettytest")

    def execute(self) -> RunResult:
        """Run every suite once. Safe to call repeatedly."""
        error_log = ErrorLog()
        report = FinalReport()
        result = RunResult(report=report, error_log=error_log)

        for suite in self.suites:
            result.suites.append(self._run_suite(suite, error_log, report))

        self.formatter.print_error_log(error_log.entries)
        self.formatter.print_final_report(report)

        self.logger.debug(
            f"Run finished: {report.total} tests, {report.failed} failed, "
            f"{len(error_log)} error log entries"
        )
        return result

    def selected(self, name: str) -> bool:
        if not self.test_pattern.search(name):
            return False
        if self.name_filter is not None and not self.name_filter.search(name):
            return False
        return True

    def _run_suite(
        self, suite: Suite, error_log: ErrorLog, report: FinalReport
    ) -> SuiteResult:
        suite.reset()
        registry = type(suite).registry
        suite_result = SuiteResult(
            name=suite.name, package=suite.package, description=suite.description
        )
        self.logger.debug(f"Running suite {suite.package}.{suite.name}")
        self.formatter.print_suite_info(suite)

        self._run_hook(suite, registry.hook(Role.BEFORE_ALL), error_log)

        for name in registry.tests:
            if not self.selected(name):
                self.logger.debug(f"Skipping {suite.name}.{name}: not selected")
                continue

            test_func = suite.lookup(name)
            self._run_hook(suite, registry.hook(Role.BEFORE), error_log)
            self._run_test(suite, test_func, error_log)
            self._run_hook(suite, registry.hook(Role.AFTER), error_log)

            self._reconcile(suite, test_func, error_log)
            report.add(test_func.status)
            suite_result.tests.append(test_func)
            self.logger.debug(
                f"Test {test_func.qualified_name} finished: {test_func.status.value} "
                f"({len(test_func.assertions)} assertion(s), "
                f"{test_func.duration_seconds:.3f}s)"
            )
            self.formatter.print_status(test_func)

        self._run_hook(suite, registry.hook(Role.AFTER_ALL), error_log)

        suite_result.hooks = [t for t in suite.tests.values() if t.hook]
        for hook in suite_result.hooks:
            hook.final_status = hook.status
        return suite_result

    def _run_hook(self, suite: Suite, name: str | None, error_log: ErrorLog) -> None:
        if name is None:
            return
        hook_func = suite.lookup(name, hook=True)
        suite.bind(hook_func, error_log)
        try:
            getattr(suite, name)()
        except Exception:
            self.logger.error(f"Hook {suite.name}.{name} raised, aborting run")
            raise
        finally:
            suite.unbind()

    def _run_test(self, suite: Suite, test_func: TestFunc, error_log: ErrorLog) -> None:
        method = getattr(suite, test_func.name)
        suite.bind(test_func, error_log)
        start = time.perf_counter()
        try:
            method()
        except HarnessError:
            raise
        except Exception as e:
            self.logger.error(
                f"Test {test_func.qualified_name} raised {type(e).__name__}: {e}"
            )
            code = method.__func__.__code__
            # innermost frame inside the suite's own source file
            frames = [
                f
                for f in traceback.extract_tb(e.__traceback__)
                if f.filename == code.co_filename
            ]
            if frames:
                filename, line = frames[-1].filename, frames[-1].lineno or 0
            else:
                filename, line = code.co_filename, code.co_firstlineno
            suite.record_failure(filename, line, f"Unexpected {type(e).__name__}: {e}")
        finally:
            test_func.duration_seconds = time.perf_counter() - start
            suite.unbind()

    def _reconcile(self, suite: Suite, test_func: TestFunc, error_log: ErrorLog) -> None:
        if test_func.reconcile():
            return
        code = getattr(suite, test_func.name).__func__.__code__
        error_log.append(
            suite.name,
            test_func,
            Assertion(
                test_name=test_func.name,
                filename=code.co_filename,
                line=code.co_firstlineno,
                message=MUST_FAIL_MESSAGE,
                passed=False,
            ),
        )


def run(
    *suites: Suite,
    formatter: Formatter | None = None,
    name_filter: str | None = None,
) -> RunResult:
    """Run the given suite instances and return the result."""
    return Runner(suites, formatter=formatter, name_filter=name_filter).execute()


def write_results(
    run_dir: Path,
    results: list[RunResult],
    meta: dict[str, Any] | None = None,
) -> Path:
    """Write junit.xml and meta.yaml to the run directory. Returns junit path."""
    from prettytest.metrics import aggregate_runs
    from prettytest.reporting.junit import write_junit

    run_dir.mkdir(parents=True, exist_ok=True)
    aggregated = aggregate_runs(results) if len(results) > 1 else None
    junit_path = write_junit(run_dir, results[-1], aggregated)

    try:
        import importlib.metadata

        prettytest_version = importlib.metadata.version("prettytest")
    except Exception:
        prettytest_version = "unknown"

    last = results[-1].report
    data: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "prettytest_version": prettytest_version,
        "repeat": len(results),
        "suites": [f"{s.package}.{s.name}" for s in results[-1].suites],
        "report": asdict(last),
        "failed": any(r.failed for r in results),
        **(meta or {}),
    }
    if aggregated is not None:
        data["flaky"] = aggregated.flaky

    (run_dir / "meta.yaml").write_text(yaml.dump(data, default_flow_style=False))
    return junit_path
