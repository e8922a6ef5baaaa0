from pathlib import Path

import pytest
import yaml

from prettytest import (
    BDDFormatter,
    CallerResolutionError,
    RunFailedError,
    Runner,
    Status,
    Suite,
    after,
    after_all,
    before,
    before_all,
    run,
    test,
)
from prettytest.runner import MUST_FAIL_MESSAGE, write_results


class Counting(Suite):
    before_all_calls = 0

    @before_all
    def start(self):
        type(self).before_all_calls += 1
        self.counter = 0
        self.guard = 1

    @before
    def setup(self):
        self.counter += 2

    @after
    def teardown(self):
        self.counter -= 1

    @after_all
    def finish(self):
        self.guard = -1

    @test
    def test_first(self):
        self.equal(2, self.counter)
        self.equal(1, self.guard)

    @test
    def test_second(self):
        self.equal(3, self.counter)


class Mixed(Suite):
    @test
    def test_pass(self):
        self.true(True)

    @test
    def test_fail(self):
        self.equal(1, 2)

    @test
    def test_expected_failure(self):
        self.must_fail()
        self.error("This test must fail.")

    @test
    def test_unmet_expectation(self):
        self.must_fail()
        self.true(True)

    @test
    def test_pending(self):
        self.pending()

    @test
    def test_empty(self):
        pass


class Raising(Suite):
    @test
    def test_divide(self):
        self.true(True)
        1 / 0

    @test
    def test_after_raise(self):
        self.true(True)


class Trace(Suite):
    calls: list[str] = []

    @before_all
    def start(self):
        self.calls.append("before_all")

    @before
    def setup(self):
        self.calls.append("before")

    @after
    def teardown(self):
        self.calls.append("after")

    @after_all
    def finish(self):
        self.calls.append("after_all")

    @test
    def test_a(self):
        self.calls.append("test_a")

    @test
    def test_b(self):
        self.calls.append("test_b")


class BrokenHook(Suite):
    @before
    def setup(self):
        raise RuntimeError("no database")

    @test
    def test_never(self):
        self.true(True)


class FailingHook(Suite):
    @before_all
    def start(self):
        self.true(False)

    @test
    def test_ok(self):
        self.true(True)


class HarnessBreak(Suite):
    @test
    def test_break(self):
        raise CallerResolutionError("stack too shallow")


class Specs(Suite):
    description = "A stack"

    @test
    def should_be_empty(self):
        self.true(True)

    @test
    def test_ignored_by_bdd(self):
        self.true(False)


def test_hooks_wrap_every_test(tdd):
    Counting.before_all_calls = 0
    suite = Counting()
    result = run(suite, formatter=tdd)

    assert result.report.passed == 2
    assert result.report.failed == 0
    assert Counting.before_all_calls == 1
    assert suite.guard == -1
    assert not result.failed


def test_hook_order(tdd):
    Trace.calls = []
    run(Trace(), formatter=tdd)
    assert Trace.calls == [
        "before_all",
        "before",
        "test_a",
        "after",
        "before",
        "test_b",
        "after",
        "after_all",
    ]


def test_suite_hooks_run_without_selected_tests():
    Trace.calls = []
    run(Trace(), formatter=BDDFormatter(color=False))
    assert Trace.calls == ["before_all", "after_all"]


def test_statuses_and_report(tdd):
    result = run(Mixed(), formatter=tdd)
    statuses = {t.name: t.status for t in result.suites[0].tests}

    assert statuses == {
        "test_pass": Status.PASS,
        "test_fail": Status.FAIL,
        "test_expected_failure": Status.MUST_FAIL,
        "test_unmet_expectation": Status.FAIL,
        "test_pending": Status.PENDING,
        "test_empty": Status.NO_ASSERTIONS,
    }
    report = result.report
    assert (report.passed, report.failed, report.expected_failures) == (1, 2, 1)
    assert (report.pending, report.no_assertions, report.total) == (1, 1, 6)
    assert result.failed


def test_error_log_contents(tdd):
    result = run(Mixed(), formatter=tdd)
    entries = [(e.test_func.name, e.assertion.message) for e in result.errors]

    assert entries == [
        ("test_fail", "Expected 2 to be equal to 1"),
        ("test_expected_failure", "This test must fail."),
        ("test_unmet_expectation", MUST_FAIL_MESSAGE),
    ]
    unmet = result.errors[-1]
    assert unmet.assertion.line == Mixed.test_unmet_expectation.__code__.co_firstlineno
    # the synthetic failure is not one of the test's own assertions
    assert len(unmet.test_func.assertions) == 1


def test_rerun_gives_identical_results(tdd):
    suite = Mixed()
    runner = Runner([suite], formatter=tdd)
    first = runner.execute()
    second = runner.execute()

    assert first.report == second.report
    assert len(first.error_log) == len(second.error_log) == 3
    assert first.error_log is not second.error_log


def test_name_filter(tdd):
    result = run(Mixed(), formatter=tdd, name_filter="fail")
    names = [t.name for t in result.suites[0].tests]
    assert names == ["test_fail", "test_expected_failure"]
    assert result.report.total == 2


def test_bdd_selects_should_tests(output):
    result = run(Specs(), formatter=BDDFormatter(out=output, color=False))
    assert [t.name for t in result.suites[0].tests] == ["should_be_empty"]
    assert not result.failed
    assert "A stack:" in output.getvalue()


def test_exception_in_test_is_a_failure(tdd):
    result = run(Raising(), formatter=tdd)
    divide, after_raise = result.suites[0].tests

    assert divide.status is Status.FAIL
    assert after_raise.status is Status.PASS
    [entry] = result.errors
    assert entry.assertion.message == "Unexpected ZeroDivisionError: division by zero"
    assert Path(entry.assertion.filename).name == "test_runner.py"
    assert entry.assertion.line == Raising.test_divide.__code__.co_firstlineno + 3


def test_exception_in_hook_propagates(tdd):
    with pytest.raises(RuntimeError, match="no database"):
        run(BrokenHook(), formatter=tdd)


def test_harness_error_propagates(tdd):
    with pytest.raises(CallerResolutionError):
        run(HarnessBreak(), formatter=tdd)


def test_failing_hook_assertion_fails_run(tdd):
    result = run(FailingHook(), formatter=tdd)

    assert result.report.passed == 1
    assert result.report.failed == 0
    assert result.failed
    [hook] = result.suites[0].hooks
    assert hook.name == "start"
    assert hook.status is Status.FAIL
    assert [e.test_func for e in result.errors] == [hook]


def test_suite_is_unbound_after_run(tdd):
    suite = Counting()
    run(suite, formatter=tdd)
    assert suite._test_func is None


def test_raise_on_failure(tdd):
    result = run(Mixed(), formatter=tdd)
    with pytest.raises(RunFailedError, match="2 test\\(s\\) failed"):
        result.raise_on_failure()


def test_raise_on_failure_ignores_expected_failures(tdd):
    result = run(Mixed(), formatter=tdd, name_filter="expected_failure")
    assert result.report.expected_failures == 1
    assert len(result.errors) == 1
    result.raise_on_failure()


def test_write_results(tmp_path, tdd):
    runner = Runner([Mixed()], formatter=tdd)
    results = [runner.execute(), runner.execute()]

    junit_path = write_results(tmp_path / "run", results, meta={"formatter": "tdd"})

    assert junit_path == tmp_path / "run" / "junit.xml"
    assert junit_path.exists()
    meta = yaml.safe_load((tmp_path / "run" / "meta.yaml").read_text())
    assert meta["repeat"] == 2
    assert meta["failed"] is True
    assert meta["formatter"] == "tdd"
    assert meta["suites"] == [f"{__name__}.Mixed"]
    assert meta["report"]["expected_failures"] == 1
    assert meta["flaky"] == []


def test_invalid_name_filter_rejected(tdd):
    with pytest.raises(ValueError, match="invalid name filter"):
        Runner([Mixed()], formatter=tdd, name_filter="test_((")


def test_not_on_plain_value_is_recorded(tdd):
    class Misused(Suite):
        @test
        def test_misuse(self):
            self.not_(False)

    result = run(Misused(), formatter=tdd)
    [entry] = result.errors
    assert entry.assertion.message.startswith("Unexpected TypeError: not_() expects")


def test_raise_on_failure_counts_failing_hooks(tdd):
    result = run(FailingHook(), formatter=tdd)
    with pytest.raises(RunFailedError, match="0 test\\(s\\) failed, 1 hook\\(s\\) failed"):
        result.raise_on_failure()
