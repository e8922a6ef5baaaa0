from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from junitparser import Failure, JUnitXml, Skipped, TestCase, TestSuite

from prettytest.results import Status

if TYPE_CHECKING:
    from prettytest.metrics import AggregatedRun
    from prettytest.runner import RunResult

EXPECTED_FAILURE = "expected failure"


def write_junit(
    run_dir: Path,
    result: RunResult,
    aggregated: AggregatedRun | None = None,
) -> Path:
    """Write junit.xml for a run (the last iteration when repeating), return path."""
    from prettytest.metrics import result_key

    xml = JUnitXml()

    for suite_result in result.suites:
        suite = TestSuite(f"{suite_result.package}.{suite_result.name}")
        if suite_result.description:
            suite.add_property("description", suite_result.description)

        for test_func in suite_result.tests:
            case = TestCase(test_func.name)
            case.classname = suite_result.name
            case.time = round(test_func.duration_seconds, 6)

            status = test_func.status
            if status is Status.FAIL:
                messages = [a.message for a in test_func.failures]
                if not messages:
                    # unmet must-fail expectation leaves no failing assertion
                    messages = [
                        e.assertion.message
                        for e in result.error_log
                        if e.test_func is test_func
                    ]
                case.result = [Failure("; ".join(messages))]
            elif status is Status.PENDING:
                case.result = [Skipped("pending")]
            elif status is Status.NO_ASSERTIONS:
                case.result = [Skipped("no assertions")]
            elif status is Status.MUST_FAIL:
                case.system_out = EXPECTED_FAILURE
            suite.add_testcase(case)

            if aggregated is not None:
                key = result_key(suite_result.package, test_func.qualified_name)
                summary = aggregated.tests.get(key)
                if summary is not None:
                    suite.add_property(f"{test_func.name}_pass_rate", str(summary.pass_rate))
                    for stat_name, stat_val in summary.duration.to_dict().items():
                        if stat_val is not None:
                            suite.add_property(
                                f"{test_func.name}_duration_{stat_name}", str(stat_val)
                            )

        for hook in suite_result.hooks:
            if hook.status is not Status.FAIL:
                continue
            case = TestCase(hook.name)
            case.classname = suite_result.name
            case.result = [Failure("; ".join(a.message for a in hook.failures))]
            suite.add_testcase(case)

        # Use append (not +=) to preserve properties
        xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path


def generate_report(run_dir: Path) -> Path:
    """Render junit.xml → report.html using Jinja2 template, return path."""
    import yaml
    from jinja2 import Environment, FileSystemLoader

    junit_path = run_dir / "junit.xml"
    report_path = run_dir / "report.html"

    meta: dict = {}
    meta_path = run_dir / "meta.yaml"
    if meta_path.exists():
        meta = yaml.safe_load(meta_path.read_text()) or {}

    xml = JUnitXml.fromfile(str(junit_path))

    suites = []
    for suite in xml:
        cases = []
        for case in suite:
            result = None
            if case.result:
                result = {
                    "status": type(case.result[0]).__name__,
                    "message": case.result[0].message or "",
                }
            elif case.system_out == EXPECTED_FAILURE:
                result = {"status": "ExpectedFailure", "message": ""}
            cases.append(
                {
                    "name": case.name,
                    "classname": case.classname,
                    "time": case.time,
                    "result": result,
                }
            )

        suites.append(
            {
                "name": suite.name,
                "tests": suite.tests,
                "failures": suite.failures,
                "skipped": suite.skipped,
                "time": suite.time,
                "properties": {p.name: p.value for p in suite.properties()},
                "cases": cases,
            }
        )

    total_tests = sum(s["tests"] for s in suites)
    total_failures = sum(s["failures"] for s in suites)
    total_skipped = sum(s["skipped"] for s in suites)

    tmpl_dir = Path(__file__).parent / "templates"
    env = Environment(loader=FileSystemLoader(str(tmpl_dir)), autoescape=True)
    template = env.get_template("report.html.j2")

    html = template.render(
        suites=suites,
        total_tests=total_tests,
        total_failures=total_failures,
        total_skipped=total_skipped,
        run_dir=str(run_dir),
        meta=meta,
    )
    report_path.write_text(html, encoding="utf-8")
    return report_path
