from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="prettytest", help="Run prettytest suites")


def _load_run_config(config: str | None):
    from prettytest.config import CONFIG_FILENAME, RunConfig, load_config

    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            raise ValueError(f"config file not found: {config}")
        return load_config(config_path)
    default_path = Path(CONFIG_FILENAME)
    if default_path.exists():
        return load_config(default_path)
    return RunConfig()


@app.command()
def run(
    suites: list[str] | None = typer.Argument(
        None, help="Suite files (*.py) or dotted module names"
    ),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to a prettytest YAML config"
    ),
    formatter: str | None = typer.Option(
        None, "--formatter", help="Output formatter: tdd or bdd"
    ),
    filter: str | None = typer.Option(
        None,
        "--filter",
        "-f",
        help="Regular expression that filters tests to run",
    ),
    description: str | None = typer.Option(
        None, help="Heading used by the bdd formatter"
    ),
    output_dir: str | None = typer.Option(
        None, help="Directory for junit.xml, meta.yaml, report.html and debug.log"
    ),
    repeat: int | None = typer.Option(
        None, "--repeat", "-r", min=1, max=100, help="Number of times to run the suites"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable coloured output"),
    no_report: bool = typer.Option(
        False, "--no-report", help="Do not render report.html into --output-dir"
    ),
):
    """Run test suites and print a report."""
    from prettytest.config import RunConfig
    from prettytest.exceptions import HarnessError
    from prettytest.formatters import get_formatter
    from prettytest.loader import load_suites
    from prettytest.metrics import aggregate_runs
    from prettytest.runner import Runner, write_results
    from prettytest.verbose import setup_logger

    overrides = {
        "suites": suites or None,
        "formatter": formatter,
        "filter": filter,
        "description": description,
        "output_dir": output_dir,
        "repeat": repeat,
    }
    try:
        base = _load_run_config(config)
        run_config = RunConfig(
            **{
                **base.model_dump(),
                **{k: v for k, v in overrides.items() if v is not None},
            }
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not run_config.suites:
        typer.echo("Error: no suites given (pass files or modules, or set 'suites' in the config)", err=True)
        raise typer.Exit(1)

    run_dir = Path(run_config.output_dir) if run_config.output_dir else None
    logger = setup_logger(
        debug_file=run_dir / "debug.log" if run_dir else None,
        verbose=verbose,
    )

    try:
        loaded = load_suites(run_config.suites)
    except (ImportError, FileNotFoundError, HarnessError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    formatter_kwargs = {"color": False if no_color else run_config.color}
    if run_config.formatter.value == "bdd":
        formatter_kwargs["description"] = run_config.description
    runner = Runner(
        loaded,
        formatter=get_formatter(run_config.formatter.value, **formatter_kwargs),
        name_filter=run_config.filter,
        logger=logger,
    )

    try:
        results = [runner.execute() for _ in range(run_config.repeat)]
    except HarnessError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if len(results) > 1:
        aggregated = aggregate_runs(results)
        typer.echo(
            f"\n{aggregated.count} iterations, {aggregated.failed_count} failed"
        )
        for name in aggregated.flaky:
            summary = aggregated.tests[name]
            typer.echo(f"  flaky: {name} ({summary.pass_rate}% passing)")

    if run_dir is not None:
        junit_path = write_results(
            run_dir,
            results,
            meta={
                "formatter": run_config.formatter.value,
                "filter": run_config.filter,
            },
        )
        typer.echo(f"JUnit: {junit_path}")
        if not no_report:
            from prettytest.reporting.junit import generate_report

            typer.echo(f"Report: {generate_report(run_dir)}")
        if not verbose:
            typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    if any(r.failed for r in results):
        raise typer.Exit(1)


@app.command()
def report(
    run_dir: str = typer.Argument(help="Path to a run output directory"),
    open_report: bool = typer.Option(
        False, "--open", help="Open report.html in browser after generating"
    ),
):
    """Regenerate the HTML report from a previous run's junit.xml."""
    from prettytest.reporting.junit import generate_report

    run_path = Path(run_dir)
    if not run_path.exists() or not (run_path / "junit.xml").exists():
        typer.echo(f"Error: not a valid run directory: {run_dir}", err=True)
        raise typer.Exit(1)

    report_path = generate_report(run_path)
    typer.echo(f"Report generated: {report_path}")

    if open_report:
        import webbrowser

        webbrowser.open(report_path.resolve().as_uri())


@app.command()
def watch(
    paths: list[str] | None = typer.Argument(None, help="Folders to watch"),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to a prettytest YAML config"
    ),
    pattern: str | None = typer.Option(
        None, help="Regular expression selecting the files that trigger a run"
    ),
    command: str | None = typer.Option(
        None, help="Test command to run (defaults to 'prettytest run')"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every file event"
    ),
):
    """Watch folders and re-run the tests on every change."""
    import re
    import shlex

    from prettytest.verbose import setup_logger
    from prettytest.watch import Watcher, default_command

    try:
        run_config = _load_run_config(config)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    watch_config = run_config.watch

    watch_paths = [Path(p) for p in (paths or watch_config.paths)]
    for path in watch_paths:
        if not path.exists():
            typer.echo(f"Error: path not found: {path}", err=True)
            raise typer.Exit(1)

    if command is not None:
        cmd = shlex.split(command)
    elif watch_config.command:
        cmd = watch_config.command
    else:
        cmd = default_command(["--config", config] if config else None)

    try:
        watcher = Watcher(
            paths=watch_paths,
            command=cmd,
            pattern=pattern or watch_config.pattern,
            discard_seconds=watch_config.discard_seconds,
            rerun_seconds=watch_config.rerun_seconds,
            logger=setup_logger(verbose=verbose),
        )
    except (ValueError, re.error) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    watcher.run()


EXAMPLE_CONFIG = """\
suites:
  - example_suite.py
formatter: tdd
# filter: "equal"
# output_dir: ${PRETTYTEST_OUT:-runs}
watch:
  paths: ["."]
  pattern: "\\\\.py$"
"""

EXAMPLE_SUITE = '''\
from prettytest import Suite, after, before, test


class ExampleSuite(Suite):
    @before
    def setup(self):
        self.items = []

    @after
    def teardown(self):
        self.items.clear()

    @test
    def test_true_is_true(self):
        self.true(True)

    @test
    def test_equality(self):
        self.equal("awesome", "awesome")

    @test
    def test_not(self):
        self.not_(self.path("does-not-exist"))

    @test
    def test_pending(self):
        self.pending()

    @test
    def test_must_fail(self):
        self.error("This test must fail.")
        self.must_fail()
'''


@app.command()
def init(
    dir: str = typer.Option(
        ".", "--dir", help="Directory to initialize the example project in"
    ),
):
    """Write an example prettytest.yaml and suite file."""
    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    config_path = project_dir / "prettytest.yaml"
    if config_path.exists():
        typer.echo(f"prettytest.yaml already exists in {dir}, skipping.")
        return

    config_path.write_text(EXAMPLE_CONFIG)
    suite_path = project_dir / "example_suite.py"
    if not suite_path.exists():
        suite_path.write_text(EXAMPLE_SUITE)

    typer.echo(f"Initialized prettytest project in {dir}:")
    typer.echo("  prettytest.yaml   - example run config")
    typer.echo("  example_suite.py  - example suite")
