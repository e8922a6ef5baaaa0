"""Tests for config loading and validation."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from prettytest.config import FormatterType, RunConfig, WatchConfig, load_config


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper that writes YAML content to a temp file and returns its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "prettytest.yaml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write


def test_defaults():
    config = RunConfig()
    assert config.suites == []
    assert config.formatter is FormatterType.TDD
    assert config.repeat == 1
    assert config.watch == WatchConfig()


def test_load_minimal_config(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        suites:
          - suites/stack_suite.py
          - mypkg.specs
        formatter: bdd
        description: A stack
    """)
    config = load_config(path)
    assert config.suites == [
        str((tmp_path / "suites" / "stack_suite.py").resolve()),
        "mypkg.specs",
    ]
    assert config.formatter is FormatterType.BDD
    assert config.description == "A stack"


def test_empty_file_gives_defaults(tmp_yaml, tmp_path):
    config = load_config(tmp_yaml(""))
    assert config.suites == []
    assert config.formatter is FormatterType.TDD
    assert config.watch.paths == [str(tmp_path.resolve())]


def test_relative_paths_resolved(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        output_dir: runs
        watch:
          paths: [src, /abs/path]
    """)
    config = load_config(path)
    assert config.output_dir == str((tmp_path / "runs").resolve())
    assert config.watch.paths == [str((tmp_path / "src").resolve()), "/abs/path"]


def test_env_vars_expanded(tmp_yaml, monkeypatch):
    monkeypatch.setenv("PRETTYTEST_FILTER", "stack")
    monkeypatch.delenv("PRETTYTEST_OUT", raising=False)
    path = tmp_yaml("""\
        filter: ${PRETTYTEST_FILTER}
        output_dir: /tmp/${PRETTYTEST_OUT:-runs}
    """)
    config = load_config(path)
    assert config.filter == "stack"
    assert config.output_dir == "/tmp/runs"


def test_invalid_filter_rejected(tmp_yaml):
    with pytest.raises(ValidationError, match="invalid regular expression"):
        load_config(tmp_yaml('filter: "test_(("\n'))


def test_invalid_watch_pattern_rejected():
    with pytest.raises(ValidationError):
        WatchConfig(pattern="[")


def test_unknown_key_rejected(tmp_yaml):
    with pytest.raises(ValidationError):
        load_config(tmp_yaml("suite: typo.py\n"))


def test_unknown_formatter_rejected(tmp_yaml):
    with pytest.raises(ValidationError):
        load_config(tmp_yaml("formatter: xml\n"))


@pytest.mark.parametrize("repeat", [0, 101])
def test_repeat_bounds(repeat):
    with pytest.raises(ValidationError):
        RunConfig(repeat=repeat)


def test_non_mapping_rejected(tmp_yaml):
    with pytest.raises(ValueError, match="mapping"):
        load_config(tmp_yaml("- a\n- b\n"))
