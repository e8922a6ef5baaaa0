from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "prettytest.yaml"


class FormatterType(str, Enum):
    TDD = "tdd"
    BDD = "bdd"


def _validate_regex(v: str | None) -> str | None:
    if v is None:
        return v
    try:
        re.compile(v)
    except re.error as e:
        raise ValueError(f"invalid regular expression {v!r}: {e}") from e
    return v


class WatchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    paths: list[str] = ["."]
    pattern: str = r"\.py$"
    discard_seconds: float = Field(1.0, ge=0)
    rerun_seconds: float = Field(2.0, ge=0)
    command: list[str] | None = None

    @field_validator("pattern")
    @classmethod
    def pattern_must_compile(cls, v: str) -> str:
        return _validate_regex(v)


class RunConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    suites: list[str] = []
    formatter: FormatterType = FormatterType.TDD
    description: str | None = None
    filter: str | None = None
    output_dir: str | None = None
    color: bool | None = None
    repeat: int = Field(1, ge=1, le=100)
    watch: WatchConfig = Field(default_factory=WatchConfig)

    @field_validator("filter")
    @classmethod
    def filter_must_compile(cls, v: str | None) -> str | None:
        return _validate_regex(v)


def _expand(value: Any) -> Any:
    """Expand ${VAR} and ${VAR:-default} in every string of a YAML document."""
    if isinstance(value, str):
        return expandvars(value)
    if isinstance(value, list):
        return [_expand(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand(v) for k, v in value.items()}
    return value


def _is_path_like(entry: str) -> bool:
    return entry.endswith(".py") or "/" in entry


def _resolve(base: Path, entry: str) -> str:
    path = Path(entry)
    if path.is_absolute():
        return entry
    return str((base / path).resolve())


def load_config(path: Path) -> RunConfig:
    """Load and validate a run config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")

    config = RunConfig(**_expand(raw))

    # Resolve relative paths relative to config file location
    config.suites = [
        _resolve(config_dir, s) if _is_path_like(s) else s for s in config.suites
    ]
    if config.output_dir is not None:
        config.output_dir = _resolve(config_dir, config.output_dir)
    config.watch.paths = [_resolve(config_dir, p) for p in config.watch.paths]

    return config
