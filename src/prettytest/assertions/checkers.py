"""Pluggable checkers for ``Suite.check``.

A checker knows its name, the names of the values it inspects and how to
decide whether they match. The first value is always the obtained one::

    self.check(len(stack), equals, 3)
    self.check(reply, matches, r"^HTTP/1\\.1 200")
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import Any, Callable, Sequence, Union


@dataclass(frozen=True)
class Checker:
    name: str
    params: tuple[str, ...]
    func: Callable[..., Any]

    def check(self, params: Sequence[Any]) -> bool:
        return bool(self.func(*params))


CheckerLike = Union[Checker, Callable[..., Any]]


def as_checker(checker: CheckerLike) -> Checker:
    """Wrap a plain callable, naming its params after its signature."""
    if isinstance(checker, Checker):
        return checker
    if not callable(checker):
        raise TypeError(f"Expected a Checker or a callable, got {type(checker).__name__}")
    name = getattr(checker, "__name__", type(checker).__name__)
    try:
        params = tuple(
            p.name
            for p in inspect.signature(checker).parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        )
    except (TypeError, ValueError):
        params = ("obtained",)
    return Checker(name=name, params=params, func=checker)


def checker_message(checker: Checker, params: Sequence[Any]) -> str:
    details = " ".join(f"{name} {value!r}" for name, value in zip(checker.params, params))
    return f"{checker.name} checker failed: {details}".rstrip()


equals = Checker("Equals", ("obtained", "expected"), lambda obtained, expected: obtained == expected)
is_none = Checker("IsNil", ("value",), lambda value: value is None)
not_none = Checker("NotNil", ("value",), lambda value: value is not None)
has_len = Checker("HasLen", ("obtained", "n"), lambda obtained, n: len(obtained) == n)
matches = Checker(
    "Matches",
    ("value", "regex"),
    lambda value, regex: isinstance(value, str) and re.fullmatch(regex, value) is not None,
)
is_instance = Checker(
    "IsInstance", ("obtained", "cls"), lambda obtained, cls: isinstance(obtained, cls)
)
