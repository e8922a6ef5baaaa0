"""Source attribution for assertion primitives."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from prettytest.exceptions import CallerResolutionError


@dataclass(frozen=True)
class CallerInfo:
    name: str
    filename: str
    line: int


def resolve_caller(skip: int) -> CallerInfo:
    """Return the identity of the frame ``skip`` levels above the caller.

    ``skip=0`` is the function that called ``resolve_caller``, ``skip=1`` its
    caller, and so on.

    Raises CallerResolutionError when the stack is not that deep.
    """
    if skip < 0:
        raise CallerResolutionError(f"Invalid stack depth: {skip}")
    try:
        frame = sys._getframe(skip + 1)
    except ValueError as e:
        raise CallerResolutionError(
            f"An error occurred while retrieving caller info at depth {skip}"
        ) from e

    code = frame.f_code
    # co_qualname only exists on 3.11+
    name = getattr(code, "co_qualname", code.co_name)
    return CallerInfo(name=name, filename=code.co_filename, line=frame.f_lineno)
