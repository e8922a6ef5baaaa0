"""Suite base class, registration decorators and the assertion vocabulary.

A suite declares its tests and hooks explicitly::

    class CalculatorSuite(Suite):
        @before
        def setup(self):
            self.calc = Calculator()

        @test
        def test_addition(self):
            self.equal(4, self.calc.add(2, 2))

The registration table is built once, when the class is created, in
declaration order. The runner binds the currently executing test to the suite
before invoking any hook or test method, so every primitive knows which test
it belongs to without inspecting the call stack.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, ClassVar, TypeVar

from prettytest.assertions.base import Assertion
from prettytest.assertions.checkers import CheckerLike, as_checker, checker_message
from prettytest.assertions.checks import (
    check_equal,
    check_false,
    check_none,
    check_not_equal,
    check_not_none,
    check_path,
    check_true,
)
from prettytest.caller import resolve_caller
from prettytest.exceptions import SuiteDefinitionError, UnboundSuiteError
from prettytest.results import ErrorLog, Status, TestFunc

F = TypeVar("F", bound=Callable[..., Any])

# resolve_caller -> Suite._record -> primitive -> test body
_CALLER_DEPTH = 2

_ROLE_ATTR = "__prettytest_role__"


class Role(str, Enum):
    TEST = "test"
    BEFORE_ALL = "before_all"
    AFTER_ALL = "after_all"
    BEFORE = "before"
    AFTER = "after"


HOOK_ROLES = (Role.BEFORE_ALL, Role.AFTER_ALL, Role.BEFORE, Role.AFTER)


def _mark(func: F, role: Role) -> F:
    setattr(func, _ROLE_ATTR, role)
    return func


def test(func: F) -> F:
    """Register a suite method as a test."""
    return _mark(func, Role.TEST)


# the decorator itself must not be collected by pytest when imported
test.__test__ = False  # type: ignore[attr-defined]


def before_all(func: F) -> F:
    """Run once per suite, before any test."""
    return _mark(func, Role.BEFORE_ALL)


def after_all(func: F) -> F:
    """Run once per suite, after every test."""
    return _mark(func, Role.AFTER_ALL)


def before(func: F) -> F:
    """Run immediately before each test."""
    return _mark(func, Role.BEFORE)


def after(func: F) -> F:
    """Run immediately after each test."""
    return _mark(func, Role.AFTER)


@dataclass
class Registry:
    """Test names in execution order and the method bound to each hook role."""

    tests: list[str] = field(default_factory=list)
    hooks: dict[Role, str] = field(default_factory=dict)

    def hook(self, role: Role) -> str | None:
        return self.hooks.get(role)

    @classmethod
    def build(cls, suite_cls: type) -> Registry:
        tests: dict[str, None] = {}
        hooks: dict[Role, str] = {}

        for klass in reversed(suite_cls.__mro__):
            if klass is object:
                continue
            declared: dict[Role, str] = {}
            for name, attr in vars(klass).items():
                role = getattr(attr, _ROLE_ATTR, None)
                if role is None:
                    # a plain override unregisters whatever it replaces
                    if callable(attr):
                        tests.pop(name, None)
                        hooks = {r: n for r, n in hooks.items() if n != name}
                    continue
                if role is Role.TEST:
                    hooks = {r: n for r, n in hooks.items() if n != name}
                    tests.setdefault(name, None)
                    continue
                if role in declared:
                    raise SuiteDefinitionError(
                        f"{klass.__qualname__} binds both {declared[role]!r} and "
                        f"{name!r} to the {role.value} hook"
                    )
                declared[role] = name
                tests.pop(name, None)
                hooks[role] = name

        return cls(tests=list(tests), hooks=hooks)


class Suite:
    """Base class for test suites.

    Subclasses that define ``__init__`` must call ``super().__init__()``.
    """

    description: ClassVar[str | None] = None
    registry: ClassVar[Registry] = Registry()

    _test_func: TestFunc | None = None
    _error_log: ErrorLog | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.registry = Registry.build(cls)

    def __init__(self) -> None:
        self.reset()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def package(self) -> str:
        return type(self).__module__

    # -- capability set used by the runner ---------------------------------

    def reset(self) -> None:
        """Forget every TestFunc recorded by a previous run."""
        self.tests: dict[str, TestFunc] = {}
        self.unbind()

    def lookup(self, name: str, hook: bool = False) -> TestFunc:
        """Return the TestFunc for ``name``, creating it on first use."""
        key = f"{self.name}.{name}"
        test_func = self.tests.get(key)
        if test_func is None:
            test_func = TestFunc(name=name, suite_name=self.name, hook=hook)
            self.tests[key] = test_func
        return test_func

    def bind(self, test_func: TestFunc, error_log: ErrorLog) -> None:
        self._test_func = test_func
        self._error_log = error_log

    def unbind(self) -> None:
        self._test_func = None
        self._error_log = None

    @property
    def current(self) -> TestFunc:
        if self._test_func is None or self._error_log is None:
            raise UnboundSuiteError(
                f"No test is bound to suite {self.name}; "
                "assertions can only be made while the suite is being run"
            )
        return self._test_func

    @property
    def status(self) -> Status:
        return self.current.status

    def record_failure(self, filename: str, line: int, message: str) -> Assertion:
        """Record a failed assertion at an explicit source location."""
        test_func = self.current
        assertion = test_func.record(
            Assertion(
                test_name=test_func.name,
                filename=filename,
                line=line,
                message=message,
            )
        )
        self._fail(test_func, assertion)
        return assertion

    def _fail(self, test_func: TestFunc, assertion: Assertion) -> None:
        assertion.passed = False
        assert self._error_log is not None
        self._error_log.append(self.name, test_func, assertion)

    def _record(self, result: tuple[bool, str], msg: str | None) -> Assertion:
        test_func = self.current
        caller = resolve_caller(_CALLER_DEPTH)
        passed, default_message = result
        assertion = test_func.record(
            Assertion(
                test_name=test_func.name,
                filename=caller.filename,
                line=caller.line,
                message=msg or default_message,
            )
        )
        if not passed:
            self._fail(test_func, assertion)
        return assertion

    # -- assertion vocabulary ------------------------------------------------

    def equal(self, expected: Any, actual: Any, msg: str | None = None) -> Assertion:
        """Assert that the expected value equals the actual value."""
        return self._record(check_equal(expected, actual), msg)

    def not_equal(self, expected: Any, actual: Any, msg: str | None = None) -> Assertion:
        """Assert that the expected value differs from the actual value."""
        return self._record(check_not_equal(expected, actual), msg)

    def true(self, value: Any, msg: str | None = None) -> Assertion:
        return self._record(check_true(value), msg)

    def false(self, value: Any, msg: str | None = None) -> Assertion:
        return self._record(check_false(value), msg)

    def path(self, path: str | Path, msg: str | None = None) -> Assertion:
        """Assert that a filesystem entry exists at ``path``."""
        return self._record(check_path(path), msg)

    def is_none(self, value: Any, msg: str | None = None) -> Assertion:
        return self._record(check_none(value), msg)

    def is_not_none(self, value: Any, msg: str | None = None) -> Assertion:
        return self._record(check_not_none(value), msg)

    def check(
        self, obtained: Any, checker: CheckerLike, *args: Any, msg: str | None = None
    ) -> Assertion:
        """Assert that ``checker`` accepts ``obtained`` and the extra ``args``.

        ``checker`` is a :class:`~prettytest.assertions.checkers.Checker` or any
        callable taking the same values and returning a truthy result.
        """
        resolved = as_checker(checker)
        params = (obtained, *args)
        passed = resolved.check(params)
        return self._record((passed, checker_message(resolved, params)), msg)

    def not_(self, outcome: Assertion, msg: str | None = None) -> Assertion:
        """Assert that a previous assertion failed.

        When it did, that failure is consumed: it stops counting against the
        test and its error log entry is removed. When it did not, this
        assertion fails instead.
        """
        if not isinstance(outcome, Assertion):
            raise TypeError(
                f"not_() expects the Assertion returned by another primitive, "
                f"got {type(outcome).__name__}"
            )
        if not any(a is outcome for a in self.current.assertions):
            raise ValueError(
                f"not_() expects an assertion made by {self.current.qualified_name}, "
                f"got one made by {outcome.test_name!r}"
            )
        assertion = self._record(
            (not outcome.passed, "Expected assertion to fail"), msg
        )
        if assertion.passed:
            outcome.negated = True
            assert self._error_log is not None
            self._error_log.discard(outcome)
        return assertion

    def error(self, *args: Any) -> Assertion:
        """Record an unconditional failure with the given message."""
        return self._record((False, " ".join(str(a) for a in args)), None)

    def pending(self) -> None:
        """Mark the current test as pending, whatever its assertions say."""
        self.current.pending = True

    def must_fail(self) -> None:
        """Declare that the current test is expected to end in failure."""
        self.current.must_fail = True
