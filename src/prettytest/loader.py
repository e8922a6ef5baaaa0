"""Import suite classes from source files or dotted module names."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

from prettytest.suite import Suite

logger = logging.getLogger("prettytest")


def import_suite_module(entry: str) -> ModuleType:
    """Import ``entry`` as a file path (``*.py`` or containing ``/``) or module name."""
    if not (entry.endswith(".py") or "/" in entry):
        return importlib.import_module(entry)

    path = Path(entry).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Suite file not found: {entry}")

    module_name = path.stem
    existing = sys.modules.get(module_name)
    if existing is not None:
        existing_file = getattr(existing, "__file__", None)
        if existing_file and Path(existing_file).resolve() == path:
            return existing
        raise ImportError(
            f"Cannot import {path}: module name {module_name!r} is already "
            f"taken by {existing_file or 'a built-in module'}"
        )

    # sibling modules of the suite file must be importable from it
    parent = str(path.parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module


def suite_classes(module: ModuleType) -> list[type[Suite]]:
    """Suite subclasses defined in ``module`` that register at least one test."""
    found = []
    for obj in vars(module).values():
        if not (isinstance(obj, type) and issubclass(obj, Suite)) or obj is Suite:
            continue
        if obj.__module__ != module.__name__:
            continue
        if not obj.registry.tests:
            logger.debug(f"Skipping {obj.__qualname__}: no tests registered")
            continue
        found.append(obj)
    return found


def load_suites(entries: list[str]) -> list[Suite]:
    """Instantiate every suite found in ``entries``, in the order given."""
    suites: list[Suite] = []
    for entry in entries:
        module = import_suite_module(entry)
        classes = suite_classes(module)
        logger.debug(f"Loaded {len(classes)} suite(s) from {entry}")
        suites.extend(cls() for cls in classes)
    return suites
