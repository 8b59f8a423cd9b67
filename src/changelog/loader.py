"""Resolve and import the external changelog routine."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any, Callable

from .config import ROUTINE_NAME
from .context import ChangelogContext

Routine = Callable[[ChangelogContext], Any]


class RoutineLoadError(RuntimeError):
    """Raised when the changelog script cannot be imported or exposes no routine."""


def resolve_script_path(path: str | Path) -> Path:
    """Resolve `path` against the current working directory."""
    return Path(path).expanduser().resolve()


def load_routine(path: str | Path, attr: str = ROUTINE_NAME) -> Routine:
    """Import the script at `path` and return its routine callable."""
    script = resolve_script_path(path)
    if not script.is_file():
        raise RoutineLoadError(f"changelog script not found: {script}")

    spec = importlib.util.spec_from_file_location(f"changelog_script_{script.stem}", script)
    if spec is None or spec.loader is None:
        raise RoutineLoadError(f"cannot import changelog script: {script}")
    module = importlib.util.module_from_spec(spec)
    # sibling modules of the script must be importable while it executes
    sys.modules[spec.name] = module
    script_dir = str(script.parent)
    sys.path.insert(0, script_dir)
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(spec.name, None)
        raise
    finally:
        if script_dir in sys.path:
            sys.path.remove(script_dir)

    routine = getattr(module, attr, None)
    if not callable(routine):
        raise RoutineLoadError(f"{script} does not define a callable '{attr}'")
    return routine


__all__ = ["Routine", "RoutineLoadError", "resolve_script_path", "load_routine"]
