"""Accessors for required environment configuration."""

from __future__ import annotations

import os
import sys


def must_get_env_var(name: str) -> str:
    """Return the value of `name`, exiting with status 1 when unset or empty."""
    value = os.environ.get(name)
    if not value:
        print(f"'{name}' env var must be set.", file=sys.stderr)
        sys.exit(1)
    return value


__all__ = ["must_get_env_var"]
