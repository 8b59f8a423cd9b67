"""Derive a semver-ish version string from `git describe`."""

from __future__ import annotations

import re
import subprocess
from typing import Optional

DESCRIBE_RE = re.compile(r"v(?P<version>.+)-(?P<commits>.+)-g(?P<sha>.+)")
FALLBACK_VERSION = "0.0.0"


def parse_describe(output: str) -> Optional[str]:
    """Turn `v0.9.1-4-gabc123` into `0.9.1-4+abc123`; None when it does not match."""
    match = DESCRIBE_RE.search(output.strip())
    if not match:
        return None
    return f"{match.group('version')}-{match.group('commits')}+{match.group('sha')}"


def describe_version(cwd: Optional[str] = None) -> str:
    """Describe HEAD relative to the latest tag, falling back to 0.0.0."""
    try:
        result = subprocess.run(
            ["git", "describe", "--tags"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return FALLBACK_VERSION
    return parse_describe(result.stdout) or FALLBACK_VERSION


__all__ = ["DESCRIBE_RE", "FALLBACK_VERSION", "parse_describe", "describe_version"]
