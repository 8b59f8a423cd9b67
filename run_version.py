"""Print the version described by `git describe --tags`."""

from __future__ import annotations

from src.changelog.version import describe_version


if __name__ == "__main__":
    print(describe_version())
