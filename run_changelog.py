"""Convenience shim to run the changelog routine for a lifecycle release."""

from __future__ import annotations

from src.changelog.runner import main


if __name__ == "__main__":
    main()
