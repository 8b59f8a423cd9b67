"""Logging and annotation handle handed to changelog scripts.

Messages are written as GitHub Actions workflow commands so that warnings and
errors surface as annotations on the workflow run. Outside of Actions they are
still readable console lines.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsCore:
    """Minimal port of the Actions toolkit `core` facility."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self.exit_code = 0

    @property
    def stream(self) -> TextIO:
        # follows the current sys.stdout
        return self._stream or sys.stdout

    def _command(self, command: str, message: str, **properties: Optional[str]) -> None:
        props = ",".join(
            f"{key}={escape_property(str(val))}" for key, val in properties.items() if val is not None
        )
        prefix = f"::{command} {props}::" if props else f"::{command}::"
        print(f"{prefix}{escape_data(str(message))}", file=self.stream)

    def debug(self, message: str) -> None:
        self._command("debug", message)

    def info(self, message: str) -> None:
        print(message, file=self.stream)

    def notice(self, message: str, title: Optional[str] = None) -> None:
        self._command("notice", message, title=title)

    def warning(self, message: str, title: Optional[str] = None) -> None:
        self._command("warning", message, title=title)

    def error(self, message: str, title: Optional[str] = None) -> None:
        self._command("error", message, title=title)

    def set_failed(self, message: str) -> None:
        """Report `message` as an error and mark the run as failed."""
        self.exit_code = 1
        self.error(message)

    def start_group(self, title: str) -> None:
        self._command("group", title)

    def end_group(self) -> None:
        self._command("endgroup", "")

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        self.start_group(title)
        try:
            yield
        finally:
            self.end_group()

    def set_output(self, name: str, value: str) -> None:
        """Expose a step output via $GITHUB_OUTPUT, or the legacy command when unset."""
        output_file = os.getenv("GITHUB_OUTPUT")
        if not output_file:
            self._command("set-output", value, name=name)
            return
        value = str(value)
        with open(output_file, "a", encoding="utf-8") as fh:
            if "\n" in value:
                delimiter = f"ghadelimiter_{os.urandom(8).hex()}"
                fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                fh.write(f"{name}={value}\n")

    def add_summary(self, markdown: str) -> bool:
        """Append markdown to the job summary; return False when no summary file is set."""
        summary = os.getenv("GITHUB_STEP_SUMMARY")
        if not summary:
            return False
        path = Path(summary)
        prefix = "\n" if path.exists() and path.stat().st_size > 0 else ""
        with path.open("a", encoding="utf-8") as fh:
            fh.write(prefix + markdown)
            if not markdown.endswith("\n"):
                fh.write("\n")
        return True


__all__ = ["ActionsCore", "escape_data", "escape_property"]
