"""The configuration record handed to a changelog routine."""

from __future__ import annotations

from dataclasses import dataclass

from .core import ActionsCore
from .http_client import GitHubClient


@dataclass(frozen=True)
class ChangelogContext:
    """Everything a changelog routine needs for a single release."""

    logger: ActionsCore
    client: GitHubClient
    repository: str
    version: str

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repository.split("/", 1)[-1]


__all__ = ["ChangelogContext"]
