"""Central configuration constants for the lifecycle changelog runner."""

from __future__ import annotations

import os

REPOSITORY = "buildpacks/lifecycle"
TOKEN_ENV_VAR = "GITHUB_TOKEN"
VERSION_ENV_VAR = "LIFECYCLE_VERSION"
SCRIPT_ENV_VAR = "CHANGELOG_SCRIPT"
DEFAULT_SCRIPT = "index.py"
ROUTINE_NAME = "main"

USER_AGENT = "lifecycle-changelog/1.0"
BASE_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GRAPHQL_URL = os.getenv("GITHUB_GRAPHQL_URL", "https://api.github.com/graphql")
PER_PAGE = 100
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "90"))
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "6"))
BACKOFF_BASE_SEC = 2
MAX_WAIT_ON_403 = int(os.getenv("MAX_WAIT_ON_403", "180"))

__all__ = [
    "REPOSITORY",
    "TOKEN_ENV_VAR",
    "VERSION_ENV_VAR",
    "SCRIPT_ENV_VAR",
    "DEFAULT_SCRIPT",
    "ROUTINE_NAME",
    "USER_AGENT",
    "BASE_URL",
    "GRAPHQL_URL",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
    "MAX_RETRIES",
    "BACKOFF_BASE_SEC",
    "MAX_WAIT_ON_403",
]
