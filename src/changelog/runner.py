"""Entry point that wires environment, GitHub client, and the changelog routine."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from .config import DEFAULT_SCRIPT, REPOSITORY, SCRIPT_ENV_VAR, TOKEN_ENV_VAR, VERSION_ENV_VAR
from .context import ChangelogContext
from .core import ActionsCore
from .env import must_get_env_var
from .http_client import GitHubClient
from .loader import RoutineLoadError, load_routine


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"Generate the changelog entry for a {REPOSITORY} release.",
    )
    parser.add_argument(
        "--script",
        default=os.getenv(SCRIPT_ENV_VAR) or DEFAULT_SCRIPT,
        help="path to the script whose main(context) builds the changelog",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""
    return build_arg_parser().parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Resolve configuration, then hand a ChangelogContext to the changelog routine."""
    args = parse_args(argv)
    token = must_get_env_var(TOKEN_ENV_VAR)
    version = must_get_env_var(VERSION_ENV_VAR)

    client = GitHubClient(token)
    try:
        routine = load_routine(args.script)
    except RoutineLoadError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        sys.exit(1)

    logger = ActionsCore()
    routine(
        ChangelogContext(
            logger=logger,
            client=client,
            repository=REPOSITORY,
            version=version,
        )
    )
    if logger.exit_code:
        sys.exit(logger.exit_code)


__all__ = ["build_arg_parser", "parse_args", "main"]
