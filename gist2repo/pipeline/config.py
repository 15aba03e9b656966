"""Runtime settings for the gist-to-repository sync."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import List, Optional

from gist2repo.secrets import load_local_secrets, secret_token

TOKEN_ENV_NAME = "SYNC2REPO_TOKEN"
CLONE_CONCURRENCY = int(os.getenv("SYNC2REPO_CLONE_CONCURRENCY", "30"))
MERGE_MESSAGE = "move gists to repo"
MERGE_BRANCH = os.getenv("SYNC2REPO_MERGE_BRANCH", "")  # "" = use the clone's branch
GIT_BINARY = os.getenv("SYNC2REPO_GIT", "git")


@dataclass(frozen=True)
class SyncSettings:
    """Resolved, immutable settings handed to the pipeline."""

    token: str
    repo_path: str
    user: str
    concurrency: int = CLONE_CONCURRENCY
    merge_branch: str = MERGE_BRANCH

    def missing(self) -> List[str]:
        """Names of the mandatory settings that are still empty."""
        fields = (("token", self.token), ("repo", self.repo_path), ("user", self.user))
        return [name for name, value in fields if not value]


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the sync entry point."""

    parser = argparse.ArgumentParser(
        description="Merge the history of every gist of a user into one git repository.",
    )
    parser.add_argument("--token", default="", help="OAuth token https://github.com/settings/tokens")
    parser.add_argument("--repo", default="", help="path to a destination repository on FS")
    parser.add_argument("--user", default="", help="name of user of source gists")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=CLONE_CONCURRENCY,
        help="maximum number of simultaneous clones",
    )
    parser.add_argument(
        "--branch",
        default=MERGE_BRANCH,
        help="branch of each gist to merge (defaults to the cloned branch)",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    return build_arg_parser().parse_args(argv)


def resolve_token(flag_value: str) -> str:
    """Pick the credential: explicit flag, then environment, then local secrets."""
    if flag_value:
        return flag_value
    env_value = os.getenv(TOKEN_ENV_NAME, "")
    if env_value:
        return env_value
    return secret_token(load_local_secrets())


def resolve_settings(args: Optional[argparse.Namespace] = None) -> SyncSettings:
    args = args or parse_args()
    if args.concurrency < 1:
        raise ValueError(f"--concurrency must be at least 1, got {args.concurrency}")
    return SyncSettings(
        token=resolve_token(args.token),
        repo_path=args.repo,
        user=args.user,
        concurrency=int(args.concurrency),
        merge_branch=args.branch or "",
    )


__all__ = [
    "TOKEN_ENV_NAME",
    "CLONE_CONCURRENCY",
    "MERGE_MESSAGE",
    "MERGE_BRANCH",
    "GIT_BINARY",
    "SyncSettings",
    "build_arg_parser",
    "parse_args",
    "resolve_token",
    "resolve_settings",
]
