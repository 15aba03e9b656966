"""Entry points for syncing a user's gists into one destination repository."""

from __future__ import annotations

import sys
import tempfile
from typing import List, NoReturn, Optional

from gist2repo.channels import merge_channels
from gist2repo.retrieval.gists import gist_clone_urls, list_gists
from gist2repo.retrieval.http_client import build_session

from .cloner import clone_repos
from .config import SyncSettings, parse_args, resolve_settings
from .git import run_git
from .merger import merge_repos


def fatal(message: str) -> NoReturn:
    print(f"[fatal] {message}", file=sys.stderr)
    sys.exit(1)


def run(settings: SyncSettings) -> int:
    """Run the list -> clone -> merge pipeline and return the number of errors.

    Stage errors are printed to stderr as they arrive and never abort the run.
    """
    try:
        repos_dir = tempfile.TemporaryDirectory(prefix="gist2repo-")
    except OSError as exc:
        fatal(f"Cannot create temp directory: {exc}")

    error_count = 0
    with repos_dir as base_dir:
        session = build_session(settings.token)
        gists, gists_errors = list_gists(session, settings.user)
        paths, clone_errors = clone_repos(
            base_dir,
            gist_clone_urls(gists),
            concurrency=settings.concurrency,
            git=run_git,
        )
        merge_errors = merge_repos(
            settings.repo_path,
            paths,
            git=run_git,
            branch=settings.merge_branch,
        )

        for err in merge_channels(gists_errors, clone_errors, merge_errors):
            error_count += 1
            print(f"[error] {err}", file=sys.stderr)

    return error_count


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point; exits non-zero only when the configuration is unusable."""
    args = parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ValueError as exc:
        fatal(str(exc))

    missing = settings.missing()
    if missing:
        fatal(f"One or more arguments have not been passed: {', '.join('--' + m for m in missing)}")

    print(f"[info] syncing gists of {settings.user} into {settings.repo_path}")
    errors = run(settings)
    print(f"[info] done with {errors} error(s)")


if __name__ == "__main__":
    main()
