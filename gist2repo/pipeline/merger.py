"""Sequential merger stage: fold each clone's history into the destination repository."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from gist2repo.channels import Channel, start_stage
from gist2repo.errors import MergeError

from .config import MERGE_BRANCH, MERGE_MESSAGE
from .git import GitRunner, current_branch, repo_path_to_name, run_git


class _StepFailed(Exception):
    """Internal signal: a merge step failed and was already reported."""


@contextmanager
def remote_link(dst_repo: str | Path, name: str, path: str,
                git: GitRunner, errors: Channel[Exception]) -> Iterator[str]:
    """Register ``path`` as remote ``name`` in ``dst_repo`` and remove it on exit.

    A failed registration is reported and raises _StepFailed without a removal.
    """
    try:
        git("remote", "add", name, path, cwd=dst_repo)
    except Exception as exc:
        errors.send(MergeError(path, "remote add", exc))
        raise _StepFailed() from exc
    try:
        yield name
    finally:
        try:
            git("remote", "remove", name, cwd=dst_repo)
        except Exception as exc:
            errors.send(MergeError(path, "remote remove", exc))


def _step(step: str, path: str, errors: Channel[Exception], git: GitRunner,
          *args: str, cwd: str | Path) -> str:
    try:
        return git(*args, cwd=cwd)
    except Exception as exc:
        errors.send(MergeError(path, step, exc))
        raise _StepFailed() from exc


def merge_one(dst_repo: str | Path, path: str, errors: Channel[Exception], *,
              git: GitRunner = run_git, branch: str = MERGE_BRANCH,
              message: str = MERGE_MESSAGE) -> bool:
    """Run the add/fetch/merge/remove sequence for one clone.

    The first failing step is reported and skips the remaining fetch/merge
    steps; the remote is removed whenever it was added. Returns True when the
    merge went through.
    """
    name = repo_path_to_name(path)
    try:
        with remote_link(dst_repo, name, path, git, errors):
            _step("fetch", path, errors, git, "fetch", name, cwd=dst_repo)
            source_branch = branch
            if not source_branch:
                try:
                    source_branch = current_branch(path, git)
                except Exception as exc:
                    errors.send(MergeError(path, "detect branch", exc))
                    raise _StepFailed() from exc
            _step(
                "merge", path, errors, git,
                "merge", "--allow-unrelated-histories", "-m", message, f"{name}/{source_branch}",
                cwd=dst_repo,
            )
    except _StepFailed:
        return False
    return True


def _merge_all(dst_repo: str | Path, paths: Channel[str], git: GitRunner, branch: str,
               message: str, errors: Channel[Exception]) -> None:
    try:
        for path in paths:
            if merge_one(dst_repo, path, errors, git=git, branch=branch, message=message):
                print(f"[info] merged {path}")
    finally:
        errors.close()


def merge_repos(dst_repo: str | Path, paths: Channel[str], *,
                git: GitRunner = run_git, branch: str = MERGE_BRANCH,
                message: str = MERGE_MESSAGE) -> Channel[Exception]:
    """Start the merger; returns its error channel.

    Paths are merged one at a time in arrival order, with every git command
    run inside ``dst_repo``. The channel closes after the last path.
    """
    errors: Channel[Exception] = Channel()
    start_stage(_merge_all, dst_repo, paths, git, branch, message, errors, name="merge-repos")
    return errors


__all__ = ["remote_link", "merge_one", "merge_repos"]
