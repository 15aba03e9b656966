"""Bounded cloner stage: clone every incoming URL with a fixed concurrency ceiling."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Tuple

from gist2repo.channels import Channel, start_stage
from gist2repo.errors import CloneError

from .config import CLONE_CONCURRENCY
from .git import GitRunner, repo_path_to_name, run_git


def clone_one(url: str, base_dir: str | Path, git: GitRunner = run_git) -> str:
    """Clone ``url`` into ``base_dir`` and return the clone's path."""
    name = repo_path_to_name(url)
    if not name:
        raise ValueError(f"cannot derive a clone directory name from {url!r}")
    path = os.path.join(str(base_dir), name)
    git("clone", url, path)
    return path


def _clone_task(url: str, base_dir: str | Path, git: GitRunner,
                paths: Channel[str], errors: Channel[Exception]) -> None:
    try:
        path = clone_one(url, base_dir, git)
    except Exception as exc:
        errors.send(CloneError(url, exc))
        return
    paths.send(path)


def _clone_all(base_dir: str | Path, urls: Channel[str], concurrency: int, git: GitRunner,
               paths: Channel[str], errors: Channel[Exception]) -> None:
    try:
        # Pool workers are the admission gate; shutdown(wait=True) joins every task.
        with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="clone") as pool:
            for url in urls:
                pool.submit(_clone_task, url, base_dir, git, paths, errors)
    finally:
        paths.close()
        errors.close()


def clone_repos(base_dir: str | Path, urls: Channel[str], *,
                concurrency: int = CLONE_CONCURRENCY,
                git: GitRunner = run_git) -> Tuple[Channel[str], Channel[Exception]]:
    """Start the cloner; returns the channel of cloned paths and its error channel.

    At most ``concurrency`` clones run at once. Paths arrive in completion
    order and only for successful clones; each failure is reported once and
    never retried. Both channels close after the last clone finished.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")
    paths: Channel[str] = Channel(maxsize=1)
    errors: Channel[Exception] = Channel()
    start_stage(_clone_all, base_dir, urls, concurrency, git, paths, errors, name="clone-repos")
    return paths, errors


__all__ = ["clone_one", "clone_repos"]
