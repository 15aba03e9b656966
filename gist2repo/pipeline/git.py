"""Thin wrapper around the git command line."""

from __future__ import annotations

import posixpath
import subprocess
from pathlib import Path
from typing import Callable, Optional

from gist2repo.errors import GitCommandError

from .config import GIT_BINARY

GitRunner = Callable[..., str]


def run_git(*args: str, cwd: Optional[str | Path] = None) -> str:
    """Run ``git <args>`` and return its combined stdout/stderr.

    Raises GitCommandError carrying the combined output when git exits non-zero.
    """
    result = subprocess.run(
        [GIT_BINARY, *args],
        cwd=str(cwd) if cwd else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stdout or "")
    return result.stdout or ""


def repo_path_to_name(repo: str) -> str:
    """Directory/remote name for a clone URL or path: last segment minus ``.git``."""
    base = posixpath.basename(repo.replace("\\", "/").rstrip("/"))
    if ":" in base:
        base = base.rsplit(":", 1)[1]
    if base.endswith(".git"):
        base = base[: -len(".git")]
    return base


def current_branch(repo_path: str | Path, git: GitRunner = run_git) -> str:
    return git("rev-parse", "--abbrev-ref", "HEAD", cwd=repo_path).strip()


__all__ = ["GitRunner", "run_git", "repo_path_to_name", "current_branch"]
