"""Exceptions reported by the sync pipeline stages."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class SyncError(Exception):
    """Base exception for every error a pipeline stage reports."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class GitHubAPIError(SyncError):
    """Raised when the GitHub API answers with a non-2xx status."""

    def __init__(self, status: int, url: str, message: str) -> None:
        super().__init__(
            f"HTTP {status} for {url}: {message}",
            details={"status": status, "url": url},
        )
        self.status = status
        self.url = url


class GitCommandError(SyncError):
    """Raised when a git invocation exits with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, output: str) -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"{output.strip()}: git {' '.join(self.args_list)} exited with status {returncode}",
            details={"args": self.args_list, "returncode": returncode},
        )


class GistListError(SyncError):
    def __init__(self, user: str, page: int, cause: Exception) -> None:
        super().__init__(
            f"listing gists of {user} (page {page or 1}): {cause}",
            stage="list",
            details={"user": user, "page": page},
        )
        self.__cause__ = cause


class CloneError(SyncError):
    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(f"{url}: {cause}", stage="clone", details={"url": url})
        self.url = url
        self.__cause__ = cause


class MergeError(SyncError):
    def __init__(self, path: str, step: str, cause: Exception) -> None:
        super().__init__(
            f"{path}: {step} failed: {cause}",
            stage="merge",
            details={"path": path, "step": step},
        )
        self.path = path
        self.step = step
        self.__cause__ = cause


__all__ = [
    "SyncError",
    "GitHubAPIError",
    "GitCommandError",
    "GistListError",
    "CloneError",
    "MergeError",
]
