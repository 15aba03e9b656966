"""Constants for talking to the GitHub gist listing API."""

from __future__ import annotations

import os

USER_AGENT = "gist2repo/1.0"
BASE_URL = os.getenv("SYNC2REPO_API_URL", "https://api.github.com").rstrip("/")
PER_PAGE = int(os.getenv("SYNC2REPO_PER_PAGE", "100"))
REQUEST_TIMEOUT = int(os.getenv("SYNC2REPO_REQUEST_TIMEOUT", "90"))

__all__ = [
    "USER_AGENT",
    "BASE_URL",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
]
