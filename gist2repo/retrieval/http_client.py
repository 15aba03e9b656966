"""HTTP helpers for single-shot GitHub REST calls and Link-header pagination."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests

from gist2repo.errors import GitHubAPIError

from .config import REQUEST_TIMEOUT, USER_AGENT


def build_session(token: Optional[str]) -> requests.Session:
    """Create a session carrying the GitHub v3 headers and the token, if any."""
    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
    )
    if token:
        session.headers["Authorization"] = f"token {token}"
    return session


def error_message(resp: requests.Response) -> str:
    """Short human-readable reason extracted from a GitHub error response."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        return str(body)[:300]
    return str(body.get("message") or body.get("error") or body.get("text") or "")


def _page_number(url: str) -> int:
    values = parse_qs(urlparse(url).query).get("page") or ["0"]
    try:
        return int(values[0])
    except ValueError:
        return 0


def parse_page_links(link_header: Optional[str]) -> Tuple[int, int]:
    """Return ``(next_page, last_page)`` from a Link header; 0 when absent."""
    next_page, last_page = 0, 0
    for link in requests.utils.parse_header_links(link_header or ""):
        rel = link.get("rel")
        if rel == "next":
            next_page = _page_number(link.get("url", ""))
        elif rel == "last":
            last_page = _page_number(link.get("url", ""))
    return next_page, last_page


def get_page(session: requests.Session, url: str,
             params: Optional[Dict[str, Any]] = None) -> Tuple[Any, requests.Response]:
    """Perform one GET and return the decoded JSON body with the response.

    No retries: a transport error propagates as requests.RequestException and
    a non-2xx status raises GitHubAPIError.
    """
    resp = session.get(url, params=params, timeout=REQUEST_TIMEOUT)
    if not 200 <= resp.status_code < 300:
        raise GitHubAPIError(resp.status_code, url, error_message(resp))
    return resp.json(), resp


__all__ = [
    "build_session",
    "error_message",
    "parse_page_links",
    "get_page",
]
