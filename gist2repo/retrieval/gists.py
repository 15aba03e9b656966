"""Lister and URL extractor stages: walk a user's gists and map them to clone URLs."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import requests

from gist2repo.channels import Channel, start_stage
from gist2repo.errors import GistListError

from .config import BASE_URL, PER_PAGE
from .http_client import get_page, parse_page_links

Gist = Dict[str, Any]


def gists_url(user: str) -> str:
    return f"{BASE_URL}/users/{user}/gists"


def fetch_gist_page(session: requests.Session, user: str, page: int) -> Tuple[List[Gist], int, int]:
    """Fetch one listing page; returns the gists with the next and last page numbers."""
    params: Dict[str, Any] = {"per_page": PER_PAGE}
    if page:
        params["page"] = page
    batch, resp = get_page(session, gists_url(user), params)
    if not isinstance(batch, list):
        raise ValueError(f"expected a list of gists, got {type(batch).__name__}")
    next_page, last_page = parse_page_links(resp.headers.get("Link"))
    return batch, next_page, last_page


def _list_gists(session: requests.Session, user: str,
                gists: Channel[Gist], errors: Channel[Exception]) -> None:
    next_page, last_page = 0, 1
    try:
        while last_page != 0 and next_page <= last_page:
            page = next_page
            try:
                batch, next_page, last_page = fetch_gist_page(session, user, page)
            except Exception as exc:
                errors.send(GistListError(user, page, exc))
                break
            for gist in batch:
                gists.send(gist)
            if next_page == 0:
                break
    finally:
        errors.close()
        gists.close()


def list_gists(session: requests.Session, user: str) -> Tuple[Channel[Gist], Channel[Exception]]:
    """Start the lister; returns the gist channel and its error channel.

    Pages are requested in order until the Link header stops announcing a next
    page. The first failing page is reported once and ends the listing; gists
    already sent stay sent.
    """
    gists: Channel[Gist] = Channel(maxsize=1)
    errors: Channel[Exception] = Channel()
    start_stage(_list_gists, session, user, gists, errors, name="list-gists")
    return gists, errors


def clone_url(gist: Gist) -> str:
    if not isinstance(gist, dict):
        return ""
    return gist.get("git_pull_url") or ""


def gist_clone_urls(gists: Channel[Gist]) -> Channel[str]:
    """Map every gist to its clone URL on a dedicated thread."""
    urls: Channel[str] = Channel(maxsize=1)

    def extract() -> None:
        try:
            for gist in gists:
                urls.send(clone_url(gist))
        finally:
            urls.close()

    start_stage(extract, name="gist-urls")
    return urls


__all__ = [
    "Gist",
    "gists_url",
    "fetch_gist_page",
    "list_gists",
    "clone_url",
    "gist_clone_urls",
]
