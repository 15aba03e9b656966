"""Tests for the lister and URL extractor in gist2repo.retrieval.gists.

Run with coverage:
    pytest tests/test_gists.py --maxfail=1 -v --cov=gist2repo.retrieval.gists --cov-report=term-missing
"""

from typing import Any, Dict
from unittest.mock import MagicMock

import requests

from gist2repo.channels import Channel
from gist2repo.errors import GistListError
from gist2repo.retrieval import gists

API = "https://api.github.com/users/octocat/gists"


def _make_resp(status: int = 200, payload: Any = None, headers: Dict[str, str] | None = None):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = headers or {}
    resp.json.return_value = payload if payload is not None else []
    resp.text = str(payload)
    return resp


def _links(next_page: int, last_page: int) -> Dict[str, str]:
    return {
        "Link": f'<{API}?per_page=100&page={next_page}>; rel="next", '
                f'<{API}?per_page=100&page={last_page}>; rel="last"'
    }


def _last_page_links() -> Dict[str, str]:
    return {"Link": f'<{API}?per_page=100&page=1>; rel="first"'}


def _gist(gist_id: str) -> Dict[str, str]:
    return {"id": gist_id, "git_pull_url": f"https://gist.github.com/{gist_id}.git"}


def _drain(gist_ch, err_ch):
    return list(gist_ch), list(err_ch)


def test_lister_walks_every_page_in_order():
    session = MagicMock()
    session.get.side_effect = [
        _make_resp(200, [_gist("a"), _gist("b")], _links(2, 3)),
        _make_resp(200, [_gist("c")], _links(3, 3)),
        _make_resp(200, [_gist("d"), _gist("e")], _last_page_links()),
    ]
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert [g["id"] for g in listed] == ["a", "b", "c", "d", "e"]
    assert errors == []
    pages = [call.kwargs["params"].get("page") for call in session.get.call_args_list]
    assert pages == [None, 2, 3]
    assert session.get.call_args_list[0].args[0] == API


def test_lister_single_page_without_link_header():
    session = MagicMock()
    session.get.return_value = _make_resp(200, [_gist("a"), _gist("b")])
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert len(listed) == 2
    assert errors == []
    assert session.get.call_count == 1


def test_lister_empty_account():
    session = MagicMock()
    session.get.return_value = _make_resp(200, [])
    assert _drain(*gists.list_gists(session, "octocat")) == ([], [])


def test_lister_failure_keeps_earlier_pages_and_reports_once():
    session = MagicMock()
    session.get.side_effect = [
        _make_resp(200, [_gist("a"), _gist("b")], _links(2, 3)),
        _make_resp(500, {"message": "boom"}),
        _make_resp(200, [_gist("never")], _last_page_links()),
    ]
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert [g["id"] for g in listed] == ["a", "b"]
    assert len(errors) == 1
    assert isinstance(errors[0], GistListError)
    assert errors[0].details == {"user": "octocat", "page": 2}
    assert "boom" in str(errors[0])
    assert session.get.call_count == 2


def test_lister_reports_transport_errors():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("offline")
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert listed == []
    assert len(errors) == 1
    assert "offline" in str(errors[0])
    assert str(errors[0]).startswith("[list]")


def test_lister_rejects_non_list_payload():
    session = MagicMock()
    session.get.return_value = _make_resp(200, {"message": "odd"})
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert listed == []
    assert len(errors) == 1


def test_lister_stops_when_next_page_exceeds_last_page():
    session = MagicMock()
    session.get.side_effect = [
        _make_resp(200, [_gist("a")], _links(4, 3)),
        _make_resp(200, [_gist("never")], _last_page_links()),
    ]
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert [g["id"] for g in listed] == ["a"]
    assert errors == []
    assert session.get.call_count == 1


def test_lister_stops_when_next_page_has_no_last_page():
    session = MagicMock()
    session.get.side_effect = [
        _make_resp(200, [_gist("a")], {"Link": f'<{API}?per_page=100&page=2>; rel="next"'}),
        _make_resp(200, [_gist("never")], _last_page_links()),
    ]
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert [g["id"] for g in listed] == ["a"]
    assert errors == []
    assert session.get.call_count == 1


def test_lister_reports_unexpected_page_errors_once():
    session = MagicMock()
    session.get.side_effect = [
        _make_resp(200, [_gist("a")], _links(2, 2)),
        RuntimeError("decoder crashed"),
    ]
    listed, errors = _drain(*gists.list_gists(session, "octocat"))
    assert [g["id"] for g in listed] == ["a"]
    assert len(errors) == 1
    assert isinstance(errors[0], GistListError)
    assert "decoder crashed" in str(errors[0])
    assert errors[0].details["page"] == 2


def test_clone_url_extraction():
    assert gists.clone_url(_gist("abc")) == "https://gist.github.com/abc.git"
    assert gists.clone_url({"id": "x"}) == ""
    assert gists.clone_url(None) == ""


def test_gist_clone_urls_maps_every_gist_and_closes():
    source = Channel()
    for gist_id in ("a", "b", "c"):
        source.send(_gist(gist_id))
    source.close()
    urls = list(gists.gist_clone_urls(source))
    assert urls == [f"https://gist.github.com/{g}.git" for g in ("a", "b", "c")]
