from __future__ import annotations

import json
from typing import Dict, List, Tuple

import pytest

from networking.errors import StubNotFoundError
from networking.schemas import TransportResponse
from networking.transport import RequestsTransport, StubTransport, Transport


def _get(t: Transport, url: str) -> TransportResponse:
    return t.get(url, headers={}, timeout_s=1.0)


def test_stub_exact_match():
    t = StubTransport()
    t.stub("/stories", [{"id": 47333, "title": "Site Design: Aquest"}])

    resp = _get(t, "http://api.test/stories")
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/json"
    assert json.loads(resp.body) == [{"id": 47333, "title": "Site Design: Aquest"}]


def test_stub_ignores_query_string():
    t = StubTransport()
    t.stub("/search", {"hits": 0})
    assert json.loads(_get(t, "http://api.test/search?q=x").body) == {"hits": 0}


def test_stub_template_substitutes_placeholders():
    t = StubTransport()
    t.stub("/users/{userID}/companies/{companyID}", {"user": "{userID}", "company": ["{companyID}"], "n": 1})

    resp = _get(t, "http://api.test/users/10/companies/20")
    assert json.loads(resp.body) == {"user": "10", "company": ["20"], "n": 1}


def test_stub_template_requires_same_shape():
    t = StubTransport()
    t.stub("/users/{userID}", {"id": "{userID}"})
    t.stub("/{id}", {"id": "{id}"})

    with pytest.raises(StubNotFoundError):
        _get(t, "http://api.test/users/10/companies")
    with pytest.raises(StubNotFoundError):
        _get(t, "http://api.test/accounts/10")
    # Single segment templates never match.
    with pytest.raises(StubNotFoundError):
        _get(t, "http://api.test/10")


def test_stub_status_code_and_empty_response():
    t = StubTransport()
    t.stub("/missing", {"error": "nope"}, status_code=404)
    t.stub("/empty", None, status_code=204)

    assert _get(t, "http://api.test/missing").status_code == 404
    empty = _get(t, "http://api.test/empty")
    assert empty.status_code == 204
    assert empty.body == b""


def test_stub_records_requests_and_resets():
    t = StubTransport()
    t.stub("/a", {"ok": True})
    _get(t, "http://api.test/a")
    assert t.requests_made == ["http://api.test/a"]

    t.reset()
    assert t.requests_made == []
    with pytest.raises(StubNotFoundError):
        _get(t, "http://api.test/a")


def test_stub_falls_back_when_unmatched():
    class _Fallback(Transport):
        def __init__(self) -> None:
            self.urls: List[str] = []

        def get(self, url, *, headers, timeout_s, params=None):
            self.urls.append(url)
            return TransportResponse(status_code=200, body=b'{"real": true}')

    fallback = _Fallback()
    t = StubTransport(fallback=fallback)
    t.stub("/stubbed", {"real": False})

    assert json.loads(_get(t, "http://api.test/stubbed").body) == {"real": False}
    assert json.loads(_get(t, "http://api.test/other").body) == {"real": True}
    assert fallback.urls == ["http://api.test/other"]


def test_requests_transport_uses_requests_get(monkeypatch):
    calls: List[Tuple[str, Dict[str, str], Dict[str, str], float]] = []

    class _Resp:
        status_code = 201
        headers = {"Content-Type": "application/json"}
        content = b'{"ok": true}'

    def fake_get(url: str, *, params: Dict[str, str], headers: Dict[str, str], timeout: float):
        calls.append((url, params, headers, timeout))
        return _Resp()

    import networking.transport as mod

    monkeypatch.setattr(mod.requests, "get", fake_get)

    resp = RequestsTransport().get(
        "http://api.test/x",
        headers={"Accept": "application/json"},
        timeout_s=3.0,
        params={"a": "1"},
    )
    assert calls == [("http://api.test/x", {"a": "1"}, {"Accept": "application/json"}, 3.0)]
    assert resp.status_code == 201
    assert resp.headers == {"Content-Type": "application/json"}
    assert resp.body == b'{"ok": true}'


def test_stub_template_substitutes_in_keys():
    t = StubTransport()
    t.stub("/users/{userID}/roles", {"{userID}": ["admin"], "owner": "{userID}"})

    resp = _get(t, "http://api.test/users/42/roles")
    assert json.loads(resp.body) == {"42": ["admin"], "owner": "42"}


def test_stub_matches_unencoded_path():
    t = StubTransport()
    t.stub("/files/my file.png", {"ok": True})

    assert json.loads(_get(t, "http://api.test/files/my%20file.png").body) == {"ok": True}


def test_stub_records_params_and_ignores_them_for_matching():
    t = StubTransport()
    t.stub("/search", {"hits": 1})

    t.get("http://api.test/search", headers={}, timeout_s=1.0, params={"q": "cats"})
    assert t.params_sent == [{"q": "cats"}]
