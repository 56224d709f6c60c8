from __future__ import annotations

import json
from typing import Dict

import pytest

from networking.cli import main


def test_cli_sign(capsys):
    code = main(["sign", "public_id=sample_image", "timestamp=1315060510", "--secret", "abcd"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "b4ad47fb4e25c7bf5f92a20089f9db59bc302313"


def test_cli_sign_excludes_upload_fields(capsys):
    code = main(
        ["sign", "public_id=sample_image", "timestamp=1315060510", "file=@x.png", "api_key=1", "--uploads", "--secret", "abcd"]
    )
    assert code == 0
    assert capsys.readouterr().out.strip() == "b4ad47fb4e25c7bf5f92a20089f9db59bc302313"


def test_cli_sign_custom_exclude(capsys):
    code = main(["sign", "public_id=sample_image", "timestamp=1315060510", "extra=1", "--exclude", "extra", "--secret", "abcd"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "b4ad47fb4e25c7bf5f92a20089f9db59bc302313"


def test_cli_sign_secret_from_env(monkeypatch, capsys):
    monkeypatch.setenv("NETWORKING_API_SECRET", "xyz")
    assert main(["sign"]) == 0
    assert capsys.readouterr().out.strip() == "66b27417d37e024c46526c2f6d358a754fc552f3"


def test_cli_sign_requires_secret(monkeypatch):
    monkeypatch.delenv("NETWORKING_API_SECRET", raising=False)
    with pytest.raises(SystemExit):
        main(["sign", "a=1"])


def test_cli_sign_rejects_malformed_pair():
    with pytest.raises(SystemExit):
        main(["sign", "novalue", "--secret", "s"])


def test_cli_get(monkeypatch, capsys):
    class _Resp:
        status_code = 200
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        content = b'{"id": 7}'

    def fake_get(url: str, *, params: Dict[str, str], headers: Dict[str, str], timeout: float):
        assert url == "http://api.test/users/7"
        assert timeout == 1.5
        return _Resp()

    import networking.transport as mod

    monkeypatch.setattr(mod.requests, "get", fake_get)

    assert main(["get", "/users/7", "--base-url", "http://api.test", "--timeout", "1.5"]) == 0
    assert json.loads(capsys.readouterr().out) == {"id": 7}


def test_cli_get_reports_errors(monkeypatch, capsys):
    class _Resp:
        status_code = 404
        headers: Dict[str, str] = {}
        content = b"Not Found"

    import networking.transport as mod

    monkeypatch.setattr(mod.requests, "get", lambda url, *, params, headers, timeout: _Resp())

    assert main(["get", "/missing", "--base-url", "http://api.test"]) == 1
    assert "Code: 404" in capsys.readouterr().err


def test_cli_sign_accepts_explicit_empty_secret(monkeypatch, capsys):
    monkeypatch.delenv("NETWORKING_API_SECRET", raising=False)
    assert main(["sign", "--secret", ""]) == 0
    # sha1 of the empty string
    assert capsys.readouterr().out.strip() == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_cli_get_reports_bad_base_url(capsys):
    assert main(["get", "/x", "--base-url", "ftp://files.test"]) == 1
    assert "error:" in capsys.readouterr().err
