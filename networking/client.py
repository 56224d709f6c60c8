from __future__ import annotations

import base64
import json
import re
import threading
import traceback
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import quote, unquote, urlsplit

import bittensor as bt
import requests

from networking.errors import (
    ClientError,
    InvalidResponseError,
    InvalidURLError,
    NetworkingError,
    ServerError,
    UnexpectedError,
)
from networking.schemas import TransportResponse
from networking.signing import coerce_value
from networking.status import StatusCodeType, status_code_type
from networking.transport import RequestsTransport, StubTransport, Transport

Completion = Callable[[Any, Optional[NetworkingError]], None]

_URL_SAFE = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*$")


def _encode_path(path: str) -> str:
    """Percent-encode the last path component when the path is not URL-safe."""
    if _URL_SAFE.match(path):
        return path
    head, sep, last = path.rpartition("/")
    return f"{head}{sep}{quote(last, safe='?=&')}"


class HttpClient:
    """GET-only JSON client scoped to `base_url`.

    The transport is injected; pass a `StubTransport` in tests instead of
    relying on process-wide stub state.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: Optional[Transport] = None,
        timeout_s: float = 10.0,
    ) -> None:
        if not base_url.startswith(("http://", "https://")):
            raise InvalidURLError(base_url)
        self.base_url = base_url.rstrip("/")
        self.transport = transport or RequestsTransport()
        self.timeout_s = timeout_s
        self._authorization: Optional[str] = None

    @classmethod
    def from_env(cls, *, transport: Optional[Transport] = None) -> "HttpClient":
        from networking.config import load_client_env

        cfg = load_client_env()
        client = cls(cfg.base_url, transport=transport, timeout_s=cfg.timeout_s)
        if cfg.token:
            client.authenticate(token=cfg.token)
        return client

    def authenticate(
        self,
        *,
        token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        authorization_header: Optional[str] = None,
    ) -> None:
        if authorization_header is not None:
            self._authorization = authorization_header
        elif token is not None:
            self._authorization = f"Bearer {token}"
        elif username is not None and password is not None:
            creds = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
            self._authorization = f"Basic {creds}"
        else:
            raise ValueError("authenticate() needs a token, username/password or authorization_header")

    def headers(self) -> Dict[str, str]:
        out = {"Accept": "application/json"}
        if self._authorization:
            out["Authorization"] = self._authorization
        return out

    def url_for(self, path: str) -> str:
        if path and not path.startswith("/"):
            path = "/" + path
        return self.base_url + _encode_path(path)

    @staticmethod
    def split_base_url_and_relative_path(url: str) -> Tuple[str, str]:
        parts = urlsplit(_encode_path(url))
        if not parts.scheme or not parts.netloc:
            raise InvalidURLError(url)
        base = f"{parts.scheme}://{parts.netloc}"
        return base, url.replace(base, "", 1)

    def stub(self, path: str, response: Any, *, status_code: int = 200) -> None:
        if not isinstance(self.transport, StubTransport):
            raise TypeError("stub() requires the client to use a StubTransport")
        if not path.startswith("/"):
            path = "/" + path
        # Templates keep their braces; only the base URL's own path is prefixed.
        self.transport.stub(unquote(urlsplit(self.base_url).path) + path, response, status_code=status_code)

    def _decode(self, resp: TransportResponse, url: str) -> Any:
        kind = status_code_type(resp.status_code)
        text = resp.body.decode("utf-8", errors="replace") if resp.body else ""

        if kind == StatusCodeType.SUCCESSFUL:
            if not resp.body:
                return None
            try:
                return json.loads(resp.body)
            except ValueError as exc:
                raise InvalidResponseError(str(exc)) from exc

        bt.logging.warning(f"GET {url} returned {resp.status_code}")
        if kind == StatusCodeType.CLIENT_ERROR:
            raise ClientError(resp.status_code, text or "Client error")
        if kind == StatusCodeType.SERVER_ERROR:
            details: Optional[Dict[str, Any]] = None
            try:
                parsed = json.loads(resp.body) if resp.body else None
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                details = parsed
            message = "Server error" if details is not None else (text or "Server error")
            raise ServerError(resp.status_code, message, details)
        raise UnexpectedError(resp.status_code, text or "Unexpected status code")

    @staticmethod
    def _query(parameters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
        # Same text forms the signer uses, so a signed query verifies server-side.
        if not parameters:
            return {}
        return {name: coerce_value(name, value) for name, value in parameters.items()}

    def _get_sync(self, path: str, query: Dict[str, str]) -> Any:
        url = self.url_for(path)
        bt.logging.debug(f"GET {url} ({len(query)} query parameters)")
        try:
            resp = self.transport.get(url, headers=self.headers(), timeout_s=self.timeout_s, params=query)
        except requests.RequestException as exc:
            raise UnexpectedError(None, str(exc)) from exc
        return self._decode(resp, url)

    def get(
        self,
        path: str,
        completion: Optional[Completion] = None,
        *,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        GET `path` relative to the base URL, sending `parameters` as the query.

        Without `completion` this blocks and returns the decoded JSON (or None
        for an empty body), raising `NetworkingError` on failure. With
        `completion` it behaves like `get_async` and returns the thread.
        Parameters without a text form raise `InvalidInput` before any request.
        """
        if completion is not None:
            return self.get_async(path, completion, parameters=parameters)
        return self._get_sync(path, self._query(parameters))

    def get_async(
        self,
        path: str,
        completion: Completion,
        *,
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> threading.Thread:
        """Run the GET on a background thread and call `completion(json, error)` once."""
        query = self._query(parameters)

        def _run() -> None:
            try:
                result = self._get_sync(path, query)
            except NetworkingError as exc:
                completion(None, exc)
                return
            except Exception as exc:
                bt.logging.error(f"Unexpected error in GET {path}:\n{traceback.format_exc()}")
                completion(None, UnexpectedError(None, str(exc)))
                return
            completion(result, None)

        t = threading.Thread(target=_run, name=f"networking-get{path}", daemon=True)
        t.start()
        return t
