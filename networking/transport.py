"""Transports used by `HttpClient`.

`RequestsTransport` performs real HTTP through `requests`. `StubTransport`
answers from stubs registered per path and is what tests inject instead of
patching the network.
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import unquote, urlsplit

import bittensor as bt
import requests

from networking.errors import StubNotFoundError
from networking.schemas import StubResponse, TransportResponse


class Transport(ABC):
    @abstractmethod
    def get(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        timeout_s: float,
        params: Optional[Mapping[str, str]] = None,
    ) -> TransportResponse:
        ...


class RequestsTransport(Transport):
    def get(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        timeout_s: float,
        params: Optional[Mapping[str, str]] = None,
    ) -> TransportResponse:
        r = requests.get(url, params=dict(params or {}), headers=headers, timeout=timeout_s)
        return TransportResponse(
            status_code=int(r.status_code),
            headers={str(k): str(v) for k, v in r.headers.items()},
            body=r.content or b"",
        )


def _strip_slashes(path: str) -> str:
    return path.strip("/")


def _substitute(value: Any, replacements: Dict[str, str]) -> Any:
    if isinstance(value, str):
        for key, repl in replacements.items():
            value = value.replace(key, repl)
        return value
    if isinstance(value, list):
        return [_substitute(v, replacements) for v in value]
    if isinstance(value, dict):
        return {_substitute(k, replacements): _substitute(v, replacements) for k, v in value.items()}
    return value


def _match_template(template: str, path: str) -> Optional[Dict[str, str]]:
    """
    Match `path` against a stub path containing `{placeholders}`.

    Returns placeholder -> segment replacements, or None. Both paths must have
    the same number of segments (more than one) and the same first segment.
    """
    lookup_parts = _strip_slashes(path).split("/")
    template_parts = _strip_slashes(template).split("/")
    if len(lookup_parts) != len(template_parts):
        return None
    if lookup_parts[0] != template_parts[0]:
        return None
    if len(lookup_parts) == 1:
        return None

    replacements: Dict[str, str] = {}
    for part, actual in zip(template_parts, lookup_parts):
        if "{" in part:
            replacements[part] = actual

    replaced = template
    for key, actual in replacements.items():
        replaced = replaced.replace(key, actual)
    if replaced != path:
        return None
    return replacements


class StubTransport(Transport):
    """In-memory transport; unmatched GETs go to `fallback` or raise."""

    def __init__(self, fallback: Optional[Transport] = None) -> None:
        self.fallback = fallback
        self._stubs: Dict[str, StubResponse] = {}
        self._lock = threading.Lock()
        self.requests_made: List[str] = []
        # Query parameters per request, aligned with requests_made.
        self.params_sent: List[Dict[str, str]] = []

    def stub(
        self,
        path: str,
        response: Any,
        *,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        stub = StubResponse(response=response, status_code=status_code, headers=headers or {})
        with self._lock:
            self._stubs[path] = stub

    def reset(self) -> None:
        with self._lock:
            self._stubs.clear()
            self.requests_made.clear()
            self.params_sent.clear()

    def find(self, path: str) -> Optional[StubResponse]:
        if not path:
            return None
        with self._lock:
            stubs = dict(self._stubs)

        exact = stubs.get(path)
        if exact is not None:
            return exact

        for template, stub in stubs.items():
            if "{" not in template:
                continue
            replacements = _match_template(template, path)
            if replacements is None or stub.response is None:
                continue
            return StubResponse(
                response=_substitute(stub.response, replacements),
                status_code=stub.status_code,
                headers=dict(stub.headers),
            )
        return None

    def get(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        timeout_s: float,
        params: Optional[Mapping[str, str]] = None,
    ) -> TransportResponse:
        with self._lock:
            self.requests_made.append(url)
            self.params_sent.append(dict(params or {}))

        # Stubs are keyed by the caller's raw path; the query string is ignored.
        path = unquote(urlsplit(url).path) or url
        stub = self.find(path)
        if stub is None:
            if self.fallback is not None:
                return self.fallback.get(url, headers=headers, timeout_s=timeout_s, params=params)
            raise StubNotFoundError(path)

        bt.logging.debug(f"Stubbed GET {path} -> {stub.status_code}")
        body = b"" if stub.response is None else json.dumps(stub.response).encode("utf-8")
        out_headers = {"Content-Type": "application/json", **stub.headers}
        return TransportResponse(status_code=stub.status_code, headers=out_headers, body=body)
