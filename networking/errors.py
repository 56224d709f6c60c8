"""Error types raised by the signer and the HTTP client."""

from __future__ import annotations

from typing import Any, Dict, Optional


class InvalidInput(ValueError):
    """A signing parameter has no canonical text form."""


class NetworkingError(Exception):
    """Base class for everything the client and its transports raise."""


class InvalidURLError(NetworkingError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"We're sorry, but the URL for this request is invalid: {url!r}")


class InvalidResponseError(NetworkingError):
    def __init__(self, detail: str = "") -> None:
        msg = "We're sorry, but we received an invalid response from the server."
        if detail:
            msg = f"{msg} {detail}"
        super().__init__(msg)


class ClientError(NetworkingError):
    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"We're sorry, but a client error occurred. Code: {status_code}, {message}.")


class ServerError(NetworkingError):
    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details
        details_str = ", ".join(f"{k}: {v}" for k, v in (details or {}).items())
        super().__init__(
            f"We're sorry, but a server error occurred. Code: {status_code} {message}. "
            f"Additional info: {details_str}"
        )


class UnexpectedError(NetworkingError):
    def __init__(self, status_code: Optional[int], message: str) -> None:
        self.status_code = status_code
        self.message = message
        code = f"Code: {status_code}. " if status_code is not None else ""
        super().__init__(f"We're sorry, but an unexpected error occurred. {code}{message}")


class StubNotFoundError(NetworkingError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No stub registered for GET {path}")
