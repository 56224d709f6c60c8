from __future__ import annotations

from enum import Enum


class StatusCodeType(str, Enum):
    INFORMATIONAL = "informational"
    SUCCESSFUL = "successful"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    # e.g. -999 for a cancelled request
    UNKNOWN = "unknown"


def status_code_type(status_code: int) -> StatusCodeType:
    """Categorize an HTTP status code by its class."""
    if 100 <= status_code < 200:
        return StatusCodeType.INFORMATIONAL
    if 200 <= status_code < 300:
        return StatusCodeType.SUCCESSFUL
    if 300 <= status_code < 400:
        return StatusCodeType.REDIRECTION
    if 400 <= status_code < 500:
        return StatusCodeType.CLIENT_ERROR
    if 500 <= status_code < 600:
        return StatusCodeType.SERVER_ERROR
    return StatusCodeType.UNKNOWN
