"""Signed request parameters and a stubbable JSON-over-HTTP GET client."""

__version__ = "1.0.0"

from networking.client import HttpClient
from networking.errors import (
    ClientError,
    InvalidInput,
    InvalidResponseError,
    InvalidURLError,
    NetworkingError,
    ServerError,
    StubNotFoundError,
    UnexpectedError,
)
from networking.signing import (
    UPLOAD_EXCLUDED_PARAMETERS,
    ParameterSigner,
    canonical_string,
    sign_parameters,
    verify_parameters,
)
from networking.status import StatusCodeType, status_code_type
from networking.transport import RequestsTransport, StubTransport, Transport

__all__ = [
    "HttpClient",
    "ClientError",
    "InvalidInput",
    "InvalidResponseError",
    "InvalidURLError",
    "NetworkingError",
    "ServerError",
    "StubNotFoundError",
    "UnexpectedError",
    "UPLOAD_EXCLUDED_PARAMETERS",
    "ParameterSigner",
    "canonical_string",
    "sign_parameters",
    "verify_parameters",
    "StatusCodeType",
    "status_code_type",
    "RequestsTransport",
    "StubTransport",
    "Transport",
]
