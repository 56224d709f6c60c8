"""Canonical parameter signing for upload requests.

Parameters are canonicalized as `name=value` pairs sorted by name (byte-wise,
UTF-8), joined with `&`, the shared secret is appended without a separator and
the result is SHA-1 hashed. The server side repeats the same steps, so the
value coercion below must not change: any drift silently breaks verification.

Coercion: str as is, bool as `true`/`false`, int in decimal, float via
`repr`, Decimal via `str`, and lists/tuples of those joined with `,`.
Anything else raises `InvalidInput`.
"""

from __future__ import annotations

import hashlib
import hmac
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, FrozenSet, Iterable, Mapping

from networking.errors import InvalidInput

# Transport-only fields never covered by an upload signature.
UPLOAD_EXCLUDED_PARAMETERS: FrozenSet[str] = frozenset(
    {"signature", "file", "api_key", "resource_type", "cloud_name"}
)


def _utf8(text: str, what: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidInput(f"{what} is not valid UTF-8 text") from exc


def _coerce_scalar(name: str, value: Any) -> str:
    if isinstance(value, str):
        _utf8(value, f"parameter {name!r}")
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidInput(f"parameter {name!r}: non-finite float {value!r}")
        return repr(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidInput(f"parameter {name!r}: non-finite decimal {value!r}")
        return str(value)
    raise InvalidInput(f"parameter {name!r}: no canonical text form for {type(value).__name__}")


def coerce_value(name: str, value: Any) -> str:
    """Render a parameter value in its canonical text form."""
    if isinstance(value, (list, tuple)):
        return ",".join(_coerce_scalar(name, item) for item in value)
    return _coerce_scalar(name, value)


def canonical_string(parameters: Mapping[str, Any], excluded: Iterable[str] = ()) -> str:
    """Return the sorted `name=value&...` string, without the secret."""
    skip = frozenset(excluded)
    pairs = []
    for name, value in parameters.items():
        if not isinstance(name, str) or not name:
            raise InvalidInput(f"parameter names must be non-empty strings, got {name!r}")
        key = _utf8(name, "parameter name")
        if name in skip:
            continue
        pairs.append((key, name, coerce_value(name, value)))
    pairs.sort(key=lambda p: p[0])
    return "&".join(f"{name}={value}" for _, name, value in pairs)


@dataclass(frozen=True)
class ParameterSigner:
    """Stateless signer; `excluded` names are left out of the canonical string."""

    excluded: FrozenSet[str] = frozenset()

    @classmethod
    def for_uploads(cls) -> "ParameterSigner":
        return cls(excluded=UPLOAD_EXCLUDED_PARAMETERS)

    @classmethod
    def from_env(cls) -> "ParameterSigner":
        from networking.config import load_signer_exclusions

        return cls(excluded=frozenset(load_signer_exclusions()))

    def canonical_string(self, parameters: Mapping[str, Any]) -> str:
        return canonical_string(parameters, self.excluded)

    def sign(self, parameters: Mapping[str, Any], secret: str) -> str:
        msg = self.canonical_string(parameters) + secret
        return hashlib.sha1(_utf8(msg, "secret")).hexdigest()

    def verify(self, parameters: Mapping[str, Any], secret: str, signature: str) -> bool:
        expected = self.sign(parameters, secret)
        # compare_digest rejects non-ASCII str
        if not isinstance(signature, str) or not signature.isascii():
            return False
        return hmac.compare_digest(expected, signature.lower())


def sign_parameters(
    parameters: Mapping[str, Any],
    secret: str,
    *,
    excluded: Iterable[str] = (),
) -> str:
    return ParameterSigner(excluded=frozenset(excluded)).sign(parameters, secret)


def verify_parameters(
    parameters: Mapping[str, Any],
    secret: str,
    signature: str,
    *,
    excluded: Iterable[str] = (),
) -> bool:
    return ParameterSigner(excluded=frozenset(excluded)).verify(parameters, secret, signature)
