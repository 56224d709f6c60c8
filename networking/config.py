from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from networking.utils.env import _env_csv, _env_float, _env_str


@dataclass(frozen=True)
class ClientEnvConfig:
    base_url: str
    timeout_s: float
    api_secret: Optional[str]
    token: Optional[str]
    sign_exclude: Tuple[str, ...]


def _die(msg: str) -> None:
    raise SystemExit(f"[networking] {msg}")


def load_signer_exclusions() -> List[str]:
    return _env_csv("NETWORKING_SIGN_EXCLUDE")


def load_client_env() -> ClientEnvConfig:
    """
    Load client configuration from env/.env with strict validation.

    NETWORKING_BASE_URL is required; everything else has a default.
    """
    base_url = _env_str("NETWORKING_BASE_URL", "").rstrip("/")
    if not base_url:
        _die("Missing required env var: NETWORKING_BASE_URL.")
    if not base_url.startswith(("http://", "https://")):
        _die(f"NETWORKING_BASE_URL must be http(s). Got: {base_url!r}")

    try:
        timeout_s = _env_float("NETWORKING_TIMEOUT_S", 10.0)
    except ValueError:
        _die(f"NETWORKING_TIMEOUT_S must be a number. Got: {_env_str('NETWORKING_TIMEOUT_S')!r}")
    timeout_s = max(0.1, min(300.0, timeout_s))

    return ClientEnvConfig(
        base_url=base_url,
        timeout_s=float(timeout_s),
        api_secret=_env_str("NETWORKING_API_SECRET", "") or None,
        token=_env_str("NETWORKING_TOKEN", "") or None,
        sign_exclude=tuple(load_signer_exclusions()),
    )
