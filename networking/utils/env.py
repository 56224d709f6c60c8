from __future__ import annotations

import os
from typing import List, Optional

from dotenv import load_dotenv

# Load .env once on import.
load_dotenv()


def _env_str(name: str, default: str = "") -> str:
    """Read a string env var, stripping whitespace."""
    return (os.getenv(name, default) or "").strip()


def _env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean env var with common truthy values."""
    raw = _env_str(name, str(default)).lower()
    return raw in {"y", "yes", "t", "true", "on", "1"}


def _env_float(name: str, default: float = 0.0, *, test_default: Optional[float] = None) -> float:
    """
    Read a float env var.

    If TESTING=true, allow `TEST_<NAME>` to override.
    """
    if _env_bool("TESTING", False):
        v = _env_str(f"TEST_{name}", "")
        if v:
            return float(v)
        if test_default is not None:
            return float(test_default)
    v = _env_str(name, str(default))
    return float(v)


def _env_csv(name: str) -> List[str]:
    raw = _env_str(name, "")
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]
