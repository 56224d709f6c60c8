from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class TransportResponse(BaseModel):
    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    # Raw body; the client decodes JSON.
    body: bytes = b""


class StubResponse(BaseModel):
    # Any JSON-serializable value returned for a matching GET.
    response: Any = None
    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=dict)
