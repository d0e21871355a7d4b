from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class ApiError(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: ApiError


class CheckResultOut(BaseModel):
    name: str
    url: str
    success: bool
    error: Literal["timeout", "http_error", "connection_failure", "other"] | None
    status_code: int | None
    response_time_ms: int


class RunSummaryOut(BaseModel):
    timestamp: str
    total_checked: int
    successful: int
    failed: int
    results: list[CheckResultOut]
