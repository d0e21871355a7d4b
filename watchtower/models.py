from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


DEFAULT_TIMEOUT_SECONDS = 10


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION_FAILURE = "connection_failure"
    HTTP_ERROR = "http_error"
    OTHER = "other"


@dataclass(frozen=True)
class Target:
    name: str
    url: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class CheckOutcome:
    target: Target
    success: bool
    response_time_ms: int
    status_code: int | None = None
    error_kind: ErrorKind | None = None
    # Underlying exception text; used in logs and alerts, not in the rendered summary.
    detail: str | None = None

    def __post_init__(self) -> None:
        if self.success:
            if self.status_code is None or not 200 <= self.status_code < 300:
                raise ValueError(f"successful outcome needs a 2xx status_code, got {self.status_code!r}")
            if self.error_kind is not None:
                raise ValueError("successful outcome cannot carry an error_kind")
        else:
            if self.error_kind is None:
                raise ValueError("failed outcome needs an error_kind")
            if self.error_kind is ErrorKind.HTTP_ERROR and self.status_code is None:
                raise ValueError("http_error outcome needs a status_code")
            if self.error_kind is not ErrorKind.HTTP_ERROR and self.status_code is not None:
                raise ValueError(f"{self.error_kind.value} outcome cannot carry a status_code")

    @classmethod
    def ok(cls, target: Target, status_code: int, response_time_ms: int) -> CheckOutcome:
        return cls(target=target, success=True, status_code=status_code, response_time_ms=response_time_ms)

    @classmethod
    def failed(
        cls,
        target: Target,
        error_kind: ErrorKind,
        response_time_ms: int,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> CheckOutcome:
        return cls(
            target=target,
            success=False,
            status_code=status_code,
            error_kind=error_kind,
            response_time_ms=response_time_ms,
            detail=detail,
        )


@dataclass(frozen=True)
class RunSummary:
    timestamp: datetime
    total_checked: int
    successful: int
    failed: int
    results: tuple[CheckOutcome, ...]

    def __post_init__(self) -> None:
        if not (self.successful + self.failed == self.total_checked == len(self.results)):
            raise ValueError(
                "inconsistent summary counts: "
                f"successful={self.successful} failed={self.failed} "
                f"total_checked={self.total_checked} results={len(self.results)}"
            )
