from __future__ import annotations

from datetime import datetime, timezone

import pytest

from watchtower.aggregate import aggregate, failures, should_notify
from watchtower.models import CheckOutcome, ErrorKind, RunSummary, Target


A = Target(name="a", url="https://a.example")
B = Target(name="b", url="https://b.example")
C = Target(name="c", url="https://c.example")


def test_aggregate_counts_and_order() -> None:
    outcomes = [
        CheckOutcome.ok(A, 200, 12),
        CheckOutcome.failed(B, ErrorKind.TIMEOUT, 10000),
        CheckOutcome.failed(C, ErrorKind.HTTP_ERROR, 40, status_code=500),
    ]
    summary = aggregate(outcomes)

    assert summary.total_checked == 3
    assert summary.successful == 1
    assert summary.failed == 2
    assert summary.successful + summary.failed == summary.total_checked == len(summary.results)
    assert [o.target.name for o in summary.results] == ["a", "b", "c"]
    assert [o.target.name for o in failures(summary)] == ["b", "c"]
    assert should_notify(summary) is True


def test_all_success_does_not_notify() -> None:
    summary = aggregate([CheckOutcome.ok(A, 200, 5), CheckOutcome.ok(B, 204, 7)])
    assert summary.failed == 0
    assert should_notify(summary) is False
    assert failures(summary) == []


def test_empty_outcomes() -> None:
    summary = aggregate([])
    assert summary.total_checked == 0
    assert should_notify(summary) is False


def test_aggregate_is_deterministic_for_fixed_timestamp() -> None:
    ts = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    outcomes = [CheckOutcome.ok(A, 200, 5), CheckOutcome.failed(B, ErrorKind.OTHER, 3, detail="x")]
    assert aggregate(outcomes, timestamp=ts) == aggregate(list(outcomes), timestamp=ts)


def test_timestamp_defaults_to_utc_now() -> None:
    summary = aggregate([CheckOutcome.ok(A, 200, 5)])
    assert summary.timestamp.tzinfo is not None
    assert summary.timestamp.utcoffset().total_seconds() == 0


def test_summary_rejects_inconsistent_counts() -> None:
    with pytest.raises(ValueError):
        RunSummary(
            timestamp=datetime.now(timezone.utc),
            total_checked=2,
            successful=1,
            failed=0,
            results=(CheckOutcome.ok(A, 200, 1),),
        )


@pytest.mark.parametrize(
    "kwargs",
    [
        {"success": True, "status_code": 500, "response_time_ms": 1},
        {"success": True, "status_code": None, "response_time_ms": 1},
        {"success": True, "status_code": 200, "error_kind": ErrorKind.OTHER, "response_time_ms": 1},
        {"success": False, "response_time_ms": 1},
        {"success": False, "error_kind": ErrorKind.HTTP_ERROR, "response_time_ms": 1},
        {"success": False, "error_kind": ErrorKind.TIMEOUT, "status_code": 200, "response_time_ms": 1},
        {"success": False, "error_kind": ErrorKind.CONNECTION_FAILURE, "status_code": 503, "response_time_ms": 1},
    ],
)
def test_outcome_invariants(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        CheckOutcome(target=A, **kwargs)
