from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from watchtower.models import CheckOutcome, RunSummary


def aggregate(outcomes: Iterable[CheckOutcome], *, timestamp: datetime | None = None) -> RunSummary:
    results = tuple(outcomes)
    successful = 0
    for outcome in results:
        if outcome.success:
            successful += 1
    return RunSummary(
        timestamp=timestamp or datetime.now(timezone.utc),
        total_checked=len(results),
        successful=successful,
        failed=len(results) - successful,
        results=results,
    )


def should_notify(summary: RunSummary) -> bool:
    return summary.failed > 0


def failures(summary: RunSummary) -> list[CheckOutcome]:
    return [o for o in summary.results if not o.success]
