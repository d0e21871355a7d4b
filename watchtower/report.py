from __future__ import annotations

import json
from datetime import timezone
from typing import Any

from watchtower.models import CheckOutcome, RunSummary


def render_outcome(outcome: CheckOutcome) -> dict[str, Any]:
    return {
        "name": outcome.target.name,
        "url": outcome.target.url,
        "success": outcome.success,
        "error": outcome.error_kind.value if outcome.error_kind is not None else None,
        "status_code": outcome.status_code,
        "response_time_ms": int(outcome.response_time_ms),
    }


def render(summary: RunSummary) -> dict[str, Any]:
    return {
        "timestamp": summary.timestamp.astimezone(timezone.utc).isoformat(),
        "total_checked": summary.total_checked,
        "successful": summary.successful,
        "failed": summary.failed,
        "results": [render_outcome(o) for o in summary.results],
    }


def render_json(summary: RunSummary) -> str:
    return json.dumps(render(summary), ensure_ascii=False, indent=2)
