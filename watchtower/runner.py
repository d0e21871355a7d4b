from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import httpx

from watchtower.aggregate import aggregate, failures, should_notify
from watchtower.config import Settings
from watchtower.fanout import run_all
from watchtower.models import RunSummary, Target
from watchtower.notify import DeliveryFailed, SinkUnconfigured, WebhookConfig, notify
from watchtower.probe import safe_url


LOGGER = logging.getLogger("watchtower.runner")


class NotificationStatus(str, Enum):
    SKIPPED = "skipped"
    SENT = "sent"
    FAILED = "failed"
    UNCONFIGURED = "unconfigured"


@dataclass(frozen=True)
class RunResult:
    summary: RunSummary
    notification: NotificationStatus
    notification_error: str | None = None


async def _deliver(summary: RunSummary, settings: Settings, client: httpx.AsyncClient | None) -> RunResult:
    webhook = WebhookConfig(url=settings.webhook_url, timeout_seconds=settings.notify_timeout_seconds)
    try:
        if client is not None:
            await notify(summary, webhook, client)
        else:
            async with httpx.AsyncClient(headers={"User-Agent": settings.user_agent}) as own_client:
                await notify(summary, webhook, own_client)
    except SinkUnconfigured as e:
        LOGGER.warning("Alert not sent: SLACK_WEBHOOK_URL is not set failed=%s", summary.failed)
        return RunResult(summary=summary, notification=NotificationStatus.UNCONFIGURED, notification_error=str(e))
    except DeliveryFailed as e:
        LOGGER.error("Alert delivery failed failed=%s error=%s", summary.failed, e)
        return RunResult(summary=summary, notification=NotificationStatus.FAILED, notification_error=str(e))
    return RunResult(summary=summary, notification=NotificationStatus.SENT)


async def run_once(
    targets: Sequence[Target],
    settings: Settings,
    *,
    client: httpx.AsyncClient | None = None,
) -> RunResult:
    """
    One full check cycle: probe every target, aggregate, and alert when anything failed.

    The returned summary is authoritative; a notifier failure is recorded on the
    result but never alters the counts.
    """
    outcomes = await run_all(
        targets,
        client=client,
        concurrency=settings.check_concurrency or None,
        user_agent=settings.user_agent,
    )
    summary = aggregate(outcomes)
    LOGGER.info(
        "Run complete total=%s successful=%s failed=%s",
        summary.total_checked,
        summary.successful,
        summary.failed,
    )

    if not should_notify(summary):
        return RunResult(summary=summary, notification=NotificationStatus.SKIPPED)

    for outcome in failures(summary):
        LOGGER.info(
            "Down name=%s url=%s error=%s",
            outcome.target.name,
            safe_url(outcome.target.url),
            outcome.error_kind.value if outcome.error_kind else None,
        )
    return await _deliver(summary, settings, client)
