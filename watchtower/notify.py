from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from watchtower.aggregate import failures
from watchtower.models import CheckOutcome, ErrorKind, RunSummary


LOGGER = logging.getLogger("watchtower.notify")

ALERT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class NotifyError(Exception):
    pass


class SinkUnconfigured(NotifyError):
    pass


class DeliveryFailed(NotifyError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class WebhookConfig:
    url: str
    timeout_seconds: float = 15.0


def _redact(text: str, secret: str) -> str:
    if secret:
        text = text.replace(secret, "<redacted>")
    return text


def describe_error(outcome: CheckOutcome) -> str:
    kind = outcome.error_kind
    if kind is ErrorKind.HTTP_ERROR:
        return f"HTTP {outcome.status_code}"
    if kind is ErrorKind.TIMEOUT:
        return "Timeout"
    if kind is ErrorKind.CONNECTION_FAILURE:
        return "Connection failed"
    if outcome.detail:
        return f"Error: {outcome.detail[:300]}"
    return "Unknown error"


def _headline(count: int) -> str:
    return f"Uptime Alert: {count} domain{' is' if count == 1 else 's are'} down"


def _mrkdwn(text: str) -> dict[str, str]:
    return {"type": "mrkdwn", "text": text}


def build_alert_payload(summary: RunSummary) -> dict[str, Any]:
    """
    Slack incoming-webhook payload: ``text`` carries the plain summary for
    clients without block support, ``blocks`` the per-domain breakdown.
    """
    down = failures(summary)
    headline = _headline(len(down))
    checked_at = summary.timestamp.strftime(ALERT_TIME_FORMAT)

    blocks: list[dict[str, Any]] = [
        {"type": "header", "text": {"type": "plain_text", "text": headline}},
        {"type": "section", "text": _mrkdwn(f"*Check Time:* {checked_at}")},
        {"type": "divider"},
    ]
    for outcome in down:
        url = outcome.target.url
        blocks.append(
            {
                "type": "section",
                "fields": [
                    _mrkdwn(f"*Domain:*\n{outcome.target.name}"),
                    _mrkdwn(f"*Error:*\n{describe_error(outcome)}"),
                    _mrkdwn(f"*URL:*\n<{url}|{url}>"),
                    _mrkdwn(f"*Response Time:*\n{int(outcome.response_time_ms)}ms"),
                ],
            }
        )

    return {"text": f"🚨 *{headline}*", "blocks": blocks}


async def notify(summary: RunSummary, config: WebhookConfig, client: httpx.AsyncClient) -> None:
    """Deliver one alert for ``summary``. Raises ``NotifyError`` on any failure; never retries."""
    webhook_url = (config.url or "").strip()
    if not webhook_url:
        raise SinkUnconfigured("webhook URL not set; alert not sent")

    payload = build_alert_payload(summary)
    try:
        resp = await client.post(webhook_url, json=payload, timeout=config.timeout_seconds)
    except httpx.InvalidURL:
        # The parser's message quotes fragments of the URL, which _redact can't match.
        raise DeliveryFailed("webhook URL is malformed") from None
    except httpx.HTTPError as e:
        raise DeliveryFailed(_redact(f"{type(e).__name__}: {e}", webhook_url)) from None

    if not 200 <= resp.status_code < 300:
        body = _redact((resp.text or "").strip(), webhook_url)[:200]
        raise DeliveryFailed(f"webhook returned HTTP {resp.status_code}: {body}", status_code=resp.status_code)

    LOGGER.info("Alert delivered failed=%s status=%s", summary.failed, resp.status_code)
