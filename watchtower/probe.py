from __future__ import annotations

import asyncio
import logging
import time
from urllib.parse import urlsplit, urlunsplit

import httpx

from watchtower.models import CheckOutcome, ErrorKind, Target


LOGGER = logging.getLogger("watchtower.probe")


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000.0))


def safe_url(url: str) -> str:
    """
    Strip query and fragment so tokens in querystrings don't end up in logs or alerts.
    """
    s = (url or "").strip()
    if not s:
        return s
    try:
        parts = urlsplit(s)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    except ValueError:
        return s[:500]


def classify_error(exc: BaseException) -> ErrorKind:
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorKind.CONNECTION_FAILURE
    return ErrorKind.OTHER


async def probe(target: Target, client: httpx.AsyncClient) -> CheckOutcome:
    timeout = float(target.timeout_seconds)
    started = time.perf_counter()
    try:
        # httpx timeouts are per phase; wait_for bounds connect + response as a whole.
        resp = await asyncio.wait_for(
            client.get(target.url, follow_redirects=True, timeout=httpx.Timeout(timeout)),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.RequestError) as e:
        elapsed_ms = _elapsed_ms(started)
        kind = classify_error(e)
        detail = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
        LOGGER.warning(
            "Check failed name=%s url=%s error=%s elapsed_ms=%s detail=%s",
            target.name,
            safe_url(target.url),
            kind.value,
            elapsed_ms,
            detail[:300],
        )
        return CheckOutcome.failed(target, kind, elapsed_ms, detail=detail)

    elapsed_ms = _elapsed_ms(started)
    status = resp.status_code
    if 200 <= status < 300:
        LOGGER.debug(
            "Check ok name=%s url=%s status=%s elapsed_ms=%s", target.name, safe_url(target.url), status, elapsed_ms
        )
        return CheckOutcome.ok(target, status, elapsed_ms)

    LOGGER.warning(
        "Check failed name=%s url=%s error=%s status=%s elapsed_ms=%s",
        target.name,
        safe_url(target.url),
        ErrorKind.HTTP_ERROR.value,
        status,
        elapsed_ms,
    )
    return CheckOutcome.failed(target, ErrorKind.HTTP_ERROR, elapsed_ms, status_code=status, detail=f"HTTP {status}")
