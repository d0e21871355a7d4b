from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

import httpx

from watchtower.models import CheckOutcome, ErrorKind, Target
from watchtower.probe import probe


LOGGER = logging.getLogger("watchtower.fanout")

DEFAULT_USER_AGENT = "Watchtower/1.0"


def build_client(n_targets: int, *, user_agent: str = DEFAULT_USER_AGENT) -> httpx.AsyncClient:
    # One connection per probe: the pool never makes a probe wait for a sibling's socket.
    limits = httpx.Limits(max_connections=max(1, n_targets), max_keepalive_connections=0)
    return httpx.AsyncClient(headers={"User-Agent": user_agent}, limits=limits)


async def _safe_probe(
    target: Target, client: httpx.AsyncClient, semaphore: asyncio.Semaphore | None
) -> CheckOutcome:
    started = time.perf_counter()
    try:
        if semaphore is None:
            return await probe(target, client)
        async with semaphore:
            return await probe(target, client)
    except Exception as e:
        err = f"{type(e).__name__}: {e}"
        LOGGER.exception("Check crashed name=%s error=%s", target.name, err)
        return CheckOutcome.failed(
            target,
            ErrorKind.OTHER,
            int(round((time.perf_counter() - started) * 1000.0)),
            detail=f"check_crashed: {err}",
        )


async def run_all(
    targets: Sequence[Target],
    *,
    client: httpx.AsyncClient | None = None,
    concurrency: int | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> list[CheckOutcome]:
    """
    Probe every target concurrently and return outcomes in ``targets`` order.

    All probes run to a terminal outcome before this returns; a failing probe
    never cancels its siblings. ``concurrency`` caps in-flight probes when set
    to a positive number, otherwise every target is probed at once.
    """
    if not targets:
        return []

    semaphore = asyncio.Semaphore(concurrency) if concurrency and concurrency > 0 else None

    async def _gather(c: httpx.AsyncClient) -> list[CheckOutcome]:
        tasks = [asyncio.create_task(_safe_probe(t, c, semaphore)) for t in targets]
        # gather keeps positional order regardless of which task finishes first.
        return list(await asyncio.gather(*tasks))

    started = time.perf_counter()
    if client is not None:
        outcomes = await _gather(client)
    else:
        async with build_client(len(targets), user_agent=user_agent) as own_client:
            outcomes = await _gather(own_client)

    LOGGER.info(
        "Fan-out complete targets=%s failed=%s elapsed_ms=%s",
        len(outcomes),
        sum(1 for o in outcomes if not o.success),
        int(round((time.perf_counter() - started) * 1000.0)),
    )
    return outcomes
