from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from watchtower.config import ConfigError, Settings, load_targets
from watchtower.report import render
from watchtower.runner import run_once
from watchtower.schema import ApiError, ErrorResponse, RunSummaryOut


LOGGER = logging.getLogger("watchtower.app")


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    HTTP trigger for scheduled invocations (cron hitting ``/api/check``).

    ``transport`` swaps the network layer for probes and alerts; tests pass an
    ``httpx.MockTransport``.
    """
    app = FastAPI(title="Watchtower", version="0.1.0")
    app.state.settings = settings or Settings()
    app.state.transport = transport

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"ok": True, "ts": time.time()}

    @app.get(
        "/api/check",
        response_model=RunSummaryOut,
        responses={500: {"model": ErrorResponse}},
    )
    async def check() -> Any:
        current: Settings = app.state.settings
        try:
            targets = load_targets(current.config_path)
        except ConfigError as e:
            LOGGER.error("Config error path=%s error=%s", current.config_path, e)
            body = ErrorResponse(error=ApiError(code="config_error", message=str(e)))
            return JSONResponse(status_code=500, content=body.model_dump())

        if app.state.transport is None:
            result = await run_once(targets, current)
        else:
            async with httpx.AsyncClient(
                transport=app.state.transport, headers={"User-Agent": current.user_agent}
            ) as client:
                result = await run_once(targets, current, client=client)
        return render(result.summary)

    return app
