"""Serve the check endpoint with uvicorn on WATCHTOWER_HOST:WATCHTOWER_PORT (default 0.0.0.0:8080)."""

from __future__ import annotations

import os

import uvicorn

from watchtower.app import create_app
from watchtower.config import Settings


def main() -> None:
    host = os.getenv("WATCHTOWER_HOST", "0.0.0.0").strip() or "0.0.0.0"
    port = int(os.getenv("WATCHTOWER_PORT", "8080"))
    uvicorn.run(create_app(Settings()), host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
