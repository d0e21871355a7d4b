from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import time
from dataclasses import replace
from pathlib import Path

from watchtower.config import ConfigError, Settings, load_targets
from watchtower.report import render_json
from watchtower.runner import run_once


LOGGER = logging.getLogger("watchtower")

EXIT_CONFIG_ERROR = 2


async def run_cycle(settings: Settings) -> str:
    # Targets are re-read every cycle so edits to the config file apply without a restart.
    targets = load_targets(settings.config_path)
    result = await run_once(targets, settings)
    return render_json(result.summary)


async def run_loop(
    settings: Settings,
    *,
    once: bool,
    interval_seconds: float,
    max_cycles: int | None = None,
) -> int:
    cycles = 0
    while True:
        cycle_started = time.monotonic()
        cycles += 1
        try:
            output = await run_cycle(settings)
        except ConfigError as e:
            LOGGER.error("Config error path=%s error=%s", settings.config_path, e)
            # A broken config at startup is fatal; later cycles keep the scheduler alive.
            if once or cycles == 1:
                return EXIT_CONFIG_ERROR
        else:
            sys.stdout.write(output + "\n")
            sys.stdout.flush()

        if once or (max_cycles is not None and cycles >= max_cycles):
            return 0

        sleep_for = max(0.0, interval_seconds - (time.monotonic() - cycle_started))
        LOGGER.info("Cycle done; sleeping seconds=%s", round(sleep_for, 3))
        await asyncio.sleep(sleep_for)


def main() -> int:
    parser = argparse.ArgumentParser(description="Watchtower domain uptime checks")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML/JSON domains config (default: $WATCHTOWER_CONFIG or bundled domains.yaml)",
    )
    parser.add_argument("--once", action="store_true", help="Run one check cycle, print the summary and exit")
    parser.add_argument(
        "--interval-seconds",
        type=float,
        default=float(os.getenv("WATCHTOWER_INTERVAL_SECONDS", "3600")),
        help="Seconds between cycles when not using --once",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (INFO, WARNING, ...)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # The webhook URL is the credential; keep it out of httpx request logs.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    settings = Settings()
    if args.config:
        settings = replace(settings, config_path=str(Path(args.config)))

    return asyncio.run(
        run_loop(settings, once=bool(args.once), interval_seconds=max(1.0, float(args.interval_seconds)))
    )


if __name__ == "__main__":
    raise SystemExit(main())
