from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml

from watchtower.fanout import DEFAULT_USER_AGENT
from watchtower.models import DEFAULT_TIMEOUT_SECONDS, Target


DEFAULT_CONFIG_PATH = Path(__file__).with_name("domains.yaml")


class ConfigError(ValueError):
    pass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return float(default)
    try:
        return float(str(raw).strip())
    except ValueError:
        return float(default)


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return str(default)
    s = str(raw).strip()
    return s if s else str(default)


@dataclass(frozen=True)
class Settings:
    config_path: str = field(default_factory=lambda: _env_str("WATCHTOWER_CONFIG", str(DEFAULT_CONFIG_PATH)))
    # Slack-compatible incoming webhook; empty means alerts are reported as unconfigured.
    webhook_url: str = field(default_factory=lambda: os.getenv("SLACK_WEBHOOK_URL", "").strip())
    user_agent: str = field(default_factory=lambda: _env_str("WATCHTOWER_USER_AGENT", DEFAULT_USER_AGENT))
    notify_timeout_seconds: float = field(
        default_factory=lambda: _env_float("WATCHTOWER_NOTIFY_TIMEOUT_SECONDS", 15.0)
    )
    # 0 = unbounded fan-out.
    check_concurrency: int = field(default_factory=lambda: _env_int("WATCHTOWER_CHECK_CONCURRENCY", 0))


def _parse_timeout(value: Any, where: str) -> int:
    if value is None:
        return DEFAULT_TIMEOUT_SECONDS
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where}.timeout_seconds must be a positive integer, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{where}.timeout_seconds must be a positive integer, got {value!r}")
    return value


def _parse_url(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where}.url is required")
    url = value.strip()
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise ConfigError(f"{where}.url is not a valid URL: {url!r}") from exc
    if parts.scheme not in ("http", "https"):
        raise ConfigError(f"{where}.url must include an http:// or https:// scheme, got {url!r}")
    if not parts.netloc:
        raise ConfigError(f"{where}.url has no host: {url!r}")
    return url


def parse_targets(data: Any) -> list[Target]:
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping with a 'domains' list")

    domains_cfg = data.get("domains")
    if not isinstance(domains_cfg, list) or not domains_cfg:
        raise ConfigError("Config must contain a non-empty 'domains' list")

    targets: list[Target] = []
    for idx, entry in enumerate(domains_cfg):
        where = f"domains[{idx}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{where} must be a mapping, got {type(entry).__name__}")

        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"{where}.name is required")

        targets.append(
            Target(
                name=name.strip(),
                url=_parse_url(entry.get("url"), where),
                timeout_seconds=_parse_timeout(entry.get("timeout_seconds"), where),
            )
        )
    return targets


def load_targets(path: Path | str) -> list[Target]:
    # safe_load reads JSON documents too, so domains.json works unchanged.
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse config {path}: {exc}") from exc
    return parse_targets(data)
