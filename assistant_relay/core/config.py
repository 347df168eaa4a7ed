from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_PROTOCOL_VERSION = "assistants=v2"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_POLL_INTERVAL_SECONDS = 0.5
DEFAULT_HTTP_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class RelayConfig:
    api_key: str | None
    base_url: str
    protocol_version: str
    timeout_seconds: float
    poll_interval_seconds: float
    http_timeout_seconds: float
    summary_assistant_id: str | None


def _read_optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if not value:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _read_float_env(name: str, default: float) -> float:
    value = _read_optional_env(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_relay_config() -> RelayConfig:
    return RelayConfig(
        api_key=_read_optional_env("OPENAI_API_KEY"),
        base_url=_read_optional_env("ASSISTANT_API_BASE_URL") or DEFAULT_BASE_URL,
        protocol_version=_read_optional_env("ASSISTANT_PROTOCOL_VERSION")
        or DEFAULT_PROTOCOL_VERSION,
        timeout_seconds=_read_float_env(
            "RELAY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
        ),
        poll_interval_seconds=_read_float_env(
            "RELAY_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
        ),
        http_timeout_seconds=_read_float_env(
            "RELAY_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS
        ),
        summary_assistant_id=_read_optional_env("SUMMARY_ASSISTANT_ID"),
    )


def with_api_key(config: RelayConfig, runtime_key: str | None) -> RelayConfig:
    if runtime_key is None:
        return config
    stripped = runtime_key.strip()
    if not stripped:
        return config
    return replace(config, api_key=stripped)
