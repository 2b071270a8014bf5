"""Rate limiting and fan-out defaults for reconciliation passes."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int, env_optional_int, env_seconds_from_millis

# kept well below Contentful's published limit to slow the request rate down
DEFAULT_RATE_LIMIT_COUNT = 5
DEFAULT_RATE_LIMIT_PERIOD_MS = 3000
DEFAULT_RATE_LIMIT_RETRY_PERIOD_MS = 3000


@dataclass(frozen=True, slots=True)
class AdmissionConfig:
    limit: int = DEFAULT_RATE_LIMIT_COUNT
    period_seconds: float = DEFAULT_RATE_LIMIT_PERIOD_MS / 1000.0
    retry_delay_seconds: float = DEFAULT_RATE_LIMIT_RETRY_PERIOD_MS / 1000.0
    max_wait_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class SyncConfig:
    max_concurrency: int | None = None


def get_admission_config() -> AdmissionConfig:
    max_wait_ms = env_optional_int("CONTENTFUL_RATE_LIMIT_MAX_WAIT")
    return AdmissionConfig(
        limit=env_int("CONTENTFUL_RATE_LIMIT_COUNT", DEFAULT_RATE_LIMIT_COUNT),
        period_seconds=env_seconds_from_millis(
            "CONTENTFUL_RATE_LIMIT_PERIOD", DEFAULT_RATE_LIMIT_PERIOD_MS
        ),
        retry_delay_seconds=env_seconds_from_millis(
            "CONTENTFUL_RATE_LIMIT_RETRY_PERIOD", DEFAULT_RATE_LIMIT_RETRY_PERIOD_MS
        ),
        max_wait_seconds=None if max_wait_ms is None else max_wait_ms / 1000.0,
    )


def get_sync_config() -> SyncConfig:
    return SyncConfig(max_concurrency=env_optional_int("SYNC_MAX_CONCURRENCY"))
