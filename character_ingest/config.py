"""
Environment-driven ingestion settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _get_bool_env(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class IngestionSettings:
    """
    Tunables for one ingestion service instance.
    """

    max_skip_details: int = 50
    low_yield_ratio: float = 0.8
    log_row_details: bool = False
    max_upload_bytes: int = 5 * 1024 * 1024


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached settings read from CHARACTER_INGEST_* variables.
    """

    return IngestionSettings(
        max_skip_details=max(0, _get_int_env("CHARACTER_INGEST_MAX_SKIP_DETAILS", 50)),
        low_yield_ratio=min(1.0, max(0.0, _get_float_env("CHARACTER_INGEST_LOW_YIELD_RATIO", 0.8))),
        log_row_details=_get_bool_env("CHARACTER_INGEST_LOG_ROW_DETAILS", False),
        max_upload_bytes=max(1, _get_int_env("CHARACTER_INGEST_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
    )
