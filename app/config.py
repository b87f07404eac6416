"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from kpi.base import ALLOWED_METRICS, Metric
from kpi.statistics import ALLOWED_DISCOUNT_STATISTICS, DiscountStatistic

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_choice_env(name: str, default: str, allowed: frozenset[str]) -> str:
    """
    Read a string that must be one of *allowed*; unknown values fall back.
    """

    value = _get_str_env(name, default)
    return value if value in allowed else default


@dataclass(frozen=True)
class DashboardSettings:
    """
    Runtime settings for the dashboard pipeline.
    """

    data_path: Path = _PROJECT_ROOT / "data" / "sample_transactions.csv"
    city_rank_limit: int = 5
    default_metric: str = Metric.PROFIT
    discount_statistic: str = DiscountStatistic.MEDIAN


@dataclass(frozen=True)
class CSVIngestionSettings:
    """
    Runtime settings for CSV ingestion.
    """

    max_validation_errors: int = 500
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_dashboard_settings() -> DashboardSettings:
    """
    Return cached dashboard settings from environment variables.
    """

    raw_path = Path(
        _get_str_env("DASHBOARD_DATA_PATH", str(DashboardSettings.data_path))
    )
    return DashboardSettings(
        data_path=raw_path if raw_path.is_absolute() else _PROJECT_ROOT / raw_path,
        city_rank_limit=max(1, _get_int_env("DASHBOARD_CITY_RANK_LIMIT", 5)),
        default_metric=_get_choice_env(
            "DASHBOARD_DEFAULT_METRIC", Metric.PROFIT, ALLOWED_METRICS
        ),
        discount_statistic=_get_choice_env(
            "DASHBOARD_DISCOUNT_STATISTIC",
            DiscountStatistic.MEDIAN,
            ALLOWED_DISCOUNT_STATISTICS,
        ),
    )


@lru_cache(maxsize=1)
def get_csv_ingestion_settings() -> CSVIngestionSettings:
    """
    Return cached CSV ingestion settings from environment variables.
    """

    return CSVIngestionSettings(
        max_validation_errors=max(1, _get_int_env("CSV_INGEST_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("CSV_INGEST_LOG_VALIDATION_ERRORS", True),
    )
