"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

_DATA_DIR_ENV = "PYSTATDB_DATA_DIR"
_SEASON_ENV = "PYSTATDB_SEASON"
_FETCH_DELAY_ENV = "PYSTATDB_FETCH_DELAY"
_FETCH_TIMEOUT_ENV = "PYSTATDB_FETCH_TIMEOUT"
_PITCHER_FETCH_TIMEOUT_ENV = "PYSTATDB_PITCHER_FETCH_TIMEOUT"
_FEED_URL_ENV = "PYSTATDB_FEED_URL"

DEFAULT_DATA_DIR = Path("data")
DEFAULT_SEASON = 2025
DEFAULT_FETCH_DELAY = 1.5
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_PITCHER_FETCH_TIMEOUT = 180.0
DEFAULT_FEED_URL = "https://baseballsavant.mlb.com/statcast_search/csv"


def _env_raw(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    raw = _env_raw(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        logger.warning("Ignoring %s=%r, expected a number; keeping %s", name, raw, default)
        return default
    return value if minimum is None else max(minimum, value)


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = _env_raw(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected an integer; keeping %s", name, raw, default)
        return default
    return value if minimum is None else max(minimum, value)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    season: int = DEFAULT_SEASON
    fetch_delay: float = DEFAULT_FETCH_DELAY
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    pitcher_fetch_timeout: float = DEFAULT_PITCHER_FETCH_TIMEOUT
    feed_url: str = DEFAULT_FEED_URL

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = os.getenv(_DATA_DIR_ENV)
        return cls(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            season=_env_int(_SEASON_ENV, DEFAULT_SEASON, minimum=1900),
            fetch_delay=_env_float(_FETCH_DELAY_ENV, DEFAULT_FETCH_DELAY, minimum=0.0),
            fetch_timeout=_env_float(_FETCH_TIMEOUT_ENV, DEFAULT_FETCH_TIMEOUT, minimum=1.0),
            pitcher_fetch_timeout=_env_float(
                _PITCHER_FETCH_TIMEOUT_ENV, DEFAULT_PITCHER_FETCH_TIMEOUT, minimum=1.0
            ),
            feed_url=os.getenv(_FEED_URL_ENV) or DEFAULT_FEED_URL,
        )
