"""Client for the external pitch-tracking CSV feed."""

from __future__ import annotations

import csv
import logging
from io import StringIO
from typing import Dict, List, Mapping, Optional, Sequence

import httpx

from pystatdb.config.settings import (
    DEFAULT_FEED_URL,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_PITCHER_FETCH_TIMEOUT,
    DEFAULT_SEASON,
    Settings,
)
from pystatdb.models import PitchEvent


logger = logging.getLogger(__name__)

XWOBA_COLUMN = "estimated_woba_using_speedangle"
BATTER_COLUMNS: tuple[str, ...] = ("zone", "description")
PITCHER_COLUMNS: tuple[str, ...] = ("pitch_type", "vy0", "vz0", "ay", "az")

_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "*/*",
}


class TrackingFeedError(RuntimeError):
    """Raised when the tracking feed cannot be fetched or parsed."""


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    return parsed if parsed == parsed else None


def _parse_int(value: Optional[str]) -> Optional[int]:
    parsed = _parse_float(value)
    if parsed is None or not parsed.is_integer():
        return None
    return int(parsed)


def _row_to_event(row: Mapping[str, Optional[str]]) -> PitchEvent:
    pitch_type = (row.get("pitch_type") or "").strip()
    return PitchEvent(
        zone=_parse_int(row.get("zone")),
        description=(row.get("description") or "").strip(),
        estimated_woba=_parse_float(row.get(XWOBA_COLUMN)),
        vy0=_parse_float(row.get("vy0")),
        vz0=_parse_float(row.get("vz0")),
        ay=_parse_float(row.get("ay")),
        az=_parse_float(row.get("az")),
        pitch_type=pitch_type or None,
        pitcher_id=_parse_int(row.get("pitcher")),
    )


def parse_pitch_csv(text: str, *, required: Sequence[str] = BATTER_COLUMNS) -> List[PitchEvent]:
    """Parse feed CSV text into pitch events.

    An empty body means no pitches; a header missing ``required`` columns is
    treated as a malformed response.
    """

    text = text.lstrip("\ufeff")
    if not text.strip():
        return []
    reader = csv.DictReader(StringIO(text))
    try:
        fieldnames = [name.strip() for name in reader.fieldnames or []]
        missing = [column for column in required if column not in fieldnames]
        if missing:
            raise TrackingFeedError(f"Feed response missing columns: {', '.join(missing)}")
        reader.fieldnames = fieldnames
        return [_row_to_event(row) for row in reader]
    except csv.Error as exc:
        raise TrackingFeedError(f"Malformed feed response at line {reader.line_num}: {exc}") from exc


class TrackingFeedClient:
    """Synchronous feed client; callers pace requests themselves."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_FEED_URL,
        season: int = DEFAULT_SEASON,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        pitcher_timeout: float = DEFAULT_PITCHER_FETCH_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url
        self.season = season
        self.timeout = timeout
        self.pitcher_timeout = pitcher_timeout
        self._client = client or httpx.Client(headers=_HEADERS, follow_redirects=True)
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, settings: Settings, *, client: httpx.Client | None = None) -> "TrackingFeedClient":
        return cls(
            base_url=settings.feed_url,
            season=settings.season,
            timeout=settings.fetch_timeout,
            pitcher_timeout=settings.pitcher_fetch_timeout,
            client=client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TrackingFeedClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _fetch(self, params: Dict[str, str], *, timeout: float) -> str:
        try:
            response = self._client.get(self.base_url, params=params, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise TrackingFeedError(f"Tracking feed timed out after {timeout:.0f}s") from exc
        except httpx.HTTPError as exc:
            raise TrackingFeedError(f"Tracking feed request failed: {exc}") from exc
        if response.status_code != 200:
            raise TrackingFeedError(f"Tracking feed returned HTTP {response.status_code}")
        return response.text

    def _base_params(self, season: int | None) -> Dict[str, str]:
        return {
            "all": "true",
            "hfGT": "R|",
            "hfSea": f"{season or self.season}|",
            "min_pitches": "0",
            "min_results": "0",
            "type": "details",
        }

    def batter_pitches(self, player_id: int, *, season: int | None = None) -> List[PitchEvent]:
        params = self._base_params(season)
        params.update({"player_type": "batter", "batters_lookup[]": str(player_id), "min_pas": "0"})
        text = self._fetch(params, timeout=self.timeout)
        events = parse_pitch_csv(text, required=BATTER_COLUMNS)
        logger.debug("Fetched %d pitches for batter %s", len(events), player_id)
        return events

    def pitcher_pitches(self, player_id: int, *, season: int | None = None) -> List[PitchEvent]:
        params = self._base_params(season)
        params.update({"player_type": "pitcher", "pitchers_lookup[]": str(player_id)})
        text = self._fetch(params, timeout=self.pitcher_timeout)
        events = parse_pitch_csv(text, required=PITCHER_COLUMNS)
        logger.debug("Fetched %d pitches for pitcher %s", len(events), player_id)
        return events
