from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from .base import TideProvider
from ..entities import Coordinate, Extremum, ExtremumKind
from ..errors import ConfigMissing, NoData


class StormglassTideProvider(TideProvider):
    """Tide extremes from the Stormglass point endpoint."""

    name = "stormglass"
    base_url = "https://api.stormglass.io/v2/tide/extremes/point"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(api_key=api_key, **kwargs)
        self.base_url = base_url or self.base_url
        self._log = logging.getLogger(self.__class__.__name__)

    def extremes(self, coord: Coordinate, start: datetime, end: datetime) -> List[Extremum]:
        if not self.configured:
            raise ConfigMissing("Stormglass API key not configured")
        params = {
            "lat": coord.latitude,
            "lng": coord.longitude,
            "start": _unix(start),
            "end": _unix(end),
        }
        headers = {"Authorization": self.api_key}
        response = self._request("GET", self.base_url, params=params, headers=headers)
        data = self._json(response)
        records = data.get("data") if isinstance(data, dict) else None
        result = [point for point in (_parse_record(r) for r in records or []) if point is not None]
        if not result:
            self._log.warning("No tide data available for %s", coord)
            raise NoData("no tide extremes for location")
        result.sort(key=lambda item: item.instant)
        self._log.info("Fetched %d tide extremes for %s", len(result), coord)
        return result


def _unix(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def _parse_record(record: object) -> Optional[Extremum]:
    if not isinstance(record, dict):
        return None
    try:
        kind = ExtremumKind(str(record.get("type", "")).lower())
        height = float(record["height"])
        instant = _parse_time(record["time"])
    except (KeyError, TypeError, ValueError):
        logging.getLogger(__name__).debug("Skipping malformed record: %r", record)
        return None
    return Extremum(instant=instant, kind=kind, height_m=height)


def _parse_time(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = ["StormglassTideProvider"]
