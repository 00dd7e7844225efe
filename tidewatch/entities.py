from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ExtremumKind(str, Enum):
    HIGH = "high"
    LOW = "low"


class Trend(str, Enum):
    RISING = "Rising"
    FALLING = "Falling"


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class Extremum:
    """A high or low tide event.

    ``instant`` is always timezone-aware UTC; heights are in metres.
    """

    instant: datetime
    kind: ExtremumKind
    height_m: float

    def __post_init__(self) -> None:
        instant = self.instant
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        object.__setattr__(self, "instant", instant.astimezone(timezone.utc))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "time": _format_instant(self.instant),
            "type": self.kind.value,
            "height_m": self.height_m,
        }


@dataclass(frozen=True)
class Snapshot:
    """Client-facing tide state for one location."""

    current_level_m: float
    trend: Trend
    next_high: Extremum
    next_low: Extremum
    today: Tuple[Extremum, ...]
    location_label: str
    source: str = "stormglass"
    degraded: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "current_level_m": self.current_level_m,
            "trend": self.trend.value,
            "next_high": self.next_high.as_dict(),
            "next_low": self.next_low.as_dict(),
            "today": [item.as_dict() for item in self.today],
            "location": self.location_label,
            "source": self.source,
            "degraded": self.degraded,
        }


@dataclass(frozen=True)
class CacheEntry:
    snapshot: Snapshot
    fetched_at: float


@dataclass(frozen=True)
class CacheLookup:
    entry: Optional[CacheEntry] = None
    found: bool = False
    fresh: bool = False


@dataclass(frozen=True)
class CacheStats:
    """Simple container for cache related counters."""

    hits: int = 0
    stale_hits: int = 0
    misses: int = 0
    keys: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "hits": self.hits,
            "stale_hits": self.stale_hits,
            "misses": self.misses,
            "keys": self.keys,
        }


@dataclass(frozen=True)
class Estimate:
    trend: Trend
    next_high: Extremum
    next_low: Extremum
    current_level_m: float


def _format_instant(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


__all__ = [
    "CacheEntry",
    "CacheLookup",
    "CacheStats",
    "Coordinate",
    "Estimate",
    "Extremum",
    "ExtremumKind",
    "Snapshot",
    "Trend",
]
