from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .entities import Estimate, Extremum, ExtremumKind, Trend
from .errors import InsufficientData


def upcoming(extrema: Iterable[Extremum], now: datetime) -> List[Extremum]:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    result = [item for item in extrema if item.instant > now]
    result.sort(key=lambda item: item.instant)
    return result


def estimate(extrema_after_now: Iterable[Extremum]) -> Estimate:
    """Derive trend and level from the next high and next low.

    The level is the mean of the two bounding heights.  This is a display
    approximation only: it ignores where ``now`` sits inside the tidal cycle
    and must not be used for navigation.
    """
    ordered = sorted(extrema_after_now, key=lambda item: item.instant)
    next_high = _first(ordered, ExtremumKind.HIGH)
    next_low = _first(ordered, ExtremumKind.LOW)
    if next_high is None or next_low is None:
        raise InsufficientData("need at least one future high and one future low")

    trend = Trend.RISING if next_high.instant < next_low.instant else Trend.FALLING
    level = (next_high.height_m + next_low.height_m) / 2
    return Estimate(trend=trend, next_high=next_high, next_low=next_low, current_level_m=level)


def _first(extrema: List[Extremum], kind: ExtremumKind) -> Optional[Extremum]:
    for item in extrema:
        if item.kind is kind:
            return item
    return None


__all__ = ["estimate", "upcoming"]
