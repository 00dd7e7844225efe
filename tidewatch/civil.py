"""Local-calendar windowing of UTC event streams."""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .entities import Extremum


logger = logging.getLogger(__name__)


def resolve_timezone(tz: Optional[str]) -> tzinfo:
    """Return the zone for ``tz``, or UTC when the name is unknown."""
    if not tz:
        return timezone.utc
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC calendar", tz)
        return timezone.utc


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def civil_date(instant: datetime, zone: tzinfo) -> date:
    return _as_utc(instant).astimezone(zone).date()


def civil_today(tz: Optional[str], now: datetime) -> date:
    return civil_date(now, resolve_timezone(tz))


def today_window(extrema: Iterable[Extremum], tz: Optional[str], now: datetime) -> List[Extremum]:
    """Keep the extrema that fall on today's date as seen in ``tz``.

    Each event is converted to the local calendar on its own, so the window
    is local midnight to local midnight and not the UTC day.
    """
    zone = resolve_timezone(tz)
    today = civil_date(now, zone)
    selected = [item for item in extrema if civil_date(item.instant, zone) == today]
    selected.sort(key=lambda item: item.instant)
    return selected


__all__ = ["civil_date", "civil_today", "resolve_timezone", "today_window"]
