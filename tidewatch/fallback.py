"""Synthetic semidiurnal tide day used when no upstream data can be had.

The values are plausible, not predicted: two highs and two lows at roughly
canonical local times with jittered timing and heights.
"""
from __future__ import annotations

import logging
import random
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple

from .civil import civil_date, resolve_timezone
from .entities import Coordinate, Extremum, ExtremumKind, Snapshot
from .location import location_label
from .trend import estimate, upcoming


logger = logging.getLogger(__name__)

SYNTHETIC_SOURCE = "synthetic"

HIGH_RANGE_M = (3.0, 5.0)
LOW_RANGE_M = (0.5, 2.0)

# (kind, earliest local minute, latest local minute) for one civil day.
_SLOTS: Tuple[Tuple[ExtremumKind, int, int], ...] = (
    (ExtremumKind.HIGH, 5 * 60, 8 * 60),
    (ExtremumKind.LOW, 11 * 60, 14 * 60),
    (ExtremumKind.HIGH, 17 * 60, 20 * 60),
    (ExtremumKind.LOW, 23 * 60, 23 * 60 + 59),
)


class FallbackSynthesizer:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def synthesize(self, coord: Coordinate, tz: Optional[str], now: datetime) -> Snapshot:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        zone = resolve_timezone(tz)
        today = civil_date(now, zone)
        day = self.day_cycle(today, zone)

        pending = upcoming(day, now)
        if not _has_both_kinds(pending):
            pending += self.day_cycle(today + timedelta(days=1), zone)
        result = estimate(pending)

        logger.warning("Serving synthetic tides for %s (%s)", coord, tz or "UTC")
        return Snapshot(
            current_level_m=result.current_level_m,
            trend=result.trend,
            next_high=result.next_high,
            next_low=result.next_low,
            today=tuple(day),
            location_label=location_label(tz),
            source=SYNTHETIC_SOURCE,
            degraded=True,
        )

    def day_cycle(self, day: date, zone: tzinfo) -> List[Extremum]:
        """Four alternating extrema for ``day`` in ``zone``, in UTC order."""
        midnight = datetime.combine(day, time(0, 0), tzinfo=zone)
        events = []
        for kind, earliest, latest in _SLOTS:
            minute = self._rng.randint(earliest, latest)
            low, high = HIGH_RANGE_M if kind is ExtremumKind.HIGH else LOW_RANGE_M
            height = round(self._rng.uniform(low, high), 2)
            local = midnight + timedelta(minutes=minute)
            events.append(Extremum(instant=local.astimezone(timezone.utc), kind=kind, height_m=height))
        events.sort(key=lambda item: item.instant)
        return events


def _has_both_kinds(extrema: List[Extremum]) -> bool:
    kinds = {item.kind for item in extrema}
    return ExtremumKind.HIGH in kinds and ExtremumKind.LOW in kinds


__all__ = ["FallbackSynthesizer", "SYNTHETIC_SOURCE"]
