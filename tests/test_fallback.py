from __future__ import annotations

import random
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from tidewatch.civil import civil_today
from tidewatch.entities import Coordinate, ExtremumKind, Trend
from tidewatch.fallback import FallbackSynthesizer


COORD = Coordinate(50.72, -1.88)

CASES = [
    ("Europe/London", datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)),
    ("Pacific/Auckland", datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)),
    ("America/Los_Angeles", datetime(2025, 1, 2, 6, 0, tzinfo=timezone.utc)),
    ("Asia/Kolkata", datetime(2025, 7, 1, 18, 29, tzinfo=timezone.utc)),
    ("UTC", datetime(2025, 6, 1, 23, 59, 59, tzinfo=timezone.utc)),
    ("Europe/London", datetime(2025, 3, 30, 0, 30, tzinfo=timezone.utc)),
]


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("tz, now", CASES)
def test_fallback_day_is_plausible(tz, now, seed):
    snapshot = FallbackSynthesizer(rng=random.Random(seed)).synthesize(COORD, tz, now)
    zone = ZoneInfo(tz)
    today = civil_today(tz, now)

    kinds = [item.kind for item in snapshot.today]
    assert kinds == [ExtremumKind.HIGH, ExtremumKind.LOW, ExtremumKind.HIGH, ExtremumKind.LOW]
    instants = [item.instant for item in snapshot.today]
    assert instants == sorted(instants)
    assert len(set(instants)) == 4
    assert all(item.instant.astimezone(zone).date() == today for item in snapshot.today)

    highs = [item.height_m for item in snapshot.today if item.kind is ExtremumKind.HIGH]
    lows = [item.height_m for item in snapshot.today if item.kind is ExtremumKind.LOW]
    assert all(3.0 <= value <= 5.0 for value in highs)
    assert all(0.5 <= value <= 2.0 for value in lows)
    assert min(highs) > max(lows)


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("tz, now", CASES)
def test_fallback_headline_matches_events(tz, now, seed):
    snapshot = FallbackSynthesizer(rng=random.Random(seed)).synthesize(COORD, tz, now)

    assert snapshot.next_high.kind is ExtremumKind.HIGH
    assert snapshot.next_low.kind is ExtremumKind.LOW
    assert snapshot.next_high.instant > now
    assert snapshot.next_low.instant > now
    expected = Trend.RISING if snapshot.next_high.instant < snapshot.next_low.instant else Trend.FALLING
    assert snapshot.trend is expected
    assert snapshot.current_level_m == pytest.approx(
        (snapshot.next_high.height_m + snapshot.next_low.height_m) / 2
    )
    assert snapshot.source == "synthetic"
    assert snapshot.degraded is True


def test_fallback_uses_today_events_when_available():
    now = datetime(2025, 3, 10, 0, 5, tzinfo=timezone.utc)
    snapshot = FallbackSynthesizer(rng=random.Random(3)).synthesize(COORD, "UTC", now)

    assert snapshot.next_high == snapshot.today[0]
    assert snapshot.next_low == snapshot.today[1]
    assert snapshot.trend is Trend.RISING


def test_fallback_is_deterministic_for_a_seed():
    now = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)

    first = FallbackSynthesizer(rng=random.Random(42)).synthesize(COORD, "Europe/London", now)
    second = FallbackSynthesizer(rng=random.Random(42)).synthesize(COORD, "Europe/London", now)

    assert first == second


def test_fallback_varies_between_calls():
    now = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)
    synthesizer = FallbackSynthesizer(rng=random.Random(42))

    first = synthesizer.synthesize(COORD, "Europe/London", now)
    second = synthesizer.synthesize(COORD, "Europe/London", now)

    assert first.today != second.today


def test_fallback_unknown_timezone_uses_utc_day():
    now = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)

    snapshot = FallbackSynthesizer(rng=random.Random(1)).synthesize(COORD, "Nowhere/Special", now)

    assert all(item.instant.date() == now.date() for item in snapshot.today)
    assert snapshot.location_label == "Special"


def test_fallback_canonical_local_hours():
    now = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)
    zone = ZoneInfo("Australia/Sydney")

    snapshot = FallbackSynthesizer(rng=random.Random(9)).synthesize(COORD, "Australia/Sydney", now)
    hours = [item.instant.astimezone(zone).hour for item in snapshot.today]

    assert 5 <= hours[0] <= 8
    assert 11 <= hours[1] <= 14
    assert 17 <= hours[2] <= 20
    assert hours[3] == 23
