from __future__ import annotations

from datetime import date, datetime, timezone

from helpers import make_extremum
from tidewatch.civil import civil_today, resolve_timezone, today_window


def test_auckland_late_utc_event_counts_as_today():
    extremum = make_extremum("2025-01-01T23:30:00Z", "high", 2.4)
    now = datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)

    assert today_window([extremum], "Pacific/Auckland", now) == [extremum]


def test_auckland_excludes_events_on_the_next_local_day():
    now = datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)
    tomorrow_local = make_extremum("2025-01-02T11:30:00Z", "low", 0.4)
    yesterday_local = make_extremum("2025-01-01T10:00:00Z", "low", 0.4)

    assert today_window([tomorrow_local, yesterday_local], "Pacific/Auckland", now) == []


def test_western_timezone_uses_local_midnight():
    now = datetime(2025, 1, 2, 6, 0, tzinfo=timezone.utc)  # 22:00 on Jan 1 in Los Angeles
    noon_local = make_extremum("2025-01-01T20:00:00Z", "high", 1.6)
    after_midnight_local = make_extremum("2025-01-02T09:00:00Z", "low", 0.2)

    result = today_window([after_midnight_local, noon_local], "America/Los_Angeles", now)

    assert result == [noon_local]


def test_output_is_sorted_by_instant():
    now = datetime(2025, 3, 10, 1, 0, tzinfo=timezone.utc)
    events = [
        make_extremum("2025-03-10T18:00:00Z", "high", 1.9),
        make_extremum("2025-03-10T06:00:00Z", "high", 1.7),
        make_extremum("2025-03-10T12:00:00Z", "low", 0.3),
    ]

    result = today_window(events, "UTC", now)

    assert [item.instant.hour for item in result] == [6, 12, 18]


def test_unknown_timezone_falls_back_to_utc_calendar():
    now = datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)
    late_yesterday = make_extremum("2025-01-01T23:30:00Z", "high", 2.4)
    today = make_extremum("2025-01-02T15:00:00Z", "low", 0.5)

    result = today_window([late_yesterday, today], "Not/AZone", now)

    assert result == [today]
    assert resolve_timezone("Not/AZone") is timezone.utc
    assert resolve_timezone(None) is timezone.utc


def test_civil_today_differs_from_utc_date():
    now = datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc)

    assert civil_today("Pacific/Auckland", now) == date(2025, 1, 2)
    assert civil_today("Pacific/Honolulu", now) == date(2025, 1, 2)
    assert civil_today("Pacific/Kiritimati", datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)) == date(2025, 1, 2)
