from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

import requests

from tidewatch.entities import Extremum, ExtremumKind
from tidewatch.providers.base import TideProvider


NOW = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)


class TimeController:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class StubProvider(TideProvider):
    """Provider double returning canned extrema or raising a canned error."""

    name = "stub"

    def __init__(
        self,
        extrema: Optional[Iterable[Extremum]] = None,
        error: Optional[Exception] = None,
        configured: bool = True,
    ) -> None:
        super().__init__(api_key="test-key" if configured else None, session=requests.Session())
        self.extrema: List[Extremum] = list(extrema or [])
        self.error = error
        self.calls = 0

    def extremes(self, coord, start, end):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.extrema)


def make_extremum(iso: str, kind: str, height: float) -> Extremum:
    instant = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    return Extremum(instant=instant, kind=ExtremumKind(kind), height_m=height)


def sample_extrema() -> List[Extremum]:
    return [
        make_extremum("2025-03-10T11:00:00Z", "high", 1.8),
        make_extremum("2025-03-10T17:15:00Z", "low", 0.4),
        make_extremum("2025-03-10T23:30:00Z", "high", 1.9),
        make_extremum("2025-03-11T05:40:00Z", "low", 0.3),
    ]


