from __future__ import annotations

import random
from typing import List

import pytest
from requests_mock import Mocker

from helpers import NOW, TimeController
from tidewatch.cache import SingleFlight, SnapshotCache
from tidewatch.fallback import FallbackSynthesizer
from tidewatch.providers.base import TideProvider
from tidewatch.services.tides import TideService


@pytest.fixture
def requests_mock():
    with Mocker() as mock:
        yield mock


@pytest.fixture
def controller() -> TimeController:
    return TimeController()


@pytest.fixture
def cache(controller: TimeController) -> SnapshotCache:
    return SnapshotCache(ttl=3600, time_func=controller)


@pytest.fixture
def make_service(cache: SnapshotCache):
    created: List[TideService] = []

    def factory(provider: TideProvider, **kwargs) -> TideService:
        kwargs.setdefault("cache", cache)
        kwargs.setdefault("synthesizer", FallbackSynthesizer(rng=random.Random(7)))
        kwargs.setdefault("single_flight", SingleFlight())
        kwargs.setdefault("clock", lambda: NOW)
        service = TideService(provider=provider, **kwargs)
        created.append(service)
        return service

    yield factory
    for service in created:
        service.close()
