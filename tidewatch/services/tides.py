from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional

from ..cache import SingleFlight, SnapshotCache
from ..civil import today_window
from ..config import TideSettings
from ..entities import Coordinate, Snapshot
from ..errors import AuthInvalid, FetchTimeout, InsufficientData, NoData, RateLimited, Unavailable
from ..fallback import FallbackSynthesizer
from ..location import location_key, location_label
from ..providers.base import RequestConfig, TideProvider
from ..providers.stormglass import StormglassTideProvider
from ..trend import estimate, upcoming


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TideService:
    """Cache-fronted tide lookups with stale serving and synthetic fallback.

    ``get_snapshot`` is the only entry point used by the API layer.  Auth and
    no-data failures are raised to the caller; rate limits and outages are
    absorbed by serving the last cached snapshot for the cell, or a synthetic
    one when nothing was ever cached.  A caller whose ``timeout`` runs out
    before the shared fetch finishes is answered the same way.
    """

    def __init__(
        self,
        *,
        provider: TideProvider,
        cache: Optional[SnapshotCache] = None,
        synthesizer: Optional[FallbackSynthesizer] = None,
        single_flight: Optional[SingleFlight] = None,
        clock: Callable[[], datetime] = _utcnow,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.cache = cache or SnapshotCache()
        self.synthesizer = synthesizer or FallbackSynthesizer()
        self.single_flight = single_flight or SingleFlight()
        self._clock = clock
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: TideSettings) -> "TideService":
        provider = StormglassTideProvider(
            api_key=settings.api_key,
            base_url=settings.base_url,
            request_config=RequestConfig(timeout=settings.http_timeout, retries=settings.http_retries),
        )
        if not provider.configured:
            logging.getLogger(cls.__name__).warning("Stormglass API key not configured, serving synthetic tides")
        return cls(
            provider=provider,
            cache=SnapshotCache(ttl=settings.cache_ttl),
        )

    # Public API ---------------------------------------------------------
    def get_snapshot(
        self,
        coord: Coordinate,
        tz: Optional[str],
        force_refresh: bool = False,
        timeout: Optional[float] = None,
    ) -> Snapshot:
        key = location_key(coord)
        if not force_refresh:
            lookup = self.cache.get(key)
            if lookup.fresh:
                self._log.debug("Cache hit for %s", key)
                return lookup.entry.snapshot
        work = partial(self._refresh, key, coord, tz, force_refresh)
        try:
            return self.single_flight.run(key, work, timeout=timeout)
        except FetchTimeout:
            return self._detached(key, coord, tz)

    def invalidate(self, coord: Coordinate) -> bool:
        key = location_key(coord)
        removed = self.cache.invalidate(key)
        self._log.info("Invalidated %s (present=%s)", key, removed)
        return removed

    def invalidate_all(self) -> None:
        self.cache.invalidate_all()
        self._log.info("Invalidated all cached tide snapshots")

    def close(self) -> None:
        self.provider.close()

    # Helpers ------------------------------------------------------------
    def _refresh(self, key: str, coord: Coordinate, tz: Optional[str], force_refresh: bool) -> Snapshot:
        lookup = self.cache.get(key)
        if lookup.fresh and not force_refresh:
            return lookup.entry.snapshot

        now = self._clock()
        if not self.provider.configured:
            return self._fallback(key, coord, tz, now)

        try:
            extrema = self.provider.fetch(coord, now)
        except (AuthInvalid, NoData):
            raise
        except (RateLimited, Unavailable) as exc:
            if lookup.found:
                self._log.warning("Provider %s failed (%s), serving stale cache for %s", self.provider.name, exc.kind.value, key)
                return self._stale(lookup.entry.snapshot)
            self._log.warning("Provider %s failed (%s), no cache for %s", self.provider.name, exc.kind.value, key)
            return self._fallback(key, coord, tz, now)

        try:
            result = estimate(upcoming(extrema, now))
        except InsufficientData:
            self._log.warning("Insufficient tide data for %s", key)
            return self._fallback(key, coord, tz, now)

        snapshot = Snapshot(
            current_level_m=result.current_level_m,
            trend=result.trend,
            next_high=result.next_high,
            next_low=result.next_low,
            today=tuple(today_window(extrema, tz, now)),
            location_label=location_label(tz),
            source=self.provider.name,
        )
        self.cache.put(key, snapshot)
        return snapshot

    def _detached(self, key: str, coord: Coordinate, tz: Optional[str]) -> Snapshot:
        """Answer a caller that stopped waiting on a slow fetch.

        The last cached snapshot is served as degraded.  With nothing cached
        a synthetic snapshot is returned but not stored, so the fetch still
        in flight decides what the cache holds.
        """
        lookup = self.cache.get(key)
        if lookup.fresh:
            return lookup.entry.snapshot
        if lookup.found:
            self._log.warning("Fetch for %s still running, serving cached snapshot", key)
            return self._stale(lookup.entry.snapshot)
        self._log.warning("Fetch for %s still running, serving synthetic tides", key)
        return self.synthesizer.synthesize(coord, tz, self._clock())

    @staticmethod
    def _stale(snapshot: Snapshot) -> Snapshot:
        """Return ``snapshot`` flagged as degraded.

        Every field except ``degraded`` equals the cached snapshot, so callers
        comparing against the cache should compare ``replace(..., degraded=False)``
        or the payload fields rather than the object itself.
        """
        if snapshot.degraded:
            return snapshot
        return replace(snapshot, degraded=True)

    def _fallback(self, key: str, coord: Coordinate, tz: Optional[str], now: datetime) -> Snapshot:
        snapshot = self.synthesizer.synthesize(coord, tz, now)
        self.cache.put(key, snapshot)
        return snapshot


__all__ = ["TideService"]
