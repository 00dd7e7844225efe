from __future__ import annotations

import logging
import time
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeout
from threading import Lock, RLock, Thread
from typing import Callable, Dict, Optional, TypeVar

from .entities import CacheEntry, CacheLookup, CacheStats, Snapshot
from .errors import FetchTimeout


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL = 60 * 60


class SnapshotCache:
    """Thread-safe TTL store of tide snapshots keyed by location cell.

    Expired entries are kept and reported with ``fresh=False`` so callers can
    serve them when the upstream is down.  Nothing is evicted except through
    :meth:`invalidate` and :meth:`invalidate_all`.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, time_func: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._time_func = time_func
        self._storage: Dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._hits = 0
        self._stale_hits = 0
        self._misses = 0

    def get(self, key: str) -> CacheLookup:
        with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                self._misses += 1
                return CacheLookup()
            fresh = self._time_func() - entry.fetched_at < self.ttl
            if fresh:
                self._hits += 1
            else:
                self._stale_hits += 1
            copy = CacheEntry(snapshot=entry.snapshot, fetched_at=entry.fetched_at)
        return CacheLookup(entry=copy, found=True, fresh=fresh)

    def put(self, key: str, snapshot: Snapshot) -> None:
        with self._lock:
            self._storage[key] = CacheEntry(snapshot=snapshot, fetched_at=self._time_func())

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._storage.pop(key, None) is not None

    def invalidate_all(self) -> None:
        with self._lock:
            self._storage.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                stale_hits=self._stale_hits,
                misses=self._misses,
                keys=len(self._storage),
            )


class SingleFlight:
    """Collapse concurrent calls for the same key into one execution.

    Each key's call runs on its own daemon thread rather than in the calling
    thread, so a caller that stops waiting (``timeout``) detaches from the
    result while the shared call still completes for everyone else.  There
    is no shared worker pool: a slow key never queues behind another.
    """

    def __init__(self) -> None:
        self._inflight: Dict[str, Future] = {}
        self._lock = RLock()

    def run(self, key: str, fn: Callable[[], T], timeout: Optional[float] = None) -> T:
        with self._lock:
            future = self._inflight.get(key)
            if future is None:
                future = Future()
                self._inflight[key] = future
                Thread(
                    target=self._execute,
                    args=(key, future, fn),
                    name=f"tidewatch-fetch-{key}",
                    daemon=True,
                ).start()
            else:
                logger.debug("Joining in-flight call for %s", key)
        try:
            return future.result(timeout=timeout)
        except FuturesTimeout as exc:
            logger.warning("Gave up waiting on %s after %ss", key, timeout)
            raise FetchTimeout(f"timed out waiting for {key}") from exc

    def in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._inflight

    def _execute(self, key: str, future: Future, fn: Callable[[], T]) -> None:
        future.set_running_or_notify_cancel()
        try:
            result = fn()
        except BaseException as exc:  # handed to every waiter
            self._release(key, future)
            future.set_exception(exc)
        else:
            self._release(key, future)
            future.set_result(result)

    def _release(self, key: str, future: Future) -> None:
        # released before waiters wake, so they never observe a finished key in flight
        with self._lock:
            if self._inflight.get(key) is future:
                del self._inflight[key]


__all__ = ["DEFAULT_TTL", "SingleFlight", "SnapshotCache"]
