"""Runtime configuration for the tide service, read once at startup."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .entities import Coordinate


DEFAULT_BASE_URL = "https://api.stormglass.io/v2/tide/extremes/point"
UNITS = ("metric", "imperial", "mixed")


def _number(environ: Mapping[str, str], name: str, default: str, cast=float):
    raw = environ.get(name, default)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class TideSettings:
    """Settings for :class:`~tidewatch.services.tides.TideService`.

    A missing API key is a valid state: the service then serves synthetic
    tides only.
    """

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    cache_ttl: float = 60 * 60
    http_timeout: float = 10.0
    http_retries: int = 2
    wait_timeout: float = 15.0
    default_latitude: float = 51.4779
    default_longitude: float = 0.0
    default_units: str = "metric"

    def __post_init__(self) -> None:
        if self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be positive")
        if self.http_timeout <= 0:
            raise ValueError("http_timeout must be positive")
        if self.wait_timeout <= 0:
            raise ValueError("wait_timeout must be positive")
        if self.default_units not in UNITS:
            raise ValueError(f"default_units must be one of {UNITS}")

    @property
    def default_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.default_latitude, longitude=self.default_longitude)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TideSettings":
        environ = os.environ if environ is None else environ
        return cls(
            api_key=(environ.get("STORMGLASS_API_KEY") or "").strip() or None,
            base_url=environ.get("STORMGLASS_BASE_URL", DEFAULT_BASE_URL),
            cache_ttl=_number(environ, "TIDES_CACHE_TTL", "3600"),
            http_timeout=_number(environ, "TIDES_HTTP_TIMEOUT", "10"),
            http_retries=_number(environ, "TIDES_HTTP_RETRIES", "2", int),
            wait_timeout=_number(environ, "TIDES_WAIT_TIMEOUT", "15"),
            default_latitude=_number(environ, "TIDES_DEFAULT_LAT", "51.4779"),
            default_longitude=_number(environ, "TIDES_DEFAULT_LON", "0.0"),
            default_units=environ.get("TIDES_DEFAULT_UNITS", "metric"),
        )


__all__ = ["DEFAULT_BASE_URL", "TideSettings", "UNITS"]
