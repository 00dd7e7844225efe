"""Error taxonomy for the tide data service.

Every failure carries an :class:`ErrorKind` so callers branch on the kind
rather than on message text.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG_MISSING = "config_missing"
    AUTH_INVALID = "auth_invalid"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    NO_DATA = "no_data"
    INSUFFICIENT_DATA = "insufficient_data"
    FETCH_TIMEOUT = "fetch_timeout"


class TideError(RuntimeError):
    """Base class for every tide service error."""

    kind: ErrorKind


class ProviderError(TideError):
    """Base upstream provider error."""

    kind = ErrorKind.UNAVAILABLE


class ConfigMissing(ProviderError):
    """No provider credential is configured."""

    kind = ErrorKind.CONFIG_MISSING


class AuthInvalid(ProviderError):
    """The provider rejected the configured credential."""

    kind = ErrorKind.AUTH_INVALID


class RateLimited(ProviderError):
    """Raised when a provider reports a quota/usage limit issue."""

    kind = ErrorKind.RATE_LIMITED


class Unavailable(ProviderError):
    """Transport failure, timeout or server-side error."""

    kind = ErrorKind.UNAVAILABLE


class NoData(ProviderError):
    """The provider answered but returned no usable events."""

    kind = ErrorKind.NO_DATA


class InsufficientData(TideError):
    """Not enough future extrema to derive a trend."""

    kind = ErrorKind.INSUFFICIENT_DATA


class FetchTimeout(TideError):
    """The caller stopped waiting for an in-flight fetch."""

    kind = ErrorKind.FETCH_TIMEOUT


__all__ = [
    "AuthInvalid",
    "ConfigMissing",
    "ErrorKind",
    "FetchTimeout",
    "InsufficientData",
    "NoData",
    "ProviderError",
    "RateLimited",
    "TideError",
    "Unavailable",
]
