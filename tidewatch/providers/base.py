from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..entities import Coordinate, Extremum
from ..errors import AuthInvalid, ProviderError, RateLimited, Unavailable


logger = logging.getLogger(__name__)

FORWARD_WINDOW = timedelta(hours=48)


@dataclass
class RequestConfig:
    timeout: float = 10.0
    retries: int = 2
    backoff_factor: float = 0.3
    status_forcelist: Iterable[int] = (500, 502, 503, 504)


class TideProvider:
    """Base class that adds retry/timeouts and error mapping for HTTP providers."""

    name = "provider"

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.api_key = api_key or None
        self.request_config = request_config or RequestConfig()
        self.session = session or self._build_session(self.request_config)
        self._log = logging.getLogger(self.__class__.__name__)

    @property
    def configured(self) -> bool:
        return self.api_key is not None

    def fetch(self, coord: Coordinate, now: Optional[datetime] = None) -> List[Extremum]:
        """Return extrema for the forward window starting at ``now``."""
        start = now or datetime.now(tz=timezone.utc)
        return self.extremes(coord, start, start + FORWARD_WINDOW)

    def extremes(self, coord: Coordinate, start: datetime, end: datetime) -> List[Extremum]:
        raise NotImplementedError

    def close(self) -> None:
        self.session.close()

    # helpers ------------------------------------------------------------
    def _build_session(self, config: RequestConfig) -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=config.retries,
            backoff_factor=config.backoff_factor,
            status_forcelist=tuple(config.status_forcelist),
            allowed_methods=["GET"],
            raise_on_status=False,
            # a 429 carrying Retry-After must surface as RateLimited, not sleep
            respect_retry_after_header=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _handle_response(self, response: Response) -> Response:
        status = response.status_code
        if status in (401, 403):
            self._log.error("Provider rejected credentials (%s)", status)
            raise AuthInvalid(f"HTTP {status}")
        if status in (402, 429):
            self._log.warning("Quota exceeded: %s", response.text)
            raise RateLimited(f"HTTP {status}")
        if status >= 400:
            self._log.error("Provider returned %s: %s", status, response.text)
            raise Unavailable(f"HTTP {status}")
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise Unavailable("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise Unavailable("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> dict:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise Unavailable("invalid json") from exc


__all__ = ["FORWARD_WINDOW", "ProviderError", "RequestConfig", "TideProvider"]
