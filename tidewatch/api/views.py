"""REST API views for tide information."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping, Optional

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from tidewatch.config import UNITS
from tidewatch.entities import Coordinate
from tidewatch.errors import AuthInvalid, NoData
from tidewatch.location import CoordinateResolver, timezone_to_coordinate
from tidewatch.services.tides import TideService
from tidewatch.units import format_level


logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_tide_service() -> TideService:
    return TideService.from_settings(settings.TIDES)


class BadRequest(ValueError):
    """Invalid query parameters."""


def _query_coordinate(params: Mapping[str, str]) -> Optional[Coordinate]:
    lat = params.get("lat")
    lon = params.get("lon")
    if lat in (None, "") and lon in (None, ""):
        return None
    if lat in (None, "") or lon in (None, ""):
        raise BadRequest("lat and lon must be provided together")
    try:
        return Coordinate(latitude=float(lat), longitude=float(lon))
    except ValueError as exc:
        raise BadRequest("lat and lon must be valid coordinates") from exc


class TidesView(APIView):
    """Tide snapshot for a location."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the tide snapshot for the requested location."""
        params = request.query_params
        tz = params.get("timezone") or settings.TIDES_DEFAULT_TIMEZONE
        units = params.get("units") or settings.TIDES.default_units
        if units not in UNITS:
            return Response({"detail": f"units must be one of {', '.join(UNITS)}"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            query_coord = _query_coordinate(params)
        except BadRequest as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        coord = CoordinateResolver(
            [
                lambda: query_coord,
                lambda: timezone_to_coordinate(tz),
                lambda: settings.TIDES.default_coordinate,
            ]
        ).resolve()
        force_refresh = params.get("refresh", "").lower() in _TRUTHY

        try:
            snapshot = get_tide_service().get_snapshot(
                coord, tz, force_refresh=force_refresh, timeout=settings.TIDES.wait_timeout
            )
        except AuthInvalid:
            logger.error("Tide provider rejected the configured API key")
            return Response({"detail": "tide provider rejected credentials"}, status=status.HTTP_502_BAD_GATEWAY)
        except NoData:
            return Response({"detail": "no tide data for this location"}, status=status.HTTP_404_NOT_FOUND)

        payload = snapshot.as_dict()
        payload["latitude"] = coord.latitude
        payload["longitude"] = coord.longitude
        payload["units"] = units
        payload["current_level_formatted"] = format_level(snapshot.current_level_m, units)
        return Response(payload, status=status.HTTP_200_OK)


class TidesCacheView(APIView):
    """Drop cached tide snapshots so the next request refetches."""

    permission_classes = [AllowAny]

    def delete(self, request, *args, **kwargs):
        try:
            coord = _query_coordinate(request.query_params)
        except BadRequest as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        service = get_tide_service()
        if coord is None:
            service.invalidate_all()
        else:
            service.invalidate(coord)
        return Response(status=status.HTTP_204_NO_CONTENT)
