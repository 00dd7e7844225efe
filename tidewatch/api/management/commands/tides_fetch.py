"""Management command to fetch tides using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from tidewatch.api import views
from tidewatch.entities import Coordinate
from tidewatch.errors import TideError
from tidewatch.location import timezone_to_coordinate


class Command(BaseCommand):
    help = "Fetch the tide snapshot for the provided coordinates or timezone"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--lat", type=float, help="Latitude")
        parser.add_argument("--lon", type=float, help="Longitude")
        parser.add_argument("--timezone", type=str, default="UTC", help="IANA timezone name")
        parser.add_argument("--refresh", action="store_true", help="Bypass the cache")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        latitude = options.get("lat")
        longitude = options.get("lon")
        tz = options["timezone"]

        if latitude is None and longitude is None:
            coord = timezone_to_coordinate(tz)
            if coord is None:
                raise CommandError(f"--lat and --lon are required for timezone {tz}")
        elif latitude is None or longitude is None:
            raise CommandError("--lat and --lon must be used together")
        else:
            try:
                coord = Coordinate(latitude=latitude, longitude=longitude)
            except ValueError as exc:
                raise CommandError(str(exc)) from exc

        try:
            snapshot = views.get_tide_service().get_snapshot(coord, tz, force_refresh=options["refresh"])
        except TideError as exc:
            raise CommandError(f"Tide lookup failed ({exc.kind.value})") from exc

        self.stdout.write(json.dumps(snapshot.as_dict()))
