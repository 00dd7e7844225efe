"""Location helpers: cache keys, timezone lookups and coordinate resolution."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .entities import Coordinate


logger = logging.getLogger(__name__)

CoordinateSource = Callable[[], Optional[Coordinate]]


def location_key(coord: Coordinate) -> str:
    """Quantize a coordinate to a ~1.1 km grid cell.

    Nearby points share a key on purpose, trading accuracy for cache hits.
    """
    return f"{_quantize(coord.latitude)},{_quantize(coord.longitude)}"


def _quantize(value: float) -> str:
    text = f"{value:.2f}"
    if text == "-0.00":
        return "0.00"
    return text


def location_label(tz: Optional[str]) -> str:
    if not tz:
        return "Unknown"
    label = tz.rstrip("/").split("/")[-1].replace("_", " ").strip()
    return label or "Unknown"


# Representative city per IANA zone, used when the client sends a timezone
# but no coordinates.
_TIMEZONE_COORDINATES: Dict[str, Tuple[float, float]] = {
    "UTC": (51.4779, 0.0),
    # North America - Eastern
    "America/New_York": (40.7128, -74.0060),
    "America/Toronto": (43.6532, -79.3832),
    "America/Montreal": (45.5017, -73.5673),
    "America/Detroit": (42.3314, -83.0458),
    "America/Miami": (25.7617, -80.1918),
    "America/Boston": (42.3601, -71.0589),
    "America/Atlanta": (33.7490, -84.3880),
    "America/Bogota": (4.7110, -74.0721),
    "America/Lima": (-12.0464, -77.0428),
    "America/Caracas": (10.4806, -66.9036),
    "America/Santiago": (-33.4489, -70.6693),
    # North America - Central
    "America/Chicago": (41.8781, -87.6298),
    "America/Mexico_City": (19.4326, -99.1332),
    "America/Dallas": (32.7767, -96.7970),
    "America/Houston": (29.7604, -95.3698),
    # North America - Mountain
    "America/Denver": (39.7392, -104.9903),
    "America/Phoenix": (33.4484, -112.0740),
    "America/Calgary": (51.0447, -114.0719),
    # North America - Pacific
    "America/Los_Angeles": (34.0522, -118.2437),
    "America/Vancouver": (49.2827, -123.1207),
    "America/San_Francisco": (37.7749, -122.4194),
    "America/Seattle": (47.6062, -122.3321),
    "America/Anchorage": (61.2181, -149.9003),
    "Pacific/Honolulu": (21.3099, -157.8581),
    # South America
    "America/Sao_Paulo": (-23.5505, -46.6333),
    "America/Rio_de_Janeiro": (-22.9068, -43.1729),
    "America/Buenos_Aires": (-34.6037, -58.3816),
    "America/Montevideo": (-34.9011, -56.1645),
    # Europe
    "Europe/London": (51.5074, -0.1278),
    "Europe/Dublin": (53.3498, -6.2603),
    "Europe/Lisbon": (38.7223, -9.1393),
    "Europe/Madrid": (40.4168, -3.7038),
    "Europe/Paris": (48.8566, 2.3522),
    "Europe/Rome": (41.9028, 12.4964),
    "Europe/Berlin": (52.5200, 13.4050),
    "Europe/Amsterdam": (52.3676, 4.9041),
    "Europe/Brussels": (50.8503, 4.3517),
    "Europe/Vienna": (48.2082, 16.3738),
    "Europe/Zurich": (47.3769, 8.5417),
    "Europe/Stockholm": (59.3293, 18.0686),
    "Europe/Copenhagen": (55.6761, 12.5683),
    "Europe/Oslo": (59.9139, 10.7522),
    "Europe/Helsinki": (60.1699, 24.9384),
    "Europe/Warsaw": (52.2297, 21.0122),
    "Europe/Prague": (50.0755, 14.4378),
    "Europe/Budapest": (47.4979, 19.0402),
    "Europe/Athens": (37.9838, 23.7275),
    "Europe/Bucharest": (44.4268, 26.1025),
    "Europe/Moscow": (55.7558, 37.6173),
    "Europe/Kiev": (50.4501, 30.5234),
    "Europe/Istanbul": (41.0082, 28.9784),
    # Middle East
    "Asia/Dubai": (25.2048, 55.2708),
    "Asia/Riyadh": (24.7136, 46.6753),
    "Asia/Tehran": (35.6892, 51.3890),
    "Asia/Jerusalem": (31.7683, 35.2137),
    "Asia/Baghdad": (33.3152, 44.3661),
    # Central and South Asia
    "Asia/Karachi": (24.8607, 67.0011),
    "Asia/Kabul": (34.5553, 69.2075),
    "Asia/Tashkent": (41.2995, 69.2401),
    "Asia/Kolkata": (19.0760, 72.8777),
    "Asia/Delhi": (28.6139, 77.2090),
    "Asia/Dhaka": (23.8103, 90.4125),
    "Asia/Colombo": (6.9271, 79.8612),
    # Southeast Asia
    "Asia/Bangkok": (13.7563, 100.5018),
    "Asia/Singapore": (1.3521, 103.8198),
    "Asia/Jakarta": (-6.2088, 106.8456),
    "Asia/Manila": (14.5995, 120.9842),
    "Asia/Ho_Chi_Minh": (10.8231, 106.6297),
    "Asia/Kuala_Lumpur": (3.1390, 101.6869),
    # East Asia
    "Asia/Shanghai": (31.2304, 121.4737),
    "Asia/Beijing": (39.9042, 116.4074),
    "Asia/Hong_Kong": (22.3193, 114.1694),
    "Asia/Taipei": (25.0330, 121.5654),
    "Asia/Tokyo": (35.6762, 139.6503),
    "Asia/Seoul": (37.5665, 126.9780),
    # Australia and Pacific
    "Australia/Sydney": (-33.8688, 151.2093),
    "Australia/Melbourne": (-37.8136, 144.9631),
    "Australia/Brisbane": (-27.4698, 153.0251),
    "Australia/Perth": (-31.9505, 115.8605),
    "Australia/Adelaide": (-34.9285, 138.6007),
    "Pacific/Auckland": (-36.8485, 174.7633),
    "Pacific/Fiji": (-18.1416, 178.4419),
    # Africa
    "Africa/Cairo": (30.0444, 31.2357),
    "Africa/Johannesburg": (-26.2041, 28.0473),
    "Africa/Cape_Town": (-33.9249, 18.4241),
    "Africa/Lagos": (6.5244, 3.3792),
    "Africa/Nairobi": (-1.2921, 36.8219),
    "Africa/Casablanca": (33.5731, -7.5898),
    "Africa/Tunis": (36.8065, 10.1815),
    "Africa/Algiers": (36.7538, 3.0588),
    "Africa/Accra": (5.6037, -0.1870),
    "Africa/Addis_Ababa": (9.1450, 38.7667),
    # Atlantic
    "Atlantic/Reykjavik": (64.1466, -21.9426),
}


def timezone_to_coordinate(tz: Optional[str]) -> Optional[Coordinate]:
    if not tz:
        return None
    pair = _TIMEZONE_COORDINATES.get(tz)
    if pair is None:
        return None
    return Coordinate(latitude=pair[0], longitude=pair[1])


class CoordinateResolver:
    """Resolve a coordinate from an ordered list of sources.

    Each source is a zero-argument callable returning a :class:`Coordinate`
    or ``None``; the first non-``None`` answer wins.  A source that raises
    ``ValueError`` (e.g. an unparsable saved location) is skipped.
    """

    def __init__(self, sources: Iterable[CoordinateSource] = ()) -> None:
        self._sources: List[CoordinateSource] = list(sources)

    def then(self, source: CoordinateSource) -> "CoordinateResolver":
        return CoordinateResolver([*self._sources, source])

    def resolve(self) -> Optional[Coordinate]:
        for source in self._sources:
            try:
                coord = source()
            except ValueError as exc:
                logger.debug("Coordinate source %r rejected: %s", source, exc)
                continue
            if coord is not None:
                return coord
        return None


__all__ = [
    "CoordinateResolver",
    "location_key",
    "location_label",
    "timezone_to_coordinate",
]
