"""Great-circle distance and bounding boxes for radius searches."""

import math
from dataclasses import dataclass

# Mean Earth radius (IUGG), meters
EARTH_RADIUS_METERS = 6_371_008.8

MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0
MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0


def is_valid_longitude(longitude: float) -> bool:
    return not math.isnan(longitude) and MIN_LONGITUDE <= longitude <= MAX_LONGITUDE


def is_valid_latitude(latitude: float) -> bool:
    return not math.isnan(latitude) and MIN_LATITUDE <= latitude <= MAX_LATITUDE


def haversine_distance(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Great-circle distance in meters between two (longitude, latitude) points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Clamp float drift so asin stays in its domain
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


@dataclass(frozen=True)
class BoundingBox:
    """Latitude band plus one or two longitude ranges.

    Two ranges are returned when the box crosses the antimeridian.
    """

    min_latitude: float
    max_latitude: float
    longitude_ranges: tuple[tuple[float, float], ...]


def bounding_box(longitude: float, latitude: float, radius_meters: float) -> BoundingBox:
    """Smallest lat/lon box containing every point within radius_meters of the center.

    The box is a superset of the circle; callers still filter by exact distance.
    """
    angular = radius_meters / EARTH_RADIUS_METERS
    lat = math.radians(latitude)
    lon = math.radians(longitude)

    min_lat = lat - angular
    max_lat = lat + angular

    # Circle covers a pole: every longitude is in range
    if min_lat <= -math.pi / 2 or max_lat >= math.pi / 2 or angular >= math.pi:
        return BoundingBox(
            min_latitude=max(math.degrees(min_lat), MIN_LATITUDE),
            max_latitude=min(math.degrees(max_lat), MAX_LATITUDE),
            longitude_ranges=((MIN_LONGITUDE, MAX_LONGITUDE),),
        )

    d_lon = math.asin(min(1.0, math.sin(angular) / math.cos(lat)))
    min_lon = math.degrees(lon - d_lon)
    max_lon = math.degrees(lon + d_lon)

    if min_lon < MIN_LONGITUDE:
        ranges = ((min_lon + 360.0, MAX_LONGITUDE), (MIN_LONGITUDE, max_lon))
    elif max_lon > MAX_LONGITUDE:
        ranges = ((min_lon, MAX_LONGITUDE), (MIN_LONGITUDE, max_lon - 360.0))
    else:
        ranges = ((min_lon, max_lon),)

    return BoundingBox(
        min_latitude=math.degrees(min_lat),
        max_latitude=math.degrees(max_lat),
        longitude_ranges=ranges,
    )
