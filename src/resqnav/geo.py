"""Geographic utilities: Haversine distance, radius checks and path helpers."""

from __future__ import annotations

import math
from collections.abc import Sequence

from resqnav.errors import InvalidCoordinate
from resqnav.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance in km between two points on Earth."""
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(min(a, 1.0)))


def validate_coordinate(latitude: float, longitude: float) -> Coordinate:
    """Return ``(latitude, longitude)`` or raise InvalidCoordinate.

    NaN fails both range comparisons, so it is rejected too.
    """
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        raise InvalidCoordinate(latitude, longitude)
    return (float(latitude), float(longitude))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two ``(lat, lon)`` points."""
    lat1, lon1 = validate_coordinate(*a)
    lat2, lon2 = validate_coordinate(*b)
    return haversine(lat1, lon1, lat2, lon2)


def is_within_radius(center: Coordinate, point: Coordinate, radius_km: float) -> bool:
    return distance_km(center, point) <= radius_km


def degree_distance(a: Coordinate, b: Coordinate) -> float:
    """Euclidean distance on raw degrees.

    Ignores longitude convergence; only good for ranking nearby candidates.
    """
    return math.hypot(a[0] - b[0], a[1] - b[1])


def path_length_km(path: Sequence[Coordinate]) -> float:
    """Sum of great-circle leg lengths along *path*."""
    return sum(distance_km(path[i], path[i + 1]) for i in range(len(path) - 1))


def densify(path: Sequence[Coordinate], max_spacing_km: float) -> list[Coordinate]:
    """Insert linearly interpolated vertices so no gap exceeds *max_spacing_km*.

    Original vertices are kept in order; interpolation is on degrees, which
    is accurate enough at route scale.
    """
    if max_spacing_km <= 0:
        raise ValueError("max_spacing_km must be positive")
    if len(path) < 2:
        return list(path)

    dense: list[Coordinate] = [path[0]]
    for start, end in zip(path, path[1:]):
        leg = distance_km(start, end)
        steps = max(1, math.ceil(leg / max_spacing_km))
        for step in range(1, steps + 1):
            t = step / steps
            dense.append(
                (
                    start[0] + (end[0] - start[0]) * t,
                    start[1] + (end[1] - start[1]) * t,
                )
            )
    return dense


def format_distance(km: float) -> str:
    """Human-readable distance: metres below 1 km, one decimal below 10 km."""
    if km < 1.0:
        return f"{int(km * 1000)} m"
    if km < 10.0:
        return f"{km:.1f} km"
    return f"{km:.0f} km"
