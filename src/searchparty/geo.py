"""Distances on the WGS84 sphere between positions and search-area centers."""

from __future__ import annotations

import math
from typing import Protocol

EARTH_RADIUS_M = 6_371_000.0


class LatLon(Protocol):
    """Anything carrying degrees: coordinates, positions, heatmap points."""

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


def distance_m(a: LatLon, b: LatLon) -> float:
    """Great-circle distance in meters (haversine formula)."""
    lat_a = math.radians(a.latitude)
    lat_b = math.radians(b.latitude)
    half_dlat = math.sin((lat_b - lat_a) / 2.0)
    half_dlon = math.sin(math.radians(b.longitude - a.longitude) / 2.0)
    h = half_dlat * half_dlat + math.cos(lat_a) * math.cos(lat_b) * half_dlon * half_dlon
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def within_radius(point: LatLon, center: LatLon, radius_m: float) -> bool:
    """Whether *point* lies inside or on the circle around *center*."""
    return distance_m(point, center) <= radius_m
