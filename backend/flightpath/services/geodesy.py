"""
Spherical geodesy helpers.

All functions take and return degrees and meters and treat the Earth as a
sphere whose radius defaults to the WGS-84 equatorial radius.  This is
plenty for mission previews but is not a survey-grade ellipsoidal
solution.
"""

from __future__ import annotations

import math
from typing import Tuple

from .settings import DEFAULT_SETTINGS

EARTH_RADIUS_M: float = DEFAULT_SETTINGS.earth_radius


def point_at_distance_and_bearing(
    lat: float,
    lon: float,
    distance: float,
    bearing: float,
    earth_radius: float = EARTH_RADIUS_M,
) -> Tuple[float, float]:
    """Project a point ``distance`` meters from ``(lat, lon)`` along ``bearing``.

    Bearings outside [0, 360) are accepted as-is; the trigonometry wraps
    them naturally.  The returned longitude is not normalised.

    Non-finite inputs give ``(nan, nan)`` rather than raising.

    Returns:
        A ``(lat, lon)`` tuple in degrees.
    """
    if not all(map(math.isfinite, (lat, lon, distance, bearing))):
        return math.nan, math.nan
    angular = distance / earth_radius
    brng = math.radians(bearing)
    lat1 = math.radians(lat)
    lon1 = math.radians(lon)

    sin_lat2 = (
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(brng)
    )
    # Rounding near the poles can push the sine a hair past +/-1
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(brng) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    return math.degrees(lat2), math.degrees(lon2)


def calculate_bearing(
    start_lat: float, start_lon: float, dest_lat: float, dest_lon: float
) -> float:
    """Initial compass bearing from start to destination, in [0, 360).

    Coincident points yield ``atan2(0, 0)`` which is 0.  Non-finite
    inputs yield nan.
    """
    if not all(map(math.isfinite, (start_lat, start_lon, dest_lat, dest_lon))):
        return math.nan
    lat1 = math.radians(start_lat)
    lat2 = math.radians(dest_lat)
    dlon = math.radians(dest_lon) - math.radians(start_lon)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    # Shifting into [180, 540) before the modulo keeps tiny negative
    # angles from rounding up to 360.0
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    earth_radius: float = EARTH_RADIUS_M,
) -> float:
    """Great-circle distance in meters between two points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlmb = math.radians(lon2) - math.radians(lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * earth_radius * math.asin(math.sqrt(min(1.0, a)))
