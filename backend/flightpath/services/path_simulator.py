"""
Flight path simulation.

Expands an ordered list of waypoints into the dense sequence of samples
a drone would fly through.  Plain waypoints become a single sample
headed towards the next waypoint.  Orbit waypoints become a circle of
samples around the waypoint, one sample per simulated second at the
cruise speed (never fewer than ``min_points_per_lap`` per lap), with
the nose always pointing at the orbit centre.

The generator is pure: no timing, no caching and no shared state.
Turning samples into timestamps is the job of :mod:`.path_timeline`.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence

from ..api.models import ORBIT, SimulatedPoint, Waypoint
from .geodesy import calculate_bearing, point_at_distance_and_bearing
from .settings import DEFAULT_SETTINGS, SimulationSettings

logger = logging.getLogger(__name__)


def points_per_lap(
    radius: float, speed: float, settings: SimulationSettings = DEFAULT_SETTINGS
) -> int:
    """Number of samples used for one lap of an orbit.

    One sample per ``sample_interval`` seconds of flight at ``speed``,
    with a floor of ``settings.min_points_per_lap`` so that high speeds
    or small radii do not degrade the circle into a polygon.

    Returns 0 when the lap time is not finite (nan or infinite radius);
    such an orbit produces no samples.
    """
    circumference = 2 * math.pi * radius
    time_per_lap = circumference / max(settings.min_speed, speed)
    if not math.isfinite(time_per_lap):
        return 0
    count = math.ceil(time_per_lap / settings.sample_interval)
    return max(count, settings.min_points_per_lap)


def orbit_sample_count(
    waypoint: Waypoint, speed: float, settings: SimulationSettings = DEFAULT_SETTINGS
) -> int:
    """Number of samples :func:`expand_orbit` emits for ``waypoint``."""
    per_lap = points_per_lap(waypoint.orbitRadius, speed, settings)
    if per_lap == 0:
        return 0
    return max(0, per_lap * (waypoint.orbitLaps or 1) + 1)


def count_simulation_points(
    waypoints: Iterable[Waypoint],
    speed: float = DEFAULT_SETTINGS.default_speed,
    settings: SimulationSettings = DEFAULT_SETTINGS,
) -> int:
    """Length of the path :func:`generate_simulation_path` would return.

    Computed from the waypoints alone without sampling anything, so
    callers can reject oversized requests before generating them.
    """
    total = 0
    for wp in waypoints:
        total += orbit_sample_count(wp, speed, settings) if wp.type == ORBIT else 1
    return total


def expand_orbit(
    waypoint: Waypoint, speed: float, settings: SimulationSettings = DEFAULT_SETTINGS
) -> List[SimulatedPoint]:
    """Sample an orbit around ``waypoint``.

    The start bearing is sampled again at the end of every lap, so an
    orbit of ``L`` laps yields ``points_per_lap * L + 1`` samples.  The
    sampling angle keeps growing across laps and is never wrapped.
    """
    per_lap = points_per_lap(waypoint.orbitRadius, speed, settings)
    if per_lap == 0:
        return []
    angle_step = 360.0 / per_lap

    samples: List[SimulatedPoint] = []
    for j in range(orbit_sample_count(waypoint, speed, settings)):
        angle = j * angle_step
        lat, lon = point_at_distance_and_bearing(
            waypoint.lat,
            waypoint.lon,
            waypoint.orbitRadius,
            angle,
            earth_radius=settings.earth_radius,
        )
        # Point-of-interest orbit: face the centre, not the direction of travel
        heading = calculate_bearing(lat, lon, waypoint.lat, waypoint.lon)
        samples.append(
            SimulatedPoint(lat=lat, lon=lon, alt=waypoint.alt, heading=heading, isOrbit=True)
        )
    return samples


def generate_simulation_path(
    waypoints: Iterable[Waypoint],
    speed: float = DEFAULT_SETTINGS.default_speed,
    settings: SimulationSettings = DEFAULT_SETTINGS,
) -> List[SimulatedPoint]:
    """Generate the simulated flight path for a list of waypoints.

    Args:
        waypoints: Waypoints in flight order.  The path is not closed
            back to the first waypoint.
        speed: Cruise speed in m/s.  Values below ``settings.min_speed``
            are clamped when sizing orbits.
        settings: Sampling and geodesy constants.

    Returns:
        The ordered list of :class:`SimulatedPoint` samples.  An empty
        input gives an empty list.
    """
    wps: Sequence[Waypoint] = list(waypoints)
    path: List[SimulatedPoint] = []
    orbit_count = 0

    for i, current in enumerate(wps):
        if current.type == ORBIT:
            orbit_count += 1
            path.extend(expand_orbit(current, speed, settings))
            continue

        heading = 0.0
        if i + 1 < len(wps):
            nxt = wps[i + 1]
            heading = calculate_bearing(current.lat, current.lon, nxt.lat, nxt.lon)
        elif i > 0 and path:
            # Last waypoint keeps the approach heading
            heading = path[-1].heading

        path.append(
            SimulatedPoint(
                lat=current.lat, lon=current.lon, alt=current.alt, heading=heading, isOrbit=False
            )
        )

    logger.debug(
        "generate_simulation_path: waypoints=%d orbits=%d speed=%s samples=%d",
        len(wps),
        orbit_count,
        speed,
        len(path),
    )
    return path
