"""
Simulation settings for the flight path planner.

The path generator depends on a handful of physical and sampling
constants (the sphere radius used for geodesy, the minimum number of
samples per orbit lap, the target sample interval and so on).  Rather
than reading these from module globals, every service takes a
``SimulationSettings`` instance as an explicit, defaulted parameter so
that tests can swap in alternate values.

``load_settings`` builds a settings object from ``FLIGHTPATH_*``
environment variables.  Unparsable or out-of-range values are logged
and ignored.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# Prefix for environment overrides, e.g. FLIGHTPATH_MIN_SPEED=0.5
ENV_PREFIX = "FLIGHTPATH_"


@dataclass(frozen=True)
class SimulationSettings:
    """Constants used by the geodesy, path and timeline services.

    Attributes:
        earth_radius: Sphere radius in meters.  The WGS-84 equatorial
            radius is used as a spherical approximation.
        min_points_per_lap: Lower bound on samples per orbit lap so that
            fast or tight orbits still render as circles.
        sample_interval: Target simulated seconds between orbit samples.
        min_speed: Speed floor in m/s applied before any division by speed.
        default_speed: Cruise speed used when the caller gives none.
        min_step_seconds: Smallest time step between consecutive samples
            on a timeline.
        max_stored_paths: Capacity of the in-memory path registry.
        max_path_points: Largest path the API will generate for a
            single request.
    """

    earth_radius: float = 6378137.0
    min_points_per_lap: int = 24
    sample_interval: float = 1.0
    min_speed: float = 0.1
    default_speed: float = 10.0
    min_step_seconds: float = 0.05
    max_stored_paths: int = 128
    max_path_points: int = 200_000


DEFAULT_SETTINGS = SimulationSettings()

# Fields that are divided by or used as counts; zero or negative values
# would make every orbit or timeline computation fail.
POSITIVE_FIELDS = frozenset(
    {
        "earth_radius",
        "min_points_per_lap",
        "sample_interval",
        "min_speed",
        "min_step_seconds",
        "max_stored_paths",
        "max_path_points",
    }
)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> SimulationSettings:
    """Build settings from ``FLIGHTPATH_*`` environment variables.

    Each dataclass field maps to an upper-cased variable name, for
    example ``min_points_per_lap`` -> ``FLIGHTPATH_MIN_POINTS_PER_LAP``.
    Values are converted to the field's declared type.  A value that
    cannot be converted, is not finite, or is not positive for one of
    ``POSITIVE_FIELDS`` keeps the default and logs a warning.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, float | int] = {}
    for f in fields(SimulationSettings):
        name = ENV_PREFIX + f.name.upper()
        raw = env.get(name)
        if raw is None or raw.strip() == "":
            continue
        cast = int if f.type in ("int", int) else float
        try:
            value = cast(raw)
        except ValueError:
            logger.warning("Ignoring invalid value %r for %s", raw, name)
            continue
        if not math.isfinite(value) or (f.name in POSITIVE_FIELDS and value <= 0):
            logger.warning("Ignoring out-of-range value %r for %s", raw, name)
            continue
        overrides[f.name] = value
    if overrides:
        logger.debug("Simulation settings overrides: %s", overrides)
    return replace(DEFAULT_SETTINGS, **overrides)
