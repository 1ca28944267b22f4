"""
Timing and summary helpers for simulated paths.

The path generator only produces headed samples.  A consumer animating
the flight paces it by the straight-line distance between consecutive
samples at the cruise speed; the helpers here compute those distances,
the resulting per-sample time offsets and a small metadata summary.
Distances are evaluated with numpy over the whole path at once.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..api.models import SimulatedPoint
from .settings import DEFAULT_SETTINGS, SimulationSettings


def compute_segment_distances(
    points: Sequence[SimulatedPoint], settings: SimulationSettings = DEFAULT_SETTINGS
) -> np.ndarray:
    """Distance in meters between each pair of consecutive samples.

    The ground distance is the haversine great-circle distance; the
    altitude change is combined with it as the other leg of a right
    triangle.  Returns an array of length ``len(points) - 1`` (empty for
    fewer than two points).
    """
    if len(points) < 2:
        return np.zeros(0, dtype=float)

    coords = np.array([(p.lat, p.lon, p.alt) for p in points], dtype=float)
    lat = np.radians(coords[:, 0])
    lon = np.radians(coords[:, 1])
    alt = coords[:, 2]

    dphi = np.diff(lat)
    dlmb = np.diff(lon)
    a = np.sin(dphi / 2) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlmb / 2) ** 2
    ground = 2 * settings.earth_radius * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
    return np.hypot(ground, np.diff(alt))


def compute_sample_times(
    points: Sequence[SimulatedPoint],
    speed: float,
    settings: SimulationSettings = DEFAULT_SETTINGS,
    distances: Optional[np.ndarray] = None,
) -> List[float]:
    """Time offset in seconds of every sample, starting at 0.

    Each step lasts ``distance / speed`` but never less than
    ``settings.min_step_seconds`` so that coincident samples (such as
    the duplicated sample at each lap boundary) still advance the clock.
    Pass ``distances`` from :func:`compute_segment_distances` to avoid
    measuring the path again.
    """
    if not points:
        return []
    if distances is None:
        distances = compute_segment_distances(points, settings)
    steps = np.maximum(settings.min_step_seconds, distances / max(settings.min_speed, speed))
    times = np.concatenate(([0.0], np.cumsum(steps)))
    return times.tolist()


def summarize_path(
    points: Sequence[SimulatedPoint],
    speed: float,
    settings: SimulationSettings = DEFAULT_SETTINGS,
    distances: Optional[np.ndarray] = None,
    times: Optional[List[float]] = None,
) -> Dict[str, Any]:
    """Build the metadata dictionary returned alongside a simulated path.

    ``distances`` and ``times`` are computed here unless the caller
    already has them.
    """
    if distances is None:
        distances = compute_segment_distances(points, settings)
    if times is None:
        times = compute_sample_times(points, speed, settings, distances=distances)
    return {
        "length": float(distances.sum()),
        "duration": times[-1] if times else 0.0,
        "points": len(points),
        "orbitPoints": sum(1 for p in points if p.isOrbit),
        "speed": speed,
    }
