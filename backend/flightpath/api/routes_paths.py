"""
Routes for flight path simulation, retrieval and export.

``POST /paths`` expands the submitted waypoints into a simulated flight
and stores the result so it can be fetched again or exported as CSV.
``POST /paths/preview`` runs the same simulation without storing it,
which suits clients that recompute the path on every waypoint edit.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Request, Response

from .models import SimulationPreview, SimulationRequest, SimulationResponse, SimulatedPoint
from ..services.path_simulator import count_simulation_points, generate_simulation_path
from ..services.path_store import PathStore, StoredPath
from ..services.path_timeline import compute_sample_times, compute_segment_distances, summarize_path
from ..services.settings import SimulationSettings

logger = logging.getLogger(__name__)

router = APIRouter()


def _settings(request: Request) -> SimulationSettings:
    return request.app.state.settings


def _store(request: Request) -> PathStore:
    return request.app.state.path_store


def _simulate(
    body: SimulationRequest, settings: SimulationSettings
) -> Tuple[List[SimulatedPoint], List[float], dict]:
    """Run the simulation and derive timing and metadata for a request.

    Raises:
        HTTPException: 422 when the path would exceed
            ``settings.max_path_points`` samples.
    """
    speed = body.speed if body.speed is not None else settings.default_speed
    expected = count_simulation_points(body.waypoints, speed=speed, settings=settings)
    if expected > settings.max_path_points:
        logger.warning(
            "Rejecting simulation of %d points (limit %d)", expected, settings.max_path_points
        )
        raise HTTPException(
            status_code=422,
            detail=(
                f"Path would contain {expected} points, more than the limit of "
                f"{settings.max_path_points}; reduce orbit radius or laps, or raise the speed"
            ),
        )
    points = generate_simulation_path(body.waypoints, speed=speed, settings=settings)
    distances = compute_segment_distances(points, settings)
    times = compute_sample_times(points, speed, settings, distances=distances)
    metadata = summarize_path(points, speed, settings, distances=distances, times=times)
    metadata["waypoints"] = len(body.waypoints)
    return points, times, metadata


def _get_or_404(request: Request, path_id: str) -> StoredPath:
    entry = _store(request).get_path(path_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Path not found")
    return entry


@router.post("/paths", response_model=SimulationResponse, status_code=201)
async def create_path(body: SimulationRequest, request: Request) -> SimulationResponse:
    """Simulate a flight over the given waypoints and store the result.

    Args:
        body: Waypoints in flight order, an optional cruise speed and
            whether per-point times should be included.

    Returns:
        SimulationResponse: The stored path with its identifier.
    """
    points, times, metadata = _simulate(body, _settings(request))
    entry = _store(request).put_path(points, times, metadata)
    logger.debug(
        "create_path: path=%s waypoints=%d points=%d speed=%s",
        entry.path_id,
        metadata["waypoints"],
        metadata["points"],
        metadata["speed"],
    )
    return SimulationResponse(
        pathId=entry.path_id,
        points=points,
        times=times if body.includeTimes else None,
        metadata=metadata,
    )


@router.post("/paths/preview", response_model=SimulationPreview)
async def preview_path(body: SimulationRequest, request: Request) -> SimulationPreview:
    """Simulate a flight without storing it."""
    points, times, metadata = _simulate(body, _settings(request))
    return SimulationPreview(
        points=points,
        times=times if body.includeTimes else None,
        metadata=metadata,
    )


@router.get("/paths/{path_id}", response_model=SimulationResponse)
async def get_path(path_id: str, request: Request, includeTimes: bool = False) -> SimulationResponse:
    """Return a previously stored path."""
    entry = _get_or_404(request, path_id)
    return SimulationResponse(
        pathId=entry.path_id,
        points=entry.points,
        times=entry.times if includeTimes else None,
        metadata=entry.metadata,
    )


@router.delete("/paths/{path_id}", status_code=204)
async def delete_path(path_id: str, request: Request) -> Response:
    """Forget a stored path."""
    if not _store(request).delete_path(path_id):
        raise HTTPException(status_code=404, detail="Path not found")
    return Response(status_code=204)


@router.get("/paths/{path_id}/export")
async def export_path(path_id: str, request: Request, precision: Optional[int] = None) -> Response:
    """Export the stored path as CSV.

    Columns are ``index,lat,lon,alt,heading,isOrbit,time``.  When
    ``precision`` is given, floating point columns are rounded to that
    many decimal places.

    Args:
        path_id: Identifier of the path to export.
        precision: Optional number of decimals for float columns.

    Returns:
        A Response containing CSV data for the points.
    """
    entry = _get_or_404(request, path_id)

    def fmt(value: float) -> str:
        if precision is None:
            return repr(float(value))
        return f"{value:.{max(0, precision)}f}"

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["index", "lat", "lon", "alt", "heading", "isOrbit", "time"])
    for idx, (p, t) in enumerate(zip(entry.points, entry.times)):
        writer.writerow(
            [idx, fmt(p.lat), fmt(p.lon), fmt(p.alt), fmt(p.heading), str(p.isOrbit).lower(), fmt(t)]
        )
    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="path_{path_id}.csv"'},
    )
