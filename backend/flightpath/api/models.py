"""
Pydantic data models for the flight path planner API.

These models define the shapes of requests and responses used by the
backend.  ``Waypoint`` and ``SimulatedPoint`` are also the types the
path services operate on, so the API contract and the planning code
share a single definition.
"""

from __future__ import annotations

from typing import List, Dict, Any, Literal, Optional
from pydantic import BaseModel, Field

WaypointType = Literal["NORMAL", "ORBIT"]

NORMAL: WaypointType = "NORMAL"
ORBIT: WaypointType = "ORBIT"

DEFAULT_ALTITUDE = 50.0
DEFAULT_RADIUS = 30.0
DEFAULT_ORBIT_LAPS = 1
DEFAULT_SPEED = 10.0


class Waypoint(BaseModel):
    """A planning-time location with a flight behaviour."""

    id: Optional[str] = Field(default=None, description="Client-side identifier, echoed untouched")
    lat: float = Field(..., allow_inf_nan=False, description="Latitude in degrees")
    lon: float = Field(..., allow_inf_nan=False, description="Longitude in degrees")
    alt: float = Field(default=DEFAULT_ALTITUDE, allow_inf_nan=False, description="Altitude in meters")
    type: WaypointType = Field(
        default=NORMAL,
        description="'NORMAL' to fly through the point, 'ORBIT' to circle around it",
    )
    # Orbit attributes are ignored for NORMAL waypoints.  The radius is
    # deliberately not range checked: a zero radius collapses the orbit
    # onto its centre instead of being rejected.
    orbitRadius: float = Field(
        default=DEFAULT_RADIUS, allow_inf_nan=False, description="Orbit radius in meters"
    )
    orbitLaps: int = Field(default=DEFAULT_ORBIT_LAPS, ge=1, description="Number of full circles")


class SimulatedPoint(BaseModel):
    """One sample of the expanded flight path."""

    lat: float
    lon: float
    alt: float
    heading: float = Field(..., description="Compass heading in degrees, [0, 360)")
    isOrbit: bool = Field(..., description="True when the sample belongs to an orbit expansion")


class SimulationRequest(BaseModel):
    """Request body for simulating a flight over a list of waypoints."""

    waypoints: List[Waypoint] = Field(
        default_factory=list, description="Waypoints in intended flight order"
    )
    speed: Optional[float] = Field(
        default=None,
        allow_inf_nan=False,
        description="Cruise speed in m/s.  Defaults to the server's configured speed.",
    )
    includeTimes: bool = Field(
        default=False,
        description="When true the response carries a time offset (seconds) for each point",
    )


class SimulationPreview(BaseModel):
    """Simulated path returned without being stored."""

    points: List[SimulatedPoint] = Field(..., description="Ordered samples of the simulated flight")
    times: Optional[List[float]] = Field(
        default=None, description="Time offset in seconds for each point, when requested"
    )
    metadata: Dict[str, Any] = Field(
        ..., description="Summary such as length, duration and point counts"
    )


class SimulationResponse(SimulationPreview):
    """Simulated path that has been stored and can be fetched or exported."""

    pathId: str = Field(..., description="Unique identifier for the stored path")
