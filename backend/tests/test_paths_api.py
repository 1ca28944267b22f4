"""
Tests for path simulation, retrieval and export endpoints.

These tests use FastAPI's TestClient to simulate requests against the
application without running a real server.  A fresh application is
built for each test so stored paths never leak between tests.
"""

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add the backend directory to sys.path so we can import the app
sys.path.append(str(Path(__file__).resolve().parents[1]))

from flightpath.main import create_app  # type: ignore
from flightpath.services.settings import SimulationSettings  # type: ignore


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(SimulationSettings()))


MISSION = {
    "waypoints": [
        {"id": "a", "lat": 0.0, "lon": 0.0, "alt": 10.0, "type": "NORMAL"},
        {"id": "b", "lat": 0.0, "lon": 0.001, "alt": 20.0, "type": "ORBIT", "orbitRadius": 30.0, "orbitLaps": 1},
        {"id": "c", "lat": 0.0, "lon": 0.002, "alt": 10.0},
    ],
    "speed": 10.0,
}


def test_health(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_create_fetch_export_delete(client: TestClient) -> None:
    """A created path can be fetched, exported as CSV and deleted."""
    resp = client.post("/api/paths", json={**MISSION, "includeTimes": True})
    assert resp.status_code == 201
    data = resp.json()
    path_id = data["pathId"]
    assert len(data["points"]) == 1 + 25 + 1
    assert len(data["times"]) == len(data["points"])
    meta = data["metadata"]
    assert meta["points"] == 27
    assert meta["orbitPoints"] == 25
    assert meta["waypoints"] == 3
    assert meta["speed"] == 10.0
    assert meta["length"] > 0
    assert meta["duration"] == pytest.approx(data["times"][-1])

    fetched = client.get(f"/api/paths/{path_id}")
    assert fetched.status_code == 200
    assert fetched.json()["points"] == data["points"]
    assert fetched.json()["times"] is None

    csv_resp = client.get(f"/api/paths/{path_id}/export")
    assert csv_resp.status_code == 200
    assert csv_resp.headers["content-type"].startswith("text/csv")
    lines = csv_resp.text.strip().split("\n")
    assert lines[0] == "index,lat,lon,alt,heading,isOrbit,time"
    assert len(lines) == 28
    assert lines[1].split(",")[5] == "false"
    assert lines[2].split(",")[5] == "true"

    assert client.delete(f"/api/paths/{path_id}").status_code == 204
    assert client.get(f"/api/paths/{path_id}").status_code == 404
    assert client.delete(f"/api/paths/{path_id}").status_code == 404


def test_export_precision(client: TestClient) -> None:
    path_id = client.post("/api/paths", json=MISSION).json()["pathId"]
    lines = client.get(f"/api/paths/{path_id}/export", params={"precision": 2}).text.strip().split("\n")
    # Row for the first waypoint: index 0 at the origin, alt 10, heading east
    assert lines[1] == "0,0.00,0.00,10.00,90.00,false,0.00"


def test_preview_is_not_stored(client: TestClient) -> None:
    resp = client.post("/api/paths/preview", json=MISSION)
    assert resp.status_code == 200
    data = resp.json()
    assert "pathId" not in data
    assert data["times"] is None
    assert len(data["points"]) == 27


def test_two_point_mission_heads_east(client: TestClient) -> None:
    body = {
        "waypoints": [
            {"lat": 0, "lon": 0, "alt": 10, "type": "NORMAL"},
            {"lat": 0, "lon": 1, "alt": 10, "type": "NORMAL"},
        ],
        "speed": 10,
    }
    points = client.post("/api/paths/preview", json=body).json()["points"]
    assert len(points) == 2
    assert points[0]["heading"] == pytest.approx(90.0)
    assert points[1]["heading"] == pytest.approx(90.0)
    assert points[0]["isOrbit"] is False


def test_empty_mission(client: TestClient) -> None:
    resp = client.post("/api/paths", json={"waypoints": []})
    assert resp.status_code == 201
    data = resp.json()
    assert data["points"] == []
    assert data["metadata"]["duration"] == 0.0


def test_default_speed_comes_from_settings() -> None:
    """Without a speed in the body the configured default is used."""
    client = TestClient(create_app(SimulationSettings(default_speed=2.0)))
    body = {"waypoints": [{"lat": 0, "lon": 0, "type": "ORBIT", "orbitRadius": 30}]}
    data = client.post("/api/paths/preview", json=body).json()
    # 2*pi*30 / 2 m/s = 94.2 s per lap -> 95 samples + closing sample
    assert len(data["points"]) == 96
    assert data["metadata"]["speed"] == 2.0


def test_zero_radius_orbit_is_accepted(client: TestClient) -> None:
    body = {"waypoints": [{"lat": 1, "lon": 1, "type": "ORBIT", "orbitRadius": 0}], "speed": 10}
    resp = client.post("/api/paths/preview", json=body)
    assert resp.status_code == 200
    assert len(resp.json()["points"]) == 25


@pytest.mark.parametrize(
    "waypoint",
    [
        {"lat": 0, "lon": 0, "type": "LOITER"},
        {"lat": 0, "lon": 0, "type": "ORBIT", "orbitLaps": 0},
        {"lon": 0},
        {"lat": "north", "lon": 0},
    ],
)
def test_malformed_waypoints_are_rejected(client: TestClient, waypoint: dict) -> None:
    resp = client.post("/api/paths", json={"waypoints": [waypoint]})
    assert resp.status_code == 422


def test_unknown_path_export_is_404(client: TestClient) -> None:
    resp = client.get("/api/paths/doesnotexist/export")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Path not found"


def test_store_capacity_evicts_oldest() -> None:
    client = TestClient(create_app(SimulationSettings(max_stored_paths=2)))
    body = {"waypoints": [{"lat": 0, "lon": 0}]}
    ids = [client.post("/api/paths", json=body).json()["pathId"] for _ in range(3)]
    assert client.get(f"/api/paths/{ids[0]}").status_code == 404
    assert client.get(f"/api/paths/{ids[1]}").status_code == 200
    assert client.get(f"/api/paths/{ids[2]}").status_code == 200


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
@pytest.mark.parametrize("field", ["orbitRadius", "lat", "lon", "alt"])
def test_non_finite_numbers_are_rejected(client: TestClient, field: str, value: float) -> None:
    """JSON NaN/Infinity literals are refused instead of reaching the simulator."""
    waypoint = {"lat": 0.0, "lon": 0.0, "type": "ORBIT", "orbitRadius": 30.0, field: value}
    # json.dumps writes NaN/Infinity literals, which Starlette's parser accepts
    resp = client.post(
        "/api/paths/preview",
        content=json.dumps({"waypoints": [waypoint]}),
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 422


def test_non_finite_speed_is_rejected(client: TestClient) -> None:
    resp = client.post(
        "/api/paths/preview",
        content='{"waypoints": [{"lat": 0, "lon": 0}], "speed": NaN}',
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 422


def test_oversized_path_is_rejected_before_generation(client: TestClient) -> None:
    body = {
        "waypoints": [{"lat": 0, "lon": 0, "type": "ORBIT", "orbitRadius": 1e7, "orbitLaps": 1000}],
        "speed": 0,
    }
    resp = client.post("/api/paths", json=body)
    assert resp.status_code == 422
    assert "limit" in resp.json()["detail"]
    assert len(client.app.state.path_store) == 0


def test_path_point_limit_is_configurable() -> None:
    """The limit counts every sample, including the lap-closing one."""
    client = TestClient(create_app(SimulationSettings(max_path_points=27)))
    assert client.post("/api/paths/preview", json=MISSION).status_code == 200
    two_laps = {**MISSION, "waypoints": [dict(wp) for wp in MISSION["waypoints"]]}
    two_laps["waypoints"][1]["orbitLaps"] = 2
    assert client.post("/api/paths/preview", json=two_laps).status_code == 422
