"""
Main application module for the flight path planner backend.

This file sets up the FastAPI application, configures CORS so the
globe frontend can make cross-origin requests, mounts the static
frontend files when they exist, and exposes a simple health check
endpoint.  The path router is included under the `/api` namespace.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.routes_paths import router as paths_router
from .services.path_store import PathStore
from .services.settings import SimulationSettings, load_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[SimulationSettings] = None) -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Args:
        settings: Simulation constants.  When omitted they are read from
            ``FLIGHTPATH_*`` environment variables.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    settings = settings or load_settings()
    app = FastAPI(title="Flight Path Planner")

    # Settings and the path registry are per application instance.
    app.state.settings = settings
    app.state.path_store = PathStore(capacity=settings.max_stored_paths)

    # Allow all origins by default.  In production you should restrict
    # this to the domains that are allowed to access your API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint for monitoring and deployment checks.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(paths_router, prefix="/api", tags=["paths"])

    # Mount the frontend as static files if it exists.  The frontend
    # directory is located two levels up from this file.
    frontend_dir = Path(__file__).resolve().parents[2] / "frontend"
    if frontend_dir.exists():
        logger.info("Serving frontend from %s", frontend_dir)
        app.mount(
            "/",
            StaticFiles(directory=str(frontend_dir), html=True),
            name="frontend",
        )

    return app


# Create the application instance.  Uvicorn will import this when
# running `uvicorn flightpath.main:app` from within backend/
app = create_app()
