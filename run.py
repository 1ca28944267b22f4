"""
Entry point for the flight path planner.

Running this script with ``python run.py`` will start the FastAPI
server that powers the simulation API.  The application defined in
``backend/flightpath/main.py`` is imported after adjusting the Python
path to include the ``backend`` directory.

The bind address can be changed with ``FLIGHTPATH_HOST`` and
``FLIGHTPATH_PORT``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import logging
import uvicorn

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> None:
    """Run the Uvicorn server hosting the flight path planner."""
    # Make ``flightpath`` importable when running from a source checkout
    # without ``pip install -e .``.
    backend_dir = Path(__file__).resolve().parent / "backend"
    if str(backend_dir) not in sys.path:
        sys.path.append(str(backend_dir))

    # Import inside main() to avoid modifying sys.path at module import time.
    from flightpath.main import app  # type: ignore

    host = os.environ.get("FLIGHTPATH_HOST", "0.0.0.0")
    port = int(os.environ.get("FLIGHTPATH_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
