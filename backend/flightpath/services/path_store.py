"""
In-memory registry of simulated paths.

Paths created through the API are kept here so a client can fetch or
export them later by ``pathId``.  The registry is an ``OrderedDict``
used as a least-recently-used cache: once more than ``capacity`` paths
are stored, the path that was touched longest ago is dropped.  A
reentrant lock protects the dictionary so the store can be shared
across request handlers.

Nothing in the path generator reads from this store; every simulation
is computed from scratch.
"""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, List, Optional

from ..api.models import SimulatedPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredPath:
    """A simulated path as it was returned to the client.

    Attributes:
        path_id: Identifier handed out by :meth:`PathStore.put_path`.
        points: Ordered simulated samples.
        times: Time offset of each sample in seconds.
        metadata: Summary returned alongside the points.
    """

    path_id: str
    points: List[SimulatedPoint]
    times: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)


class PathStore:
    """Bounded LRU store of :class:`StoredPath` entries."""

    def __init__(self, capacity: int = 128) -> None:
        self.capacity = max(1, capacity)
        self._paths: "OrderedDict[str, StoredPath]" = OrderedDict()
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def put_path(
        self,
        points: List[SimulatedPoint],
        times: List[float],
        metadata: Dict[str, Any],
    ) -> StoredPath:
        """Store a new path under a fresh identifier and return the entry."""
        entry = StoredPath(
            path_id=uuid.uuid4().hex,
            points=list(points),
            times=list(times),
            metadata=dict(metadata),
        )
        with self._lock:
            self._paths[entry.path_id] = entry
            self._paths.move_to_end(entry.path_id)
            while len(self._paths) > self.capacity:
                evicted, _ = self._paths.popitem(last=False)
                logger.debug("PathStore: evicted path %s", evicted)
        logger.info("PathStore: stored path %s (%d points)", entry.path_id, len(entry.points))
        return entry

    def get_path(self, path_id: str) -> Optional[StoredPath]:
        """Return the stored path or ``None`` if it is unknown or evicted."""
        with self._lock:
            entry = self._paths.get(path_id)
            if entry is not None:
                self._paths.move_to_end(path_id)
            return entry

    def delete_path(self, path_id: str) -> bool:
        """Remove a path.  Returns True if it existed."""
        with self._lock:
            return self._paths.pop(path_id, None) is not None

    def clear_paths(self) -> None:
        """Remove every stored path."""
        with self._lock:
            self._paths.clear()
