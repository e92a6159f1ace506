from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Dict, Generic, TypeVar

from core.events.domain_events import DomainEvents

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ProjectSnapshotCache(Generic[T]):
    """
    Per-project memo of derived views.

    Entries are dropped whole on any change notification for the project and
    rebuilt from a fresh read on the next request; nothing is patched in place.
    A build that overlaps an invalidation is returned to its caller but not
    stored, so the next request reads again.
    """

    def __init__(self, events: DomainEvents) -> None:
        self._entries: Dict[str, T] = {}
        self._generations: Dict[str, int] = {}
        self._lock = RLock()
        self._events = events
        for signal in events.all_signals():
            signal.connect(self.invalidate, weak=True)

    def get_or_build(
        self,
        project_id: str,
        builder: Callable[[], T],
        is_current: Callable[[T], bool] | None = None,
    ) -> T:
        with self._lock:
            cached = self._entries.get(project_id)
            if cached is not None and is_current is not None and not is_current(cached):
                del self._entries[project_id]
                cached = None
            if cached is not None:
                return cached
            generation = self._generations.get(project_id, 0)
        value = builder()
        with self._lock:
            if self._generations.get(project_id, 0) == generation:
                self._entries[project_id] = value
            else:
                logger.debug("Discarding snapshot for project %s built across a change", project_id)
        return value

    def invalidate(self, project_id: str) -> None:
        with self._lock:
            self._generations[project_id] = self._generations.get(project_id, 0) + 1
            if self._entries.pop(project_id, None) is not None:
                logger.debug("Finance snapshot invalidated for project %s", project_id)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def close(self) -> None:
        for signal in self._events.all_signals():
            signal.disconnect(self.invalidate)
        self.clear()

    def __contains__(self, project_id: str) -> bool:
        with self._lock:
            return project_id in self._entries


__all__ = ["ProjectSnapshotCache"]
