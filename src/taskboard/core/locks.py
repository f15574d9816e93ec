from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ProjectLockRegistry:
    """One lock per project id, created on first use.

    Serialises read-allocate-append sequences against the same project so two
    concurrent creations cannot allocate from the same snapshot.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, project_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(project_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[project_id] = lock
            return lock

    @contextmanager
    def hold(self, project_id: str) -> Iterator[None]:
        with self.lock_for(project_id):
            yield

    def discard(self, project_id: str) -> None:
        with self._guard:
            self._locks.pop(project_id, None)
