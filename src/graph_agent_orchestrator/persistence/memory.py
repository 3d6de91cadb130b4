"""In-memory checkpoint store, useful for tests and development."""

from __future__ import annotations

import threading

from graph_agent_orchestrator.core.errors import CheckpointNotFoundError
from graph_agent_orchestrator.core.interfaces import C

from .store import CheckpointStore


class InMemoryCheckpointStore(CheckpointStore[C]):
    """Keeps deep copies so later mutation of a context does not leak in."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._storage: dict[str, C] = {}

    def save(self, checkpoint_id: str, context: C) -> None:
        snapshot = context.copy()
        with self._lock:
            self._storage[checkpoint_id] = snapshot

    def load(self, checkpoint_id: str) -> C:
        with self._lock:
            stored = self._storage.get(checkpoint_id)
        if stored is None:
            raise CheckpointNotFoundError(checkpoint_id)
        return stored.copy()

    def exists(self, checkpoint_id: str) -> bool:
        with self._lock:
            return checkpoint_id in self._storage

    def delete(self, checkpoint_id: str) -> None:
        with self._lock:
            self._storage.pop(checkpoint_id, None)

    def list_checkpoints(self) -> list[str]:
        with self._lock:
            return list(self._storage)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)
