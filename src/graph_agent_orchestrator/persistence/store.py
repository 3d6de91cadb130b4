"""Checkpoint store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic

from graph_agent_orchestrator.core.interfaces import C


class CheckpointStore(ABC, Generic[C]):
    """Persist and restore workflow contexts by checkpoint id.

    The engine never calls a store directly; wire one in with
    ``CheckpointObserver``.
    """

    @abstractmethod
    def save(self, checkpoint_id: str, context: C) -> None: ...

    @abstractmethod
    def load(self, checkpoint_id: str) -> C:
        """Return the stored context.

        Raises:
            CheckpointNotFoundError: If nothing is stored under the id.
        """

    @abstractmethod
    def exists(self, checkpoint_id: str) -> bool: ...

    @abstractmethod
    def delete(self, checkpoint_id: str) -> None:
        """Remove a checkpoint. Deleting a missing id is a no-op."""

    @abstractmethod
    def list_checkpoints(self) -> list[str]: ...
