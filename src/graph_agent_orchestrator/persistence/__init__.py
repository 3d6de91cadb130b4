"""Checkpoint persistence for workflow contexts."""

from __future__ import annotations

from typing import Any

from graph_agent_orchestrator.core.config import CheckpointConfig
from graph_agent_orchestrator.core.context import WorkflowContext
from graph_agent_orchestrator.persistence.file import CheckpointRecord, FileCheckpointStore
from graph_agent_orchestrator.persistence.memory import InMemoryCheckpointStore
from graph_agent_orchestrator.persistence.observer import CheckpointObserver
from graph_agent_orchestrator.persistence.store import CheckpointStore


def create_checkpoint_store(
    config: CheckpointConfig, context_type: type[WorkflowContext] = WorkflowContext
) -> CheckpointStore[Any]:
    """Build the store selected by ``config.backend``."""
    if config.backend == "memory":
        return InMemoryCheckpointStore()
    return FileCheckpointStore(config.storage_path, context_type=context_type)


__all__ = [
    "CheckpointObserver",
    "CheckpointRecord",
    "CheckpointStore",
    "FileCheckpointStore",
    "InMemoryCheckpointStore",
    "create_checkpoint_store",
]
