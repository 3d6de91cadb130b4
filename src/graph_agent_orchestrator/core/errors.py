"""Exceptions raised by the workflow engine."""

from __future__ import annotations


class GraphError(Exception):
    """Base class for all engine errors."""


class GraphConfigurationError(GraphError, ValueError):
    """Raised at build time when a graph or step is configured incorrectly."""


class UnknownStepError(GraphError, LookupError):
    """Raised during a run when the next step name is not registered."""

    def __init__(self, step_name: str) -> None:
        super().__init__(f"Step not found: {step_name}")
        self.step_name = step_name


class CheckpointNotFoundError(GraphError, LookupError):
    def __init__(self, checkpoint_id: str) -> None:
        super().__init__(f"Checkpoint not found: {checkpoint_id}")
        self.checkpoint_id = checkpoint_id
