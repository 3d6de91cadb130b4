"""Observer that checkpoints a running workflow."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from graph_agent_orchestrator.core.observer import GraphObserver

from .store import CheckpointStore

logger = logging.getLogger(__name__)


class CheckpointObserver(GraphObserver[Any]):
    """Save the context after every step, on pause and on completion.

    ``checkpoint_id`` is either a fixed id or a function of the context, so one
    observer can serve many runs (e.g. ``lambda ctx: ctx.get("run_id")``).
    """

    def __init__(
        self,
        store: CheckpointStore[Any],
        checkpoint_id: str | Callable[[Any], str],
        *,
        save_after_step: bool = True,
        save_on_complete: bool = True,
    ) -> None:
        self.store = store
        self._checkpoint_id = checkpoint_id
        self.save_after_step = save_after_step
        self.save_on_complete = save_on_complete

    def checkpoint_id_for(self, context: Any) -> str:
        if callable(self._checkpoint_id):
            return self._checkpoint_id(context)
        return self._checkpoint_id

    def _save(self, context: Any, reason: str) -> None:
        checkpoint_id = self.checkpoint_id_for(context)
        self.store.save(checkpoint_id, context)
        logger.debug("Checkpointed", extra={"checkpoint_id": checkpoint_id, "reason": reason})

    def after_step(self, step_name: str, context: Any) -> None:
        if self.save_after_step:
            self._save(context, f"after {step_name}")

    def on_human_input_required(self, step_name: str, context: Any) -> None:
        self._save(context, "paused")

    def on_complete(self, context: Any) -> None:
        if self.save_on_complete:
            self._save(context, "complete")
