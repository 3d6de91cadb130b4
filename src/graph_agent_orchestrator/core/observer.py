"""Lifecycle observers for workflow runs.

Observers are notified synchronously on the run's thread. Each hook call is
isolated: a raising observer is logged and skipped, the run and the remaining
observers carry on.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Generic

from .interfaces import C

logger = logging.getLogger(__name__)


class GraphObserver(Generic[C]):
    """Base observer. Every hook is a no-op; override the ones you need."""

    def on_start(self, context: C) -> None:
        pass

    def before_step(self, step_name: str, context: C) -> None:
        pass

    def after_step(self, step_name: str, context: C) -> None:
        pass

    def on_transition(self, from_step: str, to_step: str, context: C) -> None:
        pass

    def on_human_input_required(self, step_name: str, context: C) -> None:
        pass

    def on_error(self, step_name: str, context: C, error: BaseException) -> None:
        pass

    def on_complete(self, context: C) -> None:
        pass


def notify(observers: Sequence[GraphObserver[Any]], hook: str, *args: Any) -> None:
    """Call ``hook`` on every observer, isolating failures per call."""
    for observer in observers:
        try:
            getattr(observer, hook)(*args)
        except Exception:
            logger.warning(
                "Observer error in %s",
                hook,
                exc_info=True,
                extra={"observer": type(observer).__name__, "hook": hook},
            )


class LoggingObserver(GraphObserver[Any]):
    """Emit a structured log record for every lifecycle event."""

    def __init__(self, logger_name: str = "graph_agent_orchestrator.run") -> None:
        self._log = logging.getLogger(logger_name)

    def on_start(self, context: Any) -> None:
        self._log.info("Workflow started")

    def before_step(self, step_name: str, context: Any) -> None:
        self._log.debug("Entering step", extra={"step": step_name})

    def after_step(self, step_name: str, context: Any) -> None:
        self._log.debug("Leaving step", extra={"step": step_name})

    def on_transition(self, from_step: str, to_step: str, context: Any) -> None:
        self._log.info("Transition", extra={"from_step": from_step, "to_step": to_step})

    def on_human_input_required(self, step_name: str, context: Any) -> None:
        self._log.info("Paused for human input", extra={"step": step_name})

    def on_error(self, step_name: str, context: Any, error: BaseException) -> None:
        self._log.error("Step failed", extra={"step": step_name, "error": str(error)})

    def on_complete(self, context: Any) -> None:
        self._log.info(
            "Workflow completed",
            extra={"path": list(context.execution_path), "error": context.error},
        )
