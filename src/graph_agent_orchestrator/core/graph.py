"""Workflow graph: step registry, transitions and the run loop.

The graph is configured once through the chaining builder methods and is
read-only afterwards, so independent ``execute`` calls may run concurrently
as long as the supplied steps do not share unsynchronised state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic

from .context import WorkflowContext
from .errors import GraphConfigurationError, UnknownStepError
from .interfaces import END, C, Condition, Dispatcher, Step
from .logging import bind_run_id, new_run_id
from .observer import GraphObserver, notify

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


@dataclass(frozen=True, slots=True)
class Edge(Generic[C]):
    """A directed edge between two steps, optionally gated by a condition."""

    from_step: str
    to_step: str
    condition: Condition[C] | None = None
    label: str | None = None

    @property
    def is_conditional(self) -> bool:
        return self.condition is not None

    def should_transition(self, context: C) -> bool:
        if self.condition is None:
            return True
        try:
            return bool(self.condition(context))
        except Exception:
            logger.warning(
                "Transition condition raised, treating as false",
                exc_info=True,
                extra={"from_step": self.from_step, "to_step": self.to_step},
            )
            return False

    def __str__(self) -> str:
        out = f"{self.from_step} -> {self.to_step}"
        if self.label is not None:
            out += f" [{self.label}]"
        if self.condition is not None:
            out += " (conditional)"
        return out


def _as_callable(step: Step[C] | Callable[[C], C | None]) -> Callable[[C], C | None]:
    execute = getattr(step, "execute", None)
    if callable(execute):
        return execute
    if callable(step):
        return step
    raise GraphConfigurationError(f"Step must be callable or expose execute(): {step!r}")


class WorkflowGraph(Generic[C]):
    """A directed graph of named steps driven by a bounded run loop."""

    def __init__(self, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        self._steps: dict[str, Callable[[C], C | None]] = {}
        self._edges: dict[str, list[Edge[C]]] = {}
        self._dispatchers: dict[str, Dispatcher[C]] = {}
        self._observers: list[GraphObserver[Any]] = []
        self._entry_point: str | None = None
        self._max_iterations = DEFAULT_MAX_ITERATIONS
        self.set_max_iterations(max_iterations)

    # Builder

    def add_step(self, name: str, step: Step[C] | Callable[[C], C | None]) -> WorkflowGraph[C]:
        if not name:
            raise GraphConfigurationError("Step name cannot be empty")
        if name == END:
            raise GraphConfigurationError(f"Step name cannot be '{END}'")
        if name in self._steps:
            raise GraphConfigurationError(f"Step already registered: {name}")
        self._steps[name] = _as_callable(step)
        logger.debug("Added step", extra={"step": name})
        return self

    def set_entry_point(self, name: str) -> WorkflowGraph[C]:
        self._require_step(name)
        self._entry_point = name
        logger.debug("Set entry point", extra={"step": name})
        return self

    def add_edge(self, from_step: str, to_step: str) -> WorkflowGraph[C]:
        return self._add(Edge(from_step, to_step))

    def add_conditional_edge(
        self,
        from_step: str,
        to_step: str,
        condition: Condition[C],
        label: str | None = None,
    ) -> WorkflowGraph[C]:
        return self._add(Edge(from_step, to_step, condition, label))

    def add_dispatcher(self, from_step: str, dispatcher: Dispatcher[C]) -> WorkflowGraph[C]:
        self._require_step(from_step)
        if from_step in self._dispatchers:
            logger.warning("Replacing dispatcher", extra={"step": from_step})
        self._dispatchers[from_step] = dispatcher
        logger.debug("Added dispatcher", extra={"step": from_step})
        return self

    def add_observer(self, observer: GraphObserver[Any]) -> WorkflowGraph[C]:
        self._observers.append(observer)
        return self

    def set_max_iterations(self, max_iterations: int) -> WorkflowGraph[C]:
        if max_iterations <= 0:
            raise GraphConfigurationError("Max iterations must be positive")
        self._max_iterations = max_iterations
        return self

    def _add(self, edge: Edge[C]) -> WorkflowGraph[C]:
        self._require_step(edge.from_step)
        if edge.to_step != END:
            self._require_step(edge.to_step)
        self._edges.setdefault(edge.from_step, []).append(edge)
        logger.debug("Added edge", extra={"edge": str(edge)})
        return self

    def _require_step(self, name: str) -> None:
        if name not in self._steps:
            raise GraphConfigurationError(f"Step does not exist: {name}")

    # Introspection

    @property
    def step_names(self) -> list[str]:
        return list(self._steps)

    @property
    def entry_point(self) -> str | None:
        return self._entry_point

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def edges(self) -> list[Edge[C]]:
        return [edge for edges in self._edges.values() for edge in edges]

    @property
    def dispatcher_steps(self) -> list[str]:
        return list(self._dispatchers)

    # Execution

    def execute(self, context: C, start_at: str | None = None) -> C:
        """Run the workflow until END, a pause, the iteration ceiling or a failure.

        Args:
            context: The context to mutate; it is also the return value.
            start_at: Registered step to start from instead of the entry point.

        Returns:
            The context. It carries ``error`` when the iteration ceiling was hit
            and ``needs_human_input`` when the run paused.

        Raises:
            GraphConfigurationError: If no entry point is set.
            UnknownStepError: If a dispatcher routed to an unregistered step.
            Exception: Whatever a failing step raised, after ``error`` is set.
        """
        if self._entry_point is None:
            raise GraphConfigurationError("Entry point not set")
        if start_at is not None:
            self._require_step(start_at)

        with bind_run_id(new_run_id()):
            return self._run(context, start_at or self._entry_point)

    def _run(self, context: C, current: str) -> C:
        iterations = 0
        path: list[str] = []
        context.execution_path = path
        context.paused_at = None

        notify(self._observers, "on_start", context)
        logger.info("Starting workflow execution", extra={"step": current})

        while current != END and iterations < self._max_iterations:
            iterations += 1
            path.append(current)
            logger.info("Executing step", extra={"step": current, "iteration": iterations})

            step = self._steps.get(current)
            if step is None:
                error = UnknownStepError(current)
                context.error = str(error)
                notify(self._observers, "on_error", current, context, error)
                raise error

            notify(self._observers, "before_step", current, context)
            try:
                result = step(context)
                if result is not None and not isinstance(result, WorkflowContext):
                    raise TypeError(
                        f"expected a context or None, got {type(result).__name__}"
                    )
            except Exception as e:
                logger.error("Step failed", extra={"step": current, "error": str(e)})
                context.error = f"Step {current} failed: {e}"
                notify(self._observers, "on_error", current, context, e)
                raise
            if result is not None:
                result.execution_path = path
                context = result
            notify(self._observers, "after_step", current, context)

            if context.needs_human_input:
                logger.info("Step requires human input, pausing", extra={"step": current})
                context.paused_at = current
                notify(self._observers, "on_human_input_required", current, context)
                return context

            next_step = self._next_step(current, context)
            logger.debug("Transitioning", extra={"from_step": current, "to_step": next_step})
            notify(self._observers, "on_transition", current, next_step, context)
            current = next_step

        if current != END:
            error_message = f"Workflow exceeded maximum iterations: {self._max_iterations}"
            logger.error(error_message, extra={"path": path})
            context.error = error_message
        else:
            logger.info(
                "Workflow completed",
                extra={"iterations": iterations, "path": " -> ".join(path)},
            )

        notify(self._observers, "on_complete", context)
        return context

    def resume(self, context: C) -> C:
        """Re-enter a paused run at the step that requested human input."""
        return self.execute(context, start_at=context.paused_at)

    def _next_step(self, current: str, context: C) -> str:
        dispatcher = self._dispatchers.get(current)
        if dispatcher is not None:
            # Not validated here; an unknown name fails on the next lookup.
            next_step = dispatcher(context)
            logger.debug("Dispatcher selected", extra={"step": current, "to_step": next_step})
            return next_step

        for edge in self._edges.get(current, []):
            if edge.should_transition(context):
                return edge.to_step

        logger.debug("No matching edges, ending workflow", extra={"step": current})
        return END
