"""Capability interfaces plugged into a workflow graph.

Steps may fail by raising. Conditions and dispatchers are expected not to
raise; the engine treats a raising condition as ``False``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

from .context import WorkflowContext

END = "__END__"
"""Reserved step name marking the end of a run."""

C = TypeVar("C", bound=WorkflowContext)


class Step(Protocol[C]):
    """A named unit of work transforming the context in place.

    Returning ``None`` keeps the context object that was passed in.
    """

    def execute(self, context: C) -> C | None: ...


StepFunction = Callable[[C], C | None]

Condition = Callable[[C], bool]
"""Predicate gating a transition."""

Dispatcher = Callable[[C], str]
"""Computes the next step name; may return ``END``."""
