"""Execution policy gating tool invocations.

A policy is an immutable bundle of a tool-name filter, before/after hooks and
two call ceilings. Anything left unset permits everything. A call runs only if
it passes the filter, both ceilings and the before-hook; the after-hook cannot
undo the call it sees but can stop every later one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from graph_agent_orchestrator.core.errors import GraphConfigurationError

TOOL_NOT_ALLOWED = "Tool not allowed by policy"
TOOL_SKIPPED = "Tool execution skipped by policy"
TOOL_LIMIT_REACHED = "Tool call limit reached"
TOOL_NOT_FOUND = "Tool not found"
TOOL_FAILED = "Tool execution failed"


@dataclass(slots=True)
class ToolCallContext:
    """Per-attempt view handed to policy hooks.

    ``result`` and ``error`` are filled in after the tool ran.
    """

    tool_name: str
    parameters: Any
    iteration_number: int
    total_tool_calls_so_far: int
    result: str | None = None
    error: BaseException | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


ToolFilter = Callable[[str], bool]
ToolHook = Callable[[ToolCallContext], bool]


@dataclass(frozen=True, slots=True)
class ToolExecutionPolicy:
    tool_filter: ToolFilter | None = None
    before_execute: ToolHook | None = None
    after_execute: ToolHook | None = None
    max_tool_calls_per_iteration: int | None = None
    max_total_tool_calls: int | None = None

    def __post_init__(self) -> None:
        for name in ("max_tool_calls_per_iteration", "max_total_tool_calls"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise GraphConfigurationError(f"{name} must be positive")

    def is_tool_allowed(self, tool_name: str) -> bool:
        return self.tool_filter is None or bool(self.tool_filter(tool_name))

    def before_tool_execution(self, context: ToolCallContext) -> bool:
        """Return False to skip this call."""
        return self.before_execute is None or bool(self.before_execute(context))

    def after_tool_execution(self, context: ToolCallContext) -> bool:
        """Return False to stop all further calls."""
        return self.after_execute is None or bool(self.after_execute(context))

    def per_iteration_limit_reached(self, calls_this_iteration: int) -> bool:
        limit = self.max_tool_calls_per_iteration
        return limit is not None and calls_this_iteration >= limit

    def total_limit_reached(self, total_calls: int) -> bool:
        limit = self.max_total_tool_calls
        return limit is not None and total_calls >= limit

    @staticmethod
    def allow_all() -> ToolExecutionPolicy:
        return ToolExecutionPolicy()

    @staticmethod
    def allow_tools(*tool_names: str, **options: Any) -> ToolExecutionPolicy:
        """Allow-list: only the named tools may run."""
        allowed = frozenset(tool_names)
        return ToolExecutionPolicy(tool_filter=allowed.__contains__, **options)

    @staticmethod
    def deny_tools(*tool_names: str, **options: Any) -> ToolExecutionPolicy:
        """Deny-list: every tool except the named ones may run."""
        denied = frozenset(tool_names)
        return ToolExecutionPolicy(tool_filter=lambda name: name not in denied, **options)


def all_of(*hooks: ToolHook) -> ToolHook:
    """Combine hooks with AND semantics, short-circuiting on the first False."""

    def combined(context: ToolCallContext) -> bool:
        return all(hook(context) for hook in hooks)

    return combined
