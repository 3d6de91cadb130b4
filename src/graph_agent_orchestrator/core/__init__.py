"""Workflow engine core: context, graph, observers."""

from graph_agent_orchestrator.core.context import WorkflowContext
from graph_agent_orchestrator.core.errors import (
    CheckpointNotFoundError,
    GraphConfigurationError,
    GraphError,
    UnknownStepError,
)
from graph_agent_orchestrator.core.graph import Edge, WorkflowGraph
from graph_agent_orchestrator.core.interfaces import END, Step
from graph_agent_orchestrator.core.observer import GraphObserver, LoggingObserver

__all__ = [
    "END",
    "CheckpointNotFoundError",
    "Edge",
    "GraphConfigurationError",
    "GraphError",
    "GraphObserver",
    "LoggingObserver",
    "Step",
    "UnknownStepError",
    "WorkflowContext",
    "WorkflowGraph",
]
