"""Graph Agent Orchestrator.

A workflow engine for stateful, multi-step computations expressed as a graph
of named steps with conditional transitions, dispatchers, human-in-the-loop
pauses and a bounded tool-calling agent step.
"""

__version__ = "0.1.0"

from graph_agent_orchestrator.agent import (
    AgentContext,
    ToolCallingStep,
    ToolExecutionPolicy,
)
from graph_agent_orchestrator.core import (
    END,
    GraphObserver,
    WorkflowContext,
    WorkflowGraph,
)

__all__ = [
    "END",
    "AgentContext",
    "GraphObserver",
    "ToolCallingStep",
    "ToolExecutionPolicy",
    "WorkflowContext",
    "WorkflowGraph",
    "__version__",
]
