"""Tool-calling agents embedded as workflow steps."""

from graph_agent_orchestrator.agent.adapters import TextToolCallingLLM, parse_completion
from graph_agent_orchestrator.agent.auto_step import ToolCallingStep
from graph_agent_orchestrator.agent.context import AgentContext, ToolCallRecord
from graph_agent_orchestrator.agent.policy import ToolCallContext, ToolExecutionPolicy, all_of
from graph_agent_orchestrator.agent.tool_calling_llm import (
    LLMResponse,
    ToolCallingLLM,
    ToolCallRequest,
)
from graph_agent_orchestrator.agent.tools import FunctionTool, Tool, tool

__all__ = [
    "AgentContext",
    "FunctionTool",
    "LLMResponse",
    "TextToolCallingLLM",
    "Tool",
    "ToolCallContext",
    "ToolCallRecord",
    "ToolCallRequest",
    "ToolCallingLLM",
    "ToolCallingStep",
    "ToolExecutionPolicy",
    "all_of",
    "parse_completion",
    "tool",
]
