"""LLM package initialization."""

from graph_agent_orchestrator.llm.factory import LLMFactory
from graph_agent_orchestrator.llm.openai_provider import OpenAIProvider
from graph_agent_orchestrator.llm.provider import LLMProvider

__all__ = [
    "LLMFactory",
    "LLMProvider",
    "OpenAIProvider",
]
