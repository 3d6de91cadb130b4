"""Decision boundary between a tool-calling step and a language model."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .tools import Tool


@dataclass(frozen=True, slots=True)
class ToolCallRequest:
    """A tool invocation requested by the model."""

    tool_name: str
    parameters: Any = None


@dataclass(frozen=True, slots=True)
class LLMResponse:
    text: str
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    finished: bool = False

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class ToolCallingLLM(ABC):
    """Abstract decision source consulted by ``ToolCallingStep``.

    Implementations own the model protocol; the step only sees the decision.
    """

    @abstractmethod
    def generate(self, prompt: str, tools: Sequence[Tool]) -> LLMResponse:
        """Decide what to do next.

        Args:
            prompt: The full prompt, including earlier tool results.
            tools: Tools the model may request.

        Returns:
            Response text, requested tool calls and whether the model is done.
        """
        pass
