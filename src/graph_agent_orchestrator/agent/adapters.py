"""Adapters turning plain text completions into tool-calling decisions.

Expected completion format::

    TOOL_CALL: tool_name(raw arguments)
    FINISH: final response text

Arguments are passed to the tool as the raw string between the parentheses.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from graph_agent_orchestrator.core.config import LLMConfig
from graph_agent_orchestrator.llm.factory import LLMFactory
from graph_agent_orchestrator.llm.provider import LLMProvider

from .tool_calling_llm import LLMResponse, ToolCallingLLM, ToolCallRequest
from .tools import Tool

logger = logging.getLogger(__name__)

TOOL_CALL_PATTERN = re.compile(r"TOOL_CALL:\s*(\w+)\(([^)]*)\)")
FINISH_MARKER = "FINISH:"


def parse_completion(text: str) -> LLMResponse:
    """Parse a completion into an ``LLMResponse``.

    A completion without tool calls is finished. A ``FINISH:`` marker always
    finishes and its trailing text becomes the response text.
    """
    calls = [
        ToolCallRequest(tool_name=m.group(1), parameters=m.group(2).strip())
        for m in TOOL_CALL_PATTERN.finditer(text)
    ]
    finished = not calls

    if FINISH_MARKER in text:
        finished = True
        text = text[text.index(FINISH_MARKER) + len(FINISH_MARKER) :].strip()

    return LLMResponse(text=text, tool_calls=calls, finished=finished)


class TextToolCallingLLM(ToolCallingLLM):
    """Wrap any ``prompt -> completion`` function as a ``ToolCallingLLM``."""

    def __init__(self, complete: Callable[[str], str]) -> None:
        self._complete = complete

    @classmethod
    def from_provider(cls, provider: LLMProvider, **kwargs: object) -> TextToolCallingLLM:
        """Use ``provider.generate`` as the completion function."""
        return cls(lambda prompt: provider.generate(prompt, **kwargs))

    @classmethod
    def from_config(cls, config: LLMConfig, **kwargs: object) -> TextToolCallingLLM:
        """Build the provider selected by ``config`` and wrap it."""
        return cls.from_provider(LLMFactory.create(config), **kwargs)

    def generate(self, prompt: str, tools: Sequence[Tool]) -> LLMResponse:
        instructions = (
            f"{prompt}\n\nTo call a tool reply with lines of the form "
            "TOOL_CALL: tool_name(arguments). When done reply with FINISH: <answer>."
        )
        completion = self._complete(instructions)
        response = parse_completion(completion)
        logger.debug(
            "Parsed completion",
            extra={"tool_calls": len(response.tool_calls), "finished": response.finished},
        )
        return response
