"""A workflow step that lets a language model call tools in a bounded loop."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from graph_agent_orchestrator.core.errors import GraphConfigurationError

from .context import AgentContext
from .policy import (
    TOOL_FAILED,
    TOOL_LIMIT_REACHED,
    TOOL_NOT_ALLOWED,
    TOOL_NOT_FOUND,
    TOOL_SKIPPED,
    ToolCallContext,
    ToolExecutionPolicy,
)
from .tool_calling_llm import ToolCallingLLM, ToolCallRequest
from .tools import Tool

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 5
CONTINUATION_CUE = "Based on these results, what should we do next?"


@dataclass(slots=True)
class _LoopState:
    """Counters for one ``execute`` call."""

    iteration: int = 0
    total_calls: int = 0
    calls_this_turn: int = 0
    halted: bool = False


class ToolCallingStep:
    """Drive a model through prompt -> decision -> tool calls -> prompt.

    The loop ends normally when the model requests no tools, signals that it
    is finished, or the policy's after-hook vetoes further calls. Running out
    of turns records an error on the context without raising. Tool failures
    and policy refusals become ``ToolCallRecord`` text, never exceptions.
    """

    def __init__(
        self,
        llm: ToolCallingLLM,
        tools: Sequence[Tool],
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        system_prompt: str = "",
        policy: ToolExecutionPolicy | None = None,
        input_key: str = "user_input",
    ) -> None:
        if llm is None:
            raise GraphConfigurationError("LLM is required")
        if not tools:
            raise GraphConfigurationError("At least one tool is required")
        if max_iterations <= 0:
            raise GraphConfigurationError("Max iterations must be positive")

        self._tools: dict[str, Tool] = {}
        for t in tools:
            if t.name in self._tools:
                raise GraphConfigurationError(f"Duplicate tool name: {t.name}")
            self._tools[t.name] = t

        self.llm = llm
        self.max_iterations = max_iterations
        self.system_prompt = system_prompt
        self.policy = policy or ToolExecutionPolicy.allow_all()
        self.input_key = input_key

    @property
    def tools(self) -> list[Tool]:
        return list(self._tools.values())

    def __call__(self, context: AgentContext) -> AgentContext:
        return self.execute(context)

    def execute(self, context: AgentContext) -> AgentContext:
        logger.info("Tool-calling step started", extra={"tools": len(self._tools)})

        prompt = self.build_prompt(context)
        tools = self.tools
        loop = _LoopState()
        completed = False

        while loop.iteration < self.max_iterations:
            loop.iteration += 1
            logger.debug(
                "Tool-calling iteration",
                extra={"iteration": loop.iteration, "max_iterations": self.max_iterations},
            )

            response = self.llm.generate(prompt, tools)
            context.last_model_output = response.text

            if not response.has_tool_calls:
                logger.info("Tool-calling step completed, no more tool calls")
                completed = True
                break

            logger.info("LLM requested tool calls", extra={"count": len(response.tool_calls)})
            loop.calls_this_turn = 0
            results: list[str] = []
            for request in response.tool_calls:
                result = self._attempt(context, request, loop)
                results.append(f"\n[{request.tool_name} result]: {result}")
                if loop.halted:
                    break

            if loop.halted:
                logger.info("Tool execution halted by policy")
                completed = True
                break

            prompt = (
                f"{prompt}\n\nTool execution results:{''.join(results)}\n\n{CONTINUATION_CUE}"
            )
            if response.finished:
                completed = True
                break

        if not completed:
            logger.warning(
                "Tool-calling step reached max iterations",
                extra={"max_iterations": self.max_iterations},
            )
            context.error = f"Tool-calling step exceeded maximum iterations: {self.max_iterations}"

        context.should_continue = False
        return context

    def build_prompt(self, context: AgentContext) -> str:
        parts: list[str] = []
        if self.system_prompt:
            parts.append(f"{self.system_prompt}\n\n")

        parts.append("Available tools:\n")
        for t in self._tools.values():
            parts.append(f"- {t.name}: {t.description}\n")
        parts.append("\n")

        user_input = context.get(self.input_key)
        if user_input is not None:
            parts.append(f"User request: {user_input}\n")

        previous = context.tool_calls
        if previous:
            parts.append("\nPrevious tool calls:\n")
            for call in previous:
                parts.append(f"- {call.tool_name}: {call.result}\n")

        return "".join(parts)

    def _attempt(self, context: AgentContext, request: ToolCallRequest, loop: _LoopState) -> str:
        """Attempt one requested call and record exactly one ToolCallRecord."""
        name = request.tool_name
        params = request.parameters

        if not self.policy.is_tool_allowed(name):
            logger.warning("Tool rejected by policy filter", extra={"tool": name})
            return self._record(context, request, f"{TOOL_NOT_ALLOWED}: {name}")

        if self.policy.per_iteration_limit_reached(
            loop.calls_this_turn
        ) or self.policy.total_limit_reached(loop.total_calls):
            logger.warning(
                "Tool call limit reached",
                extra={"tool": name, "turn_calls": loop.calls_this_turn, "total": loop.total_calls},
            )
            return self._record(context, request, f"{TOOL_LIMIT_REACHED}: {name}")

        call_context = ToolCallContext(
            tool_name=name,
            parameters=params,
            iteration_number=loop.iteration,
            total_tool_calls_so_far=loop.total_calls,
        )
        if not self.policy.before_tool_execution(call_context):
            logger.info("Tool skipped by before-hook", extra={"tool": name})
            return self._record(context, request, f"{TOOL_SKIPPED}: {name}")

        loop.calls_this_turn += 1
        loop.total_calls += 1

        found = self._tools.get(name)
        if found is None:
            logger.error("Tool not found", extra={"tool": name})
            result = f"{TOOL_NOT_FOUND}: {name}"
            call_context.error = LookupError(result)
        else:
            logger.info("Executing tool", extra={"tool": name})
            try:
                output = found.invoke(params)
                result = "" if output is None else str(output)
            except Exception as e:
                logger.error("Tool failed", extra={"tool": name, "error": str(e)})
                result = f"{TOOL_FAILED}: {e}"
                call_context.error = e
        call_context.result = result

        self._record(context, request, result)
        if not self.policy.after_tool_execution(call_context):
            loop.halted = True
        return result

    @staticmethod
    def _record(context: AgentContext, request: ToolCallRequest, result: str) -> str:
        context.add_tool_call(request.tool_name, request.parameters, result)
        return result
