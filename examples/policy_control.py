#!/usr/bin/env python3
"""Policy-controlled research agent.

A ``ToolCallingStep`` runs inside a workflow graph. The model is either a
scripted stand-in (default) or OpenAI when ``--openai`` is passed and
``GRAPH_LLM_OPENAI_API_KEY`` is set. The policy allows read-only tools, caps
tool calls, and stops the loop after the first failing tool.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from graph_agent_orchestrator import END, AgentContext, ToolCallingStep, WorkflowGraph
from graph_agent_orchestrator.agent import TextToolCallingLLM, ToolExecutionPolicy, tool
from graph_agent_orchestrator.core.config import GraphSettings


@tool("search", "Search for papers by topic")
def search(parameters: object) -> str:
    return f"Found papers: {parameters}"


@tool("analyze", "Analyze paper content")
def analyze(parameters: object) -> str:
    return f"Analysis result: {parameters}"


@tool("delete", "Delete a paper (dangerous!)")
def delete(parameters: object) -> str:
    return f"Deleted: {parameters}"


def scripted_model(prompt: str) -> str:
    if "[analyze result]" in prompt:
        return "FINISH: The papers look promising."
    if "[search result]" in prompt:
        return "TOOL_CALL: analyze(top result)\nTOOL_CALL: delete(top result)"
    return "Let me search.\nTOOL_CALL: search(machine learning)"


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a policy-controlled agent.")
    parser.add_argument("--request", default="Find and review recent machine learning papers")
    parser.add_argument("--openai", action="store_true", help="Use the configured OpenAI model")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = GraphSettings()
    settings.setup_logging()

    if args.openai:
        llm = TextToolCallingLLM.from_config(settings.llm)
    else:
        llm = TextToolCallingLLM(scripted_model)

    policy = ToolExecutionPolicy.allow_tools(
        "search",
        "analyze",
        after_execute=lambda call: not call.has_error,
        max_tool_calls_per_iteration=2,
        max_total_tool_calls=5,
    )
    research = ToolCallingStep(
        llm,
        [search, analyze, delete],
        max_iterations=settings.tool_max_iterations,
        system_prompt="You are a careful research assistant.",
        policy=policy,
    )

    graph = (
        WorkflowGraph[AgentContext](max_iterations=settings.max_iterations)
        .add_step("research", research)
        .add_step("report", lambda ctx: ctx.put("report", ctx.last_model_output))
        .set_entry_point("research")
        .add_edge("research", "report")
        .add_edge("report", END)
    )

    result = graph.execute(AgentContext({"user_input": args.request}))

    print("Tool calls made:")
    for call in result.tool_calls:
        print(f"- {call.tool_name}: {call.result}")
    print(f"Report: {result.get('report')}")
    if result.has_error:
        print(f"Error: {result.error}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
