"""Render workflow graphs as Mermaid, Graphviz DOT or plain text."""

from __future__ import annotations

import re
from typing import Any

from graph_agent_orchestrator.core.graph import WorkflowGraph
from graph_agent_orchestrator.core.interfaces import END


def _sanitize(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_]", "_", name)


def _mermaid_id(name: str) -> str:
    # User steps are prefixed so they never collide with the START and END nodes.
    return "END" if name == END else f"n_{_sanitize(name)}"


def to_mermaid(graph: WorkflowGraph[Any]) -> str:
    lines = ["```mermaid", "graph TD"]

    if graph.entry_point is not None:
        lines.append(f"    START([Start]) --> {_mermaid_id(graph.entry_point)}")

    for name in graph.step_names:
        lines.append(f"    {_mermaid_id(name)}[{name}]")
    lines.append("    END([End])")

    for edge in graph.edges:
        arrow = "-.->" if edge.is_conditional else "-->"
        label = f"|{edge.label}|" if edge.label else ""
        lines.append(f"    {_mermaid_id(edge.from_step)} {arrow}{label} {_mermaid_id(edge.to_step)}")

    for name in graph.dispatcher_steps:
        lines.append(f"    {_mermaid_id(name)} -.->|dispatch| {_mermaid_id(name)}_dispatch{{{{?}}}}")

    lines.append("```")
    return "\n".join(lines) + "\n"


def _dot_id(name: str) -> str:
    return "END" if name == END else f'"n_{name}"'


def to_dot(graph: WorkflowGraph[Any]) -> str:
    lines = [
        "digraph G {",
        "    rankdir=TB;",
        "    node [shape=box, style=rounded];",
    ]

    if graph.entry_point is not None:
        lines.append('    START [shape=circle, label="Start"];')
        lines.append(f"    START -> {_dot_id(graph.entry_point)};")

    for name in graph.step_names:
        shape = ", shape=diamond" if name in graph.dispatcher_steps else ""
        lines.append(f'    {_dot_id(name)} [label="{name}"{shape}];')
    lines.append('    END [shape=doublecircle, label="End"];')

    for edge in graph.edges:
        attrs: list[str] = []
        if edge.label:
            attrs.append(f'label="{edge.label}"')
        if edge.is_conditional:
            attrs.append("style=dashed")
        suffix = f" [{', '.join(attrs)}]" if attrs else ""
        lines.append(f"    {_dot_id(edge.from_step)} -> {_dot_id(edge.to_step)}{suffix};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def to_ascii(graph: WorkflowGraph[Any]) -> str:
    lines = ["Workflow Graph:", "==============", ""]

    if graph.entry_point is not None:
        lines.append(f"Entry: {graph.entry_point}")

    lines.append("")
    lines.append("Steps:")
    for name in graph.step_names:
        marker = " (dispatcher)" if name in graph.dispatcher_steps else ""
        lines.append(f"  - {name}{marker}")

    edges = graph.edges
    if edges:
        lines.append("")
        lines.append("Edges:")
        lines.extend(f"  {edge}" for edge in edges)

    lines.append("")
    lines.append(f"Max Iterations: {graph.max_iterations}")
    return "\n".join(lines) + "\n"


RENDERERS = {
    "mermaid": to_mermaid,
    "dot": to_dot,
    "ascii": to_ascii,
}
