"""Presentation helpers."""

from graph_agent_orchestrator.utils.visualizer import to_ascii, to_dot, to_mermaid

__all__ = ["to_ascii", "to_dot", "to_mermaid"]
