"""CLI entrypoint: render graphs and inspect checkpoints."""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from graph_agent_orchestrator import __version__
from graph_agent_orchestrator.core.config import CheckpointConfig, GraphSettings
from graph_agent_orchestrator.core.errors import CheckpointNotFoundError, GraphError
from graph_agent_orchestrator.core.graph import WorkflowGraph
from graph_agent_orchestrator.persistence.file import FileCheckpointStore
from graph_agent_orchestrator.utils.visualizer import RENDERERS

logger = logging.getLogger(__name__)


def load_graph(target: str) -> WorkflowGraph:
    """Import ``module:attribute`` and return the graph it names.

    The attribute may be a ``WorkflowGraph`` or a zero-argument factory.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected MODULE:ATTRIBUTE, got {target!r}")

    obj = getattr(importlib.import_module(module_name), attr)
    if callable(obj) and not isinstance(obj, WorkflowGraph):
        obj = obj()
    if not isinstance(obj, WorkflowGraph):
        raise ValueError(f"{target} is not a WorkflowGraph")
    return obj


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graph-agent",
        description="Workflow graph engine utilities",
    )
    parser.add_argument(
        "--version", action="version", version=f"graph-agent-orchestrator {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render a workflow graph as a diagram")
    render.add_argument("target", help="Graph to render, as 'package.module:attribute'")
    render.add_argument(
        "--format",
        choices=sorted(RENDERERS),
        default="mermaid",
        help="Output format",
    )

    checkpoints = subparsers.add_parser("checkpoints", help="Inspect stored checkpoints")
    checkpoints.add_argument(
        "--dir",
        dest="storage_path",
        default=None,
        help="Checkpoint directory (defaults to GRAPH_CHECKPOINT_STORAGE_PATH)",
    )
    checkpoint_commands = checkpoints.add_subparsers(dest="checkpoint_command", required=True)
    checkpoint_commands.add_parser("list", help="List checkpoint ids")
    show = checkpoint_commands.add_parser("show", help="Print a checkpoint as JSON")
    show.add_argument("checkpoint_id")
    delete = checkpoint_commands.add_parser("delete", help="Delete a checkpoint")
    delete.add_argument("checkpoint_id")

    return parser


def _checkpoint_store(args: argparse.Namespace, config: CheckpointConfig) -> FileCheckpointStore:
    path = Path(args.storage_path) if args.storage_path else config.storage_path
    return FileCheckpointStore(path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = GraphSettings()
    except ValidationError as e:
        print(f"Configuration error:\n{e}", file=sys.stderr)
        return 2

    settings.setup_logging()

    try:
        if args.command == "render":
            graph = load_graph(args.target)
            print(RENDERERS[args.format](graph), end="")
            return 0

        if args.command == "checkpoints":
            store = _checkpoint_store(args, settings.checkpoint)

            if args.checkpoint_command == "list":
                for checkpoint_id in store.list_checkpoints():
                    print(checkpoint_id)
                return 0

            if args.checkpoint_command == "show":
                record = store.load_record(args.checkpoint_id)
                print(json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False))
                return 0

            if args.checkpoint_command == "delete":
                if not store.exists(args.checkpoint_id):
                    raise CheckpointNotFoundError(args.checkpoint_id)
                store.delete(args.checkpoint_id)
                print(f"Deleted checkpoint {args.checkpoint_id}")
                return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except CheckpointNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 3

    except (GraphError, ValueError, ImportError, AttributeError) as e:
        logger.error("Command failed", extra={"error": str(e)})
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
