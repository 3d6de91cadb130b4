#!/usr/bin/env python3
"""Approval workflow with a human-in-the-loop pause.

This demonstrates:

* conditional edges (reject short requests early)
* pausing a run for human input and checkpointing the paused context
* resuming the run from the checkpoint once a decision is supplied
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from graph_agent_orchestrator import END, WorkflowContext, WorkflowGraph
from graph_agent_orchestrator.core.config import GraphSettings
from graph_agent_orchestrator.core.observer import LoggingObserver
from graph_agent_orchestrator.persistence import CheckpointObserver, FileCheckpointStore


def validate(context: WorkflowContext) -> None:
    request = context.get("request", "")
    if len(request) < 10:
        context.error = "Request too short"


def wait_for_approval(context: WorkflowContext) -> None:
    if context.human_input is None:
        context.request_human_input()
        return
    context.put("approved", context.human_input.strip().lower() in {"y", "yes", "approve"})


def respond(context: WorkflowContext) -> None:
    verdict = "approved" if context.get("approved") else "rejected"
    context.put("response", f"Your request has been {verdict}")


def build_graph(checkpoints: FileCheckpointStore, checkpoint_id: str) -> WorkflowGraph:
    return (
        WorkflowGraph[WorkflowContext]()
        .add_step("validate", validate)
        .add_step("wait_approval", wait_for_approval)
        .add_step("respond", respond)
        .set_entry_point("validate")
        .add_conditional_edge("validate", "wait_approval", lambda c: not c.has_error, "valid")
        .add_conditional_edge("validate", END, lambda c: c.has_error, "invalid")
        .add_edge("wait_approval", "respond")
        .add_edge("respond", END)
        .add_observer(LoggingObserver())
        .add_observer(CheckpointObserver(checkpoints, checkpoint_id))
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an approval workflow.")
    parser.add_argument("--request", default="Please approve my vacation request")
    parser.add_argument("--checkpoint-id", default="approval-demo")
    parser.add_argument(
        "--decision",
        default=None,
        help="Resume a paused run with this decision (e.g. 'yes' or 'no')",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = GraphSettings()
    settings.setup_logging()

    store = FileCheckpointStore(Path(settings.checkpoint.storage_path))
    graph = build_graph(store, args.checkpoint_id)

    if args.decision is None:
        result = graph.execute(WorkflowContext({"request": args.request}))
    else:
        paused = store.load(args.checkpoint_id)
        paused.human_input = args.decision
        result = graph.resume(paused)

    if result.needs_human_input:
        print(f"Paused at '{result.paused_at}'. Resume with --decision yes|no")
    elif result.has_error:
        print(f"Failed: {result.error}")
        return 1
    else:
        print(result.get("response"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
