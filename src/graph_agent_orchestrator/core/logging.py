"""Structured logging for workflow runs.

Every ``WorkflowGraph.execute`` call binds a short run id for its duration.
The JSON formatter stamps that id on each line written while the run is in
progress, including lines from steps and tools, and lifts the engine's own
``extra=`` fields (step, iteration, tool, checkpoint) to top-level keys so a
run can be followed with a plain ``jq`` filter.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

RUN_FIELDS: tuple[str, ...] = ("run_id", "step", "iteration", "tool", "checkpoint_id")

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

_current_run_id: ContextVar[str | None] = ContextVar("graph_run_id", default=None)


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


def current_run_id() -> str | None:
    """The id of the workflow run executing in this context, if any."""
    return _current_run_id.get()


@contextmanager
def bind_run_id(run_id: str) -> Iterator[str]:
    """Tag log records emitted inside the block with ``run_id``.

    Bindings nest: a graph executed from inside a step gets its own id and the
    outer id is restored when it returns.
    """
    token = _current_run_id.set(run_id)
    try:
        yield run_id
    finally:
        _current_run_id.reset(token)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with run fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        run_id = getattr(record, "run_id", None) or _current_run_id.get()
        if run_id is not None:
            payload["run_id"] = run_id

        extra: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_LOG_RECORD_ATTRS or key.startswith("_") or key == "run_id":
                continue
            if key in RUN_FIELDS:
                payload[key] = value
            else:
                extra[key] = value
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Configure root logging with structured JSON output."""

    root = logging.getLogger()

    # Remove any existing handlers to avoid duplicate logs when re-configuring.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # Provider SDKs are chatty at DEBUG.
    for name in ("openai", "httpx"):
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
