"""File-backed checkpoint store.

Each checkpoint is one JSON document ``<id>.checkpoint.json`` in the storage
directory. Context values must be JSON-serialisable; anything else is
written with ``str()``.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

# Imported so agent checkpoints resolve by class name.
from graph_agent_orchestrator.agent.context import AgentContext  # noqa: F401
from graph_agent_orchestrator.core.context import WorkflowContext
from graph_agent_orchestrator.core.errors import CheckpointNotFoundError, GraphConfigurationError
from graph_agent_orchestrator.core.interfaces import C

from .store import CheckpointStore

logger = logging.getLogger(__name__)

CHECKPOINT_SUFFIX = ".checkpoint.json"
_VALID_ID = re.compile(r"^[A-Za-z0-9_.\-]+$")


def _find_context_type(name: str, base: type[WorkflowContext]) -> type[WorkflowContext] | None:
    """Return ``base`` or a loaded subclass of it whose class name is ``name``."""
    if base.__name__ == name:
        return base
    for subclass in base.__subclasses__():
        found = _find_context_type(name, subclass)
        if found is not None:
            return found
    return None


class CheckpointRecord(BaseModel):
    """On-disk envelope around a serialised context."""

    checkpoint_id: str
    context_type: str
    saved_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    context: dict[str, Any]


class FileCheckpointStore(CheckpointStore[C]):
    def __init__(
        self, storage_path: Path, context_type: type[WorkflowContext] = WorkflowContext
    ) -> None:
        self.storage_path = Path(storage_path)
        self.context_type = context_type
        self.storage_path.mkdir(parents=True, exist_ok=True)

    def _path(self, checkpoint_id: str) -> Path:
        if not _VALID_ID.match(checkpoint_id) or checkpoint_id in {".", ".."}:
            raise GraphConfigurationError(f"Invalid checkpoint id: {checkpoint_id!r}")
        return self.storage_path / f"{checkpoint_id}{CHECKPOINT_SUFFIX}"

    def save(self, checkpoint_id: str, context: C) -> None:
        path = self._path(checkpoint_id)
        record = CheckpointRecord(
            checkpoint_id=checkpoint_id,
            context_type=type(context).__name__,
            context=context.to_json(),
        )
        # Write then rename so a crash never leaves a half-written checkpoint.
        tmp = path.with_suffix(".tmp")
        tmp.write_text(
            json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False, default=str)
            + "\n",
            encoding="utf-8",
        )
        tmp.replace(path)
        logger.debug("Checkpoint saved", extra={"checkpoint_id": checkpoint_id})

    def load_record(self, checkpoint_id: str) -> CheckpointRecord:
        path = self._path(checkpoint_id)
        if not path.exists():
            raise CheckpointNotFoundError(checkpoint_id)
        try:
            return CheckpointRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise ValueError(f"Corrupt checkpoint {checkpoint_id}: {e}") from e

    def load(self, checkpoint_id: str) -> C:
        """Load a checkpoint as the context class it was saved from.

        Raises:
            CheckpointNotFoundError: If no such checkpoint exists.
            ValueError: If the file is corrupt or names a context class that is
                not ``context_type`` or one of its subclasses.
        """
        record = self.load_record(checkpoint_id)
        context_type = _find_context_type(record.context_type, self.context_type)
        if context_type is None:
            raise ValueError(
                f"Checkpoint {checkpoint_id} holds a {record.context_type}, "
                f"expected {self.context_type.__name__}"
            )
        return context_type.from_json(record.context)  # type: ignore[return-value]

    def exists(self, checkpoint_id: str) -> bool:
        return self._path(checkpoint_id).exists()

    def delete(self, checkpoint_id: str) -> None:
        self._path(checkpoint_id).unlink(missing_ok=True)

    def list_checkpoints(self) -> list[str]:
        return sorted(
            p.name[: -len(CHECKPOINT_SUFFIX)]
            for p in self.storage_path.iterdir()
            if p.is_file() and p.name.endswith(CHECKPOINT_SUFFIX)
        )
