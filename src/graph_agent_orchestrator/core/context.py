"""Mutable per-run data carrier passed between workflow steps."""

from __future__ import annotations

import copy
from typing import Any, TypeVar

_C = TypeVar("_C", bound="WorkflowContext")


class WorkflowContext:
    """String-keyed value store plus the engine's built-in signals.

    Values are dynamically typed and the last write for a key wins. Three
    signals are kept outside the key space: ``error``, ``needs_human_input``
    and ``human_input``. Assigning ``human_input`` always clears
    ``needs_human_input`` so a resumed run does not pause again immediately.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})
        self.error: str | None = None
        self.needs_human_input: bool = False
        self._human_input: str | None = None

        # Written by the engine.
        self.execution_path: list[str] = []
        self.paused_at: str | None = None

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default`` when absent."""
        return self._data.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._data

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    @property
    def data(self) -> dict[str, Any]:
        """Shallow copy of all stored entries."""
        return dict(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    # Error handling

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    # Human-in-the-loop support

    @property
    def human_input(self) -> str | None:
        return self._human_input

    @human_input.setter
    def human_input(self, value: str | None) -> None:
        self._human_input = value
        self.needs_human_input = False

    def request_human_input(self) -> None:
        self.needs_human_input = True

    # Persistence helpers

    def copy(self: _C) -> _C:
        return copy.deepcopy(self)

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "data": dict(self._data),
            "needs_human_input": self.needs_human_input,
            "execution_path": list(self.execution_path),
        }
        if self.error is not None:
            out["error"] = self.error
        if self._human_input is not None:
            out["human_input"] = self._human_input
        if self.paused_at is not None:
            out["paused_at"] = self.paused_at
        return out

    @classmethod
    def from_json(cls: type[_C], obj: dict[str, Any]) -> _C:
        data_raw = obj.get("data")
        context = cls()
        context._data = dict(data_raw) if isinstance(data_raw, dict) else {}
        context._load_signals(obj)
        return context

    def _load_signals(self, obj: dict[str, Any]) -> None:
        def _str(v: object) -> str | None:
            return v if isinstance(v, str) else None

        self.error = _str(obj.get("error"))
        self._human_input = _str(obj.get("human_input"))
        # Restored as saved; a stored human_input must not clear a newer pause.
        self.needs_human_input = bool(obj.get("needs_human_input", False))
        self.paused_at = _str(obj.get("paused_at"))
        path_raw = obj.get("execution_path")
        self.execution_path = (
            [p for p in path_raw if isinstance(p, str)] if isinstance(path_raw, list) else []
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(data={self._data!r}, error={self.error!r}, "
            f"needs_human_input={self.needs_human_input!r})"
        )
