"""Context specialisation for tool-calling agents."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from graph_agent_orchestrator.core.context import WorkflowContext


class ToolCallRecord(BaseModel):
    """One attempted tool invocation.

    ``result`` is always text: successful output, the tool's failure message or
    the reason a policy refused the call.
    """

    model_config = ConfigDict(frozen=True)

    tool_name: str
    parameters: Any = None
    result: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class AgentContext(WorkflowContext):
    """Workflow context carrying tool-call history and the last model output."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        super().__init__(data)
        self._tool_calls: list[ToolCallRecord] = []
        self.last_model_output: str | None = None
        self.should_continue: bool = False

    def add_tool_call(self, tool_name: str, parameters: Any, result: str) -> ToolCallRecord:
        record = ToolCallRecord(tool_name=tool_name, parameters=parameters, result=result)
        self._tool_calls.append(record)
        return record

    @property
    def tool_calls(self) -> list[ToolCallRecord]:
        return list(self._tool_calls)

    @property
    def last_tool_result(self) -> str | None:
        return self._tool_calls[-1].result if self._tool_calls else None

    def to_json(self) -> dict[str, object]:
        out = super().to_json()
        out["tool_calls"] = [call.model_dump(mode="json") for call in self._tool_calls]
        out["should_continue"] = self.should_continue
        if self.last_model_output is not None:
            out["last_model_output"] = self.last_model_output
        return out

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> AgentContext:
        context = super().from_json(obj)
        calls_raw = obj.get("tool_calls")
        if isinstance(calls_raw, list):
            context._tool_calls = [ToolCallRecord.model_validate(item) for item in calls_raw]
        output_raw = obj.get("last_model_output")
        context.last_model_output = output_raw if isinstance(output_raw, str) else None
        context.should_continue = bool(obj.get("should_continue", False))
        return context
