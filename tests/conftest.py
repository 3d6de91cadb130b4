"""Test configuration and fixtures."""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from graph_agent_orchestrator.agent.tool_calling_llm import (
    LLMResponse,
    ToolCallingLLM,
    ToolCallRequest,
)
from graph_agent_orchestrator.agent.tools import FunctionTool, Tool
from graph_agent_orchestrator.core.config import (
    CheckpointConfig,
    GraphSettings,
    LLMConfig,
)


class ScriptedLLM(ToolCallingLLM):
    """Returns queued responses in order, repeating the last one."""

    def __init__(self, responses: Sequence[LLMResponse]) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []

    def generate(self, prompt: str, tools: Sequence[Tool]) -> LLMResponse:
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self.responses)) - 1
        return self.responses[index]


@pytest.fixture
def scripted_llm() -> Callable[..., ScriptedLLM]:
    """Factory for scripted language-model stubs."""

    def make(*responses: LLMResponse) -> ScriptedLLM:
        return ScriptedLLM(responses)

    return make


@pytest.fixture
def calls() -> Callable[..., LLMResponse]:
    """Build a response requesting the given tool names."""

    def make(*names: str, finished: bool = False, text: str = "calling tools") -> LLMResponse:
        return LLMResponse(
            text=text,
            tool_calls=[ToolCallRequest(tool_name=n, parameters=f"{n}-args") for n in names],
            finished=finished,
        )

    return make


@pytest.fixture
def invocations() -> list[tuple[str, object]]:
    """Side-effect log shared by the recording tools."""
    return []


@pytest.fixture
def recording_tools(invocations: list[tuple[str, object]]) -> list[Tool]:
    def recorder(name: str) -> Callable[[object], str]:
        def run(parameters: object) -> str:
            invocations.append((name, parameters))
            return f"{name} ok"

        return run

    return [
        FunctionTool("search", recorder("search"), "Search for papers"),
        FunctionTool("analyze", recorder("analyze"), "Analyze paper content"),
        FunctionTool("delete", recorder("delete"), "Delete a paper"),
    ]


@pytest.fixture
def llm_config() -> LLMConfig:
    """Provide a test LLM configuration."""
    return LLMConfig(
        provider="openai",
        openai_api_key="test-key",
        openai_model="gpt-4o-mini",
    )


@pytest.fixture
def checkpoint_config(tmp_path: Path) -> CheckpointConfig:
    """Provide a file checkpoint configuration in a temp directory."""
    return CheckpointConfig(
        backend="file",
        storage_path=tmp_path / "checkpoints",
    )


@pytest.fixture
def graph_settings(llm_config: LLMConfig, checkpoint_config: CheckpointConfig) -> GraphSettings:
    """Provide test settings."""
    return GraphSettings(
        log_level="DEBUG",
        debug=True,
        llm=llm_config,
        checkpoint=checkpoint_config,
    )
