"""Core configuration for graph runs."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from graph_agent_orchestrator.core.logging import configure_logging


class LLMConfig(BaseSettings):
    """Configuration for LLM providers."""

    provider: Literal["openai"] = Field(
        default="openai",
        description="LLM provider to use",
    )

    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model to use",
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_LLM_",
        env_file=".env",
        extra="ignore",
    )


class CheckpointConfig(BaseSettings):
    """Configuration for checkpoint persistence."""

    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Checkpoint store backend",
    )
    storage_path: Path = Field(
        default=Path(".checkpoints"),
        description="Directory where file checkpoints are written",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_CHECKPOINT_",
        env_file=".env",
        extra="ignore",
    )


class GraphSettings(BaseSettings):
    """Top-level settings for building and running graphs."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines instead of plain text",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging for this package",
    )

    max_iterations: int = Field(
        default=100,
        gt=0,
        description="Default iteration ceiling for workflow graphs",
    )
    tool_max_iterations: int = Field(
        default=5,
        gt=0,
        description="Default model-turn ceiling for tool-calling steps",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    checkpoint: CheckpointConfig = Field(
        default_factory=CheckpointConfig,
        description="Checkpoint configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        if self.json_logs:
            configure_logging(self.log_level)
        else:
            level = getattr(logging, self.log_level.upper(), logging.INFO)
            logging.basicConfig(
                level=level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        if self.debug:
            logging.getLogger("graph_agent_orchestrator").setLevel(logging.DEBUG)
