"""Build text completion providers from ``LLMConfig``."""

import logging
from collections.abc import Callable

from graph_agent_orchestrator.core.config import LLMConfig
from graph_agent_orchestrator.llm.openai_provider import OpenAIProvider
from graph_agent_orchestrator.llm.provider import LLMProvider

logger = logging.getLogger(__name__)

# Keyed by ``LLMConfig.provider``.
PROVIDERS: dict[str, Callable[[LLMConfig], LLMProvider]] = {
    "openai": OpenAIProvider,
}


class LLMFactory:
    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """Create the provider named by ``config.provider``.

        Raises:
            ValueError: If no provider is registered under that name.
        """
        builder = PROVIDERS.get(config.provider)
        if builder is None:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")

        logger.info(
            "Creating LLM provider",
            extra={"provider": config.provider, "model": config.openai_model},
        )
        return builder(config)
