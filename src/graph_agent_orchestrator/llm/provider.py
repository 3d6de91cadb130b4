"""Abstract base class for text completion providers."""

from abc import ABC, abstractmethod
from typing import Any


class LLMProvider(ABC):
    """A model that turns a prompt into plain text.

    ``TextToolCallingLLM`` parses that text into tool-calling decisions for
    ``ToolCallingStep``, so a provider never needs to know about tools.
    """

    @abstractmethod
    def generate(
        self,
        prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        **kwargs: Any,
    ) -> str:
        """Complete ``prompt``.

        Args:
            prompt: The full prompt built by the tool-calling step.
            max_tokens: Maximum tokens to generate.
            temperature: Sampling temperature; ``None`` uses the configured one.
            **kwargs: Additional provider-specific parameters.

        Returns:
            The completion text, empty when the model returned nothing.
        """
