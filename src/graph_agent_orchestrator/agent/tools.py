"""Tools an agent step can invoke.

Tools are registered explicitly, either by subclassing ``Tool`` or by wrapping
a plain function with ``FunctionTool`` / the ``tool`` decorator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

DEFAULT_DESCRIPTION = "No description provided"


class Tool(ABC):
    """A named external capability returning text."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def description(self) -> str:
        return DEFAULT_DESCRIPTION

    @abstractmethod
    def invoke(self, parameters: Any) -> str:
        """Run the tool.

        Args:
            parameters: Opaque arguments as requested by the model.

        Returns:
            Result text.

        Raises:
            Exception: Any failure; callers record it instead of propagating.
        """
        pass


@dataclass(frozen=True, slots=True)
class FunctionTool(Tool):
    """Adapt a plain function to the ``Tool`` interface."""

    tool_name: str
    function: Callable[[Any], object]
    tool_description: str = DEFAULT_DESCRIPTION

    @property
    def name(self) -> str:
        return self.tool_name

    @property
    def description(self) -> str:
        return self.tool_description

    def invoke(self, parameters: Any) -> str:
        result = self.function(parameters)
        return "" if result is None else str(result)


def tool(name: str, description: str = DEFAULT_DESCRIPTION) -> Callable[[Callable[[Any], object]], FunctionTool]:
    """Decorator registering ``function`` as a ``FunctionTool``."""

    def wrap(function: Callable[[Any], object]) -> FunctionTool:
        return FunctionTool(tool_name=name, function=function, tool_description=description)

    return wrap
