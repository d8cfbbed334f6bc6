"""Tool name -> handler mapping with JSON schema generation."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from jobsuche_core.exceptions import InvalidArgumentsError, UnknownToolError

logger = structlog.get_logger()

ToolHandler = Callable[[Any], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class Tool:
    """A registered tool."""

    name: str
    description: str
    params_model: type[BaseModel]
    handler: ToolHandler

    def descriptor(self) -> dict[str, Any]:
        """MCP tool descriptor with the input JSON schema."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.params_model.model_json_schema(),
        }


class ToolRegistry:
    """Registry mapping tool names to typed async handlers.

    Usage:
        registry = ToolRegistry()
        registry.register("search_jobs", "Search...", SearchJobsParams, handler)
        result = await registry.call("search_jobs", {"location": "Berlin"})
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(
        self,
        name: str,
        description: str,
        params_model: type[BaseModel],
        handler: ToolHandler,
    ) -> None:
        """Register a tool; its handler receives a validated params model."""
        self._tools[name] = Tool(name, description, params_model, handler)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def get(self, name: str) -> Tool:
        """Look up a tool by name."""
        try:
            return self._tools[name]
        except KeyError:
            msg = f"Unknown tool: {name}"
            raise UnknownToolError(msg) from None

    def list_tools(self) -> list[dict[str, Any]]:
        """Descriptors of all registered tools, in registration order."""
        return [tool.descriptor() for tool in self._tools.values()]

    def names(self) -> list[str]:
        """Names of all registered tools."""
        return list(self._tools)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Validate arguments and run a tool.

        Raises UnknownToolError, InvalidArgumentsError, or whatever domain
        error the handler raises.
        """
        tool = self.get(name)
        try:
            params = tool.params_model.model_validate(arguments or {})
        except ValidationError as e:
            msg = f"Invalid arguments for {name}: {e}"
            raise InvalidArgumentsError(msg) from e
        logger.debug("tool_call", tool=name)
        return await tool.handler(params)
