"""In-memory registry of the tools offered to the model."""

import logging

from devops_agent.errors import DuplicateToolName
from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Name-unique collection of tools.

    The registry only stores references. It does not own the resources a
    tool executes against (for remote tools those belong to the MCPManager).
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Add a tool.

        Raises:
            DuplicateToolName: If a tool with the same name is registered
        """
        if not tool.name:
            raise ValueError(f"Tool {type(tool).__name__} has no name")
        if tool.name in self._tools:
            raise DuplicateToolName(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def list(self) -> tuple[Tool, ...]:
        """Snapshot of all tools in registration order."""
        return tuple(self._tools.values())

    def find(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
