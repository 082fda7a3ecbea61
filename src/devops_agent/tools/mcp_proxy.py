"""Tool that forwards calls to a tool on a remote MCP server."""

import logging
from typing import Any

from pydantic import BaseModel

from devops_agent.errors import ToolExecutionError
from devops_agent.mcp.manager import MCPManager
from devops_agent.mcp.types import MCPToolDescriptor
from devops_agent.tools.base import Tool
from devops_agent.tools.schema import json_schema_to_model

logger = logging.getLogger(__name__)


def proxy_tool_name(server_id: str, tool_name: str) -> str:
    return f"mcp_{server_id}_{tool_name}"


def _content_block_to_dict(block: Any) -> dict[str, Any]:
    if isinstance(block, BaseModel):
        return block.model_dump(mode="json", exclude_none=True)
    if isinstance(block, dict):
        return block
    return {"type": "text", "text": str(block)}


class MCPToolProxy(Tool):
    """A remote tool presented as a local one.

    The proxy holds a reference to the manager, never the connection itself,
    so a server that disconnects makes calls fail instead of dangling.

    Attributes:
        server_id: Configured id of the server hosting the tool
        tool_name: Name of the tool on that server
    """

    output_type = list[dict[str, Any]]

    def __init__(self, manager: MCPManager, descriptor: MCPToolDescriptor) -> None:
        self._manager = manager
        self.server_id = descriptor.server_id
        self.tool_name = descriptor.name
        self.name = proxy_tool_name(descriptor.server_id, descriptor.name)
        self.description = f"[{descriptor.server_name}] {descriptor.description}"
        self.input_model = json_schema_to_model(
            f"{self.name}_input", descriptor.input_schema
        )

    async def execute(self, arguments: BaseModel) -> list[dict[str, Any]]:
        """Call the remote tool.

        Raises:
            ToolExecutionError: If the server is gone or the call fails
        """
        payload = arguments.model_dump(by_alias=True, exclude_unset=True)
        try:
            content = await self._manager.call_tool(
                self.server_id, self.tool_name, payload
            )
        except Exception as e:
            raise ToolExecutionError(f"MCP tool {self.tool_name} failed: {e}") from e
        return [_content_block_to_dict(block) for block in content]
