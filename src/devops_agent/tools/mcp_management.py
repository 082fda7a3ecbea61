"""Local tools that let the model inspect the connected MCP servers.

The list tools take no arguments and summarize what every connected server
offers. ``mcp_read_resource`` and ``mcp_get_prompt`` fetch a single item
from a named server.
"""

from typing import Any

from pydantic import BaseModel, Field

from devops_agent.errors import ToolExecutionError
from devops_agent.mcp.manager import MCPManager
from devops_agent.tools.base import Tool


class MCPManagementTool(Tool):
    """Base for tools backed by the MCPManager."""

    output_type = dict[str, Any]

    def __init__(self, manager: MCPManager) -> None:
        self._manager = manager


class MCPListToolsTool(MCPManagementTool):
    name = "mcp_list_tools"
    description = "List all available tools from connected MCP servers"

    async def execute(self, arguments: BaseModel) -> dict[str, Any]:
        tools = await self._manager.list_tools()
        return {
            "tools": [
                {
                    "server": tool.server_name,
                    "name": tool.name,
                    "description": tool.description,
                }
                for tool in tools
            ],
            "total": len(tools),
        }


class MCPListResourcesTool(MCPManagementTool):
    name = "mcp_list_resources"
    description = "List all available resources from connected MCP servers"

    async def execute(self, arguments: BaseModel) -> dict[str, Any]:
        resources = await self._manager.list_resources()
        return {
            "resources": [
                {
                    "server": resource.server_name,
                    "server_id": resource.server_id,
                    "name": resource.name,
                    "uri": resource.uri,
                    "description": resource.description,
                    "mime_type": resource.mime_type,
                }
                for resource in resources
            ],
            "total": len(resources),
        }


class MCPListPromptsTool(MCPManagementTool):
    name = "mcp_list_prompts"
    description = "List all available prompts from connected MCP servers"

    async def execute(self, arguments: BaseModel) -> dict[str, Any]:
        prompts = await self._manager.list_prompts()
        return {
            "prompts": [
                {
                    "server": prompt.server_name,
                    "server_id": prompt.server_id,
                    "name": prompt.name,
                    "description": prompt.description,
                    "arguments": prompt.arguments,
                }
                for prompt in prompts
            ],
            "total": len(prompts),
        }


class MCPServerStatusTool(MCPManagementTool):
    name = "mcp_server_status"
    description = "Show status of connected MCP servers"

    async def execute(self, arguments: BaseModel) -> dict[str, Any]:
        servers = self._manager.get_connected_servers()
        return {
            "servers": [
                {
                    "id": server["id"],
                    "name": server["name"],
                    "command": server["config"].command,
                    "args": list(server["config"].args),
                    "enabled": server["config"].enabled,
                    "connected": self._manager.is_server_connected(server["id"]),
                }
                for server in servers
            ],
            "total": len(servers),
        }


class ReadResourceInput(BaseModel):
    server_id: str = Field(description="Id of the MCP server that owns the resource")
    uri: str = Field(description="URI of the resource to read")


class MCPReadResourceTool(MCPManagementTool):
    name = "mcp_read_resource"
    description = "Read the contents of a resource from a connected MCP server"
    input_model = ReadResourceInput

    async def execute(self, arguments: ReadResourceInput) -> dict[str, Any]:
        try:
            contents = await self._manager.read_resource(
                arguments.server_id, arguments.uri
            )
        except Exception as e:
            raise ToolExecutionError(
                f"Failed to read MCP resource {arguments.uri}: {e}"
            ) from e
        return {
            "uri": arguments.uri,
            "contents": [
                content.model_dump(mode="json", exclude_none=True)
                for content in contents
            ],
        }


class GetPromptInput(BaseModel):
    server_id: str = Field(description="Id of the MCP server that owns the prompt")
    name: str = Field(description="Name of the prompt")
    arguments: dict[str, str] | None = Field(
        default=None, description="Values for the prompt's arguments"
    )


class MCPGetPromptTool(MCPManagementTool):
    name = "mcp_get_prompt"
    description = "Render a prompt template from a connected MCP server"
    input_model = GetPromptInput

    async def execute(self, arguments: GetPromptInput) -> dict[str, Any]:
        try:
            messages = await self._manager.get_prompt(
                arguments.server_id, arguments.name, arguments.arguments
            )
        except Exception as e:
            raise ToolExecutionError(
                f"Failed to get MCP prompt {arguments.name}: {e}"
            ) from e
        return {
            "name": arguments.name,
            "messages": [
                message.model_dump(mode="json", exclude_none=True)
                for message in messages
            ],
        }


def management_tools(manager: MCPManager) -> list[Tool]:
    """Instantiate every MCP management tool for a manager."""
    return [
        MCPListToolsTool(manager),
        MCPListResourcesTool(manager),
        MCPListPromptsTool(manager),
        MCPServerStatusTool(manager),
        MCPReadResourceTool(manager),
        MCPGetPromptTool(manager),
    ]
