"""MCP Manager: owns connections to remote tool servers.

The manager is the only component that opens or closes server connections.
It discovers the tools, resources and prompts of every connected server and
routes individual calls to the right connection.

Usage:
    manager = MCPManager()

    await manager.connect_server("k8s", server_settings)

    tools = await manager.list_tools()
    content = await manager.call_tool("k8s", "get_pods", {"namespace": "default"})

    await manager.disconnect_all()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

from pydantic import AnyUrl

from devops_agent.config import MCPServerSettings
from devops_agent.errors import ServerNotConnected, UpstreamToolError
from devops_agent.mcp.connection import DEFAULT_INIT_TIMEOUT, open_stdio_connection
from devops_agent.mcp.types import (
    ConnectionState,
    MCPConnection,
    MCPPromptDescriptor,
    MCPResourceDescriptor,
    MCPServerConnection,
    MCPToolDescriptor,
)

logger = logging.getLogger(__name__)

Connector = Callable[[MCPServerSettings], Awaitable[MCPConnection]]


class MCPManager:
    """Manages the lifecycle of MCP server connections.

    Responsibilities:
    - Launch servers and perform the MCP handshake
    - Discover tools, resources and prompts (fresh on every call)
    - Route tool calls, resource reads and prompt lookups
    - Best-effort concurrent shutdown
    """

    def __init__(
        self,
        connector: Connector | None = None,
        init_timeout: float = DEFAULT_INIT_TIMEOUT,
    ) -> None:
        """Initialize the manager.

        Args:
            connector: Coroutine function opening a connection for a server
                config. Defaults to launching the server over stdio.
            init_timeout: Handshake timeout passed to the default connector
        """
        self._connector: Connector = connector or partial(
            open_stdio_connection, init_timeout=init_timeout
        )
        self._clients: dict[str, MCPServerConnection] = {}

    async def connect_server(self, server_id: str, config: MCPServerSettings) -> None:
        """Connect to a server.

        A server that is already connected is left untouched. A failed attempt
        is never recorded.

        Raises:
            Exception: Whatever the connector raised
        """
        existing = self._clients.get(server_id)
        if existing is not None and existing.connected:
            logger.warning(f"MCP server {server_id} is already connected")
            return

        logger.info(f"Connecting to MCP server: {config.name}")
        try:
            handle = await self._connector(config)
        except Exception as e:
            logger.error(f"Failed to connect to MCP server {server_id}: {e}")
            raise

        self._clients[server_id] = MCPServerConnection(
            id=server_id,
            name=config.name,
            config=config,
            handle=handle,
            state=ConnectionState.CONNECTED,
        )
        logger.info(f"Connected to MCP server: {config.name}")

    async def disconnect_server(self, server_id: str) -> None:
        """Disconnect from a server.

        The server is forgotten even when closing its connection fails.
        """
        client = self._clients.pop(server_id, None)
        if client is None:
            logger.warning(f"MCP server {server_id} is not connected")
            return

        client.state = ConnectionState.DISCONNECTED
        try:
            await client.handle.close()
            logger.info(f"Disconnected from MCP server: {client.name}")
        except Exception as e:
            logger.error(f"Failed to disconnect from MCP server {server_id}: {e}")

    async def disconnect_all(self) -> None:
        """Disconnect every server concurrently and wait for all of them."""
        await asyncio.gather(
            *(self.disconnect_server(server_id) for server_id in list(self._clients))
        )

    def _connected(self) -> list[MCPServerConnection]:
        return [client for client in self._clients.values() if client.connected]

    def _require(self, server_id: str) -> MCPServerConnection:
        client = self._clients.get(server_id)
        if client is None or not client.connected:
            raise ServerNotConnected(f"MCP server {server_id} is not connected")
        return client

    async def list_tools(self) -> list[MCPToolDescriptor]:
        """List the tools of all connected servers."""
        tools: list[MCPToolDescriptor] = []

        for client in self._connected():
            try:
                response = await client.handle.session.list_tools()
                for tool in response.tools:
                    tools.append(
                        MCPToolDescriptor(
                            server_id=client.id,
                            server_name=client.name,
                            name=tool.name,
                            description=tool.description or "",
                            input_schema=dict(tool.inputSchema or {}),
                        )
                    )
            except Exception as e:
                logger.error(f"Failed to get tools from MCP server {client.id}: {e}")

        return tools

    async def list_resources(self) -> list[MCPResourceDescriptor]:
        """List the resources of all connected servers."""
        resources: list[MCPResourceDescriptor] = []

        for client in self._connected():
            try:
                response = await client.handle.session.list_resources()
                for resource in response.resources:
                    resources.append(
                        MCPResourceDescriptor(
                            server_id=client.id,
                            server_name=client.name,
                            uri=str(resource.uri),
                            name=resource.name,
                            description=resource.description,
                            mime_type=resource.mimeType,
                        )
                    )
            except Exception as e:
                logger.error(
                    f"Failed to get resources from MCP server {client.id}: {e}"
                )

        return resources

    async def list_prompts(self) -> list[MCPPromptDescriptor]:
        """List the prompts of all connected servers."""
        prompts: list[MCPPromptDescriptor] = []

        for client in self._connected():
            try:
                response = await client.handle.session.list_prompts()
                for prompt in response.prompts:
                    arguments = None
                    if prompt.arguments is not None:
                        arguments = [
                            argument.model_dump(exclude_none=True)
                            for argument in prompt.arguments
                        ]
                    prompts.append(
                        MCPPromptDescriptor(
                            server_id=client.id,
                            server_name=client.name,
                            name=prompt.name,
                            description=prompt.description,
                            arguments=arguments,
                        )
                    )
            except Exception as e:
                logger.error(f"Failed to get prompts from MCP server {client.id}: {e}")

        return prompts

    async def call_tool(
        self,
        server_id: str,
        tool_name: str,
        arguments: dict[str, Any],
    ) -> list[Any]:
        """Call a tool on a specific server.

        Returns:
            The content blocks of the tool result

        Raises:
            ServerNotConnected: If the server is not connected
            UpstreamToolError: If the call fails or the server flags an error
        """
        client = self._require(server_id)

        try:
            result = await client.handle.session.call_tool(tool_name, arguments)
        except Exception as e:
            logger.error(
                f"Failed to call tool {tool_name} on MCP server {server_id}: {e}"
            )
            raise UpstreamToolError(
                f"Tool call failed ({server_id}/{tool_name}): {e}"
            ) from e

        if result.isError:
            message = " ".join(
                getattr(block, "text", str(block)) for block in result.content or []
            )
            raise UpstreamToolError(
                f"Tool call failed ({server_id}/{tool_name}): {message or 'unknown error'}"
            )

        return list(result.content or [])

    async def read_resource(self, server_id: str, uri: str) -> list[Any]:
        """Read a resource from a server.

        Raises:
            ServerNotConnected: If the server is not connected
            UpstreamToolError: If the read fails
        """
        client = self._require(server_id)

        try:
            result = await client.handle.session.read_resource(AnyUrl(uri))
        except Exception as e:
            logger.error(
                f"Failed to read resource {uri} from MCP server {server_id}: {e}"
            )
            raise UpstreamToolError(f"Resource read failed ({server_id}/{uri}): {e}") from e

        return list(result.contents)

    async def get_prompt(
        self,
        server_id: str,
        prompt_name: str,
        arguments: dict[str, str] | None = None,
    ) -> list[Any]:
        """Get a rendered prompt from a server.

        Raises:
            ServerNotConnected: If the server is not connected
            UpstreamToolError: If the lookup fails
        """
        client = self._require(server_id)

        try:
            result = await client.handle.session.get_prompt(prompt_name, arguments)
        except Exception as e:
            logger.error(
                f"Failed to get prompt {prompt_name} from MCP server {server_id}: {e}"
            )
            raise UpstreamToolError(
                f"Prompt lookup failed ({server_id}/{prompt_name}): {e}"
            ) from e

        return list(result.messages)

    def get_connected_servers(self) -> list[dict[str, Any]]:
        """List connected servers with their configuration."""
        return [
            {"id": client.id, "name": client.name, "config": client.config}
            for client in self._clients.values()
        ]

    def is_server_connected(self, server_id: str) -> bool:
        client = self._clients.get(server_id)
        return client is not None and client.connected
