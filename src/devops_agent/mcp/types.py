"""Type definitions for remote MCP tool server integration.

This module contains the dataclasses describing connected servers and the
tools, resources and prompts discovered on them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from devops_agent.config import MCPServerSettings


class ConnectionState(str, Enum):
    """Lifecycle of a server connection.

    DISCONNECTED is terminal; reconnecting creates a new connection.
    """

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class MCPConnection(Protocol):
    """An open, initialized session with one server.

    ``session`` exposes the MCP client calls (list_tools, call_tool, ...).
    """

    session: Any

    async def close(self) -> None: ...


@dataclass
class MCPServerConnection:
    """A server tracked by the MCPManager."""

    id: str
    name: str
    config: MCPServerSettings
    handle: MCPConnection
    state: ConnectionState = ConnectionState.CONNECTING

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED


@dataclass
class MCPToolDescriptor:
    """A tool advertised by a connected server.

    Attributes:
        server_id: Configured id of the server
        server_name: Display name of the server
        name: Tool name as known to the server
        description: Tool description
        input_schema: JSON Schema of the tool arguments
    """

    server_id: str
    server_name: str
    name: str
    description: str
    input_schema: dict[str, Any]


@dataclass
class MCPResourceDescriptor:
    """A resource advertised by a connected server."""

    server_id: str
    server_name: str
    uri: str
    name: str
    description: str | None = None
    mime_type: str | None = None


@dataclass
class MCPPromptDescriptor:
    """A prompt template advertised by a connected server."""

    server_id: str
    server_name: str
    name: str
    description: str | None = None
    arguments: list[dict[str, Any]] | None = None
