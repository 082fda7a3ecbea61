"""Remote tool server integration over the Model Context Protocol.

This package launches MCP servers as subprocesses, tracks their connection
state and proxies discovery and tool calls to them.
"""

from devops_agent.mcp.manager import MCPManager
from devops_agent.mcp.types import (
    ConnectionState,
    MCPPromptDescriptor,
    MCPResourceDescriptor,
    MCPServerConnection,
    MCPToolDescriptor,
)

__all__ = [
    "ConnectionState",
    "MCPManager",
    "MCPPromptDescriptor",
    "MCPResourceDescriptor",
    "MCPServerConnection",
    "MCPToolDescriptor",
]
