"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, chat,
tools, providers, MCP servers).
"""

from devops_agent.routers import chat, health, mcp, providers, tools

__all__ = [
    "chat",
    "health",
    "mcp",
    "providers",
    "tools",
]
