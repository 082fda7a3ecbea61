"""Tools the model can call.

This package contains the Tool abstraction, the registry, the local tools
and the proxy that presents remote MCP tools as local ones.
"""

from devops_agent.tools.base import NoArguments, Tool
from devops_agent.tools.devops_cli import (
    AzTool,
    CLITool,
    CommandResult,
    HelmTool,
    KubectlTool,
    devops_cli_tools,
)
from devops_agent.tools.execute_command import ExecuteCommandTool
from devops_agent.tools.mcp_management import management_tools
from devops_agent.tools.mcp_proxy import MCPToolProxy
from devops_agent.tools.registry import ToolRegistry
from devops_agent.tools.schema import SchemaType, ToolParameters, ToolProperty


def local_tools(manager) -> list[Tool]:
    """Tools that run in-process: shell, kubectl, helm, az and MCP management."""
    return [ExecuteCommandTool(), *devops_cli_tools(), *management_tools(manager)]


__all__ = [
    "AzTool",
    "CLITool",
    "CommandResult",
    "ExecuteCommandTool",
    "HelmTool",
    "KubectlTool",
    "MCPToolProxy",
    "NoArguments",
    "SchemaType",
    "Tool",
    "ToolParameters",
    "ToolProperty",
    "ToolRegistry",
    "devops_cli_tools",
    "local_tools",
    "management_tools",
]
