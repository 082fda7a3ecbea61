"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that replace the
Agent with a mock before the app is created, so the lifespan never talks
to a real LLM provider or MCP server.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from devops_agent.agent import AgentState
from devops_agent.llm import Message
from devops_agent.mcp import MCPPromptDescriptor, MCPResourceDescriptor
from devops_agent.tools import ExecuteCommandTool


@pytest.fixture(autouse=True)
def mock_agent():
    """Mock Agent for all integration tests.

    This fixture patches the Agent class used by the lifespan, ensuring
    the app stores our mock instead of initializing a real agent.
    """
    with patch("devops_agent.app.Agent") as mock_agent_class:
        mock_instance = MagicMock()
        mock_instance.state = AgentState.READY
        mock_instance.active_provider = "gemini"
        mock_instance.initialize = AsyncMock()
        mock_instance.dispose = AsyncMock()
        mock_instance.converse = AsyncMock(return_value="There are 3 pods running.")
        mock_instance.history = [
            Message(role="user", content="How many pods?"),
            Message(role="assistant", content="There are 3 pods running."),
        ]
        mock_instance.list_tools.return_value = (ExecuteCommandTool(),)
        mock_instance.provider_status.return_value = [
            {"name": "Gemini", "enabled": True, "is_default": True},
            {"name": "OpenAI", "enabled": False, "is_default": False},
        ]
        mock_instance.server_status.return_value = [
            {
                "id": "k8s",
                "name": "Kubernetes",
                "description": "Cluster access",
                "command": "npx",
                "args": ["-y", "mcp-server-kubernetes"],
                "connected": True,
            }
        ]
        mock_instance.list_resources = AsyncMock(
            return_value=[
                MCPResourceDescriptor(
                    server_id="k8s",
                    server_name="Kubernetes",
                    uri="k8s://namespaces",
                    name="namespaces",
                    mime_type="application/json",
                )
            ]
        )
        mock_instance.list_prompts = AsyncMock(
            return_value=[
                MCPPromptDescriptor(
                    server_id="k8s",
                    server_name="Kubernetes",
                    name="triage",
                    description="Triage a failing pod",
                    arguments=[{"name": "pod", "required": True}],
                )
            ]
        )

        mock_agent_class.return_value = mock_instance

        yield mock_instance
