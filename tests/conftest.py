"""Pytest configuration and shared fixtures for devops-agent tests.

This module provides common fixtures used across all test modules,
including test settings, test app creation, async client setup and
in-memory stand-ins for MCP server connections.
"""

from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mcp.types import (
    CallToolResult,
    GetPromptResult,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    ReadResourceResult,
    Resource,
    TextContent,
    TextResourceContents,
    Tool as MCPTool,
)

from devops_agent import create_app
from devops_agent.config import (
    AgentSettings,
    GeminiSettings,
    MCPServerSettings,
    ProvidersSettings,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep real config files and DEVOPS_AGENT_ variables out of tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEVOPS_AGENT_CONFIG_FILE", raising=False)


@pytest.fixture
def test_settings():
    """Create test settings with only Gemini enabled.

    Returns:
        AgentSettings: Settings instance configured for testing.
    """
    return AgentSettings(
        host="127.0.0.1",
        port=8000,
        log_level="DEBUG",
        cors_origins=["*"],
        system_prompt="You are a test assistant.",
        default_provider="gemini",
        providers=ProvidersSettings(
            gemini=GeminiSettings(enabled=True, api_key="test-key"),
        ),
        mcp_servers=[],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


# --- MCP stand-ins ---


class FakeSession:
    """Records calls and answers like an initialized mcp.ClientSession."""

    def __init__(
        self,
        tools: list[MCPTool] | None = None,
        resources: list[Resource] | None = None,
        prompts: list[Prompt] | None = None,
        fail_listing: bool = False,
    ) -> None:
        self.tools = tools or []
        self.resources = resources or []
        self.prompts = prompts or []
        self.fail_listing = fail_listing
        self.results: dict[str, Any] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _check(self) -> None:
        if self.fail_listing:
            raise RuntimeError("server went away")

    async def list_tools(self):
        self._check()
        return ListToolsResult(tools=self.tools)

    async def list_resources(self):
        self._check()
        return ListResourcesResult(resources=self.resources)

    async def list_prompts(self):
        self._check()
        return ListPromptsResult(prompts=self.prompts)

    async def call_tool(self, name: str, arguments: dict[str, Any]):
        self.calls.append((name, arguments))
        result = self.results.get(name)
        if isinstance(result, Exception):
            raise result
        if result is None:
            result = CallToolResult(
                content=[TextContent(type="text", text=f"{name} ok")],
                isError=False,
            )
        return result

    async def read_resource(self, uri):
        return ReadResourceResult(
            contents=[
                TextResourceContents(uri=uri, text="resource body", mimeType="text/plain")
            ]
        )

    async def get_prompt(self, name: str, arguments: dict[str, str] | None = None):
        return GetPromptResult(
            messages=[
                PromptMessage(
                    role="user",
                    content=TextContent(type="text", text=f"{name}: {arguments}"),
                )
            ]
        )


class FakeConnection:
    """An open connection wrapping a FakeSession."""

    def __init__(self, session: FakeSession, close_error: Exception | None = None):
        self.session = session
        self.close_error = close_error
        self.closed = False

    async def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeConnector:
    """Connector for MCPManager that hands out FakeConnections by server id."""

    def __init__(self) -> None:
        self.sessions: dict[str, FakeSession] = {}
        self.failures: dict[str, Exception] = {}
        self.close_errors: dict[str, Exception] = {}
        self.connections: dict[str, FakeConnection] = {}

    async def __call__(self, config: MCPServerSettings) -> FakeConnection:
        if config.id in self.failures:
            raise self.failures[config.id]
        session = self.sessions.setdefault(config.id, FakeSession())
        connection = FakeConnection(session, self.close_errors.get(config.id))
        self.connections[config.id] = connection
        return connection


def mcp_tool(name: str, description: str = "", schema: dict | None = None) -> MCPTool:
    return MCPTool(
        name=name,
        description=description or f"{name} tool",
        inputSchema=schema or {"type": "object", "properties": {}},
    )


def mcp_resource(uri: str, name: str) -> Resource:
    return Resource(uri=uri, name=name, mimeType="text/plain")


def mcp_prompt(name: str) -> Prompt:
    return Prompt(
        name=name,
        description=f"{name} prompt",
        arguments=[PromptArgument(name="service", required=True)],
    )


def server_settings(server_id: str, **overrides: Any) -> MCPServerSettings:
    values: dict[str, Any] = {
        "id": server_id,
        "name": f"{server_id.title()} Server",
        "command": "npx",
        "args": [f"{server_id}-mcp"],
    }
    values.update(overrides)
    return MCPServerSettings(**values)


@pytest.fixture
def fake_connector():
    return FakeConnector()


@pytest.fixture
def mcp_fakes():
    """Builders for MCP objects, usable from any test module."""
    return SimpleNamespace(
        session=FakeSession,
        tool=mcp_tool,
        resource=mcp_resource,
        prompt=mcp_prompt,
        server=server_settings,
    )
