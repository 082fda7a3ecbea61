"""The conversational agent.

The Agent owns the conversation history, the tool registry, the MCP manager
and the active provider adapter. It wires them together at startup and runs
one user turn at a time.

Usage:
    agent = Agent(settings)
    await agent.initialize()

    answer = await agent.converse("Which pods are crash-looping?")

    await agent.dispose()
"""

import logging
from enum import Enum
from typing import Any

from devops_agent.config import AgentSettings
from devops_agent.errors import (
    AgentDisposed,
    DuplicateToolName,
    NoEnabledProvider,
    NotInitialized,
)
from devops_agent.llm.types import ChatRequest, Message
from devops_agent.mcp.manager import Connector, MCPManager
from devops_agent.mcp.types import MCPPromptDescriptor, MCPResourceDescriptor
from devops_agent.providers import (
    DISPLAY_NAMES,
    FALLBACK_ORDER,
    BaseProvider,
    create_provider,
)
from devops_agent.tools import MCPToolProxy, Tool, ToolRegistry, local_tools

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DISPOSED = "disposed"


def resolve_provider(settings: AgentSettings) -> str:
    """Pick the provider to use.

    The configured default wins when it is enabled. Otherwise the first
    enabled provider in FALLBACK_ORDER is used.

    Raises:
        NoEnabledProvider: If no provider is enabled
    """
    configured = settings.providers.configured()

    default = configured.get(settings.default_provider)
    if default is not None and default.enabled:
        return settings.default_provider

    for name in FALLBACK_ORDER:
        provider_settings = configured.get(name)
        if provider_settings is not None and provider_settings.enabled:
            logger.info(
                f"Default provider {settings.default_provider} is not enabled, "
                f"falling back to {name}"
            )
            return name

    raise NoEnabledProvider("No enabled LLM provider found in configuration")


class Agent:
    """Runs conversations against the selected LLM provider.

    Attributes:
        settings: Application settings
        state: Lifecycle state (UNINITIALIZED -> READY -> DISPOSED)
        mcp_manager: Owner of all MCP server connections
        registry: Tools offered to the model
    """

    def __init__(
        self,
        settings: AgentSettings,
        connector: Connector | None = None,
    ) -> None:
        """Create an agent. Nothing is connected until initialize().

        Args:
            settings: Application settings
            connector: Optional MCP connector, mainly for tests
        """
        self.settings = settings
        self.state = AgentState.UNINITIALIZED
        self.mcp_manager = MCPManager(
            connector=connector, init_timeout=settings.mcp_init_timeout
        )
        self.registry = ToolRegistry()
        self._provider: BaseProvider | None = None
        self._provider_name: str | None = None
        self._history: list[Message] = []

    @property
    def active_provider(self) -> str | None:
        return self._provider_name

    @property
    def history(self) -> list[Message]:
        return list(self._history)

    async def initialize(self) -> None:
        """Register tools, connect MCP servers and build the provider adapter.

        MCP servers that fail to connect are logged and skipped.

        Raises:
            AgentDisposed: If the agent was disposed
            ConfigurationError: If no provider can be built
        """
        if self.state is AgentState.READY:
            logger.warning("Agent is already initialized")
            return
        if self.state is AgentState.DISPOSED:
            raise AgentDisposed("Agent has been disposed")

        provider_name = resolve_provider(self.settings)

        for tool in local_tools(self.mcp_manager):
            self.registry.register(tool)

        await self._connect_servers()
        await self._register_remote_tools()

        try:
            self._provider = create_provider(
                provider_name,
                getattr(self.settings.providers, provider_name),
                self.registry.list(),
            )
        except Exception:
            await self.mcp_manager.disconnect_all()
            self.registry = ToolRegistry()
            raise

        self._provider_name = provider_name
        self.state = AgentState.READY
        logger.info(
            f"Agent initialized with provider {DISPLAY_NAMES[provider_name]} "
            f"and {len(self.registry)} tools"
        )

    async def _connect_servers(self) -> None:
        for server in self.settings.enabled_mcp_servers:
            try:
                await self.mcp_manager.connect_server(server.id, server)
            except Exception as e:
                logger.error(f"Skipping MCP server {server.id}: {e}")

    async def _register_remote_tools(self) -> None:
        for descriptor in await self.mcp_manager.list_tools():
            try:
                self.registry.register(MCPToolProxy(self.mcp_manager, descriptor))
            except DuplicateToolName as e:
                logger.warning(f"Skipping remote tool {descriptor.name}: {e}")

    def _ensure_ready(self) -> BaseProvider:
        if self.state is AgentState.DISPOSED:
            raise AgentDisposed("Agent has been disposed")
        if self.state is not AgentState.READY or self._provider is None:
            raise NotInitialized(
                "Agent provider is not initialized. Call initialize() first."
            )
        return self._provider

    async def converse(self, text: str) -> str:
        """Process one user message.

        On failure the user message is removed from the history again so
        user and assistant turns keep alternating.

        Args:
            text: The user's message

        Returns:
            The assistant's answer

        Raises:
            NotInitialized: Before initialize()
            AgentDisposed: After dispose()
            UpstreamError: If the provider call fails
        """
        provider = self._ensure_ready()

        self._history.append(Message(role="user", content=text))
        request = ChatRequest(
            system_prompt=self.settings.system_prompt,
            messages=tuple(self._history),
        )

        try:
            response = await provider.converse(request)
        except Exception as e:
            self._history.pop()
            logger.error(f"Agent processing error: {e}")
            raise

        self._history.append(Message(role="assistant", content=response.content))
        return response.content

    def list_tools(self) -> tuple[Tool, ...]:
        return self.registry.list()

    def clear_history(self) -> None:
        self._history.clear()

    def provider_status(self) -> list[dict[str, Any]]:
        """Status of every configured provider.

        ``is_default`` marks the provider chosen by resolve_provider().
        """
        selected = self._provider_name
        if selected is None:
            try:
                selected = resolve_provider(self.settings)
            except NoEnabledProvider:
                selected = None

        return [
            {
                "name": DISPLAY_NAMES.get(name, name),
                "enabled": provider_settings.enabled,
                "is_default": name == selected,
            }
            for name, provider_settings in self.settings.providers.configured().items()
        ]

    def server_status(self) -> list[dict[str, Any]]:
        """Connected MCP servers with their launch configuration."""
        return [
            {
                "id": server["id"],
                "name": server["name"],
                "description": server["config"].description,
                "command": server["config"].command,
                "args": list(server["config"].args),
                "connected": True,
            }
            for server in self.mcp_manager.get_connected_servers()
            if self.mcp_manager.is_server_connected(server["id"])
        ]

    async def list_resources(self) -> list[MCPResourceDescriptor]:
        return await self.mcp_manager.list_resources()

    async def list_prompts(self) -> list[MCPPromptDescriptor]:
        return await self.mcp_manager.list_prompts()

    async def dispose(self) -> None:
        """Disconnect every MCP server and release the provider. Idempotent."""
        if self.state is AgentState.DISPOSED:
            return
        self.state = AgentState.DISPOSED

        await self.mcp_manager.disconnect_all()
        if self._provider is not None:
            try:
                await self._provider.close()
            except Exception as e:
                logger.error(f"Failed to close provider {self._provider_name}: {e}")
        logger.info("Agent disposed")
