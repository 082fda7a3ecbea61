"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devops_agent import __version__
from devops_agent.agent import Agent
from devops_agent.config import AgentSettings
from devops_agent.routers import chat, health, mcp, providers, tools

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The agent is created and initialized once at startup (connecting MCP
    servers and building the provider adapter) and stored in app.state for
    reuse across all requests. Configuration errors abort startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: AgentSettings = app.state.settings
    agent = Agent(settings)
    await agent.initialize()
    app.state.agent = agent
    logger.info(f"Agent ready with provider: {agent.active_provider}")

    yield

    # Shutdown: disconnect MCP servers and close provider clients
    if hasattr(app.state, "agent"):
        await app.state.agent.dispose()
        logger.info("Agent disposed")


def create_app(settings: AgentSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional AgentSettings instance. If not provided,
                  settings will be loaded from the environment and config file.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from devops_agent.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="devops-agent",
        description="Tool-calling DevOps assistant over multiple LLM providers and MCP servers",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(tools.router)
    app.include_router(providers.router)
    app.include_router(mcp.router)

    return app
