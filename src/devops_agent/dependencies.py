"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and the agent.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from devops_agent.agent import Agent, AgentState
from devops_agent.config import AgentSettings


@lru_cache
def get_settings() -> AgentSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the DEVOPS_AGENT_ prefix and from the YAML configuration file.

    Returns:
        AgentSettings: The application configuration settings.
    """
    return AgentSettings()


def get_agent(request: Request) -> Agent:
    """Get the agent from app state.

    The agent is created and initialized during application startup and
    stored in app.state.

    Args:
        request: The FastAPI request object.

    Returns:
        Agent: The initialized agent.

    Raises:
        HTTPException: If the agent is missing or not ready (503 Service Unavailable).
    """
    agent: Agent | None = getattr(request.app.state, "agent", None)
    if agent is None or agent.state is not AgentState.READY:
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": "agent_not_ready",
                    "message": "Agent is not initialized",
                    "details": {},
                }
            },
        )
    return agent
