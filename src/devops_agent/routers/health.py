"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from devops_agent import __version__
from devops_agent.agent import Agent, AgentState
from devops_agent.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of devops-agent along
    with the active provider, if the agent finished initialization.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    agent: Agent | None = getattr(request.app.state, "agent", None)
    initialized = agent is not None and agent.state is AgentState.READY
    logger.debug(f"Health check: initialized={initialized}")

    return HealthResponse(
        status="ok",
        version=__version__,
        provider=agent.active_provider if initialized else None,
        initialized=initialized,
    )
