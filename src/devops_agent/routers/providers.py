"""LLM provider status endpoint router."""

from fastapi import APIRouter, Depends

from devops_agent.agent import Agent
from devops_agent.dependencies import get_agent
from devops_agent.models.status import ProviderStatus, ProviderStatusResponse

router = APIRouter(prefix="/api/v1", tags=["providers"])


@router.get("/providers", response_model=ProviderStatusResponse)
async def list_providers(agent: Agent = Depends(get_agent)) -> ProviderStatusResponse:
    """List configured providers and mark the one in use."""
    return ProviderStatusResponse(
        providers=[ProviderStatus(**status) for status in agent.provider_status()],
        active=agent.active_provider,
    )
