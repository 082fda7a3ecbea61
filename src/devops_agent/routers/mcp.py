"""MCP server endpoints.

Servers that fail to answer a listing request are skipped, so these
endpoints always succeed once the agent is ready.
"""

import logging

from fastapi import APIRouter, Depends

from devops_agent.agent import Agent
from devops_agent.dependencies import get_agent
from devops_agent.models.status import (
    PromptInfo,
    PromptListResponse,
    ResourceInfo,
    ResourceListResponse,
    ServerStatus,
    ServerStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mcp", tags=["mcp"])


@router.get("/servers", response_model=ServerStatusResponse)
async def list_servers(agent: Agent = Depends(get_agent)) -> ServerStatusResponse:
    """List connected MCP servers."""
    servers = [ServerStatus(**server) for server in agent.server_status()]
    return ServerStatusResponse(servers=servers, total=len(servers))


@router.get("/resources", response_model=ResourceListResponse)
async def list_resources(agent: Agent = Depends(get_agent)) -> ResourceListResponse:
    """List resources offered by the connected MCP servers."""
    resources = [
        ResourceInfo.model_validate(resource)
        for resource in await agent.list_resources()
    ]
    logger.debug(f"Listed {len(resources)} MCP resources")
    return ResourceListResponse(resources=resources, total=len(resources))


@router.get("/prompts", response_model=PromptListResponse)
async def list_prompts(agent: Agent = Depends(get_agent)) -> PromptListResponse:
    """List prompt templates offered by the connected MCP servers."""
    prompts = [
        PromptInfo.model_validate(prompt) for prompt in await agent.list_prompts()
    ]
    logger.debug(f"Listed {len(prompts)} MCP prompts")
    return PromptListResponse(prompts=prompts, total=len(prompts))
