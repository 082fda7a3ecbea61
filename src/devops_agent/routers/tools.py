"""Tools endpoint router."""

from fastapi import APIRouter, Depends

from devops_agent.agent import Agent
from devops_agent.dependencies import get_agent
from devops_agent.models.status import ToolInfo, ToolListResponse

router = APIRouter(prefix="/api/v1", tags=["tools"])


@router.get("/tools", response_model=ToolListResponse)
async def list_tools(agent: Agent = Depends(get_agent)) -> ToolListResponse:
    """List the tools offered to the model, local and remote."""
    tools = [
        ToolInfo(
            name=tool.name,
            description=tool.description,
            parameters=tool.parameters.to_json_schema(),
        )
        for tool in agent.list_tools()
    ]
    return ToolListResponse(tools=tools, total=len(tools))
