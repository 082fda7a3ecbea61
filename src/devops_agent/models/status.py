"""Pydantic models for the tool, provider and MCP status endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolInfo(BaseModel):
    """A tool offered to the model."""

    name: str = Field(description="Tool name")
    description: str = Field(description="Tool description")
    parameters: dict[str, Any] = Field(
        description="JSON Schema of the tool's arguments",
    )


class ToolListResponse(BaseModel):
    """Response body for GET /api/v1/tools."""

    tools: list[ToolInfo] = Field(default_factory=list)
    total: int = Field(default=0, description="Number of tools")


class ProviderStatus(BaseModel):
    """Status of one configured LLM provider."""

    name: str = Field(description="Display name of the provider")
    enabled: bool = Field(description="Whether the provider is enabled")
    is_default: bool = Field(description="Whether the agent uses this provider")


class ProviderStatusResponse(BaseModel):
    """Response body for GET /api/v1/providers."""

    providers: list[ProviderStatus] = Field(default_factory=list)
    active: str | None = Field(
        default=None,
        description="Key of the provider the agent uses",
    )


class ServerStatus(BaseModel):
    """A connected MCP server."""

    id: str
    name: str
    description: str | None = None
    command: str
    args: list[str] = Field(default_factory=list)
    connected: bool = True


class ServerStatusResponse(BaseModel):
    """Response body for GET /api/v1/mcp/servers."""

    servers: list[ServerStatus] = Field(default_factory=list)
    total: int = 0


class ResourceInfo(BaseModel):
    """A resource offered by a connected MCP server."""

    server_id: str
    server_name: str
    uri: str
    name: str
    description: str | None = None
    mime_type: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ResourceListResponse(BaseModel):
    """Response body for GET /api/v1/mcp/resources."""

    resources: list[ResourceInfo] = Field(default_factory=list)
    total: int = 0


class PromptInfo(BaseModel):
    """A prompt template offered by a connected MCP server."""

    server_id: str
    server_name: str
    name: str
    description: str | None = None
    arguments: list[dict[str, Any]] | None = None

    model_config = ConfigDict(from_attributes=True)


class PromptListResponse(BaseModel):
    """Response body for GET /api/v1/mcp/prompts."""

    prompts: list[PromptInfo] = Field(default_factory=list)
    total: int = 0
