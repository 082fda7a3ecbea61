"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of devops-agent.
        provider: Key of the active LLM provider, if the agent is ready.
        initialized: Whether the agent finished initialization.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of devops-agent")
    provider: str | None = Field(
        default=None,
        description="Active LLM provider",
    )
    initialized: bool = Field(
        default=False,
        description="Whether the agent is initialized",
    )
