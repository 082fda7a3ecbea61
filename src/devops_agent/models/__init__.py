"""Pydantic models for API request and response schemas.

This package contains the Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from devops_agent.models.chat import (
    ChatRequest,
    ChatResponse,
    HistoryResponse,
    MessageResponse,
)
from devops_agent.models.health import HealthResponse
from devops_agent.models.status import (
    PromptInfo,
    PromptListResponse,
    ProviderStatus,
    ProviderStatusResponse,
    ResourceInfo,
    ResourceListResponse,
    ServerStatus,
    ServerStatusResponse,
    ToolInfo,
    ToolListResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "HistoryResponse",
    "MessageResponse",
    "PromptInfo",
    "PromptListResponse",
    "ProviderStatus",
    "ProviderStatusResponse",
    "ResourceInfo",
    "ResourceListResponse",
    "ServerStatus",
    "ServerStatusResponse",
    "ToolInfo",
    "ToolListResponse",
]
