"""Pydantic models for chat API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat."""

    message: str = Field(
        min_length=1,
        description="The user message to send to the agent",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"message": "List the pods in the default namespace"},
            ]
        }
    )


class ChatResponse(BaseModel):
    """Response body for POST /api/v1/chat."""

    content: str = Field(description="The assistant's answer")


class MessageResponse(BaseModel):
    """A single message of the conversation history."""

    role: str = Field(description="Message role (user, assistant or system)")
    content: str = Field(description="Message content")

    model_config = ConfigDict(from_attributes=True)


class HistoryResponse(BaseModel):
    """Response body for GET /api/v1/chat/history."""

    messages: list[MessageResponse] = Field(
        default_factory=list,
        description="Conversation messages, oldest first",
    )
