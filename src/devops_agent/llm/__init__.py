"""Provider-agnostic chat and tool-call types.

These types are the contract between the agent and every provider adapter.
"""

from devops_agent.llm.types import (
    ChatRequest,
    ChatResponse,
    Completion,
    Message,
    ToolCallRequest,
    ToolCallResult,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Completion",
    "Message",
    "ToolCallRequest",
    "ToolCallResult",
]
