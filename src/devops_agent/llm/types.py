"""Data types shared by the agent and the provider adapters.

This module defines the normalized conversation types (messages, requests,
responses) and the normalized tool-call types that every vendor protocol is
translated into and out of.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["user", "assistant", "system"]


@dataclass(frozen=True)
class Message:
    """A single conversation turn."""

    role: Role
    content: str


@dataclass(frozen=True)
class ChatRequest:
    """Everything a provider needs for one user turn.

    Attributes:
        system_prompt: The process-wide system prompt
        messages: Conversation history, oldest first, ending with the user turn
    """

    system_prompt: str
    messages: tuple[Message, ...]


@dataclass(frozen=True)
class ChatResponse:
    """The final natural-language answer for a turn."""

    content: str


@dataclass(frozen=True)
class ToolCallRequest:
    """A tool call as emitted by a vendor, before validation.

    Attributes:
        call_id: Identifier used to correlate the result with the request
        tool_name: Name of the requested tool
        raw_arguments: JSON string or already-decoded mapping
    """

    call_id: str
    tool_name: str
    raw_arguments: str | dict[str, Any] | None = None


@dataclass(frozen=True)
class ToolCallResult:
    """Outcome of one tool call: either a value or an error message."""

    call_id: str
    tool_name: str
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, call_id: str, tool_name: str, value: Any) -> "ToolCallResult":
        return cls(call_id=call_id, tool_name=tool_name, value=value)

    @classmethod
    def failure(cls, call_id: str, tool_name: str, error: str) -> "ToolCallResult":
        return cls(call_id=call_id, tool_name=tool_name, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def payload(self) -> Any:
        """Return what the model sees: the value, or {"error": message}."""
        if self.ok:
            return self.value
        return {"error": self.error}

    def to_json(self) -> str:
        return json.dumps(self.payload(), default=str)


@dataclass
class Completion:
    """One vendor reply in normalized form.

    Attributes:
        text: Concatenated text content (may be empty)
        tool_calls: Tool calls requested by the model, in vendor order
        assistant_turn: Vendor-native assistant message, replayed in the follow-up
    """

    text: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    assistant_turn: Any = None
