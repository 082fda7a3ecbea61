"""Ollama provider adapter."""

import logging
from collections.abc import Sequence
from typing import Any

from devops_agent.config import OllamaSettings
from devops_agent.llm.types import (
    ChatRequest,
    Completion,
    ToolCallRequest,
    ToolCallResult,
)
from devops_agent.ollama import OllamaClient
from devops_agent.providers.base import BaseProvider
from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)


class OllamaProvider(BaseProvider):
    """Adapter for a local or remote Ollama server.

    Ollama tool calls carry decoded arguments but no identifier, so call ids
    are synthesized as ``<name>:<index>``. Results are sent back as ``tool``
    messages tagged with the tool name.
    """

    name = "ollama"
    display_name = "Ollama"
    temperature_range = (0.0, 2.0)

    def __init__(self, settings: OllamaSettings, tools: Sequence[Tool]) -> None:
        super().__init__(settings, tools)
        host = self._require(settings.host, "host")
        self._client = OllamaClient(host=host)

    def _declare_tools(self, tools: Sequence[Tool]) -> list[dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters.to_json_schema(),
                },
            }
            for tool in tools
        ]

    def _build_messages(self, request: ChatRequest) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": request.system_prompt}
        ]
        messages.extend(
            {"role": message.role, "content": message.content}
            for message in request.messages
        )
        return messages

    async def _complete(
        self,
        request: ChatRequest,
        messages: list[dict[str, Any]],
        declarations: list[dict[str, Any]] | None,
        follow_up: bool = False,
    ) -> Completion:
        response = await self._client.chat(
            model=self.model,
            messages=messages,
            tools=declarations,
            options={"temperature": self.temperature, "num_predict": self.max_tokens},
        )

        message = response.get("message") or {}
        tool_calls: list[ToolCallRequest] = []
        for index, call in enumerate(message.get("tool_calls") or []):
            function = call.get("function") or {}
            name = function.get("name", "")
            tool_calls.append(
                ToolCallRequest(
                    call_id=f"{name}:{index}",
                    tool_name=name,
                    raw_arguments=dict(function.get("arguments") or {}),
                )
            )

        return Completion(
            text=message.get("content") or "",
            tool_calls=tool_calls,
            assistant_turn=message,
        )

    def _follow_up_messages(
        self,
        messages: list[dict[str, Any]],
        completion: Completion,
        results: Sequence[ToolCallResult],
    ) -> list[dict[str, Any]]:
        assistant_turn = {
            "role": "assistant",
            "content": completion.text,
            "tool_calls": [
                {
                    "function": {
                        "name": call.tool_name,
                        "arguments": call.raw_arguments or {},
                    }
                }
                for call in completion.tool_calls
            ],
        }
        tool_messages = [
            {"role": "tool", "content": result.to_json(), "tool_name": result.tool_name}
            for result in results
        ]
        return [*messages, assistant_turn, *tool_messages]

    async def close(self) -> None:
        await self._client.close()
