"""Anthropic Messages API provider adapter."""

import logging
from collections.abc import Sequence
from typing import Any

import anthropic

from devops_agent.config import AnthropicSettings
from devops_agent.llm.types import (
    ChatRequest,
    Completion,
    ToolCallRequest,
    ToolCallResult,
)
from devops_agent.providers.base import BaseProvider
from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseProvider):
    """Adapter for Anthropic's Messages API.

    The system prompt goes in the ``system`` parameter, so system messages
    inside the history are dropped. Tool calls arrive as ``tool_use`` content
    blocks and results go back as ``tool_result`` blocks in a user turn.
    """

    name = "anthropic"
    display_name = "Anthropic"
    temperature_range = (0.0, 1.0)

    def __init__(self, settings: AnthropicSettings, tools: Sequence[Tool]) -> None:
        super().__init__(settings, tools)
        api_key = self._require(settings.api_key, "API key")
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            base_url=settings.base_url,
        )
        logger.info(f"Anthropic provider initialized with model: {self.model}")

    def _declare_tools(self, tools: Sequence[Tool]) -> list[dict[str, Any]]:
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.parameters.to_json_schema(),
            }
            for tool in tools
        ]

    def _build_messages(self, request: ChatRequest) -> list[dict[str, Any]]:
        return [
            {"role": message.role, "content": message.content}
            for message in request.messages
            if message.role != "system"
        ]

    async def _complete(
        self,
        request: ChatRequest,
        messages: list[dict[str, Any]],
        declarations: list[dict[str, Any]] | None,
        follow_up: bool = False,
    ) -> Completion:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": request.system_prompt,
            "messages": messages,
        }
        if declarations:
            kwargs["tools"] = declarations
            if follow_up:
                # tool_use blocks in the history require the tool definitions
                kwargs["tool_choice"] = {"type": "none"}

        response = await self._client.messages.create(**kwargs)

        text_parts: list[str] = []
        tool_calls: list[ToolCallRequest] = []
        for block in response.content or []:
            if block.type == "text":
                text_parts.append(block.text)
            elif block.type == "tool_use":
                tool_calls.append(
                    ToolCallRequest(
                        call_id=block.id,
                        tool_name=block.name,
                        raw_arguments=dict(block.input or {}),
                    )
                )

        return Completion(
            text="".join(text_parts),
            tool_calls=tool_calls,
            assistant_turn=response.content,
        )

    def _follow_up_declarations(
        self, declarations: list[dict[str, Any]] | None
    ) -> list[dict[str, Any]] | None:
        return declarations

    def _follow_up_messages(
        self,
        messages: list[dict[str, Any]],
        completion: Completion,
        results: Sequence[ToolCallResult],
    ) -> list[dict[str, Any]]:
        assistant_content: list[dict[str, Any]] = []
        if completion.text:
            assistant_content.append({"type": "text", "text": completion.text})
        assistant_content.extend(
            {
                "type": "tool_use",
                "id": call.call_id,
                "name": call.tool_name,
                "input": call.raw_arguments or {},
            }
            for call in completion.tool_calls
        )

        tool_results: list[dict[str, Any]] = []
        for result in results:
            block: dict[str, Any] = {
                "type": "tool_result",
                "tool_use_id": result.call_id,
                "content": result.to_json(),
            }
            if not result.ok:
                block["is_error"] = True
            tool_results.append(block)

        return [
            *messages,
            {"role": "assistant", "content": assistant_content},
            {"role": "user", "content": tool_results},
        ]

    async def close(self) -> None:
        await self._client.close()
