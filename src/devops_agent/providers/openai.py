"""OpenAI and Azure OpenAI provider adapters.

Both vendors use the Chat Completions API: the system prompt is a native
``system`` message, tools are ``function`` declarations, tool-call arguments
arrive as JSON strings and results go back as ``tool`` messages.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any

import openai

from devops_agent.config import AzureOpenAISettings, OpenAISettings, ProviderSettings
from devops_agent.llm.types import (
    ChatRequest,
    Completion,
    ToolCallRequest,
    ToolCallResult,
)
from devops_agent.providers.base import BaseProvider
from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """Adapter for the OpenAI Chat Completions API."""

    name = "openai"
    display_name = "OpenAI"
    temperature_range = (0.0, 2.0)

    def __init__(self, settings: OpenAISettings, tools: Sequence[Tool]) -> None:
        super().__init__(settings, tools)
        api_key = self._require(settings.api_key, "API key")
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=settings.base_url,
            organization=settings.organization,
        )
        logger.info(f"OpenAI provider initialized with model: {self.model}")

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
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if declarations:
            kwargs["tools"] = declarations
            kwargs["tool_choice"] = "auto"

        response = await self._client.chat.completions.create(**kwargs)
        if not response.choices:
            return Completion()

        message = response.choices[0].message
        tool_calls = [
            ToolCallRequest(
                call_id=call.id,
                tool_name=call.function.name,
                raw_arguments=call.function.arguments,
            )
            for call in message.tool_calls or []
        ]
        return Completion(
            text=message.content or "",
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
            "content": completion.text or None,
            "tool_calls": [
                {
                    "id": call.call_id,
                    "type": "function",
                    "function": {
                        "name": call.tool_name,
                        "arguments": _arguments_json(call.raw_arguments),
                    },
                }
                for call in completion.tool_calls
            ],
        }
        tool_messages = [
            {"role": "tool", "tool_call_id": result.call_id, "content": result.to_json()}
            for result in results
        ]
        return [*messages, assistant_turn, *tool_messages]

    async def close(self) -> None:
        await self._client.close()


class AzureOpenAIProvider(OpenAIProvider):
    """Adapter for an Azure OpenAI deployment.

    The deployment name takes the place of the model name.
    """

    name = "azure_openai"
    display_name = "Azure OpenAI"

    def __init__(self, settings: AzureOpenAISettings, tools: Sequence[Tool]) -> None:
        BaseProvider.__init__(self, settings, tools)
        api_key = self._require(settings.api_key, "API key")
        endpoint = self._require(settings.endpoint, "endpoint")
        self._client = openai.AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            api_version=settings.api_version,
        )
        logger.info(
            f"Azure OpenAI provider initialized with deployment: {self.model}"
        )

    def _resolve_model(self, settings: ProviderSettings) -> str:
        deployment = getattr(settings, "deployment_name", None)
        return self._require(deployment, "deployment name")


def _arguments_json(raw_arguments: str | dict[str, Any] | None) -> str:
    if raw_arguments is None:
        return "{}"
    if isinstance(raw_arguments, str):
        return raw_arguments
    return json.dumps(raw_arguments)
