"""Base class for LLM provider adapters.

Every vendor speaks a different tool-calling protocol. BaseProvider owns the
one algorithm they all share (declare tools, complete, execute the requested
tool calls concurrently, send the results back, return the final text) and
delegates the wire format to a handful of hooks:

- ``_declare_tools``: vendor tool declarations for the tool snapshot
- ``_build_messages``: vendor messages for a ChatRequest
- ``_complete``: one vendor call, normalized into a Completion
- ``_follow_up_messages``: messages for the call that carries tool results
- ``_follow_up_declarations``: declarations sent with that call (none by default)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from devops_agent.config import ProviderSettings
from devops_agent.errors import (
    AgentError,
    EmptyFollowUpResponse,
    EmptyUpstreamResponse,
    ProviderConfigInvalid,
    ProviderUninitialized,
    ToolError,
    ToolExecutionError,
    ToolNotFound,
    UpstreamError,
)
from devops_agent.llm.types import (
    ChatRequest,
    ChatResponse,
    Completion,
    ToolCallRequest,
    ToolCallResult,
)
from devops_agent.tools.base import Tool

logger = logging.getLogger(__name__)

MAX_TOKENS_WARNING_THRESHOLD = 4096


class BaseProvider(ABC):
    """Adapter between the agent and one LLM vendor.

    Subclasses set the class attributes below and implement the wire-format
    hooks. The tool snapshot is fixed at construction time.

    Attributes:
        name: Provider key as used in configuration (e.g. "openai")
        display_name: Human-readable provider name
        temperature_range: Inclusive range accepted by the vendor
        default_temperature: Used when the settings leave temperature unset
        default_max_tokens: Used when the settings leave max_tokens unset
        default_model: Used when the settings leave model unset (None: required)
    """

    name: str = ""
    display_name: str = ""
    temperature_range: tuple[float, float] = (0.0, 2.0)
    default_temperature: float = 0.7
    default_max_tokens: int = 4096
    default_model: str | None = None

    def __init__(self, settings: ProviderSettings, tools: Sequence[Tool]) -> None:
        """Validate common settings and take the tool snapshot.

        Args:
            settings: Provider settings from configuration
            tools: Tools offered to the model for the lifetime of the adapter

        Raises:
            ProviderUninitialized: If the model is missing
            ProviderConfigInvalid: If temperature or max_tokens are out of range
        """
        self.settings = settings
        self.tools: dict[str, Tool] = {tool.name: tool for tool in tools}
        self.model = self._resolve_model(settings)
        self.temperature, self.max_tokens = self._validate_generation(
            settings.temperature, settings.max_tokens
        )

    def _require(self, value: str | None, what: str) -> str:
        if not value:
            raise ProviderUninitialized(f"{self.display_name} {what} is required")
        return value

    def _resolve_model(self, settings: ProviderSettings) -> str:
        return self._require(settings.model or self.default_model, "model")

    def _validate_generation(
        self, temperature: float | None, max_tokens: int | None
    ) -> tuple[float, int]:
        if temperature is None:
            temperature = self.default_temperature
        low, high = self.temperature_range
        if not low <= temperature <= high:
            raise ProviderConfigInvalid(
                f"{self.display_name} temperature must be between {low:g} and {high:g}"
            )

        if max_tokens is None:
            max_tokens = self.default_max_tokens
        if max_tokens <= 0:
            raise ProviderConfigInvalid(
                f"{self.display_name} max_tokens must be greater than 0"
            )
        if max_tokens > MAX_TOKENS_WARNING_THRESHOLD:
            logger.warning(
                f"{self.display_name} max_tokens is set to {max_tokens}, above "
                f"{MAX_TOKENS_WARNING_THRESHOLD}, which may lead to unexpected behavior"
            )
        return temperature, max_tokens

    # --- Wire-format hooks ---

    @abstractmethod
    def _declare_tools(self, tools: Sequence[Tool]) -> Any:
        """Convert a non-empty tool snapshot into vendor declarations."""

    @abstractmethod
    def _build_messages(self, request: ChatRequest) -> list[Any]:
        """Convert the request into vendor-native messages."""

    @abstractmethod
    async def _complete(
        self,
        request: ChatRequest,
        messages: list[Any],
        declarations: Any,
        follow_up: bool = False,
    ) -> Completion:
        """Issue one vendor call.

        Args:
            request: The request being answered
            messages: Vendor-native messages
            declarations: Vendor tool declarations, or None to send no tools
            follow_up: True for the call that carries tool results

        Returns:
            The vendor reply normalized into a Completion
        """

    @abstractmethod
    def _follow_up_messages(
        self,
        messages: list[Any],
        completion: Completion,
        results: Sequence[ToolCallResult],
    ) -> list[Any]:
        """Append the assistant tool-call turn and the tool results."""

    def _follow_up_declarations(self, declarations: Any) -> Any:
        return None

    async def close(self) -> None:
        """Release vendor client resources."""

    # --- Shared algorithm ---

    async def converse(self, request: ChatRequest) -> ChatResponse:
        """Answer one user turn, running at most one round of tool calls.

        Args:
            request: System prompt and conversation history

        Returns:
            ChatResponse with the final answer

        Raises:
            UpstreamError: If a vendor call fails or returns no usable text
        """
        tools = list(self.tools.values())
        declarations = self._declare_tools(tools) if tools else None
        messages = self._build_messages(request)

        completion = await self._request(request, messages, declarations)

        if not completion.tool_calls:
            if not completion.text:
                raise EmptyUpstreamResponse(
                    f"No text content in response from {self.display_name}"
                )
            return ChatResponse(content=completion.text)

        logger.debug(
            f"{self.display_name} requested {len(completion.tool_calls)} tool call(s)"
        )
        results = await self.execute_tool_calls(completion.tool_calls)

        follow_up_messages = self._follow_up_messages(messages, completion, results)
        follow_up = await self._request(
            request,
            follow_up_messages,
            self._follow_up_declarations(declarations),
            follow_up=True,
        )

        if not follow_up.text:
            raise EmptyFollowUpResponse(
                f"No text content in follow-up response from {self.display_name}"
            )
        return ChatResponse(content=follow_up.text)

    async def _request(
        self,
        request: ChatRequest,
        messages: list[Any],
        declarations: Any,
        follow_up: bool = False,
    ) -> Completion:
        try:
            return await self._complete(
                request, messages, declarations, follow_up=follow_up
            )
        except AgentError:
            raise
        except Exception as e:
            logger.error(f"{self.display_name} API error: {e}")
            raise UpstreamError(
                f"Failed to get response from {self.display_name}: {e}"
            ) from e

    async def execute_tool_calls(
        self, calls: Sequence[ToolCallRequest]
    ) -> list[ToolCallResult]:
        """Run every call concurrently.

        A failing call yields a failure result and never cancels its
        siblings. Results keep the order of ``calls``.
        """
        return list(
            await asyncio.gather(*(self._execute_tool_call(call) for call in calls))
        )

    async def _execute_tool_call(self, call: ToolCallRequest) -> ToolCallResult:
        try:
            value = await self._run_tool(call)
        except ToolError as e:
            logger.warning(f"Tool {call.tool_name} failed: {e}")
            return ToolCallResult.failure(call.call_id, call.tool_name, str(e))
        return ToolCallResult.success(call.call_id, call.tool_name, value)

    async def _run_tool(self, call: ToolCallRequest) -> Any:
        tool = self.tools.get(call.tool_name)
        if tool is None:
            raise ToolNotFound(f"Tool not found: {call.tool_name}")

        arguments = tool.parse_arguments(call.raw_arguments)
        logger.info(
            f"Executing tool {tool.name} with args: "
            f"{arguments.model_dump_json(by_alias=True, exclude_unset=True)}"
        )

        try:
            value = await tool.execute(arguments)
        except ToolError:
            raise
        except Exception as e:
            raise ToolExecutionError(str(e) or type(e).__name__) from e

        return tool.validate_output(value)
