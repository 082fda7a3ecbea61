"""Google Gemini provider adapter (google-generativeai SDK)."""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import google.generativeai as genai

from devops_agent.config import GeminiSettings
from devops_agent.llm.types import (
    ChatRequest,
    Completion,
    ToolCallRequest,
    ToolCallResult,
)
from devops_agent.prompts import GEMINI_ACKNOWLEDGMENT
from devops_agent.providers.base import BaseProvider
from devops_agent.tools.base import Tool
from devops_agent.tools.schema import SchemaType, ToolProperty

logger = logging.getLogger(__name__)

JSON_OBJECT_HINT = "JSON-encoded object"


def _property_schema(prop: ToolProperty) -> dict[str, Any]:
    # Gemini has no "any" type
    schema_type = prop.type or SchemaType.STRING
    if schema_type is SchemaType.OBJECT:
        # Gemini rejects OBJECT schemas without properties, so free-form
        # objects travel as JSON strings and are decoded in _decode_objects
        description = (
            f"{prop.description} ({JSON_OBJECT_HINT})"
            if prop.description
            else JSON_OBJECT_HINT
        )
        return {"type": "STRING", "description": description}
    schema: dict[str, Any] = {"type": schema_type.value.upper()}
    if prop.description:
        schema["description"] = prop.description
    if prop.enum and schema_type is SchemaType.STRING:
        schema["enum"] = [str(value) for value in prop.enum]
    if schema_type is SchemaType.ARRAY:
        schema["items"] = _property_schema(prop.items or ToolProperty(type=None))
    return schema


def _function_declaration(tool: Tool) -> dict[str, Any]:
    declaration: dict[str, Any] = {
        "name": tool.name,
        "description": tool.description,
    }
    parameters = tool.parameters
    # Gemini rejects OBJECT schemas without properties
    if parameters.properties:
        declaration["parameters"] = {
            "type": "OBJECT",
            "properties": {
                name: _property_schema(prop)
                for name, prop in parameters.properties.items()
            },
            "required": list(parameters.required),
        }
    return declaration


def _to_plain(value: Any) -> Any:
    """Convert proto map/repeated composites into dicts and lists."""
    if isinstance(value, Mapping):
        return {str(key): _to_plain(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [_to_plain(item) for item in value]
    return value


def _loads_object(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        # Left as a string so argument validation reports it
        return value


def _decode_objects(tool: Tool, arguments: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON strings sent for OBJECT parameters."""
    decoded = dict(arguments)
    for name, prop in tool.parameters.properties.items():
        if name not in decoded:
            continue
        if prop.type is SchemaType.OBJECT:
            decoded[name] = _loads_object(decoded[name])
        elif (
            prop.type is SchemaType.ARRAY
            and prop.items is not None
            and prop.items.type is SchemaType.OBJECT
            and isinstance(decoded[name], list)
        ):
            decoded[name] = [_loads_object(item) for item in decoded[name]]
    return decoded


class GeminiProvider(BaseProvider):
    """Adapter for Google's Gemini models.

    Gemini has no system role. The system prompt is sent as the first user
    turn followed by a fixed model acknowledgment, and system messages in
    the history are dropped. Function calls carry no identifier, so call ids
    are synthesized as ``<name>:<index>``.
    """

    name = "gemini"
    display_name = "Gemini"
    temperature_range = (0.0, 1.0)
    default_temperature = 0.2
    default_max_tokens = 1024
    default_model = "gemini-1.5-pro"

    def __init__(self, settings: GeminiSettings, tools: Sequence[Tool]) -> None:
        super().__init__(settings, tools)
        api_key = self._require(settings.api_key, "API key")
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(
            model_name=self.model,
            generation_config=genai.GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
            ),
        )
        logger.info(f"Gemini provider initialized with model: {self.model}")

    def _declare_tools(self, tools: Sequence[Tool]) -> list[dict[str, Any]]:
        return [
            {"function_declarations": [_function_declaration(tool) for tool in tools]}
        ]

    def _build_messages(self, request: ChatRequest) -> list[Any]:
        contents: list[Any] = [
            {"role": "user", "parts": [{"text": request.system_prompt}]},
            {"role": "model", "parts": [{"text": GEMINI_ACKNOWLEDGMENT}]},
        ]
        for message in request.messages:
            if message.role == "system":
                continue
            role = "model" if message.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": message.content}]})
        return contents

    async def _complete(
        self,
        request: ChatRequest,
        messages: list[Any],
        declarations: list[dict[str, Any]] | None,
        follow_up: bool = False,
    ) -> Completion:
        kwargs: dict[str, Any] = {}
        if declarations:
            kwargs["tools"] = declarations

        response = await self._model.generate_content_async(messages, **kwargs)

        candidates = list(response.candidates or [])
        if not candidates:
            return Completion()

        content = candidates[0].content
        text_parts: list[str] = []
        tool_calls: list[ToolCallRequest] = []
        for part in content.parts:
            function_call = getattr(part, "function_call", None)
            if function_call is not None and function_call.name:
                arguments = _to_plain(function_call.args or {})
                tool = self.tools.get(function_call.name)
                if tool is not None and isinstance(arguments, dict):
                    arguments = _decode_objects(tool, arguments)
                tool_calls.append(
                    ToolCallRequest(
                        call_id=f"{function_call.name}:{len(tool_calls)}",
                        tool_name=function_call.name,
                        raw_arguments=arguments,
                    )
                )
            elif getattr(part, "text", None):
                text_parts.append(part.text)

        return Completion(
            text="".join(text_parts),
            tool_calls=tool_calls,
            assistant_turn=content,
        )

    def _follow_up_messages(
        self,
        messages: list[Any],
        completion: Completion,
        results: Sequence[ToolCallResult],
    ) -> list[Any]:
        parts = [
            {
                "function_response": {
                    "name": result.tool_name,
                    "response": (
                        {"result": result.value}
                        if result.ok
                        else {"error": result.error}
                    ),
                }
            }
            for result in results
        ]
        return [*messages, completion.assistant_turn, {"role": "user", "parts": parts}]
