"""Unit tests for the vendor provider adapters with mocked SDK clients."""

import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import BaseModel

from devops_agent.config import (
    AnthropicSettings,
    AzureOpenAISettings,
    GeminiSettings,
    OllamaSettings,
    OpenAISettings,
)
from devops_agent.errors import (
    ProviderConfigInvalid,
    ProviderUninitialized,
    UpstreamError,
)
from devops_agent.llm import ChatRequest, Message
from devops_agent.prompts import GEMINI_ACKNOWLEDGMENT
from devops_agent.providers import (
    AnthropicProvider,
    AzureOpenAIProvider,
    GeminiProvider,
    OllamaProvider,
    OpenAIProvider,
    create_provider,
)
from devops_agent.tools import Tool, local_tools, management_tools


class EchoInput(BaseModel):
    message: str


class EchoTool(Tool):
    name = "echo"
    description = "Echo the message back"
    input_model = EchoInput
    output_type = str

    async def execute(self, arguments: EchoInput) -> str:
        return f"echo: {arguments.message}"


class LabelsInput(BaseModel):
    selectors: list[dict[str, str]]
    annotations: dict[str, Any] | None = None


class LabelsTool(Tool):
    name = "label"
    description = "Apply labels"
    input_model = LabelsInput

    async def execute(self, arguments: LabelsInput) -> dict[str, Any]:
        return {"selectors": arguments.selectors, "annotations": arguments.annotations}


class BrokenTool(Tool):
    name = "broken"
    description = "Always fails"

    async def execute(self, arguments):
        raise RuntimeError("kaput")


REQUEST = ChatRequest(
    system_prompt="You are a test assistant.",
    messages=(
        Message(role="system", content="inline system note"),
        Message(role="user", content="first question"),
        Message(role="assistant", content="first answer"),
        Message(role="user", content="say hi"),
    ),
)


# --- OpenAI ---


def openai_response(content=None, tool_calls=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def openai_tool_call(call_id, name, arguments):
    return SimpleNamespace(
        id=call_id, function=SimpleNamespace(name=name, arguments=arguments)
    )


@pytest.fixture
def mock_openai():
    """Mock openai.AsyncOpenAI."""
    with patch("devops_agent.providers.openai.openai.AsyncOpenAI") as mock_class:
        mock_instance = MagicMock()
        mock_instance.chat.completions.create = AsyncMock()
        mock_instance.close = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_class


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    def test_requires_api_key(self, mock_openai):
        with pytest.raises(ProviderUninitialized, match="API key"):
            OpenAIProvider(OpenAISettings(enabled=True, model="gpt-4o"), [])

    def test_requires_model(self, mock_openai):
        with pytest.raises(ProviderUninitialized, match="model"):
            OpenAIProvider(OpenAISettings(enabled=True, api_key="k"), [])

    def test_client_configuration(self, mock_openai):
        settings = OpenAISettings(
            enabled=True,
            api_key="k",
            model="gpt-4o",
            base_url="http://proxy/v1",
            organization="org-1",
        )

        OpenAIProvider(settings, [])

        mock_openai.assert_called_once_with(
            api_key="k", base_url="http://proxy/v1", organization="org-1"
        )

    @pytest.mark.asyncio
    async def test_text_reply(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.return_value = openai_response(content="hello")
        provider = OpenAIProvider(
            OpenAISettings(enabled=True, api_key="k", model="gpt-4o"), []
        )

        response = await provider.converse(REQUEST)

        assert response.content == "hello"
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 4096
        assert "tools" not in kwargs
        assert "tool_choice" not in kwargs
        assert kwargs["messages"][0] == {
            "role": "system",
            "content": "You are a test assistant.",
        }
        assert kwargs["messages"][-1] == {"role": "user", "content": "say hi"}

    @pytest.mark.asyncio
    async def test_tool_round(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = [
            openai_response(
                tool_calls=[
                    openai_tool_call("call_1", "echo", '{"message": "hi"}'),
                    openai_tool_call("call_2", "broken", "{}"),
                ]
            ),
            openai_response(content="done"),
        ]
        provider = OpenAIProvider(
            OpenAISettings(enabled=True, api_key="k", model="gpt-4o"),
            [EchoTool(), BrokenTool()],
        )

        response = await provider.converse(REQUEST)

        assert response.content == "done"
        first, second = create.call_args_list
        assert first.kwargs["tool_choice"] == "auto"
        assert first.kwargs["tools"][0] == {
            "type": "function",
            "function": {
                "name": "echo",
                "description": "Echo the message back",
                "parameters": {
                    "type": "object",
                    "properties": {"message": {"type": "string"}},
                    "required": ["message"],
                },
            },
        }
        assert "tools" not in second.kwargs

        assistant, echo_result, broken_result = second.kwargs["messages"][-3:]
        assert assistant["role"] == "assistant"
        assert [call["id"] for call in assistant["tool_calls"]] == ["call_1", "call_2"]
        assert echo_result == {
            "role": "tool",
            "tool_call_id": "call_1",
            "content": json.dumps("echo: hi"),
        }
        assert broken_result["tool_call_id"] == "call_2"
        assert json.loads(broken_result["content"]) == {"error": "kaput"}

    @pytest.mark.asyncio
    async def test_sdk_error(self, mock_openai):
        create = mock_openai.return_value.chat.completions.create
        create.side_effect = RuntimeError("rate limited")
        provider = OpenAIProvider(
            OpenAISettings(enabled=True, api_key="k", model="gpt-4o"), []
        )

        with pytest.raises(UpstreamError, match="Failed to get response from OpenAI"):
            await provider.converse(REQUEST)


class TestAzureOpenAIProvider:
    """Tests for AzureOpenAIProvider."""

    @pytest.fixture
    def mock_azure(self):
        with patch(
            "devops_agent.providers.openai.openai.AsyncAzureOpenAI"
        ) as mock_class:
            mock_instance = MagicMock()
            mock_instance.chat.completions.create = AsyncMock(
                return_value=openai_response(content="from azure")
            )
            mock_class.return_value = mock_instance
            yield mock_class

    def test_requires_endpoint(self, mock_azure):
        settings = AzureOpenAISettings(
            enabled=True, api_key="k", deployment_name="gpt4-deploy"
        )

        with pytest.raises(ProviderUninitialized, match="endpoint"):
            AzureOpenAIProvider(settings, [])

    def test_requires_deployment(self, mock_azure):
        settings = AzureOpenAISettings(
            enabled=True, api_key="k", endpoint="https://example.openai.azure.com"
        )

        with pytest.raises(ProviderUninitialized, match="deployment name"):
            AzureOpenAIProvider(settings, [])

    @pytest.mark.asyncio
    async def test_deployment_is_the_model(self, mock_azure):
        settings = AzureOpenAISettings(
            enabled=True,
            api_key="k",
            endpoint="https://example.openai.azure.com",
            deployment_name="gpt4-deploy",
        )

        provider = AzureOpenAIProvider(settings, [])
        response = await provider.converse(REQUEST)

        assert response.content == "from azure"
        mock_azure.assert_called_once_with(
            api_key="k",
            azure_endpoint="https://example.openai.azure.com",
            api_version="2024-02-15-preview",
        )
        create = mock_azure.return_value.chat.completions.create
        assert create.call_args.kwargs["model"] == "gpt4-deploy"


# --- Anthropic ---


@pytest.fixture
def mock_anthropic():
    """Mock anthropic.AsyncAnthropic."""
    with patch(
        "devops_agent.providers.anthropic.anthropic.AsyncAnthropic"
    ) as mock_class:
        mock_instance = MagicMock()
        mock_instance.messages.create = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_class


def anthropic_response(*blocks):
    return SimpleNamespace(content=list(blocks))


def text_block(text):
    return SimpleNamespace(type="text", text=text)


def tool_use_block(block_id, name, arguments):
    return SimpleNamespace(type="tool_use", id=block_id, name=name, input=arguments)


class TestAnthropicProvider:
    """Tests for AnthropicProvider."""

    def test_temperature_range(self, mock_anthropic):
        settings = AnthropicSettings(
            enabled=True, api_key="k", model="claude", temperature=1.5
        )

        with pytest.raises(ProviderConfigInvalid):
            AnthropicProvider(settings, [])

    @pytest.mark.asyncio
    async def test_system_prompt_is_a_parameter(self, mock_anthropic):
        create = mock_anthropic.return_value.messages.create
        create.return_value = anthropic_response(text_block("hi"), text_block("!"))
        provider = AnthropicProvider(
            AnthropicSettings(enabled=True, api_key="k", model="claude"), []
        )

        response = await provider.converse(REQUEST)

        assert response.content == "hi!"
        kwargs = create.call_args.kwargs
        assert kwargs["system"] == "You are a test assistant."
        assert all(message["role"] != "system" for message in kwargs["messages"])
        assert len(kwargs["messages"]) == 3
        assert "tools" not in kwargs

    @pytest.mark.asyncio
    async def test_tool_round(self, mock_anthropic):
        create = mock_anthropic.return_value.messages.create
        create.side_effect = [
            anthropic_response(
                text_block("Let me check."),
                tool_use_block("toolu_1", "echo", {"message": "hi"}),
                tool_use_block("toolu_2", "broken", {}),
            ),
            anthropic_response(text_block("All done")),
        ]
        provider = AnthropicProvider(
            AnthropicSettings(enabled=True, api_key="k", model="claude"),
            [EchoTool(), BrokenTool()],
        )

        response = await provider.converse(REQUEST)

        assert response.content == "All done"
        first, second = create.call_args_list
        assert first.kwargs["tools"][0]["input_schema"]["required"] == ["message"]
        assert "tool_choice" not in first.kwargs
        # The follow-up resends the tools but forbids further calls
        assert second.kwargs["tools"] == first.kwargs["tools"]
        assert second.kwargs["tool_choice"] == {"type": "none"}

        assistant, user = second.kwargs["messages"][-2:]
        assert assistant["role"] == "assistant"
        assert assistant["content"][0] == {"type": "text", "text": "Let me check."}
        assert assistant["content"][1]["type"] == "tool_use"
        assert assistant["content"][1]["id"] == "toolu_1"
        assert user["role"] == "user"
        ok_block, error_block = user["content"]
        assert ok_block == {
            "type": "tool_result",
            "tool_use_id": "toolu_1",
            "content": json.dumps("echo: hi"),
        }
        assert error_block["tool_use_id"] == "toolu_2"
        assert error_block["is_error"] is True


# --- Gemini ---


@pytest.fixture
def mock_genai():
    """Mock the google.generativeai module used by the Gemini adapter."""
    with patch("devops_agent.providers.gemini.genai") as mock_module:
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock()
        mock_module.GenerativeModel.return_value = mock_model
        yield mock_module


def gemini_response(*parts):
    content = SimpleNamespace(role="model", parts=list(parts))
    return SimpleNamespace(candidates=[SimpleNamespace(content=content)])


def gemini_text(text):
    return SimpleNamespace(function_call=None, text=text)


def gemini_call(name, args):
    return SimpleNamespace(function_call=SimpleNamespace(name=name, args=args), text="")


class TestGeminiProvider:
    """Tests for GeminiProvider."""

    def test_defaults(self, mock_genai):
        provider = GeminiProvider(GeminiSettings(enabled=True, api_key="k"), [])

        assert provider.model == "gemini-1.5-pro"
        assert provider.temperature == 0.2
        assert provider.max_tokens == 1024
        mock_genai.configure.assert_called_once_with(api_key="k")
        mock_genai.GenerationConfig.assert_called_once_with(
            temperature=0.2, max_output_tokens=1024
        )

    def test_requires_api_key(self, mock_genai):
        with pytest.raises(ProviderUninitialized, match="API key"):
            GeminiProvider(GeminiSettings(enabled=True), [])

    @pytest.mark.asyncio
    async def test_simulated_system_turn(self, mock_genai):
        generate = mock_genai.GenerativeModel.return_value.generate_content_async
        generate.return_value = gemini_response(gemini_text("hello"))
        provider = GeminiProvider(GeminiSettings(enabled=True, api_key="k"), [])

        response = await provider.converse(REQUEST)

        assert response.content == "hello"
        contents = generate.call_args.args[0]
        assert contents[0] == {
            "role": "user",
            "parts": [{"text": "You are a test assistant."}],
        }
        assert contents[1] == {"role": "model", "parts": [{"text": GEMINI_ACKNOWLEDGMENT}]}
        assert [item["role"] for item in contents[2:]] == ["user", "model", "user"]
        assert "tools" not in generate.call_args.kwargs

    @pytest.mark.asyncio
    async def test_tool_round(self, mock_genai):
        generate = mock_genai.GenerativeModel.return_value.generate_content_async
        call_turn = gemini_response(
            gemini_call("echo", {"message": "hi"}),
            gemini_call("broken", {}),
        )
        generate.side_effect = [call_turn, gemini_response(gemini_text("finished"))]
        provider = GeminiProvider(
            GeminiSettings(enabled=True, api_key="k"), [EchoTool(), BrokenTool()]
        )

        response = await provider.converse(REQUEST)

        assert response.content == "finished"
        first, second = generate.call_args_list
        (declarations,) = first.kwargs["tools"]
        echo, broken = declarations["function_declarations"]
        assert echo["parameters"] == {
            "type": "OBJECT",
            "properties": {"message": {"type": "STRING"}},
            "required": ["message"],
        }
        assert "parameters" not in broken
        assert "tools" not in second.kwargs

        contents = second.args[0]
        assert contents[-2] is call_turn.candidates[0].content
        assert contents[-1] == {
            "role": "user",
            "parts": [
                {"function_response": {"name": "echo", "response": {"result": "echo: hi"}}},
                {"function_response": {"name": "broken", "response": {"error": "kaput"}}},
            ],
        }

    @pytest.mark.asyncio
    async def test_no_candidates(self, mock_genai):
        generate = mock_genai.GenerativeModel.return_value.generate_content_async
        generate.return_value = SimpleNamespace(candidates=[])
        provider = GeminiProvider(GeminiSettings(enabled=True, api_key="k"), [])

        with pytest.raises(UpstreamError, match="No text content"):
            await provider.converse(REQUEST)


def object_schemas(schema):
    """Yield every OBJECT schema nested in a Gemini declaration schema."""
    if not isinstance(schema, dict):
        return
    if schema.get("type") == "OBJECT":
        yield schema
    for child in (schema.get("properties") or {}).values():
        yield from object_schemas(child)
    yield from object_schemas(schema.get("items"))


class TestGeminiObjectParameters:
    """Free-form object parameters are sent to Gemini as JSON strings."""

    def test_every_object_schema_has_properties(self, mock_genai):
        tools = [*local_tools(MagicMock()), LabelsTool()]
        provider = GeminiProvider(GeminiSettings(enabled=True, api_key="k"), tools)

        (declarations,) = provider._declare_tools(tools)

        for declaration in declarations["function_declarations"]:
            for schema in object_schemas(declaration.get("parameters")):
                assert schema.get("properties"), declaration["name"]

        by_name = {d["name"]: d for d in declarations["function_declarations"]}
        get_prompt = by_name["mcp_get_prompt"]["parameters"]["properties"]
        assert get_prompt["arguments"] == {
            "type": "STRING",
            "description": "Values for the prompt's arguments (JSON-encoded object)",
        }
        labels = by_name["label"]["parameters"]["properties"]
        assert labels["selectors"]["items"] == {
            "type": "STRING",
            "description": "JSON-encoded object",
        }

    @pytest.mark.asyncio
    async def test_json_encoded_arguments_are_decoded(self, mock_genai):
        manager = MagicMock()
        manager.get_prompt = AsyncMock(return_value=[])
        generate = mock_genai.GenerativeModel.return_value.generate_content_async
        generate.side_effect = [
            gemini_response(
                gemini_call(
                    "mcp_get_prompt",
                    {"server_id": "docs", "name": "triage", "arguments": '{"service": "api"}'},
                ),
                gemini_call(
                    "label",
                    {"selectors": ['{"app": "web"}'], "annotations": '{"owner": "ops"}'},
                ),
            ),
            gemini_response(gemini_text("done")),
        ]
        provider = GeminiProvider(
            GeminiSettings(enabled=True, api_key="k"),
            [*management_tools(manager), LabelsTool()],
        )

        await provider.converse(REQUEST)

        manager.get_prompt.assert_awaited_once_with("docs", "triage", {"service": "api"})
        parts = generate.call_args_list[1].args[0][-1]["parts"]
        assert parts[1]["function_response"]["response"] == {
            "result": {"selectors": [{"app": "web"}], "annotations": {"owner": "ops"}}
        }

    @pytest.mark.asyncio
    async def test_malformed_json_is_reported_to_the_model(self, mock_genai):
        generate = mock_genai.GenerativeModel.return_value.generate_content_async
        generate.side_effect = [
            gemini_response(gemini_call("label", {"selectors": ["{not json"]})),
            gemini_response(gemini_text("sorry")),
        ]
        provider = GeminiProvider(GeminiSettings(enabled=True, api_key="k"), [LabelsTool()])

        await provider.converse(REQUEST)

        parts = generate.call_args_list[1].args[0][-1]["parts"]
        error = parts[0]["function_response"]["response"]["error"]
        assert "Invalid arguments for label" in error


# --- Ollama ---


@pytest.fixture
def mock_ollama_client():
    """Mock the OllamaClient used by the Ollama adapter."""
    with patch("devops_agent.providers.ollama.OllamaClient") as mock_class:
        mock_instance = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_instance


class TestOllamaProvider:
    """Tests for OllamaProvider."""

    def test_requires_model(self, mock_ollama_client):
        with pytest.raises(ProviderUninitialized, match="model"):
            OllamaProvider(OllamaSettings(enabled=True), [])

    @pytest.mark.asyncio
    async def test_tool_round(self, mock_ollama_client):
        mock_ollama_client.chat.side_effect = [
            {
                "message": {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [
                        {"function": {"name": "echo", "arguments": {"message": "hi"}}}
                    ],
                }
            },
            {"message": {"role": "assistant", "content": "echoed"}},
        ]
        provider = OllamaProvider(
            OllamaSettings(enabled=True, model="llama3.2", temperature=0.1),
            [EchoTool()],
        )

        response = await provider.converse(REQUEST)

        assert response.content == "echoed"
        first, second = mock_ollama_client.chat.call_args_list
        assert first.kwargs["model"] == "llama3.2"
        assert first.kwargs["options"] == {"temperature": 0.1, "num_predict": 4096}
        assert first.kwargs["tools"][0]["function"]["name"] == "echo"
        assert second.kwargs["tools"] is None
        assert second.kwargs["messages"][-1] == {
            "role": "tool",
            "content": json.dumps("echo: hi"),
            "tool_name": "echo",
        }


# --- Catalogue ---


class TestCreateProvider:
    """Tests for the provider factory."""

    def test_unknown_provider(self):
        with pytest.raises(ProviderUninitialized, match="Unknown provider"):
            create_provider("watson", None, [])

    def test_unconfigured_provider(self):
        with pytest.raises(ProviderUninitialized, match="not configured"):
            create_provider("openai", None, [])

    def test_builds_adapter(self, mock_genai):
        provider = create_provider(
            "gemini", GeminiSettings(enabled=True, api_key="k"), [EchoTool()]
        )

        assert isinstance(provider, GeminiProvider)
        assert list(provider.tools) == ["echo"]
