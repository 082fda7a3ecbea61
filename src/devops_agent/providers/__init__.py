"""LLM provider adapters and the provider catalogue.

Usage:
    provider = create_provider("gemini", settings.providers.gemini, registry.list())
    response = await provider.converse(request)
"""

from collections.abc import Sequence

from devops_agent.config import ProviderSettings
from devops_agent.errors import ProviderUninitialized
from devops_agent.providers.anthropic import AnthropicProvider
from devops_agent.providers.base import BaseProvider
from devops_agent.providers.gemini import GeminiProvider
from devops_agent.providers.ollama import OllamaProvider
from devops_agent.providers.openai import AzureOpenAIProvider, OpenAIProvider
from devops_agent.tools.base import Tool

PROVIDERS: dict[str, type[BaseProvider]] = {
    GeminiProvider.name: GeminiProvider,
    OpenAIProvider.name: OpenAIProvider,
    AzureOpenAIProvider.name: AzureOpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
    OllamaProvider.name: OllamaProvider,
}

# Order used when the default provider is not enabled
FALLBACK_ORDER: tuple[str, ...] = tuple(PROVIDERS)

DISPLAY_NAMES: dict[str, str] = {
    name: provider.display_name for name, provider in PROVIDERS.items()
}


def create_provider(
    name: str, settings: ProviderSettings | None, tools: Sequence[Tool]
) -> BaseProvider:
    """Build the adapter for a configured provider.

    Raises:
        ProviderUninitialized: If the provider is unknown or not configured
        ProviderConfigInvalid: If its settings are out of range
    """
    provider_class = PROVIDERS.get(name)
    if provider_class is None:
        raise ProviderUninitialized(f"Unknown provider: {name}")
    if settings is None:
        raise ProviderUninitialized(f"Provider {name} is not configured")
    return provider_class(settings, tools)


__all__ = [
    "AnthropicProvider",
    "AzureOpenAIProvider",
    "BaseProvider",
    "DISPLAY_NAMES",
    "FALLBACK_ORDER",
    "GeminiProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "create_provider",
]
