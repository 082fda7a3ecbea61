"""Configuration module for devops-agent using pydantic-settings."""

import os

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from devops_agent.prompts import SYSTEM_PROMPT

CONFIG_FILE_ENV = "DEVOPS_AGENT_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "config.yaml"


class ProviderSettings(BaseModel):
    """Settings shared by every LLM provider.

    Range checks on temperature and max_tokens are done by the provider
    adapters, since valid ranges differ per vendor.
    """

    enabled: bool = False
    api_key: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None


class GeminiSettings(ProviderSettings):
    pass


class OpenAISettings(ProviderSettings):
    base_url: str | None = None
    organization: str | None = None


class AzureOpenAISettings(ProviderSettings):
    endpoint: str | None = None
    deployment_name: str | None = None
    api_version: str = "2024-02-15-preview"


class AnthropicSettings(ProviderSettings):
    base_url: str | None = None


class OllamaSettings(ProviderSettings):
    host: str = "http://localhost:11434"


class ProvidersSettings(BaseModel):
    """Per-provider settings. A provider left as None is not configured."""

    gemini: GeminiSettings | None = None
    openai: OpenAISettings | None = None
    azure_openai: AzureOpenAISettings | None = None
    anthropic: AnthropicSettings | None = None
    ollama: OllamaSettings | None = None

    def configured(self) -> dict[str, ProviderSettings]:
        """Return configured providers keyed by provider name."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        }


class MCPServerSettings(BaseModel):
    """Launch configuration of one MCP tool server."""

    id: str
    name: str
    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    enabled: bool = True
    description: str | None = None


class AgentSettings(BaseSettings):
    """Main configuration settings for devops-agent.

    Settings are read, highest priority first, from constructor arguments,
    environment variables with the DEVOPS_AGENT_ prefix (nested fields use
    "__", e.g. DEVOPS_AGENT_PROVIDERS__GEMINI__API_KEY) and a YAML file
    (config.yaml in the working directory unless DEVOPS_AGENT_CONFIG_FILE
    points elsewhere).
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    # Conversation
    system_prompt: str = SYSTEM_PROMPT

    # Providers
    default_provider: str = "gemini"
    providers: ProvidersSettings = Field(default_factory=ProvidersSettings)

    # Remote tool servers
    mcp_servers: list[MCPServerSettings] = Field(default_factory=list)
    mcp_init_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="DEVOPS_AGENT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_file = os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
            file_secret_settings,
        )

    @property
    def enabled_mcp_servers(self) -> list[MCPServerSettings]:
        """Get the MCP servers that should be connected at startup."""
        return [server for server in self.mcp_servers if server.enabled]
