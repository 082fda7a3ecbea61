"""Exception hierarchy for devops-agent.

Every error raised by the orchestration core derives from AgentError so that
callers (the HTTP layer, the CLI) can handle the whole family in one place.
The subclasses follow four categories:

- Configuration errors: fatal at initialization, never retried.
- Upstream errors: a vendor call or remote server call failed.
- Tool errors: scoped to a single tool call and reported back to the model.
- State errors: the agent was used outside its READY state.
"""


class AgentError(Exception):
    """Base class for all devops-agent errors."""

    code: str = "agent_error"


# --- Configuration ---


class ConfigurationError(AgentError):
    """Invalid or incomplete configuration."""

    code = "configuration_error"


class ProviderUninitialized(ConfigurationError):
    """Required provider credentials or identifiers are missing."""

    code = "provider_uninitialized"


class ProviderConfigInvalid(ConfigurationError):
    """Provider parameters (temperature, max tokens) are out of range."""

    code = "provider_config_invalid"


class NoEnabledProvider(ConfigurationError):
    """No provider is enabled in the configuration."""

    code = "no_enabled_provider"


# --- Upstream ---


class UpstreamError(AgentError):
    """A vendor completion call failed."""

    code = "upstream_error"


class EmptyUpstreamResponse(UpstreamError):
    """The vendor returned neither text nor tool calls."""

    code = "empty_upstream_response"


class EmptyFollowUpResponse(UpstreamError):
    """The follow-up call after tool execution returned no text."""

    code = "empty_follow_up_response"


# --- Tools ---


class ToolError(AgentError):
    """A single tool call failed."""

    code = "tool_error"


class DuplicateToolName(ToolError):
    """A tool with the same name is already registered."""

    code = "duplicate_tool_name"


class ToolNotFound(ToolError):
    """The model requested a tool that is not registered."""

    code = "tool_not_found"


class ToolArgumentInvalid(ToolError):
    """Tool call arguments do not satisfy the tool's input contract."""

    code = "tool_argument_invalid"


class ToolOutputInvalid(ToolError):
    """A tool returned a value that does not satisfy its output contract."""

    code = "tool_output_invalid"


class ToolExecutionError(ToolError):
    """The tool executor raised while running."""

    code = "tool_execution_error"


# --- Remote tool servers ---


class MCPError(AgentError):
    """Base class for remote tool server errors."""

    code = "mcp_error"


class ServerNotConnected(MCPError):
    """The target MCP server is absent or not connected."""

    code = "server_not_connected"


class UpstreamToolError(MCPError):
    """A remote tool server call failed."""

    code = "upstream_tool_error"


# --- Agent state ---


class AgentStateError(AgentError):
    """The agent is not in a state that allows the operation."""

    code = "agent_state_error"


class NotInitialized(AgentStateError):
    """converse() was called before initialize()."""

    code = "not_initialized"


class AgentDisposed(AgentStateError):
    """The agent was disposed and cannot be used any more."""

    code = "agent_disposed"
