"""devops-agent: a tool-calling DevOps assistant.

This package routes natural-language requests to one of several LLM
providers and lets the model call local tools and tools exposed by MCP
servers. It is served as a FastAPI application.
"""

__version__ = "0.1.0"

from devops_agent.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
