"""Ollama client wrapper.

This package provides the async client used by the Ollama provider adapter.
"""

from devops_agent.ollama.client import OllamaClient

__all__ = ["OllamaClient"]
