"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is created once per provider
adapter and reused for every turn.
"""

import logging
from typing import Any

import ollama

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for interacting with Ollama API.

    This client wraps ollama.AsyncClient and exposes the calls the agent
    needs: a single non-streaming chat completion with optional tool
    declarations, and closing the connection.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Request one complete chat response from Ollama.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format:
                      [{"role": "user", "content": "..."}, ...]
            tools: Tool declarations in Ollama's function format, if any
            options: Optional model parameters (temperature, num_predict, etc.)

        Returns:
            dict: The response as a dict. ``message`` holds ``role``,
                  ``content`` and, when the model requested tools,
                  ``tool_calls``.

        Raises:
            Exception: If the Ollama API request fails
        """
        try:
            logger.debug(
                f"Starting chat with model: {model} "
                f"({len(messages)} messages, {len(tools or [])} tools)"
            )

            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=False,
                options=options,
            )

            if hasattr(response, "model_dump"):
                response_dict = response.model_dump()
            elif isinstance(response, dict):
                response_dict = response
            else:
                response_dict = vars(response)

            logger.debug(f"Chat completed: done={response_dict.get('done')}")
            return response_dict

        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient holds an httpx client which is closed here when
        the installed ollama version exposes it.
        """
        http_client = getattr(self._client, "_client", None)
        if http_client is not None and hasattr(http_client, "aclose"):
            await http_client.aclose()
        logger.debug("OllamaClient closed")
