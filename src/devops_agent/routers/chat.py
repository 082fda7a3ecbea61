"""Chat API endpoints.

This module provides the endpoint that sends a user message to the agent
and the endpoints that read and clear the conversation history.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from devops_agent.agent import Agent
from devops_agent.dependencies import get_agent
from devops_agent.errors import AgentError, AgentStateError, UpstreamError
from devops_agent.models.chat import (
    ChatRequest,
    ChatResponse,
    HistoryResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


def _agent_error(status_code: int, error: AgentError) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": error.code,
                "message": str(error),
                "details": {},
            }
        },
    )


@router.post("", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    agent: Agent = Depends(get_agent),
) -> ChatResponse:
    """Send a message to the agent and receive its answer.

    The agent may run one round of tool calls before answering.

    Args:
        request_body: Chat request containing the user message
        agent: Injected agent

    Returns:
        ChatResponse with the assistant's answer

    Raises:
        HTTPException: 503 if the agent is not ready, 502 if the provider fails
    """
    try:
        content = await agent.converse(request_body.message)
    except AgentStateError as e:
        raise _agent_error(503, e)
    except UpstreamError as e:
        logger.error(f"Provider error: {e}")
        raise _agent_error(502, e)
    except AgentError as e:
        logger.error(f"Chat failed: {e}")
        raise _agent_error(500, e)

    logger.info(f"Chat turn completed ({len(content)} chars)")
    return ChatResponse(content=content)


@router.get("/history", response_model=HistoryResponse)
async def get_history(agent: Agent = Depends(get_agent)) -> HistoryResponse:
    """Return the conversation history, oldest message first."""
    return HistoryResponse(
        messages=[MessageResponse.model_validate(message) for message in agent.history]
    )


@router.delete("/history", status_code=204)
async def clear_history(agent: Agent = Depends(get_agent)) -> Response:
    """Clear the conversation history."""
    agent.clear_history()
    logger.info("Conversation history cleared")
    return Response(status_code=204)
