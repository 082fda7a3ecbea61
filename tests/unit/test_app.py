"""Unit tests for the FastAPI app factory and lifespan."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from devops_agent import __version__, create_app
from devops_agent.agent import AgentState


@pytest.fixture(autouse=True)
def mock_genai():
    with patch("devops_agent.providers.gemini.genai") as mock_module:
        mock_module.GenerativeModel.return_value.generate_content_async = AsyncMock()
        yield mock_module


def test_create_app_with_settings(test_settings):
    """Test that create_app accepts custom settings."""
    app = create_app(settings=test_settings)
    assert isinstance(app, FastAPI)
    assert app.state.settings is test_settings


def test_create_app_metadata(test_settings):
    """Test that app has correct metadata."""
    app = create_app(settings=test_settings)
    assert app.title == "devops-agent"
    assert app.version == __version__


def test_create_app_includes_routers(test_settings):
    """Test that every API router is registered."""
    app = create_app(settings=test_settings)

    routes = {route.path for route in app.routes}  # type: ignore[attr-defined]
    assert {
        "/api/v1/health",
        "/api/v1/chat",
        "/api/v1/chat/history",
        "/api/v1/tools",
        "/api/v1/providers",
        "/api/v1/mcp/servers",
        "/api/v1/mcp/resources",
        "/api/v1/mcp/prompts",
    } <= routes


def test_create_app_has_cors_middleware(test_settings):
    """Test that CORS middleware is configured."""
    app = create_app(settings=test_settings)

    middleware_classes = [m.cls.__name__ for m in app.user_middleware]  # type: ignore[attr-defined]
    assert "CORSMiddleware" in middleware_classes


def test_version_constant():
    """Test that __version__ is defined."""
    assert __version__ == "0.1.0"


@pytest.mark.asyncio
async def test_lifespan_initializes_and_disposes_agent(test_app):
    """Test that the agent is ready while the app runs and disposed after."""
    async with test_app.router.lifespan_context(test_app):
        agent = test_app.state.agent
        assert agent.state is AgentState.READY
        assert agent.active_provider == "gemini"

    assert agent.state is AgentState.DISPOSED


@pytest.mark.asyncio
async def test_health_reports_provider(async_client):
    """Test the health endpoint against a fully started app."""
    response = await async_client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "version": __version__,
        "provider": "gemini",
        "initialized": True,
    }
