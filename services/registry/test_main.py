"""Unit tests for the Service Registry application."""

from datetime import datetime
from unittest.mock import Mock, PropertyMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import services.registry.main as registry_main
from services.notion_sync.client import NotionClientProvider


@pytest_asyncio.fixture
async def client():
    """Create an async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=registry_main.app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "AXT-MCP"
    assert body["version"] == "1.0.0"
    datetime.fromisoformat(body["timestamp"])


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "message": "AXT-MCP Service Registry",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "registry": "/registry",
            "connectors": "/connectors"
        }
    }


@pytest.mark.asyncio
async def test_registry_placeholder(client):
    response = await client.get("/registry")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Registry endpoint",
        "services": [],
        "models": []
    }


@pytest.mark.asyncio
async def test_connectors_before_client_built(client, monkeypatch):
    monkeypatch.setattr(registry_main, "notion_provider", NotionClientProvider(api_key="test_token"))

    response = await client.get("/connectors")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Connectors endpoint",
        "available": ["notion_sync"],
        "loaded": []
    }


@pytest.mark.asyncio
async def test_connectors_after_client_built(client, monkeypatch):
    provider = NotionClientProvider(api_key="test_token")
    provider._client = Mock()
    monkeypatch.setattr(registry_main, "notion_provider", provider)

    response = await client.get("/connectors")

    assert response.json()["loaded"] == ["notion_sync"]


@pytest.mark.asyncio
async def test_unknown_route(client):
    response = await client.post("/missing")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Not found",
        "message": "Route POST /missing not found"
    }


@pytest.mark.asyncio
async def test_cors_preflight(client):
    response = await client.options(
        "/registry",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "GET",
        }
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_lifespan_builds_connector_lazily(monkeypatch):
    """Test that startup wires the connector without building a Notion client."""
    monkeypatch.setattr(registry_main, "notion_provider", None)
    monkeypatch.setattr(registry_main, "notion_connector", None)

    async with registry_main.lifespan(registry_main.app):
        assert registry_main.notion_connector is not None
        assert registry_main.notion_connector.provider is registry_main.notion_provider
        assert registry_main.notion_provider.initialized is False


@pytest.mark.asyncio
async def test_wrong_method_on_known_route(client):
    """Test that a known path with an unsupported method renders as not found."""
    response = await client.post("/health")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Not found",
        "message": "Route POST /health not found"
    }


@pytest.mark.asyncio
async def test_bare_options_acknowledged(client):
    """Test that OPTIONS without preflight headers still returns 200."""
    response = await client.options("/health")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_bare_options_on_unknown_route(client):
    response = await client.options("/missing")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unhandled_exception_renders_500(client, monkeypatch):
    provider = Mock()
    type(provider).initialized = PropertyMock(side_effect=RuntimeError("kaboom"))
    monkeypatch.setattr(registry_main, "notion_provider", provider)

    response = await client.get("/connectors")

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal server error",
        "message": "kaboom"
    }
