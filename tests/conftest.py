"""Pytest configuration and shared fixtures"""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from piwik_mcp.client import PiwikClient
from piwik_mcp.config import Config, get_config
from piwik_mcp.query import QueryService

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove PIWIK_* environment variables for the duration of a test.

    Keeps Config tests independent from whatever is set in the user's shell.
    """
    import os

    for key in list(os.environ):
        if key.startswith("PIWIK_"):
            monkeypatch.delenv(key)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def config():
    """Config with credentials for a fake account"""
    return Config(
        account="test",
        client_id="test-client",
        client_secret="test-secret",
        log_level="DEBUG",
    )


@pytest.fixture
def mock_http_client():
    """Mock httpx AsyncClient"""
    return Mock(spec=httpx.AsyncClient)


@pytest.fixture
def mock_token_provider():
    """Token provider that always hands out the same token"""
    provider = Mock()
    provider.get_valid_token = AsyncMock(return_value="mock_token")
    return provider


@pytest.fixture
def client(config, mock_token_provider, mock_http_client):
    """PiwikClient with mocked token provider and HTTP client"""
    return PiwikClient(
        config=config,
        token_provider=mock_token_provider,
        http_client=mock_http_client,
    )


@pytest.fixture
def query_service(client):
    """QueryService over the mocked client"""
    return QueryService(client)


def json_response(status_code: int = 200, payload=None) -> httpx.Response:
    """Build a canned httpx response with a JSON body"""
    return httpx.Response(status_code, json=payload if payload is not None else {})
