"""Tests for PiwikClient request dispatch"""

from unittest.mock import AsyncMock

import httpx
import pytest

from piwik_mcp.client import PiwikClient
from piwik_mcp.consts import USER_AGENT
from piwik_mcp.exceptions import ApiError, AuthenticationError

from .conftest import json_response


class TestPiwikClient:
    """Test PiwikClient HTTP operations

    This class is the authoritative source for HTTP error handling tests.
    """

    @pytest.mark.asyncio
    async def test_get_json_success(self, client, mock_http_client):
        """Test successful get_json request"""
        mock_http_client.request = AsyncMock(
            return_value=json_response(200, {"data": []})
        )

        result = await client.get_json("https://test.piwik.pro/api/apps/v2")

        assert result == {"data": []}
        args, kwargs = mock_http_client.request.call_args
        assert args == ("GET", "https://test.piwik.pro/api/apps/v2")
        assert kwargs["json"] is None

    @pytest.mark.asyncio
    async def test_post_json_sends_body_and_headers(self, client, mock_http_client):
        """Bearer token and JSON content type are attached"""
        mock_http_client.request = AsyncMock(
            return_value=json_response(200, {"data": [[1]], "meta": {}})
        )

        result = await client.post_json(
            "https://test.piwik.pro/api/analytics/v1/query/", json={"limit": 1}
        )

        assert result == {"data": [[1]], "meta": {}}
        args, kwargs = mock_http_client.request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == {"limit": 1}
        assert kwargs["headers"]["Authorization"] == "Bearer mock_token"
        assert kwargs["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_caller_headers_are_merged(self, client, mock_http_client):
        mock_http_client.request = AsyncMock(return_value=json_response(200, {}))

        await client.get_json(
            "https://test.piwik.pro/x",
            headers={"Accept": "application/vnd.api+json"},
        )

        headers = mock_http_client.request.call_args.kwargs["headers"]
        assert headers["Accept"] == "application/vnd.api+json"
        assert headers["Authorization"] == "Bearer mock_token"

    @pytest.mark.parametrize("status_code", [400, 403, 404, 500, 503])
    @pytest.mark.asyncio
    async def test_http_error_raises_api_error(
        self, client, mock_http_client, status_code
    ):
        """Non-2xx responses carry status and raw body"""
        mock_http_client.request = AsyncMock(
            return_value=httpx.Response(status_code, text="something broke")
        )

        with pytest.raises(ApiError) as exc_info:
            await client.post_json("https://test.piwik.pro/q", json={})

        assert exc_info.value.status_code == status_code
        assert exc_info.value.body == "something broke"
        assert str(exc_info.value) == f"API error: {status_code} - something broke"

    @pytest.mark.asyncio
    async def test_network_error_propagates(self, client, mock_http_client):
        mock_http_client.request = AsyncMock(
            side_effect=httpx.ConnectError("Connection failed")
        )

        with pytest.raises(httpx.ConnectError):
            await client.get_json("https://test.piwik.pro/x")

    @pytest.mark.asyncio
    async def test_token_failure_skips_request(
        self, client, mock_http_client, mock_token_provider
    ):
        """No API call is made when a token cannot be obtained"""
        mock_token_provider.get_valid_token.side_effect = AuthenticationError(
            "Auth failed: 401 - nope", status_code=401, body="nope"
        )
        mock_http_client.request = AsyncMock()

        with pytest.raises(AuthenticationError):
            await client.get_json("https://test.piwik.pro/x")

        mock_http_client.request.assert_not_called()


class TestClientConstruction:

    def test_default_http_client(self, config):
        """Client builds its own AsyncClient and AuthManager when not given"""
        client = PiwikClient(config=config)

        assert isinstance(client.http_client, httpx.AsyncClient)
        assert client.http_client.headers["User-Agent"] == USER_AGENT
        assert client.token_provider.http_client is client.http_client
