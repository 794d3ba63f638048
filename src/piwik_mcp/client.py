"""Piwik PRO client — handles low-level API calls."""

import logging
from functools import cache
from typing import Any

import httpx

from .auth import AuthManager
from .config import Config, get_config
from .consts import USER_AGENT
from .exceptions import ApiError
from .protocols import TokenProvider

logger = logging.getLogger("piwik-mcp.client")


class PiwikClient:
    """Piwik PRO API client with authentication.

    Responsibilities:
    - Attach the bearer token and JSON headers to every call
    - Turn non-success responses into ApiError
    - Decode JSON bodies
    """

    def __init__(
        self,
        config: Config | None = None,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize PiwikClient.

        Args:
            config: Config instance. If None, uses get_config().
            token_provider: Authentication token provider. If None, creates AuthManager.
            http_client: HTTP client. If None, creates a new one.
        """
        self.config = config or get_config()

        self.http_client = http_client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
        )

        self.token_provider = token_provider or AuthManager(
            self.config, self.http_client
        )

        logger.info(f"Piwik client created for {self.config.base_url}")

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send an authenticated request and return the decoded JSON body.

        Args:
            method: HTTP method.
            url: Complete URL to call.
            json: Optional JSON-serializable request body.
            headers: Extra headers; these override the defaults.

        Returns:
            Parsed JSON data.

        Raises:
            AuthenticationError: If no token can be obtained.
            ApiError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        token = await self.token_provider.get_valid_token()
        request_headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            **(headers or {}),
        }

        logger.debug(f"{method} {url}")
        response = await self.http_client.request(
            method, url, headers=request_headers, json=json
        )

        if not response.is_success:
            logger.warning(f"{method} {url} failed with status {response.status_code}")
            raise ApiError(
                f"API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
                context={"method": method, "url": url},
            )

        logger.debug(f"{method} {url} successful")
        return response.json()

    async def get_json(self, url: str, **kwargs) -> Any:
        """GET JSON from URL with authentication."""
        return await self.request("GET", url, **kwargs)

    async def post_json(self, url: str, **kwargs) -> Any:
        """POST JSON to URL with authentication."""
        return await self.request("POST", url, **kwargs)


@cache
def get_client() -> PiwikClient:
    """Get a cached PiwikClient instance with default configuration.

    Raises:
        ConfigError: Propagated from get_config().
    """
    return PiwikClient()
