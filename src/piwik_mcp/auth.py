"""Authentication management with token refresh."""

import logging
from datetime import UTC, datetime, timedelta

import httpx
from pydantic import ValidationError

from .config import Config
from .consts import TOKEN_REFRESH_BUFFER_SECONDS
from .exceptions import AuthenticationError
from .models import TokenResponse

logger = logging.getLogger("piwik-mcp.auth")


class AuthManager:
    """OAuth2 client-credentials token manager.

    Responsibilities:
    - Cache the bearer token and its absolute expiry in memory
    - Request a new token when none is cached or it is about to expire

    Refreshes are not serialized: concurrent callers that all see an expired
    token each fetch one and the last write wins.
    """

    def __init__(self, config: Config, http_client: httpx.AsyncClient):
        """Initialize AuthManager.

        Args:
            config: Config instance with client credentials.
            http_client: HTTP client (for token requests only)
        """
        self.config = config
        self.http_client = http_client
        self._access_token: str | None = None
        self._token_expires_at: datetime | None = None

    async def get_valid_token(self) -> str:
        """Get a valid bearer token, fetching a new one if needed.

        Returns:
            Valid bearer token string.

        Raises:
            AuthenticationError: If credentials are missing or rejected.
            httpx.RequestError: For network errors talking to the token endpoint.
        """
        if self._needs_refresh():
            await self._refresh_token()

        return self._access_token

    def _needs_refresh(self) -> bool:
        """Check if token needs refresh."""
        if self._token_expires_at is None or self._access_token is None:
            return True

        refresh_time = self._token_expires_at - timedelta(
            seconds=TOKEN_REFRESH_BUFFER_SECONDS
        )
        return datetime.now(UTC) >= refresh_time

    async def _refresh_token(self) -> None:
        """Run the client-credentials grant and store the result."""
        if not self.config.has_credentials:
            raise AuthenticationError(
                "PIWIK_CLIENT_ID and PIWIK_CLIENT_SECRET must be set",
                suggestions=[
                    "Create an API client in Piwik PRO and export its credentials",
                ],
            )

        logger.debug("Refreshing authentication token")
        response = await self.http_client.post(
            self.config.token_url,
            json={
                "grant_type": "client_credentials",
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
            },
        )

        if not response.is_success:
            logger.error(f"Token request failed with status {response.status_code}")
            raise AuthenticationError(
                f"Auth failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
                suggestions=["Verify PIWIK_CLIENT_ID and PIWIK_CLIENT_SECRET"],
                context={"token_url": self.config.token_url},
            )

        try:
            token = TokenResponse.model_validate(response.json())
        except ValidationError as e:
            if any(err["loc"][:1] == ("access_token",) for err in e.errors()):
                message = "Auth server returned response without access_token"
            else:
                message = "Auth server returned an invalid token response"
            raise AuthenticationError(
                message,
                status_code=response.status_code,
                body=response.text,
                errors=[
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
                context={"token_url": self.config.token_url},
            ) from e

        self._access_token = token.access_token
        self._token_expires_at = datetime.now(UTC) + timedelta(
            seconds=token.expires_in
        )
        logger.info("Token refreshed successfully")
