"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class TokenProvider(Protocol):
    """Protocol for authentication token providers."""

    async def get_valid_token(self) -> str:
        """Get a valid bearer token.

        Returns:
            Valid bearer token string.

        Raises:
            AuthenticationError: If a token cannot be obtained.
        """
        ...
