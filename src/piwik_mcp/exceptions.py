"""Piwik MCP custom exceptions.

Exception Design Principles:
1. Carry whatever the remote side told us (status code, raw body) so the
   assistant can read it in the tool result
2. Handle exceptions as late as possible: everything propagates up to the
   tool boundary in server.py, where it becomes an error-flagged result
3. Split on domain of actionable information:
   - Recoverable by user reconfiguration outside session (ConfigError,
     AuthenticationError)
   - Potentially recoverable by LLM action in-session (ApiError)
"""


class PiwikMCPError(Exception):
    """Base exception for all Piwik MCP errors.

    Provides context and actionable suggestions beyond standard exceptions.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize PiwikMCPError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(PiwikMCPError):
    """Application configuration errors - recoverable by user reconfiguration.

    Raised when the environment does not describe a usable server, most
    commonly a missing PIWIK_ACCOUNT.
    """

    pass


class RemoteError(PiwikMCPError):
    """A Piwik PRO endpoint answered with a non-success status.

    The status code and raw response body are kept verbatim.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.body = body


class AuthenticationError(RemoteError):
    """Missing client credentials, or the token endpoint rejected them."""

    pass


class ApiError(RemoteError):
    """Non-success response from the analytics or apps endpoints."""

    pass
