import json
from typing import Any, Literal

import httpx
from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .consts import DEFAULT_TOKEN_EXPIRY_SECONDS
from .exceptions import PiwikMCPError

SortDirection = Literal["asc", "desc"]

# =============================================================================
# PIWIK PRO API PAYLOADS
# =============================================================================
# Provider responses are decoded leniently: unknown fields are ignored and
# optional fields default to None instead of failing validation.


class TokenResponse(BaseModel):
    """Body of a successful client-credentials grant."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    expires_in: float = DEFAULT_TOKEN_EXPIRY_SECONDS


class Column(BaseModel):
    column_id: str


class AnalyticsQuery(BaseModel):
    """Request body for the analytics query endpoint."""

    relative_date: Literal["custom"] = "custom"
    date_from: str
    date_to: str
    website_id: str
    columns: list[Column] = Field(..., min_length=1)
    order_by: list[tuple[int, SortDirection]] = Field(
        default_factory=lambda: [(0, "desc")]
    )
    offset: int = Field(default=0, ge=0)
    limit: int


class QueryResponse(BaseModel):
    """Analytics query response; rows and meta are passed through verbatim."""

    model_config = ConfigDict(extra="ignore")

    data: Any | None = None
    meta: Any | None = None


class AppAttributes(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    createdAt: str | None = None


class App(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | int | None = None
    type: str | None = None
    attributes: AppAttributes = Field(default_factory=AppAttributes)

    def to_site(self) -> dict[str, Any]:
        """Flatten into the shape returned by the site listing tool."""
        return {
            "id": self.id,
            "name": self.attributes.name,
            "type": self.type,
            "createdAt": self.attributes.createdAt,
        }


class AppsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: list[App] | None = None


# =============================================================================
# TOOL RESULTS
# =============================================================================
# Every tool returns a CallToolResult; failures are flagged with isError
# rather than raised.


def success_result(payload: Any) -> CallToolResult:
    """Wrap a JSON-serializable payload as a tool result."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(payload, indent=2))],
        isError=False,
    )


def format_error(error: Exception) -> str:
    """Render an exception with its details and suggestions as plain text."""
    details: list[str] = []
    suggestions: list[str] = []

    if isinstance(error, PiwikMCPError):
        text = f"Error: {error}"
        details = error.errors
        suggestions = error.suggestions
    elif isinstance(error, ValidationError):
        text = "Error: Invalid arguments"
        details = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in error.errors()
        ]
    elif isinstance(error, httpx.RequestError):
        text = f"Error: Network error: {error}"
    else:
        text = f"Error: {error}"

    if details:
        text += "\nDetails:\n" + "\n".join(f"- {d}" for d in details)
    if suggestions:
        text += "\nSuggestions:\n" + "\n".join(f"- {s}" for s in suggestions)
    return text


def error_result(error: Exception) -> CallToolResult:
    """Create an error-flagged tool result from any Exception.

    Args:
        error: Any Exception instance

    Returns:
        CallToolResult with isError set and the error text as content
    """
    return CallToolResult(
        content=[TextContent(type="text", text=format_error(error))],
        isError=True,
    )
