"""Analytics query building and execution."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from functools import cache
from typing import Any

from .client import PiwikClient, get_client
from .consts import DEFAULT_LOOKBACK_DAYS
from .models import AnalyticsQuery, AppsResponse, Column, QueryResponse, SortDirection

logger = logging.getLogger("piwik-mcp.query")


@dataclass(frozen=True)
class DateRange:
    date_from: str
    date_to: str

    def to_period(self) -> dict[str, str]:
        return {"from": self.date_from, "to": self.date_to}


def resolve_date_range(
    date_from: str | None = None,
    date_to: str | None = None,
    today: date | None = None,
) -> DateRange:
    """Fill in missing dates with the default lookback window.

    Args:
        date_from: Start date (YYYY-MM-DD). Defaults to 30 days before today.
        date_to: End date (YYYY-MM-DD). Defaults to today.
        today: Reference day; the current UTC calendar day if omitted.

    Returns:
        DateRange with both ends set.
    """
    today = today or datetime.now(UTC).date()
    return DateRange(
        date_from=date_from
        or (today - timedelta(days=DEFAULT_LOOKBACK_DAYS)).isoformat(),
        date_to=date_to or today.isoformat(),
    )


def build_query(
    site_id: str,
    columns: list[str],
    period: DateRange,
    *,
    limit: int,
    order_by: int = 0,
    direction: SortDirection = "desc",
    offset: int = 0,
) -> AnalyticsQuery:
    """Build the analytics query body shared by every reporting tool."""
    return AnalyticsQuery(
        date_from=period.date_from,
        date_to=period.date_to,
        website_id=site_id,
        columns=[Column(column_id=c) for c in columns],
        order_by=[(order_by, direction)],
        offset=offset,
        limit=limit,
    )


class QueryService:
    """Report and site listing operations on top of PiwikClient."""

    def __init__(self, client: PiwikClient):
        self.client = client
        self.config = client.config

    async def execute_query(self, query: AnalyticsQuery) -> QueryResponse:
        """POST a query to the analytics endpoint.

        Raises:
            AuthenticationError: If no token can be obtained.
            ApiError: For non-success responses.
            httpx.RequestError: For network errors.
        """
        logger.debug(
            f"Querying site {query.website_id}: "
            f"{[c.column_id for c in query.columns]} "
            f"{query.date_from}..{query.date_to}"
        )
        data = await self.client.post_json(
            self.config.query_url, json=query.model_dump(mode="json")
        )
        return QueryResponse.model_validate(data or {})

    async def run_report(
        self,
        site_id: str,
        columns: list[str],
        *,
        date_from: str | None = None,
        date_to: str | None = None,
        limit: int,
        order_by: int = 0,
        direction: SortDirection = "desc",
    ) -> tuple[DateRange, QueryResponse]:
        """Resolve the period, build the query and execute it.

        Returns:
            The resolved period and the decoded response.
        """
        period = resolve_date_range(date_from, date_to)
        query = build_query(
            site_id,
            columns,
            period,
            limit=limit,
            order_by=order_by,
            direction=direction,
        )
        return period, await self.execute_query(query)

    async def list_sites(self) -> list[dict[str, Any]]:
        """List tracked sites and apps as flat dicts."""
        data = await self.client.get_json(self.config.apps_url)
        apps = AppsResponse.model_validate(data or {}).data or []
        logger.debug(f"Found {len(apps)} sites")
        return [app.to_site() for app in apps]


@cache
def get_query_service() -> QueryService:
    """Get a cached QueryService bound to the shared client."""
    return QueryService(get_client())
