"""Piwik PRO MCP server implementation."""

import logging
import sys

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from .config import get_config, setup_logging
from .consts import COLUMNS_REFERENCE_URL, SERVER_NAME
from .exceptions import ConfigError
from .models import SortDirection, error_result, format_error, success_result
from .query import get_query_service

logger = logging.getLogger("piwik-mcp.server")

mcp = FastMCP(
    name=SERVER_NAME,
    instructions="""
    Piwik PRO MCP server.

    This MCP server allows you to:
    1. List the websites and apps tracked in a Piwik PRO account.
    2. Run analytics reports (summary, top pages, traffic sources, goals).
    3. Run custom analytics queries over any metrics and dimensions.
    """,
)

SUMMARY_COLUMNS = [
    "sessions",
    "page_views",
    "visitors",
    "bounce_rate",
    "avg_session_time",
]
TOP_PAGES_COLUMNS = ["page_url", "page_views", "visitors", "avg_time_on_page"]
TRAFFIC_SOURCES_COLUMNS = ["source_medium", "sessions", "visitors", "bounce_rate"]
GOALS_COLUMNS = [
    "goal_name",
    "goal_conversions",
    "goal_conversion_rate",
    "goal_revenue",
]

AVAILABLE_METRICS = [
    "sessions",
    "visitors",
    "page_views",
    "bounce_rate",
    "avg_session_time",
    "avg_time_on_page",
    "entries",
    "exits",
    "goal_conversions",
    "goal_conversion_rate",
    "goal_revenue",
    "unique_page_views",
]
AVAILABLE_DIMENSIONS = [
    "page_url",
    "page_title",
    "referrer_type",
    "source_medium",
    "source",
    "medium",
    "campaign",
    "country",
    "city",
    "device_type",
    "browser_name",
    "operating_system",
    "session_entry_url",
    "session_exit_url",
    "custom_event_category",
    "custom_event_action",
    "custom_event_name",
    "goal_name",
    "timestamp",
    "session_date",
]


@mcp.tool()
async def piwik_list_sites() -> CallToolResult:
    """List all websites and apps tracked in Piwik PRO.

    Returns:
        sites (id, name, type, createdAt) and their total count. Use the id
        as site_id in the other tools.
    """
    logger.info("Listing sites")

    try:
        sites = await get_query_service().list_sites()
        return success_result({"sites": sites, "total": len(sites)})
    except Exception as e:
        logger.warning(f"piwik_list_sites failed: {e}")
        return error_result(e)


@mcp.tool()
async def piwik_analytics_summary(
    site_id: str, date_from: str | None = None, date_to: str | None = None
) -> CallToolResult:
    """Get analytics summary for a site (sessions, pageviews, visitors).

    Args:
        site_id: The site/app ID from piwik_list_sites
        date_from: Start date (YYYY-MM-DD). Defaults to 30 days ago
        date_to: End date (YYYY-MM-DD). Defaults to today
    """
    logger.info(f"Fetching analytics summary for site {site_id}")

    try:
        period, result = await get_query_service().run_report(
            site_id,
            SUMMARY_COLUMNS,
            date_from=date_from,
            date_to=date_to,
            limit=1,
        )
        return success_result(
            {
                "period": period.to_period(),
                "siteId": site_id,
                "data": result.data,
                "meta": result.meta,
            }
        )
    except Exception as e:
        logger.warning(f"piwik_analytics_summary failed: {e}")
        return error_result(e)


@mcp.tool()
async def piwik_top_pages(
    site_id: str,
    date_from: str | None = None,
    date_to: str | None = None,
    limit: int = 10,
) -> CallToolResult:
    """Get top pages by pageviews for a site.

    Args:
        site_id: The site/app ID
        date_from: Start date (YYYY-MM-DD). Defaults to 30 days ago
        date_to: End date (YYYY-MM-DD). Defaults to today
        limit: Number of results (default 10)
    """
    logger.info(f"Fetching top pages for site {site_id}")

    try:
        period, result = await get_query_service().run_report(
            site_id,
            TOP_PAGES_COLUMNS,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            order_by=1,
        )
        return success_result(
            {
                "period": period.to_period(),
                "siteId": site_id,
                "topPages": result.data,
            }
        )
    except Exception as e:
        logger.warning(f"piwik_top_pages failed: {e}")
        return error_result(e)


@mcp.tool()
async def piwik_traffic_sources(
    site_id: str, date_from: str | None = None, date_to: str | None = None
) -> CallToolResult:
    """Get traffic sources breakdown for a site.

    Args:
        site_id: The site/app ID
        date_from: Start date (YYYY-MM-DD). Defaults to 30 days ago
        date_to: End date (YYYY-MM-DD). Defaults to today
    """
    logger.info(f"Fetching traffic sources for site {site_id}")

    try:
        period, result = await get_query_service().run_report(
            site_id,
            TRAFFIC_SOURCES_COLUMNS,
            date_from=date_from,
            date_to=date_to,
            limit=20,
            order_by=1,
        )
        return success_result(
            {
                "period": period.to_period(),
                "siteId": site_id,
                "sources": result.data,
            }
        )
    except Exception as e:
        logger.warning(f"piwik_traffic_sources failed: {e}")
        return error_result(e)


@mcp.tool()
async def piwik_goals(
    site_id: str, date_from: str | None = None, date_to: str | None = None
) -> CallToolResult:
    """Get goal completions and conversion data.

    Args:
        site_id: The site/app ID
        date_from: Start date (YYYY-MM-DD). Defaults to 30 days ago
        date_to: End date (YYYY-MM-DD). Defaults to today
    """
    logger.info(f"Fetching goals for site {site_id}")

    try:
        period, result = await get_query_service().run_report(
            site_id,
            GOALS_COLUMNS,
            date_from=date_from,
            date_to=date_to,
            limit=50,
            order_by=1,
        )
        return success_result(
            {
                "period": period.to_period(),
                "siteId": site_id,
                "goals": result.data,
            }
        )
    except Exception as e:
        logger.warning(f"piwik_goals failed: {e}")
        return error_result(e)


@mcp.tool()
async def piwik_custom_query(
    site_id: str,
    columns: list[str],
    date_from: str | None = None,
    date_to: str | None = None,
    limit: int = 50,
    order_by: int = 0,
    direction: SortDirection = "desc",
) -> CallToolResult:
    """Run a custom analytics query with specified dimensions and metrics.

    See piwik_available_columns for common column IDs.

    Args:
        site_id: The site/app ID
        columns: Column IDs to query (e.g., ['sessions', 'page_views', 'country'])
        date_from: Start date (YYYY-MM-DD). Defaults to 30 days ago
        date_to: End date (YYYY-MM-DD). Defaults to today
        limit: Number of results (default 50)
        order_by: Index into columns to sort by (default 0)
        direction: Sort direction, 'asc' or 'desc' (default 'desc')
    """
    logger.info(f"Running custom query for site {site_id}: {columns}")

    try:
        period, result = await get_query_service().run_report(
            site_id,
            columns,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            order_by=order_by,
            direction=direction,
        )
        return success_result(
            {
                "period": period.to_period(),
                "siteId": site_id,
                "columns": columns,
                "data": result.data,
                "meta": result.meta,
            }
        )
    except Exception as e:
        logger.warning(f"piwik_custom_query failed: {e}")
        return error_result(e)


@mcp.tool()
async def piwik_available_columns() -> CallToolResult:
    """List common columns (dimensions and metrics) available for analytics queries."""
    return success_result(
        {
            "metrics": AVAILABLE_METRICS,
            "dimensions": AVAILABLE_DIMENSIONS,
            "note": (
                "Use these column_id values in the columns array for "
                f"piwik_custom_query. For the complete list, see: {COLUMNS_REFERENCE_URL}"
            ),
        }
    )


def main() -> None:
    """Run the MCP server."""
    try:
        config = get_config()
    except ConfigError as e:
        print(format_error(e), file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_level)
    logger.info(f"Piwik PRO MCP server running for {config.base_url}")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
