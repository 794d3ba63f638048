"""Piwik PRO MCP Server Package

A Model Context Protocol (MCP) server exposing the Piwik PRO analytics
reporting API as tools.
"""

from .auth import AuthManager
from .client import PiwikClient, get_client
from .config import Config, get_config
from .consts import PACKAGE_VERSION
from .exceptions import (
    ApiError,
    AuthenticationError,
    ConfigError,
    PiwikMCPError,
    RemoteError,
)
from .query import QueryService, build_query, get_query_service, resolve_date_range

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "get_client",
    "get_query_service",
    "build_query",
    "resolve_date_range",
    "Config",
    "AuthManager",
    "PiwikClient",
    "QueryService",
    "PiwikMCPError",
    "ConfigError",
    "RemoteError",
    "AuthenticationError",
    "ApiError",
]
