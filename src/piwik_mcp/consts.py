"""High-value constants for the Piwik MCP package."""

# Package metadata
PACKAGE_VERSION = "1.0.0"
SERVER_NAME = "piwik-mcp"
USER_AGENT = f"{SERVER_NAME}/{PACKAGE_VERSION}"

# External API contract consts
BASE_URL_TEMPLATE = "https://{account}.piwik.pro"
TOKEN_URL_PATH = "/auth/token"
QUERY_URL_PATH = "/api/analytics/v1/query/"
APPS_URL_PATH = "/api/apps/v2"
COLUMNS_REFERENCE_URL = "https://developers.piwik.pro/reference/metrics-dimensions"

# Business logic consts
TOKEN_REFRESH_BUFFER_SECONDS = 60  # refresh 1min early
DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_TOKEN_EXPIRY_SECONDS = 1800  # used when the token response omits expires_in
