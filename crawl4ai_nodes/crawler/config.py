"""Configuration for the Crawl4AI crawler module."""

import os

# Default Crawl4AI settings
DEFAULT_CRAWL4AI_URL = "http://crawl4ai:11235"
LOCAL_CRAWL4AI_URL = "http://localhost:11235"

# Timeout settings
DEFAULT_REQUEST_TIMEOUT = 60.0  # seconds, HTTP round trip to the service
DEFAULT_BROWSER_TIMEOUT = 30000  # milliseconds
DEFAULT_PAGE_TIMEOUT = 30000  # milliseconds
DEFAULT_LLM_BROWSER_TIMEOUT = 60000  # milliseconds

# Browser defaults
DEFAULT_VIEWPORT_WIDTH = 1280
DEFAULT_VIEWPORT_HEIGHT = 800

# Crawler defaults
DEFAULT_CACHE_MODE = "enabled"
DEFAULT_MAX_RETRIES = 3
DEFAULT_RAW_HTML_BASE_URL = "https://example.com"

# Cache modes understood by the service
CACHE_MODES = ("enabled", "disabled", "read_only", "write_only", "bypass")
CACHE_MODE_ALIASES = {
    "only": "read_only",
    "readonly": "read_only",
    "writeonly": "write_only",
}

# Endpoints
CRAWL_ENDPOINT = "/crawl"
HEALTH_CHECK_ENDPOINT = "/monitor/health"
HEALTH_CHECK_TIMEOUT = 5.0

# Error text from the service is truncated to this many characters
MAX_ERROR_TEXT = 500


def get_default_crawl4ai_url() -> str:
    """Get the default Crawl4AI URL from environment or default."""
    return os.environ.get("CRAWL4AI_URL", DEFAULT_CRAWL4AI_URL)
