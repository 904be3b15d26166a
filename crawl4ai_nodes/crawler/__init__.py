"""Crawl4AI crawler module.

HTTP client for the Crawl4AI REST API plus the helpers that turn node options
into request configs and crawl results into node output.
"""

from .errors import (
    CrawlerError,
    CrawlerConnectionError,
    CrawlerTimeoutError,
    CrawlerResponseError,
)
from .config import (
    DEFAULT_CRAWL4AI_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_BROWSER_TIMEOUT,
    DEFAULT_PAGE_TIMEOUT,
    get_default_crawl4ai_url,
)
from .client import Crawl4AIClient, build_auth_headers
from .formatters import (
    format_crawl_result,
    format_extraction_result,
    parse_extracted_json,
)
from .utils import (
    create_browser_config,
    create_crawler_run_config,
    clean_text,
    is_valid_url,
    safe_json_parse,
)

__all__ = [
    # Client
    "Crawl4AIClient",
    "build_auth_headers",
    # Formatters
    "format_crawl_result",
    "format_extraction_result",
    "parse_extracted_json",
    # Utils
    "create_browser_config",
    "create_crawler_run_config",
    "clean_text",
    "is_valid_url",
    "safe_json_parse",
    # Errors
    "CrawlerError",
    "CrawlerConnectionError",
    "CrawlerTimeoutError",
    "CrawlerResponseError",
    # Config
    "DEFAULT_CRAWL4AI_URL",
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_BROWSER_TIMEOUT",
    "DEFAULT_PAGE_TIMEOUT",
    "get_default_crawl4ai_url",
]
