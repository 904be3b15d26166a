"""Helpers turning node options into Crawl4AI configuration."""

import json
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .config import (
    CACHE_MODE_ALIASES,
    CACHE_MODES,
    DEFAULT_BROWSER_TIMEOUT,
    DEFAULT_CACHE_MODE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PAGE_TIMEOUT,
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
)


def _number(value: Any, default: int) -> int:
    """Coerce a numeric option; empty and zero values fall back to default."""
    if value in (None, "", 0):
        return default
    return int(float(value))


def split_csv(value: Any) -> List[str]:
    """Split a comma-separated string (or pass a list through), dropping blanks."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def normalize_cache_mode(value: Optional[str]) -> str:
    """
    Map a cache mode option onto the service's CacheMode values.

    Node options use both "enabled"/"only" and "ENABLED"/"READ_ONLY" spellings.
    Unknown values fall back to the default.
    """
    if not value:
        return DEFAULT_CACHE_MODE
    mode = str(value).strip().lower()
    mode = CACHE_MODE_ALIASES.get(mode, mode)
    if mode not in CACHE_MODES:
        return DEFAULT_CACHE_MODE
    return mode


def create_browser_config(options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert node browser options to a browser configuration.

    Args:
        options: The `browserOptions` collection from the node

    Returns:
        Browser configuration dict (snake_case keys)
    """
    config: Dict[str, Any] = {
        "headless": options.get("headless") is not False,
        "java_script_enabled": options.get("javaScriptEnabled") is not False,
        "viewport_width": _number(options.get("viewportWidth"), DEFAULT_VIEWPORT_WIDTH),
        "viewport_height": _number(options.get("viewportHeight"), DEFAULT_VIEWPORT_HEIGHT),
        "timeout": _number(options.get("timeout"), DEFAULT_BROWSER_TIMEOUT),
    }

    if options.get("browserType"):
        config["browser_type"] = str(options["browserType"])
    if options.get("userAgent"):
        config["user_agent"] = str(options["userAgent"])
    if options.get("enableStealth") is True:
        config["enable_stealth"] = True

    return config


def create_crawler_run_config(options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert node crawler options to a crawler run configuration.

    Args:
        options: The `crawlerOptions` collection from the node

    Returns:
        Crawler run configuration dict (snake_case keys)
    """
    return {
        "cache_mode": normalize_cache_mode(options.get("cacheMode")),
        "stream": options.get("streamEnabled") is True,
        # Left unset so the browser timeout can stand in for it
        "page_timeout": _number(options.get("pageTimeout"), 0) or None,
        "request_timeout": _number(options.get("requestTimeout"), DEFAULT_PAGE_TIMEOUT),
        "js_code": str(options["jsCode"]) if options.get("jsCode") else None,
        "js_only": options.get("jsOnly") is True,
        "css_selector": str(options["cssSelector"]) if options.get("cssSelector") else None,
        "excluded_tags": split_csv(options.get("excludedTags")),
        "exclude_external_links": options.get("excludeExternalLinks") is True,
        "check_robots_txt": options.get("checkRobotsTxt") is True,
        "word_count_threshold": _number(options.get("wordCountThreshold"), 0),
        "session_id": str(options["sessionId"]) if options.get("sessionId") else None,
        "max_retries": _number(options.get("maxRetries"), DEFAULT_MAX_RETRIES),
    }


def safe_json_parse(json_string: Any, default: Any = None) -> Any:
    """Parse JSON, returning `default` when the input isn't valid JSON."""
    if not isinstance(json_string, (str, bytes)):
        return default
    try:
        return json.loads(json_string)
    except ValueError:
        return default


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace (newlines and tabs included) into single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def is_valid_url(url: str) -> bool:
    """Check that `url` is an absolute URL with a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)
