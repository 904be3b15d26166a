"""Low-level HTTP client for Crawl4AI REST API."""

import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import (
    CRAWL_ENDPOINT,
    DEFAULT_CACHE_MODE,
    DEFAULT_REQUEST_TIMEOUT,
    HEALTH_CHECK_ENDPOINT,
    HEALTH_CHECK_TIMEOUT,
    LOCAL_CRAWL4AI_URL,
    MAX_ERROR_TEXT,
)
from .errors import (
    CrawlerConnectionError,
    CrawlerError,
    CrawlerResponseError,
    CrawlerTimeoutError,
)

logger = logging.getLogger(__name__)

# Keys of a browser config dict that belong to BrowserConfig on the service
BROWSER_PARAM_KEYS = (
    "browser_type",
    "headless",
    "java_script_enabled",
    "viewport_width",
    "viewport_height",
    "user_agent",
    "enable_stealth",
    "headers",
)

# Extra headroom on top of the page timeout for the HTTP round trip
PAGE_TIMEOUT_HEADROOM = 30.0


def build_auth_headers(
    authentication_type: str = "none",
    api_token: str = "",
    username: str = "",
    password: str = "",
) -> Dict[str, str]:
    """Build the Authorization header for the configured auth type."""
    if authentication_type == "token" and api_token:
        return {"Authorization": f"Bearer {api_token}"}
    if authentication_type == "basic" and username and password:
        token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}
    return {}


def _failed_result(url: str, message: str) -> Dict[str, Any]:
    return {"url": url, "success": False, "error_message": message}


def _drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


def format_browser_config(browser_config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap browser options in the typed BrowserConfig envelope."""
    browser_config = browser_config or {}
    params = _drop_none({key: browser_config.get(key) for key in BROWSER_PARAM_KEYS})
    return {"type": "BrowserConfig", "params": params}


def format_crawler_config(
    crawler_config: Optional[Dict[str, Any]],
    browser_config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Wrap crawler options in the typed CrawlerRunConfig envelope.

    The browser `timeout` option has no BrowserConfig counterpart; it becomes
    the page timeout unless the crawler options set one.
    """
    params = dict(crawler_config or {})
    params.setdefault("cache_mode", DEFAULT_CACHE_MODE)
    if browser_config and browser_config.get("timeout") and not params.get("page_timeout"):
        params["page_timeout"] = browser_config["timeout"]
    return {"type": "CrawlerRunConfig", "params": _drop_none(params)}


class Crawl4AIClient:
    """Low-level HTTP client for Crawl4AI REST API."""

    def __init__(
        self,
        base_url: str = LOCAL_CRAWL4AI_URL,
        authentication_type: str = "none",
        api_token: str = "",
        username: str = "",
        password: str = "",
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or LOCAL_CRAWL4AI_URL).rstrip("/")
        self.timeout = timeout
        self.headers = build_auth_headers(authentication_type, api_token, username, password)
        self._transport = transport

    @classmethod
    def from_credentials(cls, credentials, **kwargs) -> "Crawl4AIClient":
        """Create a client from Crawl4aiCredentials."""
        return cls(
            base_url=credentials.docker_url,
            authentication_type=credentials.authentication_type,
            api_token=credentials.api_token,
            username=credentials.username,
            password=credentials.password,
            **kwargs,
        )

    def _http_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout,
            headers=self.headers,
            transport=self._transport,
        )

    def _request_timeout(self, crawler_payload: Dict[str, Any]) -> float:
        page_timeout = crawler_payload["params"].get("page_timeout")
        if not page_timeout:
            return self.timeout
        return max(self.timeout, float(page_timeout) / 1000 + PAGE_TIMEOUT_HEADROOM)

    async def _post_crawl(self, request_body: Dict[str, Any], timeout: float) -> Dict[str, Any]:
        """
        POST a crawl request.

        Returns:
            Decoded response body, or a failure dict for non-200 responses.

        Raises:
            CrawlerConnectionError: If cannot connect to Crawl4AI
            CrawlerTimeoutError: If request times out
            CrawlerResponseError: If the body isn't JSON
            CrawlerError: For any other transport failure
        """
        try:
            async with self._http_client(timeout) as client:
                response = await client.post(
                    f"{self.base_url}{CRAWL_ENDPOINT}",
                    json=request_body,
                )
        except httpx.ConnectError as e:
            raise CrawlerConnectionError(
                f"Cannot connect to Crawl4AI at {self.base_url}: {e}"
            ) from e
        except httpx.TimeoutException as e:
            raise CrawlerTimeoutError(f"Request timed out after {timeout}s: {e}") from e
        except httpx.HTTPError as e:
            raise CrawlerError(f"Crawl4AI request failed: {e}") from e

        if response.status_code != 200:
            error_text = response.text[:MAX_ERROR_TEXT] if response.text else "Unknown error"
            return {
                "success": False,
                "results": [],
                "error_message": f"HTTP {response.status_code}: {error_text}",
            }

        try:
            data = response.json()
        except ValueError as e:
            raise CrawlerResponseError(f"Invalid JSON from Crawl4AI: {e}") from e
        if not isinstance(data, dict):
            raise CrawlerResponseError("Unexpected response shape from Crawl4AI")
        return data

    async def _crawl(
        self,
        urls: List[str],
        crawler_config: Optional[Dict[str, Any]],
        browser_config: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        crawler_payload = format_crawler_config(crawler_config, browser_config)
        request_body = {
            "urls": urls,
            "browser_config": format_browser_config(browser_config),
            "crawler_config": crawler_payload,
        }
        return await self._post_crawl(request_body, self._request_timeout(crawler_payload))

    @staticmethod
    def _first_result(data: Dict[str, Any], url: str) -> Dict[str, Any]:
        results = data.get("results")
        if isinstance(results, list) and results:
            return results[0]
        # Older servers answer single-URL requests with "result"
        if isinstance(data.get("result"), dict):
            return data["result"]
        return _failed_result(
            url, data.get("error_message") or "No result returned from Crawl4AI API"
        )

    async def crawl_url(
        self,
        url: str,
        crawler_config: Optional[Dict[str, Any]] = None,
        browser_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Crawl a single URL.

        Args:
            url: URL to crawl
            crawler_config: Options from create_crawler_run_config
            browser_config: Options from create_browser_config

        Returns:
            The service's crawl result for the URL. Failures come back as
            {"url": ..., "success": False, "error_message": ...}.
        """
        try:
            data = await self._crawl([url], crawler_config, browser_config)
        except CrawlerError as e:
            logger.warning(f"Crawl4AI crawl failed for {url}: {e}")
            return _failed_result(url, str(e))
        return self._first_result(data, url)

    async def crawl_multiple_urls(
        self,
        urls: List[str],
        crawler_config: Optional[Dict[str, Any]] = None,
        browser_config: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Crawl several URLs in one request; one result per URL."""
        try:
            data = await self._crawl(urls, crawler_config, browser_config)
        except CrawlerError as e:
            logger.warning(f"Crawl4AI batch crawl failed for {len(urls)} URLs: {e}")
            return [_failed_result(url, str(e)) for url in urls]

        results = data.get("results")
        if isinstance(results, list) and results:
            return results

        message = data.get("error_message") or "No results returned from Crawl4AI API"
        return [_failed_result(url, message) for url in urls]

    async def process_raw_html(
        self,
        html: str,
        base_url: str,
        crawler_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Process HTML content without fetching anything.

        The service treats `raw://` URLs as inline content; `base_url` is
        used to resolve relative links.
        """
        config = dict(crawler_config or {})
        config["base_url"] = base_url
        try:
            data = await self._crawl([f"raw://{html}"], config, None)
        except CrawlerError as e:
            logger.warning(f"Crawl4AI raw HTML processing failed: {e}")
            return _failed_result(base_url, str(e))

        result = self._first_result(data, base_url)
        # The echoed URL would be the whole document
        if str(result.get("url", "")).startswith("raw://"):
            result = {**result, "url": base_url}
        return result

    async def arun(self, url: str, options: Dict[str, Any]) -> Dict[str, Any]:
        """Run a crawl with an extraction strategy (Content Extractor).

        Args:
            url: URL to process
            options: Dict with optional keys browser_config, extraction_strategy,
                cache_mode, js_code, css_selector and headers.

        Returns:
            Crawl result, or a failure dict.
        """
        browser_config = dict(options.get("browser_config") or {})
        if options.get("headers"):
            browser_config["headers"] = options["headers"]

        crawler_config = {
            "cache_mode": options.get("cache_mode") or DEFAULT_CACHE_MODE,
            "js_code": options.get("js_code") or None,
            "css_selector": options.get("css_selector") or None,
            "extraction_strategy": options.get("extraction_strategy"),
        }
        return await self.crawl_url(url, crawler_config, browser_config)

    async def health_check_detailed(self) -> Dict[str, Any]:
        """Get detailed health information from Crawl4AI service.

        Returns:
            Dict with health details including memory, CPU, uptime, etc.
            Returns {"healthy": False, "error": "..."} on failure.
        """
        try:
            async with self._http_client(HEALTH_CHECK_TIMEOUT) as client:
                response = await client.get(f"{self.base_url}{HEALTH_CHECK_ENDPOINT}")
                if response.status_code == 200:
                    data = response.json()
                    if not isinstance(data, dict):
                        data = {}
                    # Stats are nested under "container" in Crawl4AI response
                    container = data.get("container")
                    if not isinstance(container, dict):
                        container = {}
                    return {
                        "healthy": True,
                        "status": data.get("status"),
                        "memory_percent": container.get("memory_percent"),
                        "cpu_percent": container.get("cpu_percent"),
                        "uptime_seconds": container.get("uptime_seconds"),
                    }
                return {"healthy": False, "error": f"HTTP {response.status_code}"}
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"Detailed health check failed: {e}")
            return {"healthy": False, "error": str(e)}
