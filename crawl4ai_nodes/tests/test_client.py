"""Unit tests for the Crawl4AI HTTP client."""

import base64
import json

import httpx
import pytest

from crawl4ai_nodes.crawler.client import (
    Crawl4AIClient,
    build_auth_headers,
    format_browser_config,
    format_crawler_config,
)
from crawl4ai_nodes.credentials import Crawl4aiCredentials


def make_client(handler, **kwargs):
    """Client whose requests are answered by `handler`."""
    return Crawl4AIClient("http://crawl4ai:11235", transport=httpx.MockTransport(handler), **kwargs)


def ok_handler(requests, body=None):
    """Handler that records requests and answers with `body`."""
    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=body if body is not None else {
            "success": True,
            "results": [{"url": "https://example.com", "success": True}],
        })
    return handler


class TestBuildAuthHeaders:
    """Tests for Authorization header construction."""

    def test_token_auth(self):
        """Test bearer token header."""
        assert build_auth_headers("token", api_token="abc") == {"Authorization": "Bearer abc"}

    def test_basic_auth(self):
        """Test basic auth header is base64 of user:password."""
        headers = build_auth_headers("basic", username="user", password="pass")
        expected = base64.b64encode(b"user:pass").decode("ascii")
        assert headers == {"Authorization": f"Basic {expected}"}

    def test_missing_values_send_no_header(self):
        """Test incomplete settings produce no Authorization header."""
        assert build_auth_headers("token") == {}
        assert build_auth_headers("basic", username="user") == {}
        assert build_auth_headers("none", api_token="abc") == {}


class TestConfigEnvelopes:
    """Tests for the typed BrowserConfig / CrawlerRunConfig payloads."""

    def test_browser_config_keeps_known_keys(self):
        """Test only BrowserConfig parameters are forwarded."""
        payload = format_browser_config({
            "headless": True,
            "java_script_enabled": False,
            "timeout": 30000,
            "user_agent": None,
        })

        assert payload == {
            "type": "BrowserConfig",
            "params": {"headless": True, "java_script_enabled": False},
        }

    def test_browser_timeout_becomes_page_timeout(self):
        """Test the browser timeout is used when no page timeout is set."""
        payload = format_crawler_config({"cache_mode": "bypass"}, {"timeout": 45000})

        assert payload["type"] == "CrawlerRunConfig"
        assert payload["params"]["page_timeout"] == 45000
        assert payload["params"]["cache_mode"] == "bypass"

    def test_explicit_page_timeout_wins(self):
        """Test an explicit page timeout is not overridden."""
        payload = format_crawler_config({"page_timeout": 10000}, {"timeout": 45000})

        assert payload["params"]["page_timeout"] == 10000
        assert payload["params"]["cache_mode"] == "enabled"


class TestCrawl4AIClient:
    """Tests for crawl requests against a mocked transport."""

    def test_from_credentials(self):
        """Test the client picks up URL and auth from credentials."""
        credentials = Crawl4aiCredentials(
            dockerUrl="http://my-crawler:11235/",
            authenticationType="token",
            apiToken="secret",
        )

        client = Crawl4AIClient.from_credentials(credentials)

        assert client.base_url == "http://my-crawler:11235"
        assert client.headers == {"Authorization": "Bearer secret"}

    @pytest.mark.asyncio
    async def test_crawl_url_request_body(self):
        """Test the request body uses the typed config envelopes."""
        requests = []
        client = make_client(ok_handler(requests), authentication_type="token", api_token="abc")

        result = await client.crawl_url(
            "https://example.com",
            {"cache_mode": "bypass", "css_selector": None},
            {"headless": True, "timeout": 30000},
        )

        assert result["success"] is True
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/crawl"
        assert request.headers["Authorization"] == "Bearer abc"

        body = json.loads(request.content)
        assert body["urls"] == ["https://example.com"]
        assert body["browser_config"] == {"type": "BrowserConfig", "params": {"headless": True}}
        assert body["crawler_config"]["type"] == "CrawlerRunConfig"
        assert body["crawler_config"]["params"] == {"cache_mode": "bypass", "page_timeout": 30000}

    @pytest.mark.asyncio
    async def test_non_200_returns_failed_result(self):
        """Test HTTP errors become a failed result with status and text."""
        client = make_client(lambda request: httpx.Response(500, text="Internal boom"))

        result = await client.crawl_url("https://example.com")

        assert result["success"] is False
        assert result["url"] == "https://example.com"
        assert result["error_message"] == "HTTP 500: Internal boom"

    @pytest.mark.asyncio
    async def test_error_text_is_truncated(self):
        """Test long error bodies are cut to 500 characters."""
        client = make_client(lambda request: httpx.Response(502, text="x" * 2000))

        result = await client.crawl_url("https://example.com")

        assert result["error_message"] == "HTTP 502: " + "x" * 500

    @pytest.mark.asyncio
    async def test_connection_error_returns_failed_result(self):
        """Test connection failures are reported, not raised."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        result = await client.crawl_url("https://example.com")

        assert result["success"] is False
        assert "Cannot connect" in result["error_message"]

    @pytest.mark.asyncio
    async def test_timeout_returns_failed_result(self):
        """Test timeouts are reported, not raised."""
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = make_client(handler)

        result = await client.crawl_url("https://example.com")

        assert result["success"] is False
        assert "timed out" in result["error_message"]

    @pytest.mark.asyncio
    async def test_invalid_json_returns_failed_result(self):
        """Test an undecodable body is reported as a failure."""
        client = make_client(lambda request: httpx.Response(200, text="<html>not json</html>"))

        result = await client.crawl_url("https://example.com")

        assert result["success"] is False
        assert "Invalid JSON" in result["error_message"]

    @pytest.mark.asyncio
    async def test_empty_results(self):
        """Test a response without results yields a failed result."""
        client = make_client(ok_handler([], body={"success": True, "results": []}))

        result = await client.crawl_url("https://example.com")

        assert result["success"] is False
        assert result["error_message"] == "No result returned from Crawl4AI API"

    @pytest.mark.asyncio
    async def test_crawl_multiple_urls(self):
        """Test one request carries every URL and all results come back."""
        requests = []
        body = {
            "success": True,
            "results": [
                {"url": "https://a.com", "success": True},
                {"url": "https://b.com", "success": False, "error_message": "404"},
            ],
        }
        client = make_client(ok_handler(requests, body))

        results = await client.crawl_multiple_urls(["https://a.com", "https://b.com"])

        assert len(requests) == 1
        assert json.loads(requests[0].content)["urls"] == ["https://a.com", "https://b.com"]
        assert [r["url"] for r in results] == ["https://a.com", "https://b.com"]

    @pytest.mark.asyncio
    async def test_crawl_multiple_urls_failure_per_url(self):
        """Test a failed batch produces a failure for every URL."""
        client = make_client(lambda request: httpx.Response(503, text="busy"))

        results = await client.crawl_multiple_urls(["https://a.com", "https://b.com"])

        assert [r["url"] for r in results] == ["https://a.com", "https://b.com"]
        assert all(r["success"] is False for r in results)
        assert all(r["error_message"] == "HTTP 503: busy" for r in results)

    @pytest.mark.asyncio
    async def test_process_raw_html(self):
        """Test raw HTML is sent as a raw:// URL with the base URL."""
        requests = []
        body = {"success": True, "results": [{"url": "raw://<p>Hi</p>", "success": True}]}
        client = make_client(ok_handler(requests, body))

        result = await client.process_raw_html("<p>Hi</p>", "https://base.example")

        sent = json.loads(requests[0].content)
        assert sent["urls"] == ["raw://<p>Hi</p>"]
        assert sent["crawler_config"]["params"]["base_url"] == "https://base.example"
        assert result["url"] == "https://base.example"

    @pytest.mark.asyncio
    async def test_arun_sends_extraction_strategy(self):
        """Test arun puts strategy, selector and JS code in the crawler config."""
        requests = []
        client = make_client(ok_handler(requests))
        strategy = {"type": "RegexExtractionStrategy", "params": {"patterns": ["Email"]}}

        await client.arun("https://example.com", {
            "browser_config": {"headless": True},
            "extraction_strategy": strategy,
            "cache_mode": "bypass",
            "css_selector": "main",
            "js_code": "window.scrollTo(0, 1000);",
            "headers": {"Accept": "application/json"},
        })

        sent = json.loads(requests[0].content)
        params = sent["crawler_config"]["params"]
        assert params["extraction_strategy"] == strategy
        assert params["css_selector"] == "main"
        assert params["js_code"] == "window.scrollTo(0, 1000);"
        assert params["cache_mode"] == "bypass"
        assert sent["browser_config"]["params"]["headers"] == {"Accept": "application/json"}

    @pytest.mark.asyncio
    async def test_arun_accepts_legacy_result_key(self):
        """Test older servers answering with a single "result" are understood."""
        body = {"success": True, "result": {"url": "https://example.com", "success": True}}
        client = make_client(ok_handler([], body))

        result = await client.arun("https://example.com", {})

        assert result == {"url": "https://example.com", "success": True}

    @pytest.mark.asyncio
    async def test_page_timeout_extends_request_timeout(self):
        """Test long page timeouts widen the HTTP timeout."""
        client = make_client(ok_handler([]))

        timeout = client._request_timeout({"params": {"page_timeout": 120000}})

        assert timeout == 150.0
        assert client._request_timeout({"params": {}}) == 60.0


class TestHealthCheck:
    """Tests for the health endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_ok(self):
        """Test a 200 from the health endpoint means healthy."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"status": "ok"})

        client = make_client(handler)

        assert (await client.health_check_detailed())["healthy"] is True
        assert requests[0].url.path == "/monitor/health"

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self):
        """Test connection failures mean unhealthy."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)

        details = await client.health_check_detailed()

        assert details["healthy"] is False
        assert "refused" in details["error"]

    @pytest.mark.asyncio
    async def test_health_check_detailed(self):
        """Test container stats are unpacked."""
        body = {
            "status": "ok",
            "container": {"memory_percent": 41.5, "cpu_percent": 3.2, "uptime_seconds": 600},
        }
        client = make_client(lambda request: httpx.Response(200, json=body))

        details = await client.health_check_detailed()

        assert details == {
            "healthy": True,
            "status": "ok",
            "memory_percent": 41.5,
            "cpu_percent": 3.2,
            "uptime_seconds": 600,
        }

    @pytest.mark.asyncio
    async def test_health_check_detailed_http_error(self):
        """Test a non-200 reports the status code."""
        client = make_client(lambda request: httpx.Response(503))

        details = await client.health_check_detailed()

        assert details == {"healthy": False, "error": "HTTP 503"}

    @pytest.mark.parametrize("body", [
        {"status": "ok", "container": None},
        ["not", "an", "object"],
    ])
    @pytest.mark.asyncio
    async def test_health_check_detailed_without_stats(self, body):
        """Test a healthy reply without container stats reports empty stats."""
        client = make_client(lambda request: httpx.Response(200, json=body))

        details = await client.health_check_detailed()

        assert details["healthy"] is True
        assert details["memory_percent"] is None
        assert details["uptime_seconds"] is None
