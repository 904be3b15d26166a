"""Unit tests for crawl result formatting."""

from crawl4ai_nodes.crawler.formatters import (
    format_crawl_result,
    format_extraction_result,
    markdown_text,
    parse_extracted_json,
)


class TestFormatCrawlResult:
    """Tests for crawl result reshaping."""

    def test_format_success_basic(self, crawl_result):
        """Test basic successful result formatting."""
        result = format_crawl_result(crawl_result)

        assert result["url"] == "https://example.com"
        assert result["success"] is True
        assert result["statusCode"] == 200
        assert result["title"] == "Example Domain"
        assert result["content"] == "# Example\n\nHello"
        assert result["text"] == "Example Hello"
        assert result["links"] == {"internal": [{"href": "/about"}], "external": []}
        assert "error" not in result

    def test_media_is_opt_in(self, crawl_result):
        """Test media is only included when requested."""
        assert "media" not in format_crawl_result(crawl_result)

        result = format_crawl_result(crawl_result, include_media=True)

        assert result["media"] == {"images": [{"src": "/logo.png"}], "videos": []}

    def test_verbose_fields(self, crawl_result):
        """Test verbose output adds HTML, timing and metadata."""
        crawl_result["crawl_time"] = 1.25

        result = format_crawl_result(crawl_result, verbose_response=True)

        assert result["html"] == "<html><body><h1>Example</h1></body></html>"
        assert result["cleanedHtml"] == "<h1>Example</h1>"
        assert result["crawlTime"] == 1.25
        assert result["metadata"]["description"] == "An example"

    def test_markdown_string(self):
        """Test older servers returning markdown as a plain string."""
        result = format_crawl_result({"url": "https://example.com", "success": True, "markdown": "# Plain"})

        assert result["content"] == "# Plain"

    def test_fit_markdown_fallback(self):
        """Test fit_markdown is used when raw_markdown is empty."""
        assert markdown_text({"markdown": {"raw_markdown": "", "fit_markdown": "# Fit"}}) == "# Fit"

    def test_failure_response(self):
        """Test formatting of a failed crawl."""
        result = format_crawl_result({
            "url": "https://example.com",
            "success": False,
            "error_message": "Connection timeout",
        })

        assert result["success"] is False
        assert result["error"] == "Connection timeout"
        assert result["content"] == ""

    def test_extracted_content_is_parsed(self):
        """Test JSON extracted content is decoded, other text kept as is."""
        parsed = format_crawl_result({"success": True, "extracted_content": '[{"a": 1}]'})
        raw = format_crawl_result({"success": True, "extracted_content": "not json"})

        assert parsed["extractedContent"] == [{"a": 1}]
        assert raw["extractedContent"] == "not json"


class TestParseExtractedJson:
    """Tests for extracted content decoding."""

    def test_parse_list(self):
        """Test a JSON list is decoded."""
        assert parse_extracted_json({"extracted_content": '[{"title": "A"}]'}) == [{"title": "A"}]

    def test_missing_content(self):
        """Test missing content yields None."""
        assert parse_extracted_json({"success": True}) is None

    def test_invalid_json(self):
        """Test undecodable content yields None."""
        assert parse_extracted_json({"extracted_content": "{broken"}) is None


class TestFormatExtractionResult:
    """Tests for extraction result reshaping."""

    def test_list_data_goes_under_data(self, crawl_result):
        """Test list matches are placed under "data"."""
        result = format_extraction_result(crawl_result, [{"title": "A"}, {"title": "B"}])

        assert result["success"] is True
        assert result["statusCode"] == 200
        assert result["data"] == [{"title": "A"}, {"title": "B"}]

    def test_dict_data_is_merged(self, crawl_result):
        """Test object data is merged into the output."""
        result = format_extraction_result(crawl_result, {"title": "A", "price": 10})

        assert result["title"] == "A"
        assert result["price"] == 10
        assert "data" not in result

    def test_extraction_failed(self, crawl_result):
        """Test a missing parse result is flagged."""
        result = format_extraction_result(crawl_result, None)

        assert result["extractionFailed"] is True

    def test_error_short_circuits(self):
        """Test failed crawls only report the error."""
        result = format_extraction_result(
            {"url": "https://example.com", "success": False, "error_message": "HTTP 500: boom"},
            [{"title": "ignored"}],
            include_full_text=True,
        )

        assert result == {
            "url": "https://example.com",
            "success": False,
            "statusCode": None,
            "error": "HTTP 500: boom",
        }

    def test_include_full_text(self, crawl_result):
        """Test original text and title are added on request."""
        result = format_extraction_result(crawl_result, [], include_full_text=True)

        assert result["originalText"] == "Example Hello"
        assert result["title"] == "Example Domain"
