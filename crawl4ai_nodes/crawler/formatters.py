"""Reshape Crawl4AI crawl results into node output items.

Crawl4AI input (one entry of "results"):
{
    "url": "...",
    "success": true,
    "status_code": 200,
    "markdown": {"raw_markdown": "...", "fit_markdown": "..."} | "...",
    "html": "...",
    "cleaned_html": "...",
    "links": {"internal": [...], "external": [...]},
    "media": {"images": [...], "videos": [...]},
    "extracted_content": "[...]",
    "metadata": {"title": "...", "description": "..."}
}
"""

import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def markdown_text(result: Dict[str, Any]) -> str:
    """Extract markdown - newer servers return a dict with nested keys."""
    markdown_data = result.get("markdown") or ""
    if isinstance(markdown_data, dict):
        # Prefer raw_markdown, fallback to fit_markdown
        return markdown_data.get("raw_markdown", "") or markdown_data.get("fit_markdown", "") or ""
    return markdown_data


def _title(result: Dict[str, Any]) -> str:
    metadata = result.get("metadata") or {}
    return result.get("title") or metadata.get("title") or ""


def _status_code(result: Dict[str, Any]) -> Optional[int]:
    return result.get("statusCode") or result.get("status_code") or None


def format_crawl_result(
    result: Dict[str, Any],
    include_media: bool = False,
    verbose_response: bool = False,
) -> Dict[str, Any]:
    """
    Format a crawl result for node output.

    Args:
        result: Crawl result from Crawl4AI
        include_media: Whether to include images and videos
        verbose_response: Whether to include HTML, timing and metadata

    Returns:
        {
            "url": str, "success": bool, "statusCode": int | None,
            "title": str, "content": str (markdown), "text": str,
            "error": str (failures only),
            "extractedContent": parsed JSON or raw string,
            "links": {"internal": [], "external": []},
            "media": {...} (include_media), "html"/"cleanedHtml"/... (verbose)
        }
    """
    formatted: Dict[str, Any] = {
        "url": result.get("url"),
        "success": bool(result.get("success")),
        "statusCode": _status_code(result),
        "title": _title(result),
        "content": markdown_text(result),
        "text": result.get("text") or "",
    }

    if not result.get("success") and result.get("error_message"):
        formatted["error"] = result["error_message"]

    extracted = result.get("extracted_content")
    if extracted:
        try:
            formatted["extractedContent"] = json.loads(extracted)
        except (TypeError, ValueError):
            formatted["extractedContent"] = extracted

    links = result.get("links")
    if links:
        formatted["links"] = {
            "internal": links.get("internal", []),
            "external": links.get("external", []),
        }

    media = result.get("media")
    if include_media and media:
        formatted["media"] = {
            "images": media.get("images", []),
            "videos": media.get("videos", []),
        }

    if verbose_response:
        formatted["html"] = result.get("html") or ""
        formatted["cleanedHtml"] = result.get("cleaned_html") or ""
        formatted["crawlTime"] = result.get("crawl_time")
        formatted["metadata"] = result.get("metadata") or {}

    return formatted


def parse_extracted_json(result: Dict[str, Any]) -> Optional[Any]:
    """Parse `extracted_content`; None when missing or not JSON."""
    extracted = result.get("extracted_content")
    if not extracted:
        return None
    if not isinstance(extracted, str):
        return extracted
    try:
        return json.loads(extracted)
    except ValueError:
        logger.debug(f"Extracted content from {result.get('url')} is not JSON")
        return None


def format_extraction_result(
    result: Dict[str, Any],
    extracted_data: Optional[Any],
    include_full_text: bool = False,
) -> Dict[str, Any]:
    """
    Format an extraction result for node output.

    Object data is merged into the output; list data (most strategies
    return a list of matches) is placed under "data".
    """
    formatted: Dict[str, Any] = {
        "url": result.get("url"),
        "success": bool(result.get("success")),
        "statusCode": _status_code(result),
    }

    if not result.get("success") and result.get("error_message"):
        formatted["error"] = result["error_message"]
        return formatted

    if isinstance(extracted_data, dict):
        formatted.update(extracted_data)
    elif extracted_data is not None:
        formatted["data"] = extracted_data
    else:
        formatted["extractionFailed"] = True

    if include_full_text:
        formatted["originalText"] = result.get("text") or markdown_text(result)
        formatted["title"] = _title(result)

    return formatted
