"""Process Raw HTML operation."""

from typing import Any, Dict, List

from ...crawler.config import DEFAULT_RAW_HTML_BASE_URL
from ...crawler.formatters import format_crawl_result
from ...crawler.utils import create_crawler_run_config
from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import NodeProperty, show_when
from ..shared import get_crawl4ai_client
from .descriptions import output_options_property, raw_html_crawler_options_property

OPERATION = "processRawHtml"

DESCRIPTION: List[NodeProperty] = [
    NodeProperty(
        display_name="HTML Content",
        name="html",
        type="string",
        type_options={"rows": 8},
        required=True,
        default="",
        placeholder="<html><body><h1>Example</h1><p>Content</p></body></html>",
        description="The raw HTML content to process",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Base URL",
        name="baseUrl",
        type="string",
        default=DEFAULT_RAW_HTML_BASE_URL,
        description="The base URL to use for resolving relative links",
        display_options=show_when(operation=[OPERATION]),
    ),
    raw_html_crawler_options_property(OPERATION),
    output_options_property(OPERATION),
]


async def _process_item(ctx: ExecutionContext, i: int) -> Dict[str, Any]:
    html = ctx.get_node_parameter("html", i, "")
    base_url = ctx.get_node_parameter("baseUrl", i, DEFAULT_RAW_HTML_BASE_URL)
    crawler_options = ctx.get_node_parameter("crawlerOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    if not html:
        raise ctx.error("HTML content cannot be empty.", i)

    crawler_config = create_crawler_run_config(crawler_options)

    client = get_crawl4ai_client(ctx)
    result = await client.process_raw_html(html, base_url or DEFAULT_RAW_HTML_BASE_URL, crawler_config)

    return format_crawl_result(
        result,
        include_media=options.get("includeMedia") is True,
        verbose_response=options.get("verboseResponse") is True,
    )


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _process_item)
