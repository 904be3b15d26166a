"""Crawl Multiple URLs operation.

All URLs of an item go to the service in a single request; every crawl
result becomes its own output item, paired with the input item.
"""

from typing import Any, Dict, List

from ...crawler.formatters import format_crawl_result
from ...crawler.utils import (
    create_browser_config,
    create_crawler_run_config,
    is_valid_url,
    split_csv,
)
from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import NodeProperty, show_when
from ..shared import browser_options_property, get_crawl4ai_client
from .descriptions import crawler_options_property, output_options_property

OPERATION = "crawlMultipleUrls"

DESCRIPTION: List[NodeProperty] = [
    NodeProperty(
        display_name="URLs",
        name="urls",
        type="string",
        required=True,
        default="",
        placeholder="https://example.com, https://example.org",
        description="Comma-separated list of URLs to crawl",
        display_options=show_when(operation=[OPERATION]),
    ),
    browser_options_property(OPERATION, user_agent=True),
    crawler_options_property(OPERATION),
    output_options_property(OPERATION),
]


def parse_urls(ctx: ExecutionContext, urls_string: str, i: int) -> List[str]:
    """Split and validate the comma-separated URL list."""
    if not urls_string:
        raise ctx.error("URLs cannot be empty.", i)

    urls = split_csv(urls_string)
    if not urls:
        raise ctx.error("No valid URLs provided.", i)

    invalid = [url for url in urls if not is_valid_url(url)]
    if invalid:
        raise ctx.error(f"Invalid URLs: {', '.join(invalid)}", i)

    return urls


async def _crawl_item(ctx: ExecutionContext, i: int) -> List[Dict[str, Any]]:
    urls_string = ctx.get_node_parameter("urls", i, "")
    browser_options = ctx.get_node_parameter("browserOptions", i, {})
    crawler_options = ctx.get_node_parameter("crawlerOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    urls = parse_urls(ctx, urls_string, i)

    browser_config = create_browser_config(browser_options)
    crawler_config = create_crawler_run_config(crawler_options)

    client = get_crawl4ai_client(ctx)
    results = await client.crawl_multiple_urls(urls, crawler_config, browser_config)

    return [
        format_crawl_result(
            result,
            include_media=options.get("includeMedia") is True,
            verbose_response=options.get("verboseResponse") is True,
        )
        for result in results
    ]


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _crawl_item)
