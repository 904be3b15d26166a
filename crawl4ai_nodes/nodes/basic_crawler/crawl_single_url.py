"""Crawl Single URL operation."""

from typing import Any, Dict, List

from ...crawler.formatters import format_crawl_result
from ...crawler.utils import create_browser_config, create_crawler_run_config
from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import NodeProperty
from ..shared import browser_options_property, get_crawl4ai_client, url_property, validate_url
from .descriptions import crawler_options_property, output_options_property

OPERATION = "crawlSingleUrl"

DESCRIPTION: List[NodeProperty] = [
    url_property(OPERATION),
    browser_options_property(OPERATION, user_agent=True),
    crawler_options_property(OPERATION),
    output_options_property(OPERATION),
]


async def _crawl_item(ctx: ExecutionContext, i: int) -> Dict[str, Any]:
    url = ctx.get_node_parameter("url", i, "")
    browser_options = ctx.get_node_parameter("browserOptions", i, {})
    crawler_options = ctx.get_node_parameter("crawlerOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    url = validate_url(ctx, url, i)

    browser_config = create_browser_config(browser_options)
    crawler_config = create_crawler_run_config(crawler_options)

    client = get_crawl4ai_client(ctx)
    result = await client.crawl_url(url, crawler_config, browser_config)

    return format_crawl_result(
        result,
        include_media=options.get("includeMedia") is True,
        verbose_response=options.get("verboseResponse") is True,
    )


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _crawl_item)
