"""Crawl4AI: Basic Crawler node."""

from typing import Dict, List

from ...execution import Operation
from ...properties import NodeProperty, PropertyOption
from ..base import Node, NodeDescription
from . import crawl_multiple_urls, crawl_single_url, health_check, process_raw_html

OPERATIONS: Dict[str, Operation] = {
    crawl_single_url.OPERATION: crawl_single_url.execute,
    crawl_multiple_urls.OPERATION: crawl_multiple_urls.execute,
    process_raw_html.OPERATION: process_raw_html.execute,
    health_check.OPERATION: health_check.execute,
}

PROPERTIES: List[NodeProperty] = [
    NodeProperty(
        display_name="Operation",
        name="operation",
        type="options",
        no_data_expression=True,
        options=[
            PropertyOption(
                name="Crawl Single URL",
                value=crawl_single_url.OPERATION,
                description="Crawl a single URL and extract content",
                action="Crawl a single URL",
            ),
            PropertyOption(
                name="Crawl Multiple URLs",
                value=crawl_multiple_urls.OPERATION,
                description="Crawl multiple URLs and extract content",
                action="Crawl multiple URLs",
            ),
            PropertyOption(
                name="Process Raw HTML",
                value=process_raw_html.OPERATION,
                description="Process provided HTML content without crawling",
                action="Process raw HTML",
            ),
            PropertyOption(
                name="Health Check",
                value=health_check.OPERATION,
                description="Check that the Crawl4AI server is reachable and healthy",
                action="Check server health",
            ),
        ],
        default=crawl_single_url.OPERATION,
    ),
    *crawl_single_url.DESCRIPTION,
    *crawl_multiple_urls.DESCRIPTION,
    *process_raw_html.DESCRIPTION,
    *health_check.DESCRIPTION,
]


class BasicCrawlerNode(Node):
    """Crawl websites using Crawl4AI."""

    description = NodeDescription(
        display_name="Crawl4AI: Basic Crawler",
        name="crawl4aiBasicCrawler",
        description="Crawl websites using Crawl4AI",
        defaults={"name": "Crawl4AI: Basic Crawler"},
        properties=PROPERTIES,
    )
    operations = OPERATIONS
