"""Option collections shared by the Basic Crawler operations."""

from typing import List

from ...crawler.config import DEFAULT_MAX_RETRIES, DEFAULT_PAGE_TIMEOUT
from ...properties import NodeProperty, show_when
from ..shared import cache_mode_option, css_selector_option


def _exclusion_options() -> List[NodeProperty]:
    return [
        NodeProperty(
            display_name="Exclude External Links",
            name="excludeExternalLinks",
            type="boolean",
            default=False,
            description="Whether to exclude external links from the result",
        ),
        NodeProperty(
            display_name="Excluded Tags",
            name="excludedTags",
            type="string",
            default="",
            placeholder="nav,footer,aside",
            description="Comma-separated list of HTML tags to exclude from processing",
        ),
    ]


def _word_count_option() -> NodeProperty:
    return NodeProperty(
        display_name="Word Count Threshold",
        name="wordCountThreshold",
        type="number",
        default=0,
        description="Minimum number of words for content to be included",
    )


def crawler_options_property(operation: str) -> NodeProperty:
    """The full `crawlerOptions` collection used by the URL crawling operations."""
    options = [
        cache_mode_option(),
        NodeProperty(
            display_name="Check Robots.txt",
            name="checkRobotsTxt",
            type="boolean",
            default=False,
            description="Whether to respect robots.txt rules",
        ),
        css_selector_option(),
        *_exclusion_options(),
        NodeProperty(
            display_name="JavaScript Code",
            name="jsCode",
            type="string",
            type_options={"rows": 4},
            default="",
            placeholder='document.querySelector("button.load-more").click();',
            description="JavaScript code to execute on the page after load",
        ),
        NodeProperty(
            display_name="JavaScript Only Mode",
            name="jsOnly",
            type="boolean",
            default=False,
            description="Whether to only execute JavaScript without crawling",
        ),
        NodeProperty(
            display_name="Max Retries",
            name="maxRetries",
            type="number",
            default=DEFAULT_MAX_RETRIES,
            description="Maximum number of retries for failed requests",
        ),
        NodeProperty(
            display_name="Page Timeout (Ms)",
            name="pageTimeout",
            type="number",
            default=DEFAULT_PAGE_TIMEOUT,
            description="Maximum time to wait for the page to load",
        ),
        NodeProperty(
            display_name="Request Timeout (Ms)",
            name="requestTimeout",
            type="number",
            default=DEFAULT_PAGE_TIMEOUT,
            description="Maximum time to wait for network requests",
        ),
        NodeProperty(
            display_name="Session ID",
            name="sessionId",
            type="string",
            default="",
            placeholder="my-session-ID",
            description="ID to maintain browser state across multiple crawls (for multi-step crawling)",
        ),
        _word_count_option(),
    ]
    return NodeProperty(
        display_name="Crawler Options",
        name="crawlerOptions",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[operation]),
        options=options,
    )


def raw_html_crawler_options_property(operation: str) -> NodeProperty:
    """Crawler options that still make sense when no page is fetched."""
    return NodeProperty(
        display_name="Crawler Options",
        name="crawlerOptions",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[operation]),
        options=[css_selector_option(), *_exclusion_options(), _word_count_option()],
    )


def output_options_property(operation: str) -> NodeProperty:
    return NodeProperty(
        display_name="Options",
        name="options",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[operation]),
        options=[
            NodeProperty(
                display_name="Include Media Data",
                name="includeMedia",
                type="boolean",
                default=False,
                description="Whether to include media data in output (images, videos)",
            ),
            NodeProperty(
                display_name="Verbose Response",
                name="verboseResponse",
                type="boolean",
                default=False,
                description="Whether to include detailed data in output (HTML, status codes, etc.)",
            ),
        ],
    )
