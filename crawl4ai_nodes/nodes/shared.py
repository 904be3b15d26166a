"""Descriptors and helpers shared by the node operations."""

from typing import List, Optional

from ..crawler.client import Crawl4AIClient
from ..crawler.config import DEFAULT_BROWSER_TIMEOUT, DEFAULT_VIEWPORT_HEIGHT, DEFAULT_VIEWPORT_WIDTH
from ..crawler.utils import is_valid_url
from ..execution import ExecutionContext
from ..properties import NodeProperty, PropertyOption, show_when


def get_crawl4ai_client(ctx: ExecutionContext) -> Crawl4AIClient:
    """Create a Crawl4AI client from the execution's credentials."""
    return Crawl4AIClient.from_credentials(ctx.get_credentials())


def validate_url(ctx: ExecutionContext, url: str, item_index: int) -> str:
    """Reject empty and malformed URLs with the node's standard messages."""
    if not url:
        raise ctx.error("URL cannot be empty.", item_index)
    if not is_valid_url(url):
        raise ctx.error(f"Invalid URL: {url}", item_index)
    return url.strip()


def url_property(operation: str, description: str = "The URL to crawl") -> NodeProperty:
    return NodeProperty(
        display_name="URL",
        name="url",
        type="string",
        required=True,
        default="",
        placeholder="https://example.com",
        description=description,
        display_options=show_when(operation=[operation]),
    )


# Cache mode choices as shown by the crawler and CSS/JSON extractors
SIMPLE_CACHE_MODES = [
    PropertyOption(name="Enabled (Read/Write)", value="enabled",
                   description="Use cache if available, save new results to cache"),
    PropertyOption(name="Bypass (Force Fresh)", value="bypass",
                   description="Ignore cache, always fetch fresh content"),
    PropertyOption(name="Only (Read Only)", value="only",
                   description="Only use cache, do not make new requests"),
]

# Cache mode choices as shown by the LLM and regex extractors
FULL_CACHE_MODES = [
    PropertyOption(name="Bypass (Skip Cache)", value="BYPASS"),
    PropertyOption(name="Disabled (No Cache)", value="DISABLED"),
    PropertyOption(name="Enabled (Read/Write)", value="ENABLED"),
    PropertyOption(name="Read Only", value="READ_ONLY"),
    PropertyOption(name="Write Only", value="WRITE_ONLY"),
]


def cache_mode_option(full: bool = False) -> NodeProperty:
    return NodeProperty(
        display_name="Cache Mode",
        name="cacheMode",
        type="options",
        options=FULL_CACHE_MODES if full else SIMPLE_CACHE_MODES,
        default="ENABLED" if full else "enabled",
        description="How to use the cache when crawling",
    )


def browser_options_property(
    operation: str,
    browser_type: bool = False,
    js_code: bool = False,
    user_agent: bool = False,
    stealth: bool = True,
    viewport: bool = True,
    timeout_default: int = DEFAULT_BROWSER_TIMEOUT,
) -> NodeProperty:
    """The `browserOptions` collection; each operation picks the fields it offers."""
    options: List[NodeProperty] = []

    if browser_type:
        options.append(NodeProperty(
            display_name="Browser Type",
            name="browserType",
            type="options",
            options=[
                PropertyOption(name="Chromium", value="chromium"),
                PropertyOption(name="Firefox", value="firefox"),
                PropertyOption(name="Webkit", value="webkit"),
            ],
            default="chromium",
            description="Which browser engine the service should use",
        ))
    options.append(NodeProperty(
        display_name="Enable JavaScript",
        name="javaScriptEnabled",
        type="boolean",
        default=True,
        description="Whether to enable JavaScript execution",
    ))
    if stealth:
        options.append(NodeProperty(
            display_name="Enable Stealth Mode",
            name="enableStealth",
            type="boolean",
            default=False,
            description="Whether to hide automation fingerprints to get past basic bot detection",
        ))
    options.append(NodeProperty(
        display_name="Headless Mode",
        name="headless",
        type="boolean",
        default=True,
        description="Whether to run browser in headless mode",
    ))
    if js_code:
        options.append(NodeProperty(
            display_name="JavaScript Code",
            name="jsCode",
            type="string",
            type_options={"rows": 4},
            default="",
            placeholder='document.querySelector("button.load-more").click();',
            description="JavaScript code to execute on the page after load",
        ))
    options.append(NodeProperty(
        display_name="Timeout (Ms)",
        name="timeout",
        type="number",
        default=timeout_default,
        description="Maximum time to wait for the browser to load the page",
    ))
    if user_agent:
        options.append(NodeProperty(
            display_name="User Agent",
            name="userAgent",
            type="string",
            default="",
            placeholder="Mozilla/5.0 (Windows NT 10.0; Win64; x64) ...",
            description="The user agent to use (leave empty for default)",
        ))
    if viewport:
        options.extend([
            NodeProperty(
                display_name="Viewport Height",
                name="viewportHeight",
                type="number",
                default=DEFAULT_VIEWPORT_HEIGHT,
                description="The height of the browser viewport",
            ),
            NodeProperty(
                display_name="Viewport Width",
                name="viewportWidth",
                type="number",
                default=DEFAULT_VIEWPORT_WIDTH,
                description="The width of the browser viewport",
            ),
        ])

    return NodeProperty(
        display_name="Browser Options",
        name="browserOptions",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[operation]),
        options=options,
    )


def include_full_text_option(description: Optional[str] = None) -> NodeProperty:
    return NodeProperty(
        display_name="Include Original Text",
        name="includeFullText",
        type="boolean",
        default=False,
        description=description or "Whether to include the original webpage text in output",
    )


def css_selector_option() -> NodeProperty:
    return NodeProperty(
        display_name="CSS Selector",
        name="cssSelector",
        type="string",
        default="",
        placeholder="article.content",
        description="CSS selector to focus on specific content (leave empty for full page)",
    )
