"""JSON Extractor operation."""

import logging
import re
from typing import Any, Dict, List, Optional

from ...crawler.formatters import markdown_text
from ...crawler.utils import create_browser_config, normalize_cache_mode, safe_json_parse
from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import NodeProperty, PropertyOption, show_when
from ..shared import (
    browser_options_property,
    cache_mode_option,
    get_crawl4ai_client,
    url_property,
    validate_url,
)
from .strategies import create_json_extraction_strategy

logger = logging.getLogger(__name__)

OPERATION = "jsonExtractor"

SOURCE_DIRECT = "direct"
SOURCE_SCRIPT = "script"
SOURCE_JSONLD = "jsonld"

_EMBEDDED_JSON = re.compile(r"\{[\s\S]*\}|\[[\s\S]*\]")

DESCRIPTION: List[NodeProperty] = [
    url_property(OPERATION, "The URL of the JSON data to extract"),
    NodeProperty(
        display_name="JSON Path",
        name="jsonPath",
        type="string",
        default="",
        placeholder="data.items",
        description="Path to the JSON data to extract (leave empty for entire JSON response)",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Source Type",
        name="sourceType",
        type="options",
        options=[
            PropertyOption(name="Direct JSON URL", value=SOURCE_DIRECT,
                           description="URL returns JSON directly"),
            PropertyOption(name="JSON in Script Tag", value=SOURCE_SCRIPT,
                           description="JSON is embedded in a <script> tag"),
            PropertyOption(name="JSON-LD", value=SOURCE_JSONLD,
                           description="JSON-LD structured data"),
        ],
        default=SOURCE_DIRECT,
        description="Where to find the JSON data on the page",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Script Selector",
        name="scriptSelector",
        type="string",
        default="",
        placeholder='script#__NEXT_DATA__',
        description="CSS selector for the script tag containing JSON data",
        display_options=show_when(operation=[OPERATION], sourceType=[SOURCE_SCRIPT]),
    ),
    browser_options_property(OPERATION, js_code=True, stealth=False, viewport=False),
    NodeProperty(
        display_name="Options",
        name="options",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[OPERATION]),
        options=[
            cache_mode_option(),
            NodeProperty(
                display_name="Include Full Content",
                name="includeFullContent",
                type="boolean",
                default=False,
                description="Whether to include the full JSON content in addition to the extracted data",
            ),
            NodeProperty(
                display_name="Headers",
                name="headers",
                type="string",
                type_options={"rows": 4},
                default="",
                placeholder='{"Accept": "application/json"}',
                description="Headers to send with the request (JSON format)",
            ),
        ],
    ),
]


def parse_headers(ctx: ExecutionContext, headers: Any, i: int) -> Optional[Dict[str, Any]]:
    if not headers:
        return None
    if isinstance(headers, dict):
        return headers
    parsed = safe_json_parse(str(headers))
    if not isinstance(parsed, dict):
        raise ctx.error("Headers must be a valid JSON object.", i)
    return parsed


def parse_direct_json(result: Dict[str, Any]) -> Any:
    """Find the JSON document in a crawl of a URL that serves JSON."""
    for candidate in (result.get("extracted_content"), result.get("text"), markdown_text(result)):
        if not candidate:
            continue
        if not isinstance(candidate, str):
            return candidate
        parsed = safe_json_parse(candidate)
        if parsed is not None:
            return parsed

    text = result.get("text") or markdown_text(result)
    if not text:
        return None
    # Browsers wrap JSON responses in markup
    match = _EMBEDDED_JSON.search(text)
    if not match:
        return None
    parsed = safe_json_parse(match.group(0))
    if parsed is not None:
        return parsed
    return {"content": text}


def parse_script_json(result: Dict[str, Any]) -> Any:
    """Parse the JSON inside the first script block the strategy extracted."""
    extracted = result.get("extracted_content")
    if not extracted:
        return None
    if isinstance(extracted, str):
        extracted = safe_json_parse(extracted)
    if not isinstance(extracted, list) or not extracted:
        return {"error": "Failed to parse JSON from script tag"}

    first = extracted[0]
    content = first.get("content") if isinstance(first, dict) else None
    parsed = safe_json_parse(content) if isinstance(content, str) else None
    if parsed is None:
        logger.debug("Script tag content is not JSON")
        return {"error": "Failed to parse JSON from script tag"}
    return parsed


def apply_json_path(data: Any, json_path: str) -> Any:
    """Follow a dotted path (e.g. "data.items") into the data."""
    current = data
    for part in json_path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current


async def _extract_item(ctx: ExecutionContext, i: int) -> Dict[str, Any]:
    url = ctx.get_node_parameter("url", i, "")
    json_path = ctx.get_node_parameter("jsonPath", i, "")
    source_type = ctx.get_node_parameter("sourceType", i, SOURCE_DIRECT)
    script_selector = ctx.get_node_parameter("scriptSelector", i, "")
    browser_options = ctx.get_node_parameter("browserOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    url = validate_url(ctx, url, i)
    if source_type == SOURCE_SCRIPT and not script_selector:
        raise ctx.error(
            'Script selector is required when source type is "JSON in Script Tag".', i
        )
    headers = parse_headers(ctx, options.get("headers"), i)

    extraction_strategy = None
    if source_type != SOURCE_DIRECT:
        extraction_strategy = create_json_extraction_strategy(source_type, script_selector)

    client = get_crawl4ai_client(ctx)
    result = await client.arun(url, {
        "browser_config": create_browser_config(browser_options),
        "extraction_strategy": extraction_strategy,
        "cache_mode": normalize_cache_mode(options.get("cacheMode")),
        "js_code": browser_options.get("jsCode"),
        "headers": headers,
    })

    json_data = None
    if result.get("success"):
        if source_type == SOURCE_DIRECT:
            json_data = parse_direct_json(result)
        else:
            json_data = parse_script_json(result)
        if json_path and json_data is not None:
            json_data = apply_json_path(json_data, json_path)

    output: Dict[str, Any] = {"url": url, "success": bool(result.get("success"))}
    if not result.get("success"):
        output["error"] = result.get("error_message") or "Unknown error"
    elif json_data is not None:
        output["data"] = json_data
        if options.get("includeFullContent") is True:
            output["fullContent"] = result.get("text") or result.get("extracted_content")
    else:
        output["error"] = "No JSON data found or failed to parse JSON"
        output["success"] = False
    return output


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _extract_item)
