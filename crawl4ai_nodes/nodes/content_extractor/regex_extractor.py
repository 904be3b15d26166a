"""Regex Extractor operation."""

from typing import Any, Dict, List

from ...crawler.formatters import format_extraction_result, parse_extracted_json
from ...crawler.utils import create_browser_config, normalize_cache_mode
from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import FixedCollectionGroup, NodeProperty, PropertyOption, show_when
from ..shared import (
    browser_options_property,
    cache_mode_option,
    css_selector_option,
    get_crawl4ai_client,
    include_full_text_option,
    url_property,
    validate_url,
)
from .strategies import create_regex_extraction_strategy

OPERATION = "regexExtractor"

PATTERN_BUILTIN = "builtin"
PATTERN_CUSTOM = "custom"

# Pattern names understood by the service's RegexExtractionStrategy
BUILTIN_PATTERNS = [
    ("Credit Card", "CreditCard", "Extract credit card numbers"),
    ("Currency", "Currency", "Extract currency values"),
    ("Date (ISO)", "DateIso", "Extract ISO format dates"),
    ("Date (US)", "DateUS", "Extract US format dates"),
    ("Email", "Email", "Extract email addresses"),
    ("Hashtag", "Hashtag", "Extract hashtags"),
    ("Hex Color", "HexColor", "Extract HTML hex colors"),
    ("IBAN", "Iban", "Extract bank account numbers (IBAN)"),
    ("IP Address (IPv4)", "IPv4", "Extract IPv4 addresses"),
    ("IP Address (IPv6)", "IPv6", "Extract IPv6 addresses"),
    ("MAC Address", "MacAddr", "Extract MAC addresses"),
    ("Number", "Number", "Extract numeric values"),
    ("Percentage", "Percentage", "Extract percentage values"),
    ("Phone (International)", "PhoneIntl", "Extract international phone numbers"),
    ("Phone (US)", "PhoneUS", "Extract US phone numbers"),
    ("Postal Code (UK)", "PostalUK", "Extract UK postal codes"),
    ("Postal Code (US)", "PostalUS", "Extract US postal codes"),
    ("Time (24h)", "Time24h", "Extract 24-hour time format"),
    ("Twitter Handle", "TwitterHandle", "Extract Twitter handles"),
    ("URL", "Url", "Extract HTTP/HTTPS URLs"),
    ("UUID", "Uuid", "Extract UUIDs"),
]

DESCRIPTION: List[NodeProperty] = [
    url_property(OPERATION, "The URL to extract content from using regex patterns"),
    NodeProperty(
        display_name="Pattern Type",
        name="patternType",
        type="options",
        options=[
            PropertyOption(name="Built-in Patterns", value=PATTERN_BUILTIN,
                           description="Use pre-defined regex patterns for common data types"),
            PropertyOption(name="Custom Patterns", value=PATTERN_CUSTOM,
                           description="Define your own regex patterns"),
        ],
        default=PATTERN_BUILTIN,
        description="Choose between built-in or custom regex patterns",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Built-in Patterns",
        name="builtinPatterns",
        type="multiOptions",
        options=[
            PropertyOption(name=name, value=value, description=description)
            for name, value, description in BUILTIN_PATTERNS
        ],
        default=["Email", "Url"],
        description="Select built-in patterns to use for extraction",
        display_options=show_when(operation=[OPERATION], patternType=[PATTERN_BUILTIN]),
    ),
    NodeProperty(
        display_name="Custom Patterns",
        name="customPatterns",
        type="fixedCollection",
        placeholder="Add Pattern",
        type_options={"multipleValues": True},
        default={},
        display_options=show_when(operation=[OPERATION], patternType=[PATTERN_CUSTOM]),
        options=[
            FixedCollectionGroup(
                name="patternValues",
                display_name="Pattern",
                values=[
                    NodeProperty(
                        display_name="Label",
                        name="label",
                        type="string",
                        required=True,
                        default="",
                        placeholder="product_code",
                        description="Label for this pattern (used as the key in results)",
                    ),
                    NodeProperty(
                        display_name="Regex Pattern",
                        name="pattern",
                        type="string",
                        required=True,
                        default="",
                        placeholder=r"PRD-\d{6}",
                        description="Regular expression pattern",
                    ),
                ],
            ),
        ],
    ),
    browser_options_property(OPERATION, js_code=True),
    NodeProperty(
        display_name="Options",
        name="options",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[OPERATION]),
        options=[
            cache_mode_option(full=True),
            css_selector_option(),
            include_full_text_option(),
        ],
    ),
]


def _custom_patterns(pattern_values: List[Dict[str, Any]]) -> Dict[str, str]:
    # Rows missing a label or a pattern are skipped
    return {
        str(row["label"]): str(row["pattern"])
        for row in pattern_values
        if row.get("label") and row.get("pattern")
    }


async def _extract_item(ctx: ExecutionContext, i: int) -> Dict[str, Any]:
    url = ctx.get_node_parameter("url", i, "")
    pattern_type = ctx.get_node_parameter("patternType", i, PATTERN_BUILTIN)
    browser_options = ctx.get_node_parameter("browserOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    url = validate_url(ctx, url, i)

    if pattern_type == PATTERN_CUSTOM:
        pattern_values = ctx.get_node_parameter("customPatterns.patternValues", i, [])
        custom_patterns = _custom_patterns(pattern_values or [])
        if not custom_patterns:
            raise ctx.error("At least one custom pattern must be defined.", i)
        extraction_strategy = create_regex_extraction_strategy(custom_patterns=custom_patterns)
    else:
        builtin_patterns = ctx.get_node_parameter("builtinPatterns", i, [])
        if not builtin_patterns:
            raise ctx.error("At least one built-in pattern must be selected.", i)
        extraction_strategy = create_regex_extraction_strategy(builtin_patterns=builtin_patterns)

    client = get_crawl4ai_client(ctx)
    result = await client.arun(url, {
        "browser_config": create_browser_config(browser_options),
        "extraction_strategy": extraction_strategy,
        "cache_mode": normalize_cache_mode(options.get("cacheMode")),
        "js_code": browser_options.get("jsCode"),
        "css_selector": options.get("cssSelector"),
    })

    return format_extraction_result(
        result, parse_extracted_json(result), options.get("includeFullText") is True
    )


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _extract_item)
