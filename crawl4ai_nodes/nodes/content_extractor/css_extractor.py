"""CSS Selector Extractor operation."""

from typing import Any, Dict, List

from ...crawler.formatters import format_extraction_result, parse_extracted_json
from ...crawler.utils import create_browser_config, normalize_cache_mode
from ...execution import ExecutionContext, Item, execute_per_item
from ...properties import FixedCollectionGroup, NodeProperty, PropertyOption, show_when
from ..shared import (
    browser_options_property,
    cache_mode_option,
    get_crawl4ai_client,
    include_full_text_option,
    url_property,
    validate_url,
)
from .strategies import clean_extracted_data, create_css_extraction_strategy

OPERATION = "cssExtractor"

SCHEMA_NAME = "extracted_items"

DESCRIPTION: List[NodeProperty] = [
    url_property(OPERATION, "The URL to extract content from"),
    NodeProperty(
        display_name="Base Selector",
        name="baseSelector",
        type="string",
        required=True,
        default="",
        placeholder="div.product-item",
        description="CSS selector for the repeating element (e.g., product items, article cards)",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Fields",
        name="fields",
        type="fixedCollection",
        placeholder="Add Field",
        type_options={"multipleValues": True},
        default={},
        display_options=show_when(operation=[OPERATION]),
        options=[
            FixedCollectionGroup(
                name="fieldsValues",
                display_name="Fields",
                values=[
                    NodeProperty(
                        display_name="Field Name",
                        name="name",
                        type="string",
                        required=True,
                        default="",
                        placeholder="title",
                        description="Name of the field to extract",
                    ),
                    NodeProperty(
                        display_name="CSS Selector",
                        name="selector",
                        type="string",
                        required=True,
                        default="",
                        placeholder="h3.title",
                        description="CSS selector relative to the base selector",
                    ),
                    NodeProperty(
                        display_name="Field Type",
                        name="fieldType",
                        type="options",
                        options=[
                            PropertyOption(name="Text", value="text",
                                           description="Extract text content"),
                            PropertyOption(name="HTML", value="html",
                                           description="Extract HTML content"),
                            PropertyOption(name="Attribute", value="attribute",
                                           description="Extract an attribute value"),
                        ],
                        default="text",
                        description="Type of data to extract",
                    ),
                    NodeProperty(
                        display_name="Attribute Name",
                        name="attribute",
                        type="string",
                        default="href",
                        placeholder="href",
                        description="Name of the attribute to extract",
                        display_options=show_when(fieldType=["attribute"]),
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
            cache_mode_option(),
            NodeProperty(
                display_name="Clean Text",
                name="cleanText",
                type="boolean",
                default=True,
                description="Whether to clean and normalize extracted text (remove extra spaces, newlines)",
            ),
            include_full_text_option(),
        ],
    ),
]


def _schema_fields(fields_values: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "name": field.get("name"),
            "selector": field.get("selector"),
            "type": field.get("fieldType") or "text",
            "attribute": field.get("attribute"),
        }
        for field in fields_values
    ]


async def _extract_item(ctx: ExecutionContext, i: int) -> Dict[str, Any]:
    url = ctx.get_node_parameter("url", i, "")
    base_selector = ctx.get_node_parameter("baseSelector", i, "")
    fields_values = ctx.get_node_parameter("fields.fieldsValues", i, [])
    browser_options = ctx.get_node_parameter("browserOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    url = validate_url(ctx, url, i)
    if not base_selector:
        raise ctx.error("Base selector cannot be empty.", i)
    if not fields_values:
        raise ctx.error("At least one field must be defined.", i)

    extraction_strategy = create_css_extraction_strategy(
        base_selector, _schema_fields(fields_values), name=SCHEMA_NAME
    )

    client = get_crawl4ai_client(ctx)
    result = await client.arun(url, {
        "browser_config": create_browser_config(browser_options),
        "extraction_strategy": extraction_strategy,
        "cache_mode": normalize_cache_mode(options.get("cacheMode")),
        "js_code": browser_options.get("jsCode"),
    })

    extracted_data = parse_extracted_json(result)
    # Clean Text defaults to on
    if options.get("cleanText", True) is not False and extracted_data is not None:
        extracted_data = clean_extracted_data(extracted_data)

    return format_extraction_result(
        result, extracted_data, options.get("includeFullText") is True
    )


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    return await execute_per_item(ctx, items, _extract_item)
