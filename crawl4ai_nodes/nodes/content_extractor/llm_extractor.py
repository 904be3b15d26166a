"""LLM Extractor operation."""

import json
from typing import Any, Dict, List

from ...credentials import build_llm_config, validate_llm_credentials
from ...crawler.config import DEFAULT_LLM_BROWSER_TIMEOUT
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
from .array_handling import (
    ARRAY_HANDLING_ALL_OBJECTS,
    ARRAY_HANDLING_NONE,
    ARRAY_HANDLING_SMART,
    ARRAY_HANDLING_TOP_LEVEL,
    process_array_handling,
)
from .strategies import create_llm_extraction_strategy

OPERATION = "llmExtractor"

SCHEMA_TITLE = "ExtractedData"

DEFAULT_JSON_SCHEMA = """{
  "type": "object",
  "properties": {
    "title": {
      "type": "string",
      "description": "Main page title"
    },
    "description": {
      "type": "string",
      "description": "Page description or summary"
    }
  },
  "required": ["title"]
}"""

# Provider IDs offered when the node overrides the credential's provider
LLM_PROVIDER_OPTIONS = [
    PropertyOption(name="Anthropic Claude 3 Haiku", value="anthropic/claude-3-haiku-20240307"),
    PropertyOption(name="Anthropic Claude 3 Opus", value="anthropic/claude-3-opus-20240229"),
    PropertyOption(name="Anthropic Claude 3.5 Sonnet", value="anthropic/claude-3-5-sonnet-20241022"),
    PropertyOption(name="Anthropic Claude 3.7 Sonnet", value="anthropic/claude-3-7-sonnet-20250219"),
    PropertyOption(name="DeepSeek Chat", value="deepseek/deepseek-chat"),
    PropertyOption(name="Google Gemini 1.5 Flash", value="gemini/gemini-1.5-flash"),
    PropertyOption(name="Google Gemini 1.5 Pro", value="gemini/gemini-1.5-pro"),
    PropertyOption(name="Groq Llama 3 70B", value="groq/llama3-70b-8192"),
    PropertyOption(name="Groq Llama 3.3 70B", value="groq/llama-3.3-70b-versatile"),
    PropertyOption(name="Ollama Llama 3", value="ollama/llama3"),
    PropertyOption(name="Ollama Mistral", value="ollama/mistral"),
    PropertyOption(name="OpenAI GPT-4 Turbo", value="openai/gpt-4-turbo"),
    PropertyOption(name="OpenAI GPT-4o", value="openai/gpt-4o"),
    PropertyOption(name="OpenAI GPT-4o Mini", value="openai/gpt-4o-mini"),
]

DESCRIPTION: List[NodeProperty] = [
    url_property(OPERATION, "The URL to extract content from"),
    NodeProperty(
        display_name="Extraction Instructions",
        name="instruction",
        type="string",
        type_options={"rows": 4},
        required=True,
        default="",
        placeholder="Extract the product name, price, and description from this page.",
        description="Instructions for the LLM on what to extract from the page",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Schema Input Mode",
        name="schemaMode",
        type="options",
        options=[
            PropertyOption(name="Simple Fields", value="simple",
                           description="Define schema using individual field inputs"),
            PropertyOption(name="Advanced JSON", value="advanced",
                           description="Define schema using JSON editor"),
        ],
        default="simple",
        description="Choose how to define the extraction schema",
        display_options=show_when(operation=[OPERATION]),
    ),
    NodeProperty(
        display_name="Schema Fields",
        name="schemaFields",
        type="fixedCollection",
        placeholder="Add Schema Field",
        type_options={"multipleValues": True},
        default={},
        required=True,
        display_options=show_when(operation=[OPERATION], schemaMode=["simple"]),
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
                        display_name="Field Type",
                        name="fieldType",
                        type="options",
                        options=[
                            PropertyOption(name="String", value="string"),
                            PropertyOption(name="Number", value="number"),
                            PropertyOption(name="Boolean", value="boolean"),
                            PropertyOption(name="Array", value="array"),
                        ],
                        default="string",
                        description="Type of the field",
                    ),
                    NodeProperty(
                        display_name="Description",
                        name="description",
                        type="string",
                        default="",
                        placeholder="The main title of the product",
                        description="Description of the field to help the LLM understand what to extract",
                    ),
                    NodeProperty(
                        display_name="Required",
                        name="required",
                        type="boolean",
                        default=True,
                        description="Whether this field is required",
                    ),
                ],
            ),
        ],
    ),
    NodeProperty(
        display_name="JSON Schema",
        name="jsonSchema",
        type="string",
        type_options={"rows": 12},
        default=DEFAULT_JSON_SCHEMA,
        description="JSON schema defining the structure of data to extract. Must be valid JSON format.",
        display_options=show_when(operation=[OPERATION], schemaMode=["advanced"]),
    ),
    browser_options_property(
        OPERATION,
        browser_type=True,
        js_code=True,
        timeout_default=DEFAULT_LLM_BROWSER_TIMEOUT,
    ),
    NodeProperty(
        display_name="LLM Options",
        name="llmOptions",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[OPERATION]),
        options=[
            NodeProperty(
                display_name="LLM Provider",
                name="llmProvider",
                type="options",
                options=LLM_PROVIDER_OPTIONS,
                default="openai/gpt-4o-mini",
                description="LLM provider to use for extraction",
                display_options=show_when(overrideProvider=[True]),
            ),
            NodeProperty(
                display_name="Max Tokens",
                name="maxTokens",
                type="number",
                default=2000,
                description="Maximum number of tokens for the LLM response",
            ),
            NodeProperty(
                display_name="Override LLM Provider",
                name="overrideProvider",
                type="boolean",
                default=False,
                description="Whether to override the LLM provider from credentials",
            ),
            NodeProperty(
                display_name="Provider API Key",
                name="apiKey",
                type="string",
                type_options={"password": True},
                default="",
                description="API key for the LLM provider (leave empty to use API key from credentials)",
                display_options=show_when(overrideProvider=[True]),
            ),
            NodeProperty(
                display_name="Temperature",
                name="temperature",
                type="number",
                type_options={"minValue": 0, "maxValue": 1, "numberPrecision": 1},
                default=0,
                description="Controls randomness: 0 for deterministic results, higher for more creativity",
            ),
        ],
    ),
    NodeProperty(
        display_name="Options",
        name="options",
        type="collection",
        placeholder="Add Option",
        default={},
        display_options=show_when(operation=[OPERATION]),
        options=[
            NodeProperty(
                display_name="Array Handling",
                name="arrayHandling",
                type="options",
                options=[
                    PropertyOption(name="Keep As Object (Default)", value=ARRAY_HANDLING_NONE,
                                   description="Keep the extracted list inside one item"),
                    PropertyOption(name="Split Top-Level Arrays", value=ARRAY_HANDLING_TOP_LEVEL,
                                   description="Create a separate item for every entry of a top-level list"),
                    PropertyOption(name="Split All Object Arrays", value=ARRAY_HANDLING_ALL_OBJECTS,
                                   description="Split lists of objects, keep lists of plain values"),
                    PropertyOption(name="Smart Split", value=ARRAY_HANDLING_SMART,
                                   description="Split only lists that look like the main content"),
                ],
                default=ARRAY_HANDLING_NONE,
                description="How to handle arrays in the extracted data",
            ),
            cache_mode_option(full=True),
            css_selector_option(),
            NodeProperty(
                display_name="Include Metadata in Split Items",
                name="includeMetadataInSplitItems",
                type="boolean",
                default=False,
                description="Whether to include URL, success, and other metadata in each split item",
                display_options=show_when(
                    arrayHandling=[ARRAY_HANDLING_TOP_LEVEL, ARRAY_HANDLING_ALL_OBJECTS, ARRAY_HANDLING_SMART]
                ),
            ),
            include_full_text_option(),
        ],
    ),
]


def build_simple_schema(fields_values: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Turn the Schema Fields rows into a JSON schema."""
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for field in fields_values:
        name = field.get("name")
        prop: Dict[str, Any] = {"type": field.get("fieldType") or "string"}
        if field.get("description"):
            prop["description"] = field["description"]
        properties[name] = prop
        if field.get("required", True) is True:
            required.append(name)

    schema: Dict[str, Any] = {"title": SCHEMA_TITLE, "type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _advanced_schema(ctx: ExecutionContext, json_schema: Any, i: int) -> Dict[str, Any]:
    if isinstance(json_schema, dict):
        parsed = dict(json_schema)
    else:
        if not json_schema or not str(json_schema).strip():
            raise ctx.error("JSON schema cannot be empty.", i)
        try:
            parsed = json.loads(str(json_schema).strip())
        except json.JSONDecodeError as e:
            raise ctx.error(f"Invalid JSON schema: {e}", i)
        if not isinstance(parsed, dict):
            raise ctx.error("JSON schema must be a valid object", i)

    parsed.setdefault("type", "object")
    parsed.setdefault("title", SCHEMA_TITLE)
    return parsed


def _extra_args(llm_options: Dict[str, Any]) -> Dict[str, Any]:
    extra_args: Dict[str, Any] = {}
    if llm_options.get("temperature") is not None:
        extra_args["temperature"] = llm_options["temperature"]
    if llm_options.get("maxTokens") is not None:
        extra_args["max_tokens"] = llm_options["maxTokens"]
    return extra_args


async def _extract_item(ctx: ExecutionContext, i: int) -> List[Dict[str, Any]]:
    url = ctx.get_node_parameter("url", i, "")
    instruction = ctx.get_node_parameter("instruction", i, "")
    schema_mode = ctx.get_node_parameter("schemaMode", i, "simple")
    browser_options = ctx.get_node_parameter("browserOptions", i, {})
    llm_options = ctx.get_node_parameter("llmOptions", i, {})
    options = ctx.get_node_parameter("options", i, {})

    url = validate_url(ctx, url, i)
    if not instruction:
        raise ctx.error("Extraction instructions cannot be empty.", i)

    if schema_mode == "advanced":
        schema = _advanced_schema(ctx, ctx.get_node_parameter("jsonSchema", i, ""), i)
    else:
        fields_values = ctx.get_node_parameter("schemaFields.fieldsValues", i, [])
        if not fields_values:
            raise ctx.error("At least one schema field must be defined.", i)
        schema = build_simple_schema(fields_values)

    llm_config = build_llm_config(ctx.get_credentials())
    if llm_options.get("overrideProvider") is True:
        # The credential's base URL still applies
        llm_config = llm_config.model_copy(update={
            "provider": llm_options.get("llmProvider") or llm_config.provider,
            "api_key": llm_options.get("apiKey") or llm_config.api_key,
        })

    extraction_strategy = create_llm_extraction_strategy(
        schema, instruction, llm_config, _extra_args(llm_options)
    )

    client = get_crawl4ai_client(ctx)
    result = await client.arun(url, {
        "browser_config": create_browser_config(browser_options),
        "extraction_strategy": extraction_strategy,
        "cache_mode": normalize_cache_mode(options.get("cacheMode")),
        "js_code": browser_options.get("jsCode"),
        "css_selector": options.get("cssSelector"),
    })

    formatted = format_extraction_result(
        result, parse_extracted_json(result), options.get("includeFullText") is True
    )
    return process_array_handling(
        formatted,
        options.get("arrayHandling") or ARRAY_HANDLING_NONE,
        options.get("includeMetadataInSplitItems") is True,
    )


async def execute(ctx: ExecutionContext, items: List[Item]) -> List[Item]:
    try:
        validate_llm_credentials(ctx.get_credentials(), "LLM extraction", require_api_key=False)
    except ValueError as e:
        raise ctx.error(str(e), 0) from e
    return await execute_per_item(ctx, items, _extract_item)
