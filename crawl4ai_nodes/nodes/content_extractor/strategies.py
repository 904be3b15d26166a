"""Extraction strategy payloads in the service's typed {type, params} form."""

from typing import Any, Dict, List, Optional

from ...credentials import LlmConfig
from ...crawler.utils import clean_text

JSON_LD_SELECTOR = 'script[type="application/ld+json"]'


def create_css_extraction_strategy(
    base_selector: str,
    fields: List[Dict[str, Any]],
    name: str = "ExtractedData",
) -> Dict[str, Any]:
    """
    Create a CSS selector extraction strategy.

    Args:
        base_selector: Selector for the repeating element
        fields: Dicts with name, selector, type and (for attributes) attribute
        name: Schema name

    Returns:
        JsonCssExtractionStrategy payload
    """
    schema_fields = []
    for field in fields:
        schema_field = {
            "name": field["name"],
            "selector": field["selector"],
            "type": field.get("type") or "text",
        }
        if schema_field["type"] == "attribute" and field.get("attribute"):
            schema_field["attribute"] = field["attribute"]
        schema_fields.append(schema_field)

    return {
        "type": "JsonCssExtractionStrategy",
        "params": {
            "schema": {
                "type": "dict",
                "value": {
                    "name": name,
                    "baseSelector": base_selector,
                    "fields": schema_fields,
                },
            },
        },
    }


def create_llm_extraction_strategy(
    schema: Dict[str, Any],
    instruction: str,
    llm_config: LlmConfig,
    extra_args: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Create an LLM extraction strategy.

    Args:
        schema: JSON schema the LLM output must follow
        instruction: Extraction instructions for the LLM
        llm_config: Provider, key and base URL
        extra_args: Completion arguments such as temperature and max_tokens

    Returns:
        LLMExtractionStrategy payload
    """
    params: Dict[str, Any] = {
        "llm_config": llm_config.to_payload(),
        "schema": {"type": "dict", "value": schema},
        "instruction": instruction,
        "extraction_type": "schema",
    }
    if extra_args:
        params["extra_args"] = extra_args
    return {"type": "LLMExtractionStrategy", "params": params}


def create_regex_extraction_strategy(
    builtin_patterns: Optional[List[str]] = None,
    custom_patterns: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a regex extraction strategy from built-in names or labelled patterns."""
    params: Dict[str, Any] = {}
    if builtin_patterns:
        params["patterns"] = list(builtin_patterns)
    if custom_patterns:
        params["custom_patterns"] = dict(custom_patterns)
    return {"type": "RegexExtractionStrategy", "params": params}


def create_json_extraction_strategy(source_type: str, script_selector: str = "") -> Dict[str, Any]:
    """Pull the text of a script tag (or JSON-LD block) so it can be parsed as JSON."""
    if source_type == "jsonld":
        return create_css_extraction_strategy(
            JSON_LD_SELECTOR,
            [{"name": "content", "selector": "", "type": "text"}],
            name="json_extraction",
        )
    return create_css_extraction_strategy(
        script_selector or "body",
        [{"name": "content", "selector": script_selector or "pre", "type": "text"}],
        name="json_extraction",
    )


def clean_extracted_data(data: Any) -> Any:
    """Normalise whitespace in every string of the extracted data."""
    if isinstance(data, str):
        return clean_text(data)
    if isinstance(data, list):
        return [clean_extracted_data(item) for item in data]
    if isinstance(data, dict):
        return {key: clean_extracted_data(value) for key, value in data.items()}
    return data
