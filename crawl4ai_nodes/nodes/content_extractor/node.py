"""Crawl4AI: Content Extractor node."""

from typing import Dict, List

from ...execution import Operation
from ...properties import NodeProperty, PropertyOption
from ..base import Node, NodeDescription
from . import css_extractor, json_extractor, llm_extractor, regex_extractor

OPERATIONS: Dict[str, Operation] = {
    css_extractor.OPERATION: css_extractor.execute,
    llm_extractor.OPERATION: llm_extractor.execute,
    json_extractor.OPERATION: json_extractor.execute,
    regex_extractor.OPERATION: regex_extractor.execute,
}

PROPERTIES: List[NodeProperty] = [
    NodeProperty(
        display_name="Operation",
        name="operation",
        type="options",
        no_data_expression=True,
        options=[
            PropertyOption(
                name="CSS Selector Extractor",
                value=css_extractor.OPERATION,
                description="Extract structured data using CSS selectors",
                action="Extract with CSS selectors",
            ),
            PropertyOption(
                name="LLM Extractor",
                value=llm_extractor.OPERATION,
                description="Extract structured data using an LLM",
                action="Extract with an LLM",
            ),
            PropertyOption(
                name="JSON Extractor",
                value=json_extractor.OPERATION,
                description="Extract JSON data from a web page",
                action="Extract JSON data",
            ),
            PropertyOption(
                name="Regex Extractor",
                value=regex_extractor.OPERATION,
                description="Extract data using regular expression patterns",
                action="Extract with regex patterns",
            ),
        ],
        default=css_extractor.OPERATION,
    ),
    *css_extractor.DESCRIPTION,
    *llm_extractor.DESCRIPTION,
    *json_extractor.DESCRIPTION,
    *regex_extractor.DESCRIPTION,
]


class ContentExtractorNode(Node):
    """Extract structured content from web pages using Crawl4AI."""

    description = NodeDescription(
        display_name="Crawl4AI: Content Extractor",
        name="crawl4aiContentExtractor",
        description="Extract structured content from web pages using Crawl4AI",
        defaults={"name": "Crawl4AI: Content Extractor"},
        usable_as_tool=True,
        properties=PROPERTIES,
    )
    operations = OPERATIONS
