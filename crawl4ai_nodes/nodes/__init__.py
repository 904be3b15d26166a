"""Node types exposed to the host."""

from typing import Dict

from .base import Node, NodeDescription
from .basic_crawler import BasicCrawlerNode
from .content_extractor import ContentExtractorNode

NODE_TYPES: Dict[str, Node] = {
    node.name: node for node in (BasicCrawlerNode(), ContentExtractorNode())
}


def get_node(name: str) -> Node:
    """Look up a node type by its name.

    Raises:
        KeyError: If no node has that name.
    """
    return NODE_TYPES[name]


__all__ = ["Node", "NodeDescription", "BasicCrawlerNode", "ContentExtractorNode", "NODE_TYPES", "get_node"]
