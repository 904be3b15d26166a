"""Crawl4AI: Content Extractor node."""

from .node import ContentExtractorNode, OPERATIONS, PROPERTIES

__all__ = ["ContentExtractorNode", "OPERATIONS", "PROPERTIES"]
