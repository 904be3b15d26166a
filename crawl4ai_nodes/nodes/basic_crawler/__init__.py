"""Crawl4AI: Basic Crawler node."""

from .node import BasicCrawlerNode, OPERATIONS, PROPERTIES

__all__ = ["BasicCrawlerNode", "OPERATIONS", "PROPERTIES"]
