"""
Pytest configuration and fixtures for the Crawl4AI node tests.
"""

import pytest
from fastapi.testclient import TestClient

from crawl4ai_nodes.credentials import Crawl4aiCredentials
from crawl4ai_nodes.main import app


@pytest.fixture
def credentials():
    """Credentials for a local server without authentication."""
    return Crawl4aiCredentials(dockerUrl="http://localhost:11235")


@pytest.fixture
def llm_credentials():
    """Credentials with OpenAI LLM features enabled."""
    return Crawl4aiCredentials(
        dockerUrl="http://localhost:11235",
        enableLlm=True,
        llmProvider="openai",
        llmModel="gpt-4o-mini",
        apiKey="sk-test",
    )


@pytest.fixture
def crawl_result():
    """A successful crawl result as returned by Crawl4AI."""
    return {
        "url": "https://example.com",
        "success": True,
        "status_code": 200,
        "markdown": {"raw_markdown": "# Example\n\nHello", "fit_markdown": "# Example"},
        "html": "<html><body><h1>Example</h1></body></html>",
        "cleaned_html": "<h1>Example</h1>",
        "text": "Example Hello",
        "links": {"internal": [{"href": "/about"}], "external": []},
        "media": {"images": [{"src": "/logo.png"}], "videos": []},
        "metadata": {"title": "Example Domain", "description": "An example"},
    }


@pytest.fixture
def client():
    """Test client for the FastAPI host."""
    return TestClient(app)
