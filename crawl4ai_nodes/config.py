"""Configuration for the Crawl4AI nodes."""

import os
from typing import Any, Dict

from dotenv import load_dotenv

from .crawler.config import get_default_crawl4ai_url

load_dotenv()

# Logging level for the HTTP host
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Continue-on-fail default for executions that don't specify it
CONTINUE_ON_FAIL = _env_flag("CRAWL4AI_CONTINUE_ON_FAIL")


def get_credentials_env() -> Dict[str, Any]:
    """
    Read credential values from the environment.

    Keys use the credential field names, so the result can be passed straight
    to Crawl4aiCredentials. Read at call time so runtime changes are picked up.
    """
    values: Dict[str, Any] = {
        "dockerUrl": get_default_crawl4ai_url(),
        "authenticationType": os.getenv("CRAWL4AI_AUTH_TYPE", "none"),
        "apiToken": os.getenv("CRAWL4AI_API_TOKEN", ""),
        "username": os.getenv("CRAWL4AI_USERNAME", ""),
        "password": os.getenv("CRAWL4AI_PASSWORD", ""),
        "enableLlm": _env_flag("CRAWL4AI_ENABLE_LLM"),
        "cacheDir": os.getenv("CRAWL4AI_CACHE_DIR", ""),
    }

    # Only override the LLM defaults that are actually set
    optional = {
        "llmProvider": "CRAWL4AI_LLM_PROVIDER",
        "llmModel": "CRAWL4AI_LLM_MODEL",
        "apiKey": "CRAWL4AI_LLM_API_KEY",
        "ollamaModel": "CRAWL4AI_OLLAMA_MODEL",
        "ollamaUrl": "CRAWL4AI_OLLAMA_URL",
        "customProvider": "CRAWL4AI_CUSTOM_PROVIDER",
        "customBaseUrl": "CRAWL4AI_CUSTOM_BASE_URL",
        "customApiKey": "CRAWL4AI_CUSTOM_API_KEY",
    }
    for key, env_name in optional.items():
        value = os.getenv(env_name)
        if value:
            values[key] = value

    return values
