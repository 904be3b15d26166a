"""Crawl4AI API credentials: descriptor, model and LLM settings."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import config
from .crawler.config import DEFAULT_CRAWL4AI_URL
from .properties import NodeProperty, PropertyOption, show_when

CREDENTIAL_NAME = "crawl4aiApi"
CREDENTIAL_DISPLAY_NAME = "Crawl4AI API"

DEFAULT_OLLAMA_URL = "http://localhost:11434"

# Provider prefix and fallback model for each selectable provider
PROVIDER_DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-3-haiku-20240307",
    "groq": "llama3-70b-8192",
    "ollama": "llama3",
}
DEFAULT_LLM_PROVIDER = "openai/gpt-4o"

_KEYED_PROVIDERS = ["openai", "groq", "anthropic"]

CREDENTIAL_PROPERTIES: List[NodeProperty] = [
    # Docker REST API settings
    NodeProperty(
        display_name="Docker Server URL",
        name="dockerUrl",
        type="string",
        default=DEFAULT_CRAWL4AI_URL,
        placeholder=DEFAULT_CRAWL4AI_URL,
        description="The URL of the Crawl4AI Docker REST API server",
    ),
    NodeProperty(
        display_name="Authentication Type",
        name="authenticationType",
        type="options",
        options=[
            PropertyOption(name="No Authentication", value="none",
                           description="No authentication is required"),
            PropertyOption(name="Token Authentication", value="token",
                           description="Use an API token for authentication"),
            PropertyOption(name="Username/Password Authentication", value="basic",
                           description="Use username and password for authentication"),
        ],
        default="none",
        description="The authentication method to use for the Docker REST API",
    ),
    NodeProperty(
        display_name="API Token",
        name="apiToken",
        type="string",
        type_options={"password": True},
        default="",
        description="The API token for Docker server authentication",
        display_options=show_when(authenticationType=["token"]),
    ),
    NodeProperty(
        display_name="Username",
        name="username",
        type="string",
        default="",
        description="The username for Docker server authentication",
        display_options=show_when(authenticationType=["basic"]),
    ),
    NodeProperty(
        display_name="Password",
        name="password",
        type="string",
        type_options={"password": True},
        default="",
        description="The password for Docker server authentication",
        display_options=show_when(authenticationType=["basic"]),
    ),
    # LLM provider settings
    NodeProperty(
        display_name="Enable LLM Features",
        name="enableLlm",
        type="boolean",
        default=False,
        description="Whether to enable LLM-based features",
    ),
    NodeProperty(
        display_name="LLM Provider",
        name="llmProvider",
        type="options",
        options=[
            PropertyOption(name="OpenAI", value="openai"),
            PropertyOption(name="Ollama", value="ollama"),
            PropertyOption(name="Groq", value="groq"),
            PropertyOption(name="Anthropic", value="anthropic"),
            PropertyOption(name="LiteLLM / Custom", value="other"),
        ],
        default="openai",
        description="The LLM provider to use for LLM-based features",
        display_options=show_when(enableLlm=[True]),
    ),
    NodeProperty(
        display_name="LLM Model ID",
        name="llmModel",
        type="string",
        default="gpt-4o",
        placeholder="gpt-4o-mini",
        description="Model identifier for the selected provider (e.g. gpt-4o-mini, claude-3-haiku)",
        display_options=show_when(enableLlm=[True], llmProvider=_KEYED_PROVIDERS),
    ),
    NodeProperty(
        display_name="Ollama Model ID",
        name="ollamaModel",
        type="string",
        default="llama3",
        placeholder="llama3.2",
        description="Model name served by your Ollama instance",
        display_options=show_when(enableLlm=[True], llmProvider=["ollama"]),
    ),
    NodeProperty(
        display_name="API Key",
        name="apiKey",
        type="string",
        type_options={"password": True},
        default="",
        description="The API key for the LLM provider",
        display_options=show_when(enableLlm=[True], llmProvider=_KEYED_PROVIDERS),
    ),
    NodeProperty(
        display_name="Ollama URL",
        name="ollamaUrl",
        type="string",
        default=DEFAULT_OLLAMA_URL,
        description="The URL for Ollama server",
        display_options=show_when(enableLlm=[True], llmProvider=["ollama"]),
    ),
    NodeProperty(
        display_name="Custom Provider",
        name="customProvider",
        type="string",
        default="",
        placeholder="custom/llama-3-70b or provider/model",
        description='The custom provider in format "provider/model"',
        display_options=show_when(enableLlm=[True], llmProvider=["other"]),
    ),
    NodeProperty(
        display_name="Custom Base URL",
        name="customBaseUrl",
        type="string",
        default="",
        placeholder="https://litellm-proxy.company.com/v1",
        description="The base URL for your custom LLM provider or LiteLLM proxy",
        display_options=show_when(enableLlm=[True], llmProvider=["other"]),
    ),
    NodeProperty(
        display_name="Custom Provider API Key",
        name="customApiKey",
        type="string",
        type_options={"password": True},
        default="",
        description="The API key for the custom provider or LiteLLM proxy server",
        display_options=show_when(enableLlm=[True], llmProvider=["other"]),
    ),
    # Cache settings
    NodeProperty(
        display_name="Cache Directory",
        name="cacheDir",
        type="string",
        default="",
        placeholder="/path/to/cache",
        description="The directory to store cache files (leave empty for default)",
    ),
]


class Crawl4aiCredentials(BaseModel):
    """Connection, authentication and LLM settings for the Crawl4AI service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    docker_url: str = Field(DEFAULT_CRAWL4AI_URL, alias="dockerUrl")
    authentication_type: str = Field("none", alias="authenticationType")
    api_token: str = Field("", alias="apiToken")
    username: str = ""
    password: str = ""
    enable_llm: bool = Field(False, alias="enableLlm")
    llm_provider: str = Field("openai", alias="llmProvider")
    llm_model: str = Field("gpt-4o", alias="llmModel")
    ollama_model: str = Field("llama3", alias="ollamaModel")
    api_key: str = Field("", alias="apiKey")
    ollama_url: str = Field(DEFAULT_OLLAMA_URL, alias="ollamaUrl")
    custom_provider: str = Field("", alias="customProvider")
    custom_base_url: str = Field("", alias="customBaseUrl")
    custom_api_key: str = Field("", alias="customApiKey")
    cache_dir: str = Field("", alias="cacheDir")

    @classmethod
    def from_env(cls) -> "Crawl4aiCredentials":
        """Build credentials from CRAWL4AI_* environment variables."""
        return cls.model_validate(config.get_credentials_env())


class LlmConfig(BaseModel):
    """Resolved LLM provider settings."""

    provider: str
    api_key: str = ""
    base_url: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Typed `LLMConfig` object as the service expects it."""
        params: Dict[str, Any] = {"provider": self.provider}
        if self.api_key:
            params["api_token"] = self.api_key
        if self.base_url:
            params["api_base"] = self.base_url
        return {"type": "LLMConfig", "params": params}


def _provider_string(prefix: str, model: str) -> str:
    model = model or PROVIDER_DEFAULT_MODELS[prefix]
    # A full "provider/model" ID is passed through as-is
    if "/" in model:
        return model
    return f"{prefix}/{model}"


def build_llm_config(credentials: Crawl4aiCredentials) -> LlmConfig:
    """Derive the provider string, API key and base URL from credentials."""
    provider_type = credentials.llm_provider

    if provider_type in ("openai", "anthropic", "groq"):
        return LlmConfig(
            provider=_provider_string(provider_type, credentials.llm_model),
            api_key=credentials.api_key,
        )
    if provider_type == "ollama":
        return LlmConfig(
            provider=_provider_string("ollama", credentials.ollama_model),
            base_url=credentials.ollama_url or DEFAULT_OLLAMA_URL,
        )
    if provider_type == "other":
        return LlmConfig(
            provider=credentials.custom_provider or "custom/model",
            api_key=credentials.custom_api_key,
            base_url=credentials.custom_base_url or None,
        )
    return LlmConfig(provider=DEFAULT_LLM_PROVIDER, api_key=credentials.api_key)


def validate_llm_credentials(
    credentials: Crawl4aiCredentials,
    context: str = "LLM features",
    require_api_key: bool = True,
) -> None:
    """
    Check that LLM features are usable with these credentials.

    Args:
        credentials: Credentials to check
        context: Feature name used in the error message
        require_api_key: Also insist on a provider API key. Callers that let
            the node override the key per item pass False.

    Raises:
        ValueError: If LLM features are disabled or the provider needs an
            API key that isn't configured.
    """
    if not credentials.enable_llm:
        raise ValueError(
            f"LLM features are not enabled in Crawl4AI credentials. "
            f"Please enable them and configure an LLM provider to use {context}."
        )

    if not require_api_key or credentials.llm_provider == "ollama":
        return

    if credentials.llm_provider == "other":
        api_key = credentials.custom_api_key
    else:
        api_key = credentials.api_key

    if not api_key:
        raise ValueError(
            f"API key is required for {credentials.llm_provider} provider. "
            f"Please configure it in the Crawl4AI credentials."
        )
