"""Unit tests for credentials and LLM configuration."""

import pytest

from crawl4ai_nodes.credentials import (
    CREDENTIAL_PROPERTIES,
    Crawl4aiCredentials,
    LlmConfig,
    build_llm_config,
    validate_llm_credentials,
)


class TestCrawl4aiCredentials:
    """Tests for the credentials model."""

    def test_defaults(self):
        """Test the documented defaults."""
        credentials = Crawl4aiCredentials()

        assert credentials.docker_url == "http://crawl4ai:11235"
        assert credentials.authentication_type == "none"
        assert credentials.enable_llm is False
        assert credentials.llm_provider == "openai"

    def test_camel_case_aliases(self):
        """Test host-style camelCase keys are accepted."""
        credentials = Crawl4aiCredentials.model_validate({
            "dockerUrl": "http://remote:11235",
            "authenticationType": "basic",
            "username": "user",
            "password": "pass",
            "enableLlm": True,
            "unknownField": "ignored",
        })

        assert credentials.docker_url == "http://remote:11235"
        assert credentials.authentication_type == "basic"
        assert credentials.enable_llm is True

    def test_from_env(self, monkeypatch):
        """Test credentials are read from CRAWL4AI_* variables."""
        monkeypatch.setenv("CRAWL4AI_URL", "http://env-host:11235")
        monkeypatch.setenv("CRAWL4AI_AUTH_TYPE", "token")
        monkeypatch.setenv("CRAWL4AI_API_TOKEN", "env-token")
        monkeypatch.setenv("CRAWL4AI_ENABLE_LLM", "true")
        monkeypatch.setenv("CRAWL4AI_LLM_PROVIDER", "groq")
        monkeypatch.setenv("CRAWL4AI_LLM_API_KEY", "gsk-test")

        credentials = Crawl4aiCredentials.from_env()

        assert credentials.docker_url == "http://env-host:11235"
        assert credentials.authentication_type == "token"
        assert credentials.api_token == "env-token"
        assert credentials.enable_llm is True
        assert credentials.llm_provider == "groq"
        assert credentials.api_key == "gsk-test"

    def test_descriptor_names(self):
        """Test the credential descriptor exposes every credential field."""
        names = [prop.name for prop in CREDENTIAL_PROPERTIES]

        for name in ("dockerUrl", "authenticationType", "apiToken", "enableLlm",
                     "llmProvider", "apiKey", "ollamaUrl", "customBaseUrl", "cacheDir"):
            assert name in names


class TestBuildLlmConfig:
    """Tests for provider string resolution."""

    def test_openai(self):
        """Test provider prefix and model are joined."""
        config = build_llm_config(Crawl4aiCredentials(llmProvider="openai", llmModel="gpt-4o-mini", apiKey="sk"))

        assert config.provider == "openai/gpt-4o-mini"
        assert config.api_key == "sk"
        assert config.base_url is None

    def test_full_model_id_passes_through(self):
        """Test a model already in provider/model form is kept."""
        config = build_llm_config(Crawl4aiCredentials(llmProvider="anthropic", llmModel="anthropic/claude-3-opus"))

        assert config.provider == "anthropic/claude-3-opus"

    def test_default_model(self):
        """Test an empty model falls back to the provider default."""
        config = build_llm_config(Crawl4aiCredentials(llmProvider="groq", llmModel=""))

        assert config.provider == "groq/llama3-70b-8192"

    def test_ollama(self):
        """Test Ollama uses its model and base URL."""
        config = build_llm_config(Crawl4aiCredentials(
            llmProvider="ollama", ollamaModel="mistral", ollamaUrl="http://gpu-box:11434"
        ))

        assert config.provider == "ollama/mistral"
        assert config.base_url == "http://gpu-box:11434"
        assert config.api_key == ""

    def test_custom_provider(self):
        """Test custom providers use their own key and base URL."""
        config = build_llm_config(Crawl4aiCredentials(
            llmProvider="other",
            customProvider="custom/llama-3-70b",
            customBaseUrl="https://litellm.example/v1",
            customApiKey="proxy-key",
        ))

        assert config.provider == "custom/llama-3-70b"
        assert config.api_key == "proxy-key"
        assert config.base_url == "https://litellm.example/v1"

    def test_payload(self):
        """Test the typed LLMConfig payload."""
        payload = LlmConfig(provider="openai/gpt-4o", api_key="sk", base_url="https://api.example").to_payload()

        assert payload == {
            "type": "LLMConfig",
            "params": {"provider": "openai/gpt-4o", "api_token": "sk", "api_base": "https://api.example"},
        }

    def test_payload_omits_empty_values(self):
        """Test empty key and base URL are left out."""
        assert LlmConfig(provider="ollama/llama3").to_payload() == {
            "type": "LLMConfig",
            "params": {"provider": "ollama/llama3"},
        }


class TestValidateLlmCredentials:
    """Tests for LLM availability checks."""

    def test_disabled(self):
        """Test disabled LLM features are rejected."""
        with pytest.raises(ValueError, match="LLM features are not enabled"):
            validate_llm_credentials(Crawl4aiCredentials(enableLlm=False))

    def test_missing_api_key(self):
        """Test keyed providers need an API key."""
        with pytest.raises(ValueError, match="API key is required for openai"):
            validate_llm_credentials(Crawl4aiCredentials(enableLlm=True, llmProvider="openai"))

    def test_api_key_not_required(self):
        """Test the key check can be skipped."""
        validate_llm_credentials(
            Crawl4aiCredentials(enableLlm=True, llmProvider="openai"), require_api_key=False
        )

    def test_ollama_needs_no_key(self):
        """Test local Ollama passes without a key."""
        validate_llm_credentials(Crawl4aiCredentials(enableLlm=True, llmProvider="ollama"))

    def test_custom_uses_custom_key(self):
        """Test custom providers are checked against the custom key."""
        with pytest.raises(ValueError):
            validate_llm_credentials(
                Crawl4aiCredentials(enableLlm=True, llmProvider="other", apiKey="unused")
            )
        validate_llm_credentials(
            Crawl4aiCredentials(enableLlm=True, llmProvider="other", customApiKey="proxy-key")
        )
