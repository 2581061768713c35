"""Tests for text-generation provider capabilities."""

from unittest.mock import Mock, patch

import openai
import pytest

from brandpulse.core.config import Settings
from brandpulse.core.errors import ProviderError
from brandpulse.services.providers import (
    OpenAIChatProvider,
    build_provider_capabilities,
    competitive_prompts,
    default_prompts,
)


class FakeCache:

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, expire=None):
        self.data[key] = value
        self.expiry[key] = expire


def completion(text):
    return Mock(choices=[Mock(message=Mock(content=text))])


def only_openai_key(**overrides):
    values = dict(
        _env_file=None,
        openai_api_key="sk-test",
        OPENAI_API_KEY="",
        anthropic_api_key="",
        google_api_key="",
        perplexity_api_key="",
        cache_enabled=False,
    )
    values.update(overrides)
    return Settings(**values)


class TestOpenAIChatProvider:

    def setup_method(self):
        self.client = Mock()
        self.provider = OpenAIChatProvider("OpenAI GPT-4o", "gpt-4o", "sk-test", client=self.client)

    def test_generate_strips_text(self):
        self.client.chat.completions.create.return_value = completion("  Tesla makes cars.  ")
        assert self.provider.generate("Tell me about Tesla") == "Tesla makes cars."
        kwargs = self.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"][-1] == {"role": "user", "content": "Tell me about Tesla"}

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_completion(self, text):
        self.client.chat.completions.create.return_value = completion(text)
        with pytest.raises(ProviderError) as exc:
            self.provider.generate("q")
        assert "empty completion" in str(exc.value)

    def test_malformed_response(self):
        self.client.chat.completions.create.return_value = Mock(choices=[])
        with pytest.raises(ProviderError):
            self.provider.generate("q")

    def test_api_error_is_wrapped(self):
        self.client.chat.completions.create.side_effect = openai.OpenAIError("invalid api key")
        with pytest.raises(ProviderError) as exc:
            self.provider.generate("q")
        assert exc.value.provider == "OpenAI GPT-4o"
        assert isinstance(exc.value.cause, openai.OpenAIError)

    def test_cache_hit_skips_the_client(self):
        cache = FakeCache()
        provider = OpenAIChatProvider("p", "gpt-4o", "sk-test", cache=cache, cache_ttl_hours=2, client=self.client)
        self.client.chat.completions.create.return_value = completion("answer")

        assert provider.generate("q") == "answer"
        assert provider.generate("q") == "answer"

        assert self.client.chat.completions.create.call_count == 1
        assert list(cache.expiry.values()) == [7200]

    def test_cache_key_depends_on_model(self):
        other = OpenAIChatProvider("p", "gpt-4o-mini", "sk-test", client=self.client)
        assert self.provider._cache_key("q") != other._cache_key("q")


class TestBuildProviderCapabilities:

    @patch("brandpulse.services.providers.openai.OpenAI")
    def test_only_configured_providers(self, mock_openai):
        providers = build_provider_capabilities(only_openai_key())
        assert [p.name for p in providers] == ["OpenAI GPT-4o"]
        mock_openai.assert_called_once_with(api_key="sk-test", base_url=None)

    @patch("brandpulse.services.providers.openai.OpenAI")
    def test_alternative_key_name(self, mock_openai):
        providers = build_provider_capabilities(only_openai_key(openai_api_key="", OPENAI_API_KEY="sk-alt"))
        assert len(providers) == 1

    def test_no_credentials(self):
        assert build_provider_capabilities(only_openai_key(openai_api_key="")) == ()

    @patch("brandpulse.services.providers.openai.OpenAI")
    def test_compatible_endpoints(self, mock_openai):
        providers = build_provider_capabilities(only_openai_key(openai_api_key="", perplexity_api_key="pplx"))
        assert [p.model for p in providers] == ["sonar"]
        mock_openai.assert_called_once_with(api_key="pplx", base_url="https://api.perplexity.ai")


class TestPrompts:

    def test_default_prompts(self):
        prompts = default_prompts("Tesla")
        assert len(prompts) == 4
        assert all("Tesla" in p for p in prompts)

    def test_competitive_prompts(self):
        prompts = competitive_prompts("Tesla", ["Ford", "GM"], "automotive")
        assert len(prompts) == 5
        assert "Ford, GM" in prompts[0]
        assert "automotive" in prompts[0]
