"""Text-generation provider capabilities backed by OpenAI-compatible chat APIs."""

import hashlib
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

import openai
from diskcache import Cache

from ..core.config import Settings, settings
from ..core.constants import FileConstants, ProviderConstants
from ..core.errors import ProviderError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a knowledgeable assistant. Answer factually and mention brands by their exact names."
)


class ProviderCapability(Protocol):
    """Anything that can turn a prompt into text. Failures raise ProviderError."""

    name: str

    def generate(self, prompt: str) -> str:
        ...


class OpenAIChatProvider:
    """Chat-completions provider for OpenAI or any OpenAI-compatible endpoint."""

    def __init__(
        self,
        name: str,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        cache: Optional[Cache] = None,
        cache_ttl_hours: int = 24,
        temperature: float = ProviderConstants.TEMPERATURE,
        max_tokens: int = ProviderConstants.MAX_TOKENS,
        request_timeout: float = 30.0,
        client=None,
    ):
        self.name = name
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self.cache = cache
        self.cache_ttl_hours = cache_ttl_hours
        self.client = client or openai.OpenAI(api_key=api_key, base_url=base_url)

    def _cache_key(self, prompt: str) -> str:
        raw = f"{self.model}|{SYSTEM_PROMPT}|{prompt}|{self.temperature}|{self.max_tokens}"
        return hashlib.md5(raw.encode()).hexdigest()

    def generate(self, prompt: str) -> str:
        """Generate a completion, raising ProviderError on any failure or empty output."""
        cache_key = self._cache_key(prompt)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached:
                logger.debug(f"Cache hit for {self.name}: {cache_key[:FileConstants.CACHE_KEY_LENGTH]}...")
                return cached

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                timeout=self.request_timeout,
            )
        except openai.OpenAIError as e:
            raise ProviderError(self.name, f"request failed: {e}", e) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProviderError(self.name, "malformed response", e) from e
        if not content or not content.strip():
            raise ProviderError(self.name, "empty completion")

        result = content.strip()
        if self.cache is not None:
            self.cache.set(cache_key, result, expire=3600 * self.cache_ttl_hours)
        return result


def build_provider_capabilities(config: Optional[Settings] = None) -> Tuple[ProviderCapability, ...]:
    """Build the immutable provider list once; providers lacking a credential are left out."""
    config = config or settings
    cache = Cache(config.cache_dir) if config.cache_enabled else None

    providers: List[ProviderCapability] = []
    for name, (model, base_url, key_attr) in ProviderConstants.PROVIDER_REGISTRY.items():
        api_key = getattr(config, key_attr, "")
        if not api_key:
            logger.warning(f"{name} not configured (missing credential); excluded from provider set")
            continue
        providers.append(OpenAIChatProvider(
            name=name,
            model=model,
            api_key=api_key,
            base_url=base_url,
            cache=cache,
            cache_ttl_hours=config.cache_ttl_hours,
            request_timeout=config.task_timeout,
        ))

    logger.info(f"✅ {len(providers)} provider(s) available: {[p.name for p in providers]}")
    return tuple(providers)


def default_prompts(brand_name: str) -> List[str]:
    return [
        f"Tell me about {brand_name}",
        f"What is {brand_name} known for?",
        f"How would you describe {brand_name}?",
        f"What are the key features of {brand_name}?",
    ]


def competitive_prompts(primary_brand: str, competitors: Sequence[str], industry: str) -> List[str]:
    competitor_list = ", ".join(competitors)
    return [
        f"Compare {primary_brand} with {competitor_list} in the {industry} industry. What are the key differences?",
        f"What are the main strengths and weaknesses of {primary_brand} compared to {competitor_list}?",
        f"How does {primary_brand} position itself against {competitor_list} in the market?",
        f"What competitive advantages does {primary_brand} have over {competitor_list}?",
        f"What are the market opportunities for {primary_brand} relative to {competitor_list}?",
    ]
