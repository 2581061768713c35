"""Configuration management for BrandPulse."""

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import SourceConstants

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_WEIGHTS_FILE = Path(__file__).resolve().parent.parent / "data" / "source_weights.yaml"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider credentials
    openai_api_key: str = Field("", description="OpenAI API key")
    OPENAI_API_KEY: str = Field("", description="OpenAI API key (alternative naming)")
    anthropic_api_key: str = Field("", description="Anthropic API key")
    google_api_key: str = Field("", description="Google Gemini API key")
    perplexity_api_key: str = Field("", description="Perplexity API key")

    @property
    def effective_openai_key(self) -> str:
        """Get the effective OpenAI API key from either field."""
        return self.openai_api_key or self.OPENAI_API_KEY

    # Source credentials
    reddit_client_id: str = Field("", description="Reddit client ID")
    reddit_client_secret: str = Field("", description="Reddit client secret")
    reddit_user_agent: str = Field("BrandPulse/1.0", description="Reddit user agent")
    youtube_api_key: str = Field("", description="YouTube Data API key")

    # Logging
    log_level: str = Field("INFO", description="Logging level")

    # Fan-out behaviour
    task_timeout: float = Field(30.0, gt=0, description="Per-task timeout in seconds")
    batch_timeout: float = Field(90.0, gt=0, description="Whole-batch timeout in seconds")
    max_retries: int = Field(3, ge=1, description="Maximum attempts per task")
    retry_delay: float = Field(1.0, ge=0, description="Base retry delay in seconds")
    retry_backoff: float = Field(2.0, ge=0, description="Retry backoff multiplier")
    max_in_flight_per_collaborator: int = Field(2, ge=1, description="Concurrent calls per provider/source")
    min_request_interval: float = Field(1.0, ge=0, description="Minimum seconds between request starts per source")

    # Response cache
    cache_enabled: bool = Field(True, description="Cache provider responses on disk")
    cache_dir: str = Field("cache/provider_cache", description="Provider response cache directory")
    cache_ttl_hours: int = Field(24, ge=1, description="Provider response cache TTL in hours")

    # Scoring tables
    source_weights_file: Optional[str] = Field(None, description="YAML file overriding source credibility weights")


# Global settings instance
settings = Settings()


def _read_weights_file(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    weights = data.get("source_weights", {})
    if not isinstance(weights, dict):
        raise ValueError(f"source_weights must be a mapping in {path}")
    return {str(k).lower(): float(v) for k, v in weights.items()}


@lru_cache(maxsize=None)
def load_source_weights(path: Optional[str] = None) -> Mapping[str, float]:
    """Load the read-only per-source credibility weights table."""
    weights_file = Path(path) if path else DEFAULT_SOURCE_WEIGHTS_FILE
    try:
        weights = dict(SourceConstants.DEFAULT_SOURCE_WEIGHTS)
        weights.update(_read_weights_file(weights_file))
    except Exception as e:
        logger.warning(f"Failed to load source weights from {weights_file}: {e}. Using defaults.")
        weights = dict(SourceConstants.DEFAULT_SOURCE_WEIGHTS)
    return MappingProxyType(weights)
