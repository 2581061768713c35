"""Core modules for BrandPulse."""

from .config import settings
from .errors import (
    BrandPulseError,
    CategorizationError,
    InputValidationError,
    ProviderError,
    SourceError,
)
from .mentions import MentionDetector, detect_mentions
from .models import *
from .scoring import *
from .sentiment import SentimentClassifier, classify_sentiment

__all__ = [
    "settings",
    "BrandPulseError",
    "CategorizationError",
    "InputValidationError",
    "ProviderError",
    "SourceError",
    "MentionDetector",
    "detect_mentions",
    "SentimentClassifier",
    "classify_sentiment",
    "Mention",
    "SentimentResult",
    "ProviderResult",
    "SourceItem",
    "VisibilityReport",
    "MonitorReport",
    "CompetitiveReport",
    "ContentOptimizationReport",
]
