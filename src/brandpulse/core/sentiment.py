"""Lexicon-based sentiment classification scoped to brand-relevant sentences."""

import re
from typing import List, Sequence, Tuple

from .constants import LexiconConstants, ScoringConstants
from .models import Sentiment, SentimentResult

_SENTENCE_SPLIT = re.compile(LexiconConstants.SENTENCE_SPLIT_PATTERN)


def split_sentences(text: str) -> List[str]:
    """Split on runs of . ! ? and drop blank pieces."""
    return [s.strip() for s in _SENTENCE_SPLIT.split(text or "") if s.strip()]


def brand_sentences(text: str, brand_name: str) -> List[str]:
    """Sentences that mention the brand (case-insensitive substring)."""
    needle = (brand_name or "").strip().lower()
    if not needle:
        return []
    return [s for s in split_sentences(text) if needle in s.lower()]


def _hits(text: str, lexicon: Sequence[str]) -> Tuple[str, ...]:
    return tuple(word for word in lexicon if word in text)


class SentimentClassifier:
    """Classifies polarity of a text towards a brand using fixed lexicons."""

    def __init__(
        self,
        positive: Sequence[str] = LexiconConstants.POSITIVE_KEYWORDS,
        negative: Sequence[str] = LexiconConstants.NEGATIVE_KEYWORDS,
    ):
        # dict.fromkeys drops duplicate entries but keeps order
        self.positive = tuple(dict.fromkeys(w.lower() for w in positive))
        self.negative = tuple(dict.fromkeys(w.lower() for w in negative))

    def _has_keyword(self, sentence: str) -> bool:
        lowered = sentence.lower()
        return any(w in lowered for w in self.positive) or any(w in lowered for w in self.negative)

    def classify(self, text: str, brand_name: str) -> SentimentResult:
        relevant = brand_sentences(text, brand_name)
        neutral_context = tuple(s for s in relevant if not self._has_keyword(s))

        joined = " ".join(relevant).lower()
        positive_hits = _hits(joined, self.positive)
        negative_hits = _hits(joined, self.negative)
        pos, neg = len(positive_hits), len(negative_hits)

        if pos > neg and pos > 0:
            return SentimentResult(
                overall=Sentiment.POSITIVE,
                confidence=min(pos / (pos + neg), ScoringConstants.MAX_SENTIMENT_CONFIDENCE),
                positive_keywords=positive_hits,
                negative_keywords=negative_hits,
                neutral_context=neutral_context,
            )
        if neg > pos and neg > 0:
            return SentimentResult(
                overall=Sentiment.NEGATIVE,
                confidence=min(neg / (pos + neg), ScoringConstants.MAX_SENTIMENT_CONFIDENCE),
                positive_keywords=positive_hits,
                negative_keywords=negative_hits,
                neutral_context=neutral_context,
            )
        return SentimentResult.neutral(neutral_context)


_default_classifier = SentimentClassifier()


def classify_sentiment(text: str, brand_name: str) -> SentimentResult:
    """Classify with the default lexicons."""
    return _default_classifier.classify(text, brand_name)
