"""Deterministic composite scoring: visibility, credibility and competitive standing."""

import math
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .constants import LexiconConstants, ScoringConstants, SourceConstants
from .mentions import count_exact_mentions
from .models import (
    CompetitiveGap,
    CompetitorShare,
    Engagement,
    ProviderResult,
    Sentiment,
    ShareOfVoice,
)
from .sentiment import SentimentClassifier, classify_sentiment


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (banker's rounding is not wanted here)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def sentiment_bonus(sentiment: Sentiment) -> int:
    return ScoringConstants.SENTIMENT_BONUS[Sentiment(sentiment).value]


# ---- Visibility ----

def context_keyword_hits(text: str) -> List[str]:
    lowered = (text or "").lower()
    return [k for k in LexiconConstants.CONTEXT_KEYWORDS if k in lowered]


def visibility_score(text: str, brand_name: str, classifier: Optional[SentimentClassifier] = None) -> int:
    """Visibility 0-100 from mention volume, market context and sentiment."""
    if not text or not brand_name or not brand_name.strip():
        return 0

    mentions = count_exact_mentions(text, brand_name)
    score = min(mentions * ScoringConstants.MENTION_POINTS, ScoringConstants.MENTION_POINTS_CAP)
    score += min(len(context_keyword_hits(text)) * ScoringConstants.CONTEXT_POINTS,
                 ScoringConstants.CONTEXT_POINTS_CAP)

    sentiment = classifier.classify(text, brand_name) if classifier else classify_sentiment(text, brand_name)
    score += sentiment_bonus(sentiment.overall)

    return int(clamp(score, 0, 100))


def overall_visibility(results: Iterable[ProviderResult]) -> int:
    scores = [r.visibility_score for r in results]
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def average_sentiment(sentiments: Iterable[Sentiment]) -> Sentiment:
    """Majority vote; ties and empty input resolve to neutral."""
    counts = Counter(Sentiment(s) for s in sentiments)
    if not counts:
        return Sentiment.NEUTRAL
    ranked = counts.most_common()
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return Sentiment.NEUTRAL
    return ranked[0][0]


# ---- Credibility ----

def engagement_bonus(engagement: Engagement) -> float:
    total = engagement.total
    for threshold, bonus in ScoringConstants.ENGAGEMENT_BONUSES:
        if total > threshold:
            return bonus
    return 0.0


def length_bonus(content: str) -> float:
    length = len(content or "")
    for threshold, bonus in ScoringConstants.LENGTH_BONUSES:
        if length > threshold:
            return bonus
    return 0.0


def source_weight(source: str, weights: Optional[Mapping[str, float]] = None) -> float:
    table = weights if weights is not None else SourceConstants.DEFAULT_SOURCE_WEIGHTS
    return table.get((source or "").lower(), SourceConstants.UNKNOWN_SOURCE_WEIGHT)


def credibility_score(
    content: str,
    source: str,
    engagement: Optional[Engagement] = None,
    weights: Optional[Mapping[str, float]] = None,
) -> float:
    """Credibility in (0, 1] from source trust, engagement and content length."""
    score = ScoringConstants.CREDIBILITY_BASE
    score += source_weight(source, weights) * ScoringConstants.SOURCE_WEIGHT_FACTOR
    score += engagement_bonus(engagement or Engagement())
    score += length_bonus(content)
    return round(clamp(score, 0.0, 1.0), 4)


# ---- Competitive standing ----

def result_composite_score(result: ProviderResult) -> int:
    score = result.visibility_score + sentiment_bonus(result.sentiment.overall)
    score += min(result.mention_count * ScoringConstants.COMPETITIVE_MENTION_POINTS,
                 ScoringConstants.COMPETITIVE_MENTION_CAP)
    if result.succeeded:
        score += ScoringConstants.SUCCESS_BONUS
    return score


def brand_composite_score(results: Sequence[ProviderResult]) -> int:
    """Mean composite score of a brand's provider results, 0 when there are none."""
    if not results:
        return 0
    return round_half_up(sum(result_composite_score(r) for r in results) / len(results))


def rank_brands(brand_scores: Mapping[str, int]) -> List[str]:
    """Brands by score, highest first; ties keep insertion order."""
    return [brand for brand, _ in sorted(brand_scores.items(), key=lambda kv: -kv[1])]


def percentage_shares(brand_scores: Mapping[str, int]) -> Dict[str, int]:
    """Integer percentages that sum to exactly 100 (largest remainder), or all 0."""
    total = sum(brand_scores.values())
    if total <= 0:
        return {brand: 0 for brand in brand_scores}

    exact = {brand: score * 100 / total for brand, score in brand_scores.items()}
    shares = {brand: int(math.floor(value)) for brand, value in exact.items()}
    leftover = 100 - sum(shares.values())

    by_remainder = sorted(brand_scores, key=lambda b: -(exact[b] - shares[b]))
    for brand in by_remainder[:leftover]:
        shares[brand] += 1
    return shares


def share_of_voice(brand_scores: Mapping[str, int], primary_brand: str) -> ShareOfVoice:
    shares = percentage_shares(brand_scores)
    total = sum(brand_scores.values())

    competitors = [b for b in brand_scores if b != primary_brand]
    competitors.sort(key=lambda b: -shares[b])
    entries = [
        CompetitorShare(
            name=brand,
            share=shares[brand],
            rank=index + 2,
            change="stable" if total > 0 else "unknown",
        )
        for index, brand in enumerate(competitors)
    ]
    return ShareOfVoice(primary_brand=shares.get(primary_brand, 0), competitors=entries)


def market_share(brand_scores: Mapping[str, int], primary_brand: str) -> int:
    """The primary brand's share, consistent with share_of_voice."""
    return percentage_shares(brand_scores).get(primary_brand, 0)


def _mean_visibility(results: Sequence[ProviderResult]) -> float:
    if not results:
        return 0.0
    return sum(r.visibility_score for r in results) / len(results)


def positive_ratio(results: Sequence[ProviderResult]) -> float:
    if not results:
        return 0.0
    positives = sum(1 for r in results if r.sentiment.overall == Sentiment.POSITIVE)
    return positives / len(results)


def total_mentions(results: Iterable[ProviderResult]) -> int:
    return sum(r.mention_count for r in results)


def competitive_gaps(
    primary_results: Sequence[ProviderResult],
    competitor_results: Mapping[str, Sequence[ProviderResult]],
) -> List[CompetitiveGap]:
    """Flag visibility/sentiment/mention gaps, then the two standing opportunities."""
    gaps = []

    primary_visibility = _mean_visibility(primary_results)
    max_visibility = max([primary_visibility] + [_mean_visibility(r) for r in competitor_results.values()])
    if primary_visibility < max_visibility * ScoringConstants.VISIBILITY_GAP_RATIO:
        gaps.append(CompetitiveGap(
            category="Visibility",
            opportunity="Improve brand visibility across AI platforms",
            impact="high",
            effort="medium",
        ))

    if positive_ratio(primary_results) < ScoringConstants.POSITIVE_SENTIMENT_TARGET:
        gaps.append(CompetitiveGap(
            category="Sentiment",
            opportunity="Improve brand sentiment and perception",
            impact="high",
            effort="high",
        ))

    if competitor_results:
        competitor_mentions = [total_mentions(r) for r in competitor_results.values()]
        average_competitor_mentions = sum(competitor_mentions) / len(competitor_mentions)
        if total_mentions(primary_results) < average_competitor_mentions * ScoringConstants.MENTION_GAP_RATIO:
            gaps.append(CompetitiveGap(
                category="Mentions",
                opportunity="Increase brand mention frequency",
                impact="medium",
                effort="medium",
            ))

    gaps.append(CompetitiveGap(
        category="Innovation",
        opportunity="Leverage AI platform presence for competitive advantage",
        impact="high",
        effort="low",
    ))
    gaps.append(CompetitiveGap(
        category="Differentiation",
        opportunity="Develop unique positioning against competitors",
        impact="medium",
        effort="high",
    ))
    return gaps
