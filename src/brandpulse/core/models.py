"""Data models for BrandPulse."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class Sentiment(str, Enum):
    """Overall polarity of a text towards a brand."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class MentionKind(str, Enum):
    """How a mention was matched."""
    EXACT = "exact"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class Mention:
    """A single brand occurrence in a text."""
    text: str
    position: int
    kind: MentionKind
    confidence: float
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "position": self.position,
            "kind": self.kind.value,
            "confidence": self.confidence,
            "context": self.context,
        }


@dataclass(frozen=True)
class SentimentResult:
    """Lexicon-based sentiment of the brand-relevant part of a text."""
    overall: Sentiment
    confidence: float
    positive_keywords: Tuple[str, ...] = ()
    negative_keywords: Tuple[str, ...] = ()
    neutral_context: Tuple[str, ...] = ()

    @classmethod
    def neutral(cls, neutral_context: Tuple[str, ...] = ()) -> "SentimentResult":
        return cls(overall=Sentiment.NEUTRAL, confidence=0.5, neutral_context=neutral_context)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.value,
            "confidence": self.confidence,
            "positive_keywords": list(self.positive_keywords),
            "negative_keywords": list(self.negative_keywords),
            "neutral_context": list(self.neutral_context),
        }


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of one provider for one query batch."""
    provider_name: str
    raw_text: str
    mention_count: int
    context_snippets: Tuple[str, ...]
    sentiment: SentimentResult
    visibility_score: int
    latency_ms: int
    succeeded: bool
    error: Optional[str] = None

    @classmethod
    def degraded(cls, provider_name: str, latency_ms: int = 0, error: Optional[str] = None) -> "ProviderResult":
        """Zero-signal result for a provider that failed."""
        return cls(
            provider_name=provider_name,
            raw_text="",
            mention_count=0,
            context_snippets=(),
            sentiment=SentimentResult.neutral(),
            visibility_score=0,
            latency_ms=latency_ms,
            succeeded=False,
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "raw_text": self.raw_text,
            "mention_count": self.mention_count,
            "context_snippets": list(self.context_snippets),
            "sentiment": self.sentiment.to_dict(),
            "visibility_score": self.visibility_score,
            "latency_ms": self.latency_ms,
            "succeeded": self.succeeded,
            "error": self.error,
        }


@dataclass(frozen=True)
class Engagement:
    """Engagement counters reported by a source."""
    upvotes: int = 0
    comments: int = 0
    shares: int = 0

    @property
    def total(self) -> int:
        return self.upvotes + self.comments + self.shares

    def to_dict(self) -> Dict[str, int]:
        return {"upvotes": self.upvotes, "comments": self.comments, "shares": self.shares}


@dataclass(frozen=True)
class RawItem:
    """An unscored item as returned by a content source."""
    url: str
    title: str
    content: str
    published_at: Optional[datetime] = None
    author: Optional[str] = None
    engagement: Engagement = field(default_factory=Engagement)


@dataclass(frozen=True)
class SourceItem:
    """A crawled item with at least one detected brand mention."""
    source: str
    url: str
    title: str
    content: str
    mentions: Tuple[Mention, ...]
    sentiment: SentimentResult
    published_at: Optional[datetime]
    credibility_score: float
    author: Optional[str] = None
    engagement: Engagement = field(default_factory=Engagement)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "mentions": [m.to_dict() for m in self.mentions],
            "sentiment": self.sentiment.to_dict(),
            "published_at": _iso(self.published_at),
            "credibility_score": self.credibility_score,
            "author": self.author,
            "engagement": self.engagement.to_dict(),
        }


# ---- Aggregate reports ----

@dataclass
class AggregateReport:
    """Fields shared by every report a tool produces."""
    brand_name: str = ""
    timestamp: datetime = field(default_factory=utc_now)
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "brand_name": self.brand_name,
            "timestamp": _iso(self.timestamp),
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
            "metadata": dict(self.metadata),
        }

    def to_dict(self) -> Dict[str, Any]:
        return self._base_dict()


@dataclass
class VisibilityReport(AggregateReport):
    """Brand visibility across text-generation providers."""
    provider_results: List[ProviderResult] = field(default_factory=list)
    overall_score: int = 0
    average_sentiment: Sentiment = Sentiment.NEUTRAL
    total_mentions: int = 0
    success_rate: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "provider_results": [r.to_dict() for r in self.provider_results],
            "overall_score": self.overall_score,
            "average_sentiment": self.average_sentiment.value,
            "total_mentions": self.total_mentions,
            "success_rate": self.success_rate,
        })
        return data


@dataclass
class MonitorReport(AggregateReport):
    """Brand mentions collected from content sources."""
    items: List[SourceItem] = field(default_factory=list)
    mention_count: int = 0
    average_sentiment: Sentiment = Sentiment.NEUTRAL
    sentiment_analysis: Dict[str, int] = field(default_factory=dict)
    top_sources: List[str] = field(default_factory=list)
    trending_topics: List[str] = field(default_factory=list)
    credibility_score: float = 0.0
    source_breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "mention_count": self.mention_count,
            "average_sentiment": self.average_sentiment.value,
            "sentiment_analysis": dict(self.sentiment_analysis),
            "top_sources": list(self.top_sources),
            "trending_topics": list(self.trending_topics),
            "credibility_score": self.credibility_score,
            "source_breakdown": dict(self.source_breakdown),
            "items": [item.to_dict() for item in self.items],
        })
        return data


@dataclass
class BrandScore:
    """Composite competitive score of one brand."""
    brand: str
    score: int
    average_visibility: float
    total_mentions: int
    positive_ratio: float
    provider_results: List[ProviderResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brand": self.brand,
            "score": self.score,
            "average_visibility": self.average_visibility,
            "total_mentions": self.total_mentions,
            "positive_ratio": self.positive_ratio,
            "provider_results": [r.to_dict() for r in self.provider_results],
        }


@dataclass
class MarketPosition:
    rank: int = 0
    total_brands: int = 0
    market_share: int = 0
    competitive_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "total_brands": self.total_brands,
            "market_share": self.market_share,
            "competitive_score": self.competitive_score,
        }


@dataclass
class CompetitorShare:
    name: str
    share: int
    rank: int
    change: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "share": self.share, "rank": self.rank, "change": self.change}


@dataclass
class ShareOfVoice:
    """Percent of total composite score held by each brand."""
    primary_brand: int = 0
    competitors: List[CompetitorShare] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.primary_brand + sum(c.share for c in self.competitors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primary_brand": self.primary_brand,
            "competitors": [c.to_dict() for c in self.competitors],
        }


@dataclass(frozen=True)
class CompetitiveGap:
    category: str
    opportunity: str
    impact: str  # high | medium | low
    effort: str  # high | medium | low

    def to_dict(self) -> Dict[str, str]:
        return {
            "category": self.category,
            "opportunity": self.opportunity,
            "impact": self.impact,
            "effort": self.effort,
        }


@dataclass
class CompetitiveReport(AggregateReport):
    """Primary brand positioned against its competitors."""
    primary_brand: str = ""
    competitors: List[str] = field(default_factory=list)
    industry: str = "general"
    brand_scores: List[BrandScore] = field(default_factory=list)
    market_position: MarketPosition = field(default_factory=MarketPosition)
    share_of_voice: ShareOfVoice = field(default_factory=ShareOfVoice)
    competitive_gaps: List[CompetitiveGap] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "primary_brand": self.primary_brand,
            "competitors": list(self.competitors),
            "industry": self.industry,
            "brand_scores": [s.to_dict() for s in self.brand_scores],
            "market_position": self.market_position.to_dict(),
            "share_of_voice": self.share_of_voice.to_dict(),
            "competitive_gaps": [g.to_dict() for g in self.competitive_gaps],
        })
        return data


@dataclass
class PlatformScore:
    """Content optimization score for one assistant platform."""
    platform: str
    score: float
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "score": self.score,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "improvements": list(self.improvements),
        }


@dataclass
class ContentOptimizationReport(AggregateReport):
    """How well a piece of content is positioned for assistant platforms."""
    target_keywords: List[str] = field(default_factory=list)
    industry: Optional[str] = None
    content_type: Optional[str] = None
    platform_analysis: List[PlatformScore] = field(default_factory=list)
    overall_optimization: Dict[str, Any] = field(default_factory=dict)
    content_structure: Dict[str, Any] = field(default_factory=dict)
    keyword_integration: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = self._base_dict()
        data.update({
            "target_keywords": list(self.target_keywords),
            "industry": self.industry,
            "content_type": self.content_type,
            "platform_analysis": [p.to_dict() for p in self.platform_analysis],
            "overall_optimization": dict(self.overall_optimization),
            "content_structure": dict(self.content_structure),
            "keyword_integration": dict(self.keyword_integration),
        })
        return data
