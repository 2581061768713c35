"""Tests for rule-based insights and recommendations."""

from brandpulse.core.insights import (
    MONITOR_GENERIC,
    VISIBILITY_GENERIC,
    InsightGenerator,
    cap_recommendations,
)
from brandpulse.core.models import (
    CompetitiveGap,
    Engagement,
    MarketPosition,
    Mention,
    MentionKind,
    Sentiment,
    SentimentResult,
    ShareOfVoice,
    SourceItem,
)
from conftest import make_result


def make_item(source="reddit", mentions=1, credibility=0.9):
    mention = Mention(text="Tesla", position=0, kind=MentionKind.EXACT, confidence=1.0)
    return SourceItem(
        source=source,
        url=f"https://example.com/{source}",
        title="Tesla",
        content="Tesla",
        mentions=(mention,) * mentions,
        sentiment=SentimentResult.neutral(),
        published_at=None,
        credibility_score=credibility,
        engagement=Engagement(),
    )


class TestVisibilityInsights:

    def setup_method(self):
        self.generator = InsightGenerator()

    def test_strong_positive_results(self):
        results = [
            make_result("openai", score=90, sentiment=Sentiment.POSITIVE, mentions=4),
            make_result("claude", score=80, sentiment=Sentiment.POSITIVE, mentions=2),
        ]
        insights, recommendations = self.generator.visibility(results)
        assert insights[0] == "Strong visibility across AI platforms (85.0/100)"
        assert insights[1] == "Positive sentiment dominant across 2/2 models"
        assert insights[2] == "Strongest performance on openai (90/100)"
        assert insights[3] == "6 total brand mentions detected"
        assert recommendations == list(VISIBILITY_GENERIC)

    def test_weak_results_get_specific_advice_first(self):
        results = [make_result("openai", score=10, mentions=0), make_result("claude", score=20, mentions=0)]
        insights, recommendations = self.generator.visibility(results)
        assert "No brand mentions detected in AI responses" in insights
        assert recommendations[0] == "Focus on improving visibility on openai, claude"
        assert len(recommendations) == 5
        assert recommendations[-2:] == list(VISIBILITY_GENERIC)

    def test_no_results(self):
        insights, recommendations = self.generator.visibility([])
        assert insights == ["No AI providers are currently available for analysis."]
        assert recommendations[-2:] == list(VISIBILITY_GENERIC)


class TestMonitoringInsights:

    def setup_method(self):
        self.generator = InsightGenerator()

    def test_no_mentions(self):
        insights, recommendations = self.generator.monitoring([], 0, Sentiment.NEUTRAL, [], [])
        assert insights == [
            "No brand mentions detected in the specified timeframe",
            "Neutral sentiment across monitored sources",
        ]
        assert recommendations[0].startswith("Increase brand visibility")
        assert len(recommendations) <= 5

    def test_negative_low_credibility(self):
        items = [make_item("reddit", mentions=1, credibility=0.5)]
        insights, recommendations = self.generator.monitoring(
            items, 1, Sentiment.NEGATIVE, ["reddit"], ["technology"]
        )
        assert "Negative sentiment detected - attention required" in insights
        assert "Strongest presence on reddit platform" in insights
        assert "Trending topics: technology" in insights
        assert "Low credibility sources (50% average score)" in insights
        assert len(recommendations) == 5
        assert recommendations[-2:] == list(MONITOR_GENERIC[:2])

    def test_high_volume(self):
        items = [make_item("reddit", mentions=30), make_item("youtube", mentions=30)]
        insights, _ = self.generator.monitoring(items, 60, Sentiment.POSITIVE, ["reddit", "youtube"], [])
        assert insights[0] == "High brand visibility with 60 mentions across 2 sources"
        assert "High credibility sources (90% average score)" in insights


class TestCompetitiveRecommendations:

    def setup_method(self):
        self.generator = InsightGenerator()

    def test_trailing_brand(self):
        gaps = [CompetitiveGap("Visibility", "Improve brand visibility across AI platforms", "high", "medium")]
        recommendations = self.generator.competitive(
            MarketPosition(rank=3, total_brands=3), ShareOfVoice(primary_brand=10), gaps
        )
        assert len(recommendations) == 5
        assert recommendations[0].startswith("Focus on improving competitive positioning")
        assert recommendations[4] == "Prioritize visibility improvements: Improve brand visibility across AI platforms"

    def test_leader(self):
        recommendations = self.generator.competitive(
            MarketPosition(rank=1, total_brands=2), ShareOfVoice(primary_brand=60), []
        )
        assert recommendations[0] == "Maintain market leadership by continuing to innovate and engage"
        assert len(recommendations) == 5

    def test_competitive_insights(self):
        insights = self.generator.competitive_insights(
            "Tesla", MarketPosition(rank=1, total_brands=2, market_share=60, competitive_score=80),
            ShareOfVoice(primary_brand=60), [],
        )
        assert insights[0] == "Tesla ranks #1 of 2 brands (competitive score 80)"
        assert insights[-1] == "No visibility, sentiment or mention gaps detected"


def test_cap_recommendations_keeps_generic_items():
    specific = [f"specific {i}" for i in range(10)]
    capped = cap_recommendations(specific, ("generic a", "generic b", "generic c"))
    assert capped == ["specific 0", "specific 1", "specific 2", "generic a", "generic b"]
