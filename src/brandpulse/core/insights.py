"""Rule-based narrative synthesis: insights and recommendations from aggregated scores."""

from collections import Counter
from typing import List, Sequence, Tuple

from .constants import InsightConstants
from .models import (
    CompetitiveGap,
    MarketPosition,
    ProviderResult,
    Sentiment,
    ShareOfVoice,
    SourceItem,
)
from .scoring import round_half_up

VISIBILITY_GENERIC = (
    "Monitor competitor visibility for market positioning insights",
    "Regularly update brand information to maintain relevance",
)

MONITOR_GENERIC = (
    "Set up automated monitoring alerts for brand mentions",
    "Regularly review and update brand monitoring strategy",
    "Track competitor mentions for comparative analysis",
)

COMPETITIVE_GENERIC = (
    "Implement continuous competitive monitoring and analysis",
    "Develop AI platform-specific content strategies",
    "Create competitive response playbooks for different scenarios",
)

# Generic items that always survive truncation
RESERVED_GENERIC = 2


def cap_recommendations(specific: Sequence[str], generic: Sequence[str]) -> List[str]:
    """Truncate to the cap while keeping room for generic monitoring advice."""
    limit = InsightConstants.MAX_RECOMMENDATIONS
    room = max(0, limit - min(len(generic), RESERVED_GENERIC))
    return (list(specific)[:room] + list(generic))[:limit]


def cap_insights(insights: Sequence[str]) -> List[str]:
    return list(insights)[:InsightConstants.MAX_INSIGHTS]


class InsightGenerator:
    """Deterministic narratives for each report kind."""

    def visibility(self, results: Sequence[ProviderResult]) -> Tuple[List[str], List[str]]:
        """Insights and recommendations for provider visibility results."""
        if not results:
            return (
                ["No AI providers are currently available for analysis."],
                cap_recommendations(
                    ["Configure at least one provider API key to enable brand visibility analysis"],
                    VISIBILITY_GENERIC,
                ),
            )

        insights = []
        specific = []
        count = len(results)
        avg_score = sum(r.visibility_score for r in results) / count

        if avg_score > 70:
            insights.append(f"Strong visibility across AI platforms ({avg_score:.1f}/100)")
        elif avg_score > 40:
            insights.append(f"Moderate visibility across AI platforms ({avg_score:.1f}/100)")
        else:
            insights.append(f"Limited visibility across AI platforms ({avg_score:.1f}/100)")

        sentiments = Counter(r.sentiment.overall for r in results)
        positive = sentiments[Sentiment.POSITIVE]
        negative = sentiments[Sentiment.NEGATIVE]
        if positive > count / 2:
            insights.append(f"Positive sentiment dominant across {positive}/{count} models")
        elif negative > count / 2:
            insights.append(f"Negative sentiment detected across {negative}/{count} models")
        else:
            insights.append("Mixed sentiment across AI platforms")

        # First provider wins ties
        best = max(results, key=lambda r: r.visibility_score)
        insights.append(f"Strongest performance on {best.provider_name} ({best.visibility_score}/100)")

        total = sum(r.mention_count for r in results)
        if total > 0:
            insights.append(f"{total} total brand mentions detected")
        else:
            insights.append("No brand mentions detected in AI responses")

        if avg_score < 50:
            specific.append("Consider improving brand visibility through content optimization")
            specific.append("Focus on creating more comprehensive brand descriptions")
        if negative > positive:
            specific.append("Address negative sentiment patterns in brand messaging")
            specific.append("Develop content strategy to improve brand perception")
        if total == 0:
            specific.append("Enhance brand presence by creating more detailed brand information")
            specific.append("Consider updating brand descriptions across platforms")

        low = [r.provider_name for r in results if r.visibility_score < InsightConstants.LOW_PROVIDER_SCORE]
        if low:
            # Provider-level advice goes first so truncation never hides it
            specific.insert(0, f"Focus on improving visibility on {', '.join(low)}")

        return cap_insights(insights), cap_recommendations(specific, VISIBILITY_GENERIC)

    def monitoring(
        self,
        items: Sequence[SourceItem],
        total_mentions: int,
        average_sentiment: Sentiment,
        top_sources: Sequence[str],
        trending_topics: Sequence[str],
    ) -> Tuple[List[str], List[str]]:
        """Insights and recommendations for crawled source items."""
        insights = []
        specific = []

        if total_mentions > InsightConstants.HIGH_VOLUME:
            insights.append(
                f"High brand visibility with {total_mentions} mentions across {len(top_sources)} sources"
            )
        elif total_mentions > InsightConstants.MODERATE_VOLUME:
            insights.append(f"Moderate brand visibility with {total_mentions} mentions detected")
        elif total_mentions > 0:
            insights.append(f"Low brand visibility with only {total_mentions} mentions found")
        else:
            insights.append("No brand mentions detected in the specified timeframe")

        if average_sentiment == Sentiment.POSITIVE:
            insights.append("Positive sentiment dominant across monitored sources")
        elif average_sentiment == Sentiment.NEGATIVE:
            insights.append("Negative sentiment detected - attention required")
        else:
            insights.append("Neutral sentiment across monitored sources")

        if top_sources:
            insights.append(f"Strongest presence on {top_sources[0]} platform")
        if trending_topics:
            insights.append(f"Trending topics: {', '.join(trending_topics)}")

        avg_credibility = None
        if items:
            avg_credibility = sum(i.credibility_score for i in items) / len(items)
            percent = round_half_up(avg_credibility * 100)
            if avg_credibility > 0.8:
                insights.append(f"High credibility sources ({percent}% average score)")
            elif avg_credibility > 0.6:
                insights.append(f"Moderate credibility sources ({percent}% average score)")
            else:
                insights.append(f"Low credibility sources ({percent}% average score)")

        if total_mentions < InsightConstants.LOW_VOLUME_RECOMMENDATION:
            specific.append("Increase brand visibility through content marketing and social media engagement")
            specific.append("Consider launching a PR campaign to generate more brand mentions")

        if average_sentiment == Sentiment.NEGATIVE:
            specific.append("Address negative sentiment through customer service improvements")
            specific.append("Develop a crisis communication strategy")
            specific.append("Monitor and respond to negative mentions proactively")
        elif average_sentiment == Sentiment.POSITIVE:
            specific.append("Leverage positive sentiment by amplifying positive mentions")
            specific.append("Consider user-generated content campaigns")

        per_source = Counter()
        for item in items:
            per_source[item.source] += len(item.mentions)
        weak = [s for s, n in per_source.items() if n < InsightConstants.LOW_SOURCE_MENTIONS]
        if weak:
            specific.append(f"Focus on improving presence on {', '.join(weak)} platforms")

        if avg_credibility is not None and avg_credibility < InsightConstants.CREDIBILITY_TARGET:
            specific.append("Focus on high-authority sources to improve credibility scores")
            specific.append("Develop relationships with industry influencers and thought leaders")

        return cap_insights(insights), cap_recommendations(specific, MONITOR_GENERIC)

    def competitive(
        self,
        market_position: MarketPosition,
        share: ShareOfVoice,
        gaps: Sequence[CompetitiveGap],
    ) -> List[str]:
        """Strategic recommendations for a competitive analysis, at most five."""
        recommendations = []

        if market_position.rank > 2:
            recommendations.append("Focus on improving competitive positioning through targeted content strategy")
            recommendations.append("Develop unique value propositions to differentiate from top competitors")
        elif market_position.rank == 1:
            recommendations.append("Maintain market leadership by continuing to innovate and engage")
            recommendations.append("Monitor competitor activities to defend market position")

        if share.primary_brand < InsightConstants.SHARE_OF_VOICE_TARGET:
            recommendations.append("Increase share of voice through aggressive content marketing")
            recommendations.append("Develop thought leadership content to improve brand authority")

        for gap in gaps:
            if gap.impact == "high":
                recommendations.append(f"Prioritize {gap.category.lower()} improvements: {gap.opportunity}")

        recommendations.extend(COMPETITIVE_GENERIC)
        return recommendations[:InsightConstants.MAX_RECOMMENDATIONS]

    def competitive_insights(
        self,
        primary_brand: str,
        market_position: MarketPosition,
        share: ShareOfVoice,
        gaps: Sequence[CompetitiveGap],
    ) -> List[str]:
        insights = [
            f"{primary_brand} ranks #{market_position.rank} of {market_position.total_brands} brands "
            f"(competitive score {market_position.competitive_score})",
            f"{primary_brand} holds {share.primary_brand}% share of voice",
        ]
        if share.competitors:
            leader = share.competitors[0]
            insights.append(f"Leading competitor: {leader.name} ({leader.share}% share of voice)")
        flagged = [g.category for g in gaps if g.category not in ("Innovation", "Differentiation")]
        if flagged:
            insights.append(f"Competitive gaps detected: {', '.join(flagged)}")
        else:
            insights.append("No visibility, sentiment or mention gaps detected")
        return cap_insights(insights)
