"""Brand analysis tools: validate input, fan out, score, narrate and return a report."""

import logging
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, TypeVar

from ..core import content as content_scoring
from ..core.errors import InputValidationError
from ..core.events import EventSink, LoggingEventSink, safe_emit
from ..core.insights import InsightGenerator
from ..core.models import (
    AggregateReport,
    BrandScore,
    CompetitiveReport,
    CompetitorShare,
    ContentOptimizationReport,
    MarketPosition,
    MonitorReport,
    ProviderResult,
    Sentiment,
    ShareOfVoice,
    VisibilityReport,
)
from ..core.requests import (
    CompetitiveRequest,
    ContentRequest,
    MonitorRequest,
    VisibilityRequest,
    parse_request,
)
from ..core.scoring import (
    average_sentiment,
    brand_composite_score,
    competitive_gaps,
    market_share,
    overall_visibility,
    positive_ratio,
    rank_brands,
    round_half_up,
    share_of_voice,
    total_mentions,
)
from .crawler import SourceCrawler, top_sources, trending_topics
from .fanout import FanOutExecutor
from .gateway import ProviderGateway
from .providers import ProviderCapability, competitive_prompts, default_prompts
from .sources import CrawlOptions, SourceCapability

logger = logging.getLogger(__name__)

FAILURE_RECOMMENDATION = "Please check your input and try again"

ReportT = TypeVar("ReportT", bound=AggregateReport)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class BrandAnalysisService:
    """Tool layer over the provider gateway and source crawler.

    Only InputValidationError escapes these methods; any other failure produces a
    degraded report with an explanatory insight.
    """

    def __init__(
        self,
        providers: Sequence[ProviderCapability] = (),
        sources: Sequence[SourceCapability] = (),
        executor: Optional[FanOutExecutor] = None,
        gateway: Optional[ProviderGateway] = None,
        crawler: Optional[SourceCrawler] = None,
        insights: Optional[InsightGenerator] = None,
        events: Optional[EventSink] = None,
    ):
        self.providers = tuple(providers)
        self.sources = tuple(sources)
        self.events = events if events is not None else LoggingEventSink()
        executor = executor or FanOutExecutor(events=self.events)
        self.gateway = gateway or ProviderGateway(executor=executor)
        self.crawler = crawler or SourceCrawler(executor=executor)
        self.insights = insights or InsightGenerator()

    def _degrade(self, report: ReportT, error: Exception, include_recommendations: bool, start: float) -> ReportT:
        logger.error(f"❌ {report.metadata.get('category', 'analysis')} failed: {error}")
        safe_emit(self.events, "batch_failure", category=report.metadata.get("category"), error=str(error))
        report.insights = [f"Analysis failed: {error}"]
        report.recommendations = [FAILURE_RECOMMENDATION] if include_recommendations else []
        report.metadata["execution_time_ms"] = _elapsed_ms(start)
        report.metadata["error"] = str(error)
        return report

    # ---- visibility ----

    def analyze_visibility(
        self,
        brand_name: str,
        queries: Optional[Sequence[str]] = None,
        timeframe: str = "week",
        include_recommendations: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> VisibilityReport:
        """Brand visibility across every configured provider."""
        request = parse_request(
            VisibilityRequest,
            brand_name=brand_name,
            queries=list(queries) if queries is not None else None,
            timeframe=timeframe,
            include_recommendations=include_recommendations,
        )
        start = time.monotonic()
        prompts = request.queries or default_prompts(request.brand_name)
        report = VisibilityReport(
            brand_name=request.brand_name,
            metadata={
                "category": "visibility-analysis",
                "timeframe": request.timeframe,
                "queries_used": list(prompts),
                "providers_queried": [],
            },
        )

        try:
            if not self.providers:
                report.insights = [
                    "No AI providers are currently available for analysis.",
                    "Configure at least one of OPENAI_API_KEY, ANTHROPIC_API_KEY, GOOGLE_API_KEY or PERPLEXITY_API_KEY.",
                ]
                if request.include_recommendations:
                    report.recommendations = ["Configure a provider API key to enable brand visibility analysis"]
                report.metadata["error"] = "No AI providers available"
                report.metadata["execution_time_ms"] = _elapsed_ms(start)
                return report

            results = self.gateway.run_batch(request.brand_name, prompts, self.providers, cancel_event)
            results.sort(key=lambda r: r.provider_name)

            insights, recommendations = self.insights.visibility(results)
            succeeded = sum(1 for r in results if r.succeeded)

            report.provider_results = results
            report.overall_score = overall_visibility(results)
            report.average_sentiment = average_sentiment(r.sentiment.overall for r in results)
            report.total_mentions = total_mentions(results)
            report.success_rate = round_half_up(succeeded * 100 / len(results)) if results else 0
            report.insights = insights
            report.recommendations = recommendations if request.include_recommendations else []
            report.metadata["providers_queried"] = [r.provider_name for r in results]
            report.metadata["execution_time_ms"] = _elapsed_ms(start)
            return report
        except Exception as e:
            return self._degrade(report, e, request.include_recommendations, start)

    # ---- monitoring ----

    def _select_sources(self, names: Optional[Sequence[str]]) -> List[SourceCapability]:
        if not names:
            return list(self.sources)
        wanted = {n.strip().lower() for n in names}
        selected = [s for s in self.sources if s.name.lower() in wanted]
        missing = wanted - {s.name.lower() for s in selected}
        if missing:
            logger.warning(f"Requested sources not configured: {sorted(missing)}")
        return selected

    def monitor_brand(
        self,
        brand_name: str,
        sources: Optional[Sequence[str]] = None,
        timeframe: str = "week",
        limit: int = 10,
        include_insights: bool = True,
        include_recommendations: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> MonitorReport:
        """Brand mentions, sentiment and credibility across content sources."""
        request = parse_request(
            MonitorRequest,
            brand_name=brand_name,
            sources=list(sources) if sources is not None else None,
            timeframe=timeframe,
            limit=limit,
            include_insights=include_insights,
            include_recommendations=include_recommendations,
        )
        start = time.monotonic()
        selected = self._select_sources(request.sources)
        report = MonitorReport(
            brand_name=request.brand_name,
            metadata={
                "category": "brand-monitoring",
                "timeframe": request.timeframe,
                "sources_queried": [s.name for s in selected],
            },
        )

        try:
            options = CrawlOptions(limit=request.limit, timeframe=request.timeframe)
            items = self.crawler.run(request.brand_name, selected, options, cancel_event)
            items.sort(key=lambda i: (i.source, i.url))

            mention_count = sum(len(i.mentions) for i in items)
            sentiment = average_sentiment(i.sentiment.overall for i in items)
            distribution = Counter(i.sentiment.overall.value for i in items)
            sources_ranked = top_sources(items)
            topics = trending_topics(items)

            report.items = items
            report.mention_count = mention_count
            report.average_sentiment = sentiment
            report.sentiment_analysis = {s.value: distribution.get(s.value, 0) for s in Sentiment}
            report.top_sources = sources_ranked
            report.trending_topics = topics
            report.credibility_score = (
                round(sum(i.credibility_score for i in items) / len(items), 2) if items else 0.0
            )
            report.source_breakdown = dict(Counter(i.source for i in items))

            insights, recommendations = self.insights.monitoring(
                items, mention_count, sentiment, sources_ranked, topics
            )
            report.insights = insights if request.include_insights else []
            report.recommendations = recommendations if request.include_recommendations else []
            report.metadata["execution_time_ms"] = _elapsed_ms(start)
            return report
        except Exception as e:
            return self._degrade(report, e, request.include_recommendations, start)

    # ---- competition ----

    def _brand_results(
        self,
        brands: Sequence[str],
        prompts: Sequence[str],
        cancel_event: Optional[threading.Event],
    ) -> Dict[str, List[ProviderResult]]:
        """Run the provider batch for every brand concurrently."""
        results: Dict[str, List[ProviderResult]] = {brand: [] for brand in brands}
        if not self.providers:
            return results

        with ThreadPoolExecutor(max_workers=len(brands), thread_name_prefix="brandpulse-brand") as executor:
            future_to_brand = {
                executor.submit(self.gateway.run_batch, brand, prompts, self.providers, cancel_event): brand
                for brand in brands
            }
            for future in as_completed(future_to_brand):
                brand = future_to_brand[future]
                try:
                    results[brand] = sorted(future.result(), key=lambda r: r.provider_name)
                except Exception as e:
                    logger.error(f"❌ {brand}: provider batch failed: {e}")
                    results[brand] = [ProviderResult.degraded(p.name, error=str(e)) for p in self.providers]
        return results

    def analyze_competition(
        self,
        primary_brand: str,
        competitors: Sequence[str],
        industry: str = "general",
        timeframe: str = "week",
        include_recommendations: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> CompetitiveReport:
        """Position the primary brand against its competitors."""
        request = parse_request(
            CompetitiveRequest,
            primary_brand=primary_brand,
            competitors=list(competitors) if competitors is not None else competitors,
            industry=industry or "general",
            timeframe=timeframe,
            include_recommendations=include_recommendations,
        )
        start = time.monotonic()
        # brand names are compared without regard to case; the first spelling seen wins
        seen = {request.primary_brand.casefold()}
        rivals = []
        for competitor in request.competitors:
            if competitor.casefold() not in seen:
                seen.add(competitor.casefold())
                rivals.append(competitor)
        if not rivals:
            raise InputValidationError(["competitors: at least one competitor must differ from the primary brand"])
        report = CompetitiveReport(
            brand_name=request.primary_brand,
            primary_brand=request.primary_brand,
            competitors=rivals,
            industry=request.industry,
            market_position=MarketPosition(total_brands=len(rivals) + 1),
            share_of_voice=ShareOfVoice(competitors=[
                CompetitorShare(name=c, share=0, rank=i + 2, change="unknown") for i, c in enumerate(rivals)
            ]),
            metadata={
                "category": "competitive-analysis",
                "timeframe": request.timeframe,
                "providers_queried": [p.name for p in self.providers],
            },
        )

        try:
            prompts = competitive_prompts(request.primary_brand, rivals, request.industry)
            brands = [request.primary_brand] + rivals
            by_brand = self._brand_results(brands, prompts, cancel_event)

            scores = {brand: brand_composite_score(by_brand[brand]) for brand in brands}
            ranking = rank_brands(scores)
            primary_results = by_brand[request.primary_brand]
            rival_results = {brand: by_brand[brand] for brand in rivals}

            report.brand_scores = [
                BrandScore(
                    brand=brand,
                    score=scores[brand],
                    average_visibility=float(overall_visibility(by_brand[brand])),
                    total_mentions=total_mentions(by_brand[brand]),
                    positive_ratio=round(positive_ratio(by_brand[brand]), 2),
                    provider_results=by_brand[brand],
                )
                for brand in ranking
            ]
            report.market_position = MarketPosition(
                rank=ranking.index(request.primary_brand) + 1,
                total_brands=len(brands),
                market_share=market_share(scores, request.primary_brand),
                competitive_score=scores[request.primary_brand],
            )
            report.share_of_voice = share_of_voice(scores, request.primary_brand)
            report.competitive_gaps = competitive_gaps(primary_results, rival_results)
            report.insights = self.insights.competitive_insights(
                request.primary_brand, report.market_position, report.share_of_voice, report.competitive_gaps
            )
            if request.include_recommendations:
                report.recommendations = self.insights.competitive(
                    report.market_position, report.share_of_voice, report.competitive_gaps
                )
            report.metadata["execution_time_ms"] = _elapsed_ms(start)
            return report
        except Exception as e:
            return self._degrade(report, e, request.include_recommendations, start)

    # ---- content ----

    def optimize_content(
        self,
        content: str,
        target_keywords: Sequence[str],
        industry: Optional[str] = None,
        content_type: Optional[str] = None,
        include_recommendations: bool = True,
    ) -> ContentOptimizationReport:
        """Score content for assistant platforms and suggest improvements."""
        request = parse_request(
            ContentRequest,
            content=content,
            target_keywords=list(target_keywords) if target_keywords is not None else target_keywords,
            industry=industry,
            content_type=content_type,
            include_recommendations=include_recommendations,
        )
        start = time.monotonic()
        report = ContentOptimizationReport(
            target_keywords=list(request.target_keywords),
            industry=request.industry,
            content_type=request.content_type,
            metadata={
                "category": "content-optimization",
                "content_length": len(request.content),
                "keyword_count": len(request.target_keywords),
            },
        )

        try:
            result = content_scoring.optimize(
                request.content, request.target_keywords, request.include_recommendations
            )
            report.platform_analysis = result["platform_analysis"]
            report.overall_optimization = result["overall_optimization"]
            report.content_structure = result["content_structure"]
            report.keyword_integration = result["keyword_integration"]
            report.recommendations = result["recommendations"]
            average = report.overall_optimization["average_score"]
            best = max(report.platform_analysis, key=lambda p: p.score)
            report.insights = [
                f"Average optimization score {average}/100 across {len(report.platform_analysis)} platforms",
                f"Best suited for {best.platform} ({best.score}/100)",
            ] + [f"Priority: {p}" for p in report.overall_optimization["priority_improvements"]]
            report.metadata["execution_time_ms"] = _elapsed_ms(start)
            return report
        except Exception as e:
            return self._degrade(report, e, request.include_recommendations, start)
