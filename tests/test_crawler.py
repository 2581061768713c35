"""Tests for the source crawler."""

from datetime import datetime, timezone

import pytest

from brandpulse.core.errors import SourceError
from brandpulse.core.events import CollectingEventSink
from brandpulse.core.models import Engagement, RawItem, Sentiment
from brandpulse.services.crawler import SourceCrawler, top_sources, trending_topics
from brandpulse.services.fanout import FanOutExecutor
from brandpulse.services.sources import CrawlOptions, FixtureSource

WEIGHTS = {"reddit": 0.7, "hackernews": 0.8}


def raw(title, content, upvotes=0):
    return RawItem(
        url=f"https://example.com/{abs(hash(title))}",
        title=title,
        content=content,
        published_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        engagement=Engagement(upvotes=upvotes),
    )


class TestSourceCrawler:

    def setup_method(self):
        self.events = CollectingEventSink()

    def crawler(self, policy):
        return SourceCrawler(executor=FanOutExecutor(policy, events=self.events), source_weights=WEIGHTS)

    def test_items_without_mentions_are_dropped(self, fast_policy):
        source = FixtureSource("reddit", [
            raw("Tesla review", "Tesla is amazing to drive.", upvotes=120),
            raw("Weather", "Sunny all week."),
        ])
        items = self.crawler(fast_policy).run("Tesla", [source])
        assert len(items) == 1
        item = items[0]
        assert item.source == "reddit"
        assert item.sentiment.overall == Sentiment.POSITIVE
        # 0.5 + 0.7 * 0.3 + 0.2 engagement
        assert item.credibility_score == pytest.approx(0.91)
        assert len(item.mentions) == 2

    def test_failing_source_is_isolated(self, fast_policy):
        good = FixtureSource("hackernews", [raw("Tesla news", "Tesla ships an update.")])
        bad = FixtureSource("reddit", error=SourceError("reddit", "rate limited"))
        items = self.crawler(fast_policy).run("Tesla", [good, bad])
        assert [i.source for i in items] == ["hackernews"]
        assert "task_failed" in self.events.names()

    def test_options_are_passed_to_sources(self, fast_policy):
        source = FixtureSource("reddit", [raw(f"Tesla {i}", "Tesla") for i in range(5)])
        options = CrawlOptions(limit=2, timeframe="day")
        items = self.crawler(fast_policy).run("Tesla", [source], options)
        assert len(items) == 2
        assert source.calls == [("Tesla", options)]

    def test_no_sources(self, fast_policy):
        assert self.crawler(fast_policy).run("Tesla", []) == []

    def test_malformed_items_are_skipped(self, fast_policy):
        source = FixtureSource("reddit", [raw("Tesla", "Tesla rocks")])
        source.items = source.items + ({"title": "not a RawItem"},)
        items = self.crawler(fast_policy).run("Tesla", [source])
        assert len(items) == 1


class TestCrawlSummaries:

    def setup_method(self):
        crawler = SourceCrawler(source_weights=WEIGHTS)
        self.items = [
            crawler.score_item("reddit", "Tesla", raw("Tesla AI update", "Tesla shipped a new feature.")),
            crawler.score_item("reddit", "Tesla", raw("Tesla", "Tesla business results")),
            crawler.score_item("hackernews", "Tesla", raw("Tesla", "Tesla technology")),
        ]

    def test_top_sources(self):
        assert top_sources(self.items) == ["reddit", "hackernews"]

    def test_trending_topics_use_whole_words(self):
        assert trending_topics(self.items) == ["ai", "technology", "business", "update", "feature"]
