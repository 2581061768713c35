"""Tests for content source capabilities."""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
import requests
from googleapiclient.errors import HttpError

from brandpulse.core.config import Settings
from brandpulse.core.errors import InputValidationError, SourceError
from brandpulse.services.sources import (
    CrawlOptions,
    HackerNewsSource,
    RedditSource,
    YouTubeSource,
    build_search_query,
    build_source_capabilities,
)

MAY_FIRST = 1714521600  # 2024-05-01T00:00:00Z


def no_credentials(**overrides):
    values = dict(
        _env_file=None,
        reddit_client_id="",
        reddit_client_secret="",
        youtube_api_key="",
    )
    values.update(overrides)
    return Settings(**values)


class TestCrawlOptions:

    def test_defaults(self):
        options = CrawlOptions()
        assert options.limit == 10
        assert options.timeframe == "week"

    @pytest.mark.parametrize("limit, timeframe", [(0, "week"), (101, "week"), (10, "quarter")])
    def test_invalid(self, limit, timeframe):
        with pytest.raises(InputValidationError):
            CrawlOptions(limit=limit, timeframe=timeframe)


class TestSearchQuery:

    def test_plain_query_is_quoted_brand(self):
        assert build_search_query("reddit", "Tesla") == '"Tesla"'

    def test_web_search_scopes_to_site(self):
        assert build_search_query("reddit", "Tesla", web_search=True) == '"Tesla" site:reddit.com'
        assert build_search_query("unknown", "Tesla", web_search=True) == '"Tesla"'


class TestRedditSource:

    def setup_method(self):
        self.reddit = Mock()
        self.source = RedditSource("id", "secret", "agent", reddit=self.reddit)

    def test_fetch(self):
        submission = Mock(
            permalink="/r/cars/comments/abc",
            title="Tesla Model 3",
            selftext="Driving the Tesla daily",
            created_utc=MAY_FIRST,
            author="alice",
            score=12,
            num_comments=3,
        )
        self.reddit.subreddit.return_value.search.return_value = [submission]

        items = self.source.fetch("Tesla", CrawlOptions(limit=5, timeframe="day"))

        self.reddit.subreddit.assert_called_once_with("all")
        self.reddit.subreddit.return_value.search.assert_called_once_with(
            '"Tesla"', sort="relevance", time_filter="day", limit=5,
        )
        assert len(items) == 1
        item = items[0]
        assert item.url == "https://www.reddit.com/r/cars/comments/abc"
        assert item.content == "Driving the Tesla daily"
        assert item.author == "alice"
        assert item.published_at == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert item.engagement.upvotes == 12
        assert item.engagement.comments == 3

    def test_failure_raises_source_error(self):
        self.reddit.subreddit.return_value.search.side_effect = RuntimeError("429 Too Many Requests")
        with pytest.raises(SourceError) as exc:
            self.source.fetch("Tesla", CrawlOptions())
        assert exc.value.source == "reddit"


class TestHackerNewsSource:

    def setup_method(self):
        self.session = Mock()
        self.source = HackerNewsSource(session=self.session)

    def test_fetch(self):
        response = Mock()
        response.json.return_value = {"hits": [{
            "objectID": "42",
            "title": "Tesla ships FSD",
            "url": None,
            "story_text": None,
            "created_at_i": MAY_FIRST,
            "author": "bob",
            "points": 80,
            "num_comments": 7,
        }]}
        self.session.get.return_value = response

        items = self.source.fetch("Tesla", CrawlOptions(limit=3))

        params = self.session.get.call_args.kwargs["params"]
        assert params["query"] == '"Tesla"'
        assert params["hitsPerPage"] == 3
        assert params["tags"] == "story"
        assert items[0].url == "https://news.ycombinator.com/item?id=42"
        assert items[0].content == "Tesla ships FSD"
        assert items[0].engagement.upvotes == 80

    def test_transport_error(self):
        self.session.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(SourceError):
            self.source.fetch("Tesla", CrawlOptions())

    def test_bad_json(self):
        response = Mock()
        response.json.side_effect = ValueError("not json")
        self.session.get.return_value = response
        with pytest.raises(SourceError):
            self.source.fetch("Tesla", CrawlOptions())


class TestYouTubeSource:

    def setup_method(self):
        self.youtube = Mock()
        self.source = YouTubeSource("key", youtube=self.youtube)

    def test_fetch(self):
        self.youtube.search.return_value.list.return_value.execute.return_value = {"items": [{
            "id": {"videoId": "v1"},
            "snippet": {
                "title": "Tesla review",
                "description": "A long look",
                "publishedAt": "2024-05-01T00:00:00Z",
                "channelTitle": "Cars",
            },
        }]}

        items = self.source.fetch("Tesla", CrawlOptions(limit=100))

        kwargs = self.youtube.search.return_value.list.call_args.kwargs
        assert kwargs["maxResults"] == 50
        assert kwargs["q"] == '"Tesla"'
        assert items[0].url == "https://www.youtube.com/watch?v=v1"
        assert items[0].content == "Tesla review. A long look"
        assert items[0].published_at == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert items[0].author == "Cars"

    def test_http_error(self):
        error = HttpError(Mock(status=403, reason="Forbidden"), b"quota exceeded")
        self.youtube.search.return_value.list.return_value.execute.side_effect = error
        with pytest.raises(SourceError):
            self.source.fetch("Tesla", CrawlOptions())


class TestBuildSourceCapabilities:

    def test_sources_without_credentials_are_excluded(self):
        sources = build_source_capabilities(no_credentials())
        assert [s.name for s in sources] == ["hackernews"]

    @patch("brandpulse.services.sources.build")
    @patch("brandpulse.services.sources.praw.Reddit")
    def test_all_sources_with_credentials(self, mock_reddit, mock_build):
        config = no_credentials(reddit_client_id="id", reddit_client_secret="secret", youtube_api_key="key")
        sources = build_source_capabilities(config)
        assert [s.name for s in sources] == ["reddit", "hackernews", "youtube"]
        mock_reddit.assert_called_once_with(client_id="id", client_secret="secret", user_agent="BrandPulse/1.0")
        mock_build.assert_called_once_with("youtube", "v3", developerKey="key", cache_discovery=False)

    def test_unknown_and_duplicate_names(self):
        sources = build_source_capabilities(no_credentials(), ["HackerNews", "hackernews", "myspace"])
        assert [s.name for s in sources] == ["hackernews"]
