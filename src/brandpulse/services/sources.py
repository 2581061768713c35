"""Content source capabilities: Reddit, Hacker News, YouTube and injected fixtures."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import praw
import requests
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..core.config import Settings, settings
from ..core.constants import SourceConstants, ValidationConstants
from ..core.errors import InputValidationError, SourceError
from ..core.models import Engagement, RawItem

logger = logging.getLogger(__name__)

WEB_SEARCH_QUERIES = {
    "reddit": '"{brand}" site:reddit.com',
    "hackernews": '"{brand}" site:news.ycombinator.com',
    "twitter": '"{brand}" site:twitter.com OR site:x.com',
    "news": '"{brand}" news',
    "blogs": '"{brand}" blog',
}


def build_search_query(source: str, brand_name: str, web_search: bool = False) -> str:
    """Query string for a source; site-scoped forms are only used through a web-search backend."""
    if web_search:
        template = WEB_SEARCH_QUERIES.get(source.lower(), '"{brand}"')
        return template.format(brand=brand_name)
    return f'"{brand_name}"'


@dataclass(frozen=True)
class CrawlOptions:
    """How many items to fetch per source and how far back to look."""
    limit: int = 10
    timeframe: str = "week"

    def __post_init__(self):
        problems = []
        if not 1 <= self.limit <= ValidationConstants.MAX_CRAWL_LIMIT:
            problems.append(f"limit must be between 1 and {ValidationConstants.MAX_CRAWL_LIMIT}")
        if self.timeframe not in SourceConstants.TIMEFRAMES:
            problems.append(f"timeframe must be one of {', '.join(SourceConstants.TIMEFRAMES)}")
        if problems:
            raise InputValidationError(problems)

    @property
    def since(self) -> datetime:
        hours = SourceConstants.TIMEFRAME_HOURS[self.timeframe]
        return datetime.now(timezone.utc) - timedelta(hours=hours)


class SourceCapability(Protocol):
    """Anything that can search for brand mentions. Failures raise SourceError."""

    name: str

    def fetch(self, brand_name: str, options: CrawlOptions) -> List[RawItem]:
        ...


def _from_timestamp(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class RedditSource:
    """Searches r/all for the quoted brand with praw."""

    name = "reddit"

    def __init__(self, client_id: str, client_secret: str, user_agent: str, reddit=None):
        self.reddit = reddit or praw.Reddit(
            client_id=client_id,
            client_secret=client_secret,
            user_agent=user_agent,
        )

    def fetch(self, brand_name: str, options: CrawlOptions) -> List[RawItem]:
        query = build_search_query(self.name, brand_name)
        try:
            submissions = self.reddit.subreddit("all").search(
                query,
                sort="relevance",
                time_filter=options.timeframe,
                limit=options.limit,
            )
            items = []
            for submission in submissions:
                items.append(RawItem(
                    url=f"https://www.reddit.com{submission.permalink}",
                    title=submission.title or "",
                    content=submission.selftext or submission.title or "",
                    published_at=_from_timestamp(getattr(submission, "created_utc", None)),
                    author=str(submission.author) if submission.author else None,
                    engagement=Engagement(
                        upvotes=int(getattr(submission, "score", 0) or 0),
                        comments=int(getattr(submission, "num_comments", 0) or 0),
                    ),
                ))
        except Exception as e:
            raise SourceError(self.name, f"search failed: {e}", e) from e

        logger.info(f"Reddit returned {len(items)} items for {query}")
        return items


class HackerNewsSource:
    """Searches stories through the public Hacker News Algolia API."""

    name = "hackernews"

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: str = SourceConstants.HN_SEARCH_URL):
        self.session = session or requests.Session()
        self.base_url = base_url

    def fetch(self, brand_name: str, options: CrawlOptions) -> List[RawItem]:
        query = build_search_query(self.name, brand_name)
        params = {
            "query": query,
            "tags": "story",
            "hitsPerPage": options.limit,
            "numericFilters": f"created_at_i>{int(options.since.timestamp())}",
        }
        try:
            response = self.session.get(self.base_url, params=params, timeout=SourceConstants.REQUEST_TIMEOUT)
            response.raise_for_status()
            hits = response.json().get("hits", [])
        except (requests.RequestException, ValueError) as e:
            raise SourceError(self.name, f"search failed: {e}", e) from e

        items = []
        for hit in hits:
            object_id = hit.get("objectID", "")
            items.append(RawItem(
                url=hit.get("url") or f"https://news.ycombinator.com/item?id={object_id}",
                title=hit.get("title") or "",
                content=hit.get("story_text") or hit.get("title") or "",
                published_at=_from_timestamp(hit.get("created_at_i")),
                author=hit.get("author"),
                engagement=Engagement(
                    upvotes=int(hit.get("points") or 0),
                    comments=int(hit.get("num_comments") or 0),
                ),
            ))
        return items


class YouTubeSource:
    """Searches videos with the YouTube Data API v3."""

    name = "youtube"

    def __init__(self, api_key: str, youtube=None):
        self.youtube = youtube or build("youtube", "v3", developerKey=api_key, cache_discovery=False)

    def fetch(self, brand_name: str, options: CrawlOptions) -> List[RawItem]:
        query = build_search_query(self.name, brand_name)
        try:
            response = self.youtube.search().list(
                q=query,
                part="id,snippet",
                maxResults=min(options.limit, 50),
                type="video",
                order="relevance",
                publishedAfter=options.since.strftime("%Y-%m-%dT%H:%M:%SZ"),
            ).execute()
        except HttpError as e:
            raise SourceError(self.name, f"search failed: {e}", e) from e

        items = []
        for entry in response.get("items", []):
            snippet = entry.get("snippet", {})
            video_id = entry.get("id", {}).get("videoId", "")
            title = snippet.get("title", "")
            items.append(RawItem(
                url=f"https://www.youtube.com/watch?v={video_id}",
                title=title,
                content=f"{title}. {snippet.get('description', '')}".strip(),
                published_at=_from_iso(snippet.get("publishedAt")),
                author=snippet.get("channelTitle"),
            ))
        return items


class FixtureSource:
    """Deterministic in-memory source for tests and demos."""

    def __init__(self, name: str, items: Sequence[RawItem] = (), error: Optional[Exception] = None):
        self.name = name
        self.items = tuple(items)
        self.error = error
        self.calls: List[Tuple[str, CrawlOptions]] = []

    def fetch(self, brand_name: str, options: CrawlOptions) -> List[RawItem]:
        self.calls.append((brand_name, options))
        if self.error is not None:
            raise self.error
        return list(self.items[:options.limit])


def build_source_capabilities(
    config: Optional[Settings] = None,
    names: Optional[Sequence[str]] = None,
) -> Tuple[SourceCapability, ...]:
    """Build the immutable source list once; sources lacking credentials are left out."""
    config = config or settings
    names = names or SourceConstants.DEFAULT_SOURCES

    sources: Dict[str, SourceCapability] = {}
    for raw_name in names:
        name = raw_name.strip().lower()
        if name in sources:
            continue
        if name == "reddit":
            if not (config.reddit_client_id and config.reddit_client_secret):
                logger.warning("Reddit credentials not provided; source excluded")
                continue
            sources[name] = RedditSource(config.reddit_client_id, config.reddit_client_secret,
                                         config.reddit_user_agent)
        elif name == "hackernews":
            sources[name] = HackerNewsSource()
        elif name == "youtube":
            if not config.youtube_api_key:
                logger.warning("YouTube API key not provided; source excluded")
                continue
            sources[name] = YouTubeSource(config.youtube_api_key)
        else:
            logger.warning(f"Unknown source '{raw_name}' ignored")

    return tuple(sources.values())
