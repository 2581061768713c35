"""Source crawler: fan a brand search out to content sources and score each item."""

import logging
import re
import threading
from collections import Counter
from typing import Iterable, List, Mapping, Optional, Sequence

from ..core.config import load_source_weights, settings
from ..core.constants import LexiconConstants
from ..core.mentions import MentionDetector
from ..core.models import RawItem, SourceItem
from ..core.scoring import credibility_score
from ..core.sentiment import SentimentClassifier
from .fanout import FanOutExecutor, FanOutTask, TaskOutcome
from .sources import CrawlOptions, SourceCapability

logger = logging.getLogger(__name__)


class SourceCrawler:
    """Fetches raw items from every source concurrently and keeps those that mention the brand."""

    def __init__(
        self,
        executor: Optional[FanOutExecutor] = None,
        detector: Optional[MentionDetector] = None,
        classifier: Optional[SentimentClassifier] = None,
        source_weights: Optional[Mapping[str, float]] = None,
    ):
        self.executor = executor or FanOutExecutor()
        self.detector = detector or MentionDetector()
        self.classifier = classifier or SentimentClassifier()
        self.source_weights = (
            source_weights if source_weights is not None
            else load_source_weights(settings.source_weights_file)
        )

    def score_item(self, source: str, brand_name: str, raw: RawItem) -> Optional[SourceItem]:
        """Score one raw item; None when the brand is not mentioned."""
        text = f"{raw.title} {raw.content}".strip()
        mentions = self.detector.detect(text, brand_name)
        if not mentions:
            return None
        return SourceItem(
            source=source,
            url=raw.url,
            title=raw.title,
            content=raw.content,
            mentions=tuple(mentions),
            sentiment=self.classifier.classify(text, brand_name),
            published_at=raw.published_at,
            credibility_score=credibility_score(raw.content, source, raw.engagement, self.source_weights),
            author=raw.author,
            engagement=raw.engagement,
        )

    def _items_from(self, outcome: TaskOutcome, brand_name: str) -> List[SourceItem]:
        if not outcome.ok:
            logger.warning(f"❌ {outcome.collaborator}: {outcome.failure.kind.value}: {outcome.failure.message}")
            return []
        items = []
        for raw in outcome.value or []:
            if not isinstance(raw, RawItem):
                logger.warning(f"{outcome.collaborator}: skipping malformed item {raw!r:.80}")
                continue
            scored = self.score_item(outcome.collaborator, brand_name, raw)
            if scored is not None:
                items.append(scored)
        return items

    def run(
        self,
        brand_name: str,
        sources: Sequence[SourceCapability],
        options: Optional[CrawlOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[SourceItem]:
        """Items with at least one mention, from every source that answered."""
        if not sources:
            logger.info("No sources configured; returning an empty crawl")
            return []

        options = options or CrawlOptions()
        tasks = [
            FanOutTask(
                key=f"{source.name}:{brand_name}",
                collaborator=source.name,
                call=lambda s=source: s.fetch(brand_name, options),
            )
            for source in sources
        ]

        logger.info(f"🚀 Crawling {len(tasks)} source(s) for '{brand_name}' ({options.timeframe}, limit {options.limit})")
        items = []
        for outcome in self.executor.run(tasks, cancel_event):
            items.extend(self._items_from(outcome, brand_name))
        logger.info(f"✅ Found {len(items)} item(s) mentioning '{brand_name}'")
        return items


def run_source_crawl(
    brand_name: str,
    sources: Sequence[SourceCapability],
    options: Optional[CrawlOptions] = None,
    executor: Optional[FanOutExecutor] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[SourceItem]:
    """Convenience wrapper around SourceCrawler.run."""
    return SourceCrawler(executor=executor).run(brand_name, sources, options, cancel_event)


def top_sources(items: Iterable[SourceItem], limit: int = 3) -> List[str]:
    """Sources with the most items; ties break alphabetically."""
    counts = Counter(item.source for item in items)
    return [source for source, _ in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]]


def trending_topics(items: Iterable[SourceItem], limit: int = 5) -> List[str]:
    """Fixed topics that appear as whole words in item titles or content."""
    text = " ".join(f"{item.title} {item.content}" for item in items).lower()
    found = [t for t in LexiconConstants.TRENDING_TOPICS if re.search(rf"\b{re.escape(t)}\b", text)]
    return found[:limit]
