"""Tag extraction for artifacts and free text."""

import logging
import re
from collections import Counter
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Set, Tuple

from ..core.constants import CategoryConstants
from ..core.models import utc_now
from .models import Artifact, parse_timestamp

logger = logging.getLogger(__name__)

TEXT_TAG_PATTERNS = (
    re.compile(r"#(\w+)"),
    re.compile(r"@(\w+)"),
    re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b"),
    re.compile(r"\b\d{4}\b"),
    re.compile(r"\b(?:ai|ml|seo|geo|api|ui|ux)\b", re.IGNORECASE),
)


def normalize_tag(tag: Any) -> str:
    """Lower-case, keep [a-z0-9 -], hyphenate whitespace, collapse and trim hyphens."""
    text = str(tag).lower().strip()
    text = re.sub(r"[^a-z0-9\s-]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def level_tag(score: float, suffix: str) -> str:
    """Bucket a 0-100 score into high/medium/low/very-low."""
    for threshold, level in CategoryConstants.LEVEL_THRESHOLDS:
        if score >= threshold:
            return f"{level}-{suffix}"
    return f"very-low-{suffix}"


def _as_percent(score: float) -> float:
    # credibility is reported on a 0-1 scale
    return score * 100 if 0 <= score <= 1 else score


def _strings(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def _platform_names(value: Any) -> List[str]:
    """Platform names from a list of result dicts or a dict keyed by platform."""
    if isinstance(value, Mapping):
        return [str(key) for key in value]
    names = []
    if isinstance(value, (list, tuple)):
        for entry in value:
            if isinstance(entry, Mapping):
                name = entry.get("platform") or entry.get("provider_name") or entry.get("model")
                if isinstance(name, str):
                    names.append(name)
    return names


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class TagExtractor:
    """Builds the normalized tag set of an artifact."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def extract_tags(self, artifact: Artifact) -> List[str]:
        """Sorted, de-duplicated, normalized tags. Same artifact and clock, same tags."""
        raw: List[str] = list(_strings(artifact.metadata.tags))

        for name in ("brand_name", "primary_brand", "competitors", "target_keywords",
                     "industry", "content_type"):
            raw.extend(_strings(artifact.value(name)))

        raw.extend(_platform_names(artifact.value("provider_results")))
        raw.extend(_platform_names(artifact.value("platform_results")))
        raw.extend(_platform_names(artifact.value("platform_analysis")))

        raw.extend(_strings(artifact.value("average_sentiment")))
        sentiment = artifact.value("sentiment_analysis")
        if isinstance(sentiment, Mapping):
            raw.extend(_strings(sentiment.get("overall_sentiment") or sentiment.get("overallSentiment")))
        position = artifact.value("market_position")
        if isinstance(position, Mapping):
            raw.extend(_strings(position.get("position")))

        for name, suffix in (("credibility_score", "credibility"),
                             ("overall_score", "performance"),
                             ("visibility_score", "visibility")):
            score = _number(artifact.value(name))
            if score is not None:
                if suffix == "credibility":
                    score = _as_percent(score)
                raw.append(level_tag(score, suffix))

        raw.append(artifact.type)
        raw.extend(CategoryConstants.TYPE_TAGS.get(artifact.type, (CategoryConstants.GENERAL,)))
        raw.extend(self.time_tags(artifact.metadata.timestamp))

        tags: Set[str] = set()
        for tag in raw:
            stripped = tag.strip()
            if not stripped or len(stripped) > CategoryConstants.MAX_TAG_LENGTH:
                continue
            normalized = normalize_tag(stripped)
            if normalized:
                tags.add(normalized)
        return sorted(tags)

    def time_tags(self, timestamp: Optional[datetime]) -> Tuple[str, ...]:
        timestamp = parse_timestamp(timestamp)
        if timestamp is None:
            return ()
        age_hours = (self.clock() - timestamp).total_seconds() / 3600
        for limit, tags in CategoryConstants.RECENCY_BUCKETS:
            if age_hours < limit:
                return tags
        return CategoryConstants.HISTORICAL_TAGS

    def extract_tags_from_text(self, text: str) -> List[str]:
        """Hashtags, handles, proper nouns, years and common acronyms found in text."""
        tags = []
        for pattern in TEXT_TAG_PATTERNS:
            for match in pattern.finditer(text or ""):
                normalized = normalize_tag(match.group(0))
                if normalized and normalized not in tags:
                    tags.append(normalized)
        return tags

    def popular_tags(self, artifacts: Iterable[Artifact]) -> List[Tuple[str, int]]:
        """Most common metadata tags as (tag, count), highest count first."""
        counts: Counter = Counter()
        for artifact in artifacts:
            for tag in artifact.metadata.tags:
                normalized = normalize_tag(tag)
                if normalized:
                    counts[normalized] += 1
        ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked[:CategoryConstants.MAX_POPULAR_TAGS]
