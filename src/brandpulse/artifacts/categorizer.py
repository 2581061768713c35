"""Artifact categorization: category, tags, priority, confidence and related artifacts."""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.constants import CategoryConstants
from ..core.errors import CategorizationError
from ..core.events import EventSink, safe_emit
from .category_mapper import CategoryMapper
from .models import Artifact, CategorizedArtifact, RelationshipGraph
from .relationships import RelationshipDetector
from .store import ArtifactIndex
from .tags import TagExtractor

logger = logging.getLogger(__name__)


def _score(artifact: Artifact) -> Optional[float]:
    value = artifact.value("overall_score")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class ArtifactCategorizer:
    """Single-pass categorizer. A failure on one artifact yields the general fallback."""

    def __init__(
        self,
        mapper: Optional[CategoryMapper] = None,
        tag_extractor: Optional[TagExtractor] = None,
        detector: Optional[RelationshipDetector] = None,
        index: Optional[ArtifactIndex] = None,
        events: Optional[EventSink] = None,
    ):
        self.mapper = mapper or CategoryMapper()
        self.tag_extractor = tag_extractor or TagExtractor()
        self.detector = detector or RelationshipDetector(index=index, mapper=self.mapper, events=events)
        self.events = events

    def calculate_priority(self, artifact: Artifact) -> int:
        """1 is most urgent, 5 least."""
        priority = CategoryConstants.DEFAULT_PRIORITY
        if artifact.type in CategoryConstants.TOP_PRIORITY_TYPES:
            priority = 1
        elif artifact.type in CategoryConstants.HIGH_PRIORITY_TYPES:
            priority = 2

        score = _score(artifact)
        if score is not None and score > CategoryConstants.HIGH_SCORE:
            priority = max(1, priority - 1)
        elif score and score < CategoryConstants.LOW_SCORE:
            priority = min(5, priority + 1)

        brand = artifact.value("brand_name")
        if isinstance(brand, str) and brand.lower() in CategoryConstants.IMPORTANT_BRANDS:
            priority = max(1, priority - 1)

        return priority

    def calculate_confidence(self, artifact: Artifact, category: str) -> float:
        confidence = CategoryConstants.BASE_CONFIDENCE
        has_brand = artifact.value("brand_name") is not None
        if has_brand and _score(artifact) is not None:
            confidence += 0.1
        if category in CategoryConstants.KNOWN_CATEGORIES:
            confidence += 0.05
        if category == CategoryConstants.GENERAL:
            confidence -= 0.2
        if not has_brand and artifact.value("target_keywords") is None:
            confidence -= 0.15
        return round(min(1.0, max(0.0, confidence)), 4)

    def _fallback(self, artifact: Artifact, error: Exception) -> CategorizedArtifact:
        artifact_id = getattr(artifact, "id", "unknown")
        failure = CategorizationError(artifact_id, error)
        logger.error(f"❌ {failure}")
        safe_emit(self.events, "categorization_fallback", artifact_id=artifact_id, error=str(error))
        return CategorizedArtifact.from_artifact(
            artifact,
            category=CategoryConstants.GENERAL,
            tags=[],
            priority=CategoryConstants.DEFAULT_PRIORITY,
            related_artifacts=[],
            categorization_confidence=CategoryConstants.FALLBACK_CONFIDENCE,
        )

    def categorize(self, artifact: Artifact, candidates: Optional[Iterable[Artifact]] = None) -> CategorizedArtifact:
        """Categorize one artifact. Never raises for a well-formed Artifact, whatever its content."""
        try:
            category = self.mapper.determine_category(artifact)
            tags = self.tag_extractor.extract_tags(artifact)
            priority = self.calculate_priority(artifact)
            related = self.detector.related_ids(artifact, category, candidates)
            confidence = self.calculate_confidence(artifact, category)
        except Exception as e:
            return self._fallback(artifact, e)

        logger.debug(f"Categorized {artifact.id} as {category} (priority {priority}, confidence {confidence})")
        return CategorizedArtifact.from_artifact(
            artifact,
            category=category,
            tags=tags,
            priority=priority,
            related_artifacts=related,
            categorization_confidence=confidence,
        )

    def categorize_many(self, artifacts: Sequence[Artifact]) -> List[CategorizedArtifact]:
        """Categorize a batch; without an index each artifact is related to the rest of the batch."""
        artifacts = list(artifacts)
        use_batch = self.detector.index is None
        results = [self.categorize(a, artifacts if use_batch else None) for a in artifacts]
        logger.info(f"✅ Categorized {len(results)} artifact(s)")
        return results

    def build_relationship_graph(self, artifacts: Sequence[Artifact]) -> RelationshipGraph:
        return self.detector.build_graph(artifacts)

    @staticmethod
    def get_categorization_stats(categorized: Sequence[CategorizedArtifact]) -> Dict[str, Any]:
        total = len(categorized)
        confidences = [a.categorization_confidence for a in categorized]
        return {
            "category_distribution": dict(Counter(a.category for a in categorized)),
            "average_confidence": sum(confidences) / total if total else 0,
            "priority_distribution": dict(Counter(a.priority for a in categorized)),
            "total_artifacts": total,
        }
