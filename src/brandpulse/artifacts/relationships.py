"""Relationship detection between artifacts."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..core.constants import CategoryConstants, RelationshipConstants
from ..core.events import EventSink, safe_emit
from .category_mapper import CategoryMapper
from .models import Artifact, GraphNode, RelationshipEdge, RelationshipGraph, RelationshipKind
from .store import ArtifactIndex

logger = logging.getLogger(__name__)


def extract_keywords(artifact: Artifact) -> List[str]:
    """Target keywords, metadata tags and longer title words, lower-cased and de-duplicated."""
    keywords: List[str] = []
    targets = artifact.value("target_keywords")
    if isinstance(targets, (list, tuple)):
        keywords.extend(k for k in targets if isinstance(k, str))
    keywords.extend(str(tag) for tag in artifact.metadata.tags)
    if artifact.title:
        keywords.extend(
            word for word in artifact.title.lower().split()
            if len(word) >= RelationshipConstants.MIN_TITLE_KEYWORD_LENGTH
        )

    seen = []
    for keyword in keywords:
        cleaned = keyword.lower().strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def keyword_overlap(keywords: Sequence[str], other: Sequence[str]) -> float:
    """Share of the keyword union that matches the other side, substrings included."""
    union = set(keywords) | set(other)
    if not union:
        return 0.0
    matched = [k for k in keywords if any(k in o or o in k for o in other)]
    return len(matched) / len(union)


def time_strength(hours_apart: float) -> float:
    for limit, strength in RelationshipConstants.TIME_BUCKETS:
        if hours_apart < limit:
            return strength
    return RelationshipConstants.TIME_FLOOR


class RelationshipDetector:
    """Scores how strongly an artifact relates to each candidate artifact.

    Candidates come from an explicit list or from an ArtifactIndex. For every candidate the
    brand, category, keyword, time and similarity relationships are scored, and the strongest
    one per candidate is kept.
    """

    def __init__(
        self,
        index: Optional[ArtifactIndex] = None,
        mapper: Optional[CategoryMapper] = None,
        events: Optional[EventSink] = None,
    ):
        self.index = index
        self.mapper = mapper or CategoryMapper()
        self.events = events

    def _candidates(self, artifact: Artifact, candidates: Optional[Iterable[Artifact]]) -> List[Artifact]:
        if candidates is None:
            candidates = self.index.find_candidates(artifact) if self.index is not None else []
        return [c for c in candidates if c.id != artifact.id]

    def similarity(self, artifact: Artifact, other: Artifact, category: str, other_category: str) -> float:
        score = 0.0
        if artifact.type == other.type:
            score += RelationshipConstants.SIMILARITY_TYPE_WEIGHT
        if category == other_category:
            score += RelationshipConstants.SIMILARITY_CATEGORY_WEIGHT
        overlap = keyword_overlap(extract_keywords(artifact), extract_keywords(other))
        score += overlap * RelationshipConstants.SIMILARITY_KEYWORD_WEIGHT
        brand, other_brand = artifact.brand, other.brand
        if brand and other_brand and brand.lower() == other_brand.lower():
            score += RelationshipConstants.SIMILARITY_BRAND_WEIGHT
        return score

    def relationships(self, artifact: Artifact, other: Artifact, category: str) -> List[RelationshipEdge]:
        """Every relationship found between artifact and one candidate."""
        edges = []

        def edge(kind: RelationshipKind, strength: float) -> None:
            edges.append(RelationshipEdge(artifact.id, other.id, kind, strength))

        brand, other_brand = artifact.brand, other.brand
        if brand and other_brand and brand.lower() == other_brand.lower():
            edge(RelationshipKind.BRAND, RelationshipConstants.BRAND_STRENGTH)

        other_category = self.mapper.determine_category(other)
        if other_category == category:
            edge(RelationshipKind.CATEGORY, RelationshipConstants.CATEGORY_STRENGTH)

        keywords = extract_keywords(artifact)
        if keywords:
            overlap = keyword_overlap(keywords, extract_keywords(other))
            if overlap > 0:
                edge(RelationshipKind.KEYWORD, overlap * RelationshipConstants.KEYWORD_FACTOR)

        ts, other_ts = artifact.metadata.timestamp, other.metadata.timestamp
        if ts is not None and other_ts is not None:
            hours_apart = abs((ts - other_ts).total_seconds()) / 3600
            edge(RelationshipKind.TIME, time_strength(hours_apart))

        similarity = self.similarity(artifact, other, category, other_category)
        if similarity > RelationshipConstants.SIMILARITY_THRESHOLD:
            edge(RelationshipKind.SIMILARITY, similarity * RelationshipConstants.SIMILARITY_FACTOR)

        return edges

    def find_related(
        self,
        artifact: Artifact,
        category: str,
        candidates: Optional[Iterable[Artifact]] = None,
    ) -> List[RelationshipEdge]:
        """Strongest edge per related artifact, strongest first, at most ten."""
        best: Dict[str, RelationshipEdge] = {}
        for other in self._candidates(artifact, candidates):
            try:
                edges = self.relationships(artifact, other, category)
            except Exception as e:
                logger.warning(f"Could not relate {artifact.id} to {other.id}: {e}")
                safe_emit(self.events, "relationship_failure", artifact_id=artifact.id, candidate_id=other.id,
                          error=str(e))
                continue
            for edge in edges:
                current = best.get(edge.to_id)
                if current is None or edge.strength > current.strength:
                    best[edge.to_id] = edge

        ranked = sorted(best.values(), key=lambda e: (-e.strength, e.to_id))
        return ranked[:RelationshipConstants.MAX_RELATED]

    def related_ids(self, artifact: Artifact, category: str,
                    candidates: Optional[Iterable[Artifact]] = None) -> List[str]:
        return [edge.to_id for edge in self.find_related(artifact, category, candidates)]

    def build_graph(self, artifacts: Sequence[Artifact]) -> RelationshipGraph:
        """Nodes for every artifact and edges among them.

        A failure while relating one artifact drops only that artifact's outgoing edges.
        """
        artifacts = list(artifacts)
        categories = {}
        nodes = []
        for artifact in artifacts:
            try:
                category = self.mapper.determine_category(artifact)
            except Exception as e:
                logger.warning(f"Could not categorize {artifact.id} for the graph: {e}")
                category = CategoryConstants.GENERAL
            categories[artifact.id] = category
            nodes.append(GraphNode(artifact.id, artifact.title, artifact.type, category))

        edges: List[RelationshipEdge] = []
        for artifact in artifacts:
            try:
                edges.extend(self.find_related(artifact, categories[artifact.id], artifacts))
            except Exception as e:
                logger.error(f"❌ Relationship detection failed for {artifact.id}: {e}")
                safe_emit(self.events, "graph_edge_failure", artifact_id=artifact.id, error=str(e))

        logger.info(f"Built relationship graph with {len(nodes)} nodes and {len(edges)} edges")
        return RelationshipGraph(nodes=nodes, edges=edges)
