"""Artifact wrapping, categorization and relationship analysis."""

from .categorizer import ArtifactCategorizer
from .category_mapper import CategoryMapper
from .models import (
    Artifact,
    ArtifactMetadata,
    CategorizedArtifact,
    ConversationContext,
    GraphNode,
    RelationshipEdge,
    RelationshipGraph,
    RelationshipKind,
)
from .processor import ArtifactProcessor, generate_artifact_id
from .relationships import RelationshipDetector
from .store import ArtifactIndex, ArtifactStore, InMemoryArtifactStore
from .tags import TagExtractor, normalize_tag

__all__ = [
    "ArtifactCategorizer",
    "CategoryMapper",
    "Artifact",
    "ArtifactMetadata",
    "CategorizedArtifact",
    "ConversationContext",
    "GraphNode",
    "RelationshipEdge",
    "RelationshipGraph",
    "RelationshipKind",
    "ArtifactProcessor",
    "generate_artifact_id",
    "RelationshipDetector",
    "ArtifactIndex",
    "ArtifactStore",
    "InMemoryArtifactStore",
    "TagExtractor",
    "normalize_tag",
]
