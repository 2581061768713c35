"""Wrap tool reports into artifacts, categorize them and hand them to a store."""

import logging
import random
import time
from typing import Any, Mapping, Optional

from ..core.constants import ArtifactConstants
from .categorizer import ArtifactCategorizer
from .models import Artifact, ArtifactMetadata, CategorizedArtifact, ConversationContext, parse_timestamp
from .store import ArtifactStore, InMemoryArtifactStore

logger = logging.getLogger(__name__)


def generate_artifact_id(rng: Optional[random.Random] = None) -> str:
    """artifact_<epoch ms>_<9 base36 chars>"""
    rng = rng or random
    suffix = "".join(rng.choice(ArtifactConstants.ID_ALPHABET) for _ in range(ArtifactConstants.ID_SUFFIX_LENGTH))
    return f"{ArtifactConstants.ID_PREFIX}_{int(time.time() * 1000)}_{suffix}"


def _report_content(report: Any) -> Any:
    if hasattr(report, "to_dict"):
        return report.to_dict()
    if isinstance(report, Mapping):
        return dict(report)
    return report


def _title(artifact_type: str, content: Any) -> str:
    get = content.get if isinstance(content, Mapping) else (lambda key, default=None: default)
    if artifact_type == "visibility-matrix":
        return f"Brand Visibility Analysis - {get('brand_name', '')}"
    if artifact_type == "brand-monitor":
        return f"Brand Monitoring Report - {get('brand_name', '')}"
    if artifact_type == "competitive-intelligence":
        competitors = get("competitors") or []
        return f"Competitive Analysis - {get('primary_brand', '')} vs {', '.join(competitors)}"
    if artifact_type == "content-optimization":
        return f"Content Optimization Analysis - {get('content_type') or 'Content'}"
    return "Tool Result"


class ArtifactProcessor:
    """Turns a tool's report into a saved, categorized artifact."""

    def __init__(
        self,
        store: Optional[ArtifactStore] = None,
        categorizer: Optional[ArtifactCategorizer] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store if store is not None else InMemoryArtifactStore()
        self.categorizer = categorizer or ArtifactCategorizer()
        self.rng = rng

    def create_artifact(self, tool_name: str, report: Any, context: Optional[ConversationContext] = None) -> Artifact:
        context = context or ConversationContext()
        artifact_type = ArtifactConstants.TOOL_TYPES.get(tool_name, ArtifactConstants.GENERIC_TYPE)
        label, default_tags = ArtifactConstants.TYPE_METADATA[artifact_type]
        content = _report_content(report)

        brand = None
        timestamp = None
        if isinstance(content, Mapping):
            if artifact_type == "competitive-intelligence":
                brand = content.get("primary_brand")
            elif artifact_type != "content-optimization":
                brand = content.get("brand_name") or None
            if artifact_type in ("visibility-matrix", "brand-monitor"):
                timestamp = parse_timestamp(content.get("timestamp"))

        known_tool = artifact_type != ArtifactConstants.GENERIC_TYPE
        return Artifact(
            id=generate_artifact_id(self.rng),
            type=artifact_type,
            title=_title(artifact_type, content),
            content=content,
            metadata=ArtifactMetadata(
                timestamp=timestamp or context.timestamp,
                category=label,
                tags=list(default_tags),
                generated_by=tool_name if known_tool else "unknown",
                user_id=context.user_id,
                conversation_id=context.conversation_id,
                brand_name=brand,
            ),
        )

    def process(self, tool_name: str, report: Any, context: Optional[ConversationContext] = None) -> CategorizedArtifact:
        artifact = self.create_artifact(tool_name, report, context)
        self.store.save_artifact(artifact)
        logger.info(f"Saving artifact: {artifact.id} {artifact.type}")

        candidates = self.store.find_candidates(artifact) if hasattr(self.store, "find_candidates") else None
        categorized = self.categorizer.categorize(artifact, candidates)
        self.store.save_artifact(categorized)
        logger.info(
            f"✅ Categorized artifact {categorized.id}: {categorized.category}, priority {categorized.priority}, "
            f"confidence {categorized.categorization_confidence}, {len(categorized.related_artifacts)} related"
        )
        return categorized
