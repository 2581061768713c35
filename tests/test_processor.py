"""Tests for the artifact processor."""

import random
import re
from datetime import datetime, timezone

from brandpulse.artifacts import (
    ArtifactProcessor,
    CategorizedArtifact,
    ConversationContext,
    InMemoryArtifactStore,
    generate_artifact_id,
)
from brandpulse.core.models import VisibilityReport

ID_PATTERN = re.compile(r"^artifact_\d+_[0-9a-z]{9}$")


class TestGenerateArtifactId:

    def test_format(self):
        assert ID_PATTERN.match(generate_artifact_id())

    def test_seeded_rng_is_repeatable(self):
        first = generate_artifact_id(random.Random(7)).rsplit("_", 1)[1]
        second = generate_artifact_id(random.Random(7)).rsplit("_", 1)[1]
        assert first == second


class TestArtifactProcessor:

    def setup_method(self):
        self.store = InMemoryArtifactStore()
        self.processor = ArtifactProcessor(store=self.store)

    def test_visibility_report(self):
        stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
        report = VisibilityReport(brand_name="Tesla", timestamp=stamp, overall_score=72)
        context = ConversationContext(user_id="u1", conversation_id="c1")

        artifact = self.processor.create_artifact("visibility", report, context)

        assert ID_PATTERN.match(artifact.id)
        assert artifact.type == "visibility-matrix"
        assert artifact.title == "Brand Visibility Analysis - Tesla"
        assert artifact.content["overall_score"] == 72
        assert artifact.metadata.timestamp == stamp
        assert artifact.metadata.category == "visibility-analysis"
        assert artifact.metadata.generated_by == "visibility"
        assert artifact.metadata.brand_name == "Tesla"
        assert artifact.metadata.user_id == "u1"
        assert artifact.metadata.conversation_id == "c1"
        assert "geo" in artifact.metadata.tags

    def test_competitive_report(self):
        report = {"primary_brand": "Tesla", "competitors": ["Ford", "GM"]}
        artifact = self.processor.create_artifact("competitiveIntelligence", report)
        assert artifact.type == "competitive-intelligence"
        assert artifact.title == "Competitive Analysis - Tesla vs Ford, GM"
        assert artifact.metadata.brand_name == "Tesla"

    def test_context_timestamp_is_the_fallback(self):
        asked_at = datetime(2024, 3, 9, 8, 30, tzinfo=timezone.utc)
        context = ConversationContext(user_id="u1", timestamp=asked_at)
        report = {"primary_brand": "Tesla", "competitors": ["Ford"]}

        artifact = self.processor.create_artifact("competitiveIntelligence", report, context)
        assert artifact.metadata.timestamp == asked_at

        # a report timestamp still takes precedence
        stamp = datetime(2024, 5, 1, tzinfo=timezone.utc)
        report = VisibilityReport(brand_name="Tesla", timestamp=stamp)
        assert self.processor.create_artifact("visibility", report, context).metadata.timestamp == stamp

    def test_content_report_has_no_brand(self):
        artifact = self.processor.create_artifact("content", {"content_type": "blog", "brand_name": "Tesla"})
        assert artifact.title == "Content Optimization Analysis - blog"
        assert artifact.metadata.brand_name is None

    def test_unknown_tool(self):
        artifact = self.processor.create_artifact("weather", {"temp": 20})
        assert artifact.type == "generic"
        assert artifact.title == "Tool Result"
        assert artifact.metadata.generated_by == "unknown"
        assert artifact.metadata.tags == ["tool-output"]

    def test_process_saves_and_relates(self):
        first = self.processor.process("visibility", VisibilityReport(brand_name="Tesla"))
        second = self.processor.process("monitor", {"brand_name": "Tesla", "mention_count": 4})

        assert len(self.store) == 2
        assert isinstance(self.store.get(first.id), CategorizedArtifact)
        assert second.category == "brand-monitoring"
        assert second.related_artifacts == [first.id]
        assert first.priority == 1
