"""Artifact records: wrapped tool reports and their categorization."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..core.constants import CategoryConstants
from ..core.models import _iso, utc_now


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def content_value(content: Any, name: str) -> Any:
    """Read a snake_case field (or its camelCase twin) from report content.

    Empty strings and empty collections read as None; so does anything that is not a mapping.
    """
    if not isinstance(content, Mapping):
        return None
    value = content.get(name)
    if value is None:
        value = content.get(_camel(name))
    if value in ("", [], {}, ()):
        return None
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class ConversationContext:
    """Who asked for the report an artifact wraps."""
    user_id: Optional[str] = None
    conversation_id: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class ArtifactMetadata:
    timestamp: Optional[datetime] = field(default_factory=utc_now)
    category: str = ""
    tags: List[str] = field(default_factory=list)
    generated_by: str = "unknown"
    user_id: Optional[str] = None
    conversation_id: Optional[str] = None
    brand_name: Optional[str] = None

    def __post_init__(self):
        self.timestamp = parse_timestamp(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": _iso(self.timestamp),
            "category": self.category,
            "tags": list(self.tags),
            "generated_by": self.generated_by,
            "user_id": self.user_id,
            "conversation_id": self.conversation_id,
            "brand_name": self.brand_name,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ArtifactMetadata":
        data = data if isinstance(data, Mapping) else {}
        tags = data.get("tags") or []
        return cls(
            timestamp=parse_timestamp(data.get("timestamp")),
            category=str(data.get("category") or ""),
            tags=[str(tag) for tag in tags] if isinstance(tags, (list, tuple)) else [],
            generated_by=str(data.get("generated_by") or data.get("generatedBy") or "unknown"),
            user_id=data.get("user_id") or data.get("userId"),
            conversation_id=data.get("conversation_id") or data.get("conversationId"),
            brand_name=data.get("brand_name") or data.get("brandName"),
        )


@dataclass
class Artifact:
    """A tool report wrapped for storage, categorization and relationship analysis."""
    id: str
    type: str
    title: str
    content: Any = field(default_factory=dict)
    metadata: ArtifactMetadata = field(default_factory=ArtifactMetadata)

    def value(self, name: str) -> Any:
        return content_value(self.content, name)

    @property
    def brand(self) -> Optional[str]:
        """Brand the artifact is about, from its content."""
        brand = self.value("brand_name") or self.value("primary_brand")
        return brand if isinstance(brand, str) else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "content": self.content,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Artifact":
        return cls(
            id=str(data.get("id") or ""),
            type=str(data.get("type") or ""),
            title=str(data.get("title") or ""),
            content=data.get("content") if data.get("content") is not None else {},
            metadata=ArtifactMetadata.from_dict(data.get("metadata")),
        )


@dataclass
class CategorizedArtifact(Artifact):
    """An artifact augmented with its category, tags, priority and related artifacts."""
    category: str = CategoryConstants.GENERAL
    tags: List[str] = field(default_factory=list)
    priority: int = CategoryConstants.DEFAULT_PRIORITY
    related_artifacts: List[str] = field(default_factory=list)
    categorization_confidence: float = CategoryConstants.FALLBACK_CONFIDENCE

    @classmethod
    def from_artifact(cls, artifact: Artifact, **categorization: Any) -> "CategorizedArtifact":
        return cls(
            id=artifact.id,
            type=artifact.type,
            title=artifact.title,
            content=artifact.content,
            metadata=artifact.metadata,
            **categorization,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "category": self.category,
            "tags": list(self.tags),
            "priority": self.priority,
            "related_artifacts": list(self.related_artifacts),
            "categorization_confidence": self.categorization_confidence,
        })
        return data


class RelationshipKind(str, Enum):
    BRAND = "brand"
    CATEGORY = "category"
    KEYWORD = "keyword"
    TIME = "time"
    SIMILARITY = "similarity"


@dataclass(frozen=True)
class RelationshipEdge:
    """A scored, directed relationship between two artifacts."""
    from_id: str
    to_id: str
    kind: RelationshipKind
    strength: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_id": self.from_id,
            "to_id": self.to_id,
            "kind": self.kind.value,
            "strength": round(self.strength, 4),
        }


@dataclass(frozen=True)
class GraphNode:
    id: str
    label: str
    type: str
    category: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "label": self.label, "type": self.type, "category": self.category}


@dataclass
class RelationshipGraph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[RelationshipEdge] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
