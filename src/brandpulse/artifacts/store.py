"""Artifact persistence seam and an in-memory implementation."""

import logging
import threading
from typing import Dict, List, Optional, Protocol

from .models import Artifact

logger = logging.getLogger(__name__)


class ArtifactStore(Protocol):
    def save_artifact(self, artifact: Artifact) -> None:
        ...


class ArtifactIndex(Protocol):
    """Supplies the artifacts a new artifact may be related to."""

    def find_candidates(self, artifact: Artifact) -> List[Artifact]:
        ...


class InMemoryArtifactStore:
    """Process-local store keyed by artifact id. Saving an id again replaces the entry."""

    def __init__(self):
        self._lock = threading.Lock()
        self._artifacts: Dict[str, Artifact] = {}

    def save_artifact(self, artifact: Artifact) -> None:
        with self._lock:
            self._artifacts[artifact.id] = artifact
        logger.debug(f"Saved artifact {artifact.id} ({artifact.type})")

    def get(self, artifact_id: str) -> Optional[Artifact]:
        with self._lock:
            return self._artifacts.get(artifact_id)

    def all(self) -> List[Artifact]:
        with self._lock:
            return list(self._artifacts.values())

    def find_candidates(self, artifact: Artifact) -> List[Artifact]:
        with self._lock:
            return [a for a in self._artifacts.values() if a.id != artifact.id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._artifacts)
