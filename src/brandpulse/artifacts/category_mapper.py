"""Map an artifact onto the closed category set."""

import logging
from typing import Dict, List, Tuple

from ..core.constants import CategoryConstants
from .models import Artifact

logger = logging.getLogger(__name__)


class CategoryMapper:
    """Type lookup first, then content shape, then metadata tags, else "general"."""

    def determine_category(self, artifact: Artifact) -> str:
        category = CategoryConstants.CATEGORY_MAP.get(artifact.type)
        if category:
            return category

        for category, fields in CategoryConstants.CONTENT_SIGNATURES:
            if any(artifact.value(name) is not None for name in fields):
                return category

        tags = {str(tag).lower() for tag in artifact.metadata.tags}
        for category, markers in CategoryConstants.TAG_SIGNATURES:
            if tags.intersection(markers):
                return category

        return CategoryConstants.GENERAL

    def description(self, category: str) -> str:
        return CategoryConstants.DESCRIPTIONS.get(category, "Unknown category")

    def all_categories(self) -> List[str]:
        return [*CategoryConstants.KNOWN_CATEGORIES, CategoryConstants.GENERAL]

    def is_known_category(self, category: str) -> bool:
        return category in self.all_categories()

    def hierarchy(self) -> Dict[str, Tuple[str, ...]]:
        """Category -> artifact types that map onto it."""
        return dict(CategoryConstants.HIERARCHY)
