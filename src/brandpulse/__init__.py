"""BrandPulse - brand signal aggregation and scoring across AI providers and content sources."""

__version__ = "0.1.0"
__author__ = "BrandPulse Team"

from .core.models import *
from .core.config import settings
from .artifacts import ArtifactCategorizer, ArtifactProcessor
from .services.analysis import BrandAnalysisService
from .services.gateway import run_provider_batch
from .services.crawler import run_source_crawl

__all__ = [
    "settings",
    "ArtifactCategorizer",
    "ArtifactProcessor",
    "BrandAnalysisService",
    "run_provider_batch",
    "run_source_crawl",
]
