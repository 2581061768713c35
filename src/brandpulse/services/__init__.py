"""Services for BrandPulse."""

from .analysis import BrandAnalysisService
from .crawler import SourceCrawler, run_source_crawl
from .fanout import FanOutExecutor, FanOutPolicy, FanOutTask, TaskFailure, TaskOutcome
from .gateway import ProviderGateway, run_provider_batch
from .providers import OpenAIChatProvider, build_provider_capabilities
from .sources import CrawlOptions, FixtureSource, build_source_capabilities

__all__ = [
    "BrandAnalysisService",
    "SourceCrawler",
    "run_source_crawl",
    "FanOutExecutor",
    "FanOutPolicy",
    "FanOutTask",
    "TaskFailure",
    "TaskOutcome",
    "ProviderGateway",
    "run_provider_batch",
    "OpenAIChatProvider",
    "build_provider_capabilities",
    "CrawlOptions",
    "FixtureSource",
    "build_source_capabilities",
]
