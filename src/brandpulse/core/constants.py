"""Constants and configuration values for BrandPulse.

Every table here is shared by all concurrent tasks, so lists are tuples and maps are
read-only ``MappingProxyType`` views.
"""

from types import MappingProxyType


# Lexicons
class LexiconConstants:
    """Fixed keyword lexicons used by sentiment and visibility scoring."""

    POSITIVE_KEYWORDS = (
        "excellent", "great", "amazing", "outstanding", "innovative",
        "leading", "best", "superior", "impressive", "successful",
        "love", "fantastic", "brilliant", "revolutionary", "premium",
        "quality", "reliable", "trusted", "popular", "growth",
        "improved", "better", "awesome", "incredible", "wonderful",
    )

    NEGATIVE_KEYWORDS = (
        "terrible", "awful", "poor", "disappointing", "failed",
        "worst", "problematic", "issues", "broken", "inadequate",
        "hate", "horrible", "disaster", "scandal", "controversy",
        "lawsuit", "recall", "defective", "expensive", "overpriced",
        "cheap", "low quality", "unreliable", "failing",
    )

    # Words that signal the brand is discussed in a market context
    CONTEXT_KEYWORDS = (
        "market", "industry", "sector", "business", "company", "brand",
        "product", "service", "technology", "innovation", "leadership",
    )

    TRENDING_TOPICS = (
        "ai", "technology", "innovation", "business",
        "product", "launch", "update", "feature",
    )

    SENTENCE_SPLIT_PATTERN = r"[.!?]+"


# Scoring
class ScoringConstants:
    """Weights and caps for composite scores."""

    # Visibility (0-100)
    MENTION_POINTS = 10
    MENTION_POINTS_CAP = 50
    CONTEXT_POINTS = 2
    CONTEXT_POINTS_CAP = 30
    SENTIMENT_BONUS = MappingProxyType({"positive": 20, "neutral": 10, "negative": 0})

    # Credibility (0-1)
    CREDIBILITY_BASE = 0.5
    SOURCE_WEIGHT_FACTOR = 0.3
    ENGAGEMENT_BONUSES = ((100, 0.2), (50, 0.1), (10, 0.05))  # (threshold, bonus), strictly greater
    LENGTH_BONUSES = ((200, 0.1), (100, 0.05))

    # Competitive composite score
    COMPETITIVE_MENTION_POINTS = 5
    COMPETITIVE_MENTION_CAP = 30
    SUCCESS_BONUS = 10

    # Competitive gaps
    VISIBILITY_GAP_RATIO = 0.8
    POSITIVE_SENTIMENT_TARGET = 0.6
    MENTION_GAP_RATIO = 0.7

    # Mention detection
    CONTEXT_WINDOW = 100
    MIN_FUZZY_CONFIDENCE = 0.5
    MAX_FUZZY_CONFIDENCE = 0.95

    # Sentiment
    MAX_SENTIMENT_CONFIDENCE = 0.9
    NEUTRAL_CONFIDENCE = 0.5

    MAX_CONTEXT_SNIPPETS = 5


# Sources
class SourceConstants:
    """Constants for content sources."""

    DEFAULT_SOURCE_WEIGHTS = MappingProxyType({
        "news": 0.9,
        "hackernews": 0.8,
        "reddit": 0.7,
        "youtube": 0.65,
        "twitter": 0.6,
        "blogs": 0.5,
    })
    UNKNOWN_SOURCE_WEIGHT = 0.5

    DEFAULT_SOURCES = ("reddit", "hackernews", "youtube")
    TIMEFRAMES = ("day", "week", "month")
    TIMEFRAME_HOURS = MappingProxyType({"day": 24, "week": 168, "month": 720})

    HN_SEARCH_URL = "https://hn.algolia.com/api/v1/search"
    REQUEST_TIMEOUT = 10  # seconds, per HTTP call


# Providers
class ProviderConstants:
    """Registry of text-generation providers reachable through an OpenAI-compatible API."""

    # name -> (model, base_url, settings attribute holding the credential)
    PROVIDER_REGISTRY = MappingProxyType({
        "OpenAI GPT-4o": ("gpt-4o", None, "effective_openai_key"),
        "Anthropic Claude": ("claude-3-5-sonnet-20241022", "https://api.anthropic.com/v1/", "anthropic_api_key"),
        "Google Gemini": ("gemini-1.5-flash", "https://generativelanguage.googleapis.com/v1beta/openai/", "google_api_key"),
        "Perplexity Sonar": ("sonar", "https://api.perplexity.ai", "perplexity_api_key"),
    })

    MAX_TOKENS = 2000
    TEMPERATURE = 0.7
    PROMPT_SEPARATOR = "\n\n"


# Insights
class InsightConstants:
    """Bands and caps for narrative generation."""

    HIGH_VOLUME = 50
    MODERATE_VOLUME = 10
    LOW_VOLUME_RECOMMENDATION = 5
    LOW_PROVIDER_SCORE = 40
    LOW_SOURCE_MENTIONS = 2
    MAX_INSIGHTS = 6
    MAX_RECOMMENDATIONS = 5
    SHARE_OF_VOICE_TARGET = 30
    CREDIBILITY_TARGET = 0.7


# Validation
class ValidationConstants:
    """Input contract limits."""

    MAX_BRAND_LENGTH = 100
    MIN_COMPETITORS = 1
    MAX_COMPETITORS = 10
    MIN_CONTENT_LENGTH = 10
    MAX_CONTENT_LENGTH = 10000
    MIN_KEYWORDS = 1
    MAX_KEYWORDS = 20
    MAX_CRAWL_LIMIT = 100


# Artifact categorization
class CategoryConstants:
    """Closed category set and lookup tables for artifact categorization."""

    GENERAL = "general"

    CATEGORY_MAP = MappingProxyType({
        "visibility-matrix": "brand-visibility",
        "competitive-intelligence": "competitive-intelligence",
        "content-optimization": "content-strategy",
        "brand-monitor-report": "brand-monitoring",
        "keyword-strategy-report": "keyword-research",
        "brand-monitor": "brand-monitoring",
        "visibilityAcrossModels": "brand-visibility",
        "competitiveIntelligence": "competitive-intelligence",
        "contentOptimization": "content-strategy",
    })

    KNOWN_CATEGORIES = (
        "brand-visibility",
        "competitive-intelligence",
        "content-strategy",
        "brand-monitoring",
        "keyword-research",
    )

    DESCRIPTIONS = MappingProxyType({
        "brand-visibility": "Brand visibility analysis across AI platforms",
        "competitive-intelligence": "Competitive analysis and market positioning",
        "content-strategy": "Content optimization and strategy recommendations",
        "brand-monitoring": "Real-time brand mention monitoring and analysis",
        "keyword-research": "Keyword strategy and research insights",
        "general": "General artifact without specific categorization",
    })

    # Content fields that identify a category, checked in this order
    CONTENT_SIGNATURES = (
        ("brand-visibility", ("overall_score", "provider_results", "platform_results", "visibility_score")),
        ("competitive-intelligence", ("primary_brand", "competitors", "market_position", "share_of_voice")),
        ("content-strategy", ("platform_analysis", "overall_optimization", "target_keywords")),
        ("brand-monitoring", ("brand_name", "mention_count", "sentiment_analysis", "credibility_score")),
        ("keyword-research", ("keywords", "keyword_density", "search_volume")),
    )

    # Metadata tags that identify a category, checked in this order
    TAG_SIGNATURES = (
        ("competitive-intelligence", ("competitive", "competitor")),
        ("brand-visibility", ("visibility", "geo")),
        ("content-strategy", ("content", "seo")),
        ("brand-monitoring", ("monitor", "brand")),
        ("keyword-research", ("keyword", "research")),
    )

    TYPE_TAGS = MappingProxyType({
        "visibility-matrix": ("visibility", "geo", "ai-platforms", "brand-analysis"),
        "competitive-intelligence": ("competitive", "market-analysis", "competitors", "positioning"),
        "content-optimization": ("content", "seo", "optimization", "ai-platforms"),
        "brand-monitor-report": ("monitoring", "brand", "mentions", "sentiment"),
        "brand-monitor": ("monitoring", "brand", "mentions", "sentiment"),
        "keyword-strategy-report": ("keywords", "research", "seo", "strategy"),
        "visibilityAcrossModels": ("visibility", "geo", "ai-platforms", "brand-analysis"),
        "competitiveIntelligence": ("competitive", "market-analysis", "competitors", "positioning"),
        "contentOptimization": ("content", "seo", "optimization", "ai-platforms"),
    })

    TOP_PRIORITY_TYPES = frozenset({"competitive-intelligence", "visibility-matrix"})
    HIGH_PRIORITY_TYPES = frozenset({"content-optimization", "brand-monitor-report"})
    IMPORTANT_BRANDS = frozenset({"apple", "google", "microsoft", "amazon", "tesla"})

    DEFAULT_PRIORITY = 3
    HIGH_SCORE = 80
    LOW_SCORE = 40

    BASE_CONFIDENCE = 0.8
    FALLBACK_CONFIDENCE = 0.5

    LEVEL_THRESHOLDS = ((80, "high"), (60, "medium"), (40, "low"))
    RECENCY_BUCKETS = ((24, ("recent", "today")), (168, ("recent", "this-week")), (720, ("recent", "this-month")))
    HISTORICAL_TAGS = ("older", "historical")
    MAX_TAG_LENGTH = 50
    MAX_POPULAR_TAGS = 20

    HIERARCHY = MappingProxyType({
        "brand-visibility": ("visibility-matrix", "visibilityAcrossModels"),
        "competitive-intelligence": ("competitive-intelligence", "competitiveIntelligence"),
        "content-strategy": ("content-optimization", "contentOptimization"),
        "brand-monitoring": ("brand-monitor-report", "brand-monitor"),
        "keyword-research": ("keyword-strategy-report",),
    })


# Artifact wrapping
class ArtifactConstants:
    """How tool reports are wrapped into artifacts."""

    # tool name -> artifact type
    TOOL_TYPES = MappingProxyType({
        "visibility": "visibility-matrix",
        "visibilityAcrossModels": "visibility-matrix",
        "monitor": "brand-monitor",
        "brandMonitor": "brand-monitor",
        "competitive": "competitive-intelligence",
        "competitiveIntelligence": "competitive-intelligence",
        "content": "content-optimization",
        "contentOptimization": "content-optimization",
    })
    GENERIC_TYPE = "generic"

    # artifact type -> (metadata category label, default tags)
    TYPE_METADATA = MappingProxyType({
        "visibility-matrix": ("visibility-analysis", ("brand-visibility", "multi-model-analysis", "geo")),
        "brand-monitor": ("brand-monitoring", ("brand-monitoring", "web-scraping", "sentiment-analysis", "geo")),
        "competitive-intelligence": (
            "competitive-analysis",
            ("competitive-intelligence", "market-analysis", "competitive-positioning", "geo"),
        ),
        "content-optimization": ("content-optimization", ("content-optimization", "seo", "ai-platforms", "geo")),
        "generic": ("tool-result", ("tool-output",)),
    })

    ID_PREFIX = "artifact"
    ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
    ID_SUFFIX_LENGTH = 9


# Relationship detection
class RelationshipConstants:
    """Strengths for artifact relationships."""

    BRAND_STRENGTH = 0.9
    CATEGORY_STRENGTH = 0.7
    KEYWORD_FACTOR = 0.6
    TIME_BUCKETS = ((1, 0.8), (24, 0.6), (168, 0.4), (720, 0.2))
    TIME_FLOOR = 0.1
    SIMILARITY_TYPE_WEIGHT = 0.3
    SIMILARITY_CATEGORY_WEIGHT = 0.2
    SIMILARITY_KEYWORD_WEIGHT = 0.3
    SIMILARITY_BRAND_WEIGHT = 0.2
    SIMILARITY_THRESHOLD = 0.3
    SIMILARITY_FACTOR = 0.5
    MAX_RELATED = 10
    MIN_TITLE_KEYWORD_LENGTH = 4


# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    CACHE_KEY_LENGTH = 8  # length of cache key for logging
