"""Deterministic content optimization scoring for assistant platforms."""

import re
from typing import Any, Dict, List, Sequence

from .constants import InsightConstants
from .models import PlatformScore

CONVERSATIONAL_WORDS = ("you", "i", "we", "our", "us", "ask", "imagine")
QA_INDICATORS = ("?", "questions", "answers", "how to", "what is")
NUANCE_WORDS = ("however", "although", "nevertheless", "consequently", "moreover", "furthermore")
MULTIMODAL_INDICATORS = ("image", "video", "chart", "diagram", "graph", "visualize", "show", "demonstrate")

PLATFORM_ADVICE = {
    "chatgpt": "Add more conversational elements and Q&A sections",
    "claude": "Elaborate on complex topics with more nuance",
    "gemini": "Suggest integrating visual elements like charts or diagrams",
}

PLATFORM_RECOMMENDATIONS = {
    "chatgpt": "Adapt content for conversational AI interfaces like ChatGPT",
    "claude": "Enhance content depth and nuance for platforms like Claude",
    "gemini": "Explore multimodal content formats for better Gemini performance",
}

RECOMMENDED_DENSITY = 1.5
DEPTH_WORDS = 500
SHORT_CONTENT_WORDS = 400
LONG_CONTENT_WORDS = 1500


def word_count(content: str) -> int:
    return len(content.split())


def _present(content: str, terms: Sequence[str]) -> int:
    lowered = content.lower()
    return sum(1 for t in terms if t in lowered)


def conversational_tone(content: str) -> float:
    lowered = content.lower()
    count = sum(1 for w in CONVERSATIONAL_WORDS if re.search(rf"\b{re.escape(w)}\b", lowered))
    return min(count * 10, 100)


def qa_format(content: str) -> float:
    return min(_present(content, QA_INDICATORS) * 15, 100)


def keyword_density(content: str, keywords: Sequence[str]) -> float:
    """Percentage of words that are target-keyword hits, capped at 100."""
    words = word_count(content)
    if not keywords or words == 0:
        return 0.0
    lowered = content.lower()
    hits = sum(len(re.findall(rf"\b{re.escape(k.lower())}\b", lowered)) for k in keywords)
    return min(hits / words * 100, 100.0)


def content_depth(content: str) -> float:
    return min(word_count(content) / DEPTH_WORDS * 100, 100.0)


def nuance(content: str) -> float:
    return min(_present(content, NUANCE_WORDS) * 20, 100)


def multimodal_potential(content: str) -> float:
    return min(_present(content, MULTIMODAL_INDICATORS) * 25, 100)


def keyword_relevance(content: str, keywords: Sequence[str]) -> float:
    if not keywords:
        return 0.0
    lowered = content.lower()
    covered = sum(1 for k in keywords if k.lower() in lowered)
    return min(covered / len(keywords) * 100, 100.0)


def _strengths(content: str, keywords: Sequence[str]) -> List[str]:
    lowered = content.lower()
    strengths = []
    if len(content) > 500:
        strengths.append("Comprehensive content length")
    if all(k.lower() in lowered for k in keywords):
        strengths.append("Good keyword integration")
    return strengths


def _weaknesses(content: str, keywords: Sequence[str]) -> List[str]:
    lowered = content.lower()
    weaknesses = []
    if len(content) < 200:
        weaknesses.append("Content is too short")
    if not any(k.lower() in lowered for k in keywords):
        weaknesses.append("Poor keyword integration")
    return weaknesses


def analyze_platforms(content: str, keywords: Sequence[str]) -> List[PlatformScore]:
    """Score content for chat-style, long-form and search-style assistants."""
    density = keyword_density(content, keywords)
    raw_scores = {
        "chatgpt": conversational_tone(content) * 0.4 + qa_format(content) * 0.3 + density * 0.3,
        "claude": content_depth(content) * 0.4 + nuance(content) * 0.3 + density * 0.3,
        "gemini": multimodal_potential(content) * 0.4 + keyword_relevance(content, keywords) * 0.3 + density * 0.3,
    }
    return [
        PlatformScore(
            platform=platform,
            score=round(score, 1),
            strengths=_strengths(content, keywords),
            weaknesses=_weaknesses(content, keywords),
            improvements=[PLATFORM_ADVICE[platform]],
        )
        for platform, score in raw_scores.items()
    ]


def priority_improvements(platforms: Sequence[PlatformScore]) -> List[str]:
    """Top three distinct weaknesses across platforms."""
    unique = dict.fromkeys(w for p in platforms for w in p.weaknesses)
    return list(unique)[:3]


def content_structure(content: str) -> Dict[str, Any]:
    words = word_count(content)
    if words < SHORT_CONTENT_WORDS:
        return {
            "suggested_format": "Short Post/Summary",
            "recommended_sections": ["Introduction", "Key Points", "Summary"],
            "length_recommendation": "Around 300-500 words",
        }
    if words > LONG_CONTENT_WORDS:
        return {
            "suggested_format": "In-depth Guide/Report",
            "recommended_sections": ["Abstract", "Introduction", "Detailed Sections", "Conclusion", "References"],
            "length_recommendation": "Over 1500 words",
        }
    return {
        "suggested_format": "Standard Article",
        "recommended_sections": ["Introduction", "Main Body", "Conclusion"],
        "length_recommendation": "Around 800-1200 words",
    }


def keyword_integration(content: str, keywords: Sequence[str]) -> Dict[str, Any]:
    lowered = content.lower().strip()
    suggestions = []
    if not any(lowered.startswith(k.lower()) for k in keywords):
        suggestions.append("Include target keywords in the opening paragraph")
    if not any(lowered.endswith(k.lower()) for k in keywords):
        suggestions.append("Include target keywords in the concluding paragraph")
    suggestions.append("Distribute keywords naturally throughout the content")
    return {
        "current_density": round(keyword_density(content, keywords), 2),
        "recommended_density": RECOMMENDED_DENSITY,
        "placement_suggestions": suggestions,
    }


def strategic_recommendations(
    average_score: float,
    current_density: float,
    platforms: Sequence[PlatformScore],
) -> List[str]:
    recommendations = []
    if average_score < 60:
        recommendations.append("Conduct a full content audit to identify low-performing assets")
    if current_density < RECOMMENDED_DENSITY:
        recommendations.append("Review keyword strategy and optimize content for better keyword density")
    for platform in platforms:
        if platform.score < 50:
            recommendations.append(PLATFORM_RECOMMENDATIONS[platform.platform])
    return recommendations[:InsightConstants.MAX_RECOMMENDATIONS]


def optimize(content: str, keywords: Sequence[str], include_recommendations: bool = True) -> Dict[str, Any]:
    """Run every content check and return the pieces of a ContentOptimizationReport."""
    platforms = analyze_platforms(content, keywords)
    average = round(sum(p.score for p in platforms) / len(platforms), 1)
    integration = keyword_integration(content, keywords)
    recommendations = (
        strategic_recommendations(average, integration["current_density"], platforms)
        if include_recommendations else []
    )
    return {
        "platform_analysis": platforms,
        "overall_optimization": {
            "average_score": average,
            "priority_improvements": priority_improvements(platforms),
        },
        "content_structure": content_structure(content),
        "keyword_integration": integration,
        "recommendations": recommendations,
    }
