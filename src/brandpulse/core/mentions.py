"""Brand mention detection (exact and fuzzy) with surrounding context."""

import re
from typing import List

from .constants import ScoringConstants
from .models import Mention, MentionKind


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def brand_variants(brand_name: str) -> List[str]:
    """Generate spelling variants of a brand name, in a stable order."""
    variants = [brand_name.lower(), brand_name.upper(), _capitalize(brand_name)]

    if " " in brand_name:
        words = brand_name.split()
        variants.append(" ".join(_capitalize(w) for w in words))
        variants.append(" ".join(w.upper() for w in words))
        variants.append("".join(words).lower())
        variants.append("".join(words).upper())

    if "&" in brand_name:
        variants.append(brand_name.replace("&", "and"))
        variants.append(brand_name.replace("&", "AND"))

    if "." in brand_name:
        variants.append(brand_name.replace(".", ""))
        variants.append(brand_name.replace(".", " "))

    # dict.fromkeys keeps first-seen order
    return [v for v in dict.fromkeys(variants) if v.strip()]


def fuzzy_confidence(variant: str, brand_name: str) -> float:
    """Length-ratio similarity, kept within [0.5, 0.95]."""
    longest = max(len(variant), len(brand_name))
    if longest == 0:
        return ScoringConstants.MIN_FUZZY_CONFIDENCE
    similarity = min(len(variant), len(brand_name)) / longest
    return min(ScoringConstants.MAX_FUZZY_CONFIDENCE, max(ScoringConstants.MIN_FUZZY_CONFIDENCE, similarity))


def extract_context(text: str, position: int, length: int = ScoringConstants.CONTEXT_WINDOW) -> str:
    """Window of ``length`` chars centred on ``position``, widened to whole words."""
    half = length // 2
    start = max(0, position - half)
    end = min(len(text), position + half)

    while start > 0 and not text[start - 1].isspace():
        start -= 1
    while end < len(text) and not text[end].isspace():
        end += 1

    return text[start:end].strip()


def _word_pattern(term: str) -> "re.Pattern[str]":
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


class MentionDetector:
    """Finds brand occurrences in free text."""

    def __init__(self, context_window: int = ScoringConstants.CONTEXT_WINDOW):
        self.context_window = context_window

    def detect(self, text: str, brand_name: str) -> List[Mention]:
        """Return mentions sorted by position; distinct positions are never merged."""
        if not text or not brand_name or not brand_name.strip():
            return []

        candidates = []
        for match in _word_pattern(brand_name).finditer(text):
            candidates.append((match.group(0), match.start(), MentionKind.EXACT, 1.0))

        for variant in brand_variants(brand_name):
            confidence = fuzzy_confidence(variant, brand_name)
            for match in _word_pattern(variant).finditer(text):
                candidates.append((match.group(0), match.start(), MentionKind.FUZZY, confidence))

        # Exact matches were added first, so they win on a (text, position) collision
        seen = set()
        mentions = []
        for matched, position, kind, confidence in candidates:
            key = (matched, position)
            if key in seen:
                continue
            seen.add(key)
            mentions.append(Mention(
                text=matched,
                position=position,
                kind=kind,
                confidence=confidence,
                context=extract_context(text, position, self.context_window),
            ))

        mentions.sort(key=lambda m: m.position)
        return mentions


_default_detector = MentionDetector()


def detect_mentions(text: str, brand_name: str) -> List[Mention]:
    """Detect mentions with the default detector."""
    return _default_detector.detect(text, brand_name)


def count_exact_mentions(text: str, brand_name: str) -> int:
    """Count case-insensitive whole-word occurrences of the brand name."""
    if not text or not brand_name or not brand_name.strip():
        return 0
    return len(_word_pattern(brand_name).findall(text))
