"""Keyword signals - commodity and primary-domain detection in free text."""

import logging
import re
from functools import lru_cache
from typing import Iterable, Optional

from ..config import COMMODITY_KEYWORDS, PRIMARY_DOMAIN_KEYWORDS, TECHNICAL_PHRASES

logger = logging.getLogger(__name__)


_SIBILANT_ENDINGS = ("s", "sh", "ch", "x", "z")


def _plural_suffix(keyword: str) -> str:
    # bus -> buses, patch -> patches; everything else takes a plain "s"
    return "(?:es)?" if keyword.endswith(_SIBILANT_ENDINGS) else "s?"


@lru_cache(maxsize=64)
def _word_pattern(keywords: tuple) -> re.Pattern:
    """Compile one whole-word alternation (plurals included) for a keyword list."""
    # Longest first so "office supply" wins over a shorter overlapping entry
    ordered = sorted((k.lower() for k in keywords), key=len, reverse=True)
    alternation = "|".join(re.escape(k) + _plural_suffix(k) for k in ordered)
    return re.compile(rf"\b(?:{alternation})\b")


def _strip_technical_phrases(normalized: str, phrases: Iterable[str]) -> str:
    """Blank out technical phrases whose words double as commodity keywords."""
    phrases = tuple(p for p in phrases if p)
    if not phrases:
        return normalized
    return _word_pattern(phrases).sub(" ", normalized)


def find_commodity_keywords(
    text: Optional[str],
    keywords: Optional[Iterable[str]] = None,
    technical_phrases: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Find commodity keywords that appear as whole words.

    Args:
        text: Opportunity text (title, description, notes)
        keywords: Keyword list (defaults to COMMODITY_KEYWORDS)
        technical_phrases: Phrases ignored before matching
            (defaults to TECHNICAL_PHRASES)

    Returns:
        Matched keywords in list order
    """
    if not text:
        return []

    keywords = COMMODITY_KEYWORDS if keywords is None else keywords
    phrases = TECHNICAL_PHRASES if technical_phrases is None else technical_phrases
    normalized = _strip_technical_phrases(text.lower(), phrases)

    return [
        keyword for keyword in keywords
        if keyword and _word_pattern((keyword,)).search(normalized)
    ]


def contains_commodity_keywords(
    text: Optional[str],
    keywords: Optional[Iterable[str]] = None,
    technical_phrases: Optional[Iterable[str]] = None,
) -> bool:
    """
    Check if text contains commodity keywords.

    Uses word boundary matching so a keyword only counts as a complete word
    or word sequence. Regular plurals count as the keyword ("uniforms" for
    "uniform", "buses" for "bus"), so a keyword list needs singular forms
    only. Technical phrases such as "database table" or "vehicle telemetry"
    are blanked out first, so their commodity-looking words do not count.

    Args:
        text: Opportunity text
        keywords: Keyword list (defaults to COMMODITY_KEYWORDS)
        technical_phrases: Phrases ignored before matching

    Returns:
        True if any keyword matches as a whole word
    """
    if not text:
        return False

    keywords = tuple(k for k in (COMMODITY_KEYWORDS if keywords is None else keywords) if k)
    if not keywords:
        return False

    phrases = TECHNICAL_PHRASES if technical_phrases is None else technical_phrases
    normalized = _strip_technical_phrases(text.lower(), phrases)
    match = _word_pattern(keywords).search(normalized)
    if match:
        logger.debug("Commodity keyword %r found", match.group(0))
    return match is not None


def find_primary_domain_keywords(
    text: Optional[str],
    keywords: Optional[Iterable[str]] = None,
) -> list[str]:
    """Return the high-value domain phrases contained in the text."""
    if not text:
        return []

    normalized = text.lower()
    keywords = PRIMARY_DOMAIN_KEYWORDS if keywords is None else keywords
    return [keyword for keyword in keywords if keyword and keyword.lower() in normalized]


def detect_primary_domain_fit(
    text: Optional[str],
    keywords: Optional[Iterable[str]] = None,
) -> bool:
    """
    Detect high-value domain phrases (training, C2, AI, data fabric, HMI).

    Plain substring containment; the phrases are specific enough that
    word boundaries are not needed.
    """
    return bool(find_primary_domain_keywords(text, keywords))


# Older callers use this name
detect_front_end_solutioning = detect_primary_domain_fit
