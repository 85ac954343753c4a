"""Tag weighting - adjust a raw fit score by what the opportunity is about."""

import logging
import math
import sys
from collections.abc import Mapping
from numbers import Integral, Real
from typing import Iterable, Optional, Union

from ..config import DEFAULT_TAG_WEIGHTINGS
from ..models import ScoringResult, TagWeighting
from .buckets import score_to_bucket

logger = logging.getLogger(__name__)

NEUTRAL_MULTIPLIER = 1.0

# Status values reported by resolve_multipliers
APPLIED = "applied"
NEUTRAL = "neutral"
DISCARDED = "discarded"

_DEFAULT_WEIGHTING = TagWeighting(DEFAULT_TAG_WEIGHTINGS)

WeightingLike = Union[TagWeighting, Mapping, None]


class InvalidScoreError(ValueError):
    """Raised for raw scores that are not finite numbers."""
    pass


def as_weighting(weightings: WeightingLike = None) -> TagWeighting:
    """Wrap a plain mapping as a TagWeighting; None gives the default table."""
    if weightings is None:
        return _DEFAULT_WEIGHTING
    if isinstance(weightings, TagWeighting):
        return weightings
    return TagWeighting(weightings)


def check_score(raw_score) -> None:
    """Reject scores that are not finite real numbers."""
    if isinstance(raw_score, bool) or not isinstance(raw_score, Real):
        raise InvalidScoreError(f"Score must be a number, got {raw_score!r}")
    # Integers of any size are finite; math.isfinite would overflow on them
    if isinstance(raw_score, Integral):
        return
    if not math.isfinite(raw_score):
        raise InvalidScoreError(f"Score must be finite, got {raw_score!r}")


def round_half_up(value: float) -> int:
    """Round to the nearest integer; halves round up."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Clamp to 0-100 and round half-up."""
    return round_half_up(min(100.0, max(0.0, value)))


def resolve_multipliers(
    tags: Optional[Iterable[str]],
    weightings: WeightingLike = None,
) -> list[tuple[str, float, str]]:
    """
    Look up each tag's multiplier.

    Args:
        tags: Tags in the order the classifier returned them
        weightings: Weighting table (default table if not provided)

    Returns:
        List of (tag, multiplier, status) where status is one of
        "applied", "neutral" (no entry, 1.0 used) or "discarded" (<= 0)
    """
    table = as_weighting(weightings)
    resolved = []

    for tag in tags or []:
        multiplier = table.multiplier_for(tag)
        if multiplier is None:
            resolved.append((tag, NEUTRAL_MULTIPLIER, NEUTRAL))
        elif multiplier <= 0:
            logger.debug("Discarding non-positive multiplier %s for tag %r", multiplier, tag)
            resolved.append((tag, multiplier, DISCARDED))
        else:
            resolved.append((tag, multiplier, APPLIED))

    return resolved


def mean_multiplier(resolved: list[tuple[str, float, str]]) -> Optional[float]:
    """Arithmetic mean of the usable multipliers, or None if there are none."""
    usable = [multiplier for _, multiplier, status in resolved if status != DISCARDED]
    if not usable:
        return None
    return sum(usable) / len(usable)


def apply_tag_weightings(
    raw_score: float,
    tags: Optional[Iterable[str]],
    weightings: WeightingLike = None,
) -> Union[int, float]:
    """
    Apply tag weightings to a raw score.

    The mean multiplier of all tags is applied to the raw score, then the
    result is clamped to 0-100 and rounded half-up. Unknown tags count as
    neutral (1.0); multipliers <= 0 are left out of the mean.

    With no tags, or no usable multipliers, the raw score is returned
    untouched (not clamped, not rounded).

    Args:
        raw_score: Fit score from the classifier, nominally 0-100
        tags: Classification tags, may be empty or None
        weightings: Weighting table (default table if not provided)

    Returns:
        Adjusted score from 0-100, or the raw score unchanged

    Raises:
        InvalidScoreError: If raw_score is not a finite number
    """
    check_score(raw_score)
    tags = list(tags or [])
    if not tags:
        return raw_score

    avg_multiplier = mean_multiplier(resolve_multipliers(tags, weightings))
    if avg_multiplier is None:
        return raw_score

    # Bound huge ints to float range first; the 0-100 clamp gives the same result
    bounded = min(max(raw_score, -sys.float_info.max), sys.float_info.max)
    adjusted = clamp_score(float(bounded) * avg_multiplier)
    logger.debug(
        "Weighted score %s x %.3f -> %d (%d tags)",
        raw_score, avg_multiplier, adjusted, len(tags),
    )
    return adjusted


def classify(
    raw_score: float,
    tags: Optional[Iterable[str]],
    weightings: WeightingLike = None,
) -> ScoringResult:
    """
    Weight a raw score and assign its bucket.

    Args:
        raw_score: Fit score from the classifier
        tags: Classification tags
        weightings: Weighting table (default table if not provided)

    Returns:
        ScoringResult with an integer score in 0-100
    """
    adjusted = apply_tag_weightings(raw_score, tags, weightings)
    # Untagged scores come back as-is; the stored result is always 0-100
    adjusted = clamp_score(adjusted)
    return ScoringResult(adjusted_score=adjusted, bucket=score_to_bucket(adjusted))
