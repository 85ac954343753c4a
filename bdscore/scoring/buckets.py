"""Bucket classification - CHASE / SHAPE / MONITOR / AVOID."""

from typing import Iterable, Optional, Union

from ..config import (
    CHASE_THRESHOLD,
    SHAPE_THRESHOLD,
    MONITOR_THRESHOLD,
    LEGACY_BUCKETS,
    DEFAULT_BRIEF_LIMITS,
)
from ..models import Bucket, Opportunity


def score_to_bucket(score: float) -> Bucket:
    """
    Map a score to its bucket.

    Thresholds:
        80+      CHASE
        60-79    SHAPE
        40-59    MONITOR
        below 40 AVOID
    """
    if score >= CHASE_THRESHOLD:
        return Bucket.CHASE
    if score >= SHAPE_THRESHOLD:
        return Bucket.SHAPE
    if score >= MONITOR_THRESHOLD:
        return Bucket.MONITOR
    return Bucket.AVOID


def normalize_bucket(label: Union[str, Bucket]) -> Bucket:
    """
    Convert a stored bucket label to a Bucket.

    Accepts current labels and the legacy HIGH_PRIORITY / WATCH / INFO_ONLY
    labels, in any case.

    Raises:
        ValueError: If the label is not a known bucket
    """
    if isinstance(label, Bucket):
        return label

    key = str(label).strip().upper().replace(" ", "_")
    key = LEGACY_BUCKETS.get(key, key)
    try:
        return Bucket(key)
    except ValueError:
        raise ValueError(f"Unknown bucket: {label!r}") from None


def _bucket_of(opportunity: Opportunity) -> Optional[Bucket]:
    if opportunity.bucket is not None:
        return normalize_bucket(opportunity.bucket)
    if opportunity.adjusted_score is not None:
        return score_to_bucket(opportunity.adjusted_score)
    return None


def _score_of(opportunity: Opportunity) -> float:
    if opportunity.adjusted_score is not None:
        return opportunity.adjusted_score
    return opportunity.ai_score or 0


def group_by_bucket(
    opportunities: Iterable[Opportunity],
    limits: Optional[dict] = None,
) -> dict:
    """
    Group scored opportunities for a daily brief.

    Each bucket is sorted by score (highest first) and cut to its limit.
    Buckets without a limit (AVOID by default) are left out.

    Args:
        opportunities: Scored opportunities
        limits: Max items per bucket label (defaults to 10 / 5 / 5)

    Returns:
        Dict of Bucket -> {"total": int, "items": list[Opportunity]}
    """
    limits = limits if limits is not None else DEFAULT_BRIEF_LIMITS
    limits = {normalize_bucket(label): limit for label, limit in limits.items()}

    grouped = {bucket: [] for bucket in Bucket if bucket in limits}
    for opportunity in opportunities:
        bucket = _bucket_of(opportunity)
        if bucket in grouped:
            grouped[bucket].append(opportunity)

    brief = {}
    for bucket, items in grouped.items():
        items.sort(key=_score_of, reverse=True)
        brief[bucket] = {
            "total": len(items),
            "items": items[:limits[bucket]],
        }
    return brief
