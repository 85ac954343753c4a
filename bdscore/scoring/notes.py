"""Generate plain-English scoring notes for opportunities."""

from typing import Iterable, Optional

from ..models import Assessment
from .weighting import (
    APPLIED,
    DISCARDED,
    NEUTRAL_MULTIPLIER,
    WeightingLike,
    apply_tag_weightings,
    mean_multiplier,
    resolve_multipliers,
)


def get_weighting_breakdown(
    raw_score: float,
    tags: Optional[Iterable[str]],
    weightings: WeightingLike = None,
) -> dict:
    """
    Get a detailed breakdown of how tags moved the score.

    Args:
        raw_score: Fit score from the classifier
        tags: Classification tags
        weightings: Weighting table (default table if not provided)

    Returns:
        Dictionary with per-tag components, the mean multiplier and the total
    """
    tags = list(tags or [])
    resolved = resolve_multipliers(tags, weightings)

    breakdown = {
        "raw_score": raw_score,
        "components": [],
        "mean_multiplier": mean_multiplier(resolved),
        "total": apply_tag_weightings(raw_score, tags, weightings),
    }

    for tag, multiplier, status in resolved:
        if status == APPLIED and multiplier > NEUTRAL_MULTIPLIER:
            effect = "boost"
        elif status == APPLIED and multiplier < NEUTRAL_MULTIPLIER:
            effect = "suppress"
        elif status == DISCARDED:
            effect = "ignored"
        else:
            effect = "neutral"

        breakdown["components"].append({
            "tag": tag,
            "multiplier": multiplier,
            "status": status,
            "effect": effect,
        })

    return breakdown


def generate_assessment_notes(assessment: Assessment) -> str:
    """
    Generate plain-English notes describing a scoring decision.

    Args:
        assessment: The assessment to describe

    Returns:
        Human-readable string, sections separated by "; "
    """
    notes = []

    boosts = []
    suppressions = []
    for tag, multiplier in assessment.matched_tags.items():
        if multiplier > NEUTRAL_MULTIPLIER:
            boosts.append(f"{tag} (x{multiplier:g})")
        elif multiplier < NEUTRAL_MULTIPLIER:
            suppressions.append(f"{tag} (x{multiplier:g})")

    if boosts:
        notes.append("Boosted by: " + ", ".join(boosts))
    if suppressions:
        notes.append("Suppressed by: " + ", ".join(suppressions))

    if not assessment.tags:
        notes.append("No tags - raw score kept")
    elif not boosts and not suppressions:
        notes.append("Tags neutral - no weighting adjustment")

    # Text signals
    if assessment.commodity:
        notes.append("Commodity / out-of-scope language detected")
    if assessment.primary_domain_fit:
        notes.append("Primary domain fit (training, C2, AI, data fabric or operator interface)")

    if assessment.commodity and assessment.primary_domain_fit:
        notes.append("Mixed signals - review manually")

    return "; ".join(notes)
