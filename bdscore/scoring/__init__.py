"""Scoring module for opportunity classification."""

from .weighting import (
    InvalidScoreError,
    apply_tag_weightings,
    classify,
    resolve_multipliers,
)
from .buckets import score_to_bucket, normalize_bucket, group_by_bucket
from .keywords import (
    contains_commodity_keywords,
    detect_primary_domain_fit,
    detect_front_end_solutioning,
    find_commodity_keywords,
    find_primary_domain_keywords,
)
from .notes import generate_assessment_notes, get_weighting_breakdown

__all__ = [
    "InvalidScoreError",
    "apply_tag_weightings",
    "classify",
    "resolve_multipliers",
    "score_to_bucket",
    "normalize_bucket",
    "group_by_bucket",
    "contains_commodity_keywords",
    "detect_primary_domain_fit",
    "detect_front_end_solutioning",
    "find_commodity_keywords",
    "find_primary_domain_keywords",
    "generate_assessment_notes",
    "get_weighting_breakdown",
]
