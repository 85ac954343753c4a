"""
BD Opportunity Scorer - classify contracting opportunities for capture.

Takes the raw fit score and tags a language-model classifier returns for an
opportunity, adjusts the score with a tag weighting table, and assigns a
CHASE / SHAPE / MONITOR / AVOID bucket.

CLI Usage:
    bdscore score 70 -t "training modernization" -t commodity
    bdscore batch opportunities.jsonl -f json -o scored.json
    bdscore brief scored.json
    bdscore web  # Start the HTTP API

Library Usage:
    from bdscore import score_opportunity

    assessment = score_opportunity(70, ["training modernization", "commodity"])
    print(assessment.adjusted_score, assessment.bucket.value)  # 67 SHAPE
"""

__version__ = "1.2.0"
__author__ = "Wolf Street BD"

# Semantic versioning
# MAJOR.MINOR.PATCH
# - MAJOR: Breaking changes
# - MINOR: New features (backward compatible)
# - PATCH: Bug fixes (backward compatible)
VERSION_INFO = {
    "major": 1,
    "minor": 2,
    "patch": 0,
    "release": "stable",  # stable, beta, alpha
}


def get_version() -> str:
    """Get full version string."""
    version = f"{VERSION_INFO['major']}.{VERSION_INFO['minor']}.{VERSION_INFO['patch']}"
    if VERSION_INFO["release"] != "stable":
        version += f"-{VERSION_INFO['release']}"
    return version


from bdscore.models import Assessment, Bucket, Opportunity, ScoringInput, ScoringResult, TagWeighting
from bdscore.scoring import (
    apply_tag_weightings,
    classify,
    contains_commodity_keywords,
    detect_primary_domain_fit,
    score_to_bucket,
)
from bdscore.api import score_opportunity, score_opportunities, parse_scoring_response

__all__ = [
    "Assessment",
    "Bucket",
    "Opportunity",
    "ScoringInput",
    "ScoringResult",
    "TagWeighting",
    "apply_tag_weightings",
    "classify",
    "contains_commodity_keywords",
    "detect_primary_domain_fit",
    "score_to_bucket",
    "score_opportunity",
    "score_opportunities",
    "parse_scoring_response",
    "__version__",
    "get_version",
    "VERSION_INFO",
]
