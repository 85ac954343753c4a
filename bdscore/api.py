"""
Programmatic API for the BD opportunity scorer.

Usage:
    from bdscore import score_opportunity

    assessment = score_opportunity(70, ["training modernization", "commodity"])
    print(assessment.adjusted_score, assessment.bucket.value)  # 67 SHAPE
"""

import json
import logging
import re
from typing import Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from bdscore.config import Settings
from bdscore.models import Assessment, Bucket, Opportunity, ScoringInput
from bdscore.scoring import (
    classify,
    contains_commodity_keywords,
    detect_primary_domain_fit,
    generate_assessment_notes,
    normalize_bucket,
    resolve_multipliers,
)
from bdscore.scoring.weighting import APPLIED, WeightingLike, check_score

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class ScoringResponseError(ValueError):
    """Raised when a classifier response cannot be turned into a ScoringInput."""
    pass


class ScoringResponse(BaseModel):
    """Shape of the JSON object returned by the language-model classifier."""

    score: float
    tags: List[str] = Field(default_factory=list)
    reason: str = ""
    summary: str = ""
    bucket: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [t.strip() for t in value.split(",") if t.strip()]
        return value

    @field_validator("bucket")
    @classmethod
    def _known_bucket(cls, value):
        if value:
            normalize_bucket(value)
        return value or None


def parse_scoring_response(payload: Union[str, bytes, dict]) -> ScoringInput:
    """
    Parse a classifier response into a ScoringInput.

    Accepts the decoded JSON object, or raw JSON text (optionally wrapped in
    a ```json code fence, as chat models often return it).

    Args:
        payload: Classifier output

    Returns:
        ScoringInput with raw score, tags and the model's reason/summary

    Raises:
        ScoringResponseError: If the payload is not valid JSON or misses fields
    """
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")

    if isinstance(payload, str):
        text = payload.strip()
        fenced = _CODE_FENCE.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ScoringResponseError(f"Classifier response is not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ScoringResponseError("Classifier response must be a JSON object")

    try:
        response = ScoringResponse.model_validate(payload)
    except ValidationError as e:
        raise ScoringResponseError(f"Invalid classifier response: {e}") from e

    return ScoringInput(
        raw_score=response.score,
        tags=response.tags,
        reason=response.reason,
        summary=response.summary,
        suggested_bucket=normalize_bucket(response.bucket) if response.bucket else None,
    )


def score_opportunity(
    raw_score: float,
    tags: Optional[Iterable[str]] = None,
    text: Optional[str] = None,
    weightings: WeightingLike = None,
    settings: Optional[Settings] = None,
) -> Assessment:
    """
    Score one opportunity.

    Args:
        raw_score: Fit score from the classifier (0-100)
        tags: Classification tags from the classifier
        text: Opportunity text for the commodity / domain-fit signals
        weightings: Weighting table (overrides settings.tag_weightings)
        settings: Keyword lists and default table (defaults if not provided)

    Returns:
        Assessment with adjusted score, bucket and text signals

    Example:
        assessment = score_opportunity(50, ["uniforms", "janitorial"])
        assessment.adjusted_score  # 5
        assessment.bucket          # Bucket.AVOID
    """
    check_score(raw_score)
    tags = list(tags or [])

    if weightings is None and settings is not None:
        weightings = settings.get_weighting()

    result = classify(raw_score, tags, weightings)
    matched = {
        tag: multiplier
        for tag, multiplier, status in resolve_multipliers(tags, weightings)
        if status == APPLIED
    }

    if settings is not None:
        commodity = contains_commodity_keywords(
            text, settings.commodity_keywords, settings.technical_phrases
        )
        domain_fit = detect_primary_domain_fit(text, settings.primary_domain_keywords)
    else:
        commodity = contains_commodity_keywords(text)
        domain_fit = detect_primary_domain_fit(text)

    assessment = Assessment(
        raw_score=raw_score,
        result=result,
        tags=tags,
        matched_tags=matched,
        commodity=commodity,
        primary_domain_fit=domain_fit,
    )
    assessment.notes = generate_assessment_notes(assessment)
    return assessment


def score_input(
    scoring_input: ScoringInput,
    weightings: WeightingLike = None,
    settings: Optional[Settings] = None,
) -> Assessment:
    """Score a parsed ScoringInput."""
    return score_opportunity(
        scoring_input.raw_score,
        scoring_input.tags,
        text=scoring_input.text,
        weightings=weightings,
        settings=settings,
    )


def score_opportunities(
    opportunities: Iterable[Opportunity],
    weightings: WeightingLike = None,
    settings: Optional[Settings] = None,
) -> List[Opportunity]:
    """
    Score a batch of opportunities in place.

    Opportunities without an ai_score are skipped (left unscored) and
    logged; everything else gets adjusted_score, bucket and signals.

    Returns:
        The opportunities, sorted by adjusted score (unscored last)
    """
    opportunities = list(opportunities)

    for opportunity in opportunities:
        if opportunity.ai_score is None:
            logger.warning("Skipping unscored opportunity: %s", opportunity.title)
            continue

        assessment = score_opportunity(
            opportunity.ai_score,
            opportunity.ai_tags,
            text=opportunity.text,
            weightings=weightings,
            settings=settings,
        )
        opportunity.apply_assessment(assessment)

    opportunities.sort(
        key=lambda o: (o.adjusted_score is not None, o.adjusted_score or 0),
        reverse=True,
    )
    scored = sum(1 for o in opportunities if o.bucket is not None)
    logger.info("Scored %d of %d opportunities", scored, len(opportunities))
    return opportunities


def bucket_counts(opportunities: Iterable[Opportunity]) -> dict:
    """Count scored opportunities per bucket."""
    counts = {bucket: 0 for bucket in Bucket}
    for opportunity in opportunities:
        if opportunity.bucket is not None:
            counts[normalize_bucket(opportunity.bucket)] += 1
    return counts
