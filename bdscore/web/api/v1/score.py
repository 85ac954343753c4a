"""Scoring endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from bdscore.api import score_opportunity
from bdscore.scoring import (
    InvalidScoreError,
    find_commodity_keywords,
    find_primary_domain_keywords,
    score_to_bucket,
)
from bdscore.scoring.weighting import check_score
from bdscore.web.api.v1.models import (
    BucketRequest,
    BucketResponse,
    ScoreRequest,
    ScoreResponse,
    TextCheckRequest,
    TextCheckResponse,
)
from bdscore.web.state import WeightingStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> WeightingStore:
    """Weighting store attached to the running app."""
    return request.app.state.weightings


@router.post("/score", response_model=ScoreResponse)
async def score(request: ScoreRequest, store: WeightingStore = Depends(get_store)):
    """
    Weight a classifier score and assign its bucket.

    Uses the active weighting table; see PUT /weightings to replace it.
    """
    try:
        assessment = score_opportunity(
            request.raw_score,
            request.tags,
            text=request.text,
            weightings=store.weighting,
            settings=store.settings,
        )
    except InvalidScoreError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ScoreResponse(**assessment.to_dict())


@router.post("/bucket", response_model=BucketResponse)
async def bucket(request: BucketRequest):
    """Bucket for a score (80+ CHASE, 60+ SHAPE, 40+ MONITOR, else AVOID)."""
    try:
        check_score(request.score)
    except InvalidScoreError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BucketResponse(score=request.score, bucket=score_to_bucket(request.score).value)


@router.post("/text/check", response_model=TextCheckResponse)
async def check_text(request: TextCheckRequest, store: WeightingStore = Depends(get_store)):
    """Commodity and primary-domain signals for free text."""
    settings = store.settings
    commodity = find_commodity_keywords(
        request.text, settings.commodity_keywords, settings.technical_phrases
    )
    domain = find_primary_domain_keywords(request.text, settings.primary_domain_keywords)

    return TextCheckResponse(
        commodity=bool(commodity),
        commodity_keywords=commodity,
        primary_domain_fit=bool(domain),
        primary_domain_keywords=domain,
    )
