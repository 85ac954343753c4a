"""Pydantic models for API v1."""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ScoreRequest(BaseModel):
    """Score request payload."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "raw_score": 70,
                "tags": ["training modernization", "commodity"],
                "text": "Adaptive training system for operator readiness",
            }
        }
    )

    raw_score: float
    tags: List[str] = Field(default_factory=list)
    text: Optional[str] = None


class ScoreResponse(BaseModel):
    """Score response."""
    raw_score: float
    adjusted_score: int
    bucket: str
    tags: List[str]
    matched_tags: Dict[str, float]
    commodity: bool
    primary_domain_fit: bool
    notes: str


class BucketRequest(BaseModel):
    """Bucket lookup payload."""
    score: float


class BucketResponse(BaseModel):
    """Bucket lookup response."""
    score: float
    bucket: str


class TextCheckRequest(BaseModel):
    """Free-text signal check payload."""
    text: str = ""


class TextCheckResponse(BaseModel):
    """Free-text signal check response."""
    commodity: bool
    commodity_keywords: List[str]
    primary_domain_fit: bool
    primary_domain_keywords: List[str]


class WeightingsResponse(BaseModel):
    """Active weighting table."""
    count: int
    tag_weightings: Dict[str, float]


class WeightingsUpdate(BaseModel):
    """Replacement weighting table (replaces the active one wholesale)."""
    tag_weightings: Dict[str, float]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    weighting_tags: int
    uptime_seconds: int
