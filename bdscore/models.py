"""Data models for opportunity scoring."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Bucket(str, Enum):
    """Priority classification for an opportunity."""

    CHASE = "CHASE"
    SHAPE = "SHAPE"
    MONITOR = "MONITOR"
    AVOID = "AVOID"


class TagWeighting(Mapping):
    """
    Immutable tag -> multiplier table.

    Lookups go through ``multiplier_for`` which tries the tag exactly as
    given, then its lowercased form against a lowercased view of the keys.
    When two keys differ only in case, the later one wins in that view.
    """

    def __init__(self, weightings: Optional[Mapping] = None):
        self._weights = dict(weightings or {})
        self._folded = {}
        for tag, multiplier in self._weights.items():
            self._folded[tag.lower()] = multiplier

    def __getitem__(self, tag: str) -> float:
        return self._weights[tag]

    def __iter__(self):
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        return f"TagWeighting({len(self._weights)} tags)"

    def multiplier_for(self, tag: str) -> Optional[float]:
        """Return the multiplier for a tag, or None if it has no entry."""
        if tag in self._weights:
            return self._weights[tag]
        return self._folded.get(tag.lower())

    def to_dict(self) -> dict:
        """Copy of the underlying table."""
        return dict(self._weights)


@dataclass
class ScoringInput:
    """One evaluation request, usually built from a language-model response."""

    raw_score: float
    tags: list[str] = field(default_factory=list)
    text: Optional[str] = None

    # Extra fields the model returns alongside score/tags
    reason: str = ""
    summary: str = ""
    suggested_bucket: Optional[Bucket] = None


@dataclass
class ScoringResult:
    """Adjusted score and bucket for one opportunity."""

    adjusted_score: int
    bucket: Bucket

    def to_dict(self) -> dict:
        return {
            "adjusted_score": self.adjusted_score,
            "bucket": self.bucket.value,
        }


@dataclass
class Assessment:
    """A scoring result plus the auxiliary text signals."""

    raw_score: float
    result: ScoringResult
    tags: list[str] = field(default_factory=list)
    matched_tags: dict = field(default_factory=dict)  # tag -> applied multiplier
    commodity: bool = False
    primary_domain_fit: bool = False
    notes: str = ""

    @property
    def adjusted_score(self) -> int:
        return self.result.adjusted_score

    @property
    def bucket(self) -> Bucket:
        return self.result.bucket

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "raw_score": self.raw_score,
            "adjusted_score": self.adjusted_score,
            "bucket": self.bucket.value,
            "tags": list(self.tags),
            "matched_tags": dict(self.matched_tags),
            "commodity": self.commodity,
            "primary_domain_fit": self.primary_domain_fit,
            "notes": self.notes,
        }


@dataclass
class Opportunity:
    """A contracting opportunity as stored by the BD pipeline."""

    title: str
    agency: str = ""
    naics: Optional[str] = None
    psc: Optional[str] = None
    notice_type: Optional[str] = None
    description: str = ""
    source: str = ""
    posted_date: Optional[str] = None

    # Language-model output
    ai_score: Optional[float] = None
    ai_tags: list[str] = field(default_factory=list)
    ai_reason: str = ""
    ai_summary: str = ""

    # Engine output
    adjusted_score: Optional[int] = None
    bucket: Optional[Bucket] = None
    commodity: bool = False
    primary_domain_fit: bool = False
    scoring_notes: str = ""
    scored_at: Optional[datetime] = None

    @property
    def text(self) -> str:
        """Free text used for the keyword signals."""
        return " ".join(part for part in (self.title, self.description) if part)

    def apply_assessment(self, assessment: Assessment) -> None:
        """Copy engine output onto this record."""
        self.adjusted_score = assessment.adjusted_score
        self.bucket = assessment.bucket
        self.commodity = assessment.commodity
        self.primary_domain_fit = assessment.primary_domain_fit
        self.scoring_notes = assessment.notes
        self.scored_at = datetime.now()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "agency": self.agency,
            "naics": self.naics,
            "psc": self.psc,
            "notice_type": self.notice_type,
            "description": self.description,
            "source": self.source,
            "posted_date": self.posted_date,
            "ai_score": self.ai_score,
            "ai_tags": list(self.ai_tags),
            "ai_reason": self.ai_reason,
            "ai_summary": self.ai_summary,
            "adjusted_score": self.adjusted_score,
            "bucket": self.bucket.value if self.bucket else None,
            "commodity": self.commodity,
            "primary_domain_fit": self.primary_domain_fit,
            "scoring_notes": self.scoring_notes,
            "scored_at": self.scored_at.isoformat() if self.scored_at else None,
        }
