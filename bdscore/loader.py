"""Load opportunities from JSON, JSONL or CSV exports."""

import csv
import json
import logging
from pathlib import Path
from typing import Optional

from .models import Opportunity
from .scoring import normalize_bucket

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """Raised when an opportunity file cannot be read."""
    pass


# Column name -> Opportunity field (first match wins)
SCORE_FIELDS = ("ai_score", "ai_fit_score", "score", "fit_score")
TAG_FIELDS = ("ai_tags", "tags")


def _parse_tags(value) -> list[str]:
    """Tags arrive as a list (JSON) or a ';' / ',' separated string (CSV)."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(t).strip() for t in value if str(t).strip()]

    text = str(value)
    separator = ";" if ";" in text else ","
    return [t.strip() for t in text.split(separator) if t.strip()]


def _parse_score(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise LoadError(f"Invalid score: {value!r}")


def record_to_opportunity(record: dict) -> Opportunity:
    """
    Build an Opportunity from one exported row.

    Accepts the stored column names (ai_score, ai_fit_score, ai_bucket) as
    well as the short classifier names (score, tags, bucket).
    """
    if not isinstance(record, dict):
        raise LoadError(f"Expected an object per opportunity, got {type(record).__name__}")

    title = record.get("title") or record.get("name") or ""
    if not title:
        raise LoadError(f"Record has no title: {record!r}")

    score = None
    for key in SCORE_FIELDS:
        if key in record:
            score = _parse_score(record[key])
            if score is not None:
                break

    tags = []
    for key in TAG_FIELDS:
        if record.get(key):
            tags = _parse_tags(record[key])
            break

    opportunity = Opportunity(
        title=title,
        agency=record.get("agency") or "",
        naics=record.get("naics") or None,
        psc=record.get("psc") or None,
        notice_type=record.get("notice_type") or record.get("type") or None,
        description=record.get("description") or "",
        source=record.get("source") or "",
        posted_date=record.get("posted_date") or None,
        ai_score=score,
        ai_tags=tags,
        ai_reason=record.get("ai_reason") or record.get("reason") or "",
        ai_summary=record.get("ai_summary") or record.get("summary") or "",
    )

    # Previously stored buckets (possibly legacy labels) are kept for briefs
    stored_bucket = record.get("ai_bucket") or record.get("bucket")
    if stored_bucket:
        try:
            opportunity.bucket = normalize_bucket(stored_bucket)
        except ValueError:
            logger.warning("Ignoring unknown bucket %r on %s", stored_bucket, title)

    return opportunity


def load_opportunities(path: str) -> list[Opportunity]:
    """
    Load opportunities from a file.

    Format is chosen by extension: .json (array), .jsonl, .csv.

    Args:
        path: Input file

    Returns:
        List of opportunities in file order

    Raises:
        LoadError: If the file is missing, malformed or has an unknown format
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()

    try:
        # utf-8-sig drops the BOM spreadsheet exports put before the header
        with open(file_path, encoding="utf-8-sig", newline="") as f:
            if suffix == ".json":
                data = json.load(f)
                if isinstance(data, dict):
                    data = data.get("opportunities", [])
                if not isinstance(data, list):
                    raise LoadError(f"{path}: expected a JSON array of opportunities")
                records = data
            elif suffix == ".jsonl":
                records = [json.loads(line) for line in f if line.strip()]
            elif suffix == ".csv":
                records = list(csv.DictReader(f))
            else:
                raise LoadError(f"Unsupported file type: {suffix or path}")
    except OSError as e:
        raise LoadError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise LoadError(f"{path} is not UTF-8 text: {e}") from e
    except json.JSONDecodeError as e:
        raise LoadError(f"Cannot parse {path}: {e}") from e

    opportunities = [record_to_opportunity(record) for record in records]
    logger.info("Loaded %d opportunities from %s", len(opportunities), path)
    return opportunities
