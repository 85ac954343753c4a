"""Export functionality for scored opportunities (CSV, JSON)."""

import csv
import io
import json
import logging
from datetime import datetime
from pathlib import Path

from .models import Opportunity

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "title",
    "agency",
    "naics",
    "psc",
    "notice_type",
    "source",
    "posted_date",
    "ai_score",
    "adjusted_score",
    "bucket",
    "ai_tags",
    "commodity",
    "primary_domain_fit",
    "ai_summary",
    "scoring_notes",
]


def opportunity_to_row(opportunity: Opportunity) -> dict:
    """Flatten an opportunity into one CSV row."""
    return {
        "title": opportunity.title,
        "agency": opportunity.agency or "",
        "naics": opportunity.naics or "",
        "psc": opportunity.psc or "",
        "notice_type": opportunity.notice_type or "",
        "source": opportunity.source or "",
        "posted_date": opportunity.posted_date or "",
        "ai_score": "" if opportunity.ai_score is None else opportunity.ai_score,
        "adjusted_score": "" if opportunity.adjusted_score is None else opportunity.adjusted_score,
        "bucket": opportunity.bucket.value if opportunity.bucket else "",
        "ai_tags": "; ".join(opportunity.ai_tags),
        "commodity": "Yes" if opportunity.commodity else "No",
        "primary_domain_fit": "Yes" if opportunity.primary_domain_fit else "No",
        "ai_summary": opportunity.ai_summary or "",
        "scoring_notes": opportunity.scoring_notes or "",
    }


def export_csv_string(opportunities: list[Opportunity]) -> str:
    """
    Export opportunities to a CSV string (for stdout / web download).

    Args:
        opportunities: Opportunities to export

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    for opportunity in opportunities:
        writer.writerow(opportunity_to_row(opportunity))
    return output.getvalue()


def export_to_csv(opportunities: list[Opportunity], output_path: str) -> str:
    """
    Export opportunities to CSV file.

    Args:
        opportunities: Opportunities to export
        output_path: Path to output file

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for opportunity in opportunities:
            writer.writerow(opportunity_to_row(opportunity))

    logger.info("Exported %d opportunities to %s", len(opportunities), output_path)
    return str(output_path)


def export_json_string(opportunities: list[Opportunity], pretty: bool = True) -> str:
    """Serialize opportunities with an export envelope."""
    data = {
        "exported_at": datetime.now().isoformat(),
        "total_opportunities": len(opportunities),
        "opportunities": [o.to_dict() for o in opportunities],
    }
    return json.dumps(data, indent=2 if pretty else None, default=str)


def export_to_json(
    opportunities: list[Opportunity],
    output_path: str,
    pretty: bool = True,
) -> str:
    """
    Export opportunities to JSON file.

    Args:
        opportunities: Opportunities to export
        output_path: Path to output file
        pretty: Whether to format JSON with indentation

    Returns:
        Path to the created file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(export_json_string(opportunities, pretty), encoding="utf-8")

    logger.info("Exported %d opportunities to %s", len(opportunities), output_path)
    return str(output_path)


# Buckets whose brief lines carry the model summary
SUMMARY_BUCKETS = ("CHASE", "SHAPE")

BRIEF_HEADINGS = {
    "CHASE": "CHASE - Active Pursuit",
    "SHAPE": "SHAPE - Position Early",
    "MONITOR": "MONITOR - Background Awareness",
}


def format_brief_markdown(brief: dict) -> str:
    """
    Render a grouped brief (see group_by_bucket) as markdown.

    Args:
        brief: Dict of Bucket -> {"total": int, "items": list[Opportunity]}

    Returns:
        Markdown text, one section per bucket
    """
    sections = []
    for bucket, group in brief.items():
        label = getattr(bucket, "value", bucket)
        lines = [f"## {BRIEF_HEADINGS.get(label, label)} ({group['total']})", ""]

        for o in group["items"]:
            score = o.adjusted_score if o.adjusted_score is not None else o.ai_score
            line = f"- {o.title}"
            if o.agency:
                line += f" ({o.agency})"
            if score is not None:
                line += f" - Score: {score:g}"
            if o.ai_summary and label in SUMMARY_BUCKETS:
                line += f" - {o.ai_summary}"
            if o.source and "hatch" in o.source.lower():
                line += " [Hatch]"
            lines.append(line)

        if not group["items"]:
            lines.append("- None")
        sections.append("\n".join(lines))

    return "\n\n".join(sections) + "\n"


def export_opportunities(
    opportunities: list[Opportunity],
    output_path: str,
    format: str = "csv",
) -> str:
    """
    Export opportunities to file in specified format.

    Args:
        opportunities: Opportunities to export
        output_path: Path to output file
        format: Output format ("csv" or "json")

    Returns:
        Path to the created file
    """
    if format.lower() == "json":
        return export_to_json(opportunities, output_path)
    else:
        return export_to_csv(opportunities, output_path)
