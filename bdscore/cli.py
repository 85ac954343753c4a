"""
BD Opportunity Scorer CLI

Examples:
    # Score one opportunity from the classifier's score and tags
    bdscore score 70 -t "training modernization" -t commodity

    # JSON output, piped to jq
    bdscore score 50 -t uniforms -t janitorial -f json -q | jq '.bucket'

    # Score a classifier response saved to disk (or "-" for stdin)
    bdscore score-response response.json --text "JADC2 mission planning"

    # Batch scoring of an export
    bdscore batch opportunities.jsonl -o scored.csv

    # Daily brief grouped by bucket
    bdscore brief scored.json

    # Show the active weighting table
    bdscore weightings --config bdscore.yaml
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .api import (
    ScoringResponseError,
    bucket_counts,
    parse_scoring_response,
    score_input,
    score_opportunities,
    score_opportunity,
)
from .config import ConfigError, Settings, load_config
from .export import export_csv_string, export_json_string, export_opportunities, format_brief_markdown
from .loader import LoadError, load_opportunities
from .models import Assessment, Bucket, Opportunity
from .scoring import (
    InvalidScoreError,
    find_commodity_keywords,
    find_primary_domain_keywords,
    get_weighting_breakdown,
    group_by_bucket,
    score_to_bucket,
)
from .scoring.weighting import check_score

# Progress to stderr, data to stdout
console = Console(stderr=True)
logger = logging.getLogger(__name__)

BUCKET_COLOURS = {
    Bucket.CHASE: "green",
    Bucket.SHAPE: "cyan",
    Bucket.MONITOR: "yellow",
    Bucket.AVOID: "red",
}


def setup_logging(verbose: bool, quiet: bool, debug: bool) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def get_settings(config: Optional[str]) -> Settings:
    """Load settings or exit with a readable error."""
    try:
        return load_config(config)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)


def display_breakdown(assessment: Assessment, settings: Settings) -> None:
    """Show how each tag moved the score."""
    breakdown = get_weighting_breakdown(
        assessment.raw_score, assessment.tags, settings.get_weighting()
    )

    table = Table(title="Tag Weighting", show_header=True, header_style="bold magenta")
    table.add_column("Tag", style="cyan")
    table.add_column("Multiplier", justify="right")
    table.add_column("Effect")

    effect_colours = {"boost": "green", "suppress": "red", "ignored": "dim", "neutral": "white"}
    for component in breakdown["components"]:
        colour = effect_colours[component["effect"]]
        table.add_row(
            component["tag"],
            f"{component['multiplier']:g}",
            f"[{colour}]{component['effect']}[/{colour}]",
        )

    if breakdown["components"]:
        console.print(table)

    colour = BUCKET_COLOURS[assessment.bucket]
    console.print(
        Panel.fit(
            f"Raw score: {assessment.raw_score:g}\n"
            f"Adjusted:  [bold]{assessment.adjusted_score}[/bold]\n"
            f"Bucket:    [bold {colour}]{assessment.bucket.value}[/bold {colour}]",
            border_style=colour,
        )
    )
    if assessment.notes:
        console.print(f"[dim]{assessment.notes}[/dim]")


def emit_assessment(assessment: Assessment, output_format: str, quiet: bool, settings: Settings) -> None:
    """Write an assessment to stdout (and the breakdown to stderr)."""
    if output_format == "json":
        click.echo(json.dumps(assessment.to_dict(), indent=2))
    else:
        click.echo(f"{assessment.adjusted_score} {assessment.bucket.value}")

    if not quiet and output_format != "json":
        display_breakdown(assessment, settings)


def display_bucket_summary(opportunities: list[Opportunity]) -> None:
    """Display counts per bucket."""
    table = Table(title="Buckets", show_header=True, header_style="bold magenta")
    table.add_column("Bucket")
    table.add_column("Count", justify="right")

    for bucket, count in bucket_counts(opportunities).items():
        colour = BUCKET_COLOURS[bucket]
        table.add_row(f"[{colour}]{bucket.value}[/{colour}]", str(count))

    console.print(table)


# ============================================================================
# CLI Group
# ============================================================================

@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """Score and classify contracting opportunities (CHASE/SHAPE/MONITOR/AVOID)."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============================================================================
# Score Commands
# ============================================================================

@cli.command()
@click.argument("raw_score", type=float)
@click.option("-t", "--tag", "tags", multiple=True, help="Classification tag (repeatable)")
@click.option("--text", help="Opportunity text for commodity / domain-fit signals")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Suppress breakdown, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def score(
    raw_score: float,
    tags: tuple,
    text: Optional[str],
    output_format: str,
    config: Optional[str],
    quiet: bool,
    verbose: bool,
    debug: bool,
):
    """
    Score one opportunity from its raw score and tags.

    Examples:

        bdscore score 70 -t "training modernization" -t commodity

        bdscore score 85 -t JADC2 --text "C2 modernization for air defense" -f json
    """
    setup_logging(verbose, quiet, debug)
    settings = get_settings(config)

    try:
        assessment = score_opportunity(raw_score, list(tags), text=text, settings=settings)
    except InvalidScoreError as e:
        console.print(f"[red]Invalid score:[/red] {e}")
        sys.exit(1)

    emit_assessment(assessment, output_format, quiet, settings)


@cli.command("score-response")
@click.argument("response_file", type=click.File("r"))
@click.option("--text", help="Opportunity text for commodity / domain-fit signals")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Suppress breakdown, only emit data")
def score_response(response_file, text: Optional[str], output_format: str, config: Optional[str], quiet: bool):
    """
    Score a saved classifier response ({"score": .., "tags": [..]}).

    Use "-" to read the response from stdin.
    """
    setup_logging(False, quiet, False)
    settings = get_settings(config)

    try:
        scoring_input = parse_scoring_response(response_file.read())
        scoring_input.text = text
        assessment = score_input(scoring_input, settings=settings)
    except (ScoringResponseError, InvalidScoreError) as e:
        console.print(f"[red]Invalid response:[/red] {e}")
        sys.exit(1)

    suggested = scoring_input.suggested_bucket
    if suggested and suggested != assessment.bucket and not quiet:
        console.print(
            f"[yellow]Classifier suggested {suggested.value}, "
            f"weighted bucket is {assessment.bucket.value}[/yellow]"
        )

    emit_assessment(assessment, output_format, quiet, settings)


@cli.command()
@click.argument("score_value", metavar="SCORE", type=float)
def bucket(score_value: float):
    """Show the bucket for a score."""
    try:
        check_score(score_value)
    except InvalidScoreError as e:
        console.print(f"[red]Invalid score:[/red] {e}")
        sys.exit(1)

    click.echo(score_to_bucket(score_value).value)


@cli.command("check-text")
@click.argument("text")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["text", "json"]), default="text", help="Output format")
def check_text(text: str, config: Optional[str], output_format: str):
    """
    Check free text for commodity and primary-domain signals.

    Exit code is 1 when commodity language is found.
    """
    settings = get_settings(config)
    commodity = find_commodity_keywords(text, settings.commodity_keywords, settings.technical_phrases)
    domain = find_primary_domain_keywords(text, settings.primary_domain_keywords)

    if output_format == "json":
        click.echo(json.dumps({
            "commodity": bool(commodity),
            "commodity_keywords": commodity,
            "primary_domain_fit": bool(domain),
            "primary_domain_keywords": domain,
        }, indent=2))
    else:
        click.echo(f"commodity: {'yes' if commodity else 'no'}"
                   + (f" ({', '.join(commodity)})" if commodity else ""))
        click.echo(f"primary domain fit: {'yes' if domain else 'no'}"
                   + (f" ({', '.join(domain)})" if domain else ""))

    sys.exit(1 if commodity else 0)


# ============================================================================
# Batch Commands
# ============================================================================

def _load_and_score(input_file: str, settings: Settings) -> list[Opportunity]:
    try:
        opportunities = load_opportunities(input_file)
    except LoadError as e:
        console.print(f"[red]Load error:[/red] {e}")
        sys.exit(1)

    try:
        return score_opportunities(opportunities, settings=settings)
    except InvalidScoreError as e:
        console.print(f"[red]Invalid score:[/red] {e}")
        sys.exit(1)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option("-o", "--output", type=click.Path(), help="Output file (default: stdout)")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["csv", "json"]), default="csv", help="Output format")
@click.option("--bucket", "only_buckets", multiple=True,
              type=click.Choice([b.value for b in Bucket], case_sensitive=False),
              help="Only emit these buckets (repeatable)")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def batch(
    input_file: str,
    output: Optional[str],
    output_format: str,
    only_buckets: tuple,
    config: Optional[str],
    quiet: bool,
    verbose: bool,
):
    """
    Score every opportunity in a JSON, JSONL or CSV file.

    Each record needs a title and a classifier score (score / ai_score);
    tags come from a "tags" list or a ";"-separated column.
    """
    setup_logging(verbose, quiet, False)
    settings = get_settings(config)
    opportunities = _load_and_score(input_file, settings)

    if only_buckets:
        wanted = {b.upper() for b in only_buckets}
        opportunities = [o for o in opportunities if o.bucket and o.bucket.value in wanted]

    if output:
        output_path = export_opportunities(opportunities, output, output_format)
        if not quiet:
            console.print(f"[green]Saved:[/green] {output_path}")
    elif output_format == "json":
        click.echo(export_json_string(opportunities))
    else:
        click.echo(export_csv_string(opportunities), nl=False)

    if not quiet:
        display_bucket_summary(opportunities)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def brief(input_file: str, config: Optional[str]):
    """
    Print a daily brief (markdown) grouped by bucket.

    Unscored records keep any bucket already stored on them.
    """
    setup_logging(False, False, False)
    settings = get_settings(config)
    opportunities = _load_and_score(input_file, settings)

    grouped = group_by_bucket(opportunities, settings.brief_limits)
    click.echo(format_brief_markdown(grouped), nl=False)


# ============================================================================
# Configuration Commands
# ============================================================================

@cli.command()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-f", "--format", "output_format",
              type=click.Choice(["table", "json"]), default="table", help="Output format")
def weightings(config: Optional[str], output_format: str):
    """Show the active tag weighting table."""
    settings = get_settings(config)
    table_data = settings.tag_weightings

    if output_format == "json":
        click.echo(json.dumps(table_data, indent=2))
        return

    table = Table(title="Tag Weightings", show_header=True, header_style="bold magenta")
    table.add_column("Tag", style="cyan")
    table.add_column("Multiplier", justify="right")

    for tag, multiplier in sorted(table_data.items(), key=lambda item: (-item[1], item[0].lower())):
        colour = "green" if multiplier > 1 else "red" if multiplier < 1 else "white"
        table.add_row(tag, f"[{colour}]{multiplier:g}[/{colour}]")

    Console().print(table)


@cli.command()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def check(config: Optional[str]):
    """Check configuration."""
    settings = get_settings(config)

    if settings.weightings_file:
        click.echo(f"✓ Weightings file: {settings.weightings_file}")
    else:
        click.echo("- Weightings file: not set (using defaults)")

    click.echo(f"✓ Tag weightings: {len(settings.tag_weightings)} tags")
    click.echo(f"✓ Commodity keywords: {len(settings.commodity_keywords)}")
    click.echo(f"✓ Primary domain keywords: {len(settings.primary_domain_keywords)}")

    non_positive = [tag for tag, m in settings.tag_weightings.items() if m <= 0]
    if non_positive:
        click.echo(f"! Ignored (multiplier <= 0): {', '.join(non_positive)}")


@cli.command()
def version():
    """Show version info."""
    from bdscore import __version__
    click.echo(f"bdscore {__version__}")


# ============================================================================
# Web Command
# ============================================================================

@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option("--port", default=8000, help="Port to bind to.")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
def web(host: str, port: int, reload: bool) -> None:
    """Start the HTTP scoring API."""
    import uvicorn

    console.print(
        Panel.fit(
            f"[bold]BD Opportunity Scorer API[/bold]\n"
            f"Running at: [cyan]http://{host}:{port}/docs[/cyan]",
            border_style="blue",
        )
    )
    console.print("Press Ctrl+C to stop\n")

    uvicorn.run(
        "bdscore.web.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


def main():
    """Entry point for the console script."""
    cli()


if __name__ == "__main__":
    cli()
