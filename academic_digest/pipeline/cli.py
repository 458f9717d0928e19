"""CLI interface for the academic digest pipeline.

Usage:
    academic-digest run --field ai-computing --dry-run
    academic-digest ingest --field life-sciences --limit 10
    academic-digest fields
    academic-digest validate articles.json
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from academic_digest.config import FIELD_PROFILES, Settings, load_settings
from academic_digest.errors import DigestError
from academic_digest.models import Article
from academic_digest.pipeline.job import WeeklyDigestJob
from academic_digest.pipeline.orchestrator import IngestOrchestrator
from academic_digest.validation.engine import ValidationEngine

console = Console()

FIELD_CHOICES = click.Choice([f.value for f in FIELD_PROFILES])


def run_async(coro):
    """Run an async function to completion in a fresh event loop."""
    return asyncio.run(coro)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@click.group()
@click.option("--config", "config_path", default=None, help="Config file path (default: config.yaml)")
@click.option("--log-level", default=None, help="Logging level (overrides the config file)")
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str]):
    """Weekly academic research digest pipeline."""
    ctx.ensure_object(dict)
    try:
        settings = load_settings(config_path)
    except DigestError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)
    setup_logging(log_level or settings.log_level)
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--field", "field_id", type=FIELD_CHOICES, help="Only process this field")
@click.option("--force", is_flag=True, help="Rebuild even if this week's digest exists")
@click.option("--dry-run", is_flag=True, help="Compose and validate without writing artifacts")
@click.pass_context
def run(ctx, field_id: Optional[str], force: bool, dry_run: bool):
    """Run the weekly digest job."""
    settings: Settings = ctx.obj["settings"]

    async def _run():
        job = WeeklyDigestJob(settings)
        with console.status("[bold green]Building digests..."):
            return await job.run(field=field_id, force=force, dry_run=dry_run)

    try:
        result = run_async(_run())
    except DigestError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    table = Table(title="Digest Job")
    table.add_column("Digest", style="cyan")
    table.add_column("Artifact")
    for did in result.digest_ids:
        table.add_row(did, result.artifacts.get(did, "[dim](not saved)"))
    console.print(table)
    console.print(f"Articles featured: {result.articles_count}")

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    for error in result.errors:
        console.print(f"[red]Error:[/red] {error}")

    if not result.success:
        sys.exit(1)
    console.print(f"[green]Job completed in {result.duration_seconds:.1f}s.[/green]")


@cli.command()
@click.option("--field", "field_id", type=FIELD_CHOICES, required=True, help="Field to ingest")
@click.option("--limit", "-n", type=int, default=None, help="Max articles to keep")
@click.pass_context
def ingest(ctx, field_id: str, limit: Optional[int]):
    """Fetch, score and rank candidates for one field."""
    settings: Settings = ctx.obj["settings"]

    async def _run():
        orchestrator = IngestOrchestrator(settings)
        with console.status("[bold green]Ingesting..."):
            return await orchestrator.ingest(field_id, limit=limit)

    try:
        articles, summary = run_async(_run())
    except DigestError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    sources = Table(title="Sources")
    sources.add_column("Source", style="cyan")
    sources.add_column("Fetched", justify="right")
    sources.add_column("Errors", justify="right", style="red")
    sources.add_column("Time", justify="right")
    for r in summary.results:
        sources.add_row(r.source_id, str(r.fetched), str(r.errors), f"{r.duration_seconds:.1f}s")
    sources.add_section()
    sources.add_row(
        "[bold]Total",
        f"[bold]{summary.total_fetched}",
        f"[bold red]{summary.total_errors}",
        f"[bold]{summary.duration_seconds:.1f}s",
    )
    console.print(sources)

    table = Table(title=f"Ranked candidates ({summary.total_unique} unique, {len(articles)} kept)")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Venue", style="cyan")
    table.add_column("Subfield")
    table.add_column("Relevance", justify="right", style="green")
    table.add_column("Quality", justify="right")
    table.add_column("Date", width=12)
    for i, a in enumerate(articles, 1):
        table.add_row(
            str(i),
            a.title[:60],
            a.venue,
            a.subfield,
            f"{a.relevance_score:.0f}",
            f"{a.quality_score:.0f}",
            a.published_at.strftime("%Y-%m-%d"),
        )
    console.print(table)


@cli.command()
def fields():
    """List the supported academic fields."""
    table = Table(title="Academic Fields")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Related")
    for fid, profile in FIELD_PROFILES.items():
        table.add_row(
            fid.value,
            f"{profile.emoji} {profile.name}",
            ", ".join(r.value for r in profile.related),
        )
    console.print(table)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx, path: str):
    """Batch-validate a JSON list of articles."""
    settings: Settings = ctx.obj["settings"]
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            console.print(f"[red]Invalid JSON:[/red] {e}")
            sys.exit(1)
    if not isinstance(raw, list):
        console.print("[red]Error:[/red] expected a JSON list of articles")
        sys.exit(1)

    try:
        articles = [Article.from_dict(item) for item in raw]
    except (KeyError, ValueError, TypeError) as e:
        console.print(f"[red]Malformed article:[/red] {e}")
        sys.exit(1)

    batch = ValidationEngine(settings.content).batch_validate_articles(articles)

    table = Table(title="Article Validation")
    table.add_column("Article", style="cyan")
    table.add_column("Valid")
    table.add_column("Score", justify="right")
    table.add_column("Issues")
    for article_id, result in batch.results.items():
        table.add_row(
            article_id,
            "[green]yes" if result.valid else "[red]no",
            str(result.score),
            ", ".join(result.codes),
        )
    console.print(table)
    s = batch.summary
    console.print(
        f"Total: {s['total']}  Valid: {s['valid']}  Invalid: {s['invalid']}  "
        f"Average score: {s['avg_score']:.1f}"
    )
    if s["invalid"]:
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
