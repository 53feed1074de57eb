# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for ad-hoc imports, curated seed-list imports, and logging status

import json
from datetime import UTC, datetime
from pathlib import Path

import asyncclick as click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from women_galaxy.config import get_config
from women_galaxy.core.models import BatchResult, ImportOutcome, ImportRequest, ImportStatus
from women_galaxy.errors import ConfigurationError
from women_galaxy.utils.logging import (
    LoggingMode,
    configure_logging,
    create_batch_progress,
    get_logging_status,
    with_pipeline_context,
)
from women_galaxy.utils.logging.config import LOG_DIR
from women_galaxy.utils.rich_tables import (
    create_batch_summary_table,
    create_logging_status_table,
    create_outcomes_table,
    create_profile_preview_table,
    print_rich_table,
)

console = Console()


def _build_service(created_by: str):
    """Create the import service, turning missing credentials into a CLI error."""
    from women_galaxy.core.service import ProfileImportService

    try:
        return ProfileImportService(config=get_config(), created_by=created_by)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def _print_outcome_line(outcome: ImportOutcome, dry_run: bool) -> None:
    """Print one line per processed name."""
    if outcome.status == ImportStatus.SUCCESS:
        verb = "Would insert" if dry_run else "Added"
        suffix = "" if dry_run or outcome.image_url else " (no image)"
        console.print(f"✅ {verb} [bold green]{outcome.name}[/bold green]{suffix}")
    elif outcome.status == ImportStatus.SKIPPED:
        console.print(f"⚠️  [yellow]{outcome.reason}[/yellow]")
    else:
        console.print(f"❌ [red]{outcome.name}: {outcome.reason}[/red]")


def _display_batch(result: BatchResult, dry_run: bool, json_output: bool) -> None:
    if json_output:
        click.echo(result.model_dump_json(indent=2))
        return

    if dry_run:
        for outcome in result.outcomes:
            if outcome.extracted:
                print_rich_table(console, create_profile_preview_table(outcome))

    print_rich_table(console, create_outcomes_table(result.outcomes))
    print_rich_table(console, create_batch_summary_table(result, dry_run=dry_run))

    if dry_run:
        console.print("Run without --dry-run to actually insert data.")


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--dry-run", is_flag=True, help="Preview extraction without uploading images or inserting")
@click.pass_context
async def add(ctx, names: tuple[str, ...], dry_run: bool):
    """
    🌟 Add women to the Galaxy by name.

    Use NAME:Exact_Wikipedia_Title when the name does not match the page title,
    e.g. "Ada Lovelace:Ada_Lovelace".
    """
    try:
        requests = [ImportRequest.parse(entry) for entry in names if entry.strip()]
    except ValidationError as e:
        raise click.BadParameter("each entry needs a name before the ':'", param_hint="NAMES") from e
    await _add_async(requests, dry_run, ctx.obj["json_output"])


async def _add_async(requests: list[ImportRequest], dry_run: bool, json_output: bool) -> BatchResult:
    with with_pipeline_context("add_women", count=len(requests), dry_run=dry_run) as logger:
        service = _build_service(created_by="manual-import")

        if not json_output:
            console.print(
                Panel.fit(
                    f"🌟 [bold cyan]Adding {len(requests)} women to the Galaxy[/bold cyan]"
                    + ("\n(Dry run - no data will be inserted)" if dry_run else ""),
                    border_style="magenta",
                )
            )

        try:
            await service.prepare()
            result = await service.import_many(
                requests,
                dry_run=dry_run,
                on_outcome=None if json_output else lambda outcome: _print_outcome_line(outcome, dry_run),
            )
        finally:
            await service.close()

        logger.info("Add command finished", succeeded=result.succeeded, skipped=result.skipped, failed=result.failed)
        _display_batch(result, dry_run, json_output)
        return result


def _load_seed_list(path: Path) -> list[ImportRequest]:
    """Read a curated list of ``{name, category, tags, wiki}`` entries."""
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}") from e
    if not isinstance(entries, list):
        raise click.ClickException(f"{path} must contain a JSON list")

    try:
        return [
            ImportRequest(
                name=entry["name"],
                wiki_title=entry.get("wiki"),
                category=entry.get("category"),
                base_tags=entry.get("tags") or [],
            )
            for entry in entries
        ]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise click.ClickException(f"{path} has an invalid entry: {e}") from e


def _write_seed_logs(result: BatchResult, start: int, processed: int, log_dir: Path = LOG_DIR) -> tuple[Path | None, Path]:
    """Write the failed-imports log (if any) and a resume checkpoint."""
    log_dir.mkdir(parents=True, exist_ok=True)
    now = datetime.now(UTC)

    failed_path = None
    failures = [
        {"name": outcome.name, "error": outcome.reason}
        for outcome in result.outcomes
        if outcome.status == ImportStatus.FAILED
    ]
    if failures:
        failed_path = log_dir / f"failed-imports-{int(now.timestamp() * 1000)}.json"
        failed_path.write_text(json.dumps(failures, indent=2), encoding="utf-8")

    checkpoint_path = log_dir / "last-checkpoint.json"
    checkpoint_path.write_text(
        json.dumps(
            {
                "timestamp": now.isoformat(),
                "lastIndex": start + processed,
                "inserted": result.succeeded,
                "skipped": result.skipped,
                "failed": result.failed,
            },
            indent=2,
        ),
        encoding="utf-8",
    )
    return failed_path, checkpoint_path


@click.command()
@click.argument("list_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Preview extraction without uploading images or inserting")
@click.option("--limit", type=int, default=None, help="Import at most this many entries")
@click.option("--start", type=int, default=0, show_default=True, help="Index of the first entry (resume)")
@click.option("--skip-images", is_flag=True, help="Keep Wikipedia thumbnail URLs instead of re-hosting photos")
@click.pass_context
async def seed(ctx, list_file: Path, dry_run: bool, limit: int | None, start: int, skip_images: bool):
    """
    🌱 Seed the Galaxy from a curated JSON list.

    Entries look like {"name": ..., "category": ..., "tags": [...], "wiki": "Optional_Title"}.
    """
    await _seed_async(list_file, dry_run, limit, start, skip_images, ctx.obj["json_output"])


async def _seed_async(
    list_file: Path, dry_run: bool, limit: int | None, start: int, skip_images: bool, json_output: bool
) -> BatchResult:
    all_requests = _load_seed_list(list_file)
    end = None if limit is None else start + limit
    requests = all_requests[start:end]

    with with_pipeline_context("seed_women", total=len(requests), start=start, dry_run=dry_run) as logger:
        logger.info("Loaded curated list", entries=len(all_requests), selected=len(requests))
        service = _build_service(created_by="wikipedia-import")

        try:
            await service.prepare()
            if json_output:
                result = await service.import_many(requests, dry_run=dry_run, skip_images=skip_images)
            else:
                console.print(f"📋 Loaded {len(all_requests)} women, processing {len(requests)} from index {start}")
                progress, tracker = create_batch_progress(console, total=len(requests))
                with progress:
                    result = await service.import_many(
                        requests, dry_run=dry_run, skip_images=skip_images, progress_callback=tracker
                    )
                    tracker.finish()
        finally:
            await service.close()

        _display_batch(result, dry_run, json_output)

        if not dry_run:
            failed_path, checkpoint_path = _write_seed_logs(result, start, len(requests), LOG_DIR)
            logger.info("Seed finished", checkpoint=str(checkpoint_path), failed_log=str(failed_path))
            if not json_output:
                if failed_path:
                    console.print(f"📝 Failed imports logged to: {failed_path}")
                console.print(f"📍 Checkpoint saved to: {checkpoint_path}")

        return result


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output structured JSON logs and results instead of rich tables")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    🌌 Women Galaxy - Wikipedia profile importer

    Import biographies of notable women from Wikipedia: intro, accomplishments,
    birth year, tags and a re-hosted profile photo.
    """
    # Store global options in context for commands to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(add)
app.add_command(seed)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
