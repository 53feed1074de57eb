# ABOUTME: Rich table utilities for import previews, outcomes and logging status
# ABOUTME: Provides pre-configured table generators for the CLI

from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.table import Table

STATUS_STYLES = {
    "success": "✅ [green]success[/green]",
    "skipped": "⚠️  [yellow]skipped[/yellow]",
    "failed": "❌ [red]failed[/red]",
}


def create_key_value_table(
    title: str,
    data: dict[str, str],
    title_style: str = "bold cyan",
    key_style: str = "bold blue",
    value_style: str = "green",
    box_style=ROUNDED,
) -> Table:
    """Create a two-column key/value table.

    Args:
        title: Table title with emoji/styling
        data: Dictionary of key-value pairs to display
        title_style: Style for the table title
        key_style: Style for the key column
        value_style: Style for the value column
        box_style: Border style for the table

    Returns:
        Formatted Rich table ready for printing
    """
    table = Table(
        title=f"[{title_style}]{title}[/{title_style}]",
        box=box_style,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        expand=False,
    )

    table.add_column("Field", style=key_style, width=None, no_wrap=False)
    table.add_column("Value", style=value_style, width=None, no_wrap=False)

    for key, value in data.items():
        table.add_row(key, str(value))

    return table


def _truncate(text: str | None, length: int) -> str:
    if not text:
        return "—"
    return text[:length] + "..." if len(text) > length else text


def create_profile_preview_table(outcome: Any) -> Table:
    """Show the fields extracted for one name (used by dry runs).

    Args:
        outcome: ImportOutcome with extracted fields

    Returns:
        Key/value table of the derived profile
    """
    extracted = outcome.extracted
    data = {
        "📛 Name": outcome.name,
        "📝 Intro": _truncate(extracted.intro, 120),
        "🏆 Accomplishments": _truncate(extracted.accomplishments, 120),
        "🎂 Born": str(extracted.birth_year) if extracted.birth_year else "unknown",
        "🔎 Birth Year Source": extracted.birth_year_source or "—",
        "🌍 Nationality": extracted.nationality or "—",
        "🏷️ Tags": ", ".join(extracted.tags) or "—",
    }
    return create_key_value_table(
        title="🔍 Extraction Preview",
        data=data,
        title_style="bold magenta",
        key_style="cyan",
        value_style="white",
    )


def create_outcomes_table(outcomes: list[Any]) -> Table:
    """Create a per-name outcome table for a batch.

    Args:
        outcomes: ImportOutcome objects in processing order

    Returns:
        Multi-column outcome table
    """
    table = Table(
        title="[bold cyan]🌟 Import Results[/bold cyan]",
        box=ROUNDED,
        show_header=True,
        header_style="bold magenta",
        border_style="cyan",
        title_justify="left",
        row_styles=["", "dim"],
        expand=True,
    )
    table.add_column("Name", style="bold white")
    table.add_column("Status")
    table.add_column("Born", justify="right")
    table.add_column("Tags", style="blue")
    table.add_column("Details", style="white")

    for outcome in outcomes:
        extracted = outcome.extracted
        table.add_row(
            outcome.name,
            STATUS_STYLES.get(str(outcome.status), str(outcome.status)),
            str(extracted.birth_year) if extracted and extracted.birth_year else "",
            ", ".join(extracted.tags) if extracted else "",
            outcome.reason or ("🖼️ image uploaded" if outcome.image_url else ""),
        )

    return table


def create_batch_summary_table(result: Any, dry_run: bool = False) -> Table:
    """Create the final tally table for a batch import.

    Args:
        result: BatchResult with outcome counts
        dry_run: Whether the batch was a preview

    Returns:
        Summary table
    """
    added_label = "✅ Would insert" if dry_run else "✅ Added"
    data = {
        "📋 Processed": str(result.total),
        added_label: str(result.succeeded),
        "⚠️ Already existed": str(result.skipped),
        "❌ Failed": str(result.failed),
    }
    return create_key_value_table(
        title="🔍 Dry Run Summary" if dry_run else "✨ Import Summary",
        data=data,
        title_style="bold green",
        key_style="cyan",
        value_style="white",
        box_style=SIMPLE,
    )


def create_logging_status_table(status: dict[str, Any]) -> Table:
    """Create a logging configuration status table.

    Args:
        status: Logging status dictionary

    Returns:
        Styled logging configuration table
    """
    logging_data = {
        "🔧 Mode": status["mode"].title(),
        "📁 Log Directory": status["log_directory"] or "N/A (production mode)",
        "🔇 Suppressed Libraries": ", ".join(status["third_party_suppressed"]),
    }

    # Add log files if they exist
    if status["log_files"]["main"]:
        logging_data["📝 Main Log"] = status["log_files"]["main"]
    if status["log_files"]["json"]:
        logging_data["📊 JSON Log"] = status["log_files"]["json"]
    if status["log_files"]["errors"]:
        logging_data["🚨 Error Log"] = status["log_files"]["errors"]

    return create_key_value_table(
        title="🔍 Logging Configuration",
        data=logging_data,
        title_style="bold green",
        key_style="blue",
        value_style="white",
    )


def print_rich_table(console: Console, table: Table) -> None:
    """Print a rich table with consistent spacing and style.

    Args:
        console: Rich console instance
        table: Configured table to print
    """
    console.print()  # Add spacing before
    console.print(table)
    console.print()  # Add spacing after
