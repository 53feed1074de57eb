# ABOUTME: Batch progress display using Rich's built-in progress bar
# ABOUTME: Drives a determinate bar while the importer walks a list of names

from typing import Any

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn


class BatchProgressTracker:
    """Advance a Rich progress bar from the importer's progress callback."""

    def __init__(self, progress: Progress, task_id: Any):
        self.progress = progress
        self.task_id = task_id

    def __call__(self, name: str, index: int, total: int) -> None:
        self.progress.update(self.task_id, completed=index - 1, total=total, description=f"📍 {name}")

    def finish(self) -> None:
        task = self.progress.tasks[self.task_id]
        self.progress.update(self.task_id, completed=task.total or 0, description="✨ Done")


def create_batch_progress(
    console: Console, total: int, initial_description: str = "🌟 Importing profiles..."
) -> tuple[Progress, BatchProgressTracker]:
    """Create a determinate progress display for a batch import.

    Args:
        console: Rich console instance
        total: Number of items in the batch
        initial_description: Initial progress description

    Returns:
        Tuple of (progress, tracker)
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )

    task_id = progress.add_task(initial_description, total=total)
    return progress, BatchProgressTracker(progress, task_id)
