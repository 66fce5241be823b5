"""
Manages a Rich progress display for the files of a recording as they are
downloaded one after another.
"""

import asyncio
import logging

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

log = logging.getLogger("bbb_dl")


class ProgressManager:
    """
    Shows one progress bar per file being downloaded (fraction complete,
    transfer speed, estimated time remaining and file name).
    """

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )
        self._started = False

    def add_task(self, description: str, total_size: int | None) -> TaskID | None:
        if not self.enabled:
            return None
        if len(description) > 50:
            description = description[:47] + "..."
        return self.progress.add_task(description, total=total_size, start=True)

    def update_task_progress(self, task_id: TaskID | None, completed: int) -> None:
        if task_id is not None and self.enabled:
            self.progress.update(task_id, completed=completed)

    def update_task_total(self, task_id: TaskID | None, total: int) -> None:
        if task_id is not None and self.enabled:
            self.progress.update(task_id, total=total)

    def remove_task(self, task_id: TaskID | None, success: bool = True) -> None:
        if task_id is None or not self.enabled:
            return
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            return
        if not success:
            log.debug(f"Progress task {task_id} ended without completing.")

    async def __aenter__(self) -> "ProgressManager":
        if self.enabled:
            self.progress.start()
            self._started = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._started:
            await asyncio.sleep(0.1)
            self.progress.stop()
            self._started = False
