"""
Dataclass for tracking download session statistics.
"""

import time
from dataclasses import dataclass, field

from .download import FetchOutcome, FetchResult


@dataclass
class DownloadStats:
    """Tracks statistics for a download session."""

    files_downloaded: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    total_size_downloaded: int = 0
    failed_urls: list[str] = field(default_factory=list)
    start_time: float = field(default_factory=time.monotonic, repr=False)

    def record(self, result: FetchResult) -> None:
        """Counts a single fetch result."""
        if result.outcome is FetchOutcome.DOWNLOADED:
            self.files_downloaded += 1
            self.total_size_downloaded += result.bytes_written
        elif result.outcome is FetchOutcome.SKIPPED:
            self.files_skipped += 1
        else:
            self.files_failed += 1
            self.failed_urls.append(result.url)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time
