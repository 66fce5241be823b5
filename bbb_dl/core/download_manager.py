"""
Sequences batches of URLs through the Downloader.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from bbb_dl.media import Downloader
from bbb_dl.models.download import ConflictPolicy, DownloadTask, FetchResult
from bbb_dl.models.stats import DownloadStats

log = logging.getLogger(__name__)


class DownloadManager:
    """
    Fetches a list of URLs into one folder, strictly one after another.

    Each fetch completes before the next starts, so the order of file system
    changes is deterministic. A URL that fails after all retries is reported by
    the downloader and recorded in the stats; the rest of the batch continues.
    """

    def __init__(self, downloader: Downloader, stats: DownloadStats | None = None):
        self.downloader = downloader
        self.stats = stats or DownloadStats()

    async def fetch_all(
        self,
        urls: Iterable[str],
        destination_dir: Path,
        policy: ConflictPolicy | None = None,
    ) -> list[FetchResult]:
        """Downloads every URL into destination_dir and returns one result each."""
        if policy is not None:
            self.downloader.conflict_policy = policy

        results: list[FetchResult] = []
        for task in (DownloadTask(url, destination_dir) for url in urls):
            result = await self.downloader.fetch(task.url, task.destination_dir)
            self.stats.record(result)
            results.append(result)

        failed = sum(1 for r in results if not r.ok)
        log.debug(
            f"Batch into '{destination_dir.name}' finished: "
            f"{len(results) - failed}/{len(results)} succeeded."
        )
        return results
