"""
Handles the low-level downloading of files over HTTP with a fixed retry budget
and a configurable policy for files that already exist.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

import aiofiles
import aiohttp

from bbb_dl.exceptions import OutputWriteError, TransportError
from bbb_dl.models.download import ConflictPolicy, FetchOutcome, FetchResult
from bbb_dl.utils.path import filename_from_url

from .conflict import resolve_conflict

log = logging.getLogger(__name__)

ErrorHandler = Callable[[TransportError], None]

# Client errors that are worth retrying; every other 4xx is final.
RETRYABLE_STATUSES = {408, 429}


class ProgressReporter(Protocol):
    """Receives per-file progress. Implemented by the CLI's ProgressManager."""

    def add_task(self, description: str, total_size: int | None) -> Any: ...

    def update_task_total(self, task_id: Any, total: int) -> None: ...

    def update_task_progress(self, task_id: Any, completed: int) -> None: ...

    def remove_task(self, task_id: Any, success: bool = True) -> None: ...


class NullProgressReporter:
    """Discards all progress updates."""

    def add_task(self, description: str, total_size: int | None) -> None:
        return None

    def update_task_total(self, task_id: Any, total: int) -> None:
        pass

    def update_task_progress(self, task_id: Any, completed: int) -> None:
        pass

    def remove_task(self, task_id: Any, success: bool = True) -> None:
        pass


def is_transient(error: BaseException) -> bool:
    """Decides whether a failed attempt should be retried."""
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status >= 500 or error.status in RETRYABLE_STATUSES
    return isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError))


class Downloader:
    """A low-level file downloader with retry logic and conflict resolution."""

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(
        self,
        conflict_policy: ConflictPolicy = ConflictPolicy.MAKE_UNIQUE,
        max_retries: int = 10,
        retry_delay: float = 5.0,
        progress: ProgressReporter | None = None,
        on_error: ErrorHandler | None = None,
        session: aiohttp.ClientSession | None = None,
        connect_timeout: float = 15.0,
        read_timeout: float = 90.0,
    ):
        self.conflict_policy = conflict_policy
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.progress = progress or NullProgressReporter()
        self.on_error = on_error
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Gets or creates the HTTP session used for every fetch of this run."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=4,
                ttl_dns_cache=600,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )
            timeout = aiohttp.ClientTimeout(
                total=None,
                sock_connect=self.connect_timeout,
                sock_read=self.read_timeout,
            )
            # Sizes are compared against files on disk, so ask for raw bodies.
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=timeout,
                headers={"Accept-Encoding": "identity"},
            )
            self._owns_session = True
            log.debug("Created download session.")
        return self._session

    async def close(self) -> None:
        """Closes the HTTP session if this downloader created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            log.debug("Download session closed.")
        self._session = None

    async def __aenter__(self) -> "Downloader":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    async def fetch(
        self,
        url: str,
        destination_dir: Path,
        policy: ConflictPolicy | None = None,
    ) -> FetchResult:
        """
        Downloads a single URL into destination_dir.

        Transport failures are retried with a fixed delay. Once the retry budget
        is exhausted the error handler is called and a FAILED result is returned;
        this method never raises TransportError.

        Raises:
            OutputWriteError: If destination_dir is not an existing directory.
        """
        policy = policy or self.conflict_policy
        if not destination_dir.is_dir():
            raise OutputWriteError(
                f"Download folder '{destination_dir}' does not exist."
            )

        try:
            target = destination_dir / filename_from_url(url)
        except ValueError as e:
            return self._fail(url, e)

        # Decided up front so an existing file costs no request at all.
        if policy is ConflictPolicy.SKIP and target.exists():
            log.debug(f"Skipping '{target.name}': file already exists.")
            return FetchResult(url, FetchOutcome.SKIPPED, path=target)

        last_exception: BaseException | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._download(url, target, policy)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                if not is_transient(e):
                    log.debug(f"Download of '{target.name}' failed permanently: {e}")
                    break
                log.debug(
                    f"Download attempt {attempt}/{self.max_attempts} for "
                    f"'{target.name}' failed: {e}. Retrying..."
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay)

        return self._fail(url, last_exception or "unknown error")

    def _fail(self, url: str, cause: BaseException | str) -> FetchResult:
        error = TransportError(url, cause)
        log.warning(f"[yellow]✗ {error}[/yellow]")
        if self.on_error:
            self.on_error(error)
        return FetchResult(url, FetchOutcome.FAILED, error=error)

    async def _download(
        self, url: str, target: Path, policy: ConflictPolicy
    ) -> FetchResult:
        session = await self._get_session()
        async with session.get(url, allow_redirects=True) as response:
            response.raise_for_status()
            total_size = response.content_length

            destination = resolve_conflict(policy, target, total_size)
            if destination is None:
                return FetchResult(url, FetchOutcome.SKIPPED, path=target)

            partial = destination.with_name(destination.name + ".part")
            task_id = self.progress.add_task(destination.name, total_size)
            completed = False
            try:
                bytes_downloaded = 0
                async with aiofiles.open(partial, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)
                        self.progress.update_task_progress(task_id, bytes_downloaded)
                if total_size is None:
                    self.progress.update_task_total(task_id, bytes_downloaded)
                await asyncio.to_thread(os.replace, partial, destination)
                completed = True
            finally:
                if not completed:
                    partial.unlink(missing_ok=True)
                self.progress.remove_task(task_id, success=completed)

        log.debug(f"Saved '{destination.name}' ({bytes_downloaded} bytes).")
        return FetchResult(
            url,
            FetchOutcome.DOWNLOADED,
            path=destination,
            bytes_written=bytes_downloaded,
        )
