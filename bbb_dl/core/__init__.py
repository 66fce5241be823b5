"""
Core application engine for orchestrating the download process.

This package contains the primary logic. The `RecordingSession` runs one
recording from playback URL to project file, delegating the fetching of each
asset group to the `DownloadManager`.
"""

from .download_manager import DownloadManager
from .session import RecordingSession, SessionResult

__all__ = ["DownloadManager", "RecordingSession", "SessionResult"]
