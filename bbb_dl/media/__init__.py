"""
Media Processing Layer.

This package is responsible for fetching remote recording assets to disk,
including retry handling and resolution of file name conflicts.
"""

from .conflict import resolve_conflict
from .downloader import Downloader, NullProgressReporter, ProgressReporter

__all__ = ["Downloader", "NullProgressReporter", "ProgressReporter", "resolve_conflict"]
