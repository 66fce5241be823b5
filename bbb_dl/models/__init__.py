"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application: configuration, fetch results,
recording metadata, and the assembled timeline.
"""

from .config import DownloadConfig
from .download import ConflictPolicy, DownloadTask, FetchOutcome, FetchResult
from .recording import RecordingMetadata, SlideOverlay, SlideRecord
from .stats import DownloadStats
from .timeline import (
    AudioTrack,
    Blank,
    Clip,
    DeskShareTrack,
    Producer,
    ProducerKind,
    SlideshowTrack,
    Timeline,
)

__all__ = [
    "AudioTrack",
    "Blank",
    "Clip",
    "ConflictPolicy",
    "DeskShareTrack",
    "DownloadConfig",
    "DownloadStats",
    "DownloadTask",
    "FetchOutcome",
    "FetchResult",
    "Producer",
    "ProducerKind",
    "RecordingMetadata",
    "SlideOverlay",
    "SlideRecord",
    "SlideshowTrack",
    "Timeline",
]
