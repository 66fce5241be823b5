"""
Data structures describing individual fetches and their outcomes.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ConflictPolicy(str, Enum):
    """What to do when the destination file already exists."""

    MAKE_UNIQUE = "make_unique"
    OVERWRITE = "overwrite"
    SKIP = "skip"
    SKIP_UNLESS_SMALLER = "skip_unless_smaller"

    @classmethod
    def parse(cls, value: "str | ConflictPolicy") -> "ConflictPolicy":
        """Accepts an enum member, its value, or its name in any case."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for policy in cls:
            if policy.value == normalized:
                return policy
        choices = ", ".join(p.value for p in cls)
        raise ValueError(f"Unknown conflict policy '{value}'. Choose one of: {choices}.")


class FetchOutcome(str, Enum):
    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DownloadTask:
    """A single URL to fetch into a destination directory."""

    url: str
    destination_dir: Path


@dataclass(frozen=True)
class FetchResult:
    """The outcome of fetching one URL."""

    url: str
    outcome: FetchOutcome
    path: Path | None = None
    bytes_written: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        # Skipped by policy still counts as success
        return self.outcome is not FetchOutcome.FAILED
