"""
Utilities for handling file paths and playback URL parsing.
"""

import posixpath
import re
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from pathvalidate import sanitize_filename

from bbb_dl.exceptions import InvalidPlaybackUrlError

PLAYBACK_URL_PATTERN = re.compile(
    r"^(?P<base_url>https?://.*)/playback/presentation/2\.3/"
    r"(?P<meeting_id>[0-9a-f]{40}-[0-9]{13})",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class PlaybackUrl:
    """The two parts of a playback URL every asset URL is derived from."""

    base_url: str
    meeting_id: str

    @property
    def prefix_url(self) -> str:
        return f"{self.base_url}/presentation/{self.meeting_id}"

    def asset_url(self, path: str) -> str:
        return f"{self.prefix_url}/{path.lstrip('/')}"


def parse_playback_url(url: str) -> PlaybackUrl:
    """
    Parses a BigBlueButton playback URL (presentation format 2.3).

    Raises:
        InvalidPlaybackUrlError: If the URL does not have the expected shape.
    """
    match = PLAYBACK_URL_PATTERN.match(url.strip())
    if not match:
        raise InvalidPlaybackUrlError(
            f"Invalid URL or unsupported version: '{url}'. Expected "
            "https://<website>/playback/presentation/2.3/<meeting-id>"
        )
    return PlaybackUrl(match.group("base_url"), match.group("meeting_id"))


def filename_from_url(url: str) -> str:
    """Returns the percent-decoded basename of the URL's path."""
    name = posixpath.basename(unquote(urlsplit(url).path))
    if not name:
        raise ValueError(f"URL has no file name: '{url}'")
    return name


def safe_filename(name: str, fallback: str) -> str:
    """Sanitizes a meeting name for use as a file or directory name."""
    cleaned = sanitize_filename(name.strip(), platform="universal").strip()
    return cleaned or fallback
