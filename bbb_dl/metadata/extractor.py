"""
Maps parsed recording documents onto the normalized metadata models.

Required fields are checked here, immediately after parsing, so that missing
values surface as a named MissingRequiredAssetError instead of travelling
further down the pipeline.
"""

import logging
import math
import posixpath
from typing import Any

from pydantic import ValidationError

from bbb_dl.exceptions import MetadataParseError, MissingRequiredAssetError
from bbb_dl.models.recording import RecordingMetadata, SlideOverlay, SlideRecord
from bbb_dl.utils.path import PlaybackUrl

log = logging.getLogger(__name__)

DESKSHARE_PLACEHOLDER = "deskshare.png"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _seconds_to_ms(value: Any, attribute: str, filename: str) -> int:
    try:
        return round(float(value) * 1000)
    except (TypeError, ValueError) as e:
        raise MetadataParseError(
            f"Slide image '{filename}' has a non-numeric '{attribute}' value: {value!r}"
        ) from e


def _append_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


def parse_slide_overlay(
    document: dict[str, Any], playback_url: PlaybackUrl
) -> SlideOverlay:
    """
    Builds the slide records and the slide/text URLs to fetch from a parsed
    shapes.svg document.

    Slides keep the order in which the document lists them. Image and text
    URLs are de-duplicated, keeping first occurrences.
    """
    svg = _as_dict(document.get("svg"))
    images = svg.get("image") or []

    slides: list[SlideRecord] = []
    image_urls: list[str] = []
    text_urls: list[str] = []

    for image in images:
        if not isinstance(image, dict):
            continue
        href = image.get("href")
        if not href:
            raise MissingRequiredAssetError("slide image 'href' attribute")
        href = str(href)
        filename = posixpath.basename(href)
        if filename == DESKSHARE_PLACEHOLDER:
            continue

        _append_unique(image_urls, playback_url.asset_url(href))
        if text := image.get("text"):
            _append_unique(text_urls, playback_url.asset_url(str(text)))

        for attribute in ("in", "out", "width", "height"):
            if image.get(attribute) in (None, ""):
                raise MissingRequiredAssetError(
                    f"slide image '{attribute}' attribute", filename
                )
        start_ms = _seconds_to_ms(image["in"], "in", filename)
        end_ms = _seconds_to_ms(image["out"], "out", filename)
        if end_ms <= start_ms:
            log.debug(f"Ignoring slide '{filename}' with an empty interval.")
            continue

        slide_id = posixpath.splitext(filename)[0] or filename
        try:
            slides.append(
                SlideRecord(
                    id=slide_id,
                    image_file=f"slides/{filename}",
                    interval_start_ms=start_ms,
                    interval_end_ms=end_ms,
                    width=image["width"],
                    height=image["height"],
                )
            )
        except ValidationError as e:
            raise MetadataParseError(f"Invalid slide image '{filename}':\n{e}") from e

    log.debug(
        f"Found {len(slides)} slide intervals, {len(image_urls)} images and "
        f"{len(text_urls)} text files."
    )
    return SlideOverlay(slides=slides, image_urls=image_urls, text_urls=text_urls)


def _first_present(*candidates: Any) -> str | None:
    for candidate in candidates:
        if candidate is None:
            continue
        text = str(candidate).strip()
        if text:
            return text
    return None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _optional_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_recording_metadata(
    document: dict[str, Any], meeting_id: str
) -> RecordingMetadata:
    """
    Extracts duration and meeting name from a parsed metadata.xml document.

    The meeting name falls back through <meeting name>, <meta><meetingName>,
    <meta><bbb-recording-name> and finally the meeting id.

    Raises:
        MissingRequiredAssetError: If the playback duration is absent.
    """
    recording = _as_dict(document.get("recording"))
    playback = _as_dict(recording.get("playback"))
    meeting = _as_dict(recording.get("meeting"))
    meta = _as_dict(recording.get("meta"))

    duration = _as_number(playback.get("duration"))
    if duration is None:
        raise MissingRequiredAssetError(
            "playback duration", "metadata.xml has no usable <playback><duration>"
        )
    duration_ms = round(duration)
    if duration_ms <= 0:
        raise MissingRequiredAssetError(
            "playback duration", f"duration must be at least 1ms, got {duration}"
        )

    meeting_name = _first_present(
        meeting.get("name"),
        meta.get("meetingName"),
        meta.get("bbb-recording-name"),
        meeting_id,
    )

    return RecordingMetadata(
        duration_ms=duration_ms,
        meeting_name=meeting_name or meeting_id,
        meeting_id=meeting_id,
        start_time_ms=_optional_int(recording.get("start_time")),
        end_time_ms=_optional_int(recording.get("end_time")),
    )
