"""
Builds the multi-track project timeline from the recording metadata, the slide
intervals and the streams that were actually downloaded.

Tracks are composed in a fixed order: desk share video (if present), webcam
audio (mandatory), slideshow (if there are slides). Slides are expressed as
clips whose length is the on-screen duration, preceded by blanks for any gap,
so a sequential player reconstructs the absolute timing.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from bbb_dl.exceptions import MissingRequiredAssetError
from bbb_dl.models.recording import RecordingMetadata, SlideRecord
from bbb_dl.models.timeline import (
    AudioTrack,
    Blank,
    Clip,
    DeskShareTrack,
    Producer,
    ProducerKind,
    SlideEntry,
    SlideshowTrack,
    Timeline,
    Track,
)

log = logging.getLogger(__name__)

DESKSHARE_FILE = "deskshare.webm"
WEBCAM_FILES = ("webcams.webm", "webcams.mp4")


@dataclass(frozen=True)
class StreamInventory:
    """Optional streams found on disk, as paths relative to the output root."""

    webcam: str | None = None
    deskshare: str | None = None


def scan_streams(videos_dir: Path, prefix: str = "videos") -> StreamInventory:
    """Checks which video streams were downloaded into videos_dir."""
    webcam = next(
        (name for name in WEBCAM_FILES if (videos_dir / name).is_file()), None
    )
    deskshare = DESKSHARE_FILE if (videos_dir / DESKSHARE_FILE).is_file() else None
    return StreamInventory(
        webcam=f"{prefix}/{webcam}" if webcam else None,
        deskshare=f"{prefix}/{deskshare}" if deskshare else None,
    )


def build_slide_entries(slides: Iterable[SlideRecord]) -> list[SlideEntry]:
    """
    Turns slide intervals into a gap-filled sequence of blanks and clips.

    Slides are sorted by start time (stable, so equal starts keep their input
    order). A slide overlapping its predecessor is cut to start where the
    previous one ended; one that is fully covered is dropped. The total length
    of the returned entries always equals the latest interval end.
    """
    entries: list[SlideEntry] = []
    producers: dict[str, Producer] = {}
    cursor = 0

    for slide in sorted(slides, key=lambda s: s.interval_start_ms):
        producer = producers.setdefault(
            slide.id, Producer(slide.id, slide.image_file, ProducerKind.IMAGE)
        )
        start = slide.interval_start_ms
        if start > cursor:
            entries.append(Blank(start - cursor))
        elif start < cursor:
            log.debug(
                f"Slide '{slide.id}' overlaps the previous slide by "
                f"{cursor - start}ms, trimming."
            )
            start = cursor
        if slide.interval_end_ms <= start:
            continue
        entries.append(Clip(producer, 0, slide.interval_end_ms - start))
        cursor = slide.interval_end_ms

    return entries


def assemble_timeline(
    metadata: RecordingMetadata,
    slides: Iterable[SlideRecord],
    streams: StreamInventory,
) -> Timeline:
    """
    Assembles the project timeline.

    Raises:
        MissingRequiredAssetError: If no webcam stream was downloaded.
    """
    tracks: list[Track] = []
    duration = metadata.duration_ms

    if streams.deskshare:
        deskshare = Producer("deskshare", streams.deskshare, ProducerKind.VIDEO)
        tracks.append(DeskShareTrack(Clip(deskshare, 0, duration)))

    if not streams.webcam:
        raise MissingRequiredAssetError(
            "webcam stream",
            f"neither videos/{WEBCAM_FILES[0]} nor videos/{WEBCAM_FILES[1]} was found",
        )
    webcam = Producer("webcam", streams.webcam, ProducerKind.AUDIO)
    tracks.append(AudioTrack(Clip(webcam, 0, duration)))

    entries = build_slide_entries(slides)
    if entries:
        tracks.append(SlideshowTrack(entries))

    log.debug(f"Assembled timeline with {len(tracks)} tracks ({duration}ms).")
    return Timeline(tracks)
