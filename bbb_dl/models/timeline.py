"""
The multi-track timeline handed to the project serializer.
"""

from dataclasses import dataclass, field
from enum import Enum


class ProducerKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"


@dataclass(frozen=True)
class Producer:
    """A named reference to one media or image file inside the project."""

    id: str
    resource: str
    kind: ProducerKind


@dataclass(frozen=True)
class Blank:
    duration_ms: int


@dataclass(frozen=True)
class Clip:
    producer: Producer
    in_ms: int
    out_ms: int

    @property
    def duration_ms(self) -> int:
        return self.out_ms - self.in_ms


SlideEntry = Blank | Clip


@dataclass(frozen=True)
class DeskShareTrack:
    clip: Clip
    id: str = "deskshare_video"
    name: str = "Deskshare"

    @property
    def entries(self) -> list[SlideEntry]:
        return [self.clip]


@dataclass(frozen=True)
class AudioTrack:
    clip: Clip
    id: str = "webcam_audio"
    name: str = "Webcam Audio"

    @property
    def entries(self) -> list[SlideEntry]:
        return [self.clip]


@dataclass(frozen=True)
class SlideshowTrack:
    entries: list[SlideEntry] = field(default_factory=list)
    id: str = "slides"
    name: str = "Slides"


Track = DeskShareTrack | AudioTrack | SlideshowTrack


def track_duration(track: Track) -> int:
    return sum(e.duration_ms for e in track.entries)


def track_producers(track: Track) -> list[Producer]:
    """Distinct producers referenced by a track, in first-use order."""
    seen: dict[str, Producer] = {}
    for entry in track.entries:
        if isinstance(entry, Clip) and entry.producer.id not in seen:
            seen[entry.producer.id] = entry.producer
    return list(seen.values())


@dataclass(frozen=True)
class Timeline:
    tracks: list[Track] = field(default_factory=list)
