"""
Serializes a Timeline to an MLT project document (as used by Shotcut) and
reads such documents back.

Element and property names must match what the editor expects, so they are
spelled out literally here.
"""

import logging
from pathlib import Path

from lxml import etree

from bbb_dl.exceptions import MetadataParseError, OutputWriteError
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
    track_producers,
)
from bbb_dl.utils.formatting import format_timecode, parse_timecode

log = logging.getLogger(__name__)

TRACTOR_ID = "main_tractor"

PRODUCER_PROPERTIES: dict[ProducerKind, list[tuple[str, str]]] = {
    ProducerKind.VIDEO: [
        ("audio_index", "-1"),
        ("video_index", "0"),
        ("mlt_service", "avformat"),
        ("mute_on_pause", "0"),
        ("seekable", "1"),
    ],
    ProducerKind.AUDIO: [
        ("audio_index", "1"),
        ("video_index", "-1"),
        ("mlt_service", "avformat"),
        ("mute_on_pause", "0"),
        ("seekable", "1"),
    ],
    ProducerKind.IMAGE: [
        ("mlt_service", "qimage"),
        ("ttl", "1"),
    ],
}


def _add_property(parent: etree._Element, name: str, value: str) -> None:
    prop = etree.SubElement(parent, "property", {"name": name})
    prop.text = value


def _add_producer(root: etree._Element, producer: Producer) -> None:
    element = etree.SubElement(root, "producer", {"id": producer.id})
    _add_property(element, "resource", producer.resource)
    for name, value in PRODUCER_PROPERTIES[producer.kind]:
        _add_property(element, name, value)


def _add_playlist(root: etree._Element, track: Track) -> None:
    playlist = etree.SubElement(root, "playlist", {"id": track.id})
    kind = "shotcut:audio" if isinstance(track, AudioTrack) else "shotcut:video"
    _add_property(playlist, kind, "1")
    _add_property(playlist, "shotcut:name", track.name)
    for entry in track.entries:
        if isinstance(entry, Blank):
            etree.SubElement(
                playlist, "blank", {"length": format_timecode(entry.duration_ms)}
            )
        else:
            etree.SubElement(
                playlist,
                "entry",
                {
                    "producer": entry.producer.id,
                    "in": format_timecode(entry.in_ms),
                    "out": format_timecode(entry.out_ms),
                },
            )


def render_mlt(timeline: Timeline) -> bytes:
    """Renders the timeline as a pretty-printed MLT XML document."""
    root = etree.Element("mlt")
    written: set[str] = set()
    for track in timeline.tracks:
        for producer in track_producers(track):
            if producer.id not in written:
                _add_producer(root, producer)
                written.add(producer.id)
        _add_playlist(root, track)

    tractor = etree.SubElement(root, "tractor", {"id": TRACTOR_ID})
    _add_property(tractor, "shotcut", "1")
    for track in timeline.tracks:
        etree.SubElement(tractor, "track", {"producer": track.id})

    return etree.tostring(
        root,
        pretty_print=True,
        xml_declaration=True,
        encoding="UTF-8",
        standalone=False,
    )


def write_mlt(timeline: Timeline, path: Path) -> None:
    """
    Writes the project file.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    try:
        path.write_bytes(render_mlt(timeline))
    except OSError as e:
        raise OutputWriteError(f"Unable to create MLT file '{path}': {e}") from e
    log.debug(f"Wrote project file '{path}'.")


def _properties(element: etree._Element) -> dict[str, str]:
    return {
        prop.get("name"): (prop.text or "").strip()
        for prop in element.findall("property")
    }


def _producer_kind(properties: dict[str, str]) -> ProducerKind:
    if properties.get("mlt_service") == "qimage":
        return ProducerKind.IMAGE
    if properties.get("video_index") == "-1":
        return ProducerKind.AUDIO
    return ProducerKind.VIDEO


def _read_entries(
    playlist: etree._Element, producers: dict[str, Producer]
) -> list[SlideEntry]:
    entries: list[SlideEntry] = []
    for child in playlist:
        if child.tag == "blank":
            entries.append(Blank(parse_timecode(child.get("length", ""))))
        elif child.tag == "entry":
            producer_id = child.get("producer", "")
            if producer_id not in producers:
                raise MetadataParseError(f"Unknown producer '{producer_id}'.")
            entries.append(
                Clip(
                    producers[producer_id],
                    parse_timecode(child.get("in", "")),
                    parse_timecode(child.get("out", "")),
                )
            )
    return entries


def read_mlt(source: bytes) -> Timeline:
    """
    Parses an MLT project document written by render_mlt back into a Timeline.

    Raises:
        MetadataParseError: If the document is malformed or references
        unknown producers or playlists.
    """
    try:
        root = etree.fromstring(source, etree.XMLParser(resolve_entities=False))
    except etree.XMLSyntaxError as e:
        raise MetadataParseError(f"Malformed MLT document: {e}") from e

    producers: dict[str, Producer] = {}
    for element in root.findall("producer"):
        properties = _properties(element)
        producer_id = element.get("id", "")
        producers[producer_id] = Producer(
            producer_id, properties.get("resource", ""), _producer_kind(properties)
        )

    playlists = {element.get("id"): element for element in root.findall("playlist")}
    tractor = root.find("tractor")
    if tractor is None:
        raise MetadataParseError("MLT document has no <tractor>.")

    tracks: list[Track] = []
    for track_element in tractor.findall("track"):
        playlist_id = track_element.get("producer")
        playlist = playlists.get(playlist_id)
        if playlist is None:
            raise MetadataParseError(f"Unknown playlist '{playlist_id}'.")
        properties = _properties(playlist)
        name = properties.get("shotcut:name", "")
        entries = _read_entries(playlist, producers)
        if not entries:
            raise MetadataParseError(f"Playlist '{playlist_id}' is empty.")

        if properties.get("shotcut:audio") == "1":
            tracks.append(AudioTrack(entries[0], id=playlist_id, name=name))
        elif any(
            isinstance(e, Blank) or e.producer.kind is ProducerKind.IMAGE
            for e in entries
        ):
            tracks.append(SlideshowTrack(entries, id=playlist_id, name=name))
        else:
            tracks.append(DeskShareTrack(entries[0], id=playlist_id, name=name))

    return Timeline(tracks)
