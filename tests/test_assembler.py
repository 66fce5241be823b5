from pathlib import Path

import pytest

from bbb_dl.exceptions import MissingRequiredAssetError
from bbb_dl.models import (
    AudioTrack,
    Blank,
    Clip,
    DeskShareTrack,
    RecordingMetadata,
    SlideRecord,
    SlideshowTrack,
)
from bbb_dl.models.timeline import track_duration
from bbb_dl.timeline import StreamInventory, assemble_timeline, build_slide_entries, scan_streams

METADATA = RecordingMetadata(duration_ms=10_000, meeting_name="Lecture", meeting_id="m-1")
WEBCAM_ONLY = StreamInventory(webcam="videos/webcams.webm")
ALL_STREAMS = StreamInventory(webcam="videos/webcams.webm", deskshare="videos/deskshare.webm")


def slide(slide_id: str, start: int, end: int) -> SlideRecord:
    return SlideRecord(
        id=slide_id,
        image_file=f"slides/{slide_id}.png",
        interval_start_ms=start,
        interval_end_ms=end,
        width=1600,
        height=900,
    )


def describe(entries) -> list[tuple]:
    return [
        ("blank", e.duration_ms) if isinstance(e, Blank) else (e.producer.id, e.in_ms, e.out_ms)
        for e in entries
    ]


def test_adjacent_slides_have_no_blank() -> None:
    entries = build_slide_entries([slide("s1", 0, 1000), slide("s2", 1000, 1001)])

    assert describe(entries) == [("s1", 0, 1000), ("s2", 0, 1)]


def test_gap_between_slides_becomes_blank() -> None:
    entries = build_slide_entries([slide("s1", 0, 1000), slide("s2", 1500, 2500)])

    assert describe(entries) == [("s1", 0, 1000), ("blank", 500), ("s2", 0, 1000)]


def test_leading_gap_becomes_blank() -> None:
    entries = build_slide_entries([slide("s1", 2000, 3000)])

    assert describe(entries) == [("blank", 2000), ("s1", 0, 1000)]


def test_slides_are_sorted_by_start_time() -> None:
    entries = build_slide_entries([slide("s2", 1500, 2500), slide("s1", 0, 1000)])

    assert describe(entries) == [("s1", 0, 1000), ("blank", 500), ("s2", 0, 1000)]


def test_overlapping_slide_is_trimmed() -> None:
    entries = build_slide_entries(
        [slide("s1", 0, 1000), slide("s2", 800, 1500), slide("s3", 900, 1200)]
    )

    assert describe(entries) == [("s1", 0, 1000), ("s2", 0, 500), ("s3", 0, 200)]
    assert sum(e.duration_ms for e in entries) == 1500


def test_fully_covered_slide_is_dropped() -> None:
    entries = build_slide_entries(
        [slide("s1", 0, 1000), slide("s2", 100, 900), slide("s3", 1000, 1100)]
    )

    assert describe(entries) == [("s1", 0, 1000), ("s3", 0, 100)]


def test_repeated_slide_reuses_its_producer() -> None:
    entries = build_slide_entries([slide("s1", 0, 1000), slide("s1", 2000, 3000)])

    clips = [e for e in entries if isinstance(e, Clip)]
    assert clips[0].producer is clips[1].producer


def test_total_length_matches_last_slide_end() -> None:
    slides = [slide("s1", 300, 1000), slide("s2", 1000, 4000), slide("s3", 5200, 9000)]

    timeline = assemble_timeline(METADATA, slides, WEBCAM_ONLY)

    assert track_duration(timeline.tracks[-1]) == 9000


def test_tracks_are_composed_in_fixed_order() -> None:
    timeline = assemble_timeline(METADATA, [slide("s1", 0, 1000)], ALL_STREAMS)

    assert [type(t) for t in timeline.tracks] == [DeskShareTrack, AudioTrack, SlideshowTrack]
    assert [t.id for t in timeline.tracks] == ["deskshare_video", "webcam_audio", "slides"]


def test_no_slides_means_no_slideshow_track() -> None:
    timeline = assemble_timeline(METADATA, [], ALL_STREAMS)

    assert not any(isinstance(t, SlideshowTrack) for t in timeline.tracks)


def test_deskshare_track_spans_whole_recording() -> None:
    without = assemble_timeline(METADATA, [], WEBCAM_ONLY)
    with_deskshare = assemble_timeline(METADATA, [], ALL_STREAMS)

    assert not any(isinstance(t, DeskShareTrack) for t in without.tracks)
    deskshare = [t for t in with_deskshare.tracks if isinstance(t, DeskShareTrack)]
    assert len(deskshare) == 1
    assert (deskshare[0].clip.in_ms, deskshare[0].clip.out_ms) == (0, 10_000)
    assert deskshare[0].clip.producer.resource == "videos/deskshare.webm"


def test_missing_webcam_stream_is_fatal() -> None:
    with pytest.raises(MissingRequiredAssetError, match="webcam stream"):
        assemble_timeline(METADATA, [], StreamInventory(deskshare="videos/deskshare.webm"))


def test_scan_streams_prefers_webm_and_falls_back_to_mp4(tmp_path: Path) -> None:
    assert scan_streams(tmp_path) == StreamInventory()

    (tmp_path / "webcams.mp4").write_bytes(b"mp4")
    assert scan_streams(tmp_path).webcam == "videos/webcams.mp4"

    (tmp_path / "webcams.webm").write_bytes(b"webm")
    (tmp_path / "deskshare.webm").write_bytes(b"webm")
    assert scan_streams(tmp_path) == ALL_STREAMS
