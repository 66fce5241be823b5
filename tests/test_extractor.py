import pytest

from bbb_dl.exceptions import MetadataParseError, MissingRequiredAssetError
from bbb_dl.metadata import parse_recording_metadata, parse_slide_overlay, parse_xml
from bbb_dl.utils.path import PlaybackUrl

PLAYBACK = PlaybackUrl("https://bbb.example.org", "meeting-1")
PREFIX = "https://bbb.example.org/presentation/meeting-1"

SHAPES = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
  <image id="image0" class="slide" in="0.0" out="5.0" xlink:href="presentation/deskshare.png"
         width="1280" height="720"/>
  <image id="image1" class="slide" in="5.0" out="12.5" xlink:href="presentation/p1/slide-1.png"
         width="1600" height="900" text="presentation/p1/textfiles/slide-1.txt"/>
  <image id="image2" class="slide" in="14.0" out="20.25" xlink:href="presentation/p1/slide-2.png"
         width="1600" height="900" text="presentation/p1/textfiles/slide-2.txt"/>
  <image id="image3" class="slide" in="20.25" out="30.0" xlink:href="presentation/p1/slide-1.png"
         width="1600" height="900" text="presentation/p1/textfiles/slide-1.txt"/>
</svg>
"""


def test_overlay_builds_slides_in_document_order() -> None:
    overlay = parse_slide_overlay(parse_xml(SHAPES), PLAYBACK)

    assert [(s.id, s.interval_start_ms, s.interval_end_ms) for s in overlay.slides] == [
        ("slide-1", 5000, 12500),
        ("slide-2", 14000, 20250),
        ("slide-1", 20250, 30000),
    ]
    first = overlay.slides[0]
    assert first.image_file == "slides/slide-1.png"
    assert (first.width, first.height) == (1600, 900)


def test_overlay_deduplicates_urls_and_skips_deskshare_placeholder() -> None:
    overlay = parse_slide_overlay(parse_xml(SHAPES), PLAYBACK)

    assert overlay.image_urls == [
        f"{PREFIX}/presentation/p1/slide-1.png",
        f"{PREFIX}/presentation/p1/slide-2.png",
    ]
    assert overlay.text_urls == [
        f"{PREFIX}/presentation/p1/textfiles/slide-1.txt",
        f"{PREFIX}/presentation/p1/textfiles/slide-2.txt",
    ]


def test_overlay_without_images_is_empty() -> None:
    overlay = parse_slide_overlay(parse_xml("<svg/>"), PLAYBACK)

    assert overlay.slides == []
    assert overlay.image_urls == []


def test_overlay_image_without_timing_fails() -> None:
    document = parse_xml('<svg><image href="presentation/p1/slide-1.png" in="1"/></svg>')

    with pytest.raises(MissingRequiredAssetError, match="'out' attribute"):
        parse_slide_overlay(document, PLAYBACK)


@pytest.mark.parametrize("missing", ["width", "height"])
def test_overlay_image_without_dimensions_fails(missing: str) -> None:
    attributes = {"width": "1600", "height": "900"}
    del attributes[missing]
    extra = " ".join(f'{key}="{value}"' for key, value in attributes.items())
    document = parse_xml(
        f'<svg><image href="presentation/p1/slide-1.png" in="0" out="1" {extra}/></svg>'
    )

    with pytest.raises(MissingRequiredAssetError, match=f"'{missing}' attribute"):
        parse_slide_overlay(document, PLAYBACK)


def test_overlay_image_with_zero_width_is_invalid() -> None:
    document = parse_xml(
        '<svg><image href="presentation/p1/slide-1.png" in="0" out="1" width="0" height="900"/></svg>'
    )

    with pytest.raises(MetadataParseError, match="slide-1.png"):
        parse_slide_overlay(document, PLAYBACK)


def _metadata(body: str) -> dict:
    return parse_xml(f"<recording>{body}</recording>")


def test_metadata_uses_meeting_name_first() -> None:
    document = _metadata(
        '<meeting id="m" name="Lecture 1"/>'
        "<meta><meetingName>Other</meetingName></meta>"
        "<playback><duration>10000</duration></playback>"
    )

    metadata = parse_recording_metadata(document, "meeting-1")

    assert metadata.duration_ms == 10000
    assert metadata.meeting_name == "Lecture 1"


def test_metadata_falls_back_to_meta_fields() -> None:
    document = _metadata(
        "<meta><bbb-recording-name>Recorded</bbb-recording-name></meta>"
        "<playback><duration>500</duration></playback>"
    )

    assert parse_recording_metadata(document, "meeting-1").meeting_name == "Recorded"

    document = _metadata(
        "<meta><meetingName>From meta</meetingName>"
        "<bbb-recording-name>Recorded</bbb-recording-name></meta>"
        "<playback><duration>500</duration></playback>"
    )

    assert parse_recording_metadata(document, "meeting-1").meeting_name == "From meta"


def test_metadata_without_names_uses_meeting_id() -> None:
    document = _metadata("<meta/><playback><duration>500</duration></playback>")

    assert parse_recording_metadata(document, "meeting-1").meeting_name == "meeting-1"


def test_numeric_meeting_name_is_kept_as_text() -> None:
    document = _metadata('<meeting name="2024"/><playback><duration>500</duration></playback>')

    assert parse_recording_metadata(document, "meeting-1").meeting_name == "2024"


def test_decimal_meeting_name_keeps_trailing_zero() -> None:
    document = _metadata('<meeting name="3.10"/><playback><duration>500</duration></playback>')

    assert parse_recording_metadata(document, "meeting-1").meeting_name == "3.10"


def test_fractional_duration_is_rounded() -> None:
    document = _metadata("<playback><duration>10000.50</duration></playback>")

    assert parse_recording_metadata(document, "meeting-1").duration_ms == 10000


@pytest.mark.parametrize(
    "body",
    [
        "<playback/>",
        "<playback><duration></duration></playback>",
        "<playback><duration>0</duration></playback>",
        "<playback><duration>0.4</duration></playback>",
        "<playback><duration>-5</duration></playback>",
        "",
    ],
)
def test_missing_duration_is_fatal(body: str) -> None:
    with pytest.raises(MissingRequiredAssetError, match="playback duration"):
        parse_recording_metadata(_metadata(body), "meeting-1")
