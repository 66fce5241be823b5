import pytest

from bbb_dl.exceptions import InvalidPlaybackUrlError
from bbb_dl.utils.formatting import format_timecode, parse_timecode
from bbb_dl.utils.path import filename_from_url, parse_playback_url, safe_filename

MEETING_ID = "0123456789ABCDEF0123456789abcdef01234567-1600000000000"


def test_parse_playback_url() -> None:
    playback = parse_playback_url(
        f"https://bbb.example.org/bbb/playback/presentation/2.3/{MEETING_ID}?t=10"
    )

    assert playback.base_url == "https://bbb.example.org/bbb"
    assert playback.meeting_id == MEETING_ID
    assert playback.asset_url("video/webcams.webm") == (
        f"https://bbb.example.org/bbb/presentation/{MEETING_ID}/video/webcams.webm"
    )


@pytest.mark.parametrize(
    "url",
    [
        f"https://bbb.example.org/playback/presentation/2.0/{MEETING_ID}",
        "https://bbb.example.org/playback/presentation/2.3/abc-123",
        "https://bbb.example.org/playback/presentation/2.3/"
        "0123456789ghijkl0123456789abcdef01234567-1600000000000",
        f"ftp://bbb.example.org/playback/presentation/2.3/{MEETING_ID}",
        "not a url",
    ],
)
def test_invalid_playback_urls(url: str) -> None:
    with pytest.raises(InvalidPlaybackUrlError):
        parse_playback_url(url)


def test_filename_from_url_decodes_path() -> None:
    assert filename_from_url("https://x.org/a/b/slide%201.png?x=1") == "slide 1.png"
    with pytest.raises(ValueError):
        filename_from_url("https://x.org/")


def test_safe_filename() -> None:
    assert safe_filename("Lecture 1/2: Intro?", "fallback") == "Lecture 12 Intro"
    assert safe_filename("  ", "fallback") == "fallback"


@pytest.mark.parametrize(
    ("milliseconds", "timecode"),
    [(0, "00:00:00.000"), (1125, "00:00:01.125"), (3_725_042, "01:02:05.042"), (90_000_000, "25:00:00.000")],
)
def test_timecodes(milliseconds: int, timecode: str) -> None:
    assert format_timecode(milliseconds) == timecode
    assert parse_timecode(timecode) == milliseconds


def test_negative_timecode_is_rejected() -> None:
    with pytest.raises(ValueError):
        format_timecode(-1)
