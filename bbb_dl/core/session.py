"""
Runs the complete download of one recording: fetch every asset group, parse
the metadata, assemble the timeline, and write the project file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import aiofiles

from bbb_dl.exceptions import MissingRequiredAssetError, OutputWriteError
from bbb_dl.metadata import (
    extract_notes_text,
    parse_recording_metadata,
    parse_slide_overlay,
    read_xml_file,
)
from bbb_dl.models.config import DownloadConfig
from bbb_dl.models.recording import RecordingMetadata, SlideOverlay
from bbb_dl.models.stats import DownloadStats
from bbb_dl.models.timeline import Timeline
from bbb_dl.storage.output import OutputLayout, prepare_output_layout, rename_output
from bbb_dl.timeline import assemble_timeline, scan_streams, write_mlt
from bbb_dl.utils.path import PlaybackUrl, parse_playback_url, safe_filename

from .download_manager import DownloadManager

log = logging.getLogger(__name__)

DATA_FILES = [
    "presentation_text.json",
    "captions.json",
    "slides_new.xml",
    "cursor.xml",
    "metadata.xml",
    "panzooms.xml",
    "deskshare.xml",
    "notes.html",
    "polls.json",
    "external_videos.json",
    "shapes.svg",
]

VIDEO_FILES = [
    "video/webcams.webm",
    "video/webcams.mp4",
    "deskshare/deskshare.webm",
]


@dataclass
class SessionResult:
    """What a finished run produced."""

    output_dir: Path
    project_file: Path
    metadata: RecordingMetadata
    timeline: Timeline
    notes_file: Path | None = None


class RecordingSession:
    """Downloads a single recording and builds its project file."""

    def __init__(
        self,
        config: DownloadConfig,
        manager: DownloadManager,
        base_dir: Path | None = None,
    ):
        self.config = config
        self.manager = manager
        self.base_dir = base_dir or Path.cwd()

    @property
    def stats(self) -> DownloadStats:
        return self.manager.stats

    def _output_root(self, name: str) -> Path:
        """
        Resolves name below base_dir. The output root is emptied before
        downloading, so it must be a strict sub-directory of base_dir.
        """
        base = self.base_dir.resolve()
        root = (base / name).resolve()
        if root == base or not root.is_relative_to(base):
            raise OutputWriteError(
                f"Output folder '{name}' must be a sub-directory of '{base}'."
            )
        return root

    async def run(self, url: str) -> SessionResult:
        """
        Executes every stage in order.

        Raises:
            InvalidPlaybackUrlError: If url is not a playback URL.
            MetadataParseError: If a required XML document is malformed.
            MissingRequiredAssetError: If metadata.xml, the duration or the
                webcam stream is missing.
            OutputWriteError: If the output cannot be written or renamed.
        """
        playback = parse_playback_url(url)
        specified_outdir = bool(self.config.output_dir)
        root = self._output_root(
            self.config.output_dir if specified_outdir else playback.meeting_id
        )

        log.info("Setting up folder structure...")
        layout = prepare_output_layout(root)

        log.info("Downloading files...")
        await self._download_media(playback, layout)
        overlay = await self._download_slides(playback, layout)

        log.info("Creating MLT file...")
        metadata = self._read_metadata(playback, layout)
        timeline = assemble_timeline(
            metadata, overlay.slides, scan_streams(layout.videos)
        )
        project_name = safe_filename(metadata.meeting_name, playback.meeting_id)
        project_file = layout.root / f"{project_name}.{self.config.project_extension}"
        write_mlt(timeline, project_file)

        notes_file = None
        if self.config.export_notes:
            notes_file = await self._export_notes(layout)

        if not specified_outdir:
            log.info("Renaming output directory...")
            new_layout = rename_output(layout, self.base_dir / project_name)
            project_file = new_layout.root / project_file.name
            if notes_file:
                notes_file = new_layout.root / notes_file.name
            layout = new_layout

        log.info(f"[green]✓ Project saved to '{project_file}'[/green]")
        return SessionResult(
            output_dir=layout.root,
            project_file=project_file,
            metadata=metadata,
            timeline=timeline,
            notes_file=notes_file,
        )

    async def _download_media(self, playback: PlaybackUrl, layout: OutputLayout) -> None:
        policy = self.config.conflict_policy
        await self.manager.fetch_all(
            [playback.asset_url(name) for name in DATA_FILES], layout.data, policy
        )
        await self.manager.fetch_all(
            [playback.asset_url(name) for name in VIDEO_FILES], layout.videos, policy
        )

    async def _download_slides(
        self, playback: PlaybackUrl, layout: OutputLayout
    ) -> SlideOverlay:
        shapes_file = layout.data / "shapes.svg"
        if not shapes_file.is_file():
            log.info("[yellow]No slide overlay found, skipping slides.[/yellow]")
            return SlideOverlay()

        overlay = parse_slide_overlay(read_xml_file(shapes_file), playback)
        policy = self.config.conflict_policy
        await self.manager.fetch_all(overlay.image_urls, layout.slides, policy)
        await self.manager.fetch_all(overlay.text_urls, layout.textfiles, policy)
        return overlay

    def _read_metadata(
        self, playback: PlaybackUrl, layout: OutputLayout
    ) -> RecordingMetadata:
        metadata_file = layout.data / "metadata.xml"
        if not metadata_file.is_file():
            raise MissingRequiredAssetError(
                "data/metadata.xml", "unable to create MLT file"
            )
        return parse_recording_metadata(
            read_xml_file(metadata_file), playback.meeting_id
        )

    async def _export_notes(self, layout: OutputLayout) -> Path | None:
        notes_html = layout.data / "notes.html"
        if not notes_html.is_file():
            return None
        notes_file = layout.root / "notes.txt"
        try:
            async with aiofiles.open(notes_html, encoding="utf-8", errors="replace") as f:
                text = extract_notes_text(await f.read())
            if not text:
                return None
            async with aiofiles.open(notes_file, "w", encoding="utf-8") as f:
                await f.write(text + "\n")
        except OSError as e:
            raise OutputWriteError(f"Unable to write shared notes: {e}") from e
        return notes_file
