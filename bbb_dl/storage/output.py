"""
Creates and finalizes the on-disk output folder of a recording.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from bbb_dl.exceptions import OutputWriteError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputLayout:
    """One directory per asset category, so fetch targets cannot collide."""

    root: Path

    @property
    def data(self) -> Path:
        return self.root / "data"

    @property
    def videos(self) -> Path:
        return self.root / "videos"

    @property
    def slides(self) -> Path:
        return self.root / "slides"

    @property
    def textfiles(self) -> Path:
        return self.root / "textfiles"

    def subdirectories(self) -> list[Path]:
        return [self.data, self.videos, self.slides, self.textfiles]


def _empty_dir(directory: Path) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def prepare_output_layout(root: Path) -> OutputLayout:
    """
    Empties (or creates) the output root and creates the asset sub-directories.

    Raises:
        OutputWriteError: If the directories cannot be created.
    """
    layout = OutputLayout(root.resolve())
    try:
        _empty_dir(layout.root)
        for directory in layout.subdirectories():
            directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(
            f"Unable to set up output folder '{layout.root}': {e}"
        ) from e
    log.debug(f"Prepared output folder '{layout.root}'.")
    return layout


def rename_output(layout: OutputLayout, new_root: Path) -> OutputLayout:
    """
    Moves the output folder to new_root.

    Raises:
        OutputWriteError: If new_root already exists or the move fails.
    """
    new_root = new_root.resolve()
    if new_root == layout.root:
        return layout
    if new_root.exists():
        raise OutputWriteError(
            f"Unable to rename output directory: '{new_root}' already exists."
        )
    try:
        shutil.move(str(layout.root), str(new_root))
    except OSError as e:
        raise OutputWriteError(f"Unable to rename output directory: {e}") from e
    return OutputLayout(new_root)
