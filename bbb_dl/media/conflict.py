"""
Resolves what happens when a download target already exists on disk.

Each conflict policy maps to exactly one resolver. A resolver receives the
intended target path and the size announced by the server (None when the
server did not send a Content-Length) and returns the path to write to, or
None to skip the download.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from bbb_dl.models.download import ConflictPolicy

log = logging.getLogger(__name__)

Resolver = Callable[[Path, int | None], Path | None]


def make_unique(target: Path, incoming_size: int | None) -> Path | None:
    """Picks 'name (1).ext', 'name (2).ext', ... until a free name is found."""
    if not target.exists():
        return target
    counter = 1
    while True:
        candidate = target.with_name(f"{target.stem} ({counter}){target.suffix}")
        if not candidate.exists():
            log.debug(f"'{target.name}' exists, saving as '{candidate.name}'.")
            return candidate
        counter += 1


def overwrite(target: Path, incoming_size: int | None) -> Path | None:
    return target


def skip(target: Path, incoming_size: int | None) -> Path | None:
    if target.exists():
        log.debug(f"Skipping '{target.name}': file already exists.")
        return None
    return target


def skip_unless_smaller(target: Path, incoming_size: int | None) -> Path | None:
    """Replaces an existing file only if it is smaller than the incoming one."""
    if not target.exists() or incoming_size is None:
        return target
    existing_size = target.stat().st_size
    if existing_size >= incoming_size:
        log.debug(
            f"Skipping '{target.name}': existing file ({existing_size} B) is not "
            f"smaller than the remote one ({incoming_size} B)."
        )
        return None
    return target


RESOLVERS: dict[ConflictPolicy, Resolver] = {
    ConflictPolicy.MAKE_UNIQUE: make_unique,
    ConflictPolicy.OVERWRITE: overwrite,
    ConflictPolicy.SKIP: skip,
    ConflictPolicy.SKIP_UNLESS_SMALLER: skip_unless_smaller,
}


def resolve_conflict(
    policy: ConflictPolicy, target: Path, incoming_size: int | None = None
) -> Path | None:
    """Returns the path to write to, or None if the download should be skipped."""
    return RESOLVERS[policy](target, incoming_size)
