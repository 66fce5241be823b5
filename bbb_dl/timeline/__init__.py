"""
Timeline Layer.

This package assembles the multi-track project timeline and serializes it to
the MLT format understood by the Shotcut video editor.
"""

from .assembler import StreamInventory, assemble_timeline, build_slide_entries, scan_streams
from .mlt import read_mlt, render_mlt, write_mlt

__all__ = [
    "StreamInventory",
    "assemble_timeline",
    "build_slide_entries",
    "read_mlt",
    "render_mlt",
    "scan_streams",
    "write_mlt",
]
