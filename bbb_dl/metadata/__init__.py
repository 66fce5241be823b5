"""
Metadata Layer.

This package parses the fetched recording documents (metadata.xml, shapes.svg,
notes.html) into the normalized in-memory models.
"""

from .extractor import parse_recording_metadata, parse_slide_overlay
from .notes import extract_notes_text
from .xml_reader import parse_xml, read_xml_file

__all__ = [
    "extract_notes_text",
    "parse_recording_metadata",
    "parse_slide_overlay",
    "parse_xml",
    "read_xml_file",
]
