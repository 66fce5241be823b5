"""
Reads XML documents into plain dictionaries.

The shape mirrors what the rest of the application expects from recording
documents: attributes and child elements share one mapping, namespace
prefixes are dropped, text-only elements collapse to scalars, and numeric
looking values become numbers. Elements named in ``force_list`` are always
lists, so a presentation with a single slide looks like one with many.
"""

import re
from pathlib import Path
from typing import Any

from lxml import etree

from bbb_dl.exceptions import MetadataParseError

FORCE_LIST = frozenset({"image"})

_INT_RE = re.compile(r"^-?(?:0|[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?(?:0|[1-9]\d*)\.\d+$")


def _local_name(tag: str) -> str:
    """Strips '{namespace}' and 'prefix:' parts from a tag or attribute name."""
    if tag.startswith("{"):
        tag = tag.split("}", 1)[1]
    return tag.rsplit(":", 1)[-1]


def coerce_value(raw: str) -> Any:
    """
    Trims a value and converts it to int/float when the number prints back as
    the same text, so "0012" and "3.10" stay strings.
    """
    value = raw.strip()
    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value) and str(float(value)) == value:
        return float(value)
    return value


def _convert(element: etree._Element, force_list: frozenset[str]) -> Any:
    node: dict[str, Any] = {
        _local_name(key): coerce_value(value) for key, value in element.attrib.items()
    }

    children: dict[str, list[Any]] = {}
    for child in element:
        if not isinstance(child.tag, str):
            continue
        children.setdefault(_local_name(child.tag), []).append(
            _convert(child, force_list)
        )
    for name, values in children.items():
        node[name] = values if name in force_list or len(values) > 1 else values[0]

    text = (element.text or "").strip()
    if not node:
        return coerce_value(text) if text else ""
    if text:
        node["#text"] = coerce_value(text)
    return node


def parse_xml(source: str | bytes, force_list=FORCE_LIST) -> dict[str, Any]:
    """
    Parses an XML document into a dictionary keyed by the root element's name.

    Raises:
        MetadataParseError: If the document is not well-formed XML.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    parser = etree.XMLParser(
        resolve_entities=False, no_network=True, remove_comments=True, remove_pis=True
    )
    try:
        root = etree.fromstring(source, parser)
    except etree.XMLSyntaxError as e:
        raise MetadataParseError(f"Malformed XML: {e}") from e
    if root is None:
        raise MetadataParseError("XML document is empty.")

    converted = _convert(root, frozenset(force_list))
    root_name = _local_name(root.tag)
    if root_name in force_list:
        converted = [converted]
    return {root_name: converted}


def read_xml_file(path: Path, force_list=FORCE_LIST) -> dict[str, Any]:
    """Reads and parses an XML file from disk."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise MetadataParseError(f"Error while reading file '{path}': {e}") from e
    try:
        return parse_xml(data, force_list)
    except MetadataParseError as e:
        raise MetadataParseError(f"Error while reading file '{path}': {e}") from e
