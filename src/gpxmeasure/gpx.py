#!/usr/bin/env python3
"""
GPX file reading.

Track and route points are read with a streaming expat parser so that
multi-megabyte files never have to be held in memory. Document metadata
(name, description) is small and read with gpxpy instead, falling back to
a stream of the document header when gpxpy rejects the file.
"""

from typing import Dict, Iterator, List, Optional, Tuple
import logging
import math
from xml.parsers import expat

import gpxpy
import gpxpy.gpx

logger = logging.getLogger(__name__)

POINT_ELEMENTS = ("trkpt", "rtept")

# Bytes handed to the parser per read
CHUNK_SIZE = 64 * 1024

# Separator expat puts between namespace URI and local name
_NS_SEPARATOR = " "


def _local_name(name: str) -> str:
    return name.rsplit(_NS_SEPARATOR, 1)[-1]


def parse_coordinate(value: Optional[str], lenient: bool = True) -> Optional[float]:
    """
    Convert a lat/lon attribute value to float.

    Non-finite values ("inf", "nan") count as malformed.

    Args:
        value: Raw attribute value, None if the attribute is missing
        lenient: If True, missing or malformed values become 0.0

    Returns:
        The parsed value, 0.0 or None (strict mode) for bad input
    """
    if value is not None:
        try:
            result = float(value)
        except ValueError:
            pass
        else:
            if math.isfinite(result):
                return result
    return 0.0 if lenient else None


def iter_track_points(
    filename: str, lenient: bool = True
) -> Iterator[Tuple[float, float]]:
    """
    Stream (lat, lon) pairs of all trkpt and rtept elements in document order.

    Namespaces are ignored, only the local element name is matched.

    Args:
        filename: Path to GPX file
        lenient: If True, a missing or malformed lat/lon becomes 0.0;
            otherwise the point is skipped

    Yields:
        Tuples of (latitude, longitude) in decimal degrees

    Raises:
        FileNotFoundError: If file doesn't exist.
        PermissionError: If file can't be read.
        xml.parsers.expat.ExpatError: If the XML is malformed.
    """
    pending: List[Tuple[float, float]] = []
    skipped = 0

    def start_element(name, attrs):
        nonlocal skipped
        if _local_name(name) not in POINT_ELEMENTS:
            return
        lat = parse_coordinate(attrs.get("lat"), lenient)
        lon = parse_coordinate(attrs.get("lon"), lenient)
        if lat is None or lon is None:
            skipped += 1
            logger.debug(
                f"Skipping point with invalid coordinates: "
                f"lat={attrs.get('lat')!r}, lon={attrs.get('lon')!r}"
            )
            return
        pending.append((lat, lon))

    parser = expat.ParserCreate(namespace_separator=_NS_SEPARATOR)
    parser.StartElementHandler = start_element

    logger.debug(f"Streaming GPX points from: {filename}")
    with open(filename, "rb") as f:
        while True:
            chunk = f.read(CHUNK_SIZE)
            parser.Parse(chunk, not chunk)
            # Only the points of the current chunk are buffered
            yield from pending
            pending.clear()
            if not chunk:
                break

    if skipped > 0:
        logger.debug(f"Skipped {skipped} points with invalid coordinates")


def load_gpx(filename: str) -> gpxpy.gpx.GPX:
    """
    Load a complete GPX document.

    Args:
        filename: Path to GPX file

    Returns:
        Parsed gpxpy document

    Raises:
        FileNotFoundError: If file doesn't exist.
        gpxpy.gpx.GPXException: If GPX file is malformed.
    """
    logger.debug(f"Reading GPX file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        return gpxpy.parse(f)


def _first_text(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def stream_header_text(
    filename: str, field: str
) -> Tuple[Optional[str], Optional[str]]:
    """
    Stream the text of a header element without validating any points.

    Looks for <field> directly under <gpx> or <gpx><metadata> and under the
    first <trk>. Reading stops as soon as the answer is known; metadata
    precedes tracks in a GPX document.

    Args:
        filename: Path to GPX file
        field: Local element name, e.g. "name" or "desc"

    Returns:
        Tuple of (document value, first track value), None where absent

    Raises:
        FileNotFoundError: If file doesn't exist.
        xml.parsers.expat.ExpatError: If the XML is malformed before the
            answer is found.
    """
    document_paths = (("gpx", field), ("gpx", "metadata", field))
    track_path = ("gpx", "trk", field)

    path: List[str] = []
    found: Dict[str, str] = {}
    parts: List[str] = []
    capture: Optional[str] = None
    capture_depth = 0
    track_count = 0

    def start_element(name, attrs):
        nonlocal capture, capture_depth, track_count
        path.append(_local_name(name))
        current = tuple(path)
        if current == ("gpx", "trk"):
            track_count += 1
        if capture is not None:
            return
        if current in document_paths and "document" not in found:
            capture = "document"
        elif current == track_path and track_count == 1 and "track" not in found:
            capture = "track"
        else:
            return
        capture_depth = len(path)
        parts.clear()

    def end_element(name):
        nonlocal capture
        if capture is not None and len(path) == capture_depth:
            found[capture] = "".join(parts).strip()
            capture = None
        path.pop()

    def character_data(data):
        if capture is not None:
            parts.append(data)

    parser = expat.ParserCreate(namespace_separator=_NS_SEPARATOR)
    parser.StartElementHandler = start_element
    parser.EndElementHandler = end_element
    parser.CharacterDataHandler = character_data

    logger.debug(f"Streaming GPX header '{field}' from: {filename}")
    with open(filename, "rb") as f:
        while not (found.get("document") or "track" in found):
            chunk = f.read(CHUNK_SIZE)
            parser.Parse(chunk, not chunk)
            if not chunk:
                break

    return found.get("document"), found.get("track")


def _read_header(filename: str, field: str) -> Optional[str]:
    try:
        gpx_data = load_gpx(filename)
    except (ValueError, gpxpy.gpx.GPXException) as e:
        # gpxpy validates every point; the header may still be readable
        logger.debug(f"gpxpy could not parse {filename} ({e}), streaming '{field}'")
        return _first_text(*stream_header_text(filename, field))

    first_track = gpx_data.tracks[0] if gpx_data.tracks else None
    if field == "name":
        return _first_text(gpx_data.name, first_track.name if first_track else None)
    return _first_text(
        gpx_data.description, first_track.description if first_track else None
    )


def read_title(filename: str) -> Optional[str]:
    """
    Read the document name, falling back to the name of the first track.

    Documents gpxpy rejects (for instance because of a malformed point) are
    searched with the streaming parser instead.

    Returns:
        The title, or None if neither the document nor the track has a name

    Raises:
        FileNotFoundError: If file doesn't exist.
        xml.parsers.expat.ExpatError: If the XML is malformed.
    """
    return _read_header(filename, "name")


def read_description(filename: str) -> Optional[str]:
    """
    Read the document description, falling back to the first track's.

    Returns:
        The description, or None if neither the document nor the track has one

    Raises:
        FileNotFoundError: If file doesn't exist.
        xml.parsers.expat.ExpatError: If the XML is malformed.
    """
    return _read_header(filename, "desc")
