import pytest
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"


def build_gpx(
    points: Iterable[Tuple[object, object]] = (),
    name: Optional[str] = None,
    track_name: Optional[str] = None,
    desc: Optional[str] = None,
    track_desc: Optional[str] = None,
    element: str = "trkpt",
) -> str:
    """Build a GPX 1.1 document with one track segment (or route) of points."""
    metadata = ""
    if name is not None or desc is not None:
        metadata = "<metadata>"
        if name is not None:
            metadata += f"<name>{name}</name>"
        if desc is not None:
            metadata += f"<desc>{desc}</desc>"
        metadata += "</metadata>"

    point_xml = "".join(
        f'<{element} lat="{lat}" lon="{lon}"><ele>10.0</ele></{element}>'
        for lat, lon in points
    )

    header = ""
    if track_name is not None:
        header += f"<name>{track_name}</name>"
    if track_desc is not None:
        header += f"<desc>{track_desc}</desc>"

    if element == "rtept":
        body = f"<rte>{header}{point_xml}</rte>"
    else:
        body = f"<trk>{header}<trkseg>{point_xml}</trkseg></trk>"

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<gpx version="1.1" creator="gpxmeasure tests" xmlns="{GPX_NAMESPACE}">'
        f"{metadata}{body}</gpx>\n"
    )


@pytest.fixture
def write_gpx(tmp_path: Path) -> Callable[..., str]:
    """Factory fixture writing a GPX file into tmp_path and returning its path."""
    counter = {"n": 0}

    def _write(points=(), filename: Optional[str] = None, **kwargs) -> str:
        counter["n"] += 1
        path = tmp_path / (filename or f"track{counter['n']}.gpx")
        path.write_text(build_gpx(points, **kwargs), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def write_text(tmp_path: Path) -> Callable[[str, str], str]:
    """Factory fixture writing raw text into tmp_path."""

    def _write(filename: str, content: str) -> str:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
