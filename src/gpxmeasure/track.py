#!/usr/bin/env python3
"""
GPX track model with measure-once geometry.

A Track scans its file lazily, the first time any derived value is needed,
in a single streaming pass and caches the result for its lifetime. Missing
or broken files never raise: the track simply reports unset geometry.
"""

from typing import Iterable, NamedTuple, Optional
import copy
import logging
import os
from xml.parsers import expat

import gpxpy.gpx

from .config import MeasureConfig
from .geometry import BoundingBox, GeoPoint, distance_between, merge_bounds
from .gpx import iter_track_points, read_title
from .gpx import read_description as read_gpx_description

logger = logging.getLogger(__name__)

UNTITLED = "untitled"

# Failures absorbed when reading the document header
READ_ERRORS = (OSError, ValueError, expat.ExpatError, gpxpy.gpx.GPXException)


class MeasurementResult(NamedTuple):
    """Derived geometry of a track."""

    bounds: BoundingBox
    centre: GeoPoint
    start: GeoPoint
    end: GeoPoint
    distance_km: float
    point_count: int


class Track:
    """A GPX track or route file with memoized measurement."""

    def __init__(self, filename: str, config: Optional[MeasureConfig] = None):
        """
        Initializes a Track object.

        A missing file is reported as a warning, not an error; the track then
        measures as empty.

        Args:
            filename: Path to the GPX file
            config: Measurement settings (defaults to MeasureConfig())
        """
        self.config = config if config is not None else MeasureConfig()
        self._filename = filename
        self._has_source = os.path.isfile(filename)
        if not self._has_source:
            logger.warning(f"GPX file not found: {filename}")

        self._suppress_distance = self.config.suppress_distance
        self._measured = False
        self._title: Optional[str] = None
        self._title_read = False
        self._reset()

    def _reset(self) -> None:
        self._bounds = BoundingBox()
        self._centre = GeoPoint()
        self._start = GeoPoint()
        self._end = GeoPoint()
        self._distance_km = 0.0
        self._point_count = 0

    @property
    def filename(self) -> str:
        """Path the track was created with."""
        return self._filename

    @property
    def has_source(self) -> bool:
        """False if the file did not exist when the track was created."""
        return self._has_source

    @property
    def measured(self) -> bool:
        return self._measured

    def suppress_distance(self, suppress: bool = True) -> None:
        """
        Skip the distance calculation, which can be slow for large regions.

        Has no effect once the track has been measured.
        """
        if self._measured:
            logger.debug(
                f"Track {self._filename} already measured, "
                f"ignoring suppress_distance({suppress})"
            )
            return
        self._suppress_distance = suppress

    def ensure_measured(self) -> None:
        """Run the measurement pass unless it has already been done."""
        if self._measured:
            return
        if self._has_source:
            try:
                self._scan(self._filename)
            except (OSError, expat.ExpatError) as e:
                logger.warning(f"Failed to measure GPX file {self._filename}: {e}")
                self._reset()
        self._measured = True

    def _scan(self, filename: str) -> None:
        bounds = self._bounds
        start = self._start
        end = self._end

        for lat, lon in iter_track_points(
            filename, lenient=self.config.lenient_coordinates
        ):
            bounds.extend(lat, lon)
            # end still holds the previous point here
            if not self._suppress_distance and end.is_set():
                if end.lat != lat or end.lon != lon:
                    self._distance_km += distance_between(end.lat, end.lon, lat, lon)  # type: ignore[arg-type]
            if not start.is_set():
                start.lat = lat
                start.lon = lon
            end.lat = lat
            end.lon = lon
            self._point_count += 1

        if self._point_count > 0:
            self._centre = bounds.centre()

        logger.debug(
            f"Measured {self._point_count} points in {filename}, "
            f"distance {self._distance_km:.3f} km"
        )

    def measure(self) -> MeasurementResult:
        """
        Measure the track (at most once) and return the derived geometry.

        Returns:
            MeasurementResult; all points unset and distance 0.0 if the file
            is missing, malformed or contains no points
        """
        self.ensure_measured()
        return MeasurementResult(
            bounds=self.bounds,
            centre=self.centre,
            start=self.start,
            end=self.end,
            distance_km=self.distance_km,
            point_count=self.point_count,
        )

    @property
    def bounds(self) -> BoundingBox:
        self.ensure_measured()
        return copy.deepcopy(self._bounds)

    @property
    def centre(self) -> GeoPoint:
        """Midpoint of the bounding box."""
        self.ensure_measured()
        return copy.copy(self._centre)

    @property
    def start(self) -> GeoPoint:
        self.ensure_measured()
        return copy.copy(self._start)

    @property
    def end(self) -> GeoPoint:
        self.ensure_measured()
        return copy.copy(self._end)

    @property
    def distance_km(self) -> float:
        self.ensure_measured()
        return self._distance_km

    @property
    def point_count(self) -> int:
        self.ensure_measured()
        return self._point_count

    def set_title(self, title: str) -> None:
        self._title = title
        self._title_read = True

    @property
    def title(self) -> Optional[str]:
        """
        Display title of the track.

        Read from the file on first access unless set explicitly. Falls back
        to "untitled" if the file has no name or cannot be parsed, and is None
        for a track without a source file.
        """
        if not self._title_read:
            self._title_read = True
            if self._has_source:
                try:
                    self._title = read_title(self._filename) or UNTITLED
                except READ_ERRORS as e:
                    logger.warning(
                        f"Failed to read title from GPX file {self._filename}: {e}"
                    )
                    self._title = UNTITLED
        return self._title

    def read_description(self) -> Optional[str]:
        """
        Read the description from the file.

        Returns:
            The description, "" if the file has none or cannot be parsed,
            None for a track without a source file
        """
        if not self._has_source:
            return None
        try:
            return read_gpx_description(self._filename) or ""
        except READ_ERRORS as e:
            logger.warning(
                f"Failed to read description from GPX file {self._filename}: {e}"
            )
            return ""

    def __repr__(self) -> str:
        return (
            f"Track({self._filename!r}, has_source={self._has_source}, "
            f"measured={self._measured})"
        )


def combined_bounds(tracks: Iterable[Track]) -> BoundingBox:
    """
    Bounding box surrounding all given tracks.

    Args:
        tracks: Tracks to combine; each is measured if it hasn't been yet

    Returns:
        Merged box, unset if no track has any points
    """
    return merge_bounds(track.bounds for track in tracks)
