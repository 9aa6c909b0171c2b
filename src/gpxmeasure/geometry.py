#!/usr/bin/env python3
"""
Geographic points, bounding boxes and the distance helpers shared by the
measurement code.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence
import copy
import logging
import math

logger = logging.getLogger(__name__)

# Length of one degree of latitude in km, as used by the planar approximation
KM_PER_DEGREE = 111.3


def max_value(values: Sequence[Optional[float]]) -> float:
    """
    Find the largest value in a sequence, ignoring unset (None) entries.

    Args:
        values: Sequence of floats, possibly containing None

    Returns:
        The maximum, or 0.0 if no value is set
    """
    result: Optional[float] = None
    for value in values:
        if value is not None and (result is None or value > result):
            result = value
    return result if result is not None else 0.0


def min_value(values: Sequence[Optional[float]]) -> float:
    """
    Find the smallest value in a sequence, ignoring unset (None) entries.

    Args:
        values: Sequence of floats, possibly containing None

    Returns:
        The minimum, or 0.0 if no value is set
    """
    result: Optional[float] = None
    for value in values:
        if value is not None and (result is None or value < result):
            result = value
    return result if result is not None else 0.0


def distance_between(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Approximate distance between two points in km.

    Consecutive track points lie close together and a track can hold tens of
    thousands of them, so this uses the planar small-angle approximation
    instead of spherical trigonometry. Accuracy degrades for points far apart.

    Args:
        lat1: Latitude of the first point in decimal degrees
        lon1: Longitude of the first point in decimal degrees
        lat2: Latitude of the second point in decimal degrees
        lon2: Longitude of the second point in decimal degrees

    Returns:
        Distance in kilometers
    """
    mean_lat = abs(lat1 + lat2) / 2 * math.pi / 180
    dx = KM_PER_DEGREE * math.cos(mean_lat) * abs(lon1 - lon2)
    dy = KM_PER_DEGREE * abs(lat1 - lat2)
    return math.sqrt(dx * dx + dy * dy)


@dataclass
class GeoPoint:
    """A WGS-84 position. A coordinate of None means 'not yet known'."""

    lat: Optional[float] = None
    lon: Optional[float] = None

    def is_set(self) -> bool:
        return self.lat is not None and self.lon is not None

    def distance_from(self, other: "GeoPoint") -> float:
        """Distance to another point in km, 0.0 if either point is unset."""
        if not (self.is_set() and other.is_set()):
            return 0.0
        return distance_between(self.lat, self.lon, other.lat, other.lon)  # type: ignore[arg-type]


@dataclass
class BoundingBox:
    """
    Axis-aligned lat/lon rectangle.

    Corners follow map convention: top_left holds the northernmost latitude
    and westernmost longitude, bottom_right the southernmost latitude and
    easternmost longitude.
    """

    top_left: GeoPoint = field(default_factory=GeoPoint)
    bottom_right: GeoPoint = field(default_factory=GeoPoint)

    @classmethod
    def from_points(cls, points: Iterable[GeoPoint]) -> "BoundingBox":
        """Build the smallest box containing all set points."""
        bounds = cls()
        for point in points:
            if point.is_set():
                bounds.extend(point.lat, point.lon)  # type: ignore[arg-type]
        return bounds

    def is_set(self) -> bool:
        return self.top_left.is_set() and self.bottom_right.is_set()

    def extend(self, lat: float, lon: float) -> None:
        """Grow the box in place so that it contains (lat, lon)."""
        if self.top_left.lat is None or self.top_left.lat < lat:
            self.top_left.lat = lat
        if self.bottom_right.lat is None or self.bottom_right.lat > lat:
            self.bottom_right.lat = lat
        if self.bottom_right.lon is None or self.bottom_right.lon < lon:
            self.bottom_right.lon = lon
        if self.top_left.lon is None or self.top_left.lon > lon:
            self.top_left.lon = lon

    def centre(self) -> GeoPoint:
        """Midpoint of the two corners (not the centroid of the points)."""
        if not self.is_set():
            return GeoPoint()
        return GeoPoint(
            (self.top_left.lat + self.bottom_right.lat) / 2,  # type: ignore[operator]
            (self.top_left.lon + self.bottom_right.lon) / 2,  # type: ignore[operator]
        )

    def width(self) -> float:
        """East-west extent in km, measured along the northern edge."""
        if not self.is_set():
            return 0.0
        return distance_between(
            self.top_left.lat,  # type: ignore[arg-type]
            self.top_left.lon,  # type: ignore[arg-type]
            self.top_left.lat,  # type: ignore[arg-type]
            self.bottom_right.lon,  # type: ignore[arg-type]
        )

    def height(self) -> float:
        """North-south extent in km, measured along the western edge."""
        if not self.is_set():
            return 0.0
        return distance_between(
            self.top_left.lat,  # type: ignore[arg-type]
            self.top_left.lon,  # type: ignore[arg-type]
            self.bottom_right.lat,  # type: ignore[arg-type]
            self.top_left.lon,  # type: ignore[arg-type]
        )

    def merge(self, other: "BoundingBox") -> "BoundingBox":
        """
        Merge this box with another into a new box surrounding both.

        Neither input is modified. An unset input is ignored; merging two
        unset boxes gives an unset box.

        Args:
            other: Box to merge with

        Returns:
            New BoundingBox
        """
        if self.is_set() and other.is_set():
            return BoundingBox(
                GeoPoint(
                    max_value([self.top_left.lat, other.top_left.lat]),
                    min_value([self.top_left.lon, other.top_left.lon]),
                ),
                GeoPoint(
                    min_value([self.bottom_right.lat, other.bottom_right.lat]),
                    max_value([self.bottom_right.lon, other.bottom_right.lon]),
                ),
            )
        if self.is_set():
            return copy.deepcopy(self)
        if other.is_set():
            return copy.deepcopy(other)
        return BoundingBox()


def merge_bounds(boxes: Iterable[BoundingBox]) -> BoundingBox:
    """
    Merge any number of bounding boxes into one.

    Args:
        boxes: Boxes to combine; unset boxes are ignored

    Returns:
        Box surrounding all set inputs, unset if there are none
    """
    result = BoundingBox()
    count = 0
    for box in boxes:
        result = result.merge(box)
        count += 1
    logger.debug(f"Merged {count} bounding boxes, result set: {result.is_set()}")
    return result
