#!/usr/bin/env python3
"""
gpxmeasure - streaming measurement of GPX tracks.

This package reads GPX track and route files in a single streaming pass and
derives their bounding box, centre, start and end points and length, for use
when placing tracks on an interactive map.
"""
import importlib.metadata

__version__ = importlib.metadata.version("gpxmeasure")

# Import main classes for public API
from .config import MeasureConfig
from .geometry import BoundingBox, GeoPoint, distance_between, merge_bounds
from .track import MeasurementResult, Track, combined_bounds

__all__ = [
    "BoundingBox",
    "GeoPoint",
    "MeasureConfig",
    "MeasurementResult",
    "Track",
    "combined_bounds",
    "distance_between",
    "merge_bounds",
]
