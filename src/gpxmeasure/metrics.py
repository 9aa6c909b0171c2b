"""
Module for collecting and logging metrics about measured tracks.
"""

import logging
from typing import Iterable, NamedTuple, Tuple

from .config import MeasureConfig
from .geometry import BoundingBox
from .track import Track, combined_bounds

logger = logging.getLogger(__name__)


class TrackMetrics(NamedTuple):
    """Container for track metrics data."""

    track_count: int
    missing_files: Tuple[str, ...]
    empty_count: int
    point_count: int
    distance_km: float
    bounds: BoundingBox


def collect_metrics(tracks: Iterable[Track]) -> TrackMetrics:
    """
    Collect metrics from a set of tracks, measuring them if necessary.

    Args:
        tracks: Tracks to analyze

    Returns:
        TrackMetrics containing all collected metrics
    """
    tracks = list(tracks)
    missing_files = []
    empty_count = 0
    point_count = 0
    distance_km = 0.0

    for track in tracks:
        if not track.has_source:
            missing_files.append(track.filename)
        elif track.point_count == 0:
            empty_count += 1
        point_count += track.point_count
        distance_km += track.distance_km

    return TrackMetrics(
        track_count=len(tracks),
        missing_files=tuple(missing_files),
        empty_count=empty_count,
        point_count=point_count,
        distance_km=distance_km,
        bounds=combined_bounds(tracks),
    )


def log_metrics(metrics: TrackMetrics, config: MeasureConfig) -> None:
    """
    Log detailed metrics.

    Args:
        metrics: TrackMetrics containing collected metrics
        config: MeasureConfig; nothing is logged unless config.metrics is set
    """
    if not config.metrics:
        return

    logger.debug("=== GPXMEASURE_METRICS ===")
    logger.debug(f"total_tracks={metrics.track_count}")
    logger.debug(f"missing_tracks={len(metrics.missing_files)}")
    for filename in metrics.missing_files:
        logger.debug(f"missing_file={filename}")
    logger.debug(f"empty_tracks={metrics.empty_count}")
    logger.debug(f"total_points={metrics.point_count}")
    logger.debug(f"total_distance_km={metrics.distance_km:.3f}")
    if metrics.bounds.is_set():
        top_left = metrics.bounds.top_left
        bottom_right = metrics.bounds.bottom_right
        logger.debug(
            f"bounds=({top_left.lat}, {top_left.lon}), "
            f"({bottom_right.lat}, {bottom_right.lon})"
        )
    logger.debug("=== END_GPXMEASURE_METRICS ===")
