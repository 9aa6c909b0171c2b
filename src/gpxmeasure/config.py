from dataclasses import dataclass
import logging
import sys


@dataclass
class MeasureConfig:
    """Configuration for GPX track measurement."""

    suppress_distance: bool = False
    lenient_coordinates: bool = True
    log_level: str = "WARNING"
    metrics: bool = False


def setup_logging(config: MeasureConfig) -> None:
    """Setup logging configuration."""
    level = getattr(logging, config.log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Suppress overly verbose third-party logging
    logging.getLogger("gpxpy").setLevel(logging.WARNING)
