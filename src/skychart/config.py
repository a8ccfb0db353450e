"""Configuration: catalog path, canvas size and chart defaults from environment."""

import logging
import os
from pathlib import Path

from skychart.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_MAGNITUDE,
)

logger = logging.getLogger(__name__)

# Env var overrides with sensible defaults.
DEFAULT_CATALOG_PATH = 'iau_stars.csv'
DEFAULT_CHART_TYPE = 'rectangular'
DEFAULT_COLOR_SCHEME = 'blue'


def _env_number(name: str, default: float) -> float:
    """Return float env var ``name``, or ``default`` when unset or malformed."""
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning('Invalid %s=%r; using default %s', name, raw, default)
        return default


def get_catalog_path() -> str:
    """Return star catalog CSV path (SKYCHART_CATALOG env var or default).

    Returns:
        Path string.
    """
    return os.environ.get('SKYCHART_CATALOG', DEFAULT_CATALOG_PATH)


def get_canvas_size() -> tuple[int, int]:
    """Return canvas (width, height) in pixels (SKYCHART_WIDTH / SKYCHART_HEIGHT).

    Returns:
        Tuple of positive integers.
    """
    width = int(_env_number('SKYCHART_WIDTH', DEFAULT_CANVAS_WIDTH))
    height = int(_env_number('SKYCHART_HEIGHT', DEFAULT_CANVAS_HEIGHT))
    if width <= 0 or height <= 0:
        logger.warning('Non-positive canvas size %dx%d; using defaults', width, height)
        return (DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT)
    return (width, height)


def get_magnitude_limit() -> float:
    """Return default magnitude cutoff (SKYCHART_MAGNITUDE env var or default)."""
    return _env_number('SKYCHART_MAGNITUDE', DEFAULT_MAGNITUDE)


def get_chart_type() -> str:
    """Return default chart type name (SKYCHART_CHART env var or default)."""
    return os.environ.get('SKYCHART_CHART', DEFAULT_CHART_TYPE).strip().lower()


def get_color_scheme() -> str:
    """Return default colour scheme name (SKYCHART_COLORS env var or default)."""
    return os.environ.get('SKYCHART_COLORS', DEFAULT_COLOR_SCHEME).strip().lower()


def get_leapsecs_path() -> str | None:
    """Return path to a NAIF LSK leap seconds file for rms-julian, if configured.

    Prefers JULIAN_LEAPSECS; returns None so that rms-julian's bundled LSK is used
    when nothing is configured or the configured file is missing.

    Returns:
        Path string or None.
    """
    path = os.environ.get('JULIAN_LEAPSECS', '').strip()
    if path and Path(path).exists():
        return path
    return None
