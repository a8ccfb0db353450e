"""Viewer parameters from the command line or the environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from skychart.config import (
    get_canvas_size,
    get_catalog_path,
    get_chart_type,
    get_color_scheme,
    get_magnitude_limit,
)
from skychart.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_MAGNITUDE,
    MAGNITUDE_MAX,
    MAGNITUDE_MIN,
)
from skychart.rendering.charts import CHART_TYPES
from skychart.rendering.colors import COLOR_SCHEMES

logger = logging.getLogger(__name__)


@dataclass
class ViewerParams:
    """Structured inputs for one chart.

    Parameters:
        chart_type: 'rectangular', 'elliptical' or 'polar'.
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        magnitude: Faintest star magnitude drawn and identified.
        show_grid: Draw the coordinate grid.
        show_ecliptic: Draw the ecliptic.
        show_solar_system: Draw the Sun, Moon and planets.
        color_scheme: 'dark', 'light' or 'blue'.
        time: UTC instant for solar-system positions; None hides them.
        pointer: Canvas (x, y) of the pointer for star identification.
        catalog_path: Star catalog CSV.
    """

    chart_type: str = 'rectangular'
    width: int = DEFAULT_CANVAS_WIDTH
    height: int = DEFAULT_CANVAS_HEIGHT
    magnitude: float = DEFAULT_MAGNITUDE
    show_grid: bool = True
    show_ecliptic: bool = True
    show_solar_system: bool = True
    color_scheme: str = 'blue'
    time: datetime | None = None
    pointer: tuple[float, float] | None = None
    catalog_path: str | None = None

    def __post_init__(self) -> None:
        self.chart_type = parse_chart_type(self.chart_type)
        self.color_scheme = parse_color_scheme(self.color_scheme)
        self.magnitude = clamp_magnitude(self.magnitude)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f'Invalid canvas size {self.width}x{self.height}')


def parse_chart_type(value: str) -> str:
    """Return the canonical chart type name (accepts unique prefixes, e.g. 'rect').

    Raises:
        ValueError: If the name matches no chart type.
    """
    key = value.strip().lower()
    matches = [name for name in CHART_TYPES if name.startswith(key)] if key else []
    if len(matches) != 1:
        raise ValueError(f'Invalid chart type {value!r}; expected one of {", ".join(CHART_TYPES)}')
    return matches[0]


def parse_color_scheme(value: str) -> str:
    """Return the canonical colour scheme name.

    Raises:
        ValueError: If the scheme is unknown.
    """
    key = value.strip().lower()
    if key not in COLOR_SCHEMES:
        raise ValueError(f'Invalid color scheme {value!r}; expected one of {", ".join(COLOR_SCHEMES)}')
    return key


def clamp_magnitude(value: float) -> float:
    """Limit a magnitude cutoff to the slider range [-2, 8]."""
    clamped = max(MAGNITUDE_MIN, min(MAGNITUDE_MAX, float(value)))
    if clamped != value:
        logger.warning('Magnitude %s out of range; using %s', value, clamped)
    return clamped


def viewer_params_from_env() -> ViewerParams:
    """Build ViewerParams from SKYCHART_* environment variables.

    Invalid chart type or colour scheme values fall back to the defaults.
    """
    width, height = get_canvas_size()
    chart_type = get_chart_type()
    try:
        chart_type = parse_chart_type(chart_type)
    except ValueError as e:
        logger.warning('%s; using rectangular', e)
        chart_type = 'rectangular'
    scheme = get_color_scheme()
    try:
        scheme = parse_color_scheme(scheme)
    except ValueError as e:
        logger.warning('%s; using blue', e)
        scheme = 'blue'
    return ViewerParams(
        chart_type=chart_type,
        width=width,
        height=height,
        magnitude=get_magnitude_limit(),
        color_scheme=scheme,
        catalog_path=get_catalog_path(),
    )
