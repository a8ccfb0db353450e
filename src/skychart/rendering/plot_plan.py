"""Plot plans: device-independent lines, circles and labels for one chart.

A chart never draws. It fills a ``PlotPlan`` in canvas pixel coordinates
(origin top-left, y downward) and a renderer (PostScript or matplotlib) turns
the plan into output. Each item carries a ``role`` that selects its colour.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from skychart.angle_utils import format_dec, format_ra
from skychart.constants import (
    ECLIPTIC_EPSILON,
    MAGNITUDE_MAX,
    MAGNITUDE_MIN,
    SYMB_ALPHA,
    SYMB_DELTA,
)
from skychart.ephemeris import ecliptic_point

if TYPE_CHECKING:
    from skychart.ephemeris import BodyPosition
    from skychart.rendering.charts import Chart
    from skychart.stars import Star

# Item roles (colour scheme keys)
ROLE_FRAME = 'frame'
ROLE_SKY = 'sky'
ROLE_GRID = 'grid'
ROLE_ECLIPTIC = 'eclp'
ROLE_STAR = 'star'
ROLE_BODY = 'body'
ROLE_MOUSE = 'mouse'

ECLIPTIC_STEP_DEG = 2
SOLAR_BODY_DIAMETER = 3.0
LABEL_OFFSET = (5.0, 2.0)
HOVER_LABEL_OFFSET = 10.0

# Star marker diameters (pixels) at the ends of the magnitude range.
STAR_DIAMETER_BRIGHT = 8.0
STAR_DIAMETER_FAINT = 1.0

Point = tuple[float, float]


@dataclass
class Polyline:
    """Connected points; ``closed`` joins the last point to the first."""

    points: list[Point]
    role: str = ROLE_GRID
    closed: bool = False
    filled: bool = False
    width: float = 1.0


@dataclass
class Circle:
    """Circle given by centre and diameter."""

    x: float
    y: float
    diameter: float
    role: str = ROLE_STAR
    filled: bool = True
    width: float = 1.0


@dataclass
class Label:
    """Text anchored at its left baseline (or centre when ``centered``)."""

    x: float
    y: float
    text: str
    role: str = ROLE_GRID
    centered: bool = False


PlotItem = Polyline | Circle | Label


@dataclass
class PlotPlan:
    """Ordered drawing items for a canvas of ``width`` x ``height`` pixels."""

    width: float
    height: float
    items: list[PlotItem] = field(default_factory=list)

    def add(self, item: PlotItem) -> None:
        self.items.append(item)

    def extend(self, items: Iterable[PlotItem]) -> None:
        self.items.extend(items)

    @property
    def polylines(self) -> list[Polyline]:
        return [i for i in self.items if isinstance(i, Polyline)]

    @property
    def circles(self) -> list[Circle]:
        return [i for i in self.items if isinstance(i, Circle)]

    @property
    def labels(self) -> list[Label]:
        return [i for i in self.items if isinstance(i, Label)]

    def by_role(self, role: str) -> list[PlotItem]:
        return [i for i in self.items if i.role == role]


def split_wraps(points: Sequence[Point], max_jump: float) -> list[list[Point]]:
    """Split a curve where consecutive points jump more than ``max_jump`` in x.

    Curves that cross RA 0h/24h on rectangular and elliptical charts leave one
    edge of the map and re-enter at the other.
    """
    runs: list[list[Point]] = []
    current: list[Point] = []
    for pt in points:
        if current and abs(pt[0] - current[-1][0]) > max_jump:
            runs.append(current)
            current = []
        current.append(pt)
    if current:
        runs.append(current)
    return runs


def star_diameter(magnitude: float | np.ndarray) -> float | np.ndarray:
    """Marker diameter: magnitude -2 maps to 8 px, magnitude 8 to 1 px (linear)."""
    slope = (STAR_DIAMETER_FAINT - STAR_DIAMETER_BRIGHT) / (MAGNITUDE_MAX - MAGNITUDE_MIN)
    return STAR_DIAMETER_BRIGHT + (np.asarray(magnitude) - MAGNITUDE_MIN) * slope


def ecliptic_points(start: float, stop: float, eps: float = ECLIPTIC_EPSILON) -> list[tuple[float, float]]:
    """(RA hours, Dec degrees) along the ecliptic for longitudes in [start, stop)."""
    return [ecliptic_point(float(lon), eps) for lon in np.arange(start, stop, ECLIPTIC_STEP_DEG)]


def ecliptic_plan(chart: Chart) -> list[Polyline]:
    """Ecliptic curve(s) for ``chart``: one full curve, or two halves for two panes."""
    ranges = [(0.0, 360.0 / chart.panes)]
    if chart.panes == 2:
        ranges.append((181.0, 360.0))
    lines: list[Polyline] = []
    max_jump = chart.canvas.usable_width / 2
    for start, stop in ranges:
        pts = [chart.forward(ra, dec) for ra, dec in ecliptic_points(start, stop)]
        if chart.wraps_in_ra:
            runs = split_wraps(pts, max_jump)
        else:
            runs = [pts]
        lines.extend(Polyline(run, ROLE_ECLIPTIC, width=2.0) for run in runs if len(run) > 1)
    return lines


def stars_plan(chart: Chart, stars: Iterable[Star], magnitude_limit: float) -> list[Circle]:
    """Filled circles for stars with magnitude <= magnitude_limit."""
    shown = [s for s in stars if s.magnitude <= magnitude_limit]
    if not shown:
        return []
    diameters = star_diameter(np.array([s.magnitude for s in shown], dtype=np.float64))
    circles: list[Circle] = []
    for star, diam in zip(shown, np.atleast_1d(diameters)):
        x, y = chart.forward(star.ra, star.dec)
        circles.append(Circle(x, y, float(diam), ROLE_STAR))
    return circles


def solar_system_plan(chart: Chart, positions: Iterable[BodyPosition]) -> list[PlotItem]:
    """A small circle and a name label for each body position."""
    items: list[PlotItem] = []
    dx, dy = LABEL_OFFSET
    for pos in positions:
        x, y = chart.forward(pos.ra, pos.dec)
        items.append(Circle(x, y, SOLAR_BODY_DIAMETER, ROLE_BODY))
        items.append(Label(x + dx, y + dy, pos.name, ROLE_BODY))
    return items


def hover_label_text(star: Star) -> str:
    """Multi-line identification text for a star under the pointer."""
    return (
        f'{star.name}\n'
        f'{SYMB_ALPHA}={format_ra(star.ra)}\n'
        f'{SYMB_DELTA}={format_dec(star.dec)}\n'
        f'Mag={star.magnitude}'
    )


def hover_plan(chart: Chart, star: Star) -> Label:
    """Label placed to the right of the identified star."""
    x, y = chart.forward(star.ra, star.dec)
    return Label(x + HOVER_LABEL_OFFSET, y, hover_label_text(star), ROLE_MOUSE)
