"""Chart projections between sky (RA hours, Dec degrees) and canvas pixels.

Three variants share the ``Chart`` interface:

- ``RectangularChart``: linear plate carrée over the usable area.
- ``EllipticalChart``: sinusoidal-like full-sky ellipse centred on the canvas.
- ``PolarChart``: two azimuthal-equidistant domes, north pole on the left half
  of the canvas and south pole on the right half.

``forward`` and ``inverse`` both use canvas pixel coordinates (origin top-left,
y downward), so ``inverse(*forward(ra, dec))`` returns ``(ra, dec)`` everywhere in
the chart's valid domain. Each chart also lays out its own frame and grid as
plot-plan items.
"""

from __future__ import annotations

import abc
import logging
import math
from dataclasses import dataclass

import numpy as np

from skychart.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEG_SUP,
    DEGREES_PER_CIRCLE,
    DEGREES_PER_HOUR_RA,
    HANG_SUP,
    HOURS_PER_DAY,
    INVALID_DEC,
    INVALID_RA,
    POLE_RADIUS_RATIO,
    X_MARGIN,
    Y_MARGIN,
)
from skychart.rendering.plot_plan import (
    ROLE_FRAME,
    ROLE_GRID,
    ROLE_SKY,
    Circle,
    Label,
    PlotItem,
    Polyline,
)

logger = logging.getLogger(__name__)

CHART_TYPES = ('rectangular', 'elliptical', 'polar')


@dataclass(frozen=True)
class Canvas:
    """Drawing surface size and margins, in pixels."""

    width: float = DEFAULT_CANVAS_WIDTH
    height: float = DEFAULT_CANVAS_HEIGHT
    x_margin: float = X_MARGIN
    y_margin: float = Y_MARGIN

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.x_margin

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.y_margin

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def contains(self, x: float, y: float) -> bool:
        """True if (x, y) lies on the canvas."""
        return 0 <= x < self.width and 0 <= y < self.height


class Chart(abc.ABC):
    """Common chart state: canvas, scale factors and number of panes."""

    name = 'chart'
    wraps_in_ra = True

    def __init__(self, canvas: Canvas | None = None) -> None:
        self.canvas = canvas or Canvas()
        self.sx = self.canvas.usable_width / HOURS_PER_DAY
        self.sy = 1.0
        self.panes = 1

    @abc.abstractmethod
    def forward(self, ra: float, dec: float) -> tuple[float, float]:
        """Project (RA hours, Dec degrees) to canvas (x, y)."""

    @abc.abstractmethod
    def inverse(self, x: float, y: float) -> tuple[float, float]:
        """Unproject canvas (x, y) to (RA hours, Dec degrees)."""

    def frame(self) -> list[PlotItem]:
        """Canvas border; variants add their sky background."""
        c = self.canvas
        border = [(0.0, 0.0), (c.width, 0.0), (c.width, c.height), (0.0, c.height)]
        return [Polyline(border, ROLE_FRAME, closed=True, width=3.0)]

    @abc.abstractmethod
    def grid(self) -> list[PlotItem]:
        """Coordinate grid lines and labels."""

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.canvas.width}x{self.canvas.height})'


class RectangularChart(Chart):
    """RA decreasing left to right, Dec +90 at top; origin at the usable area's corner."""

    name = 'rectangular'

    def __init__(self, canvas: Canvas | None = None) -> None:
        super().__init__(canvas)
        self.sx = self.canvas.usable_width / HOURS_PER_DAY
        self.sy = self.canvas.usable_height / 180.0

    def forward(self, ra: float, dec: float) -> tuple[float, float]:
        x = (HOURS_PER_DAY - ra) * self.sx
        y = (90.0 - dec) * self.sy
        return (x + self.canvas.x_margin, y + self.canvas.y_margin)

    def inverse(self, x: float, y: float) -> tuple[float, float]:
        ra = HOURS_PER_DAY - (x - self.canvas.x_margin) / self.sx
        dec = 90.0 - (y - self.canvas.y_margin) / self.sy
        return (ra, dec)

    def frame(self) -> list[PlotItem]:
        items = super().frame()
        x0, y0 = self.forward(HOURS_PER_DAY, 90.0)
        x1, y1 = self.forward(0.0, -90.0)
        sky = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
        items.append(Polyline(sky, ROLE_SKY, closed=True, filled=True))
        return items

    def grid(self) -> list[PlotItem]:
        items: list[PlotItem] = []
        for h in range(1, 24):
            x1, y1 = self.forward(h, -90.0)
            x2, y2 = self.forward(h, 90.0)
            items.append(Polyline([(x1, y1), (x2, y2)], ROLE_GRID))
            items.append(Label(x1 - 6, y1 - 5, f'{h}{HANG_SUP}', ROLE_GRID))
        for d in range(-80, 90, 20):
            x1, y1 = self.forward(HOURS_PER_DAY, d)
            x2, y2 = self.forward(0.0, d)
            items.append(Polyline([(x1, y1), (x2, y2)], ROLE_GRID))
            items.append(Label(x1, y1 + 3, f'{d}{DEG_SUP}', ROLE_GRID))
        return items


class EllipticalChart(Chart):
    """Full sky in an ellipse centred on the canvas; RA 12h on the central meridian."""

    name = 'elliptical'

    def __init__(self, canvas: Canvas | None = None, panes: int = 1) -> None:
        """Create the chart; ``panes`` (1 or 2) only changes how the ecliptic is split."""
        super().__init__(canvas)
        if panes not in (1, 2):
            raise ValueError(f'Invalid number of panes {panes}; expected 1 or 2')
        self.panes = panes
        self.sx = self.canvas.usable_width / HOURS_PER_DAY
        self.sy = self.canvas.usable_height / 2.0

    def forward(self, ra: float, dec: float) -> tuple[float, float]:
        cx, cy = self.canvas.center
        dec_r = math.radians(dec)
        x = (12.0 - ra) * self.sx * math.cos(dec_r)
        y = -self.sy * math.sin(dec_r)
        return (x + cx, y + cy)

    def inverse(self, x: float, y: float) -> tuple[float, float]:
        """Dec from the vertical offset, then RA using that Dec.

        Points outside the ellipse extrapolate: Dec clamps to +/-90 and RA wraps
        into [0, 24).
        """
        cx, cy = self.canvas.center
        dx = x - cx
        dy = cy - y
        sin_dec = max(-1.0, min(1.0, dy / self.sy))
        dec_r = math.asin(sin_dec)
        cos_dec = math.cos(dec_r)
        if cos_dec < 1e-12:
            return (12.0, math.degrees(dec_r))
        ra = (12.0 - dx / (self.sx * cos_dec)) % HOURS_PER_DAY
        return (ra, math.degrees(dec_r))

    def _meridian(self, ra: float, step: int = 5) -> list[tuple[float, float]]:
        return [self.forward(ra, float(dec)) for dec in np.arange(-90, 91, step)]

    def frame(self) -> list[PlotItem]:
        items = super().frame()
        outline = self._meridian(HOURS_PER_DAY) + self._meridian(0.0)[::-1]
        items.append(Polyline(outline, ROLE_SKY, closed=True, filled=True))
        return items

    def grid(self) -> list[PlotItem]:
        items: list[PlotItem] = []
        for ra in range(0, 25, 2):
            items.append(Polyline(self._meridian(ra), ROLE_GRID))
            x, _ = self.forward(ra, 0.0)
            items.append(Label(x, self.canvas.center[1] - 1, f'{ra}{HANG_SUP}', ROLE_GRID, centered=True))
        for dec in range(-60, 61, 30):
            pts = [self.forward(float(ra), dec) for ra in np.arange(0, 25, 2)]
            items.append(Polyline(pts, ROLE_GRID))
        return items


@dataclass(frozen=True)
class Pole:
    """One polar dome: centre, outer diameter and label ('NP' or 'SP')."""

    x: float
    y: float
    diameter: float
    name: str

    @property
    def south(self) -> bool:
        return self.name == 'SP'

    @property
    def radius(self) -> float:
        """Radius of the sky dome (Dec 0 circle)."""
        return self.diameter * POLE_RADIUS_RATIO


class PolarChart(Chart):
    """North dome on the left half, south dome on the right half of the canvas.

    Radial distance from the pole is linear in declination. Points outside a
    dome have no sky position: ``inverse`` returns (-1, -1).
    """

    name = 'polar'
    wraps_in_ra = False

    def __init__(self, canvas: Canvas | None = None) -> None:
        super().__init__(canvas)
        self.sx = self.canvas.usable_width / HOURS_PER_DAY
        self.sy = self.canvas.usable_height / 2.0
        w, h = self.canvas.width, self.canvas.height
        diameter = self.canvas.usable_height
        self.north_pole = Pole(w / 4, h / 2, diameter, 'NP')
        self.south_pole = Pole(3 * w / 4, h / 2, diameter, 'SP')
        self.panes = 2

    @property
    def poles(self) -> tuple[Pole, Pole]:
        return (self.north_pole, self.south_pole)

    def forward(self, ra: float, dec: float) -> tuple[float, float]:
        pole = self.south_pole if dec < 0 else self.north_pole
        r = pole.radius
        d = r - abs(dec) * r / 90.0
        angle = math.radians(ra * DEGREES_PER_HOUR_RA)
        return (pole.x - d * math.cos(angle), pole.y + d * math.sin(angle))

    def inverse(self, x: float, y: float) -> tuple[float, float]:
        pole = self.north_pole if x < self.canvas.width / 2 else self.south_pole
        r = pole.radius
        dx = pole.x - x
        dy = y - pole.y
        dist = math.hypot(dx, dy)
        if dist >= r:
            return (INVALID_RA, INVALID_DEC)
        dec = (r - dist) * 90.0 / r
        ra = (math.degrees(math.atan2(dy, dx)) % DEGREES_PER_CIRCLE) / DEGREES_PER_HOUR_RA
        return (ra, -dec if pole.south else dec)

    def frame(self) -> list[PlotItem]:
        items = super().frame()
        for pole in self.poles:
            items.append(Circle(pole.x, pole.y, pole.diameter, ROLE_FRAME, filled=False))
            items.append(Circle(pole.x, pole.y, pole.diameter * 0.95, ROLE_SKY))
        return items

    def grid(self) -> list[PlotItem]:
        items: list[PlotItem] = []
        for pole in self.poles:
            items.extend(self._pole_grid(pole))
        return items

    def _pole_grid(self, pole: Pole) -> list[PlotItem]:
        dome = pole.diameter * 0.95
        items: list[PlotItem] = [Label(pole.x, pole.y, pole.name, ROLE_GRID, centered=True)]
        sign = '-' if pole.south else ''
        for de in range(20, 90, 20):
            dm = dome - de / 90 * dome
            items.append(Circle(pole.x, pole.y, dm, ROLE_GRID, filled=False))
            items.append(Label(pole.x, pole.y + dm / 2 - 2, f'{sign}{de}{DEG_SUP}', ROLE_GRID, centered=True))
        r1 = pole.diameter / 25
        r2 = 9.5 * pole.diameter / 20
        for h in range(24):
            angle = math.radians(h * DEGREES_PER_HOUR_RA)
            ux, uy = -math.cos(angle), math.sin(angle)
            tick = [(pole.x + r1 * ux, pole.y + r1 * uy), (pole.x + r2 * ux, pole.y + r2 * uy)]
            items.append(Polyline(tick, ROLE_GRID))
            lx, ly = pole.x + (r2 + 8) * ux, pole.y + (r2 + 8) * uy
            items.append(Label(lx, ly, f'{h}{HANG_SUP}', ROLE_GRID, centered=True))
        return items


_CHART_CLASSES: dict[str, type[Chart]] = {
    'rectangular': RectangularChart,
    'elliptical': EllipticalChart,
    'polar': PolarChart,
}


def make_chart(chart_type: str, canvas: Canvas | None = None) -> Chart:
    """Return a chart of the named type ('rectangular', 'elliptical' or 'polar').

    Raises:
        ValueError: If the chart type is unknown.
    """
    key = chart_type.strip().lower()
    cls = _CHART_CLASSES.get(key)
    if cls is None:
        raise ValueError(f'Unknown chart type {chart_type!r}; expected one of {", ".join(CHART_TYPES)}')
    logger.debug('Creating %s chart', key)
    return cls(canvas)
