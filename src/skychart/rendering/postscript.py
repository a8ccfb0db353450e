"""PostScript output of a plot plan (EPS-style single page, canvas-sized)."""

from __future__ import annotations

import logging
from typing import TextIO

from skychart.rendering.colors import RGB, get_scheme
from skychart.rendering.plot_plan import Circle, Label, PlotPlan, Polyline

logger = logging.getLogger(__name__)

FONT = 'Helvetica'
FONT_SIZE = 10.0


def clip_line(
    xmin: float,
    xmax: float,
    ymin: float,
    ymax: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
) -> tuple[float, float, float, float, bool]:
    """Clip a segment to a rectangle (Liang-Barsky).

    Returns:
        (x1, y1, x2, y2, inside); inside is False when no part of the segment
        lies in the rectangle, in which case the input points are returned.
    """
    dx = x2 - x1
    dy = y2 - y1
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x1 - xmin), (dx, xmax - x1), (-dy, y1 - ymin), (dy, ymax - y1)):
        if p == 0:
            if q < 0:
                return (x1, y1, x2, y2, False)
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return (x1, y1, x2, y2, False)
            t0 = max(t0, t)
        else:
            if t < t0:
                return (x1, y1, x2, y2, False)
            t1 = min(t1, t)
    return (x1 + t0 * dx, y1 + t0 * dy, x1 + t1 * dx, y1 + t1 * dy, True)


def _escape(text: str) -> str:
    return text.replace('\\', '\\\\').replace('(', '\\(').replace(')', '\\)')


class PostScriptFile:
    """PostScript device in canvas pixels (y downward), one point per pixel."""

    def __init__(self, stream: TextIO, width: float, height: float) -> None:
        self._stream = stream
        self._width = width
        self._height = height

    def _emit(self, s: str) -> None:
        self._stream.write(s + '\n')

    def _y(self, y: float) -> float:
        return self._height - y

    def header(self) -> None:
        """Write the document header and the helper procedures."""
        self._emit('%!PS-Adobe-3.0 EPSF-3.0')
        self._emit('%%Creator: skychart')
        self._emit(f'%%BoundingBox: 0 0 {int(self._width)} {int(self._height)}')
        self._emit('%%Pages: 1')
        self._emit('%%Page: 1 1')
        self._emit('save')
        self._emit('1 setlinejoin 1 setlinecap')
        self._emit(f'/{FONT} findfont {FONT_SIZE} scalefont setfont')

    def footer(self) -> None:
        self._emit('restore')
        self._emit('showpage')
        self._emit('%%Trailer')
        self._emit('%%EOF')

    def set_color(self, rgb: RGB) -> None:
        r, g, b = rgb
        self._emit(f'{r:.3f} {g:.3f} {b:.3f} setrgbcolor')

    def set_line_width(self, points: float) -> None:
        self._emit(f'{points} setlinewidth')

    def fill_rect(self, rgb: RGB) -> None:
        """Paint the whole page."""
        self.set_color(rgb)
        self._emit(f'0 0 {self._width} {self._height} rectfill')

    def polyline(self, line: Polyline) -> None:
        """Stroke (or fill) a polyline; open lines are clipped to the canvas."""
        pts = line.points
        if len(pts) < 2:
            return
        if line.closed or line.filled:
            self._emit('newpath')
            self._emit(f'{pts[0][0]:.2f} {self._y(pts[0][1]):.2f} moveto')
            for x, y in pts[1:]:
                self._emit(f'{x:.2f} {self._y(y):.2f} lineto')
            self._emit('closepath')
            self._emit('fill' if line.filled else 'stroke')
            return
        for (xa, ya), (xb, yb) in zip(pts, pts[1:]):
            x1, y1, x2, y2, inside = clip_line(0, self._width, 0, self._height, xa, ya, xb, yb)
            if not inside:
                continue
            self._emit(f'{x1:.2f} {self._y(y1):.2f} moveto {x2:.2f} {self._y(y2):.2f} lineto stroke')

    def circle(self, circle: Circle) -> None:
        x, y = circle.x, self._y(circle.y)
        self._emit(f'newpath {x:.2f} {y:.2f} {circle.diameter / 2:.2f} 0 360 arc closepath')
        self._emit('fill' if circle.filled else 'stroke')

    def text(self, label: Label) -> None:
        """Draw each line of the label, one font size apart."""
        for i, line in enumerate(label.text.split('\n')):
            y = self._y(label.y + i * FONT_SIZE)
            self._emit(f'{label.x:.2f} {y:.2f} moveto')
            if label.centered:
                self._emit(f'({_escape(line)}) dup stringwidth pop -2 div 0 rmoveto show')
            else:
                self._emit(f'({_escape(line)}) show')


def write_plan(plan: PlotPlan, stream: TextIO, scheme: str = 'blue') -> None:
    """Write ``plan`` as PostScript to ``stream`` using colour scheme ``scheme``."""
    colors = get_scheme(scheme)
    ps = PostScriptFile(stream, plan.width, plan.height)
    ps.header()
    ps.fill_rect(colors['background'])
    for item in plan.items:
        ps.set_color(colors.get(item.role, colors['frame']))
        if isinstance(item, Polyline):
            ps.set_line_width(item.width)
            ps.polyline(item)
        elif isinstance(item, Circle):
            ps.set_line_width(item.width)
            ps.circle(item)
        elif isinstance(item, Label):
            ps.text(item)
    ps.footer()
    logger.debug('Wrote PostScript plan with %d items', len(plan.items))
