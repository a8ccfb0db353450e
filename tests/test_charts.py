"""Tests for rectangular, elliptical and polar chart projections."""

from __future__ import annotations

import pytest

from skychart.rendering.charts import (
    Canvas,
    EllipticalChart,
    PolarChart,
    RectangularChart,
    make_chart,
)
from skychart.rendering.plot_plan import ROLE_FRAME, ROLE_SKY, Circle, Polyline

RA_VALUES = [0.5, 3.25, 6.0, 11.9, 12.1, 18.75, 23.5]


@pytest.mark.parametrize('ra', [0.0, *RA_VALUES, 24.0])
@pytest.mark.parametrize('dec', [-90.0, -45.5, 0.0, 12.25, 90.0])
def test_rectangular_round_trip(ra: float, dec: float) -> None:
    """inverse(forward(p)) == p over the whole rectangle."""
    chart = RectangularChart()
    assert chart.inverse(*chart.forward(ra, dec)) == pytest.approx((ra, dec), abs=1e-9)


def test_rectangular_corners() -> None:
    """RA 24h / Dec +90 is the top-left corner of the usable area."""
    chart = RectangularChart(Canvas(1000, 500))
    assert chart.forward(24.0, 90.0) == pytest.approx((8.0, 8.0))
    assert chart.forward(0.0, -90.0) == pytest.approx((992.0, 492.0))
    assert chart.forward(12.0, 0.0) == pytest.approx((500.0, 250.0))


@pytest.mark.parametrize('ra', RA_VALUES)
@pytest.mark.parametrize('dec', [-80.0, -30.0, 0.0, 45.0, 85.0])
def test_elliptical_round_trip(ra: float, dec: float) -> None:
    """inverse(forward(p)) == p away from the poles and the 0h seam."""
    chart = EllipticalChart()
    assert chart.inverse(*chart.forward(ra, dec)) == pytest.approx((ra, dec), abs=1e-7)


def test_elliptical_center_and_poles() -> None:
    """RA 12h on the equator is the canvas centre; poles sit on the vertical axis."""
    chart = EllipticalChart(Canvas(1000, 500))
    assert chart.forward(12.0, 0.0) == pytest.approx((500.0, 250.0))
    x, y = chart.forward(3.0, 90.0)
    assert x == pytest.approx(500.0)
    assert y == pytest.approx(8.0)
    ra, dec = chart.inverse(500.0, 8.0)
    assert dec == pytest.approx(90.0)
    assert ra == pytest.approx(12.0)


def test_elliptical_inverse_outside_clamps() -> None:
    """Points above the ellipse clamp to the pole rather than failing."""
    chart = EllipticalChart()
    _, dec = chart.inverse(500.0, 0.0)
    assert dec == pytest.approx(90.0)


@pytest.mark.parametrize('ra', RA_VALUES)
@pytest.mark.parametrize('dec', [-85.0, -40.0, -0.5, 0.5, 30.0, 75.0])
def test_polar_round_trip(ra: float, dec: float) -> None:
    """inverse(forward(p)) == p inside both domes."""
    chart = PolarChart()
    assert chart.inverse(*chart.forward(ra, dec)) == pytest.approx((ra, dec), abs=1e-7)


def test_polar_pole_geometry() -> None:
    """Poles sit at a quarter and three quarters of the width, mid-height."""
    chart = PolarChart(Canvas(1000, 500))
    assert (chart.north_pole.x, chart.north_pole.y) == (250.0, 250.0)
    assert (chart.south_pole.x, chart.south_pole.y) == (750.0, 250.0)
    assert chart.north_pole.name == 'NP'
    assert chart.south_pole.south
    assert chart.north_pole.radius == pytest.approx(0.475 * 484)
    assert chart.forward(5.0, 90.0) == pytest.approx((250.0, 250.0))
    assert chart.forward(5.0, -90.0) == pytest.approx((750.0, 250.0))


def test_polar_ra_zero_points_left() -> None:
    """RA 0h on the north dome lies left of the pole, RA 6h below it."""
    chart = PolarChart(Canvas(1000, 500))
    x0, y0 = chart.forward(0.0, 0.0)
    assert x0 < 250.0
    assert y0 == pytest.approx(250.0)
    x6, y6 = chart.forward(6.0, 45.0)
    assert x6 == pytest.approx(250.0)
    assert y6 > 250.0


@pytest.mark.parametrize('point', [(5.0, 5.0), (995.0, 495.0), (250.0, 2.0), (500.0, 250.0)])
def test_polar_outside_dome_is_sentinel(point: tuple[float, float]) -> None:
    """Points outside both domes have no sky position."""
    chart = PolarChart(Canvas(1000, 500))
    assert chart.inverse(*point) == (-1.0, -1.0)


def test_chart_panes_and_wrapping() -> None:
    """Only the polar chart splits the sky into two panes and never wraps."""
    assert RectangularChart().panes == 1
    assert EllipticalChart().wraps_in_ra
    polar = PolarChart()
    assert polar.panes == 2
    assert not polar.wraps_in_ra


@pytest.mark.parametrize('name', ['rectangular', 'elliptical', 'polar'])
def test_frames_have_border_and_sky(name: str) -> None:
    """Every chart frame has a thick border and a sky background."""
    chart = make_chart(name)
    items = chart.frame()
    border = items[0]
    assert isinstance(border, Polyline)
    assert border.role == ROLE_FRAME
    assert border.width == 3.0
    sky = [i for i in items if i.role == ROLE_SKY]
    assert sky
    assert all(isinstance(i, (Polyline, Circle)) for i in sky)


@pytest.mark.parametrize('name', ['rectangular', 'elliptical', 'polar'])
def test_grid_labels_present(name: str) -> None:
    """Grids contain lines and hour labels."""
    items = make_chart(name).grid()
    labels = [i.text for i in items if hasattr(i, 'text')]
    assert any(text.endswith('ʰ') for text in labels)


def test_make_chart() -> None:
    """make_chart accepts known names and rejects others."""
    chart = make_chart(' Polar ', Canvas(800, 400))
    assert isinstance(chart, PolarChart)
    assert chart.canvas.width == 800
    with pytest.raises(ValueError, match='mercator'):
        make_chart('mercator')


def test_canvas_contains() -> None:
    """Canvas.contains is true only on the drawing surface."""
    canvas = Canvas(1000, 500)
    assert canvas.contains(0, 0)
    assert canvas.contains(999.5, 499.5)
    assert not canvas.contains(-1, 10)
    assert not canvas.contains(1000, 10)
    assert not canvas.contains(10, 500)
    assert canvas.usable_width == 984
    assert canvas.usable_height == 484


def test_elliptical_panes() -> None:
    """Elliptical charts accept one or two panes; the projection is unchanged."""
    one = EllipticalChart()
    two = EllipticalChart(panes=2)
    assert two.panes == 2
    assert two.forward(7.5, 33.0) == one.forward(7.5, 33.0)
    with pytest.raises(ValueError):
        EllipticalChart(panes=3)


def test_elliptical_two_pane_ecliptic() -> None:
    """Two panes draw the ecliptic as two separate halves."""
    from skychart.rendering.plot_plan import ecliptic_plan

    assert len(ecliptic_plan(EllipticalChart(panes=2))) >= 2
