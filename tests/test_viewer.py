"""Tests for chart plan assembly, pointer identification and viewer output."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from skychart.params import ViewerParams, clamp_magnitude, parse_chart_type, viewer_params_from_env
from skychart.rendering.charts import Canvas, make_chart
from skychart.rendering.plot_plan import (
    ROLE_BODY,
    ROLE_ECLIPTIC,
    ROLE_GRID,
    ROLE_MOUSE,
    ROLE_STAR,
    Circle,
)
from skychart.stars import StarCatalog, load_catalog
from skychart.viewer import build_chart_plan, identify_star, run_viewer


@pytest.fixture
def catalog() -> StarCatalog:
    return load_catalog(
        [
            ('Alpha', 6.05 * 15, 20.5, 1.0),
            ('Beta', 18.35 * 15, -30.5, 3.5),
            ('Gamma', 2.25 * 15, 60.5, 0.5),
        ]
    )


@pytest.mark.parametrize('name', ['rectangular', 'elliptical', 'polar'])
def test_identify_star_under_pointer(name: str, catalog: StarCatalog) -> None:
    """The star drawn at a canvas point is identified from that point."""
    chart = make_chart(name)
    for star in catalog.stars:
        x, y = chart.forward(star.ra, star.dec)
        assert identify_star(chart, catalog, x, y, 6.0) == star


def test_identify_star_magnitude_limit(catalog: StarCatalog) -> None:
    """Stars fainter than the cutoff are not identified."""
    chart = make_chart('rectangular')
    x, y = chart.forward(18.35, -30.5)
    assert identify_star(chart, catalog, x, y, 3.0) is None


def test_identify_star_empty_sky(catalog: StarCatalog) -> None:
    """Points with no star bucket report no hit."""
    chart = make_chart('rectangular')
    x, y = chart.forward(12.0, 0.0)
    assert identify_star(chart, catalog, x, y, 8.0) is None


@pytest.mark.parametrize('point', [(-10.0, 100.0), (1200.0, 100.0), (100.0, 600.0)])
def test_identify_star_off_canvas(point: tuple[float, float], catalog: StarCatalog) -> None:
    """Pointer positions outside the canvas never hit."""
    assert identify_star(make_chart('rectangular'), catalog, *point, 8.0) is None


def test_identify_star_outside_polar_dome(catalog: StarCatalog) -> None:
    """The corners of the polar chart are not sky."""
    assert identify_star(make_chart('polar'), catalog, 3.0, 3.0, 8.0) is None


def test_identify_star_right_margin_wrap() -> None:
    """Margin pixels past RA 0 do not alias to stars just above RA 0."""
    catalog = load_catalog([('Edge', 0.05 * 15, 10.5, 1.0)])
    chart = make_chart('rectangular', Canvas(1000, 500))
    (edge,) = catalog.stars
    x, y = chart.forward(edge.ra, edge.dec)
    assert identify_star(chart, catalog, x, y, 6.0) == edge

    margin_x = chart.canvas.width - 5.0
    ra, _ = chart.inverse(margin_x, y)
    assert -0.1 < ra < 0.0
    assert identify_star(chart, catalog, margin_x, y, 6.0) is None


def test_build_chart_plan_layers(catalog: StarCatalog) -> None:
    """Frame, grid, ecliptic, stars, bodies and hover label are laid out."""
    chart = make_chart('rectangular')
    x, y = chart.forward(6.05, 20.5)
    params = ViewerParams(magnitude=4.0, time=datetime(2024, 3, 20, 3, 6), pointer=(x, y))
    plan = build_chart_plan(params, catalog)
    assert plan.by_role(ROLE_GRID)
    assert plan.by_role(ROLE_ECLIPTIC)
    bodies = [i for i in plan.by_role(ROLE_BODY) if isinstance(i, Circle)]
    assert len(bodies) == 9
    (hover,) = plan.by_role(ROLE_MOUSE)
    assert hover.text.startswith('Alpha\n')
    assert plan.items[0].role == 'frame'


def test_build_chart_plan_magnitude_cutoff(catalog: StarCatalog) -> None:
    """Stars fainter than the magnitude cutoff are not drawn."""
    plan = build_chart_plan(ViewerParams(magnitude=2.0, time=None), catalog)
    assert len(plan.by_role(ROLE_STAR)) == 2
    plan = build_chart_plan(ViewerParams(magnitude=4.0, time=None), catalog)
    assert len(plan.by_role(ROLE_STAR)) == 3


def test_build_chart_plan_toggles(catalog: StarCatalog) -> None:
    """Disabled layers are left out; no time means no solar system."""
    params = ViewerParams(
        chart_type='elliptical',
        show_grid=False,
        show_ecliptic=False,
        show_solar_system=True,
        time=None,
    )
    plan = build_chart_plan(params, catalog)
    assert not plan.by_role(ROLE_GRID)
    assert not plan.by_role(ROLE_ECLIPTIC)
    assert not plan.by_role(ROLE_BODY)
    assert not plan.by_role(ROLE_MOUSE)


def test_build_chart_plan_custom_canvas(catalog: StarCatalog) -> None:
    """The plan takes the size of the chart canvas."""
    params = ViewerParams(chart_type='polar', width=800, height=400)
    plan = build_chart_plan(params, catalog, make_chart('polar', Canvas(800, 400)))
    assert (plan.width, plan.height) == (800, 400)


def test_run_viewer_postscript(tmp_path: Path, catalog: StarCatalog) -> None:
    """A .ps output path is written as PostScript."""
    out = tmp_path / 'sky.ps'
    plan = run_viewer(ViewerParams(chart_type='polar'), out, catalog)
    assert plan.items
    assert out.read_text(encoding='utf-8').startswith('%!PS')


def test_run_viewer_png(tmp_path: Path, catalog: StarCatalog) -> None:
    """Other suffixes are written through matplotlib."""
    out = tmp_path / 'sky.png'
    run_viewer(ViewerParams(time=datetime(2000, 1, 1, 12)), out, catalog)
    assert out.stat().st_size > 0


def test_run_viewer_reads_catalog(tmp_path: Path) -> None:
    """Without a catalog object the CSV named in the params is read."""
    csv_path = tmp_path / 'stars.csv'
    csv_path.write_text('Vega,HR 7001,_,Lyr,alf,_,0.03,279.234735,38.783689,2016-06-30\n')
    out = tmp_path / 'sky.eps'
    plan = run_viewer(ViewerParams(catalog_path=str(csv_path)), out)
    assert len(plan.circles) == 1


def test_run_viewer_without_catalog() -> None:
    """No catalog object and no catalog path is an error."""
    with pytest.raises(ValueError):
        run_viewer(ViewerParams(), 'unused.ps')


def test_viewer_params_validation() -> None:
    """Chart names accept prefixes; bad names and sizes raise ValueError."""
    assert ViewerParams(chart_type='Ell').chart_type == 'elliptical'
    assert parse_chart_type('polar') == 'polar'
    with pytest.raises(ValueError):
        ViewerParams(chart_type='globe')
    with pytest.raises(ValueError):
        ViewerParams(color_scheme='neon')
    with pytest.raises(ValueError):
        ViewerParams(width=0)


def test_clamp_magnitude() -> None:
    """Magnitude cutoffs are limited to [-2, 8]."""
    assert clamp_magnitude(10.0) == 8.0
    assert clamp_magnitude(-3.0) == -2.0
    assert clamp_magnitude(4.5) == 4.5


def test_viewer_params_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables set the defaults; bad values fall back."""
    monkeypatch.setenv('SKYCHART_CHART', 'polar')
    monkeypatch.setenv('SKYCHART_WIDTH', '640')
    monkeypatch.setenv('SKYCHART_HEIGHT', '320')
    monkeypatch.setenv('SKYCHART_MAGNITUDE', '5.5')
    monkeypatch.setenv('SKYCHART_COLORS', 'purple')
    monkeypatch.setenv('SKYCHART_CATALOG', '/data/stars.csv')
    params = viewer_params_from_env()
    assert params.chart_type == 'polar'
    assert (params.width, params.height) == (640, 320)
    assert params.magnitude == 5.5
    assert params.color_scheme == 'blue'
    assert params.catalog_path == '/data/stars.csv'
