"""Sky chart viewer: plot plan assembly, pointer identification and output."""

from __future__ import annotations

import logging
from pathlib import Path

from skychart.calendar_math import day_number_from_datetime
from skychart.constants import HOURS_PER_DAY, INVALID_DEC, INVALID_RA
from skychart.ephemeris import EphemerisContext, solar_system_positions
from skychart.params import ViewerParams
from skychart.rendering.charts import Canvas, Chart, make_chart
from skychart.rendering.plot_plan import (
    PlotPlan,
    ecliptic_plan,
    hover_plan,
    solar_system_plan,
    stars_plan,
)
from skychart.stars import Star, StarCatalog, load_catalog, read_iau_catalog

logger = logging.getLogger(__name__)

POSTSCRIPT_SUFFIXES = ('.ps', '.eps')


def chart_for_params(params: ViewerParams) -> Chart:
    """Return the chart selected by ``params`` on a canvas of the requested size."""
    return make_chart(params.chart_type, Canvas(params.width, params.height))


def identify_star(
    chart: Chart, catalog: StarCatalog, x: float, y: float, magnitude_limit: float
) -> Star | None:
    """Return the star under canvas point (x, y), or None.

    Points off the canvas or outside the chart's sky never hit: the polar
    sentinel, and margin pixels whose extrapolated RA or Dec leaves
    [0, 24) x [-90, 90].
    """
    if not chart.canvas.contains(x, y):
        return None
    ra, dec = chart.inverse(x, y)
    if ra == INVALID_RA and dec == INVALID_DEC:
        return None
    if not (0.0 <= ra < HOURS_PER_DAY and -90.0 <= dec <= 90.0):
        return None
    star = catalog.index.query(ra, dec, magnitude_limit)
    if star is not None:
        logger.debug('Pointer (%s, %s) -> RA=%.3f Dec=%.3f -> %s', x, y, ra, dec, star.name)
    return star


def build_chart_plan(
    params: ViewerParams,
    catalog: StarCatalog,
    chart: Chart | None = None,
    context: EphemerisContext | None = None,
) -> PlotPlan:
    """Lay out one chart: frame, grid, ecliptic, stars, solar system, hover label."""
    if chart is None:
        chart = chart_for_params(params)
    plan = PlotPlan(chart.canvas.width, chart.canvas.height)
    plan.extend(chart.frame())
    if params.show_grid:
        plan.extend(chart.grid())
    if params.show_ecliptic:
        plan.extend(ecliptic_plan(chart))
    plan.extend(stars_plan(chart, catalog.visible(params.magnitude), params.magnitude))
    if params.show_solar_system and params.time is not None:
        d = day_number_from_datetime(params.time)
        plan.extend(solar_system_plan(chart, solar_system_positions(d, context=context)))
    if params.pointer is not None:
        star = identify_star(chart, catalog, *params.pointer, params.magnitude)
        if star is not None:
            plan.add(hover_plan(chart, star))
    return plan


def load_catalog_file(path: str | Path) -> StarCatalog:
    """Read and index the IAU star CSV at ``path``."""
    return load_catalog(read_iau_catalog(path))


def run_viewer(
    params: ViewerParams,
    output_path: str | Path,
    catalog: StarCatalog | None = None,
) -> PlotPlan:
    """Build the chart for ``params`` and write it to ``output_path``.

    '.ps' and '.eps' files are written as PostScript, other suffixes through
    matplotlib.

    Raises:
        ValueError: If no catalog is given and params has no catalog path.
        OSError: If the catalog cannot be read or the output cannot be written.
    """
    if catalog is None:
        if not params.catalog_path:
            raise ValueError('No star catalog given')
        catalog = load_catalog_file(params.catalog_path)
    plan = build_chart_plan(params, catalog)
    path = Path(output_path)
    if path.suffix.lower() in POSTSCRIPT_SUFFIXES:
        from skychart.rendering.postscript import write_plan

        with path.open('w', encoding='utf-8') as f:
            write_plan(plan, f, params.color_scheme)
    else:
        from skychart.rendering.matplotlib_view import draw_plan_mpl

        draw_plan_mpl(plan, path, params.color_scheme)
    return plan
