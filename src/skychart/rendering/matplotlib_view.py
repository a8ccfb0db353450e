"""Matplotlib rendering of a plot plan (PNG, SVG or PDF by file suffix)."""

from __future__ import annotations

import logging
from pathlib import Path

from skychart.rendering.colors import get_scheme
from skychart.rendering.plot_plan import Circle, Label, PlotPlan, Polyline

logger = logging.getLogger(__name__)

DPI = 100
FONT_SIZE = 7


def draw_plan_mpl(plan: PlotPlan, output_path: str | Path, scheme: str = 'blue') -> None:
    """Render ``plan`` to ``output_path`` with matplotlib (Agg backend).

    One data unit is one canvas pixel; the y axis points down as on the canvas.
    """
    import matplotlib

    matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    from matplotlib import patches

    colors = get_scheme(scheme)
    fig = plt.figure(figsize=(plan.width / DPI, plan.height / DPI), dpi=DPI)
    fig.patch.set_facecolor(colors['background'])
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0, plan.width)
    ax.set_ylim(plan.height, 0)
    ax.set_aspect('equal')
    ax.set_axis_off()

    for zorder, item in enumerate(plan.items):
        color = colors.get(item.role, colors['frame'])
        if isinstance(item, Polyline):
            if item.filled or item.closed:
                ax.add_patch(
                    patches.Polygon(
                        item.points,
                        closed=True,
                        fill=item.filled,
                        facecolor=color if item.filled else 'none',
                        edgecolor=color,
                        linewidth=item.width,
                        zorder=zorder,
                    )
                )
            elif len(item.points) > 1:
                xs, ys = zip(*item.points)
                ax.plot(xs, ys, color=color, linewidth=item.width, zorder=zorder)
        elif isinstance(item, Circle):
            ax.add_patch(
                patches.Circle(
                    (item.x, item.y),
                    item.diameter / 2,
                    fill=item.filled,
                    facecolor=color if item.filled else 'none',
                    edgecolor=color,
                    linewidth=item.width if not item.filled else 0,
                    zorder=zorder,
                )
            )
        elif isinstance(item, Label):
            ax.text(
                item.x,
                item.y,
                item.text,
                color=color,
                fontsize=FONT_SIZE,
                ha='center' if item.centered else 'left',
                va='baseline',
                zorder=zorder,
            )

    fig.savefig(str(output_path), dpi=DPI, facecolor=fig.get_facecolor())
    plt.close(fig)
    logger.info('Wrote %s (%d items)', output_path, len(plan.items))
