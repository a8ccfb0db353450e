"""CLI entry point: skychart chart|ephemeris|calendar|easter|identify|project subcommands."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from typing import NoReturn, cast

from skychart.angle_utils import dms_string, parse_angle
from skychart.bodies import SOLAR_SYSTEM, parse_body
from skychart.calendar_math import (
    day_number,
    day_number_from_datetime,
    gauss_easter,
    julian_day,
    knuth_easter,
    modified_julian_day,
    weekday,
)
from skychart.config import get_catalog_path
from skychart.constants import INVALID_EASTER, INVALID_JD
from skychart.ephemeris import EphemerisContext
from skychart.params import ViewerParams, viewer_params_from_env
from skychart.record import Record
from skychart.time_utils import parse_datetime
from skychart.viewer import chart_for_params, identify_star, load_catalog_file, run_viewer

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ('Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday')


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or SKYCHART_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('SKYCHART_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )
    logging.getLogger('matplotlib').setLevel(logging.WARNING)


def _parse_time(value: str | None) -> datetime:
    """Return the parsed --time value, or the current UTC time when omitted.

    Raises:
        ValueError: If the text is not a recognised date/time.
    """
    if value is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValueError(f'Invalid time {value!r}')
    return parsed


def _chart_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Render a sky chart (chart subcommand).

    Parameters:
        parser: Argument parser (unused).
        args: Parsed args; chart type, canvas, magnitude, toggles, output.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    defaults = viewer_params_from_env()
    try:
        params = ViewerParams(
            chart_type=args.chart or defaults.chart_type,
            width=args.width or defaults.width,
            height=args.height or defaults.height,
            magnitude=args.magnitude if args.magnitude is not None else defaults.magnitude,
            show_grid=not args.no_grid,
            show_ecliptic=not args.no_ecliptic,
            show_solar_system=not args.no_solar_system,
            color_scheme=args.colors or defaults.color_scheme,
            time=None if args.no_solar_system else _parse_time(args.time),
            pointer=tuple(args.pointer) if args.pointer else None,
            catalog_path=args.catalog or defaults.catalog_path,
        )
        plan = run_viewer(params, args.output)
    except (ValueError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    logger.info('Chart %s: %d items', params.chart_type, len(plan.items))
    return 0


def _ephemeris_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print RA/Dec of the Sun, Moon and planets (ephemeris subcommand).

    Returns:
        Exit code 0 on success, 1 on error.
    """
    try:
        when = _parse_time(args.time)
        bodies = [parse_body(b) for b in args.bodies] if args.bodies else list(SOLAR_SYSTEM)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    d = day_number_from_datetime(when)
    context = EphemerisContext()
    print(f'# {when.isoformat(sep=" ")} UTC  d = {d:.5f}')
    rec = Record()
    rec.append('Body', 8).append('RA', 14).append('Dec', 14).append('r', 10, '>')
    rec.write(sys.stdout)
    for body in bodies:
        pos = context.position(body, d)
        rec.append(pos.name, 8)
        rec.append(dms_string(pos.ra, 'hms'), 14)
        rec.append(dms_string(pos.dec, 'dms'), 14)
        rec.append(f'{pos.distance:.5f}', 10, '>')
        rec.write(sys.stdout)
    return 0


def _calendar_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print JD, MJD, weekday and day number of a date (calendar subcommand)."""
    jd = julian_day(args.year, args.month, args.day)
    if jd == INVALID_JD:
        print(f'Error: Invalid date {args.year}-{args.month}-{args.day}', file=sys.stderr)
        return 1
    print(f'JD          {jd:.5f}')
    # MJD and weekday are undefined before JD 0 even though the date itself is valid.
    mjd = modified_julian_day(args.year, args.month, args.day)
    print('MJD         ' + ('undefined' if mjd == INVALID_JD else f'{mjd:.5f}'))
    wd = weekday(args.year, args.month, args.day)
    print('Weekday     ' + ('undefined' if wd < 0 else WEEKDAY_NAMES[wd]))
    if float(args.day).is_integer():
        print(f'Day number  {day_number(args.year, args.month, int(args.day)):.5f}')
    return 0


def _easter_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print the Gregorian Easter date of a year (easter subcommand)."""
    compute = gauss_easter if args.algorithm == 'gauss' else knuth_easter
    result = compute(args.year)
    if result == INVALID_EASTER:
        print(f'Error: Year {args.year} out of range for {args.algorithm}', file=sys.stderr)
        return 1
    month, day = result
    print(f'{args.year:04d}-{month:02d}-{day:02d}')
    return 0


def _canvas_params(args: argparse.Namespace) -> ViewerParams:
    """Return viewer parameters from the shared canvas options, falling back to env.

    Raises:
        ValueError: If the chart type, size or magnitude is invalid.
    """
    defaults = viewer_params_from_env()
    return ViewerParams(
        chart_type=args.chart or defaults.chart_type,
        width=args.width or defaults.width,
        height=args.height or defaults.height,
        magnitude=args.magnitude if args.magnitude is not None else defaults.magnitude,
        catalog_path=args.catalog or defaults.catalog_path,
    )


def _identify_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Name the star under a canvas point (identify subcommand)."""
    try:
        params = _canvas_params(args)
        catalog = load_catalog_file(params.catalog_path or get_catalog_path())
    except (ValueError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    chart = chart_for_params(params)
    star = identify_star(chart, catalog, args.x, args.y, params.magnitude)
    if star is None:
        print('No star')
        return 0
    print(f'{star.name}  RA {dms_string(star.ra, "hms")}  Dec {dms_string(star.dec, "dms")}  '
          f'Mag {star.magnitude}')
    return 0


def _project_cmd(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    """Print the canvas point of an RA/Dec position (project subcommand).

    RA is read as hours and Dec as degrees, each as one number or as
    sexagesimal parts ("6 45 08.9", "-16 42 58", "6:45:08.9").

    Returns:
        Exit code 0 on success, 1 on error.
    """
    ra = parse_angle(args.ra)
    dec = parse_angle(args.dec)
    if ra is None or not 0.0 <= ra < 24.0:
        print(f'Error: Invalid RA {args.ra!r}', file=sys.stderr)
        return 1
    if dec is None or not -90.0 <= dec <= 90.0:
        print(f'Error: Invalid Dec {args.dec!r}', file=sys.stderr)
        return 1
    try:
        params = _canvas_params(args)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    x, y = chart_for_params(params).forward(ra, dec)
    print(f'{x:.2f} {y:.2f}')
    return 0


def _add_canvas_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        '--chart',
        type=str,
        default=None,
        help='rectangular, elliptical or polar; env: SKYCHART_CHART',
    )
    p.add_argument('--width', type=int, default=None, help='Canvas width; env: SKYCHART_WIDTH')
    p.add_argument('--height', type=int, default=None, help='Canvas height; env: SKYCHART_HEIGHT')
    p.add_argument(
        '--magnitude',
        type=float,
        default=None,
        help='Faintest magnitude shown (-2..8); env: SKYCHART_MAGNITUDE',
    )
    p.add_argument('--catalog', type=str, default=None, help='Star CSV; env: SKYCHART_CATALOG')
    p.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')


def main() -> int:
    """Entry point for skychart CLI.

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='skychart',
        description='Star charts, solar-system positions and calendar utilities.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    chart_parser = subparsers.add_parser('chart', help='Draw a star chart')
    _add_canvas_args(chart_parser)
    chart_parser.add_argument('--time', type=str, default=None, help='UTC time (default: now)')
    chart_parser.add_argument('--no-grid', action='store_true', help='Hide coordinate grid')
    chart_parser.add_argument('--no-ecliptic', action='store_true', help='Hide ecliptic')
    chart_parser.add_argument(
        '--no-solar-system', action='store_true', help='Hide Sun, Moon and planets'
    )
    chart_parser.add_argument(
        '--colors', type=str, default=None, help='dark, light or blue; env: SKYCHART_COLORS'
    )
    chart_parser.add_argument(
        '--pointer',
        type=float,
        nargs=2,
        metavar=('X', 'Y'),
        default=None,
        help='Label the star under this canvas point',
    )
    chart_parser.add_argument(
        '-o', '--output', type=str, required=True, help='Output file (.ps/.eps or .png/.svg/.pdf)'
    )
    chart_parser.set_defaults(func=_chart_cmd)

    ephem_parser = subparsers.add_parser('ephemeris', help='Solar-system RA/Dec table')
    ephem_parser.add_argument('--time', type=str, default=None, help='UTC time (default: now)')
    ephem_parser.add_argument(
        '--bodies', nargs='*', default=None, help='Body names (default: all)'
    )
    ephem_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    ephem_parser.set_defaults(func=_ephemeris_cmd)

    cal_parser = subparsers.add_parser('calendar', help='Julian day and weekday of a date')
    cal_parser.add_argument('year', type=int)
    cal_parser.add_argument('month', type=int)
    cal_parser.add_argument('day', type=float)
    cal_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    cal_parser.set_defaults(func=_calendar_cmd)

    easter_parser = subparsers.add_parser('easter', help='Gregorian Easter date')
    easter_parser.add_argument('year', type=int)
    easter_parser.add_argument(
        '--algorithm', choices=('gauss', 'knuth'), default='knuth', help='Computus variant'
    )
    easter_parser.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')
    easter_parser.set_defaults(func=_easter_cmd)

    ident_parser = subparsers.add_parser('identify', help='Star under a canvas point')
    ident_parser.add_argument('x', type=float)
    ident_parser.add_argument('y', type=float)
    _add_canvas_args(ident_parser)
    ident_parser.set_defaults(func=_identify_cmd)

    project_parser = subparsers.add_parser('project', help='Canvas point of an RA/Dec position')
    project_parser.add_argument('ra', type=str, help='RA in hours, e.g. "6 45 08.9"')
    project_parser.add_argument('dec', type=str, help='Dec in degrees, e.g. "-16 42 58"')
    _add_canvas_args(project_parser)
    project_parser.set_defaults(func=_project_cmd)

    args = parser.parse_args()
    _configure_logging(verbose=args.verbose)
    return cast(int, args.func(parser, args))


def cli_main() -> NoReturn:
    """Entry point for console_scripts; calls main() and exits with its return code."""
    sys.exit(main())


if __name__ == '__main__':
    sys.exit(main())
