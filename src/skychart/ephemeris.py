"""Low-precision ephemeris of the Sun, Moon and planets.

Positions follow P. Schlyter's method: evaluate the body's orbital elements at
the day number, solve Kepler's equation, rotate the orbit into the ecliptic,
apply the main perturbations of the Moon, Jupiter, Saturn and Uranus, shift
heliocentric positions to the Earth with the Sun's position and rotate by the
obliquity of the ecliptic. Accuracy is a few arc-minutes for the planets.

Planet positions need the Sun's position for the same day number. The Sun's
parameters are held by an ``EphemerisContext`` keyed by day number and are
recomputed whenever a different day number is requested.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from skychart.bodies import (
    ELEMENTS,
    JUPITER,
    SATURN,
    SOLAR_SYSTEM,
    BodyName,
    ElementSet,
    parse_body,
)
from skychart.constants import (
    DEGREES_PER_CIRCLE,
    DEGREES_PER_HOUR_RA,
    KEPLER_MAX_ITERATIONS,
    KEPLER_TOLERANCE_DEG,
    OBLIQUITY_J2000,
    OBLIQUITY_RATE,
    RAD2DEG,
)

logger = logging.getLogger(__name__)


def _sin(deg: float) -> float:
    return math.sin(math.radians(deg))


def _cos(deg: float) -> float:
    return math.cos(math.radians(deg))


def _atan2(y: float, x: float) -> float:
    return math.degrees(math.atan2(y, x))


def obliquity(d: float) -> float:
    """Obliquity of the ecliptic (degrees) at day number ``d``."""
    return OBLIQUITY_J2000 + OBLIQUITY_RATE * d


def ecliptic_to_equatorial(
    x: float, y: float, z: float, eps: float
) -> tuple[float, float]:
    """Rotate ecliptic rectangular coordinates by obliquity ``eps`` to (RA, Dec).

    Returns:
        RA in hours [0, 24) and Dec in degrees [-90, 90].
    """
    xe = x
    ye = y * _cos(eps) - z * _sin(eps)
    ze = y * _sin(eps) + z * _cos(eps)
    ra = (_atan2(ye, xe) % DEGREES_PER_CIRCLE) / DEGREES_PER_HOUR_RA
    dec = _atan2(ze, math.sqrt(xe * xe + ye * ye))
    return (ra, dec)


def ecliptic_point(longitude: float, eps: float) -> tuple[float, float]:
    """Return (RA hours, Dec degrees) of the ecliptic point at ``longitude``."""
    dec = math.degrees(math.asin(_sin(eps) * _sin(longitude)))
    ra = (_atan2(_cos(eps) * _sin(longitude), _cos(longitude)) % DEGREES_PER_CIRCLE) / (
        DEGREES_PER_HOUR_RA
    )
    return (ra, dec)


@dataclass(frozen=True)
class KeplerSolution:
    """Eccentric anomaly (degrees) and how the iteration ended."""

    eccentric_anomaly: float
    iterations: int
    converged: bool


def solve_kepler(mean_anomaly: float, e: float) -> KeplerSolution:
    """Solve M = E - (180/pi) e sin(E) for the eccentric anomaly E (degrees).

    Newton iteration from E0 = M + (180/pi) e sin(M) (1 + e cos(M)), stopped when
    the correction is at most 0.005 degrees or after 20 iterations. Hitting the
    iteration cap is not an error; the last approximation is returned.

    Parameters:
        mean_anomaly: M in degrees.
        e: Eccentricity.

    Returns:
        KeplerSolution with E, the number of extra iterations and a converged flag.
    """
    e_deg = RAD2DEG * e

    def step(ecc_anom: float) -> float:
        return ecc_anom - (ecc_anom - e_deg * _sin(ecc_anom) - mean_anomaly) / (
            1.0 - e * _cos(ecc_anom)
        )

    e0 = mean_anomaly + e_deg * _sin(mean_anomaly) * (1.0 + e * _cos(mean_anomaly))
    e1 = step(e0)
    iterations = 0
    while abs(e1 - e0) > KEPLER_TOLERANCE_DEG and iterations < KEPLER_MAX_ITERATIONS:
        e0 = e1
        e1 = step(e0)
        iterations += 1
    converged = abs(e1 - e0) <= KEPLER_TOLERANCE_DEG
    if not converged:
        logger.debug('Kepler iteration cap reached: M=%s e=%s E=%s', mean_anomaly, e, e1)
    return KeplerSolution(e1, iterations, converged)


@dataclass(frozen=True)
class SolarParams:
    """Sun quantities reused by the other bodies for one day number.

    The Sun's z coordinate is zero and is not stored.
    """

    day_number: float
    x: float
    y: float
    mean_anomaly: float
    perihelion: float
    mean_longitude: float


@dataclass(frozen=True)
class Perturbation:
    """Corrections (degrees; Earth radii for distance) added to an orbit."""

    longitude: float = 0.0
    latitude: float = 0.0
    distance: float = 0.0


@dataclass(frozen=True)
class BodyPosition:
    """Apparent geocentric position of a body at a day number.

    Parameters:
        body: Body identifier.
        day_number: Day number of the position.
        ra: Right ascension in hours [0, 24).
        dec: Declination in degrees [-90, 90].
        longitude: Corrected ecliptic longitude (degrees; heliocentric for planets).
        latitude: Corrected ecliptic latitude (degrees).
        distance: Orbit radius r (AU; Earth radii for the Moon).
    """

    body: BodyName
    day_number: float
    ra: float
    dec: float
    longitude: float
    latitude: float
    distance: float

    @property
    def name(self) -> str:
        return self.body.value


# A term is (coefficient, sin or cos, argument multipliers, phase in degrees).
_Term = tuple[float, Callable[[float], float], tuple[int, ...], float]


def _series(terms: Iterable[_Term], args: tuple[float, ...]) -> float:
    """Sum coefficient * trig(sum(k * arg) + phase) over the terms."""
    total = 0.0
    for coef, trig, multipliers, phase in terms:
        angle = sum(k * a for k, a in zip(multipliers, args)) + phase
        total += coef * trig(angle)
    return total


# Moon arguments: (Mm, D, F, Ms)
_MOON_LONGITUDE: tuple[_Term, ...] = (
    (-1.274, _sin, (1, -2, 0, 0), 0.0),  # evection
    (+0.658, _sin, (0, 2, 0, 0), 0.0),  # variation
    (-0.186, _sin, (0, 0, 0, 1), 0.0),  # yearly equation
    (-0.059, _sin, (2, -2, 0, 0), 0.0),
    (-0.057, _sin, (1, -2, 0, 1), 0.0),
    (+0.053, _sin, (1, 2, 0, 0), 0.0),
    (+0.046, _sin, (0, 2, 0, -1), 0.0),
    (+0.041, _sin, (1, 0, 0, -1), 0.0),
    (-0.035, _sin, (0, 1, 0, 0), 0.0),  # parallactic equation
    (-0.031, _sin, (1, 0, 0, 1), 0.0),
    (-0.015, _sin, (0, -2, 2, 0), 0.0),
    (+0.011, _sin, (1, -4, 0, 0), 0.0),
)
_MOON_LATITUDE: tuple[_Term, ...] = (
    (-0.173, _sin, (0, -2, 1, 0), 0.0),
    (-0.055, _sin, (1, -2, -1, 0), 0.0),
    (-0.046, _sin, (1, -2, 1, 0), 0.0),
    (+0.033, _sin, (0, 2, 1, 0), 0.0),
    (+0.017, _sin, (2, 0, 1, 0), 0.0),
)
_MOON_DISTANCE: tuple[_Term, ...] = (
    (-0.58, _cos, (1, -2, 0, 0), 0.0),
    (-0.46, _cos, (0, 2, 0, 0), 0.0),
)

# Jupiter and Saturn arguments: (Mj, Ms)
_JUPITER_LONGITUDE: tuple[_Term, ...] = (
    (-0.332, _sin, (2, -5), -67.6),  # great Jupiter-Saturn term
    (-0.056, _sin, (2, -2), 21.0),
    (+0.042, _sin, (3, -5), 21.0),
    (-0.036, _sin, (1, -2), 0.0),
    (+0.022, _cos, (1, -1), 0.0),
    (+0.023, _sin, (2, -3), 52.0),
    (-0.016, _sin, (1, -5), -69.0),
)
_SATURN_LONGITUDE: tuple[_Term, ...] = (
    (+0.812, _sin, (2, -5), -67.6),  # great Jupiter-Saturn term
    (-0.229, _cos, (2, -4), -2.0),
    (+0.119, _sin, (1, -2), -3.0),
    (+0.046, _sin, (2, -6), -69.0),
    (+0.014, _sin, (1, -3), 32.0),
)
_SATURN_LATITUDE: tuple[_Term, ...] = (
    (-0.020, _cos, (2, -4), -2.0),
    (+0.018, _sin, (2, -6), -49.0),
)

# Uranus arguments: (Mj, Ms, Mu)
_URANUS_LONGITUDE: tuple[_Term, ...] = (
    (+0.040, _sin, (0, 1, -2), 6.0),
    (+0.035, _sin, (0, 1, -3), 33.0),
    (-0.015, _sin, (1, 0, -1), 20.0),
)


def _moon_perturbation(el: ElementSet, d: float, sun: SolarParams) -> Perturbation:
    ms = sun.mean_anomaly
    mm = el.mean_anomaly
    ls = ms + sun.perihelion
    lm = mm + el.perihelion + el.node
    elongation = lm - ls
    arg_latitude = lm - el.node
    args = (mm, elongation, arg_latitude, ms)
    return Perturbation(
        longitude=_series(_MOON_LONGITUDE, args),
        latitude=_series(_MOON_LATITUDE, args),
        distance=_series(_MOON_DISTANCE, args),
    )


def _jupiter_perturbation(el: ElementSet, d: float, sun: SolarParams) -> Perturbation:
    args = (el.mean_anomaly, SATURN.mean_anomaly_at(d))
    return Perturbation(longitude=_series(_JUPITER_LONGITUDE, args))


def _saturn_perturbation(el: ElementSet, d: float, sun: SolarParams) -> Perturbation:
    args = (JUPITER.mean_anomaly_at(d), el.mean_anomaly)
    return Perturbation(
        longitude=_series(_SATURN_LONGITUDE, args),
        latitude=_series(_SATURN_LATITUDE, args),
    )


def _uranus_perturbation(el: ElementSet, d: float, sun: SolarParams) -> Perturbation:
    args = (JUPITER.mean_anomaly_at(d), SATURN.mean_anomaly_at(d), el.mean_anomaly)
    return Perturbation(longitude=_series(_URANUS_LONGITUDE, args))


# Bodies absent from this table (Sun, Mercury, Venus, Mars, Neptune) are unperturbed.
PERTURBATIONS: dict[BodyName, Callable[[ElementSet, float, SolarParams], Perturbation]] = {
    BodyName.MOON: _moon_perturbation,
    BodyName.JUPITER: _jupiter_perturbation,
    BodyName.SATURN: _saturn_perturbation,
    BodyName.URANUS: _uranus_perturbation,
}


@dataclass(frozen=True)
class _Orbit:
    """Unperturbed ecliptic position from the orbital elements."""

    elements: ElementSet
    x: float
    y: float
    z: float
    r: float
    longitude: float
    latitude: float


def _orbit_position(body: BodyName, d: float) -> _Orbit:
    """Evaluate elements, solve Kepler's equation and rotate into the ecliptic."""
    el = ELEMENTS[body].at(d)
    a = el.semi_major_axis
    e = el.eccentricity
    ecc_anom = solve_kepler(el.mean_anomaly, e).eccentric_anomaly

    xv = a * (_cos(ecc_anom) - e)
    yv = a * (math.sqrt(1.0 - e * e) * _sin(ecc_anom))
    r = math.sqrt(xv * xv + yv * yv)
    v = _atan2(yv, xv)

    node, incl = el.node, el.inclination
    vw = v + el.perihelion
    x = r * (_cos(node) * _cos(vw) - _sin(node) * _sin(vw) * _cos(incl))
    y = r * (_sin(node) * _cos(vw) + _cos(node) * _sin(vw) * _cos(incl))
    z = r * (_sin(vw) * _sin(incl))
    lon = _atan2(y, x) % DEGREES_PER_CIRCLE
    lat = _atan2(z, math.sqrt(x * x + y * y))
    return _Orbit(el, x, y, z, r, lon, lat)


class EphemerisContext:
    """Holds the Sun's parameters for the most recently requested day number.

    Every body other than the Sun reads the Sun's parameters through
    ``solar_params(d)``, which recomputes them when the cached day number
    differs from ``d``. Computing bodies in any order therefore gives the same
    result as computing the Sun first.
    """

    def __init__(self) -> None:
        self._solar: SolarParams | None = None

    @property
    def solar(self) -> SolarParams | None:
        """Cached Sun parameters, or None before the first computation."""
        return self._solar

    def invalidate(self) -> None:
        """Drop the cached Sun parameters."""
        self._solar = None

    def solar_params(self, d: float) -> SolarParams:
        """Return the Sun's parameters for day number ``d``, computing them if needed."""
        if self._solar is None or self._solar.day_number != d:
            self.position(BodyName.SUN, d)
        assert self._solar is not None
        return self._solar

    def position(self, body: BodyName | str, d: float) -> BodyPosition:
        """Return the apparent geocentric RA/Dec of ``body`` at day number ``d``."""
        body = parse_body(body)
        orbit = _orbit_position(body, d)
        el = orbit.elements
        x, y, z = orbit.x, orbit.y, orbit.z
        lon, lat = orbit.longitude, orbit.latitude

        if body is BodyName.SUN:
            self._solar = SolarParams(
                day_number=d,
                x=x,
                y=y,
                mean_anomaly=el.mean_anomaly,
                perihelion=el.perihelion,
                mean_longitude=(el.perihelion + el.mean_anomaly) % DEGREES_PER_CIRCLE,
            )
            logger.debug('Sun parameters computed for day number %s', d)
            sun = self._solar
        else:
            sun = self.solar_params(d)

        perturb = PERTURBATIONS.get(body)
        if perturb is not None:
            corr = perturb(el, d, sun)
            lon += corr.longitude
            lat += corr.latitude
            # The Moon's distance correction is not applied: its geocentric
            # vector is rebuilt with unit radius.
            radius = 1.0 if body is BodyName.MOON else orbit.r
            x = radius * _cos(lon) * _cos(lat)
            y = radius * _sin(lon) * _cos(lat)
            z = radius * _sin(lat)

        if body is not BodyName.MOON and body is not BodyName.SUN:
            x += sun.x
            y += sun.y

        ra, dec = ecliptic_to_equatorial(x, y, z, obliquity(d))
        return BodyPosition(
            body=body,
            day_number=d,
            ra=ra,
            dec=dec,
            longitude=lon % DEGREES_PER_CIRCLE,
            latitude=lat,
            distance=orbit.r,
        )


def body_position(
    body: BodyName | str, d: float, context: EphemerisContext | None = None
) -> BodyPosition:
    """Return the position of one body; a fresh context is used when none is given."""
    if context is None:
        context = EphemerisContext()
    return context.position(body, d)


def solar_system_positions(
    d: float,
    bodies: Iterable[BodyName] = SOLAR_SYSTEM,
    context: EphemerisContext | None = None,
) -> list[BodyPosition]:
    """Return positions of ``bodies`` (default: Sun, Moon and planets) at ``d``."""
    if context is None:
        context = EphemerisContext()
    return [context.position(body, d) for body in bodies]


def sun_position_simple(jd: float) -> tuple[float, float]:
    """Low-precision Sun RA (hours) and Dec (degrees) from the mean-longitude formula.

    Independent of the orbital-element model; used as a cross-check.
    """
    n = jd - 2451545.0
    mean_lon = (280.460 + 0.9856474 * n) % DEGREES_PER_CIRCLE
    g = (357.528 + 0.9856003 * n) % DEGREES_PER_CIRCLE
    lam = mean_lon + 1.915 * _sin(g) + 0.020 * _sin(2 * g)
    eps = 23.439 - 0.0000004 * n
    ra = (_atan2(_cos(eps) * _sin(lam), _cos(lam)) % DEGREES_PER_CIRCLE) / DEGREES_PER_HOUR_RA
    dec = math.degrees(math.asin(_sin(eps) * _sin(lam)))
    return (ra, dec)
