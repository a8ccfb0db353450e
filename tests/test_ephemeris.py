"""Tests for the orbital-element ephemeris engine."""

from __future__ import annotations

import math

import pytest

from skychart.bodies import SOLAR_SYSTEM, SUN, BodyName, parse_body
from skychart.calendar_math import julian_day
from skychart import ephemeris
from skychart.ephemeris import (
    PERTURBATIONS,
    EphemerisContext,
    body_position,
    ecliptic_point,
    ecliptic_to_equatorial,
    obliquity,
    solar_system_positions,
    solve_kepler,
    sun_position_simple,
)

# 1990-04-19 00:00 UT, worked example in Schlyter's tutorial.
D_1990 = -3543.0


@pytest.mark.parametrize('e', [0.0, 0.0167, 0.0934, 0.2056, 0.3])
@pytest.mark.parametrize('m', [0.0, 1.0, 45.0, 90.0, 179.0, 180.0, 270.0, 359.0])
def test_solve_kepler_converges(m: float, e: float) -> None:
    """E satisfies Kepler's equation to the iteration tolerance."""
    sol = solve_kepler(m, e)
    assert sol.converged
    assert sol.iterations <= 20
    residual = sol.eccentric_anomaly - math.degrees(e) * math.sin(
        math.radians(sol.eccentric_anomaly)
    )
    diff = (residual - m + 180.0) % 360.0 - 180.0
    assert abs(diff) < 0.01


def test_solve_kepler_circular_orbit() -> None:
    """For e = 0 the eccentric anomaly equals the mean anomaly."""
    sol = solve_kepler(123.4, 0.0)
    assert sol.eccentric_anomaly == pytest.approx(123.4)
    assert sol.iterations == 0


def test_sun_mean_longitude_at_j2000() -> None:
    """Sun's mean longitude at J2000.0 noon (d = 1.5) is about 280.47 degrees."""
    el = SUN.at(1.5)
    assert (el.perihelion + el.mean_anomaly) % 360.0 == pytest.approx(280.4658, abs=0.01)
    ctx = EphemerisContext()
    ctx.position(BodyName.SUN, 1.5)
    assert ctx.solar is not None
    assert ctx.solar.mean_longitude == pytest.approx(280.4658, abs=0.01)


def test_sun_true_longitude_at_j2000() -> None:
    """Sun's ecliptic longitude at d = 1.5 is about 280.38 degrees."""
    pos = body_position('sun', 1.5)
    assert pos.longitude == pytest.approx(280.38, abs=0.05)
    assert pos.latitude == pytest.approx(0.0, abs=1e-9)


def test_sun_schlyter_example() -> None:
    """Sun RA/Dec on 1990-04-19 matches the tutorial values."""
    pos = body_position(BodyName.SUN, D_1990)
    assert pos.ra * 15.0 == pytest.approx(26.658, abs=0.02)
    assert pos.dec == pytest.approx(11.008, abs=0.02)
    assert pos.distance == pytest.approx(1.004323, abs=1e-4)


def test_moon_position_on_1990_04_19() -> None:
    """Perturbed Moon RA/Dec on 1990-04-19."""
    pos = body_position(BodyName.MOON, D_1990)
    assert pos.ra * 15.0 == pytest.approx(309.5011, abs=1e-3)
    assert pos.dec == pytest.approx(-19.1032, abs=1e-3)


@pytest.mark.parametrize(
    ('body', 'longitude', 'latitude'),
    [
        (BodyName.JUPITER, 105.2423, None),
        (BodyName.SATURN, 289.3825, 0.1845),
        (BodyName.URANUS, 276.7671, None),
    ],
)
def test_outer_planets_perturbed_on_1990_04_19(
    body: BodyName, longitude: float, latitude: float | None
) -> None:
    """Corrected heliocentric ecliptic coordinates of the perturbed planets."""
    pos = body_position(body, D_1990)
    assert pos.longitude == pytest.approx(longitude, abs=1e-3)
    if latitude is not None:
        assert pos.latitude == pytest.approx(latitude, abs=1e-3)


@pytest.mark.parametrize(
    ('table', 'body', 'coordinate'),
    [
        ('_MOON_LONGITUDE', BodyName.MOON, 'longitude'),
        ('_MOON_LATITUDE', BodyName.MOON, 'latitude'),
        ('_JUPITER_LONGITUDE', BodyName.JUPITER, 'longitude'),
        ('_SATURN_LONGITUDE', BodyName.SATURN, 'longitude'),
        ('_SATURN_LATITUDE', BodyName.SATURN, 'latitude'),
        ('_URANUS_LONGITUDE', BodyName.URANUS, 'longitude'),
    ],
)
def test_every_perturbation_term_contributes(
    monkeypatch: pytest.MonkeyPatch, table: str, body: BodyName, coordinate: str
) -> None:
    """Dropping any single term of a correction series moves the body."""
    assert body in PERTURBATIONS
    terms = getattr(ephemeris, table)
    days = (D_1990, 0.0, 5000.0)
    full = [getattr(body_position(body, d), coordinate) for d in days]
    for i in range(len(terms)):
        monkeypatch.setattr(ephemeris, table, terms[:i] + terms[i + 1 :])
        reduced = [getattr(body_position(body, d), coordinate) for d in days]
        change = max(abs((a - b + 180.0) % 360.0 - 180.0) for a, b in zip(full, reduced))
        assert change > 1e-4, f'{table}[{i}]'


@pytest.mark.parametrize(
    'when', [(2000, 1, 1.5), (1990, 4, 19.0), (2024, 6, 21.25), (2010, 9, 23.0), (2031, 12, 1.75)]
)
def test_sun_matches_simple_formula(when: tuple[int, int, float]) -> None:
    """Element-based Sun agrees with the low-precision formula within 0.1 degree."""
    jd = julian_day(*when)
    pos = body_position(BodyName.SUN, jd - 2451543.5)
    ra, dec = sun_position_simple(jd)
    dra = ((pos.ra - ra) * 15.0 + 180.0) % 360.0 - 180.0
    assert abs(dra * math.cos(math.radians(dec))) < 0.1
    assert pos.dec == pytest.approx(dec, abs=0.1)


def test_body_order_does_not_matter() -> None:
    """A stale Sun cache is refreshed, so the computation order is irrelevant."""
    d0, d1 = 100.0, 8000.25
    stale = EphemerisContext()
    stale.position(BodyName.SUN, d0)
    jupiter_first = stale.position(BodyName.JUPITER, d1)
    fresh = EphemerisContext()
    fresh.position(BodyName.SUN, d1)
    sun_first = fresh.position(BodyName.JUPITER, d1)
    assert jupiter_first == sun_first
    assert stale.solar is not None
    assert stale.solar.day_number == d1


def test_context_invalidate() -> None:
    """invalidate() drops the cached Sun parameters."""
    ctx = EphemerisContext()
    ctx.solar_params(10.0)
    assert ctx.solar is not None
    ctx.invalidate()
    assert ctx.solar is None


def test_solar_system_positions_ranges() -> None:
    """All bodies are returned in order with RA in [0, 24) and Dec in [-90, 90]."""
    positions = solar_system_positions(8800.0)
    assert [p.body for p in positions] == list(SOLAR_SYSTEM)
    for pos in positions:
        assert 0.0 <= pos.ra < 24.0
        assert -90.0 <= pos.dec <= 90.0


@pytest.mark.parametrize('d', [-3543.0, 0.0, 5000.5, 9000.0])
def test_bodies_near_ecliptic(d: float) -> None:
    """Sun, Moon and planets stay within a few degrees of the ecliptic band."""
    for pos in solar_system_positions(d):
        limit = 29.0 if pos.body is BodyName.MOON else 33.0
        assert abs(pos.dec) <= limit, pos.name


def test_moon_latitude_bounded() -> None:
    """The Moon's ecliptic latitude stays within about 5.3 degrees."""
    for d in range(0, 60, 3):
        pos = body_position(BodyName.MOON, float(d))
        assert abs(pos.latitude) < 5.5


def test_ecliptic_point_equinoxes_and_solstice() -> None:
    """Longitude 0 is (0h, 0), 90 is (6h, +eps), 180 is (12h, 0)."""
    eps = 23.43642
    assert ecliptic_point(0.0, eps) == pytest.approx((0.0, 0.0), abs=1e-9)
    assert ecliptic_point(90.0, eps) == pytest.approx((6.0, eps), abs=1e-9)
    assert ecliptic_point(180.0, eps) == pytest.approx((12.0, 0.0), abs=1e-9)


def test_ecliptic_to_equatorial_pole() -> None:
    """The ecliptic pole maps to Dec 90 - eps at RA 18h."""
    ra, dec = ecliptic_to_equatorial(0.0, 0.0, 1.0, 23.44)
    assert ra == pytest.approx(18.0)
    assert dec == pytest.approx(90.0 - 23.44)


def test_obliquity_decreases() -> None:
    """Obliquity at J2000 is 23.4393 and decreases slowly."""
    assert obliquity(0.0) == pytest.approx(23.4393)
    assert obliquity(36525.0) < obliquity(0.0)


def test_parse_body() -> None:
    """Body names are case-insensitive; unknown names raise ValueError."""
    assert parse_body('jupiter') is BodyName.JUPITER
    assert parse_body(' Moon ') is BodyName.MOON
    with pytest.raises(ValueError, match='Pluto'):
        parse_body('Pluto')
