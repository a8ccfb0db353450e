"""Solar-system bodies and their linear-in-time orbital elements.

Element tables from P. Schlyter, "How to compute planetary positions"
(stjarnhimlen.se). Each element is a (base, rate) pair evaluated at day number
``d`` as ``base + rate * d``. Distances are in AU, except the Moon's semi-major
axis which is in Earth radii.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from skychart.constants import DEGREES_PER_CIRCLE


class BodyName(enum.Enum):
    """Bodies handled by the ephemeris engine."""

    SUN = 'Sun'
    MOON = 'Moon'
    MERCURY = 'Mercury'
    VENUS = 'Venus'
    MARS = 'Mars'
    JUPITER = 'Jupiter'
    SATURN = 'Saturn'
    URANUS = 'Uranus'
    NEPTUNE = 'Neptune'


def _reduce(angle: float) -> float:
    """Reduce an angle in degrees to [0, 360)."""
    return angle % DEGREES_PER_CIRCLE


@dataclass(frozen=True)
class ElementSet:
    """Orbital elements evaluated at one day number (angles in degrees)."""

    node: float
    inclination: float
    perihelion: float
    semi_major_axis: float
    eccentricity: float
    mean_anomaly: float


@dataclass(frozen=True)
class OrbitalElements:
    """Primary orbital elements of a body as (base, rate-per-day) pairs.

    Parameters:
        name: Body identifier.
        node: N, longitude of the ascending node.
        inclination: i, inclination to the ecliptic.
        perihelion: w, argument of perihelion.
        semi_major_axis: a, mean distance (AU; Earth radii for the Moon).
        eccentricity: e (0 = circle).
        mean_anomaly: M (0 at perihelion).
    """

    name: BodyName
    node: tuple[float, float]
    inclination: tuple[float, float]
    perihelion: tuple[float, float]
    semi_major_axis: tuple[float, float]
    eccentricity: tuple[float, float]
    mean_anomaly: tuple[float, float]

    def node_at(self, d: float) -> float:
        return _reduce(self.node[0] + self.node[1] * d)

    def inclination_at(self, d: float) -> float:
        return _reduce(self.inclination[0] + self.inclination[1] * d)

    def perihelion_at(self, d: float) -> float:
        return _reduce(self.perihelion[0] + self.perihelion[1] * d)

    def semi_major_axis_at(self, d: float) -> float:
        return self.semi_major_axis[0] + self.semi_major_axis[1] * d

    def eccentricity_at(self, d: float) -> float:
        return self.eccentricity[0] + self.eccentricity[1] * d

    def mean_anomaly_at(self, d: float) -> float:
        return _reduce(self.mean_anomaly[0] + self.mean_anomaly[1] * d)

    def at(self, d: float) -> ElementSet:
        """Return all six elements evaluated at day number ``d``."""
        return ElementSet(
            node=self.node_at(d),
            inclination=self.inclination_at(d),
            perihelion=self.perihelion_at(d),
            semi_major_axis=self.semi_major_axis_at(d),
            eccentricity=self.eccentricity_at(d),
            mean_anomaly=self.mean_anomaly_at(d),
        )


SUN = OrbitalElements(
    BodyName.SUN,
    node=(0.0, 0.0),
    inclination=(0.0, 0.0),
    perihelion=(282.9404, 4.70935e-5),
    semi_major_axis=(1.000000, 0.0),
    eccentricity=(0.016709, -1.151e-9),
    mean_anomaly=(356.0470, 0.9856002585),
)

MOON = OrbitalElements(
    BodyName.MOON,
    node=(125.1228, -0.0529538083),
    inclination=(5.1454, 0.0),
    perihelion=(318.0634, 0.1643573223),
    semi_major_axis=(60.2666, 0.0),
    eccentricity=(0.054900, 0.0),
    mean_anomaly=(115.3654, 13.0649929509),
)

MERCURY = OrbitalElements(
    BodyName.MERCURY,
    node=(48.3313, 3.24587e-5),
    inclination=(7.0047, 5.00e-8),
    perihelion=(29.1241, 1.01444e-5),
    semi_major_axis=(0.387098, 0.0),
    eccentricity=(0.205635, 5.59e-10),
    mean_anomaly=(168.6562, 4.0923344368),
)

VENUS = OrbitalElements(
    BodyName.VENUS,
    node=(76.6799, 2.46590e-5),
    inclination=(3.3946, 2.75e-8),
    perihelion=(54.8910, 1.38374e-5),
    semi_major_axis=(0.723330, 0.0),
    eccentricity=(0.006773, -1.302e-9),
    mean_anomaly=(48.0052, 1.6021302244),
)

MARS = OrbitalElements(
    BodyName.MARS,
    node=(49.5574, 2.11081e-5),
    inclination=(1.8497, -1.78e-8),
    perihelion=(286.5016, 2.92961e-5),
    semi_major_axis=(1.523688, 0.0),
    eccentricity=(0.093405, 2.516e-9),
    mean_anomaly=(18.6021, 0.5240207766),
)

JUPITER = OrbitalElements(
    BodyName.JUPITER,
    node=(100.4542, 2.76854e-5),
    inclination=(1.3030, -1.557e-7),
    perihelion=(273.8777, 1.64505e-5),
    semi_major_axis=(5.20256, 0.0),
    eccentricity=(0.048498, 4.469e-9),
    mean_anomaly=(19.8950, 0.0830853001),
)

SATURN = OrbitalElements(
    BodyName.SATURN,
    node=(113.6634, 2.38980e-5),
    inclination=(2.4886, -1.081e-7),
    perihelion=(339.3939, 2.97661e-5),
    semi_major_axis=(9.55475, 0.0),
    eccentricity=(0.055546, -9.499e-9),
    mean_anomaly=(316.9670, 0.0334442282),
)

URANUS = OrbitalElements(
    BodyName.URANUS,
    node=(74.0005, 1.3978e-5),
    inclination=(0.7733, 1.9e-8),
    perihelion=(96.6612, 3.0565e-5),
    semi_major_axis=(19.18171, -1.55e-8),
    eccentricity=(0.047318, 7.45e-9),
    mean_anomaly=(142.5905, 0.011725806),
)

NEPTUNE = OrbitalElements(
    BodyName.NEPTUNE,
    node=(131.7806, 3.0173e-5),
    inclination=(1.7700, -2.55e-7),
    perihelion=(272.8461, -6.027e-6),
    semi_major_axis=(30.05826, 3.313e-8),
    eccentricity=(0.008606, 2.15e-9),
    mean_anomaly=(260.2471, 0.005995147),
)

ELEMENTS: dict[BodyName, OrbitalElements] = {
    body.name: body
    for body in (SUN, MOON, MERCURY, VENUS, MARS, JUPITER, SATURN, URANUS, NEPTUNE)
}

# Order in which bodies are computed and plotted.
SOLAR_SYSTEM: tuple[BodyName, ...] = (
    BodyName.SUN,
    BodyName.MERCURY,
    BodyName.VENUS,
    BodyName.MOON,
    BodyName.MARS,
    BodyName.JUPITER,
    BodyName.SATURN,
    BodyName.URANUS,
    BodyName.NEPTUNE,
)


def parse_body(name: str | BodyName) -> BodyName:
    """Return BodyName for a case-insensitive body name.

    Parameters:
        name: Body name (e.g. 'jupiter', 'Moon') or a BodyName.

    Returns:
        Matching BodyName.

    Raises:
        ValueError: If the name is not a known body.
    """
    if isinstance(name, BodyName):
        return name
    key = name.strip().lower()
    for body in BodyName:
        if body.value.lower() == key:
            return body
    valid = ', '.join(b.value for b in BodyName)
    raise ValueError(f'Unknown body {name!r}; expected one of {valid}')
