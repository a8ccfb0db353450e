"""Coarse (RA, Dec) hash used to find the star under the pointer."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skychart.stars import Star

logger = logging.getLogger(__name__)


def star_hash(ra: float, dec: float) -> int:
    """Return the bucket key of a sky point.

    Keeps one decimal of RA (hours) and the whole degrees of |Dec|; the sign of
    Dec is carried by the key: ``sign(dec) * (int(ra * 10) * 1000 + int(|dec|))``.
    """
    key = int(ra * 10) * 1000 + int(abs(dec))
    return -key if dec < 0 else key


class SpatialIndex:
    """Buckets of stars keyed by ``star_hash``, per hemisphere and whole sky.

    Buckets keep catalog insertion order; a query returns the first star of the
    bucket if it is bright enough.
    """

    def __init__(self) -> None:
        self.north: dict[int, list[Star]] = {}
        self.south: dict[int, list[Star]] = {}
        self.sky: dict[int, list[Star]] = {}

    @classmethod
    def build(cls, stars: Iterable[Star]) -> SpatialIndex:
        """Return an index over ``stars``."""
        index = cls()
        for star in stars:
            index.add(star)
        logger.debug('Spatial index built: %d buckets', len(index.sky))
        return index

    def add(self, star: Star) -> None:
        """Append ``star`` to its bucket in its hemisphere table and the sky table."""
        key = star_hash(star.ra, star.dec)
        hemisphere = self.north if star.dec >= 0 else self.south
        hemisphere.setdefault(key, []).append(star)
        self.sky.setdefault(key, []).append(star)

    def bucket(self, ra: float, dec: float) -> list[Star]:
        """Return the whole-sky bucket containing (ra, dec); empty if none."""
        return self.sky.get(star_hash(ra, dec), [])

    def query(self, ra: float, dec: float, magnitude_limit: float) -> Star | None:
        """Return the candidate star near (ra, dec), or None.

        Parameters:
            ra: Right ascension in hours.
            dec: Declination in degrees.
            magnitude_limit: Faintest magnitude accepted.

        Returns:
            First star of the bucket if its magnitude is <= magnitude_limit.
        """
        bucket = self.sky.get(star_hash(ra, dec))
        if not bucket:
            return None
        candidate = bucket[0]
        if candidate.magnitude <= magnitude_limit:
            return candidate
        return None

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.sky.values())
