"""Star entities, catalog loading and the IAU star-names CSV reader."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from skychart.constants import CATALOG_MAX_ABS_DEC, DEGREES_PER_HOUR_RA
from skychart.spatial_index import SpatialIndex

logger = logging.getLogger(__name__)

# IAU star-names CSV columns
IAU_NAME_COL = 0
IAU_VMAG_COL = 6
IAU_RA_COL = 7
IAU_DEC_COL = 8


@dataclass(frozen=True)
class Star:
    """A catalog star: name, RA (hours), Dec (degrees) and visual magnitude."""

    name: str
    ra: float
    dec: float
    magnitude: float

    @property
    def north(self) -> bool:
        return self.dec >= 0


@dataclass(frozen=True)
class CatalogRecord:
    """One catalog input record; RA is in degrees."""

    name: str
    ra_deg: float
    dec_deg: float
    magnitude: float

    def to_star(self) -> Star:
        return Star(
            name=self.name,
            ra=self.ra_deg / DEGREES_PER_HOUR_RA,
            dec=self.dec_deg,
            magnitude=self.magnitude,
        )


@dataclass
class StarCatalog:
    """Loaded stars and their spatial index, ready for plotting and hit-testing."""

    stars: list[Star] = field(default_factory=list)
    index: SpatialIndex = field(default_factory=SpatialIndex)

    @property
    def north_stars(self) -> list[Star]:
        return [s for s in self.stars if s.north]

    @property
    def south_stars(self) -> list[Star]:
        return [s for s in self.stars if not s.north]

    def visible(self, magnitude_limit: float) -> list[Star]:
        """Stars with magnitude <= magnitude_limit, in catalog order."""
        return [s for s in self.stars if s.magnitude <= magnitude_limit]

    def find(self, name: str) -> Star | None:
        """Return the first star named ``name`` (case-insensitive), or None."""
        key = name.strip().lower()
        for star in self.stars:
            if star.name.lower() == key:
                return star
        return None

    def __len__(self) -> int:
        return len(self.stars)


def _as_record(record: CatalogRecord | Sequence[object]) -> CatalogRecord:
    if isinstance(record, CatalogRecord):
        return record
    name, ra_deg, dec_deg, magnitude = record
    return CatalogRecord(str(name), float(ra_deg), float(dec_deg), float(magnitude))  # type: ignore[arg-type]


def load_catalog(records: Iterable[CatalogRecord | Sequence[object]]) -> StarCatalog:
    """Build Star entities from catalog records and index them.

    Parameters:
        records: CatalogRecord or (name, ra_deg, dec_deg, magnitude) sequences.

    Returns:
        StarCatalog holding the stars (catalog order) and the spatial index.
    """
    stars = [_as_record(r).to_star() for r in records]
    catalog = StarCatalog(stars=stars, index=SpatialIndex.build(stars))
    logger.info('Loaded %d stars', len(stars))
    return catalog


def read_iau_catalog(
    filepath: str | Path, max_abs_dec: float = CATALOG_MAX_ABS_DEC
) -> list[CatalogRecord]:
    """Read the IAU star-names CSV.

    Rows are comma-separated with the name in column 0, V magnitude in column 6,
    RA (degrees) in column 7 and Dec (degrees) in column 8. Blank lines, lines
    starting with '#', and rows that fail to parse (including a header row) are
    skipped. Stars with |Dec| > max_abs_dec are dropped.

    Parameters:
        filepath: Path to the CSV file.
        max_abs_dec: Polar cap excluded from the chart (degrees).

    Returns:
        List of CatalogRecord in file order.

    Raises:
        OSError: If the file cannot be opened.
    """
    path = Path(filepath)
    records: list[CatalogRecord] = []
    with path.open(newline='', encoding='utf-8') as f:
        for lineno, row in enumerate(csv.reader(f), start=1):
            if not row or not ''.join(row).strip() or row[0].lstrip().startswith('#'):
                continue
            try:
                record = CatalogRecord(
                    name=row[IAU_NAME_COL].strip(),
                    ra_deg=float(row[IAU_RA_COL]),
                    dec_deg=float(row[IAU_DEC_COL]),
                    magnitude=float(row[IAU_VMAG_COL]),
                )
            except (IndexError, ValueError) as e:
                logger.warning('%s:%d: skipping row (%s)', path, lineno, e)
                continue
            if abs(record.dec_deg) > max_abs_dec:
                continue
            records.append(record)
    return records
