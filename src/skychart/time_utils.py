"""Date/time string parsing through rms-julian."""

from __future__ import annotations

import logging
import re
from datetime import datetime

import julian

from skychart.config import get_leapsecs_path

logger = logging.getLogger(__name__)

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


def _ensure_leapsecs() -> None:
    """Load the leap seconds kernel if not already loaded.

    Uses the LSK named by JULIAN_LEAPSECS when it exists, otherwise rms-julian's
    bundled LSK.
    """
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    path = get_leapsecs_path()
    if path is not None:
        try:
            julian.load_lsk(path)
            _leapsecs_loaded = True
            return
        except (OSError, KeyError, ValueError) as e:
            logger.info('Leap seconds from %s not used (%s); using bundled LSK.', path, e)
    julian.load_lsk()
    _leapsecs_loaded = True


def parse_datetime(string: str) -> datetime | None:
    """Parse a UTC date/time string to a naive datetime.

    Accepts the formats rms-julian understands (e.g. '2024-03-15 21:30',
    '2024-03-15T21:30:00', 'March 15, 2024 9:30 PM'), an ISO trailing 'Z', and
    'YYYY HH:MM:SS' as January 1st of that year.

    Parameters:
        string: Date/time text.

    Returns:
        datetime, or None on parse failure.
    """
    _ensure_leapsecs()
    stripped = string.strip()
    if not stripped:
        return None
    candidates = [stripped]
    if stripped.endswith(('Z', 'z')):
        candidates.append(stripped[:-1])
    year_hms = re.fullmatch(r'(\d{4})\s+(\d{1,2}:\d{2}:\d{2})', stripped)
    if year_hms is not None:
        year, hms = year_hms.groups()
        candidates.append(f'{year}-01-01 {hms}')
    for candidate in candidates:
        try:
            day, sec = julian.day_sec_from_string(candidate)[:2]
        except (ValueError, TypeError, LookupError, OSError):
            continue
        return datetime_from_day_sec(int(day), float(sec))
    logger.debug('Unparseable date/time %r', string)
    return None


def datetime_from_day_sec(day: int, sec: float) -> datetime:
    """Convert rms-julian (day since J2000, seconds in day) to a naive datetime.

    A leap second (sec >= 86400) is folded into the last representable instant.
    """
    year, month, mday = julian.ymd_from_day(day)
    hour, minute, second = julian.hms_from_sec(min(sec, 86399.999999))
    whole = int(second)
    micro = min(int(round((second - whole) * 1e6)), 999999)
    return datetime(int(year), int(month), int(mday), int(hour), int(minute), whole, micro)
