"""Julian day and sidereal time helpers, plus date parsing via rms-julian."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

import julian

from sunmoon_tracker.angle_utils import deg_to_rad
from sunmoon_tracker.constants import (
    J1970,
    J2000,
    MS_PER_DAY,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SIDEREAL_AT_J2000_DEG,
    SIDEREAL_RATE_DEG,
)

logger = logging.getLogger(__name__)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# rms-julian counts days from 2000-01-01 00:00 UTC
JULIAN_DAY0 = datetime(2000, 1, 1, tzinfo=timezone.utc)

# Leap seconds loaded once at first use.
_leapsecs_loaded = False


def as_utc(instant: datetime) -> datetime:
    """Return instant as an aware UTC datetime; naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def unix_millis(instant: datetime) -> int:
    """Whole milliseconds since the Unix epoch (floored, like a JS Date)."""
    return (as_utc(instant) - UNIX_EPOCH) // timedelta(milliseconds=1)


def julian_from_millis(ms: float) -> float:
    """Julian date for a Unix timestamp in milliseconds."""
    return ms / MS_PER_DAY - 0.5 + J1970


def julian_date(instant: datetime) -> float:
    """Julian date of an instant."""
    return julian_from_millis(unix_millis(instant))


def days_since_j2000(instant: datetime) -> float:
    """Continuous day count since J2000.0 (the ``d`` of every series term)."""
    return julian_date(instant) - J2000


def sidereal_time(d: float, lw: float) -> float:
    """Local sidereal time in radians.

    Parameters:
        d: Days since J2000.
        lw: West longitude in radians (i.e. the negated east longitude).

    Returns:
        Sidereal angle in radians, not wrapped.
    """
    return deg_to_rad(SIDEREAL_AT_J2000_DEG + SIDEREAL_RATE_DEG * d) - lw


def _ensure_leapsecs() -> None:
    """Load rms-julian's bundled leap second kernel once."""
    global _leapsecs_loaded
    if _leapsecs_loaded:
        return
    julian.load_lsk()
    _leapsecs_loaded = True


def parse_datetime(string: str) -> datetime | None:
    """Parse a date/time string as UTC.

    Accepts anything rms-julian parses, plus an ISO trailing ``Z``.

    Parameters:
        string: Date/time string (e.g. ``"2024-06-21 12:00"``).

    Returns:
        Aware UTC datetime, or None on parse failure.
    """
    _ensure_leapsecs()
    candidates = [string]
    stripped = string.strip()
    if stripped.endswith(('Z', 'z')):
        candidates.append(stripped[:-1])
    if re.fullmatch(r'\d{4}-\d{2}-\d{2}', stripped):
        candidates.append(f'{stripped} 00:00:00')
    for candidate in candidates:
        try:
            day, sec = julian.day_sec_from_string(candidate)[:2]
        except (ValueError, TypeError, LookupError, OSError):
            continue
        # A leap second (sec >= 86400) folds into the next day.
        return JULIAN_DAY0 + timedelta(days=int(day), seconds=float(sec))
    logger.debug('Could not parse date/time %r', string)
    return None


_UNIT_SECONDS = {
    'sec': 1.0,
    'min': SECONDS_PER_MINUTE,
    'hour': SECONDS_PER_HOUR,
    'day': SECONDS_PER_DAY,
}


def interval_seconds(interval: float, time_unit: str, *, min_seconds: float = 1.0) -> float:
    """Length of a listing step in seconds, never below min_seconds.

    time_unit is matched case-insensitively by prefix, so 'minutes' and
    'Hours' work too. The sign of interval is ignored.
    """
    unit = time_unit.strip().lower()
    for name, scale in _UNIT_SECONDS.items():
        if unit.startswith(name):
            return max(abs(interval) * scale, min_seconds)
    raise ValueError(f'Invalid time_unit {time_unit!r}; expected one of sec, min, hour, day')
