"""Ecliptic, equatorial, and horizontal coordinate conversions (radians throughout)."""

from __future__ import annotations

import math

from sunmoon_tracker.angle_utils import deg_to_rad
from sunmoon_tracker.constants import EARTH_OBLIQUITY_DEG

OBLIQUITY = deg_to_rad(EARTH_OBLIQUITY_DEG)


def _asin(x: float) -> float:
    """asin that returns NaN outside [-1, 1] instead of raising."""
    if -1.0 <= x <= 1.0:
        return math.asin(x)
    return math.nan


def ecliptic_to_equatorial(lon: float, lat: float = 0.0) -> tuple[float, float]:
    """Convert ecliptic longitude/latitude to equatorial coordinates.

    For ``lat == 0`` the terms in ``tan(lat)`` and ``sin(lat)`` vanish exactly,
    so the Sun (which has no ecliptic latitude in this model) goes through the
    same expressions as the Moon.

    Parameters:
        lon: Ecliptic longitude.
        lat: Ecliptic latitude.

    Returns:
        (right ascension, declination).
    """
    ra = math.atan2(
        math.sin(lon) * math.cos(OBLIQUITY) - math.tan(lat) * math.sin(OBLIQUITY),
        math.cos(lon),
    )
    dec = _asin(
        math.sin(lat) * math.cos(OBLIQUITY)
        + math.cos(lat) * math.sin(OBLIQUITY) * math.sin(lon)
    )
    return ra, dec


def horizontal_from_hour_angle(hour_angle: float, phi: float, dec: float) -> tuple[float, float]:
    """Convert hour angle and declination to horizontal coordinates.

    Azimuth is measured from south, positive westward; callers add 180 degrees
    for a compass bearing.

    Parameters:
        hour_angle: Local hour angle H.
        phi: Observer latitude.
        dec: Declination.

    Returns:
        (azimuth, altitude).
    """
    altitude = _asin(
        math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec) * math.cos(hour_angle)
    )
    azimuth = math.atan2(
        math.sin(hour_angle),
        math.cos(hour_angle) * math.sin(phi) - math.tan(dec) * math.cos(phi),
    )
    return azimuth, altitude
