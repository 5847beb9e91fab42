"""Closed-form Sun and Moon positions for an observer (arc-minute class model).

Both solvers are pure functions of (instant, latitude, longitude). They never
raise: NaN inputs propagate to NaN outputs.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sunmoon_tracker.angle_utils import deg_to_rad, rad_to_deg, wrap_degrees
from sunmoon_tracker.constants import (
    AU_IN_CM,
    HALF_CIRCLE_DEGREES,
    KM_IN_CM,
    MOON_DISTANCE_AMPLITUDE_KM,
    MOON_LATITUDE_AMPLITUDE_DEG,
    MOON_LATITUDE_ARG_AT_J2000_DEG,
    MOON_LATITUDE_ARG_RATE_DEG,
    MOON_LONGITUDE_PERTURBATION_DEG,
    MOON_MEAN_ANOMALY_AT_J2000_DEG,
    MOON_MEAN_ANOMALY_RATE_DEG,
    MOON_MEAN_DISTANCE_KM,
    MOON_MEAN_LONGITUDE_AT_J2000_DEG,
    MOON_MEAN_LONGITUDE_RATE_DEG,
    SUN_CENTER_COEFFS_DEG,
    SUN_MEAN_ANOMALY_AT_J2000_DEG,
    SUN_MEAN_ANOMALY_RATE_DEG,
    SUN_PERIHELION_DEG,
)
from sunmoon_tracker.coords import ecliptic_to_equatorial, horizontal_from_hour_angle
from sunmoon_tracker.time_utils import days_since_j2000, sidereal_time


@dataclass(frozen=True)
class SkyPosition:
    """Apparent position of a body for an observer."""

    azimuth_deg: float  # 0 = north, 90 = east (clockwise), in [0, 360)
    altitude_deg: float  # 0 = horizon, 90 = zenith, < 0 below horizon
    distance_cm: float


def _sun_mean_anomaly(d: float) -> float:
    return deg_to_rad(SUN_MEAN_ANOMALY_AT_J2000_DEG + SUN_MEAN_ANOMALY_RATE_DEG * d)


def _sun_equation_of_center(m: float) -> float:
    c1, c2, c3 = SUN_CENTER_COEFFS_DEG
    return deg_to_rad(c1 * math.sin(m) + c2 * math.sin(2 * m) + c3 * math.sin(3 * m))


def _sun_ecliptic_longitude(m: float, c: float) -> float:
    return m + c + deg_to_rad(SUN_PERIHELION_DEG) + math.pi


def _sun_distance_au(m: float, c: float) -> float:
    return 1.00014 - 0.01671 * math.cos(m) - 0.00014 * math.cos(2 * m + c)


def _to_sky_position(
    d: float,
    latitude: float,
    longitude: float,
    ra: float,
    dec: float,
    distance_cm: float,
) -> SkyPosition:
    """Shared tail: sidereal time, hour angle, horizontal coordinates."""
    # math.sin(inf) raises; treat infinities like any other malformed input.
    if math.isinf(latitude):
        latitude = math.nan
    if math.isinf(longitude):
        longitude = math.nan
    lw = deg_to_rad(-longitude)
    phi = deg_to_rad(latitude)
    hour_angle = sidereal_time(d, lw) - ra
    azimuth, altitude = horizontal_from_hour_angle(hour_angle, phi, dec)
    return SkyPosition(
        azimuth_deg=wrap_degrees(rad_to_deg(azimuth) + HALF_CIRCLE_DEGREES),
        altitude_deg=rad_to_deg(altitude),
        distance_cm=distance_cm,
    )


def sun_position(instant: datetime, latitude: float, longitude: float) -> SkyPosition:
    """Sun azimuth, altitude, and distance for an observer.

    Parameters:
        instant: Time of observation (naive datetimes are taken as UTC).
        latitude: Observer latitude in degrees (north positive).
        longitude: Observer longitude in degrees (east positive).

    Returns:
        SkyPosition with distance in centimeters.
    """
    d = days_since_j2000(instant)
    m = _sun_mean_anomaly(d)
    c = _sun_equation_of_center(m)
    ecl_lon = _sun_ecliptic_longitude(m, c)
    ra, dec = ecliptic_to_equatorial(ecl_lon)
    return _to_sky_position(d, latitude, longitude, ra, dec, _sun_distance_au(m, c) * AU_IN_CM)


def moon_position(instant: datetime, latitude: float, longitude: float) -> SkyPosition:
    """Moon azimuth, altitude, and distance for an observer.

    Parameters:
        instant: Time of observation (naive datetimes are taken as UTC).
        latitude: Observer latitude in degrees (north positive).
        longitude: Observer longitude in degrees (east positive).

    Returns:
        SkyPosition with distance in centimeters.
    """
    d = days_since_j2000(instant)
    mean_lon = deg_to_rad(MOON_MEAN_LONGITUDE_AT_J2000_DEG + MOON_MEAN_LONGITUDE_RATE_DEG * d)
    m = deg_to_rad(MOON_MEAN_ANOMALY_AT_J2000_DEG + MOON_MEAN_ANOMALY_RATE_DEG * d)
    dist_km = MOON_MEAN_DISTANCE_KM - MOON_DISTANCE_AMPLITUDE_KM * math.cos(m)
    ecl_lon = mean_lon + deg_to_rad(MOON_LONGITUDE_PERTURBATION_DEG * math.sin(m))
    ecl_lat = deg_to_rad(
        MOON_LATITUDE_AMPLITUDE_DEG
        * math.sin(deg_to_rad(MOON_LATITUDE_ARG_AT_J2000_DEG + MOON_LATITUDE_ARG_RATE_DEG * d))
    )
    ra, dec = ecliptic_to_equatorial(ecl_lon, ecl_lat)
    return _to_sky_position(d, latitude, longitude, ra, dec, dist_km * KM_IN_CM)


class CelestialBody(enum.Enum):
    """Trackable bodies; each value selects a display name and a solver."""

    SUN = 'Sun'
    MOON = 'Moon'

    @property
    def display_name(self) -> str:
        return self.value

    def position(self, instant: datetime, latitude: float, longitude: float) -> SkyPosition:
        """Solve this body's position (dispatches to sun_position/moon_position)."""
        return _SOLVERS[self](instant, latitude, longitude)


_SOLVERS: dict[CelestialBody, Callable[[datetime, float, float], SkyPosition]] = {
    CelestialBody.SUN: sun_position,
    CelestialBody.MOON: moon_position,
}
