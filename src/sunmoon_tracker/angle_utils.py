"""Angle conversion, remapping, and formatting helpers."""

from __future__ import annotations

from sunmoon_tracker.constants import (
    DEG_TO_RAD,
    DEGREES_PER_CIRCLE,
    RAD_TO_DEG,
)


def deg_to_rad(deg: float) -> float:
    """Convert degrees to radians using the model's fixed factor."""
    return deg * DEG_TO_RAD


def rad_to_deg(rad: float) -> float:
    """Convert radians to degrees using the model's fixed factor."""
    return rad * RAD_TO_DEG


def wrap_degrees(deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    return deg % DEGREES_PER_CIRCLE


def remap(
    value: float,
    low1: float,
    high1: float,
    low2: float = 0.0,
    high2: float = 1.0,
) -> float:
    """Linearly map value from [low1, high1] onto [low2, high2].

    Values outside the source range extrapolate; nothing is clamped.

    Parameters:
        value: Input value.
        low1, high1: Source range.
        low2, high2: Target range (defaults to 0..1).

    Returns:
        Remapped value.
    """
    return low2 + (high2 - low2) * (value - low1) / (high1 - low1)


def dms_string(value: float, ndecimal: int = 1) -> str:
    """Format degrees as signed degrees, arcminutes, arcseconds.

    Parameters:
        value: Angle in degrees.
        ndecimal: Decimal places for the seconds field.

    Returns:
        String such as ``"-12d 30' 45.0\\""``.
    """
    sign = '-' if value < 0 else ''
    scale = 10**ndecimal
    total = round(abs(value) * 3600.0 * scale)
    deg, rem = divmod(total, 3600 * scale)
    arcmin, arcsec = divmod(rem, 60 * scale)
    if ndecimal > 0:
        sec_text = f'{arcsec / scale:0{ndecimal + 3}.{ndecimal}f}'
    else:
        sec_text = f'{arcsec:02d}'
    return f'{sign}{deg}d {arcmin:02d}\' {sec_text}"'
