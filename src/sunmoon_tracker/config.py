"""Configuration: tracker tunables and platform quirks, with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Defaults; env var overrides via settings_from_env().
DEFAULT_INITIAL_WAIT = 1.0  # s of uptime before the first GPS/heading request
DEFAULT_HEADING_LIFETIME = 0.15  # s a heading sample stays valid
DEFAULT_UPRIGHT_THRESHOLD = 0.7  # rad of tilt before tracking is postponed
DEFAULT_TILT_HEADING_OFFSET = 75.0  # deg of heading compensation (measured at threshold=1)
DEFAULT_AWAIT_UPRIGHT = True


@dataclass(frozen=True)
class TrackerSettings:
    """Timing and tilt tunables for one tracker.

    ready_timeout is None to wait indefinitely for a fresh heading and an
    upright device.
    """

    initial_wait: float = DEFAULT_INITIAL_WAIT
    heading_lifetime: float = DEFAULT_HEADING_LIFETIME
    upright_threshold: float = DEFAULT_UPRIGHT_THRESHOLD
    tilt_heading_offset: float = DEFAULT_TILT_HEADING_OFFSET
    await_upright: bool = DEFAULT_AWAIT_UPRIGHT
    ready_timeout: float | None = None


@dataclass(frozen=True)
class PlatformProfile:
    """Empirically tuned hardware quirks.

    flip_heading_180: add 180 degrees to the heading (head-worn devices report
        it reversed).
    track_camera_facing: apply the front-camera heading negation and azimuth
        mirroring; head-worn devices have no front camera.
    """

    flip_heading_180: bool = False
    track_camera_facing: bool = True


HANDHELD = PlatformProfile()
HEAD_WORN = PlatformProfile(flip_heading_180=True, track_camera_facing=False)


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning('Ignoring %s=%r (not a number); using %r', name, raw, default)
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    if raw in ('1', 'true', 'yes', 'on'):
        return True
    if raw in ('0', 'false', 'no', 'off'):
        return False
    logger.warning('Ignoring %s=%r (not a boolean); using %r', name, raw, default)
    return default


def settings_from_env() -> TrackerSettings:
    """Build TrackerSettings from SUNMOON_* environment variables.

    Unset or invalid variables fall back to the defaults. SUNMOON_READY_TIMEOUT
    of zero or less means no timeout.

    Returns:
        TrackerSettings.
    """
    timeout = _env_float('SUNMOON_READY_TIMEOUT', None)
    if timeout is not None and timeout <= 0:
        timeout = None
    return TrackerSettings(
        initial_wait=_env_float('SUNMOON_INITIAL_WAIT', DEFAULT_INITIAL_WAIT),
        heading_lifetime=_env_float('SUNMOON_HEADING_LIFETIME', DEFAULT_HEADING_LIFETIME),
        upright_threshold=_env_float('SUNMOON_UPRIGHT_THRESHOLD', DEFAULT_UPRIGHT_THRESHOLD),
        tilt_heading_offset=_env_float('SUNMOON_TILT_HEADING_OFFSET', DEFAULT_TILT_HEADING_OFFSET),
        await_upright=_env_bool('SUNMOON_AWAIT_UPRIGHT', DEFAULT_AWAIT_UPRIGHT),
        ready_timeout=timeout,
    )


def profile_from_env() -> PlatformProfile:
    """Select a PlatformProfile from SUNMOON_PLATFORM ('handheld' or 'head-worn')."""
    raw = os.environ.get('SUNMOON_PLATFORM', '').strip().lower().replace('_', '-')
    if raw in ('', 'handheld'):
        return HANDHELD
    if raw == 'head-worn':
        return HEAD_WORN
    logger.warning('Unknown SUNMOON_PLATFORM=%r; using handheld', raw)
    return HANDHELD
