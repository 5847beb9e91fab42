"""Sensor samples: GPS fix, latest compass heading, and device tilt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from sunmoon_tracker.geometry3d import roll_angle
from sunmoon_tracker.providers import Location, TrackingProvider


@dataclass(frozen=True)
class GeoFix:
    """Observer location (degrees, meters)."""

    latitude: float
    longitude: float
    altitude: float
    horizontal_accuracy: float
    vertical_accuracy: float

    @classmethod
    def from_location(cls, location: Location) -> GeoFix:
        return cls(
            latitude=float(location.latitude),
            longitude=float(location.longitude),
            altitude=float(location.altitude),
            horizontal_accuracy=float(location.horizontal_accuracy),
            vertical_accuracy=float(location.vertical_accuracy),
        )


@dataclass(frozen=True)
class HeadingSample:
    heading_deg: float  # 0 = true north, 90 = east (cw)
    captured_at: float  # tracker clock seconds


@dataclass(frozen=True)
class TiltState:
    angle_rad: float
    is_upright: bool


class HeadingMonitor:
    """Keeps only the most recent heading sample.

    Every update overwrites the cell, whether or not a request is waiting.
    """

    def __init__(self, clock: Callable[[], float], lifetime: float) -> None:
        self._clock = clock
        self.lifetime = lifetime
        self.latest: HeadingSample | None = None

    def update(self, heading_deg: float) -> None:
        self.latest = HeadingSample(float(heading_deg), self._clock())

    def fresh_sample(self) -> HeadingSample | None:
        """Latest sample if younger than the lifetime, else None."""
        sample = self.latest
        if sample is None:
            return None
        if self._clock() - sample.captured_at < self.lifetime:
            return sample
        return None

    def listener(self, heading_of: Callable[[Any], float]) -> Callable[[Any], None]:
        """Orientation listener that converts raw orientation with heading_of."""

        def _on_orientation(orientation: Any) -> None:
            self.update(heading_of(orientation))

        return _on_orientation


def measure_tilt(tracking: TrackingProvider, threshold: float) -> TiltState:
    """Roll of the tracked camera and whether it is within threshold.

    Parameters:
        tracking: Pose provider; forward is the viewing direction.
        threshold: Maximum absolute roll (radians) still counted as upright.

    Returns:
        TiltState.
    """
    # roll_angle works on the device +z axis, which points back toward the
    # viewer, opposite to the viewing direction.
    axis = -np.asarray(tracking.forward, dtype=np.float64)
    angle = roll_angle(axis, tracking.up)
    return TiltState(angle_rad=angle, is_upright=abs(angle) <= threshold)
