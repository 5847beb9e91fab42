"""Interfaces of the host collaborators the tracker consumes.

The host supplies device tracking, a camera, a location service, and a frame
scheduler. Vectors are length-3 sequences in a right-handed, y-up world.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Protocol, Sequence

import numpy as np


class CameraFacing(enum.Enum):
    BACK = 'back'
    FRONT = 'front'


class LocationAccuracy(enum.Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


class TrackingProvider(Protocol):
    """Device/camera pose.

    forward is the direction the camera looks along (its local -Z axis), up
    its local +Y axis, both in world space.
    """

    @property
    def forward(self) -> Sequence[float]: ...

    @property
    def up(self) -> Sequence[float]: ...

    @property
    def camera_facing(self) -> CameraFacing: ...

    def inverted_world_transform(self) -> np.ndarray:
        """4x4 world-to-local matrix of the tracked camera."""
        ...


class Camera(Protocol):
    def world_space_to_screen_space(self, world_position: Sequence[float]) -> Sequence[float]:
        """Project to (x, y) in [0, 1] with y growing downward."""
        ...


class Location(Protocol):
    """A GPS fix as delivered by the location service."""

    latitude: float
    longitude: float
    altitude: float
    horizontal_accuracy: float
    vertical_accuracy: float


class LocationService(Protocol):
    accuracy: LocationAccuracy

    def get_current_position(
        self,
        on_fix: Callable[[Location], None],
        on_error: Callable[[str], None],
    ) -> None:
        """One-shot asynchronous position request."""
        ...

    def add_orientation_listener(self, listener: Callable[[Any], None]) -> None:
        """Subscribe to continuous raw device orientation updates."""
        ...

    def north_aligned_heading(self, orientation: Any) -> float:
        """Heading in degrees (0 = true north, clockwise) for a raw orientation."""
        ...


class FrameScheduler(Protocol):
    def add_frame_callback(self, callback: Callable[[], None]) -> None:
        """Call callback once per rendered frame until removed."""
        ...

    def remove_frame_callback(self, callback: Callable[[], None]) -> None: ...
