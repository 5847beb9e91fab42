"""Turn a sky position plus device heading/tilt into a world-space direction."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import numpy as np

from sunmoon_tracker.angle_utils import remap
from sunmoon_tracker.config import PlatformProfile, TrackerSettings
from sunmoon_tracker.constants import HALF_CIRCLE_DEGREES
from sunmoon_tracker.ephemeris import CelestialBody, SkyPosition
from sunmoon_tracker.geometry3d import (
    horizontal_to_local,
    look_rotation,
    read_only,
    rotate_y,
    yaw_rotation,
)
from sunmoon_tracker.providers import CameraFacing
from sunmoon_tracker.sensors import GeoFix


@dataclass(frozen=True, eq=False)
class TrackResult:
    """Everything known about one successful Sun/Moon request.

    directional_rotation is a quaternion (x, y, z, w) turning +z toward the
    body: the rotation a directional light takes to match the body. direction
    is the unit vector from the user toward the body; world_position is that
    vector scaled by the body's distance. The arrays are read-only, and
    results compare by identity.
    """

    directional_rotation: np.ndarray
    direction: np.ndarray
    azimuth_deg: float
    altitude_deg: float
    distance_cm: float
    world_position: np.ndarray
    user_heading_deg: float
    user_latitude: float
    user_longitude: float
    user_altitude: float
    horizontal_accuracy: float
    vertical_accuracy: float
    measured_at: datetime
    body_name: str


def working_heading(
    heading_deg: float,
    tilt_rad: float,
    front_camera: bool,
    settings: TrackerSettings,
    profile: PlatformProfile,
) -> float:
    """Heading after camera-facing, platform, and tilt corrections.

    Parameters:
        heading_deg: Raw north-aligned heading.
        tilt_rad: Signed device roll from the same poll.
        front_camera: True when the front (selfie) camera is active.
        settings: Tilt tunables.
        profile: Platform quirks.

    Returns:
        Corrected heading in degrees (not wrapped).
    """
    heading = heading_deg
    if front_camera:
        heading *= -1
    if profile.flip_heading_180:
        heading += HALF_CIRCLE_DEGREES
    if tilt_rad:
        threshold = settings.upright_threshold
        half_range = settings.tilt_heading_offset / 2
        heading -= remap(tilt_rad, -threshold, threshold, -half_range * threshold, half_range * threshold)
    return heading


def world_direction(
    sky: SkyPosition,
    heading_deg: float,
    camera_forward: Sequence[float],
    front_camera: bool,
) -> np.ndarray:
    """Unit vector from the user toward the body in world space.

    Parameters:
        sky: Solved body position.
        heading_deg: Corrected device heading.
        camera_forward: Camera viewing direction in world space.
        front_camera: Mirror the azimuth for the front camera.

    Returns:
        Length-3 unit vector.
    """
    azimuth = HALF_CIRCLE_DEGREES - sky.azimuth_deg if front_camera else sky.azimuth_deg
    local = horizontal_to_local(azimuth, sky.altitude_deg)
    device = rotate_y(local, -heading_deg)
    back_axis = -np.asarray(camera_forward, dtype=np.float64)
    return yaw_rotation(back_axis).apply(device)


def build_track_result(
    body: CelestialBody,
    sky: SkyPosition,
    fix: GeoFix,
    heading_deg: float,
    tilt_rad: float,
    camera_forward: Sequence[float],
    camera_facing: CameraFacing,
    measured_at: datetime,
    settings: TrackerSettings,
    profile: PlatformProfile,
) -> TrackResult:
    """Assemble the TrackResult for a solved position and a sensor snapshot."""
    front_camera = profile.track_camera_facing and camera_facing is CameraFacing.FRONT
    heading = working_heading(heading_deg, tilt_rad, front_camera, settings, profile)
    direction = world_direction(sky, heading, camera_forward, front_camera)
    return TrackResult(
        directional_rotation=read_only(look_rotation(direction).as_quat()),
        direction=read_only(direction),
        azimuth_deg=sky.azimuth_deg,
        altitude_deg=sky.altitude_deg,
        distance_cm=sky.distance_cm,
        world_position=read_only(direction * sky.distance_cm),
        user_heading_deg=heading,
        user_latitude=fix.latitude,
        user_longitude=fix.longitude,
        user_altitude=fix.altitude,
        horizontal_accuracy=fix.horizontal_accuracy,
        vertical_accuracy=fix.vertical_accuracy,
        measured_at=measured_at,
        body_name=body.display_name,
    )
