"""3D vector and rotation helpers for the y-up world frame."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from sunmoon_tracker.angle_utils import deg_to_rad
from sunmoon_tracker.constants import TILT_PARALLEL_LIMIT, WORLD_FORWARD, WORLD_RIGHT, WORLD_UP


def normalize(v: Sequence[float]) -> np.ndarray:
    """Unit vector along v (zero vector returned unchanged)."""
    arr = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(arr)
    if n == 0.0:
        return arr
    return arr / n


def horizontal_to_local(azimuth_deg: float, altitude_deg: float) -> np.ndarray:
    """Unit vector toward (azimuth, altitude): x east, y up, -z north."""
    az = deg_to_rad(azimuth_deg)
    alt = deg_to_rad(altitude_deg)
    return np.array([
        math.cos(alt) * math.sin(az),
        math.sin(alt),
        -math.cos(alt) * math.cos(az),
    ])


def rotate_y(v: Sequence[float], degrees: float) -> np.ndarray:
    """Rotate v about the vertical axis; positive degrees turn +x toward +z."""
    rad = deg_to_rad(degrees)
    c = math.cos(rad)
    s = math.sin(rad)
    return np.array([v[0] * c - v[2] * s, v[1], v[0] * s + v[2] * c])


def yaw_rotation(axis: Sequence[float]) -> Rotation:
    """Rotation about world up by the heading of axis flattened onto the ground plane.

    The rotation takes world +z onto the horizontal projection of axis.
    """
    angle = math.atan2(axis[0], axis[2])
    return Rotation.from_rotvec(np.asarray(WORLD_UP) * angle)


def look_rotation(direction: Sequence[float], up: Sequence[float] = WORLD_UP) -> Rotation:
    """Rotation taking +z onto direction, keeping +y as close to up as possible.

    When direction is parallel to up, world forward stands in as the reference.
    """
    z_axis = normalize(direction)
    x_axis = np.cross(np.asarray(up, dtype=np.float64), z_axis)
    if np.linalg.norm(x_axis) < 1e-9:
        x_axis = np.cross(np.asarray(WORLD_FORWARD, dtype=np.float64), z_axis)
        if np.linalg.norm(x_axis) < 1e-9:
            x_axis = np.asarray(WORLD_RIGHT, dtype=np.float64)
    x_axis = normalize(x_axis)
    y_axis = np.cross(z_axis, x_axis)
    return Rotation.from_matrix(np.column_stack([x_axis, y_axis, z_axis]))


def roll_angle(axis: Sequence[float], up: Sequence[float]) -> float:
    """Signed roll of a device about axis, in radians.

    Compares the device's up vector (projected perpendicular to axis) with the
    up a level device would have. World right replaces world up as the
    reference when axis is nearly vertical.

    Parameters:
        axis: Device +z axis in world space.
        up: Device +y axis in world space.

    Returns:
        Angle in (-pi, pi]; 0 when level.
    """
    fwd = np.asarray(axis, dtype=np.float64)
    dev_up = np.asarray(up, dtype=np.float64)
    world_up = np.asarray(WORLD_UP, dtype=np.float64)
    if abs(np.dot(fwd, world_up)) > TILT_PARALLEL_LIMIT:
        world_up = np.asarray(WORLD_RIGHT, dtype=np.float64)
    ref_right = normalize(np.cross(fwd, world_up))
    ref_up = normalize(np.cross(ref_right, fwd))
    projected_up = normalize(dev_up - fwd * np.dot(fwd, dev_up))
    return math.atan2(float(np.dot(ref_right, projected_up)), float(np.dot(ref_up, projected_up)))


def read_only(arr: np.ndarray) -> np.ndarray:
    """Mark arr non-writeable in place and return it."""
    arr.setflags(write=False)
    return arr
