"""World-to-screen projection in [-1, 1] anchor space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from sunmoon_tracker.geometry3d import read_only
from sunmoon_tracker.providers import Camera, TrackingProvider


@dataclass(frozen=True, eq=False)
class ScreenSpaceResult:
    """Screen position in [-1, 1] (y up) and whether the point is in front.

    The two fields are computed independently; a point behind the camera can
    still project onto the screen, so check is_in_front before showing it.
    """

    position: np.ndarray
    is_in_front: bool


def world_to_screen(
    tracking: TrackingProvider,
    camera: Camera | None,
    world_position: Sequence[float],
) -> ScreenSpaceResult | None:
    """Project a world position for screen placement.

    Parameters:
        tracking: Pose of the tracked camera.
        camera: Camera doing the projection; None when not configured.
        world_position: Point in world space.

    Returns:
        ScreenSpaceResult, or None without a camera.
    """
    if camera is None:
        return None
    point = np.append(np.asarray(world_position, dtype=np.float64), 1.0)
    local = np.asarray(tracking.inverted_world_transform(), dtype=np.float64) @ point
    is_in_front = bool(local[2] < 0)
    x, y = camera.world_space_to_screen_space(world_position)[:2]
    position = np.array([(x - 0.5) * 2, (1 - y - 0.5) * 2])
    return ScreenSpaceResult(position=read_only(position), is_in_front=is_in_front)
