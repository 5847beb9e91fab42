"""Fake host collaborators shared by the tracker tests."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Callable

import numpy as np
import pytest

from sunmoon_tracker.config import HANDHELD, TrackerSettings
from sunmoon_tracker.providers import CameraFacing
from sunmoon_tracker.scheduler import ManualFrameScheduler
from sunmoon_tracker.tracker import SunMoonTracker

NOON_LONDON = datetime(2024, 6, 21, 12, 0, tzinfo=timezone.utc)

MakeTracker = Callable[..., SunMoonTracker]


class FakeClock:
    """Manually advanced uptime clock (seconds)."""

    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


class FakeTracking:
    """Camera pose from a yaw (degrees, clockwise from north) and roll (radians)."""

    def __init__(self, yaw_deg: float = 0.0, roll_rad: float = 0.0) -> None:
        self.camera_facing = CameraFacing.BACK
        self.set_pose(yaw_deg, roll_rad)

    def set_pose(self, yaw_deg: float = 0.0, roll_rad: float = 0.0) -> None:
        # World: x east, y up, -z north. Looking north with no roll is identity.
        yaw = math.radians(yaw_deg)
        yaw_m = np.array([
            [math.cos(yaw), 0.0, -math.sin(yaw)],
            [0.0, 1.0, 0.0],
            [math.sin(yaw), 0.0, math.cos(yaw)],
        ])
        roll_m = np.array([
            [math.cos(roll_rad), -math.sin(roll_rad), 0.0],
            [math.sin(roll_rad), math.cos(roll_rad), 0.0],
            [0.0, 0.0, 1.0],
        ])
        self.rotation = yaw_m @ roll_m
        self.forward = self.rotation @ np.array([0.0, 0.0, -1.0])
        self.up = self.rotation @ np.array([0.0, 1.0, 0.0])

    def inverted_world_transform(self) -> np.ndarray:
        m = np.eye(4)
        m[:3, :3] = self.rotation.T
        return m


class FakeCamera:
    """Pinhole projection with a 90 degree field of view, y growing downward."""

    def __init__(self, tracking: FakeTracking) -> None:
        self.tracking = tracking

    def world_space_to_screen_space(self, world_position: Any) -> tuple[float, float]:
        local = self.tracking.rotation.T @ np.asarray(world_position, dtype=np.float64)
        depth = -local[2]
        if depth == 0.0:
            return (0.5, 0.5)
        return (0.5 + 0.5 * local[0] / depth, 0.5 - 0.5 * local[1] / depth)


class FakeLocationService:
    """Location service whose fixes and headings are pushed by the test."""

    def __init__(self, latitude: float = 51.0, longitude: float = 0.0) -> None:
        self.accuracy: Any = None
        self.location = SimpleNamespace(
            latitude=latitude,
            longitude=longitude,
            altitude=12.0,
            horizontal_accuracy=5.0,
            vertical_accuracy=8.0,
        )
        self.requests = 0
        self.pending: list[tuple[Callable[[Any], None], Callable[[str], None]]] = []
        self.listeners: list[Callable[[Any], None]] = []

    def get_current_position(
        self, on_fix: Callable[[Any], None], on_error: Callable[[str], None]
    ) -> None:
        self.requests += 1
        self.pending.append((on_fix, on_error))

    def resolve(self) -> None:
        pending, self.pending = self.pending, []
        for on_fix, _ in pending:
            on_fix(self.location)

    def fail(self, message: str) -> None:
        pending, self.pending = self.pending, []
        for _, on_error in pending:
            on_error(message)

    def add_orientation_listener(self, listener: Callable[[Any], None]) -> None:
        self.listeners.append(listener)

    def north_aligned_heading(self, orientation: Any) -> float:
        return float(orientation['heading'])

    def emit_heading(self, heading_deg: float) -> None:
        for listener in self.listeners:
            listener({'heading': heading_deg})


class FlakyLocationService(FakeLocationService):
    """Location service whose first position requests raise synchronously."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures

    def get_current_position(
        self, on_fix: Callable[[Any], None], on_error: Callable[[str], None]
    ) -> None:
        if self.failures:
            self.failures -= 1
            self.requests += 1
            raise RuntimeError('GPS hardware unavailable')
        super().get_current_position(on_fix, on_error)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tracking() -> FakeTracking:
    return FakeTracking()


@pytest.fixture
def camera(tracking: FakeTracking) -> FakeCamera:
    return FakeCamera(tracking)


@pytest.fixture
def location() -> FakeLocationService:
    return FakeLocationService()


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture
def settings() -> TrackerSettings:
    return TrackerSettings()


@pytest.fixture
def make_tracker(
    tracking: FakeTracking,
    camera: FakeCamera,
    location: FakeLocationService,
    scheduler: ManualFrameScheduler,
    clock: FakeClock,
    settings: TrackerSettings,
) -> MakeTracker:
    """Build a tracker on the shared fakes; keyword args override defaults."""

    def _make(**kwargs: Any) -> SunMoonTracker:
        options: dict[str, Any] = {
            'camera': camera,
            'clock': clock,
            'now': lambda: NOON_LONDON,
            'settings': settings,
            'profile': HANDHELD,
        }
        options.update(kwargs)
        return SunMoonTracker(tracking, lambda: location, scheduler, **options)

    return _make
