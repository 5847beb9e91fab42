"""Sun/Moon tracker: request a body's position and on-screen direction.

Usage::

    tracker = SunMoonTracker(tracking, location_factory, scheduler, camera=camera)
    tracker.get_sun(lambda info: light.set_rotation(info.directional_rotation))

Requests resolve on a later frame once a GPS fix, a fresh compass heading,
and an upright device are available. Results arrive both through the
callbacks and through the returned Future.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import Callable, Sequence

from sunmoon_tracker.config import (
    PlatformProfile,
    TrackerSettings,
    profile_from_env,
    settings_from_env,
)
from sunmoon_tracker.ephemeris import CelestialBody
from sunmoon_tracker.gate import ALREADY_ACTIVE, ReadinessGate
from sunmoon_tracker.orientation import TrackResult, build_track_result
from sunmoon_tracker.providers import Camera, FrameScheduler, LocationService, TrackingProvider
from sunmoon_tracker.screen import ScreenSpaceResult, world_to_screen
from sunmoon_tracker.sensors import GeoFix, HeadingSample, TiltState

logger = logging.getLogger(__name__)

NO_TRACKING = 'No tracking provider given!'
NO_CALLBACK = 'No on_success callback given!'

SuccessCallback = Callable[[TrackResult], None]
FailCallback = Callable[[str], None]


class TrackingError(RuntimeError):
    """A Sun/Moon request failed; the message is what on_fail received."""


def _uptime_clock() -> Callable[[], float]:
    start = time.monotonic()

    def _clock() -> float:
        return time.monotonic() - start

    return _clock


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SunMoonTracker:
    """Entry point for Sun and Moon requests.

    Parameters:
        tracking: Camera pose provider (required).
        location_factory: Creates the location service on the first request.
        scheduler: Per-frame callback source used while waiting.
        camera: Optional camera for world_to_screen.
        clock: Seconds since start; defaults to a monotonic clock started now.
        now: Current UTC time for the ephemeris; defaults to the system clock.
        settings: Tunables; defaults to settings_from_env().
        profile: Platform quirks; defaults to profile_from_env().

    Raises:
        ValueError: If tracking is None.
    """

    def __init__(
        self,
        tracking: TrackingProvider,
        location_factory: Callable[[], LocationService],
        scheduler: FrameScheduler,
        *,
        camera: Camera | None = None,
        clock: Callable[[], float] | None = None,
        now: Callable[[], datetime] | None = None,
        settings: TrackerSettings | None = None,
        profile: PlatformProfile | None = None,
    ) -> None:
        if tracking is None:
            raise ValueError(NO_TRACKING)
        self.tracking = tracking
        self.camera = camera
        self.settings = settings if settings is not None else settings_from_env()
        self.profile = profile if profile is not None else profile_from_env()
        self._now = now or _utc_now
        self.gate = ReadinessGate(
            tracking,
            location_factory,
            scheduler,
            clock or _uptime_clock(),
            self.settings,
        )

    def get_sun(
        self, on_success: SuccessCallback, on_fail: FailCallback | None = None
    ) -> Future[TrackResult]:
        """Request the Sun's position; see get_body."""
        return self.get_body(CelestialBody.SUN, on_success, on_fail)

    def get_moon(
        self, on_success: SuccessCallback, on_fail: FailCallback | None = None
    ) -> Future[TrackResult]:
        """Request the Moon's position; see get_body."""
        return self.get_body(CelestialBody.MOON, on_success, on_fail)

    def get_body(
        self,
        body: CelestialBody,
        on_success: SuccessCallback,
        on_fail: FailCallback | None = None,
    ) -> Future[TrackResult]:
        """Request a body's position.

        Only one request per body may run at a time; a second one fails at
        once with ALREADY_ACTIVE. Without on_fail, failures only reach the
        returned Future.

        Parameters:
            body: Sun or Moon.
            on_success: Receives the TrackResult.
            on_fail: Optional; receives a human-readable error string.

        Returns:
            Future resolved with the TrackResult or failed with TrackingError.

        Raises:
            TypeError: If on_success is not callable.
        """
        if not callable(on_success):
            raise TypeError(NO_CALLBACK)
        future: Future[TrackResult] = Future()
        if not self.gate.try_begin(body):
            self._fail(future, on_fail, ALREADY_ACTIVE)
            return future

        def _on_ready(fix: GeoFix, sample: HeadingSample, tilt: TiltState) -> None:
            self.gate.release(body)
            result = self._resolve(body, fix, sample, tilt)
            future.set_result(result)
            on_success(result)

        try:
            self.gate.acquire(body, _on_ready, lambda message: self._fail(future, on_fail, message))
        except BaseException:
            self.gate.release(body)
            raise
        return future

    def world_to_screen(self, world_position: Sequence[float]) -> ScreenSpaceResult | None:
        """Screen position (-1..1) of a world point; None without a camera."""
        return world_to_screen(self.tracking, self.camera, world_position)

    def _resolve(
        self,
        body: CelestialBody,
        fix: GeoFix,
        sample: HeadingSample,
        tilt: TiltState,
    ) -> TrackResult:
        measured_at = self._now()
        sky = body.position(measured_at, fix.latitude, fix.longitude)
        logger.debug(
            '%s at azimuth %.2f, altitude %.2f (heading %.1f)',
            body.display_name,
            sky.azimuth_deg,
            sky.altitude_deg,
            sample.heading_deg,
        )
        return build_track_result(
            body,
            sky,
            fix,
            sample.heading_deg,
            tilt.angle_rad,
            self.tracking.forward,
            self.tracking.camera_facing,
            measured_at,
            self.settings,
            self.profile,
        )

    @staticmethod
    def _fail(future: Future[TrackResult], on_fail: FailCallback | None, message: str) -> None:
        future.set_exception(TrackingError(message))
        if on_fail is not None:
            on_fail(message)
        else:
            logger.debug('Request failed without on_fail: %s', message)
