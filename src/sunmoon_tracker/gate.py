"""Readiness gate: per-body search state, GPS fix cache, heading/tilt readiness.

A request moves its body from IDLE to SEARCHING, waits for the startup
interval, obtains the (cached) GPS fix, then waits frame by frame until a
fresh heading and an upright device are available at the same time.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Callable

from sunmoon_tracker.config import TrackerSettings
from sunmoon_tracker.ephemeris import CelestialBody
from sunmoon_tracker.providers import (
    FrameScheduler,
    Location,
    LocationAccuracy,
    LocationService,
    TrackingProvider,
)
from sunmoon_tracker.scheduler import wait_until
from sunmoon_tracker.sensors import (
    GeoFix,
    HeadingMonitor,
    HeadingSample,
    TiltState,
    measure_tilt,
)

logger = logging.getLogger(__name__)

ALREADY_ACTIVE = 'Aborted because a search is already active.'
READY_TIMEOUT = 'Timed out waiting for a fresh heading and an upright device.'

ReadyCallback = Callable[[GeoFix, HeadingSample, TiltState], None]
FailCallback = Callable[[str], None]


class SearchState(enum.Enum):
    IDLE = 'idle'
    SEARCHING = 'searching'


class ReadinessGate:
    """Sensor state shared by all requests of one tracker.

    Parameters:
        tracking: Camera pose provider (for tilt).
        location_factory: Creates the location service on first use.
        scheduler: Frame scheduler used for polling.
        clock: Seconds since tracker start.
        settings: Timing and tilt tunables.
    """

    def __init__(
        self,
        tracking: TrackingProvider,
        location_factory: Callable[[], LocationService],
        scheduler: FrameScheduler,
        clock: Callable[[], float],
        settings: TrackerSettings,
    ) -> None:
        self._tracking = tracking
        self._location_factory = location_factory
        self._scheduler = scheduler
        self._clock = clock
        self.settings = settings
        self._lock = threading.Lock()
        self._states = {body: SearchState.IDLE for body in CelestialBody}
        self._service: LocationService | None = None
        self.heading = HeadingMonitor(clock, settings.heading_lifetime)
        self.tilt = TiltState(0.0, True)
        self.fix: GeoFix | None = None
        self._fix_waiters: list[tuple[Callable[[GeoFix], None], FailCallback]] = []

    # --- search state ---

    def state(self, body: CelestialBody) -> SearchState:
        return self._states[body]

    def try_begin(self, body: CelestialBody) -> bool:
        """Move body to SEARCHING; False if a search is already running."""
        with self._lock:
            if self._states[body] is SearchState.SEARCHING:
                return False
            self._states[body] = SearchState.SEARCHING
        logger.debug('%s: searching', body.display_name)
        return True

    def release(self, body: CelestialBody) -> None:
        with self._lock:
            self._states[body] = SearchState.IDLE
        logger.debug('%s: idle', body.display_name)

    # --- location service ---

    def ensure_location_service(self) -> LocationService:
        """Location service, created and subscribed to headings on first call."""
        if self._service is None:
            service = self._location_factory()
            service.accuracy = LocationAccuracy.LOW
            # Subscribe before any fix is requested so headings are already
            # flowing by the time a request needs one.
            service.add_orientation_listener(self.heading.listener(service.north_aligned_heading))
            self._service = service
            logger.debug('Location service created')
        return self._service

    def request_fix(self, on_fix: Callable[[GeoFix], None], on_error: FailCallback) -> None:
        """Deliver the GPS fix, fetching it only if none is cached or in flight."""
        if self.fix is not None:
            on_fix(self.fix)
            return
        self._fix_waiters.append((on_fix, on_error))
        if len(self._fix_waiters) > 1:
            return
        logger.debug('Requesting GPS position')
        try:
            service = self.ensure_location_service()
            service.get_current_position(self._on_location, self._on_location_error)
        except Exception as e:
            # Nothing is in flight, so every attached waiter fails now.
            self._on_location_error(e)

    def _on_location(self, location: Location) -> None:
        self.fix = GeoFix.from_location(location)
        logger.debug('GPS fix %.4f, %.4f', self.fix.latitude, self.fix.longitude)
        waiters, self._fix_waiters = self._fix_waiters, []
        for on_fix, _ in waiters:
            on_fix(self.fix)

    def _on_location_error(self, error: object) -> None:
        logger.info('GPS position request failed: %s', error)
        waiters, self._fix_waiters = self._fix_waiters, []
        for _, on_error in waiters:
            on_error(str(error))

    # --- readiness ---

    def has_started(self) -> bool:
        """True once the startup interval has passed."""
        return self._clock() > self.settings.initial_wait

    def check_tilt(self) -> TiltState:
        """Measure and store the current tilt (always upright when disabled)."""
        if self.settings.await_upright:
            self.tilt = measure_tilt(self._tracking, self.settings.upright_threshold)
        return self.tilt

    def is_ready(self) -> bool:
        """A fresh heading sample exists and the device is upright."""
        if self.heading.fresh_sample() is None:
            return False
        return self.check_tilt().is_upright

    def acquire(self, body: CelestialBody, on_ready: ReadyCallback, on_fail: FailCallback) -> None:
        """Run the startup, fix, and readiness waits for one request.

        on_ready receives the fix, the heading sample, and the tilt measured in
        the same poll. On failure the body is released before on_fail runs;
        on success releasing is left to the caller.
        """
        self.ensure_location_service()

        def _fail(message: str) -> None:
            self.release(body)
            on_fail(message)

        def _await_sensors(fix: GeoFix) -> None:
            ready: list[HeadingSample] = []

            def _sensors_ready() -> bool:
                sample = self.heading.fresh_sample()
                if sample is None or not self.check_tilt().is_upright:
                    return False
                ready.append(sample)
                return True

            expired: Callable[[], bool] | None = None
            timeout = self.settings.ready_timeout
            if timeout is not None:
                deadline = self._clock() + timeout

                def _past_deadline() -> bool:
                    return self._clock() >= deadline

                expired = _past_deadline

            wait_until(
                self._scheduler,
                _sensors_ready,
                lambda: on_ready(fix, ready[-1], self.tilt),
                expired=expired,
                on_expired=lambda: _fail(READY_TIMEOUT),
            )

        wait_until(
            self._scheduler,
            self.has_started,
            lambda: self.request_fix(_await_sensors, _fail),
        )
