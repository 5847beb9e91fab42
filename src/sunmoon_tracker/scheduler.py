"""Cooperative per-frame waiting: run a callback once a predicate holds."""

from __future__ import annotations

import logging
from typing import Callable

from sunmoon_tracker.providers import FrameScheduler

logger = logging.getLogger(__name__)


class ManualFrameScheduler:
    """FrameScheduler driven by explicit tick() calls (tests, offline hosts)."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []
        self.frame = 0

    def add_frame_callback(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def remove_frame_callback(self, callback: Callable[[], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def pending(self) -> int:
        """Number of registered frame callbacks."""
        return len(self._callbacks)

    def tick(self, frames: int = 1) -> None:
        """Advance frames, calling every registered callback once per frame.

        Callbacks added during a frame first run on the next one.
        """
        for _ in range(frames):
            self.frame += 1
            for callback in list(self._callbacks):
                if callback in self._callbacks:
                    callback()


class Waiter:
    """A pending wait_until registration."""

    def __init__(
        self,
        scheduler: FrameScheduler,
        predicate: Callable[[], bool],
        on_ready: Callable[[], None],
        expired: Callable[[], bool] | None,
        on_expired: Callable[[], None] | None,
    ) -> None:
        self._scheduler = scheduler
        self._predicate = predicate
        self._on_ready = on_ready
        self._expired = expired
        self._on_expired = on_expired
        self.done = False

    def poll(self) -> None:
        """Check once; on success or expiry unsubscribe and fire the callback."""
        if self.done:
            return
        if self._predicate():
            self._finish()
            self._on_ready()
        elif self._expired is not None and self._expired():
            self._finish()
            if self._on_expired is not None:
                self._on_expired()

    def cancel(self) -> None:
        """Stop polling without firing any callback."""
        self._finish()

    def _finish(self) -> None:
        self.done = True
        self._scheduler.remove_frame_callback(self.poll)


def wait_until(
    scheduler: FrameScheduler,
    predicate: Callable[[], bool],
    on_ready: Callable[[], None],
    *,
    expired: Callable[[], bool] | None = None,
    on_expired: Callable[[], None] | None = None,
) -> Waiter:
    """Call on_ready as soon as predicate() is true.

    The predicate is checked immediately; if false, it is re-checked once per
    frame. When expired() becomes true first, on_expired is called instead.

    Parameters:
        scheduler: Frame scheduler to poll on.
        predicate: Readiness check.
        on_ready: Called once when ready.
        expired: Optional give-up check, evaluated after predicate.
        on_expired: Called once on expiry.

    Returns:
        The Waiter (already done when the predicate held immediately).
    """
    waiter = Waiter(scheduler, predicate, on_ready, expired, on_expired)
    if predicate():
        waiter.done = True
        on_ready()
        return waiter
    logger.debug('Waiting on frames for %s', getattr(predicate, '__name__', predicate))
    scheduler.add_frame_callback(waiter.poll)
    return waiter
