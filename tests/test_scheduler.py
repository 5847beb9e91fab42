"""Tests for frame-driven waiting."""

from __future__ import annotations

from sunmoon_tracker.scheduler import ManualFrameScheduler, wait_until


def test_ready_immediately_runs_synchronously() -> None:
    """A predicate that already holds fires without registering a frame callback."""
    scheduler = ManualFrameScheduler()
    calls: list[str] = []
    waiter = wait_until(scheduler, lambda: True, lambda: calls.append('ready'))
    assert calls == ['ready']
    assert waiter.done
    assert scheduler.pending == 0


def test_polls_each_frame_until_ready() -> None:
    scheduler = ManualFrameScheduler()
    state = {'ready': False}
    calls: list[int] = []
    wait_until(scheduler, lambda: state['ready'], lambda: calls.append(scheduler.frame))
    scheduler.tick(3)
    assert calls == []
    assert scheduler.pending == 1

    state['ready'] = True
    scheduler.tick()
    assert calls == [4]
    assert scheduler.pending == 0

    scheduler.tick(2)
    assert calls == [4]


def test_expiry_fires_on_expired_once() -> None:
    scheduler = ManualFrameScheduler()
    calls: list[str] = []
    wait_until(
        scheduler,
        lambda: False,
        lambda: calls.append('ready'),
        expired=lambda: scheduler.frame >= 2,
        on_expired=lambda: calls.append('expired'),
    )
    scheduler.tick(5)
    assert calls == ['expired']
    assert scheduler.pending == 0


def test_ready_wins_over_expiry_in_same_frame() -> None:
    """The predicate is checked before the expiry."""
    scheduler = ManualFrameScheduler()
    calls: list[str] = []
    wait_until(
        scheduler,
        lambda: scheduler.frame >= 1,
        lambda: calls.append('ready'),
        expired=lambda: scheduler.frame >= 1,
        on_expired=lambda: calls.append('expired'),
    )
    scheduler.tick()
    assert calls == ['ready']


def test_cancel_stops_polling() -> None:
    scheduler = ManualFrameScheduler()
    calls: list[str] = []
    waiter = wait_until(scheduler, lambda: False, lambda: calls.append('ready'))
    waiter.cancel()
    assert waiter.done
    assert scheduler.pending == 0
    scheduler.tick()
    assert calls == []


def test_callbacks_added_during_frame_run_next_frame() -> None:
    """A wait registered from inside a frame callback is first polled on the next frame."""
    scheduler = ManualFrameScheduler()
    polls: list[int] = []

    def _inner_predicate() -> bool:
        polls.append(scheduler.frame)
        return False

    wait_until(
        scheduler,
        lambda: scheduler.frame >= 1,
        lambda: wait_until(scheduler, _inner_predicate, lambda: None),
    )
    scheduler.tick()
    # Checked once immediately on registration, inside frame 1
    assert polls == [1]
    scheduler.tick()
    assert polls == [1, 2]
