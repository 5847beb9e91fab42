"""Tests for the sunmoon-tracker command line listings."""

from __future__ import annotations

import io
import sys
from datetime import datetime, timezone

import pytest

from sunmoon_tracker.cli import main as cli_main
from sunmoon_tracker.ephemeris import CelestialBody, sun_position


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, 'argv', ['sunmoon-tracker', *argv])
    return cli_main.main()


def test_sun_single_time(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    rc = _run(monkeypatch, 'sun', '--lat', '51.0', '--lon', '0', '--time', '2024-06-21 12:00:00')
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith('Time (UTC)')
    assert 'Distance (km)' in lines[0]
    assert len(lines) == 2
    expected = sun_position(datetime(2024, 6, 21, 12, tzinfo=timezone.utc), 51.0, 0.0)
    fields = lines[1].split()
    assert fields[:2] == ['2024-06-21', '12:00:00']
    assert fields[2] == f'{expected.azimuth_deg:.4f}'
    assert fields[3] == f'{expected.altitude_deg:.4f}'
    assert fields[4] == f'{expected.distance_cm / 1e5:.0f}'


def test_moon_listing_with_interval(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    rc = _run(
        monkeypatch,
        'moon',
        '--lat', '-33.9',
        '--lon', '18.4',
        '--time', '2024-01-01 00:00:00',
        '--stop', '2024-01-01 03:00:00',
        '--interval', '30',
        '--time-unit', 'min',
    )
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1 + 7
    assert lines[-1].startswith('2024-01-01 03:00:00')


def test_dms_output(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    rc = _run(
        monkeypatch, 'sun', '--lat', '10', '--lon', '10', '--time', '2024-03-01 00:00:00', '--dms'
    )
    assert rc == 0
    row = capsys.readouterr().out.splitlines()[1]
    assert 'd ' in row
    assert '"' in row


def test_invalid_time(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli_main, 'parse_datetime', lambda s: None)
    rc = _run(monkeypatch, 'sun', '--lat', '0', '--lon', '0', '--time', 'whenever')
    assert rc == 1
    assert 'Invalid time' in capsys.readouterr().err


def test_stop_before_start(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    rc = _run(
        monkeypatch,
        'sun', '--lat', '0', '--lon', '0',
        '--time', '2024-01-02 00:00:00', '--stop', '2024-01-01 00:00:00',
    )
    assert rc == 1
    assert 'before start' in capsys.readouterr().err


def test_too_many_rows(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    rc = _run(
        monkeypatch,
        'sun', '--lat', '0', '--lon', '0',
        '--time', '2024-01-01 00:00:00', '--stop', '2025-01-01 00:00:00',
        '--interval', '1', '--time-unit', 'min',
    )
    assert rc == 1
    assert 'exceeds limit' in capsys.readouterr().err


def test_missing_lat_is_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, 'sun', '--lon', '0')
    assert exc.value.code == 2


def test_write_positions_header_only_for_no_times() -> None:
    out = io.StringIO()
    cli_main.write_positions(CelestialBody.SUN, 0.0, 0.0, [], out)
    assert out.getvalue().count('\n') == 1
    assert out.getvalue().startswith('Time (UTC)')
