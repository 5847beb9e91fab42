"""CLI entry point: sunmoon-tracker sun|moon position listings."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import TextIO

from sunmoon_tracker.angle_utils import dms_string
from sunmoon_tracker.constants import KM_IN_CM
from sunmoon_tracker.ephemeris import CelestialBody
from sunmoon_tracker.record import Record
from sunmoon_tracker.time_utils import interval_seconds, parse_datetime

logger = logging.getLogger(__name__)

MAX_ROWS = 10000

_COLUMNS = {'time': 19, 'azimuth': 16, 'altitude': 16, 'distance': 14}


def _configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI (stderr, level from --verbose or SUNMOON_TRACKER_LOG)."""
    level = logging.DEBUG if verbose else logging.WARNING
    env_level = os.environ.get('SUNMOON_TRACKER_LOG', '').upper()
    if env_level in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        level = getattr(logging, env_level)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr,
    )


def _format_angle(value: float, dms: bool) -> str:
    return dms_string(value) if dms else f'{value:.4f}'


def write_positions(
    body: CelestialBody,
    latitude: float,
    longitude: float,
    times: list[datetime],
    output: TextIO,
    *,
    dms: bool = False,
) -> None:
    """Write one row per time: UTC time, azimuth, altitude, distance (km)."""
    rec = Record(_COLUMNS)
    rec.append('Time (UTC)'.ljust(_COLUMNS['time']))
    rec.append('Azimuth', 'azimuth')
    rec.append('Altitude', 'altitude')
    rec.append('Distance (km)', 'distance')
    rec.write(output)
    for t in times:
        sky = body.position(t, latitude, longitude)
        rec.append(t.strftime('%Y-%m-%d %H:%M:%S'))
        rec.append(_format_angle(sky.azimuth_deg, dms), 'azimuth')
        rec.append(_format_angle(sky.altitude_deg, dms), 'altitude')
        rec.append(f'{sky.distance_cm / KM_IN_CM:.0f}', 'distance')
        rec.write(output)


def _time_grid(start: datetime, stop: datetime | None, step_seconds: float) -> list[datetime]:
    """Times from start to stop inclusive (just start when stop is None)."""
    if stop is None:
        return [start]
    if stop < start:
        raise ValueError('Stop time is before start time')
    nsteps = int((stop - start).total_seconds() / step_seconds) + 1
    if nsteps > MAX_ROWS:
        raise ValueError(f'Number of time steps exceeds limit of {MAX_ROWS}')
    return [start + timedelta(seconds=i * step_seconds) for i in range(nsteps)]


def _positions_cmd(args: argparse.Namespace) -> int:
    """Run a sun/moon listing.

    Parameters:
        args: Parsed args; command, lat, lon, time, stop, interval, time_unit.

    Returns:
        Exit code 0 on success, 1 on error.
    """
    body = CelestialBody.SUN if args.command == 'sun' else CelestialBody.MOON
    if args.time:
        start = parse_datetime(args.time)
        if start is None:
            print(f'Invalid time: {args.time!r}', file=sys.stderr)
            return 1
    else:
        start = datetime.now(timezone.utc).replace(microsecond=0)
    stop = None
    if args.stop:
        stop = parse_datetime(args.stop)
        if stop is None:
            print(f'Invalid stop time: {args.stop!r}', file=sys.stderr)
            return 1
    try:
        step = interval_seconds(args.interval, args.time_unit)
        times = _time_grid(start, stop, step)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    logger.info('%s: %d rows for %.4f, %.4f', body.display_name, len(times), args.lat, args.lon)
    write_positions(body, args.lat, args.lon, times, sys.stdout, dms=args.dms)
    return 0


def main() -> int:
    """Entry point for sunmoon-tracker CLI (sun | moon).

    Returns:
        Exit code 0 on success, 1 on failure.
    """
    parser = argparse.ArgumentParser(
        prog='sunmoon-tracker',
        description='Sun and Moon azimuth, altitude, and distance for an observer.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)
    for name in ('sun', 'moon'):
        sub = subparsers.add_parser(name, help=f'List {name} positions')
        sub.add_argument('--lat', type=float, required=True, help='Latitude (deg, north positive)')
        sub.add_argument('--lon', type=float, required=True, help='Longitude (deg, east positive)')
        sub.add_argument('--time', type=str, default='', help='Start time (UTC); default now')
        sub.add_argument('--stop', type=str, default='', help='Stop time (UTC) for a listing')
        sub.add_argument('--interval', type=float, default=1.0, help='Time step')
        sub.add_argument(
            '--time-unit',
            type=str,
            default='hour',
            choices=['sec', 'min', 'hour', 'day'],
        )
        sub.add_argument('--dms', action='store_true', help='Show angles as deg/min/sec')
        sub.add_argument('-v', '--verbose', action='store_true', help='Show DEBUG logs')

    args = parser.parse_args()
    _configure_logging(args.verbose)
    return _positions_cmd(args)


if __name__ == '__main__':
    sys.exit(main())
