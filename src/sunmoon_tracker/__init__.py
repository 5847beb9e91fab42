"""Sun and Moon tracking for camera-based scenes.

Computes the Sun's and Moon's azimuth, altitude, and distance from a closed-form
low-precision model, then turns them into a world-space direction using the
device's GPS fix, compass heading, and tilt.
"""

from sunmoon_tracker.ephemeris import CelestialBody, SkyPosition, moon_position, sun_position
from sunmoon_tracker.orientation import TrackResult
from sunmoon_tracker.screen import ScreenSpaceResult
from sunmoon_tracker.tracker import SunMoonTracker, TrackingError

__all__: list[str] = [
    'CelestialBody',
    'ScreenSpaceResult',
    'SkyPosition',
    'SunMoonTracker',
    'TrackResult',
    'TrackingError',
    'moon_position',
    'sun_position',
]
