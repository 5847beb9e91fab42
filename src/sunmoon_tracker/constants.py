"""Fixed constants: epochs, angle factors, orbital elements, and unit conversions.

Values follow the low-order solar/lunar model; changing any of them changes
every reported position.
"""

# Time: milliseconds and seconds per unit
MS_PER_DAY = 1000 * 60 * 60 * 24
SECONDS_PER_MINUTE = 60.0
SECONDS_PER_HOUR = 3600.0
SECONDS_PER_DAY = 86400.0

# Julian dates of the Unix epoch (1970-01-01 12:00) and of J2000.0
J1970 = 2440588
J2000 = 2451545

# Angle factors (truncated; results are compared bit-for-bit against the
# reference model, so do not replace with math.radians/math.degrees)
DEG_TO_RAD = 0.01745329251
RAD_TO_DEG = 57.2957795131
DEGREES_PER_CIRCLE = 360.0
HALF_CIRCLE_DEGREES = 180.0

# Obliquity of the ecliptic (degrees), held fixed
EARTH_OBLIQUITY_DEG = 23.44

# Sidereal time: theta = SIDEREAL_AT_J2000 + SIDEREAL_RATE * d (degrees)
SIDEREAL_AT_J2000_DEG = 280.16
SIDEREAL_RATE_DEG = 360.9856235

# Sun: mean anomaly, equation of center, perihelion
SUN_MEAN_ANOMALY_AT_J2000_DEG = 357.5291
SUN_MEAN_ANOMALY_RATE_DEG = 0.98560028
SUN_CENTER_COEFFS_DEG = (1.9148, 0.02, 0.0003)
SUN_PERIHELION_DEG = 102.9372

# Moon: mean longitude, mean anomaly, argument of latitude
MOON_MEAN_LONGITUDE_AT_J2000_DEG = 218.316
MOON_MEAN_LONGITUDE_RATE_DEG = 13.176396
MOON_MEAN_ANOMALY_AT_J2000_DEG = 134.963
MOON_MEAN_ANOMALY_RATE_DEG = 13.064993
MOON_LONGITUDE_PERTURBATION_DEG = 6.289
MOON_LATITUDE_AMPLITUDE_DEG = 5.128
MOON_LATITUDE_ARG_AT_J2000_DEG = 93.272
MOON_LATITUDE_ARG_RATE_DEG = 13.229350
MOON_MEAN_DISTANCE_KM = 385001.0
MOON_DISTANCE_AMPLITUDE_KM = 20905.0

# Distance units
AU_IN_CM = 1.495978707e13
KM_IN_CM = 100000.0

# World axes (y up, right-handed)
WORLD_UP = (0.0, 1.0, 0.0)
WORLD_RIGHT = (1.0, 0.0, 0.0)
WORLD_FORWARD = (0.0, 0.0, 1.0)

# |axis . world_up| above this uses WORLD_RIGHT as the tilt reference
TILT_PARALLEL_LIMIT = 0.99
