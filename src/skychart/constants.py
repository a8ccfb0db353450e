"""Fixed constants: angles, sentinels, canvas geometry and catalog limits."""

import math

# Angle: degrees per circle and sexagesimal
DEGREES_PER_CIRCLE = 360.0
HOURS_PER_DAY = 24.0
DEGREES_PER_HOUR_RA = 15.0  # right ascension: 360° / 24 h
RAD2DEG = 180.0 / math.pi

# Time
MINUTES_PER_DAY = 1440.0
SECONDS_PER_DAY = 86400.0

# Julian Day anchors
JD_GREGORIAN_CUTOVER = 2299161  # first integer JD handled as Gregorian by date_from_julian_day
JD_MJD_OFFSET = 2400000.5
JD_DAY_ZERO = 2451543.5  # 1999-12-31 00:00, day number 0
DAY_NUMBER_OFFSET = 730515  # day_number integer formula offset

# Sentinels (no exceptions in the core)
INVALID_JD = -1
INVALID_DATE = (0, 0, 0)
INVALID_EASTER = (0, 0)
INVALID_RA = -1.0
INVALID_DEC = -1.0

# Obliquity of the ecliptic (degrees) as a function of day number, and the
# fixed value used to trace the ecliptic curve on charts.
OBLIQUITY_J2000 = 23.4393
OBLIQUITY_RATE = -3.563e-7
ECLIPTIC_EPSILON = 23.43642  # 23°26'11.1"

# Kepler solver
KEPLER_TOLERANCE_DEG = 0.005
KEPLER_MAX_ITERATIONS = 20

# Canvas (pixels)
DEFAULT_CANVAS_WIDTH = 1000
DEFAULT_CANVAS_HEIGHT = 500
X_MARGIN = 8
Y_MARGIN = 8
POLE_RADIUS_RATIO = 0.475  # 0.95 / 2: usable dome radius over pole diameter

# Magnitude slider range and default
MAGNITUDE_MIN = -2.0
MAGNITUDE_MAX = 8.0
DEFAULT_MAGNITUDE = 2.0

# Catalog: stars closer than this to a pole are not charted
CATALOG_MAX_ABS_DEC = 89.0

# Label superscripts
DEG_SUP = '°'
MIN_SUP = "'"
SEC_SUP = '"'
HANG_SUP = 'ʰ'
MANG_SUP = 'ᵐ'
SANG_SUP = 'ˢ'
SYMB_ALPHA = 'α'
SYMB_DELTA = 'δ'
