"""Shared track-derivation constants.

Centralizes repeat values used across loading and derivation logic so we can
document and adjust them in one place.
"""

# Mean Earth radius in meters (haversine)
EARTH_RADIUS_M = 6371000.0

# Take every second vertex when building heart-rate segments
DEFAULT_STRIDE = 2

# Vertical extent of the paragliding "wall projection" ribbon (meters)
DEFAULT_WALL_HEIGHT_M = 2000.0

# Elevation profile sampling step (meters along track)
DEFAULT_PROFILE_STEP_M = 100.0

# FIT stores positions as 32-bit semicircles
SEMICIRCLES_TO_DEGREES = 180 / 2**31

SUPPORTED_EXTENSIONS = (".gpx", ".fit")

# Upper bound on elevation profile samples per request
MAX_PROFILE_SAMPLES = 10_000
