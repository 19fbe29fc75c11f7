"""
Constants declarations for geoframes
"""

# WGS84 Ellipsoid Constants
WGS84_A = 6378137.0  # Major axis (meters)
WGS84_F = 1 / 298.257223563  # Flattening

# GRS80 / CGCS2000 share the major axis, flattening differs from WGS84 in the 10th digit
GRS80_A = 6378137.0
GRS80_F = 1 / 298.257222101

KRASOVSKY_A = 6378245.0
KRASOVSKY_F = 1 / 298.3

# ECEF -> LLH iteration
CONVERGENCE_TOLERANCE = 1e-4  # meters, on the iterated z component
MAX_ITERATIONS = 30
POLE_THRESHOLD = 1e-12  # squared equatorial-plane distance (m^2)

# GPS time
GPS_EPOCH_UNIX_SECONDS = 315964800  # 1980-01-06T00:00:00Z
GPS_LEAP_SECONDS = 18  # GPS - UTC since 2017-01-01
SECONDS_PER_WEEK = 604800
