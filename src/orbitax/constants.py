"""
The `constants` module defines the mathematical, time, and Earth constants used by
orbitax. Distances are expressed in kilometres to match SGP4 output.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Full revolution. Units: *rad*
"""
TWO_PI = 2.0 * PI

# Time Constants

"""
Julian Date of the J2000.0 epoch (2000-01-01 12:00:00). Units: *days*
"""
JD2000 = 2451545.0

"""
Julian Date of the SGP4 epoch reference, 1950 January 0.0. Units: *days*
"""
JD1950 = 2433281.5

"""
Minutes per day. Units: *min/day*
"""
MINUTES_PER_DAY = 1440.0

# Physical Constants
"""
Speed of light in vacuum. Units: *km/s*

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, 2010
"""
C_LIGHT = 299792.458  # [km/s] Exact definition Vallado

# Earth Constants
"""
Earth's semi-major axis as defined by the WGS84 geodetic system. [km]

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378.137  # WGS-84 semi-major axis

"""
Earth's ellipsoidal flattening.  WGS84 Value.

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_f = 1.0 / 298.257223563  # WGS-84 flattening

"""
First eccentricity squared of the WGS84 ellipsoid. [dimensionless]
"""
WGS84_e2 = WGS84_f * (2.0 - WGS84_f)

"""
Earth axial rotation rate. [rad/s]

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, p. 222, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5  # [rad/s] Taken from Vallado 4th Ed page 222
