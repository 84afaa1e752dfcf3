"""
orbitax is an SGP4/SDP4 satellite propagator and coordinate transform library implemented in JAX.
"""

from .config import set_dtype, get_dtype

from .constants import (
    DEG2RAD,
    RAD2DEG,
    TWO_PI,
    JD2000,
    JD1950,
    MINUTES_PER_DAY,
    C_LIGHT,
    WGS84_a,
    WGS84_f,
    WGS84_e2,
    OMEGA_EARTH,
)

from .time import (
    jday,
    invjday,
    days_to_mdhms,
    tle_epoch_to_jd,
    gmst,
    greenwich_sidereal_time,
)

from .frames import (
    Rz,
    rotation_eci_to_ecef,
    rotation_ecef_to_eci,
    state_eci_to_ecef,
    state_ecef_to_eci,
)

from .coordinates import (
    GeodeticCoordinate,
    LookAngle,
    position_geodetic_to_ecef,
    position_ecef_to_geodetic,
    position_eci_to_geodetic,
    look_angles,
    doppler_factor,
)

from .sgp4 import (
    TLEElements,
    SatelliteRecord,
    StateVector,
    SGP4Error,
    TLEParseError,
    PropagationError,
    WGS72OLD,
    WGS72,
    WGS84,
    parse_tle,
    format_tle,
    sgp4_init,
    propagate,
    propagate_at_calendar_time,
    sgp4_propagate_model,
)
