
from typing import Sequence

from geoframes._version import __version__  # noqa: F401
from geoframes.utils.logging import LOGGER
from geoframes.conversion import deg_to_rad, rad_to_deg
from geoframes.ellipsoid import (
    CGCS2000, ELLIPSOID_PRESETS, GRS80, KRASOVSKY_1940, WGS84,
    DerivedConstants, Ellipsoid, EllipsoidParameters, derive_constants, make_ellipsoid
)
from geoframes.exceptions import (
    ConvergenceError, GeoframesError, InvalidParameterError, OriginNotSetError
)
from geoframes.positions import ECEF, ENU, LLH
from geoframes.transforms import Quaternion, RigidTransform

_WGS84_ELLIPSOID = Ellipsoid(WGS84)


def llh_to_ecef(llh: Sequence[float]) -> ECEF:
    """Geodetic -> ECEF on the WGS84 ellipsoid"""
    return _WGS84_ELLIPSOID.llh_to_ecef(llh)


def ecef_to_llh(ecef: Sequence[float]) -> LLH:
    """ECEF -> geodetic on the WGS84 ellipsoid"""
    return _WGS84_ELLIPSOID.ecef_to_llh(ecef)


def llh_to_enu(llh: Sequence[float], origin: Sequence[float]) -> ENU:
    """Geodetic -> ENU about `origin` on the WGS84 ellipsoid"""
    return _WGS84_ELLIPSOID.llh_to_enu(llh, origin)


def enu_to_llh(enu: Sequence[float], origin: Sequence[float]) -> LLH:
    """ENU about `origin` -> geodetic on the WGS84 ellipsoid"""
    return _WGS84_ELLIPSOID.enu_to_llh(enu, origin)


__all__ = [
    'CGCS2000',
    'ConvergenceError',
    'DerivedConstants',
    'ECEF',
    'ELLIPSOID_PRESETS',
    'ENU',
    'Ellipsoid',
    'EllipsoidParameters',
    'GRS80',
    'GeoframesError',
    'InvalidParameterError',
    'KRASOVSKY_1940',
    'LLH',
    'LOGGER',
    'OriginNotSetError',
    'Quaternion',
    'RigidTransform',
    'WGS84',
    'deg_to_rad',
    'derive_constants',
    'ecef_to_llh',
    'enu_to_llh',
    'llh_to_ecef',
    'llh_to_enu',
    'make_ellipsoid',
    'rad_to_deg',
]
