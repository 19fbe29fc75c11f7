"""
Position representations for the three coordinate frames: geodetic (LLH),
Earth-Centered-Earth-Fixed (ECEF) and local East-North-Up (ENU).

Angles are always radians. Use LLH.from_degrees() / LLH.to_degrees() at the
boundary where degrees come in or go out.
"""

__all__ = ['ECEF', 'ENU', 'LLH']

import math
from typing import NamedTuple, Optional, Sequence

from geoframes.conversion import deg_to_rad, rad_to_deg
from geoframes.utils.functions import as_triple, round_half_up


class LLH(NamedTuple):
    """Geodetic latitude (rad), longitude (rad) and height above the ellipsoid (m)"""
    latitude: float
    longitude: float
    height: float = 0.0

    @classmethod
    def coerce(cls, values: Sequence[float]) -> 'LLH':
        """Creates an LLH from any 3-element sequence of (latitude, longitude, height)"""
        if isinstance(values, cls):
            return values
        return cls(*as_triple(values, 'LLH position'))

    @classmethod
    def from_degrees(cls, latitude: float, longitude: float, height: float = 0.0) -> 'LLH':
        """
        Creates an LLH from a latitude/longitude pair in decimal degrees.

        Args:
            latitude:
                Geodetic latitude, in degrees

            longitude:
                Longitude, in degrees

            height:
                Height above the ellipsoid, in meters

        Returns:
            LLH
        """
        return cls(deg_to_rad(latitude), deg_to_rad(longitude), float(height))

    def to_degrees(self, precision: Optional[int] = None):
        """
        Converts latitude and longitude to decimal degrees.

        Args:
            precision: (int) (Optional)
                If provided, rounds the angles to this many decimal places

        Returns:
            Tuple of (latitude degrees, longitude degrees, height meters)
        """
        lat, lon = rad_to_deg(self.latitude), rad_to_deg(self.longitude)
        if precision is not None:
            lat, lon = round_half_up(lat, precision), round_half_up(lon, precision)
        return lat, lon, self.height

    def is_polar(self) -> bool:
        """True if the latitude sits on either pole, where longitude is undefined"""
        return math.isclose(abs(self.latitude), math.pi / 2, rel_tol=0.0, abs_tol=1e-15)


class ECEF(NamedTuple):
    """Earth-Centered-Earth-Fixed cartesian position, in meters"""
    x: float
    y: float
    z: float

    @classmethod
    def coerce(cls, values: Sequence[float]) -> 'ECEF':
        """Creates an ECEF from any 3-element sequence of (x, y, z)"""
        if isinstance(values, cls):
            return values
        return cls(*as_triple(values, 'ECEF position'))

    @property
    def norm(self) -> float:
        """Distance from the center of the ellipsoid"""
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)


class ENU(NamedTuple):
    """
    East-North-Up position in meters. Only meaningful together with the origin
    that produced it.
    """
    east: float
    north: float
    up: float

    @classmethod
    def coerce(cls, values: Sequence[float]) -> 'ENU':
        """Creates an ENU from any 3-element sequence of (east, north, up)"""
        if isinstance(values, cls):
            return values
        return cls(*as_triple(values, 'ENU position'))

    @property
    def horizontal_distance(self) -> float:
        """Distance from the origin within the tangent plane"""
        return math.hypot(self.east, self.north)
