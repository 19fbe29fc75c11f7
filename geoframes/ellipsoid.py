"""
Reference ellipsoids and conversions between geodetic (LLH), Earth-Centered
Earth-Fixed (ECEF) and local East-North-Up (ENU) coordinates.

An EllipsoidParameters holds the defining (equatorial radius, flattening) pair.
An Ellipsoid wraps one and performs the conversions; it may additionally be
bound to a local origin, in which case the origin's ENU -> ECEF transform is
computed once and reused by llh_to_local() / local_to_llh().

All angles are radians, all distances meters.
"""

__all__ = [
    'CGCS2000', 'DerivedConstants', 'ELLIPSOID_PRESETS', 'Ellipsoid', 'EllipsoidParameters',
    'GRS80', 'KRASOVSKY_1940', 'WGS84', 'derive_constants', 'make_ellipsoid',
]

from functools import cached_property
import math
from typing import Any, Dict, NamedTuple, Optional, Sequence

from pydantic import validate_call

from geoframes._const import (
    CONVERGENCE_TOLERANCE, GRS80_A, GRS80_F, KRASOVSKY_A, KRASOVSKY_F, MAX_ITERATIONS,
    POLE_THRESHOLD, WGS84_A, WGS84_F
)
from geoframes.exceptions import ConvergenceError, InvalidParameterError, OriginNotSetError
from geoframes.positions import ECEF, ENU, LLH
from geoframes.transforms import Quaternion, RigidTransform, UNIT_X, UNIT_Z
from geoframes.utils.mixins import LoggingMixin


class DerivedConstants(NamedTuple):
    """Constants derived from an ellipsoid's (a, f) pair"""
    b: float  # polar radius
    c: float  # polar radius of curvature
    e1: float  # first eccentricity
    e2: float  # second eccentricity


def derive_constants(parameters: 'EllipsoidParameters') -> DerivedConstants:
    """
    Computes the polar radius, polar radius of curvature and the first and
    second eccentricities of an ellipsoid.

    Args:
        parameters:
            The ellipsoid's defining parameters

    Returns:
        DerivedConstants
    """
    a = parameters.equatorial_radius
    b = (1 - parameters.flattening) * a
    focal = math.sqrt(a * a - b * b)
    return DerivedConstants(
        b=b,
        c=a * a / b,
        e1=focal / a,
        e2=focal / b,
    )


class EllipsoidParameters:
    """
    The defining parameters of a reference ellipsoid.

    Args:
        equatorial_radius:
            The semi-major axis, in meters. Must be positive.

        flattening:
            (a - b) / a. Must lie strictly between 0 and 1.

        name: (Optional)
            A human readable name, e.g. 'WGS84'
    """

    @validate_call
    def __init__(
        self,
        equatorial_radius: float,
        flattening: float,
        name: Optional[str] = None,
    ):
        if not math.isfinite(equatorial_radius) or equatorial_radius <= 0:
            raise InvalidParameterError(
                f'equatorial radius must be a positive number of meters, got {equatorial_radius}'
            )

        if not 0 < flattening < 1:
            raise InvalidParameterError(
                f'flattening must lie strictly between 0 and 1, got {flattening}'
            )

        self._equatorial_radius = equatorial_radius
        self._flattening = flattening
        self._name = name

    @property
    def equatorial_radius(self) -> float:
        return self._equatorial_radius

    @property
    def flattening(self) -> float:
        return self._flattening

    @property
    def name(self) -> Optional[str]:
        return self._name

    @cached_property
    def derived(self) -> DerivedConstants:
        """The derived constants, computed once per parameter set"""
        return derive_constants(self)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EllipsoidParameters):
            return False

        return (
            self._equatorial_radius == other._equatorial_radius
            and self._flattening == other._flattening
        )

    def __hash__(self):
        return hash((self._equatorial_radius, self._flattening))

    def __repr__(self):
        label = f'{self._name}: ' if self._name else ''
        return f'<EllipsoidParameters({label}a={self._equatorial_radius}, f={self._flattening})>'


WGS84 = EllipsoidParameters(WGS84_A, WGS84_F, name='WGS84')
GRS80 = EllipsoidParameters(GRS80_A, GRS80_F, name='GRS80')
CGCS2000 = EllipsoidParameters(GRS80_A, GRS80_F, name='CGCS2000')
KRASOVSKY_1940 = EllipsoidParameters(KRASOVSKY_A, KRASOVSKY_F, name='Krasovsky1940')

ELLIPSOID_PRESETS: Dict[str, EllipsoidParameters] = {
    'wgs84': WGS84,
    'grs80': GRS80,
    'cgcs2000': CGCS2000,
    'krasovsky1940': KRASOVSKY_1940,
}


class Ellipsoid(LoggingMixin):
    """
    Conversion engine for one reference ellipsoid.

    The LLH <-> ECEF conversions and the origin-explicit LLH <-> ENU forms
    (llh_to_enu, enu_to_llh) don't touch instance state. llh_to_local and
    local_to_llh use the transform cached by set_origin(). An instance is not
    safe to share between threads while set_origin() may be called; use one
    instance per thread or lock around set_origin().

    Args:
        parameters: (Default WGS84)
            The ellipsoid's defining parameters. Any object with
            `equatorial_radius` and `flattening` attributes is accepted and
            validated as an EllipsoidParameters.

        origin: (Optional)
            An LLH origin to bind immediately

    Keyword Args:
        tolerance: (float) (Default 1e-4)
            Convergence threshold in meters for the ECEF -> LLH iteration

        max_iterations: (int) (Default 30)
            Iteration cap for the ECEF -> LLH iteration
    """

    def __init__(
        self,
        parameters: Any = WGS84,
        origin: Optional[Sequence[float]] = None,
        *,
        tolerance: float = CONVERGENCE_TOLERANCE,
        max_iterations: int = MAX_ITERATIONS,
    ):
        if not tolerance > 0 or not math.isfinite(tolerance):
            raise ValueError(f'tolerance must be positive, got {tolerance}')
        if max_iterations < 1:
            raise ValueError(f'max_iterations must be at least 1, got {max_iterations}')

        if not isinstance(parameters, EllipsoidParameters):
            try:
                radius, flattening = parameters.equatorial_radius, parameters.flattening
            except AttributeError as exc:
                raise TypeError(
                    'parameters must expose equatorial_radius and flattening, '
                    f'got {type(parameters).__name__}'
                ) from exc
            parameters = EllipsoidParameters(radius, flattening)

        self._parameters = parameters
        self.tolerance = tolerance
        self.max_iterations = max_iterations

        self._origin: Optional[LLH] = None
        self._transform: Optional[RigidTransform] = None
        self._inverse_transform: Optional[RigidTransform] = None
        if origin is not None:
            self.set_origin(origin)

    def __repr__(self):
        origin = f', origin={tuple(self._origin)}' if self._origin else ''
        return f'<Ellipsoid({self._parameters!r}{origin})>'

    @property
    def parameters(self) -> EllipsoidParameters:
        return self._parameters

    @property
    def a(self) -> float:
        """Equatorial radius"""
        return self._parameters.equatorial_radius

    @property
    def f(self) -> float:
        """Flattening"""
        return self._parameters.flattening

    @property
    def b(self) -> float:
        """Polar radius"""
        return self._parameters.derived.b

    @property
    def c(self) -> float:
        """Polar radius of curvature"""
        return self._parameters.derived.c

    @property
    def e1(self) -> float:
        """First eccentricity"""
        return self._parameters.derived.e1

    @property
    def e2(self) -> float:
        """Second eccentricity"""
        return self._parameters.derived.e2

    # Radii of curvature
    # pylint: disable=invalid-name

    def W(self, latitude: float) -> float:
        """First auxiliary function, sqrt(1 - (e1 sin B)^2)"""
        return math.sqrt(1 - (self.e1 * math.sin(latitude)) ** 2)

    def V(self, latitude: float) -> float:
        """Second auxiliary function, sqrt(1 + (e2 cos B)^2)"""
        return math.sqrt(1 + (self.e2 * math.cos(latitude)) ** 2)

    def M(self, latitude: float) -> float:
        """Meridian radius of curvature"""
        return self.c / self.V(latitude) ** 3

    def N(self, latitude: float) -> float:
        """Prime-vertical (transverse) radius of curvature"""
        return self.c / self.V(latitude)

    # pylint: enable=invalid-name

    def llh_to_ecef(self, llh: Sequence[float]) -> ECEF:
        """
        Convert a geodetic position to ECEF. Closed form; heights below the
        ellipsoid are allowed.

        Args:
            llh:
                (latitude rad, longitude rad, height m)

        Returns:
            ECEF
        """
        lat, lon, height = LLH.coerce(llh)
        n = self.N(lat)
        cos_lat = math.cos(lat)
        return ECEF(
            (n + height) * cos_lat * math.cos(lon),
            (n + height) * cos_lat * math.sin(lon),
            (n * (1 - self.e1 ** 2) + height) * math.sin(lat),
        )

    def ecef_to_llh(self, ecef: Sequence[float]) -> LLH:
        """
        Convert an ECEF position to geodetic coordinates.

        Iterates on the z component of the point's projection along the
        ellipsoid normal until successive values agree within `tolerance`
        meters. On the polar axis (x^2 + y^2 <= 1e-12) latitude is snapped to
        +/- pi/2 and longitude is reported as 0.

        Args:
            ecef:
                (x, y, z) in meters

        Returns:
            LLH

        Raises:
            ConvergenceError: for the geocenter, non-finite input, or when the
                iteration cap is reached
        """
        x, y, z_in = ECEF.coerce(ecef)
        if not all(math.isfinite(val) for val in (x, y, z_in)):
            raise ConvergenceError(f'Cannot convert non-finite ECEF position {(x, y, z_in)}')

        r2 = x * x + y * y
        if r2 + z_in * z_in == 0.0:
            raise ConvergenceError('Geodetic latitude is undefined at the geocenter')

        a = self.a
        e1_sq = self.e1 ** 2
        v, z, z_k = a, z_in, 0.0

        iterations = 0
        while abs(z - z_k) >= self.tolerance:
            if iterations >= self.max_iterations:
                raise ConvergenceError(
                    f'ECEF -> LLH did not converge within {self.max_iterations} iterations '
                    f'for {(x, y, z_in)}'
                )
            z_k = z
            sin_phi = z / math.sqrt(r2 + z * z)
            v = a / math.sqrt(1 - e1_sq * sin_phi * sin_phi)
            z = z_in + v * e1_sq * sin_phi
            iterations += 1

        if r2 <= POLE_THRESHOLD:
            self.warn_once('Longitude is undefined on the polar axis; reporting 0.')
            # Height above the polar radius; the loop may not have run when |z| < tolerance
            return LLH(
                math.pi / 2 if z_in > 0.0 else -math.pi / 2,
                0.0,
                abs(z_in) - self.b,
            )

        return LLH(
            math.atan(z / math.sqrt(r2)),
            math.atan2(y, x),
            math.sqrt(r2 + z * z) - v,
        )

    @staticmethod
    def enu_to_ecef_rotation(origin: Sequence[float]) -> Quaternion:
        """
        The rotation taking local East-North-Up axes at `origin` onto ECEF axes.

        The composition q_x(-(pi/2 - lat)) * q_z(-(pi/2 + lon)) expresses ECEF
        vectors in the local frame; its conjugate is returned.

        Args:
            origin:
                (latitude rad, longitude rad, height m); height is ignored

        Returns:
            Quaternion
        """
        lat, lon, _ = LLH.coerce(origin)
        ecef_to_enu = (
            Quaternion.from_axis_angle(UNIT_X, -(math.pi / 2 - lat))
            * Quaternion.from_axis_angle(UNIT_Z, -(math.pi / 2 + lon))
        )
        return ecef_to_enu.conjugate()

    def origin_transform(self, origin: Sequence[float]) -> RigidTransform:
        """
        The rigid transform mapping ENU coordinates about `origin` to ECEF:
        rotate by enu_to_ecef_rotation(origin), then translate to the origin's
        ECEF position.

        Args:
            origin:
                (latitude rad, longitude rad, height m)

        Returns:
            RigidTransform
        """
        return RigidTransform(
            self.enu_to_ecef_rotation(origin),
            self.llh_to_ecef(origin),
        )

    def llh_to_enu(self, llh: Sequence[float], origin: Sequence[float]) -> ENU:
        """
        Convert a geodetic position to ENU coordinates about `origin`. The origin
        transform is recomputed on every call; bind the origin with set_origin()
        when converting many points.
        """
        transform = self.origin_transform(origin)
        return ENU(*transform.inverse().apply(self.llh_to_ecef(llh)).tolist())

    def enu_to_llh(self, enu: Sequence[float], origin: Sequence[float]) -> LLH:
        """Convert ENU coordinates about `origin` back to a geodetic position."""
        transform = self.origin_transform(origin)
        return self.ecef_to_llh(transform.apply(ENU.coerce(enu)).tolist())

    # Bound origin

    @property
    def origin(self) -> Optional[LLH]:
        return self._origin

    @property
    def has_origin(self) -> bool:
        return self._transform is not None

    @property
    def transform(self) -> RigidTransform:
        """The cached ENU -> ECEF transform of the bound origin"""
        return self._require_transform()

    def set_origin(self, origin: Sequence[float]) -> None:
        """
        Bind a local ENU origin. Replaces any previously bound origin.

        Args:
            origin:
                (latitude rad, longitude rad, height m)
        """
        origin = LLH.coerce(origin)
        self._transform = self.origin_transform(origin)
        self._inverse_transform = self._transform.inverse()
        self._origin = origin
        self.logger.debug('Local origin set to %s', origin)

    def clear_origin(self) -> None:
        """Unbind the local origin"""
        self._origin = None
        self._transform = None
        self._inverse_transform = None

    def _require_transform(self) -> RigidTransform:
        if self._transform is None:
            raise OriginNotSetError(
                'No local origin has been set; call set_origin() first'
            )
        return self._transform

    def llh_to_local(self, llh: Sequence[float]) -> ENU:
        """
        Convert a geodetic position to ENU about the bound origin.

        Raises:
            OriginNotSetError: if no origin has been bound
        """
        self._require_transform()
        return ENU(*self._inverse_transform.apply(self.llh_to_ecef(llh)).tolist())

    def local_to_llh(self, enu: Sequence[float]) -> LLH:
        """
        Convert ENU coordinates about the bound origin to a geodetic position.

        Raises:
            OriginNotSetError: if no origin has been bound
        """
        transform = self._require_transform()
        return self.ecef_to_llh(transform.apply(ENU.coerce(enu)).tolist())


def make_ellipsoid(equatorial_radius: float, flattening: float, **kwargs) -> Ellipsoid:
    """
    Create a conversion engine for an ad-hoc ellipsoid.

    Args:
        equatorial_radius:
            The semi-major axis, in meters

        flattening:
            The flattening, in (0, 1)

    Keyword Args:
        Passed through to Ellipsoid()

    Returns:
        Ellipsoid

    Raises:
        InvalidParameterError: if the pair does not describe an ellipsoid
    """
    return Ellipsoid(EllipsoidParameters(equatorial_radius, flattening), **kwargs)
