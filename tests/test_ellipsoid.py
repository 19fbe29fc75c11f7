
from collections import namedtuple
import logging
import math

import pytest

from geoframes import (
    CGCS2000, ECEF, ENU, GRS80, LLH, WGS84, ConvergenceError, Ellipsoid, EllipsoidParameters,
    InvalidParameterError, OriginNotSetError, derive_constants, make_ellipsoid
)
from geoframes.utils.mixins import LoggingMixin

from tests.functions import assert_llh_equal, assert_positions_equal


@pytest.fixture
def wgs84():
    return Ellipsoid(WGS84)


def test_parameters_init():
    params = EllipsoidParameters(6378137.0, 1 / 298.257223563)
    assert params.equatorial_radius == 6378137.0
    assert params.flattening == 1 / 298.257223563
    assert params.name is None

    # Ints and numeric strings are coerced
    params = EllipsoidParameters(6378137, '0.5')
    assert params.equatorial_radius == 6378137.0
    assert params.flattening == 0.5


def test_parameters_invalid():
    with pytest.raises(InvalidParameterError):
        EllipsoidParameters(-1, 0.5)

    with pytest.raises(InvalidParameterError):
        EllipsoidParameters(0, 0.5)

    with pytest.raises(InvalidParameterError):
        EllipsoidParameters(float('inf'), 0.5)

    with pytest.raises(InvalidParameterError):
        EllipsoidParameters(float('nan'), 0.5)

    for flattening in (0., 1., -0.1, 1.5, float('nan')):
        with pytest.raises(InvalidParameterError):
            EllipsoidParameters(6378137.0, flattening)

    # InvalidParameterError is a ValueError, as are uncoercible inputs
    with pytest.raises(ValueError):
        EllipsoidParameters(-1, 0.5)

    with pytest.raises(ValueError):
        EllipsoidParameters('not a number', 0.5)


def test_parameters_read_only():
    with pytest.raises(AttributeError):
        WGS84.flattening = 0.5

    with pytest.raises(AttributeError):
        WGS84.equatorial_radius = 1.


def test_parameters_eq_hash():
    assert EllipsoidParameters(6378137.0, 1 / 298.257223563) == WGS84
    assert WGS84 != GRS80
    assert WGS84 != (6378137.0, 1 / 298.257223563)

    # Same pair under different names
    assert GRS80 == CGCS2000
    assert len({WGS84, GRS80, CGCS2000}) == 2


def test_parameters_repr():
    assert repr(EllipsoidParameters(1000., 0.5)) == '<EllipsoidParameters(a=1000.0, f=0.5)>'
    assert repr(WGS84).startswith('<EllipsoidParameters(WGS84: a=6378137.0, f=')


def test_derive_constants():
    derived = derive_constants(WGS84)
    assert derived.b == pytest.approx(6356752.314245, abs=1e-6)
    assert derived.c == pytest.approx(6399593.6258, abs=1e-3)
    assert derived.e1 ** 2 == pytest.approx(0.00669437999014, abs=1e-14)
    assert derived.e2 ** 2 == pytest.approx(0.00673949674228, abs=1e-14)

    # Deterministic
    assert derive_constants(EllipsoidParameters(6378137.0, 1 / 298.257223563)) == derived
    assert WGS84.derived == derived
    assert WGS84.derived is WGS84.derived


def test_ellipsoid_constants(wgs84):
    assert wgs84.a == 6378137.0
    assert wgs84.f == 1 / 298.257223563
    assert wgs84.b == WGS84.derived.b
    assert wgs84.c == WGS84.derived.c
    assert wgs84.e1 == WGS84.derived.e1
    assert wgs84.e2 == WGS84.derived.e2
    assert wgs84.parameters is WGS84


def test_ellipsoid_init_invalid():
    with pytest.raises(ValueError):
        Ellipsoid(WGS84, tolerance=0.)

    with pytest.raises(ValueError):
        Ellipsoid(WGS84, max_iterations=0)

    # NaN would never compare as converged
    with pytest.raises(ValueError):
        Ellipsoid(WGS84, tolerance=float('nan'))

    with pytest.raises(ValueError):
        Ellipsoid(WGS84, tolerance=float('inf'))


def test_ellipsoid_parameter_like_objects():
    Params = namedtuple('Params', ['equatorial_radius', 'flattening'])

    ellipsoid = Ellipsoid(Params(6378137.0, 1 / 298.257223563))
    assert isinstance(ellipsoid.parameters, EllipsoidParameters)
    assert ellipsoid.parameters == WGS84
    llh = LLH(0.1, 0.2, 0.)
    assert ellipsoid.llh_to_ecef(llh) == Ellipsoid(WGS84).llh_to_ecef(llh)

    # Presets pass through untouched
    assert Ellipsoid(GRS80).parameters is GRS80

    # Values are validated at construction
    with pytest.raises(InvalidParameterError):
        Ellipsoid(Params(-1., 0.5))

    with pytest.raises(TypeError):
        Ellipsoid((6378137.0, 0.003))


def test_make_ellipsoid():
    ellipsoid = make_ellipsoid(6378137.0, 1 / 298.257223563)
    assert ellipsoid.parameters == WGS84
    assert not ellipsoid.has_origin

    ellipsoid = make_ellipsoid(6378137.0, 1 / 298.257223563, max_iterations=5)
    assert ellipsoid.max_iterations == 5

    with pytest.raises(InvalidParameterError):
        make_ellipsoid(-1, 0.5)


def test_curvature_radii(wgs84):
    # Equator and pole
    assert wgs84.N(0.) == pytest.approx(wgs84.a, rel=1e-12)
    assert wgs84.M(0.) == pytest.approx(wgs84.b ** 2 / wgs84.a, rel=1e-12)
    assert wgs84.N(math.pi / 2) == pytest.approx(wgs84.c, rel=1e-12)
    assert wgs84.M(math.pi / 2) == pytest.approx(wgs84.c, rel=1e-12)

    assert wgs84.W(0.) == 1.
    assert wgs84.V(math.pi / 2) == pytest.approx(1., abs=1e-15)

    for deg in range(-90, 91, 5):
        lat = math.radians(deg)
        n, m = wgs84.N(lat), wgs84.M(lat)
        assert math.isfinite(n) and n > 0
        assert math.isfinite(m) and m > 0
        assert m <= n * (1 + 1e-12)

        # a / W == c / V
        assert n == pytest.approx(wgs84.a / wgs84.W(lat), rel=1e-12)


def test_curvature_symmetry(wgs84):
    assert wgs84.N(0.3) == pytest.approx(wgs84.N(-0.3), rel=1e-15)
    assert wgs84.M(0.3) == pytest.approx(wgs84.M(-0.3), rel=1e-15)


def test_llh_to_ecef(wgs84):
    ecef = wgs84.llh_to_ecef(LLH.from_degrees(30., 120., 0.))
    assert isinstance(ecef, ECEF)
    assert ecef.x == pytest.approx(-2764128.32, rel=1e-6)
    assert ecef.y == pytest.approx(4787610.69, rel=1e-6)
    assert ecef.z == pytest.approx(3170373.74, rel=1e-6)

    # Equator / prime meridian
    assert_positions_equal(wgs84.llh_to_ecef((0., 0., 0.)), (wgs84.a, 0., 0.))
    assert_positions_equal(wgs84.llh_to_ecef((0., math.pi / 2, 100.)), (0., wgs84.a + 100., 0.))

    # North pole
    assert_positions_equal(wgs84.llh_to_ecef((math.pi / 2, 0., 0.)), (0., 0., wgs84.b))

    # Heights below the ellipsoid are fine
    assert_positions_equal(wgs84.llh_to_ecef((0., 0., -1000.)), (wgs84.a - 1000., 0., 0.))


def test_llh_to_ecef_accepts_sequences(wgs84):
    expected = wgs84.llh_to_ecef(LLH(0.5, 1.0, 10.))
    assert wgs84.llh_to_ecef([0.5, 1.0, 10.]) == expected
    assert wgs84.llh_to_ecef((0.5, 1.0, 10.)) == expected

    with pytest.raises(ValueError):
        wgs84.llh_to_ecef((0.5, 1.0))


def test_ecef_to_llh(wgs84):
    llh = wgs84.ecef_to_llh((wgs84.a, 0., 0.))
    assert isinstance(llh, LLH)
    assert_llh_equal(llh, LLH(0., 0., 0.))

    llh = wgs84.ecef_to_llh((-2764128.32, 4787610.69, 3170373.74))
    lat, lon, height = llh.to_degrees()
    assert lat == pytest.approx(30., abs=1e-6)
    assert lon == pytest.approx(120., abs=1e-6)
    assert height == pytest.approx(0., abs=5e-2)


def test_ecef_llh_round_trip(wgs84):
    for lat_deg in (-89.5, -60., -30., -1., 0., 1., 30., 45., 60., 89.5):
        for lon_deg in (-179., -120., -45., 0., 45., 120., 179.):
            for height in (-100., 0., 1000., 100_000.):
                llh = LLH.from_degrees(lat_deg, lon_deg, height)
                assert_llh_equal(wgs84.ecef_to_llh(wgs84.llh_to_ecef(llh)), llh)


def test_ecef_llh_round_trip_custom_ellipsoid():
    ellipsoid = make_ellipsoid(1000., 0.1)
    llh = LLH(0.5, -2.0, 10.)
    assert_llh_equal(ellipsoid.ecef_to_llh(ellipsoid.llh_to_ecef(llh)), llh, height_tol=1e-4)


def test_ecef_to_llh_poles(wgs84, caplog):
    LoggingMixin.WARNED_ONCE.clear()

    north = wgs84.ecef_to_llh((0., 0., wgs84.b))
    assert north.latitude == math.pi / 2
    assert north.longitude == 0.
    assert north.height == pytest.approx(0., abs=1e-6)
    assert north.is_polar()
    assert 'polar axis' in caplog.text

    south = wgs84.ecef_to_llh((0., 0., -wgs84.b - 50.))
    assert south.latitude == -math.pi / 2
    assert south.longitude == 0.
    assert south.height == pytest.approx(50., abs=1e-6)

    # Sub-micrometer offsets from the axis are still treated as the pole
    near = wgs84.ecef_to_llh((1e-7, 1e-7, 6000000.))
    assert near.latitude == math.pi / 2
    assert near.longitude == 0.


def test_ecef_to_llh_pole_inside_tolerance(wgs84):
    # Too close to the geocenter for the iteration to move
    north = wgs84.ecef_to_llh((0., 0., 1e-5))
    assert north.latitude == math.pi / 2
    assert north.height == pytest.approx(1e-5 - wgs84.b, abs=1e-6)

    south = wgs84.ecef_to_llh((0., 0., -1e-5))
    assert south.latitude == -math.pi / 2
    assert south.height == pytest.approx(1e-5 - wgs84.b, abs=1e-6)


def test_ecef_to_llh_geocenter(wgs84):
    with pytest.raises(ConvergenceError):
        wgs84.ecef_to_llh((0., 0., 0.))

    # ConvergenceError is an ArithmeticError
    with pytest.raises(ArithmeticError):
        wgs84.ecef_to_llh((0., 0., 0.))


def test_ecef_to_llh_non_finite(wgs84):
    with pytest.raises(ConvergenceError):
        wgs84.ecef_to_llh((float('nan'), 0., 0.))

    with pytest.raises(ConvergenceError):
        wgs84.ecef_to_llh((0., float('inf'), 1.))


def test_ecef_to_llh_iteration_cap():
    ecef = Ellipsoid(WGS84).llh_to_ecef(LLH.from_degrees(45., 45., 0.))
    with pytest.raises(ConvergenceError):
        Ellipsoid(WGS84, max_iterations=1).ecef_to_llh(ecef)

    # A looser tolerance needs fewer iterations
    llh = Ellipsoid(WGS84, tolerance=1.).ecef_to_llh(ecef)
    assert llh.latitude == pytest.approx(math.radians(45.), abs=1e-5)


def test_enu_to_ecef_rotation():
    rotation = Ellipsoid.enu_to_ecef_rotation((0., 0., 0.))
    assert_positions_equal(rotation.rotate((1., 0., 0.)), (0., 1., 0.), 1e-12)  # east
    assert_positions_equal(rotation.rotate((0., 1., 0.)), (0., 0., 1.), 1e-12)  # north
    assert_positions_equal(rotation.rotate((0., 0., 1.)), (1., 0., 0.), 1e-12)  # up

    lat, lon = math.radians(30.), math.radians(120.)
    rotation = Ellipsoid.enu_to_ecef_rotation((lat, lon, 0.))
    assert_positions_equal(
        rotation.rotate((0., 0., 1.)),
        (math.cos(lat) * math.cos(lon), math.cos(lat) * math.sin(lon), math.sin(lat)),
        1e-12,
    )
    assert_positions_equal(
        rotation.rotate((1., 0., 0.)),
        (-math.sin(lon), math.cos(lon), 0.),
        1e-12,
    )


def test_origin_transform(wgs84):
    origin = LLH.from_degrees(30., 120., 15.)
    transform = wgs84.origin_transform(origin)
    assert_positions_equal(transform.translation, wgs84.llh_to_ecef(origin), 1e-9)
    assert_positions_equal(transform.apply((0., 0., 0.)), wgs84.llh_to_ecef(origin), 1e-9)


def test_llh_to_enu_origin_is_zero(wgs84):
    for origin in (
        LLH.from_degrees(30., 120., 0.),
        LLH.from_degrees(-45., -75., 250.),
        LLH.from_degrees(0., 180., -20.),
        LLH.from_degrees(90., 0., 0.),
    ):
        enu = wgs84.llh_to_enu(origin, origin)
        assert isinstance(enu, ENU)
        assert_positions_equal(enu, (0., 0., 0.))


def test_llh_enu_round_trip(wgs84):
    origins = [
        LLH.from_degrees(30., 120., 0.),
        LLH.from_degrees(-33.9, 18.4, 40.),
        LLH.from_degrees(78., -15., 1000.),
    ]
    offsets = [(0.001, 0.001, 10.), (-0.05, 0.2, -30.), (0.5, -0.5, 500.)]
    for origin in origins:
        for d_lat, d_lon, d_height in offsets:
            llh = LLH(
                origin.latitude + math.radians(d_lat),
                origin.longitude + math.radians(d_lon),
                origin.height + d_height,
            )
            enu = wgs84.llh_to_enu(llh, origin)
            assert_llh_equal(wgs84.enu_to_llh(enu, origin), llh, height_tol=1e-5)


def test_enu_to_llh_north_offset(wgs84):
    origin = LLH.from_degrees(30., 120., 0.)

    llh = wgs84.enu_to_llh((0., 10., 0.), origin)
    lat, lon, height = llh.to_degrees()
    assert lat == pytest.approx(30.00009, abs=1e-6)
    assert lon == pytest.approx(120., abs=1e-9)
    assert height == pytest.approx(7.9e-6, abs=2e-6)

    assert_positions_equal(wgs84.llh_to_enu(llh, origin), (0., 10., 0.), 1e-4)


def test_llh_to_enu_directions(wgs84):
    origin = LLH.from_degrees(30., 120., 0.)

    east, north, up = wgs84.llh_to_enu(LLH.from_degrees(30., 120.001, 0.), origin)
    assert east > 90.
    assert abs(north) < 1.

    east, north, up = wgs84.llh_to_enu(LLH.from_degrees(29.999, 120., 0.), origin)
    assert north < -100.
    assert abs(east) < 1e-6

    east, north, up = wgs84.llh_to_enu(LLH.from_degrees(30., 120., 25.), origin)
    assert_positions_equal((east, north, up), (0., 0., 25.))


def test_bound_origin(wgs84):
    origin = LLH.from_degrees(30., 120., 0.)
    llh = LLH.from_degrees(30.005, 120.005, 10.)

    wgs84.set_origin(origin)
    assert wgs84.has_origin
    assert wgs84.origin == origin
    assert wgs84.transform == wgs84.origin_transform(origin)

    enu = wgs84.llh_to_local(llh)
    assert_positions_equal(enu, wgs84.llh_to_enu(llh, origin), 1e-9)
    assert_llh_equal(wgs84.local_to_llh(enu), llh)
    assert_positions_equal(wgs84.llh_to_local(origin), (0., 0., 0.))


def test_bound_origin_from_constructor():
    origin = LLH.from_degrees(-45., 170., 5.)
    ellipsoid = Ellipsoid(WGS84, origin)
    assert ellipsoid.origin == origin
    assert_positions_equal(ellipsoid.llh_to_local(origin), (0., 0., 0.))
    assert repr(ellipsoid).startswith('<Ellipsoid(<EllipsoidParameters(WGS84')
    assert 'origin=' in repr(ellipsoid)


def test_set_origin_replaces_previous(wgs84):
    first = LLH.from_degrees(10., 10., 0.)
    second = LLH.from_degrees(-20., 50., 100.)

    wgs84.set_origin(first)
    wgs84.set_origin(second)
    assert wgs84.origin == second
    assert_positions_equal(wgs84.llh_to_local(second), (0., 0., 0.))
    assert wgs84.llh_to_local(first).horizontal_distance > 1e6


def test_set_origin_logs(wgs84, caplog):
    caplog.set_level(logging.DEBUG, logger='geoframes')
    wgs84.set_origin(LLH(0.1, 0.2, 0.))
    assert 'Local origin set to' in caplog.text


def test_origin_not_set(wgs84):
    assert not wgs84.has_origin
    assert wgs84.origin is None

    with pytest.raises(OriginNotSetError):
        wgs84.llh_to_local((0., 0., 0.))

    with pytest.raises(OriginNotSetError):
        wgs84.local_to_llh((0., 0., 0.))

    with pytest.raises(OriginNotSetError):
        _ = wgs84.transform

    # OriginNotSetError is a RuntimeError
    with pytest.raises(RuntimeError):
        wgs84.llh_to_local((0., 0., 0.))


def test_clear_origin(wgs84):
    wgs84.set_origin(LLH(0.1, 0.2, 0.))
    wgs84.clear_origin()
    assert not wgs84.has_origin
    assert wgs84.origin is None

    with pytest.raises(OriginNotSetError):
        wgs84.llh_to_local((0., 0., 0.))


def test_ellipsoid_affects_conversion():
    llh = LLH.from_degrees(45., 45., 0.)
    wgs84 = Ellipsoid(WGS84).llh_to_ecef(llh)
    grs80 = Ellipsoid(GRS80).llh_to_ecef(llh)
    sphere_ish = make_ellipsoid(6378137.0, 1e-9).llh_to_ecef(llh)

    # WGS84 and GRS80 differ by well under a millimeter
    assert_positions_equal(wgs84, grs80, 1e-3)
    assert abs(sphere_ish.z - wgs84.z) > 1000.


def test_module_level_wgs84_functions(wgs84):
    import geoframes

    llh = LLH.from_degrees(30., 120., 15.)
    origin = LLH.from_degrees(29.99, 120.01, 3.)

    assert geoframes.llh_to_ecef(llh) == wgs84.llh_to_ecef(llh)
    ecef = wgs84.llh_to_ecef(llh)
    assert geoframes.ecef_to_llh(ecef) == wgs84.ecef_to_llh(ecef)
    assert geoframes.llh_to_enu(llh, origin) == wgs84.llh_to_enu(llh, origin)
    assert geoframes.enu_to_llh((1., 2., 3.), origin) == wgs84.enu_to_llh((1., 2., 3.), origin)
