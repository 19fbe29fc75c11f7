"""
Command line front end for geoframes.

    geoframes llh2ecef --lat 30 --lon 120 --height 0
    geoframes ecef2llh --x -2764128.32 --y 4787610.69 --z 3170373.74
    geoframes llh2enu --lat 30.001 --lon 120.001 --origin-lat 30 --origin-lon 120
    geoframes enu2llh --east 10 --north 0 --up 0 --origin-lat 30 --origin-lon 120

Angles are entered and printed in decimal degrees, heights and cartesian
coordinates in meters unless --height-unit says otherwise.
"""

__all__ = ['build_parser', 'main']

import argparse
import sys
from typing import List, Optional

from geoframes.conversion import convert_to_meters, rad_to_deg
from geoframes.ellipsoid import ELLIPSOID_PRESETS, Ellipsoid, EllipsoidParameters
from geoframes.exceptions import GeoframesError
from geoframes.positions import LLH
from geoframes.utils.logging import LOGGER, set_verbosity, warn_once


def _add_llh_arguments(parser: argparse.ArgumentParser, prefix: str = '', required: bool = True):
    dest = prefix.replace('-', '_')
    label = 'origin ' if prefix else ''
    parser.add_argument(f'--{prefix}lat', dest=f'{dest}lat', type=float, required=required,
                        help=f'{label}latitude (degrees)')
    parser.add_argument(f'--{prefix}lon', dest=f'{dest}lon', type=float, required=required,
                        help=f'{label}longitude (degrees)')
    parser.add_argument(f'--{prefix}height', dest=f'{dest}height', type=float, default=0.0,
                        help=f'{label}height above the ellipsoid')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='geoframes',
        description='Convert positions between LLH, ECEF and local ENU coordinates.',
    )
    parser.add_argument('--ellipsoid', default='wgs84', choices=sorted(ELLIPSOID_PRESETS),
                        help='reference ellipsoid preset (default: wgs84)')
    parser.add_argument('--semi-major-axis', type=float, default=None,
                        help='custom equatorial radius in meters; requires --flattening')
    parser.add_argument('--flattening', type=float, default=None,
                        help='custom flattening; requires --semi-major-axis')
    parser.add_argument('--height-unit', default='m',
                        help="unit of input heights: m, km, ft, mi, nmi, yd (default: m)")
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    llh2ecef = subparsers.add_parser('llh2ecef', help='geodetic -> ECEF')
    _add_llh_arguments(llh2ecef)

    ecef2llh = subparsers.add_parser('ecef2llh', help='ECEF -> geodetic')
    for axis in ('x', 'y', 'z'):
        ecef2llh.add_argument(f'--{axis}', type=float, required=True, help=f'ECEF {axis} (m)')

    llh2enu = subparsers.add_parser('llh2enu', help='geodetic -> local ENU about an origin')
    _add_llh_arguments(llh2enu)
    _add_llh_arguments(llh2enu, prefix='origin-')

    enu2llh = subparsers.add_parser('enu2llh', help='local ENU about an origin -> geodetic')
    for axis in ('east', 'north', 'up'):
        enu2llh.add_argument(f'--{axis}', type=float, required=True, help=f'{axis} offset (m)')
    _add_llh_arguments(enu2llh, prefix='origin-')

    return parser


def _ellipsoid_from_args(args: argparse.Namespace) -> Ellipsoid:
    if (args.semi_major_axis is None) != (args.flattening is None):
        raise SystemExit('--semi-major-axis and --flattening must be given together')

    if args.semi_major_axis is not None:
        return Ellipsoid(EllipsoidParameters(args.semi_major_axis, args.flattening))

    return Ellipsoid(ELLIPSOID_PRESETS[args.ellipsoid])


def _llh_from_args(args: argparse.Namespace, prefix: str = '') -> LLH:
    return LLH.from_degrees(
        getattr(args, f'{prefix}lat'),
        getattr(args, f'{prefix}lon'),
        convert_to_meters(getattr(args, f'{prefix}height'), args.height_unit),
    )


def _format_llh(llh: LLH) -> List[str]:
    lat, lon, height = llh
    return [
        f'latitude:  {rad_to_deg(lat):.6f}',
        f'longitude: {rad_to_deg(lon):.6f}',
        f'height:    {height:.6f}',
    ]


def _run(args: argparse.Namespace) -> List[str]:
    ellipsoid = _ellipsoid_from_args(args)
    LOGGER.debug('Using %r', ellipsoid.parameters)

    if args.command == 'llh2ecef':
        x, y, z = ellipsoid.llh_to_ecef(_llh_from_args(args))
        return [f'x: {x:.6f}', f'y: {y:.6f}', f'z: {z:.6f}']

    if args.command == 'ecef2llh':
        if args.height_unit != 'm':
            warn_once('--height-unit has no effect on ecef2llh')
        return _format_llh(ellipsoid.ecef_to_llh((args.x, args.y, args.z)))

    if args.command == 'llh2enu':
        east, north, up = ellipsoid.llh_to_enu(
            _llh_from_args(args), _llh_from_args(args, 'origin_')
        )
        return [f'east:  {east:.6f}', f'north: {north:.6f}', f'up:    {up:.6f}']

    # enu2llh
    return _format_llh(
        ellipsoid.enu_to_llh((args.east, args.north, args.up), _llh_from_args(args, 'origin_'))
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbosity(args.verbose)

    try:
        lines = _run(args)
    except (GeoframesError, ValueError) as exc:
        LOGGER.error('%s', exc)
        return 1

    print('\n'.join(lines))
    return 0


if __name__ == '__main__':
    sys.exit(main())
