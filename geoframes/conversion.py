"""
Module for unit conversions
"""
__all__ = ['convert_to_meters', 'deg_to_rad', 'rad_to_deg']

import math


def deg_to_rad(degrees: float) -> float:
    """Converts an angle in degrees to radians"""
    return degrees / 180.0 * math.pi


def rad_to_deg(radians: float) -> float:
    """Converts an angle in radians to degrees"""
    return radians * 180.0 / math.pi


def convert_to_meters(distance: float, unit: str) -> float:
    """
    Converts distance to meters.

    Args:
        distance (float): The distance value.
        unit (str): The unit of distance (meter = 'm', kilometer= 'km', mile = 'mi'
        , feet ='ft',nautical mile = 'nmi', yard = 'yd').

    Returns:
        float: The distance in meters.
    """
    unit = unit.lower()
    conversion_factors = {
        'm': 1,
        'km': 1000,
        'mi': 1609.34,
        'ft': 0.3048,
        'nmi': 1852,
        'yd': 0.9144,
    }

    if unit not in conversion_factors:
        raise ValueError(
            f"Unknown distance unit '{unit}'. Options: {list(conversion_factors.keys())}"
        )

    return distance * conversion_factors[unit]
