"""Exceptions raised by geoframes"""

__all__ = [
    'ConvergenceError', 'GeoframesError', 'InvalidParameterError', 'OriginNotSetError'
]


class GeoframesError(Exception):
    """Base class for all geoframes errors"""


class InvalidParameterError(GeoframesError, ValueError):
    """Ellipsoid parameters outside a > 0, 0 < f < 1"""


class OriginNotSetError(GeoframesError, RuntimeError):
    """A local-frame conversion was requested before an origin was bound"""


class ConvergenceError(GeoframesError, ArithmeticError):
    """The ECEF -> LLH iteration could not produce a finite, converged latitude"""
