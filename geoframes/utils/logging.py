"""Logging utility for geoframes"""

__all__ = ['LOGGER', 'set_verbosity', 'warn_once']

import logging

LOGGER = logging.getLogger('geoframes')
LOGGER.setLevel(logging.WARNING)
_LOG_HANDLER = logging.StreamHandler()
_LOG_FORMATTER = logging.Formatter('[%(levelname)s] %(name)s: %(message)s')
_LOG_HANDLER.setFormatter(_LOG_FORMATTER)
LOGGER.addHandler(_LOG_HANDLER)

_WARNINGS = set()


def warn_once(warning: str):
    if warning not in _WARNINGS:
        LOGGER.warning(warning)
        _WARNINGS.add(warning)


def set_verbosity(verbose: bool):
    """Switches the package logger between WARNING and DEBUG"""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.WARNING)
