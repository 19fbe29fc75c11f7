"""Utility mixin classes"""

__all__ = ['LoggingMixin']

import logging


class LoggingMixin:  # pylint: disable=too-few-public-methods
    """
    Gives a class a logger named after its module and class, e.g.
    'geoframes.ellipsoid.Ellipsoid', so records flow through the package logger.

    The logger is created on first use, subclasses don't need to call
    LoggingMixin.__init__().
    """

    WARNED_ONCE: set = set()

    @property
    def logger(self) -> logging.Logger:
        _class = self.__class__
        if _class.__module__ == 'builtins':
            return logging.getLogger(_class.__name__)

        return logging.getLogger(f'{_class.__module__}.{_class.__name__}')

    @classmethod
    def _set_warned_once(cls, key):
        """Appends message key to classvar"""
        cls.WARNED_ONCE.add(key)

    def warn_once(self, msg, *args, **kwargs):
        """Logs a warning only once per (class, message)"""
        key = (self.__class__.__qualname__, msg)
        if key in self.WARNED_ONCE:
            return

        self.logger.warning(msg, *args, **kwargs)
        self._set_warned_once(key)
