"""GPS time (week, seconds-of-week) and Unix time conversions and formatting"""

from __future__ import annotations

__all__ = [
    'GPSTime', 'current_unix_time', 'epoch_to_unix', 'full_time_string', 'gpst_to_str',
    'gpst_to_unix', 'nmea_to_unix', 'str_to_unix', 'unix_seconds_to_string',
    'unix_time_string', 'unix_to_gpst', 'unix_to_gpst_str', 'unix_to_str', 'unix_to_time_str',
]

import calendar
from datetime import datetime, timezone
import time
from typing import List, Literal, Optional, Union

from pydantic import validate_call

from geoframes._const import GPS_EPOCH_UNIX_SECONDS, GPS_LEAP_SECONDS, SECONDS_PER_WEEK
from geoframes.utils.functions import round_half_up


TimeUnit = Literal['s', 'ms', 'us', 'ns']

_UNIT_FACTORS = {
    's': 1,
    'ms': 1_000,
    'us': 1_000_000,
    'ns': 1_000_000_000,
}

_DEFAULT_DATE_FORMATS = [
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%dT%H:%M:%S.%f%z',
    '%Y/%m/%d %H:%M:%S',
    '%Y-%m-%d',
]


def _unit_factor(unit: str) -> int:
    if unit not in _UNIT_FACTORS:
        raise ValueError(f"Unknown time unit '{unit}'. Options: {list(_UNIT_FACTORS.keys())}")
    return _UNIT_FACTORS[unit]


def _scale(whole_seconds: int, fractional_seconds: float, unit: str) -> int:
    """Combines integer and fractional seconds into an integer count of `unit`"""
    factor = _unit_factor(unit)
    return whole_seconds * factor + int(round_half_up(fractional_seconds * factor, 0))


class GPSTime:
    """
    A GPS time expressed as a week number and seconds into that week.

    Seconds outside [0, 604800) are carried into the week number, so
    GPSTime(2000, 604801) == GPSTime(2001, 1).
    """

    @validate_call
    def __init__(self, week: int, seconds: float = 0.0):
        extra_weeks, seconds = divmod(seconds, SECONDS_PER_WEEK)
        week += int(extra_weeks)
        if week < 0:
            raise ValueError(f'GPS week must not be negative, got {week}')

        self.week, self.seconds = week, seconds

    def __eq__(self, other) -> bool:
        if not isinstance(other, GPSTime):
            return False

        return self.week == other.week and self.seconds == other.seconds

    def __hash__(self) -> int:
        return hash((self.week, self.seconds))

    def __repr__(self):
        return f'<GPSTime(week={self.week}, seconds={self.seconds})>'

    def __iter__(self):
        yield self.week
        yield self.seconds

    @property
    def total_seconds(self) -> float:
        """Seconds elapsed since the GPS epoch (1980-01-06T00:00:00)"""
        return self.week * SECONDS_PER_WEEK + self.seconds

    def to_str(self, with_week: bool = False) -> str:
        """
        Fixed-width representation: 6-wide week followed by 16-wide seconds of week
        when `with_week` is set, otherwise 20-wide seconds since the GPS epoch.
        """
        if with_week:
            return f'{self.week:6d}{self.seconds:16.6f}'
        return f'{self.total_seconds:20.6f}'


def gpst_to_unix(
    gpst: GPSTime,
    unit: TimeUnit = 'us',
    leap_seconds: int = GPS_LEAP_SECONDS,
) -> int:
    """
    Convert a GPS time to Unix time.

    Args:
        gpst:
            The GPS time

        unit: (str) (Default 'us')
            The unit of the returned integer; one of 's', 'ms', 'us', 'ns'

        leap_seconds: (int) (Default 18)
            GPS - UTC offset in seconds

    Returns:
        (int) Unix time in `unit`
    """
    whole = GPS_EPOCH_UNIX_SECONDS + gpst.week * SECONDS_PER_WEEK - leap_seconds
    return _scale(whole, gpst.seconds, unit)


def unix_to_gpst(
    unix_time: Union[int, float],
    unit: TimeUnit = 'us',
    leap_seconds: int = GPS_LEAP_SECONDS,
) -> GPSTime:
    """
    Convert a Unix time to GPS week and seconds of week.

    Args:
        unix_time:
            Unix time expressed in `unit`

        unit: (str) (Default 'us')
            One of 's', 'ms', 'us', 'ns'

        leap_seconds: (int) (Default 18)
            GPS - UTC offset in seconds

    Returns:
        GPSTime
    """
    factor = _unit_factor(unit)
    whole, remainder = divmod(unix_time, factor)
    gps_seconds = int(whole) - GPS_EPOCH_UNIX_SECONDS + leap_seconds
    week, seconds_of_week = divmod(gps_seconds, SECONDS_PER_WEEK)
    return GPSTime(week, seconds_of_week + remainder / factor)


def epoch_to_unix(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
    unit: TimeUnit = 'us',
) -> int:
    """Convert a UTC calendar date and time of day to Unix time in `unit`"""
    whole_second = int(second)
    whole = calendar.timegm((year, month, day, hour, minute, whole_second, 0, 0, 0))
    return _scale(whole, second - whole_second, unit)


def nmea_to_unix(ddmmyy: int, hhmmss: float, unit: TimeUnit = 'us') -> int:
    """
    Convert NMEA style date (DDMMYY) and time (HHMMSS.SS) fields to Unix time.
    Two-digit years below 80 are taken to be in the 2000s.
    """
    day, month, year = ddmmyy // 10000, ddmmyy // 100 % 100, ddmmyy % 100
    year += 2000 if year < 80 else 1900

    hour, minute = int(hhmmss // 10000), int(hhmmss // 100 % 100)
    second = hhmmss - hour * 10000 - minute * 100
    return epoch_to_unix(year, month, day, hour, minute, second, unit)


def _parse_timestamp(time_str: str, formats: Optional[List[str]] = None) -> datetime:
    formats = formats or _DEFAULT_DATE_FORMATS
    for idx, fmt in enumerate(formats):
        try:
            parsed = datetime.strptime(time_str, fmt)
            # If the format worked, move to the front so future iterations will find it first
            formats.insert(0, formats.pop(idx))
            return parsed
        except ValueError:
            continue
    raise ValueError(f'Date format was not recognized; {time_str}')


def str_to_unix(
    time_str: str,
    formats: Optional[Union[str, List[str]]] = None,
    unit: TimeUnit = 'us',
) -> int:
    """
    Parse a timestamp string into Unix time. Timestamps without a timezone are
    taken to be UTC.

    Uses standard python strptime format codes, documented here:
    https://docs.python.org/3/library/datetime.html#strftime-and-strptime-format-codes

    Args:
        time_str: (str)
            The timestamp

        formats: (Union[str, List[str]]) (Optional)
            Custom timestamp formats to attempt parsing with

        unit: (str) (Default 'us')
            The unit of the returned integer

    Returns:
        (int) Unix time in `unit`

    Raises:
        ValueError: if no format matches
    """
    if isinstance(formats, str):
        formats = [formats]

    parsed = _parse_timestamp(time_str, formats)
    if not parsed.tzinfo:
        parsed = parsed.replace(tzinfo=timezone.utc)

    whole = calendar.timegm(parsed.utctimetuple())
    return _scale(whole, parsed.microsecond / 1e6, unit)


def gpst_to_str(gpst: GPSTime, with_week: bool = False) -> str:
    return gpst.to_str(with_week)


def unix_to_gpst_str(unix_time: int, with_week: bool = False, unit: TimeUnit = 'us') -> str:
    return unix_to_gpst(unix_time, unit).to_str(with_week)


def unix_to_str(unix_time: int) -> str:
    """20-wide, right aligned integer Unix time"""
    return f'{unix_time:20d}'


def unix_to_time_str(unix_time: int, unit: TimeUnit = 'us') -> str:
    """'YYYY-mm-dd HH:MM:SS.ffffff' in UTC"""
    factor = _unit_factor(unit)
    whole, remainder = divmod(unix_time, factor)
    dt = datetime.fromtimestamp(whole, tz=timezone.utc)
    return f'{dt:%Y-%m-%d %H:%M:%S}.{int(remainder * 1_000_000 // factor):06d}'


def unix_time_string(t_s: float) -> str:
    """Unix seconds with microsecond resolution"""
    return f'{t_s:.6f}'


def full_time_string(t_s: float) -> str:
    """20-wide Unix seconds followed by the GPS week and seconds of week"""
    return f'{t_s:20.6f}' + unix_to_gpst(t_s, 's').to_str(with_week=True)


def unix_seconds_to_string(unix_seconds: int, fmt: str = '%Y-%m-%d %H:%M:%S') -> str:
    """Formats whole Unix seconds as a UTC calendar string"""
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).strftime(fmt)


def current_unix_time() -> float:
    return time.time()
