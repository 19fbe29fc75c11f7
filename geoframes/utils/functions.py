"""Module for miscellaneous multi-use functions"""

__all__ = ['as_triple', 'round_half_up']

from typing import Sequence, Tuple


def as_triple(values: Sequence[float], name: str = 'position') -> Tuple[float, float, float]:
    """
    Unpacks a 3-element sequence (tuple, list, numpy array, named tuple) into
    three python floats.

    Args:
        values:
            The sequence to unpack

        name:
            What the sequence represents, used in the error message

    Returns:
        Tuple of three floats
    """
    if len(values) != 3:
        raise ValueError(f'{name} must have exactly 3 components, got {len(values)}')

    first, second, third = values
    return float(first), float(second), float(third)


def round_half_up(value: float, precision) -> float:
    """
    Rounds numbers to the nearest whole, where a value exactly between the two nearest
    wholes is rounded to the higher whole.

    Args:
        value:
            The float value to be rounded
        precision:
            The precision to round the float value to

    """
    mod = value + 10 ** -(precision + 12)

    return round(mod, precision)
