"""Rounding helpers matching the half-up behaviour of the web calculators."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ndigits, with exact halves rounded towards positive infinity.

    Python's round() uses banker's rounding; projections and tax breakdowns
    are rounded half-up so that results match the browser calculators.
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_currency(value: float) -> int:
    """Round to a whole currency unit.

    NaN and infinite values are returned unchanged so that a bad rate
    propagates through a projection instead of raising.
    """
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))
