"""Numeric representation shared by the reader and the numeric builtins.

Exact numbers are int and Fraction, inexact numbers are float. Exact
results that are integral are always int, never Fraction(n, 1).
"""

from __future__ import annotations

import math
from fractions import Fraction

Number = int | Fraction | float


def normalize(x: Number) -> Number:
    if isinstance(x, Fraction) and x.denominator == 1:
        return x.numerator
    return x


def to_inexact(x: Number) -> float:
    """The float nearest to x; exact numbers beyond the float range become +inf.0 or -inf.0."""
    try:
        return float(x)
    except OverflowError:
        return math.inf if x > 0 else -math.inf
