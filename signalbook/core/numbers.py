# signalbook/core/numbers.py
from __future__ import annotations

import math
from numbers import Real


def is_number(value: object) -> bool:
    """True for real numbers, excluding bools."""
    return isinstance(value, Real) and not isinstance(value, bool)


def format_number(value: float) -> str:
    """Integral values print without a fractional part (`1`, `0.5`, `-3`)."""
    x = float(value)
    if math.isfinite(x) and x.is_integer():
        return str(int(x))
    return repr(x)
