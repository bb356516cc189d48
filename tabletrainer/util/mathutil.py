from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (12.5 -> 13), unlike round().

    Raises ValueError for NaN and infinities.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot round non-finite value {value!r}")
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    """Rounded percentage, 0 when ``whole`` is 0."""
    if whole == 0:
        return 0
    return round_half_up(100 * part / whole)
