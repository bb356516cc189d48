from __future__ import annotations

"""Factor-pair key encodings."""

from typing import Tuple


def ordered_pair(factor1: int, factor2: int) -> Tuple[int, int]:
    """Return the pair as (smaller, larger)."""
    return (factor1, factor2) if factor1 <= factor2 else (factor2, factor1)


def pair_key(factor1: int, factor2: int) -> str:
    """Unordered identity used for deduplication inside a question set."""
    lo, hi = ordered_pair(factor1, factor2)
    return f"{lo}-{hi}"


def stat_key(factor1: int, factor2: int) -> str:
    """Canonical key of a pair in a profile's question stats, e.g. ``"3x4"``."""
    lo, hi = ordered_pair(factor1, factor2)
    return f"{lo}x{hi}"


def presented_key(factor1: int, factor2: int) -> str:
    """Key in presentation order; legacy profiles were stored this way."""
    return f"{factor1}x{factor2}"
