"""Aggregation helpers used to build dataset summaries."""
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union
from itertools import chain
import re

import numpy as np

Number = Union[int, float]

# Fraction digits and optional exponent at the end of a number's text form
_DECIMAL_PATTERN = re.compile(r"(?:\.(\d+))?(?:[eE]([+-]?\d+))?$")

DEFAULT_THRESHOLD_BANDS = (0.15, 0.40, 0.55, 0.90)
MAX_DECIMAL_PLACES = 20


def decimal_places(num: Union[Number, str]) -> int:
    """
    Count the decimal places of a number.

    Works on the canonical text form (``repr`` for numbers, the literal
    text for strings) and subtracts any scientific exponent, so
    ``1.230`` gives 2 and ``"1.5e-2"`` gives 3.

    Args:
        num: Number or numeric text

    Returns:
        Number of decimal places, never negative
    """
    text = num.strip() if isinstance(num, str) else repr(num)
    match = _DECIMAL_PATTERN.search(text)
    if not match:
        return 0

    fraction_digits = len(match.group(1)) if match.group(1) else 0
    exponent = int(match.group(2)) if match.group(2) else 0
    return max(0, fraction_digits - exponent)


def max_decimal_place(values: Iterable[Number], cap: int = MAX_DECIMAL_PLACES) -> int:
    """Largest decimal place count among ``values``, capped at ``cap``."""
    places = max((decimal_places(v) for v in values), default=0)
    return min(places, cap)


def stable_union(key_lists: Iterable[Sequence[str]]) -> Tuple[str, ...]:
    """
    Union key lists keeping strict first-seen order.

    Walks the lists in order and each list front to back; a key keeps the
    position of its first appearance.
    """
    return tuple(dict.fromkeys(chain.from_iterable(key_lists)))


def totals_by_key(pairs: Iterable[Tuple[str, Number]]) -> Mapping[str, Number]:
    """Sum values per key. Repeated keys accumulate."""
    totals: Dict[str, Number] = {}
    for key, value in pairs:
        totals[key] = totals.get(key, 0) + value
    return MappingProxyType(totals)


def max_total(totals: Mapping[str, Number]) -> Optional[Number]:
    """Maximum of a totals mapping, None when it is empty."""
    return max(totals.values(), default=None)


def extent(values: Sequence[Number]) -> Tuple[Optional[Number], Optional[Number]]:
    """
    Min and max of ``values``.

    The returned bounds are elements of ``values`` (ints stay ints).
    An empty sequence yields ``(None, None)``.
    """
    if len(values) == 0:
        return None, None

    arr = np.asarray(values, dtype=float)
    return values[int(np.argmin(arr))], values[int(np.argmax(arr))]


def thresholds(
    value_min: Number,
    value_max: Number,
    places: int = 0,
    bands: Sequence[float] = DEFAULT_THRESHOLD_BANDS
) -> Tuple[float, ...]:
    """
    Breakpoints partitioning ``[value_min, value_max]``.

    Each band fraction is interpolated across the range, rounded to
    ``places`` digits and clamped back into the range. Halves round away
    from zero, so a raw 4.5 becomes 5 rather than numpy's even 4.

    Args:
        value_min: Lower bound of the value extent
        value_max: Upper bound of the value extent
        places: Decimal digits to round to
        bands: Fractions in [0, 1], non-decreasing

    Returns:
        One threshold per band
    """
    distance = value_max - value_min
    raw = value_min + np.asarray(bands, dtype=float) * distance
    scale = 10.0 ** places
    rounded = np.sign(raw) * np.floor(np.abs(raw) * scale + 0.5) / scale
    clamped = np.clip(rounded, value_min, value_max)
    # + 0.0 turns -0.0 into 0.0
    return tuple(float(v) + 0.0 for v in clamped)
