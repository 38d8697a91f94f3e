"""Descriptive statistics over numeric samples and record groupings.

Missing answers (None or NaN) are dropped before every computation so they
never count as zero. Empty samples yield 0 rather than an error.
"""
import math
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar

import pandas as pd

from aiedu_analytics.core.errors import InvalidInputError
from aiedu_analytics.domain.metrics import DescriptiveSummary

T = TypeVar("T")


def is_valid_number(value: Any) -> bool:
    """True for real numbers that are not NaN (booleans excluded)."""
    if value is None or isinstance(value, bool):
        return False
    try:
        return not math.isnan(value)
    except TypeError:
        return False


def valid_values(values: Optional[Iterable[Any]]) -> List[float]:
    """Drop None/NaN entries, keeping order."""
    if values is None:
        return []
    return [float(v) for v in values if is_valid_number(v)]


def to_series(values: Optional[Iterable[Any]]) -> pd.Series:
    """Float Series of the valid values."""
    return pd.Series(valid_values(values), dtype=float)


def average(values: Optional[Iterable[Any]]) -> float:
    """Arithmetic mean of the valid values; 0.0 for an empty sample."""
    series = to_series(values)
    if series.empty:
        return 0.0
    return float(series.mean())


def median(values: Optional[Iterable[Any]]) -> float:
    """Middle value; the mean of the two middle values for even sizes."""
    series = to_series(values)
    if series.empty:
        return 0.0
    return float(series.median())


def percentile(values: Optional[Iterable[Any]], p: float) -> float:
    """Linearly interpolated percentile, ``index = p/100 * (n - 1)``.

    Raises:
        InvalidInputError: if ``p`` lies outside [0, 100]
    """
    if not is_valid_number(p) or not 0 <= p <= 100:
        raise InvalidInputError(f"percentile must be within [0, 100], got {p!r}")
    series = to_series(values)
    if series.empty:
        return 0.0
    return float(series.quantile(p / 100, interpolation="linear"))


def share_within(values: Optional[Iterable[Any]], low: float, high: float) -> float:
    """Percentage of valid values inside the inclusive band [low, high]."""
    series = to_series(values)
    if series.empty:
        return 0.0
    return float(series.between(low, high, inclusive="both").mean() * 100)


def describe(values: Optional[Iterable[Any]]) -> DescriptiveSummary:
    """Summary statistics of a sample (all zeros when empty)."""
    series = to_series(values)
    if series.empty:
        return DescriptiveSummary()
    return DescriptiveSummary(
        count=int(series.count()),
        mean=float(series.mean()),
        median=float(series.median()),
        p25=float(series.quantile(0.25)),
        p75=float(series.quantile(0.75)),
        minimum=float(series.min()),
        maximum=float(series.max()),
    )


def group_by(items: Sequence[T], key_fn: Callable[[T], Optional[Hashable]]) -> Dict[Hashable, List[T]]:
    """Partition items by key, keeping first-seen key order and item order.

    Items whose key is None are dropped rather than collected in a
    catch-all group.
    """
    groups: Dict[Hashable, List[T]] = {}
    for item in items:
        key = key_fn(item)
        if key is None:
            continue
        groups.setdefault(key, []).append(item)
    return groups
