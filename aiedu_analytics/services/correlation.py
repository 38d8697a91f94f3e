"""Pearson correlation, simple linear regression and R².

Mismatched input lengths are an input-shape error. Degenerate samples
(fewer than two pairs, zero variance) produce 0 instead.
"""
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from aiedu_analytics.core.errors import InvalidInputError
from aiedu_analytics.domain.metrics import LinearFit
from aiedu_analytics.services.statistics import is_valid_number

NOT_AVAILABLE = "N/A"

# (upper bound of |r|, label); the last label applies at and above 0.7
STRENGTH_BANDS = (
    (0.2, "Very Weak"),
    (0.3, "Weak"),
    (0.7, "Moderate"),
)


def _check_lengths(x: Sequence[Any], y: Sequence[Any], what: str):
    if x is None or y is None:
        raise InvalidInputError(f"{what} requires two sequences, got None")
    if len(x) != len(y):
        raise InvalidInputError(
            f"{what} requires sequences of equal length, got {len(x)} and {len(y)}"
        )


def valid_pairs(x: Sequence[Any], y: Sequence[Any]) -> List[Tuple[float, float]]:
    """Zip two equal-length sequences, dropping pairs with a missing element."""
    _check_lengths(x, y, "pairing")
    return [
        (float(xi), float(yi))
        for xi, yi in zip(x, y)
        if is_valid_number(xi) and is_valid_number(yi)
    ]


def _pair_frame(pairs: Iterable[Tuple[Any, Any]]) -> pd.DataFrame:
    data = [(float(a), float(b)) for a, b in pairs if is_valid_number(a) and is_valid_number(b)]
    return pd.DataFrame(data, columns=["x", "y"], dtype=float)


def pearson_correlation(x: Sequence[Any], y: Sequence[Any]) -> float:
    """Pearson's r over the valid pairs of ``x`` and ``y``.

    Raises:
        InvalidInputError: if ``x`` and ``y`` differ in length
    """
    df = _pair_frame(valid_pairs(x, y))
    if len(df) < 2:
        return 0.0
    # Constant samples have no variance; catch them before float cancellation does.
    if df["x"].nunique() < 2 or df["y"].nunique() < 2:
        return 0.0

    r = df["x"].corr(df["y"], method="pearson")
    if pd.isna(r):
        return 0.0
    return max(-1.0, min(1.0, float(r)))


def linear_regression(pairs: Iterable[Tuple[Any, Any]]) -> LinearFit:
    """Ordinary least squares fit of ``y`` on ``x``.

    Pairs with a missing element are ignored. With no usable pairs the fit
    is the zero line; with no spread in ``x`` it is the flat line at mean(y).
    """
    df = _pair_frame(pairs)
    n = len(df)
    if n == 0:
        return LinearFit()

    mean_y = float(df["y"].mean())
    if df["x"].nunique() < 2:
        return LinearFit(slope=0.0, intercept=mean_y, sample_size=n)

    slope = float(df["x"].cov(df["y"]) / df["x"].var())
    return LinearFit(slope=slope, intercept=mean_y - slope * float(df["x"].mean()), sample_size=n)


def r_squared(actual: Sequence[Any], predicted: Sequence[Any]) -> float:
    """Coefficient of determination ``1 - SS_res / SS_tot``.

    Raises:
        InvalidInputError: if the sequences differ in length
    """
    df = _pair_frame(valid_pairs(actual, predicted))
    if df.empty or df["x"].nunique() < 2:
        return 0.0
    ss_total = float(((df["x"] - df["x"].mean()) ** 2).sum())
    ss_residual = float(((df["x"] - df["y"]) ** 2).sum())
    if ss_total == 0:
        return 0.0
    return 1 - ss_residual / ss_total


def correlation_strength(r: Optional[float]) -> str:
    """Label |r|: Very Weak < 0.2 <= Weak < 0.3 <= Moderate < 0.7 <= Strong."""
    if not is_valid_number(r):
        return NOT_AVAILABLE
    magnitude = abs(r)
    for upper, label in STRENGTH_BANDS:
        if magnitude < upper:
            return label
    return "Strong"


def impact_indicator(r: Optional[float]) -> str:
    """Headline reading of the AI usage/GPA correlation."""
    if not is_valid_number(r):
        return NOT_AVAILABLE
    if r > 0.3:
        return "Positive Learning Impact"
    if r < 0:
        return "Negative Impact Risk"
    return "Minimal Impact"
