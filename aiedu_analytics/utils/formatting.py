"""Display formatting for metric values used in insight text."""
from typing import Optional

from aiedu_analytics.services.statistics import is_valid_number

NOT_AVAILABLE = "N/A"


def format_pct(value: Optional[float]) -> str:
    """Format numeric values to one decimal (string), N/A if missing.

    Examples:
        >>> format_pct(75.6789)
        '75.7'
        >>> format_pct(None)
        'N/A'
    """
    if not is_valid_number(value):
        return NOT_AVAILABLE
    return f"{value:.1f}"


def format_gpa(gpa: Optional[float]) -> str:
    if not is_valid_number(gpa):
        return NOT_AVAILABLE
    return f"{gpa:.2f}"


def format_correlation(r: Optional[float]) -> str:
    if not is_valid_number(r):
        return NOT_AVAILABLE
    return f"{r:.2f}"
