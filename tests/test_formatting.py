"""Unit tests for display formatting."""
import pytest

from aiedu_analytics.utils.formatting import format_correlation, format_gpa, format_pct


class TestFormatting:
    """Test the number formatters used in insight text."""

    @pytest.mark.parametrize("func, value, expected", [
        (format_pct, 75.6789, "75.7"),
        (format_gpa, 3.0, "3.00"),
        (format_correlation, -0.456, "-0.46"),
    ])
    def test_formats(self, func, value, expected):
        assert func(value) == expected

    @pytest.mark.parametrize("func", [format_pct, format_gpa, format_correlation])
    @pytest.mark.parametrize("value", [None, float("nan")])
    def test_missing(self, func, value):
        assert func(value) == "N/A"
