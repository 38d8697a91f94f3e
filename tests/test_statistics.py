"""Unit tests for descriptive statistics."""
import math

import pytest

from aiedu_analytics.core.errors import InvalidInputError
from aiedu_analytics.services.statistics import (
    average,
    describe,
    group_by,
    median,
    percentile,
    share_within,
)


class TestAverage:
    """Test average."""

    def test_average_with_valid_data(self):
        """Test average of plain numbers."""
        assert average([10, 20, 30, 40, 50]) == 30.0

    def test_average_of_empty_is_zero(self):
        """Test empty input yields 0, not an error."""
        assert average([]) == 0.0
        assert average(None) == 0.0

    def test_average_of_all_null_is_zero(self):
        """Test all-missing input yields 0."""
        assert average([None, float("nan"), None]) == 0.0

    def test_nulls_are_not_counted_as_zero(self):
        """Test missing values are excluded from the denominator."""
        assert average([4.0, None, 2.0, float("nan")]) == 3.0


class TestMedian:
    """Test median."""

    def test_odd_length(self):
        assert median([3, 1, 2]) == 2

    def test_even_length_averages_middle_pair(self):
        """Test even sizes average the two middle values."""
        assert median([4, 1, 3, 2]) == 2.5

    def test_empty(self):
        assert median([]) == 0.0

    def test_input_not_sorted_in_place(self):
        """Test the caller's list keeps its order."""
        values = [3, 1, 2]
        median(values)
        assert values == [3, 1, 2]


class TestPercentile:
    """Test percentile interpolation."""

    @pytest.mark.parametrize("p, expected", [(0, 1.0), (25, 1.75), (50, 2.5), (100, 4.0)])
    def test_linear_interpolation(self, p, expected):
        """Test index = p/100 * (n - 1) interpolation."""
        assert percentile([4, 2, 1, 3], p) == pytest.approx(expected)

    @pytest.mark.parametrize("p", [0, 37.5, 100])
    def test_empty_is_zero(self, p):
        assert percentile([], p) == 0.0

    @pytest.mark.parametrize("p", [-1, 100.5, float("nan")])
    def test_out_of_range_p_raises(self, p):
        """Test p outside [0, 100] is an input error."""
        with pytest.raises(InvalidInputError):
            percentile([1, 2, 3], p)

    def test_single_value(self):
        assert percentile([7], 90) == 7


class TestGroupBy:
    """Test group_by."""

    def test_preserves_key_and_item_order(self):
        """Test first-seen key order and insertion order inside groups."""
        items = [("b", 1), ("a", 2), ("b", 3), ("a", 4)]
        groups = group_by(items, lambda item: item[0])

        assert list(groups) == ["b", "a"]
        assert groups["b"] == [("b", 1), ("b", 3)]

    def test_none_keys_are_dropped(self, sample_records):
        """Test records without a key are not placed in any group."""
        groups = group_by(sample_records, lambda r: r.country)

        assert None not in groups
        assert sum(len(g) for g in groups.values()) == 7
        assert [r.student_id for r in groups["India"]] == ["S1", "S2", "S8"]


class TestDescribe:
    """Test summary helpers."""

    def test_describe(self):
        summary = describe([1, 2, 3, 4, None])

        assert summary.count == 4
        assert summary.mean == 2.5
        assert summary.median == 2.5
        assert summary.p25 == pytest.approx(1.75)
        assert summary.minimum == 1
        assert summary.maximum == 4

    def test_describe_empty(self):
        summary = describe([])
        assert summary.count == 0
        assert summary.mean == 0.0

    def test_share_within(self):
        """Test share of values inside an inclusive band."""
        assert share_within([2.5, 3.0, 3.4, 3.8, 3.9], 3.0, 3.8) == pytest.approx(60.0)
        assert share_within([], 0, 1) == 0.0
        assert not math.isnan(share_within([None], 0, 1))

    def test_results_are_plain_floats(self):
        """Test summaries hand back builtin floats, not numpy scalars."""
        values = [3.1, 2.4, None, 3.9]
        for result in (average(values), median(values), percentile(values, 40), share_within(values, 3, 4)):
            assert type(result) is float
