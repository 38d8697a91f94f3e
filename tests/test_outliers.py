"""Unit tests for GPA outlier detection."""
import pytest

from aiedu_analytics.core.errors import InvalidInputError
from aiedu_analytics.domain.metrics import OutlierThresholds
from aiedu_analytics.services.outliers import identify_outliers, outliers_for


class TestIdentifyOutliers:
    """Test identify_outliers."""

    def test_default_band(self, sample_records):
        """Test defaults flag GPAs below 2.9 or above 3.8."""
        flagged = identify_outliers(sample_records)
        assert [r.student_id for r in flagged] == ["S3", "S5", "S7"]

    def test_bounds_are_not_flagged(self, make_record):
        """Test GPAs exactly on a threshold are inside the band."""
        records = [make_record(gpa=2.9), make_record(gpa=3.8)]
        assert identify_outliers(records) == []

    def test_null_gpa_never_flagged(self, make_record):
        """Test records without GPA are never outliers, even with a tight band."""
        records = [make_record(gpa=None), make_record(gpa=None)]
        assert identify_outliers(records, 3.0, 3.0) == []

    def test_inverted_band_raises(self, sample_records):
        with pytest.raises(InvalidInputError):
            identify_outliers(sample_records, 3.8, 2.9)

    @pytest.mark.parametrize("narrow, wide", [
        ((3.0, 3.5), (2.9, 3.8)),
        ((2.9, 3.8), (2.5, 3.9)),
        ((3.2, 3.2), (0.0, 4.0)),
    ])
    def test_widening_never_adds_outliers(self, sample_records, narrow, wide):
        """Test outlier count is monotonic in the band width."""
        assert len(identify_outliers(sample_records, *wide)) <= len(identify_outliers(sample_records, *narrow))

    def test_outliers_for_thresholds_value(self, sample_records):
        """Test the OutlierThresholds wrapper uses the given band."""
        flagged = outliers_for(sample_records, OutlierThresholds(gpa_low=3.1, gpa_high=3.5))
        assert [r.student_id for r in flagged] == ["S1", "S3", "S5", "S7", "S8"]


class TestOutlierThresholds:
    """Test the thresholds value object."""

    def test_defaults(self):
        thresholds = OutlierThresholds()
        assert (thresholds.gpa_low, thresholds.gpa_high) == (2.9, 3.8)

    def test_inverted_rejected(self):
        with pytest.raises(ValueError):
            OutlierThresholds(gpa_low=3.5, gpa_high=3.0)
