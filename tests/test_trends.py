"""Unit tests for period comparison."""
import pytest

from aiedu_analytics.domain.metrics import MetricsBundle, PeriodSnapshot
from aiedu_analytics.services.trends import (
    SyntheticBaselineProvider,
    TRACKED_METRICS,
    calculate_change,
    compare_periods,
)


@pytest.fixture
def bundle():
    return MetricsBundle(total=100, avg_gpa=3.2, avg_ai_usage_hours=10.0, correlation=0.45)


class StoredBaseline:
    """Baseline backed by a fixed historical snapshot."""

    synthetic = False

    def __init__(self, snapshot):
        self.snapshot = snapshot

    def previous_period(self, current):
        return self.snapshot


class TestSyntheticBaseline:
    """Test SyntheticBaselineProvider."""

    def test_fixed_deltas(self, bundle):
        previous = SyntheticBaselineProvider().previous_period(bundle)

        assert previous.total == 88
        assert previous.avg_gpa == pytest.approx(3.12)
        assert previous.avg_ai_usage_hours == pytest.approx(8.8)
        assert previous.correlation == pytest.approx(0.40)

    def test_floored_at_zero(self):
        """Test GPA and usage never go negative."""
        previous = SyntheticBaselineProvider().previous_period(
            MetricsBundle(total=1, avg_gpa=0.05, avg_ai_usage_hours=0.5, correlation=0.0))

        assert previous.avg_gpa == 0.0
        assert previous.avg_ai_usage_hours == 0.0
        assert previous.correlation == pytest.approx(-0.05)


class TestCalculateChange:
    """Test calculate_change."""

    def test_percent_change(self):
        assert calculate_change(100, 88) == 13.6
        assert calculate_change(88, 100) == -12.0

    @pytest.mark.parametrize("previous", [0, None, float("nan")])
    def test_no_baseline_gives_zero(self, previous):
        assert calculate_change(5, previous) == 0.0


class TestComparePeriods:
    """Test compare_periods."""

    def test_default_is_synthetic(self, bundle):
        comparison = compare_periods(bundle)

        assert comparison.synthetic is True
        assert [t.name for t in comparison.trends] == list(TRACKED_METRICS)
        total = comparison.get("total")
        assert total.change_percent == 13.6
        assert total.direction == "up"

    def test_custom_provider(self, bundle):
        """Test a stored baseline replaces the synthetic one."""
        stored = PeriodSnapshot(total=100, avg_gpa=3.4, avg_ai_usage_hours=10.0, correlation=0.5)
        comparison = compare_periods(bundle, StoredBaseline(stored))

        assert comparison.synthetic is False
        assert comparison.baseline == stored
        assert comparison.get("total").direction == "flat"
        assert comparison.get("avg_gpa").direction == "down"
        assert comparison.get("avg_gpa").change_percent == pytest.approx(-5.9)

    def test_provider_without_baseline(self, bundle):
        assert compare_periods(bundle, StoredBaseline(None)) is None

    def test_unknown_metric(self, bundle):
        assert compare_periods(bundle).get("stress") is None
