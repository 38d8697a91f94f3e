"""Period-over-period deltas for the headline metrics.

The previous period comes from a BaselineProvider. The bundled
SyntheticBaselineProvider fabricates a plausible baseline from the current
metrics for demonstration; a provider backed by stored history can replace
it without touching the change calculation.
"""
import math
from typing import Optional, Protocol

from aiedu_analytics.domain.metrics import MetricsBundle, MetricTrend, PeriodSnapshot, TrendComparison
from aiedu_analytics.services.statistics import is_valid_number

TRACKED_METRICS = ("total", "avg_gpa", "avg_ai_usage_hours", "correlation")


class BaselineProvider(Protocol):
    """Source of the comparison period for a set of current metrics."""

    synthetic: bool

    def previous_period(self, current: MetricsBundle) -> Optional[PeriodSnapshot]:
        ...


class SyntheticBaselineProvider:
    """Derives a "previous period" by applying fixed deltas to the current one.

    Not historical data: respondents x 0.88, GPA - 0.08, weekly AI usage
    - 1.2h, correlation - 0.05. Count, GPA and usage are floored at zero.
    """

    synthetic = True

    def __init__(self, total_factor: float = 0.88, gpa_delta: float = 0.08,
                 usage_delta: float = 1.2, correlation_delta: float = 0.05):
        self.total_factor = total_factor
        self.gpa_delta = gpa_delta
        self.usage_delta = usage_delta
        self.correlation_delta = correlation_delta

    def previous_period(self, current: MetricsBundle) -> Optional[PeriodSnapshot]:
        if current is None:
            return None
        return PeriodSnapshot(
            total=int(math.floor(current.total * self.total_factor + 0.5)),
            avg_gpa=round(max(current.avg_gpa - self.gpa_delta, 0.0), 2),
            avg_ai_usage_hours=round(max(current.avg_ai_usage_hours - self.usage_delta, 0.0), 1),
            correlation=round(current.correlation - self.correlation_delta, 2),
        )


def calculate_change(current: Optional[float], previous: Optional[float]) -> float:
    """Percent change from previous to current, one decimal; 0 without a baseline."""
    if not is_valid_number(previous) or previous == 0 or not is_valid_number(current):
        return 0.0
    return round((current - previous) / previous * 100, 1)


def _direction(delta: float) -> str:
    if delta > 0:
        return "up"
    if delta < 0:
        return "down"
    return "flat"


def snapshot_of(bundle: MetricsBundle) -> PeriodSnapshot:
    return PeriodSnapshot(
        total=bundle.total,
        avg_gpa=bundle.avg_gpa,
        avg_ai_usage_hours=bundle.avg_ai_usage_hours,
        correlation=bundle.correlation,
    )


def compare_periods(bundle: MetricsBundle,
                    provider: Optional[BaselineProvider] = None) -> Optional[TrendComparison]:
    """Compare the headline metrics of ``bundle`` with the provider's baseline.

    Returns:
        TrendComparison, or None when the provider has no baseline
    """
    provider = provider or SyntheticBaselineProvider()
    baseline = provider.previous_period(bundle)
    if baseline is None:
        return None

    current = snapshot_of(bundle)
    trends = []
    for name in TRACKED_METRICS:
        now = float(getattr(current, name))
        before = float(getattr(baseline, name))
        delta = now - before
        trends.append(MetricTrend(
            name=name,
            current=now,
            previous=before,
            absolute_change=round(delta, 4),
            change_percent=calculate_change(now, before),
            direction=_direction(round(delta, 4)),
        ))
    return TrendComparison(
        baseline=baseline,
        synthetic=getattr(provider, "synthetic", False),
        trends=trends,
    )
