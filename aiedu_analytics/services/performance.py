"""Composite performance score for the dashboard health indicator.

Three sub-scores, each 0-100, are combined as
``0.4 * gpa + 0.3 * ai_adoption + 0.3 * engagement``.
"""
import math
from typing import Optional, Sequence

from aiedu_analytics.domain.metrics import MetricsBundle, PerformanceScore, ScoreBreakdown
from aiedu_analytics.domain.student import StudentRecord
from aiedu_analytics.services.metrics import adoption_rate
from aiedu_analytics.services.statistics import average, is_valid_number

GPA_SCALE = 4.0
MAX_IMPROVEMENT_BONUS = 10

# Weekly AI hours treated as the healthy usage band
OPTIMAL_USAGE = (8.0, 12.0)
OVERUSE_PENALTY_PER_HOUR = 5
OVERUSE_FLOOR = 50

WEIGHTS = {"gpa": 0.4, "ai_adoption": 0.3, "engagement": 0.3}

SCORE_LABELS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _clamp(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def gpa_component(avg_gpa: float, previous_gpa: Optional[float] = None) -> int:
    """GPA on the 0-100 scale, plus up to 10 points for improvement."""
    if not is_valid_number(avg_gpa):
        return 0
    base = avg_gpa / GPA_SCALE * 100
    if is_valid_number(previous_gpa) and previous_gpa > 0 and avg_gpa > previous_gpa:
        improvement = (avg_gpa - previous_gpa) / previous_gpa * 100
        bonus = min(improvement * 2, MAX_IMPROVEMENT_BONUS)
        return _clamp(base + bonus)
    return _clamp(base)


def usage_intensity(avg_usage: float) -> float:
    """100 inside the optimal band, linear decay above it, linear ramp below."""
    low, high = OPTIMAL_USAGE
    if low <= avg_usage <= high:
        return 100.0
    if avg_usage > high:
        return max(100 - (avg_usage - high) * OVERUSE_PENALTY_PER_HOUR, OVERUSE_FLOOR)
    return max(avg_usage, 0.0) / low * 100


def ai_adoption_component(records: Sequence[StudentRecord]) -> int:
    if not records:
        return 0
    avg_usage = average(r.ai_usage_hours for r in records)
    return _clamp(adoption_rate(records) * 0.6 + usage_intensity(avg_usage) * 0.4)


def is_complete(record: StudentRecord) -> bool:
    """True when GPA, AI usage, major and country were all answered."""
    return (
        record.gpa is not None
        and record.ai_usage_hours is not None
        and bool(record.major)
        and bool(record.country)
    )


def engagement_component(records: Sequence[StudentRecord], correlation: float) -> int:
    if not records:
        return 0
    completeness = sum(1 for r in records if is_complete(r)) / len(records) * 100
    correlation_score = abs(correlation) * 100 if is_valid_number(correlation) else 0.0
    return _clamp(completeness * 0.5 + correlation_score * 0.5)


def performance_label(score: float) -> str:
    for threshold, label in SCORE_LABELS:
        if score >= threshold:
            return label
    return "Needs Improvement"


def score_performance(
    bundle: MetricsBundle,
    records: Sequence[StudentRecord],
    previous_gpa: Optional[float] = None,
) -> PerformanceScore:
    """Combine the three sub-scores for the filtered set.

    Args:
        bundle: Metrics computed for ``records``
        records: The filtered record set
        previous_gpa: Prior-period average GPA, enables the improvement bonus

    Returns:
        PerformanceScore; all zeros for an empty record set
    """
    records = list(records)
    if not records:
        return PerformanceScore(overall=0, breakdown=ScoreBreakdown(), label=performance_label(0))

    breakdown = ScoreBreakdown(
        gpa_component=gpa_component(bundle.avg_gpa, previous_gpa),
        ai_adoption_component=ai_adoption_component(records),
        engagement_component=engagement_component(records, bundle.correlation),
    )
    overall = _clamp(
        breakdown.gpa_component * WEIGHTS["gpa"]
        + breakdown.ai_adoption_component * WEIGHTS["ai_adoption"]
        + breakdown.engagement_component * WEIGHTS["engagement"]
    )
    return PerformanceScore(overall=overall, breakdown=breakdown, label=performance_label(overall))
