"""One-call assembly of everything the dashboard renders for a filter state.

Filter criteria, outlier thresholds and the trend baseline are explicit
arguments; nothing is read from module state, and each call builds a new
DashboardSnapshot.
"""
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from aiedu_analytics.core.logging import LogTimer, get_logger
from aiedu_analytics.domain.metrics import (
    Insight,
    LearnerGroupComparison,
    MetricsBundle,
    OutlierThresholds,
    PerformanceScore,
    Recommendation,
    TrendComparison,
)
from aiedu_analytics.domain.student import FilterCriteria, StudentRecord
from aiedu_analytics.services.correlation import correlation_strength, impact_indicator
from aiedu_analytics.services.filters import apply_filters
from aiedu_analytics.services.impact import impact_distribution
from aiedu_analytics.services.insights import (
    country_highlights,
    generate_insights,
    generate_recommendations,
)
from aiedu_analytics.services.metrics import compare_learner_groups, compute_metrics
from aiedu_analytics.services.outliers import outliers_for
from aiedu_analytics.services.performance import score_performance
from aiedu_analytics.services.trends import BaselineProvider, compare_periods

logger = get_logger(__name__)


class DashboardSnapshot(BaseModel):
    """Presentation-ready results for one set of filter criteria."""
    criteria: FilterCriteria
    filtered_count: int
    metrics: MetricsBundle
    correlation_strength: str
    impact_indicator: str
    outlier_ids: List[str] = Field(default_factory=list)
    performance: PerformanceScore
    insights: List[Insight] = Field(default_factory=list)
    key_insight: Optional[Insight] = None
    recommendations: List[Recommendation] = Field(default_factory=list)
    country_highlights: List[str] = Field(default_factory=list)
    learner_groups: LearnerGroupComparison
    impact_distribution: Dict[str, int] = Field(default_factory=dict)
    trends: Optional[TrendComparison] = None


def build_dashboard(
    records: Iterable[StudentRecord],
    criteria: Optional[FilterCriteria] = None,
    thresholds: Optional[OutlierThresholds] = None,
    baseline: Optional[BaselineProvider] = None,
    previous_gpa: Optional[float] = None,
) -> DashboardSnapshot:
    """Filter the records and compute every derived view of the result.

    Args:
        records: Full normalized record collection (not modified)
        criteria: Filter criteria; None selects everything
        thresholds: GPA outlier band; defaults to 2.9-3.8
        baseline: Trend baseline source; defaults to the synthetic provider
        previous_gpa: Prior-period GPA for the performance improvement bonus

    Returns:
        DashboardSnapshot
    """
    criteria = criteria or FilterCriteria()
    thresholds = thresholds or OutlierThresholds()

    with LogTimer(logger, "build_dashboard"):
        filtered = apply_filters(records, criteria)
        bundle = compute_metrics(filtered)
        insights = generate_insights(bundle, filtered)

        snapshot = DashboardSnapshot(
            criteria=criteria,
            filtered_count=len(filtered),
            metrics=bundle,
            correlation_strength=correlation_strength(bundle.correlation),
            impact_indicator=impact_indicator(bundle.correlation),
            outlier_ids=[r.student_id for r in outliers_for(filtered, thresholds)],
            performance=score_performance(bundle, filtered, previous_gpa),
            insights=insights,
            key_insight=insights[0] if insights else None,
            recommendations=generate_recommendations(bundle, filtered),
            country_highlights=country_highlights(bundle),
            learner_groups=compare_learner_groups(filtered),
            impact_distribution=impact_distribution(filtered),
            trends=compare_periods(bundle, baseline),
        )

    logger.info(
        f"Dashboard built for {snapshot.filtered_count} records",
        extra={"filtered_count": snapshot.filtered_count, "operation": "build_dashboard"},
    )
    return snapshot
