"""Rule-based insights and recommendations for the filtered record set.

Each rule is an independent function ``(bundle, records) -> Insight | None``
listed in INSIGHT_RULES. Rules are evaluated in table order, then the
emitted insights are stable-sorted by priority, so ties keep table order.
"""
from operator import attrgetter
from typing import Callable, List, Optional, Sequence

from aiedu_analytics.core.logging import get_logger
from aiedu_analytics.domain.metrics import Insight, InsightCategory, MetricsBundle, Recommendation
from aiedu_analytics.domain.student import StudentRecord
from aiedu_analytics.services.correlation import correlation_strength
from aiedu_analytics.services.statistics import average
from aiedu_analytics.utils.formatting import format_correlation, format_gpa, format_pct

logger = get_logger(__name__)

InsightRule = Callable[[MetricsBundle, Sequence[StudentRecord]], Optional[Insight]]

# Weekly AI hours
HEAVY_USAGE_HOURS = 10
LIGHT_USAGE_HOURS = 2
OPTIMAL_USAGE = (8, 12)
EXCESSIVE_USAGE_HOURS = 15
LOW_USAGE_HOURS = 5

TARGET_GPA = 3.0
HIGH_GPA = 3.5


# ----------------
# RULES
# ----------------

def correlation_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    r = bundle.correlation
    if abs(r) < 0.5:
        return None
    direction = "positive" if r >= 0 else "negative"
    return Insight(
        category=InsightCategory.POSITIVE if abs(r) >= 0.7 else InsightCategory.INFORMATIONAL,
        title="AI-Performance Correlation",
        description=(
            f"There is a {correlation_strength(r).lower()} {direction} correlation "
            f"(r={format_correlation(r)}) between AI usage and GPA."
        ),
        priority=1,
    )


def usage_gap_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    heavy = [r.gpa for r in records
             if r.ai_usage_hours is not None and r.ai_usage_hours > HEAVY_USAGE_HOURS and r.gpa is not None]
    light = [r.gpa for r in records
             if r.ai_usage_hours is not None and r.ai_usage_hours < LIGHT_USAGE_HOURS and r.gpa is not None]
    if not heavy or not light:
        return None

    heavy_gpa = average(heavy)
    light_gpa = average(light)
    if light_gpa == 0:
        return None
    diff = (heavy_gpa - light_gpa) / light_gpa * 100
    if abs(diff) < 10:
        return None
    return Insight(
        category=InsightCategory.POSITIVE if diff > 0 else InsightCategory.NEGATIVE,
        title="AI Usage Impact",
        description=(
            f"Students using AI {HEAVY_USAGE_HOURS}+ hours/week show {abs(diff):.0f}% "
            f"{'higher' if diff > 0 else 'lower'} average GPA "
            f"({format_gpa(heavy_gpa)} vs {format_gpa(light_gpa)})."
        ),
        priority=2,
    )


def usage_range_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    if bundle.usage_sample_size == 0:
        return None
    avg = bundle.avg_ai_usage_hours
    low, high = OPTIMAL_USAGE
    if low <= avg <= high:
        return Insight(
            category=InsightCategory.POSITIVE,
            title="Optimal AI Usage",
            description=(
                f"Average AI usage of {format_pct(avg)} hours/week falls within the optimal range "
                f"({low}-{high} hours), showing balanced integration."
            ),
            priority=3,
        )
    if avg > EXCESSIVE_USAGE_HOURS:
        return Insight(
            category=InsightCategory.NEGATIVE,
            title="High AI Usage",
            description=(
                f"Average AI usage of {format_pct(avg)} hours/week exceeds the optimal range. "
                f"Diminishing returns may occur above {EXCESSIVE_USAGE_HOURS} hours/week."
            ),
            priority=3,
        )
    if avg < LOW_USAGE_HOURS:
        return Insight(
            category=InsightCategory.NEGATIVE,
            title="Low AI Engagement",
            description=(
                f"Average AI usage of {format_pct(avg)} hours/week is below the optimal range. "
                "Consider promoting AI adoption."
            ),
            priority=3,
        )
    return None


def adoption_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    rate = bundle.ai_adoption_rate
    if rate >= 75:
        return Insight(
            category=InsightCategory.POSITIVE,
            title="Strong AI Adoption",
            description=f"{format_pct(rate)}% of students actively use AI tools, indicating high engagement.",
            priority=4,
        )
    if rate < 50:
        # A structural gap, surfaced ahead of the descriptive findings
        return Insight(
            category=InsightCategory.NEGATIVE,
            title="Low AI Adoption",
            description=(
                f"Only {format_pct(rate)}% of students use AI tools. "
                "Consider awareness campaigns or training."
            ),
            priority=2,
        )
    return None


def popular_tool_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    if not bundle.tool_counts or bundle.total == 0:
        return None
    # max() keeps the first of equal counts, i.e. the first-seen tool
    tool, count = max(bundle.tool_counts.items(), key=lambda item: item[1])
    share = count / bundle.total * 100
    return Insight(
        category=InsightCategory.INFORMATIONAL,
        title="Most Popular Tool",
        description=(
            f"{tool} is the most popular AI tool, used by {format_pct(share)}% of students "
            f"({count} students)."
        ),
        priority=5,
    )


def academic_performance_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    if bundle.gpa_sample_size == 0:
        return None
    gpa = bundle.avg_gpa
    if gpa >= HIGH_GPA:
        return Insight(
            category=InsightCategory.POSITIVE,
            title="High Academic Performance",
            description=f"Average GPA of {format_gpa(gpa)} indicates strong overall academic performance.",
            priority=6,
        )
    if gpa < TARGET_GPA:
        return Insight(
            category=InsightCategory.NEGATIVE,
            title="Academic Performance Alert",
            description=(
                f"Average GPA of {format_gpa(gpa)} is below target. "
                "Review support systems and interventions."
            ),
            priority=2,
        )
    return None


def data_quality_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    missing = sum(1 for r in records if r.gpa is None or r.ai_usage_hours is None)
    if missing == 0:
        return None
    return Insight(
        category=InsightCategory.NEGATIVE,
        title="Data Quality Issue",
        description=(
            f"{missing} students ({format_pct(missing / len(records) * 100)}%) have incomplete data. "
            "Ensure data collection processes are robust."
        ),
        priority=7,
    )


INSIGHT_RULES: tuple[InsightRule, ...] = (
    correlation_insight,
    usage_gap_insight,
    usage_range_insight,
    adoption_insight,
    popular_tool_insight,
    academic_performance_insight,
    data_quality_insight,
)


# ----------------
# GENERATION
# ----------------

def generate_insights(
    bundle: MetricsBundle,
    records: Sequence[StudentRecord],
    rules: Sequence[InsightRule] = INSIGHT_RULES,
) -> List[Insight]:
    """Evaluate every rule and return the insights sorted by priority.

    A rule that raises is logged and skipped; the others still run.
    """
    records = list(records)
    if not records:
        return []

    insights: List[Insight] = []
    for rule in rules:
        try:
            insight = rule(bundle, records)
        except Exception:
            logger.warning(f"Insight rule {rule.__name__} failed, skipping",
                           extra={"rule": rule.__name__}, exc_info=True)
            continue
        if insight is not None:
            insights.append(insight)
    return sorted(insights, key=attrgetter("priority"))


def get_key_insight(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> Optional[Insight]:
    """The most important insight, or None when no rule fires."""
    insights = generate_insights(bundle, records)
    return insights[0] if insights else None


def generate_recommendations(bundle: MetricsBundle, records: Sequence[StudentRecord]) -> List[Recommendation]:
    """Actionable follow-ups for program staff, most urgent first in each area."""
    records = list(records)
    if not records:
        return []

    recommendations: List[Recommendation] = []
    low, high = OPTIMAL_USAGE

    # Sweet spot
    if bundle.usage_sample_size:
        if bundle.avg_ai_usage_hours < low:
            recommendations.append(Recommendation(
                priority="high",
                action=f"Encourage {low}-{high} hour/week AI usage as the optimal range",
                reason="Current average is below the sweet spot for maximum benefit",
            ))
        elif bundle.avg_ai_usage_hours > EXCESSIVE_USAGE_HOURS:
            recommendations.append(Recommendation(
                priority="medium",
                action=f"Monitor heavy AI users (>{EXCESSIVE_USAGE_HOURS}h/week) for over-reliance",
                reason=f"Diminishing returns observed above {EXCESSIVE_USAGE_HOURS} hours/week",
            ))

    if bundle.ai_adoption_rate < 50:
        recommendations.append(Recommendation(
            priority="high",
            action="Launch AI literacy and adoption campaign",
            reason=f"Only {bundle.ai_adoption_rate:.0f}% of students use AI tools",
        ))

    for major in bundle.major_aggregates:
        if major.ai_adoption_rate < 30 and major.student_count > 10:
            recommendations.append(Recommendation(
                priority="medium",
                action=f"Provide targeted AI training for {major.major} students",
                reason=f"Only {major.ai_adoption_rate:.0f}% adoption in this major",
            ))

    if bundle.gpa_sample_size and bundle.avg_gpa < TARGET_GPA:
        recommendations.append(Recommendation(
            priority="high",
            action="Review and enhance academic support systems",
            reason=f"Average GPA of {format_gpa(bundle.avg_gpa)} is below target",
        ))

    if bundle.correlation > 0.5:
        recommendations.append(Recommendation(
            priority="medium",
            action="Study high-performing cohorts for best practice patterns",
            reason="Strong positive correlation suggests AI usage contributes to success",
        ))

    return recommendations


def country_highlights(bundle: MetricsBundle) -> List[str]:
    """One-line comparisons across countries in the filtered set."""
    countries = bundle.country_aggregates
    if not countries:
        return []
    # max/min keep the first of equal values
    best = max(countries, key=attrgetter("avg_gpa"))
    worst = min(countries, key=attrgetter("avg_gpa"))
    busiest = max(countries, key=attrgetter("avg_ai_usage_hours"))
    return [
        f"{best.country} leads with the highest average GPA ({format_gpa(best.avg_gpa)}), "
        f"while {worst.country} has the lowest ({format_gpa(worst.avg_gpa)}).",
        f"{busiest.country} shows the highest AI usage ({format_pct(busiest.avg_ai_usage_hours)} hrs/week), "
        "indicating strong technology adoption.",
    ]
