"""MetricsBundle construction for a filtered record set.

The bundle is always recomputed from scratch for the records it is given;
nothing is updated incrementally or cached here.
"""
from collections import Counter
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from aiedu_analytics.core.logging import LogTimer, get_logger
from aiedu_analytics.domain.metrics import (
    CountryAggregate,
    LearnerGroupComparison,
    LearnerGroupStats,
    MajorAggregate,
    MetricsBundle,
)
from aiedu_analytics.domain.student import StudentRecord
from aiedu_analytics.infrastructure.ingest import records_to_frame
from aiedu_analytics.services.correlation import (
    linear_regression,
    pearson_correlation,
    r_squared,
    valid_pairs,
)
from aiedu_analytics.services.statistics import average, valid_values

logger = get_logger(__name__)


# ----------------
# COUNTS & RATES
# ----------------

def adoption_rate(records: Sequence[StudentRecord]) -> float:
    """Percent of records reporting more than zero weekly AI hours."""
    if not records:
        return 0.0
    users = sum(1 for r in records if r.uses_ai)
    return users / len(records) * 100


def tool_counts(records: Iterable[StudentRecord]) -> Dict[str, int]:
    """Number of records naming each tool, in first-seen order."""
    counts: Counter = Counter()
    for record in records:
        counts.update(dict.fromkeys(record.ai_tools))
    return dict(counts)


# ----------------
# GROUP AGGREGATES
# ----------------

def _grouped(df: pd.DataFrame, key: str, **aggs) -> pd.DataFrame:
    """NaN-skipping group means, sorted by avg_gpa desc (ties keep first-seen order)."""
    keyed = df.dropna(subset=[key])
    if keyed.empty:
        return keyed
    return (
        keyed.groupby(key, sort=False)
        .agg(**aggs)
        .reset_index()
        .fillna(0.0)
        .sort_values("avg_gpa", ascending=False, kind="mergesort")
    )


def country_aggregates(records: Sequence[StudentRecord]) -> List[CountryAggregate]:
    """One rollup per distinct country; records without a country are skipped."""
    if not records:
        return []
    agg = _grouped(
        records_to_frame(records),
        "country",
        student_count=("student_id", "size"),
        avg_gpa=("gpa", "mean"),
        avg_ai_usage_hours=("ai_usage_hours", "mean"),
        avg_stress=("stress_level", "mean"),
    )
    return [
        CountryAggregate(
            country=row["country"],
            student_count=int(row["student_count"]),
            avg_gpa=round(float(row["avg_gpa"]), 2),
            avg_ai_usage_hours=round(float(row["avg_ai_usage_hours"]), 1),
            avg_stress=round(float(row["avg_stress"]), 1),
        )
        for row in agg.to_dict(orient="records")
    ]


def major_aggregates(records: Sequence[StudentRecord]) -> List[MajorAggregate]:
    """One rollup per field of study, including its AI adoption rate."""
    if not records:
        return []
    df = records_to_frame(records)
    df["uses_ai"] = (df["ai_usage_hours"].fillna(0.0) > 0).astype(int)
    agg = _grouped(
        df,
        "major",
        student_count=("student_id", "size"),
        avg_gpa=("gpa", "mean"),
        avg_ai_usage_hours=("ai_usage_hours", "mean"),
        ai_users=("uses_ai", "sum"),
    )
    return [
        MajorAggregate(
            major=row["major"],
            student_count=int(row["student_count"]),
            avg_gpa=round(float(row["avg_gpa"]), 2),
            avg_ai_usage_hours=round(float(row["avg_ai_usage_hours"]), 1),
            ai_adoption_rate=round(float(row["ai_users"]) / int(row["student_count"]) * 100, 1),
        )
        for row in agg.to_dict(orient="records")
    ]


def _group_stats(label: str, records: Sequence[StudentRecord]) -> LearnerGroupStats:
    avg_study = average(r.study_hours for r in records)
    avg_gpa = average(r.gpa for r in records)
    return LearnerGroupStats(
        label=label,
        student_count=len(records),
        avg_study_hours=round(avg_study, 2),
        avg_ai_usage_hours=round(average(r.ai_usage_hours for r in records), 2),
        avg_gpa=round(avg_gpa, 2),
        gpa_per_study_hour=round(avg_gpa / avg_study, 3) if avg_study > 0 else 0.0,
    )


def compare_learner_groups(records: Sequence[StudentRecord]) -> LearnerGroupComparison:
    """Split records by whether any AI tool was named and compare averages."""
    integrated = [r for r in records if r.ai_tools]
    traditional = [r for r in records if not r.ai_tools]
    return LearnerGroupComparison(
        ai_integrated=_group_stats("AI-Integrated Learners", integrated),
        traditional=_group_stats("Traditional Learners", traditional),
    )


# ----------------
# BUNDLE
# ----------------

def compute_metrics(records: Iterable[StudentRecord]) -> MetricsBundle:
    """Compute the full MetricsBundle for a (filtered) record set.

    Example:
        >>> bundle = compute_metrics(apply_filters(records, criteria))
        >>> bundle.avg_gpa, bundle.correlation
    """
    records = list(records)
    with LogTimer(logger, "compute_metrics"):
        gpas = [r.gpa for r in records]
        usage = [r.ai_usage_hours for r in records]

        pairs = valid_pairs(usage, gpas)
        fit = linear_regression(pairs)
        fit_r2 = r_squared([g for _, g in pairs], [fit.predict(u) for u, _ in pairs])

        bundle = MetricsBundle(
            total=len(records),
            avg_gpa=average(gpas),
            avg_ai_usage_hours=average(usage),
            avg_study_hours=average(r.study_hours for r in records),
            correlation=pearson_correlation(usage, gpas),
            r_squared=fit_r2,
            regression=fit,
            gpa_sample_size=len(valid_values(gpas)),
            usage_sample_size=len(valid_values(usage)),
            ai_adoption_rate=adoption_rate(records),
            tool_counts=tool_counts(records),
            country_aggregates=country_aggregates(records),
            major_aggregates=major_aggregates(records),
            secondary_correlations={
                "ai_usage_vs_stress": pearson_correlation(usage, [r.stress_level for r in records]),
                "ai_usage_vs_satisfaction": pearson_correlation(
                    usage, [r.satisfaction_score for r in records]),
                "study_hours_vs_gpa": pearson_correlation([r.study_hours for r in records], gpas),
            },
        )
    return bundle
