"""Domain models for derived metrics, scores, insights and trends.

These are result objects: built fresh by the services on every call and
consumed by presentation code, never persisted.
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class OutlierThresholds(BaseModel):
    """GPA band outside of which a record is flagged as an outlier."""
    gpa_low: float = Field(default=2.9, ge=0, le=4.0)
    gpa_high: float = Field(default=3.8, ge=0, le=4.0)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_order(self):
        if self.gpa_low > self.gpa_high:
            raise ValueError(f"gpa_low {self.gpa_low} exceeds gpa_high {self.gpa_high}")
        return self


class LinearFit(BaseModel):
    """Ordinary least squares line ``y = slope * x + intercept``."""
    slope: float = 0.0
    intercept: float = 0.0
    sample_size: int = 0

    class Config:
        frozen = True

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


class DescriptiveSummary(BaseModel):
    """Five-number style summary of a numeric sample."""
    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    p25: float = 0.0
    p75: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0


class CountryAggregate(BaseModel):
    """Per-country rollup of the filtered set."""
    country: str
    student_count: int
    avg_gpa: float
    avg_ai_usage_hours: float
    avg_stress: float


class MajorAggregate(BaseModel):
    """Per-major rollup of the filtered set."""
    major: str
    student_count: int
    avg_gpa: float
    avg_ai_usage_hours: float
    ai_adoption_rate: float = Field(description="Percent of students with usage > 0")


class MetricsBundle(BaseModel):
    """Aggregate statistical summary of a filtered record set."""
    total: int = 0
    avg_gpa: float = 0.0
    avg_ai_usage_hours: float = 0.0
    avg_study_hours: float = 0.0
    correlation: float = 0.0
    r_squared: float = 0.0
    regression: LinearFit = Field(default_factory=LinearFit)
    gpa_sample_size: int = 0
    usage_sample_size: int = 0
    ai_adoption_rate: float = 0.0
    tool_counts: Dict[str, int] = Field(default_factory=dict)
    country_aggregates: List[CountryAggregate] = Field(default_factory=list)
    major_aggregates: List[MajorAggregate] = Field(default_factory=list)
    secondary_correlations: Dict[str, float] = Field(default_factory=dict)


class LearnerGroupStats(BaseModel):
    """Averages for one learner group."""
    label: str
    student_count: int = 0
    avg_study_hours: float = 0.0
    avg_ai_usage_hours: float = 0.0
    avg_gpa: float = 0.0
    gpa_per_study_hour: float = 0.0


class LearnerGroupComparison(BaseModel):
    """AI-integrated learners (at least one tool) vs traditional learners."""
    ai_integrated: LearnerGroupStats
    traditional: LearnerGroupStats


class InsightCategory(str, Enum):
    """Tone of an insight. Values are the tags the dashboard renders."""
    POSITIVE = "success"
    NEGATIVE = "warning"
    INFORMATIONAL = "info"
    NEUTRAL = "neutral"


class Insight(BaseModel):
    """Rule-generated finding; lower priority surfaces first."""
    category: InsightCategory
    title: str
    description: str
    priority: int = Field(ge=1)

    class Config:
        frozen = True


class Recommendation(BaseModel):
    """Actionable follow-up derived from the metrics."""
    priority: str = Field(pattern="^(high|medium)$")
    action: str
    reason: str

    class Config:
        frozen = True


class ScoreBreakdown(BaseModel):
    gpa_component: int = Field(default=0, ge=0, le=100)
    ai_adoption_component: int = Field(default=0, ge=0, le=100)
    engagement_component: int = Field(default=0, ge=0, le=100)


class PerformanceScore(BaseModel):
    """Composite 0-100 health indicator."""
    overall: int = Field(default=0, ge=0, le=100)
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    label: str = "Needs Improvement"


class PeriodSnapshot(BaseModel):
    """Headline metrics of one period, used as a trend baseline."""
    total: int = 0
    avg_gpa: float = 0.0
    avg_ai_usage_hours: float = 0.0
    correlation: float = 0.0


class MetricTrend(BaseModel):
    name: str
    current: float
    previous: Optional[float] = None
    absolute_change: float = 0.0
    change_percent: float = 0.0
    direction: str = Field(default="flat", pattern="^(up|down|flat)$")


class TrendComparison(BaseModel):
    """Period-over-period deltas for the headline metrics."""
    baseline: PeriodSnapshot
    synthetic: bool = False
    trends: List[MetricTrend] = Field(default_factory=list)

    def get(self, name: str) -> Optional[MetricTrend]:
        return next((t for t in self.trends if t.name == name), None)
