"""GPA outlier flagging."""
from typing import Iterable, List, Optional

from aiedu_analytics.core.errors import InvalidInputError
from aiedu_analytics.domain.metrics import OutlierThresholds
from aiedu_analytics.domain.student import StudentRecord

DEFAULT_THRESHOLDS = OutlierThresholds()


def identify_outliers(
    records: Iterable[StudentRecord],
    gpa_low: float = DEFAULT_THRESHOLDS.gpa_low,
    gpa_high: float = DEFAULT_THRESHOLDS.gpa_high,
) -> List[StudentRecord]:
    """Return records whose GPA falls strictly outside [gpa_low, gpa_high].

    Records without a GPA are never flagged. Input order is preserved.

    Raises:
        InvalidInputError: if gpa_low exceeds gpa_high
    """
    if gpa_low > gpa_high:
        raise InvalidInputError(f"gpa_low {gpa_low} exceeds gpa_high {gpa_high}")
    return [
        r for r in records
        if r.gpa is not None and (r.gpa < gpa_low or r.gpa > gpa_high)
    ]


def outliers_for(records: Iterable[StudentRecord],
                 thresholds: Optional[OutlierThresholds] = None) -> List[StudentRecord]:
    """identify_outliers with the band given as an OutlierThresholds value."""
    thresholds = thresholds or DEFAULT_THRESHOLDS
    return identify_outliers(records, thresholds.gpa_low, thresholds.gpa_high)
