"""Record selection by explicit filter criteria.

Selection state is never held at module level: every call receives the
records and a FilterCriteria value and returns a new list in input order.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from aiedu_analytics.core.logging import get_logger
from aiedu_analytics.domain.student import (
    AI_USAGE_DOMAIN,
    GPA_DOMAIN,
    FilterCriteria,
    StudentRecord,
    is_wildcard,
)

logger = get_logger(__name__)


def _covers(bounds: Tuple[float, float], domain: Tuple[float, float]) -> bool:
    return bounds[0] <= domain[0] and bounds[1] >= domain[1]


def _in_range(value: Optional[float], bounds: Optional[Tuple[float, float]],
              domain: Tuple[float, float]) -> bool:
    """Inclusive range check; missing values only pass a full-domain range."""
    if bounds is None:
        return True
    if value is None:
        return _covers(bounds, domain)
    low, high = bounds
    return low <= value <= high


def _matches(record: StudentRecord, criteria: FilterCriteria) -> bool:
    if not is_wildcard(criteria.country) and record.country != criteria.country:
        return False
    if not is_wildcard(criteria.major) and record.major != criteria.major:
        return False
    if not is_wildcard(criteria.tool) and criteria.tool not in record.ai_tools:
        return False
    if not _in_range(record.gpa, criteria.gpa_range, GPA_DOMAIN):
        return False
    if not _in_range(record.ai_usage_hours, criteria.ai_usage_range, AI_USAGE_DOMAIN):
        return False
    return True


def apply_filters(records: Iterable[StudentRecord],
                  criteria: Optional[FilterCriteria] = None) -> List[StudentRecord]:
    """Select the records satisfying every active criterion.

    Args:
        records: Records to filter (not modified)
        criteria: Constraints to apply; None or all-wildcard keeps everything

    Returns:
        New list of matching records, preserving input order. Empty when
        nothing matches.

    Example:
        >>> apply_filters(records, FilterCriteria(country="India", gpa_range=(3.0, 4.0)))
    """
    records = list(records)
    if criteria is None or criteria.is_empty():
        return records

    selected = [r for r in records if _matches(r, criteria)]
    logger.debug(
        "Applied filters",
        extra={"record_count": len(records), "filtered_count": len(selected)},
    )
    return selected


def unique_values(records: Sequence[StudentRecord], field: str) -> List[str]:
    """Sorted distinct non-empty values of a field, for selector options.

    ``ai_tools`` is flattened so each tool is listed once.
    """
    values = set()
    for record in records:
        value = getattr(record, field)
        items = value if isinstance(value, tuple) else (value,)
        for item in items:
            if item is not None and str(item).strip():
                values.add(item)
    return sorted(values)
