"""Classification of the self-reported impact of AI on grades.

Some surveys recorded the answer as a signed number, others as free text.
The numeric answer wins whenever both are present; the text is only
consulted when no number was given.
"""
import re
from typing import Dict, Iterable, Optional

from aiedu_analytics.domain.student import StudentRecord
from aiedu_analytics.services.statistics import is_valid_number

POSITIVE = "positive"
NEGATIVE = "negative"
NEUTRAL = "neutral"

# Checked in order: negations of improvement must win over "improve"
_TEXT_PATTERNS = (
    (NEUTRAL, re.compile(r"\b(no (effect|impact|change|difference)|neutral|same|unchanged|none)\b")),
    (NEGATIVE, re.compile(
        r"\b(negative|decreas\w*|declin\w*|wors\w*|lower\w*|drop\w*|hurt\w*"
        r"|not (improv\w*|better|help\w*))\b")),
    (POSITIVE, re.compile(r"\b(positive|improv\w*|increas\w*|better|higher|boost\w*|help\w*)\b")),
)


def classify_impact_text(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    lowered = text.strip().lower()
    for category, pattern in _TEXT_PATTERNS:
        if pattern.search(lowered):
            return category
    return None


def classify_impact(record: StudentRecord) -> Optional[str]:
    """Return "positive", "negative", "neutral" or None when unknown."""
    if is_valid_number(record.impact_score):
        if record.impact_score > 0:
            return POSITIVE
        if record.impact_score < 0:
            return NEGATIVE
        return NEUTRAL
    return classify_impact_text(record.impact_text)


def impact_distribution(records: Iterable[StudentRecord]) -> Dict[str, int]:
    """Count records per impact category; unclassifiable records are skipped."""
    counts = {POSITIVE: 0, NEGATIVE: 0, NEUTRAL: 0}
    for record in records:
        category = classify_impact(record)
        if category is not None:
            counts[category] += 1
    return counts
