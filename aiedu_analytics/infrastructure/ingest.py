"""Normalization of raw survey rows into canonical StudentRecord objects.

Survey exports from different countries name the same answer differently
(``field_of_study`` vs ``major``, ``ai_tool`` vs ``ai_tools``). Aliases are
resolved here, once, so every downstream component reads a single shape.
"""
import math
import numbers
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from pydantic import ValidationError

from aiedu_analytics.core.errors import InvalidRecordError
from aiedu_analytics.core.logging import get_logger
from aiedu_analytics.domain.student import StudentRecord

logger = get_logger(__name__)

# Column order of the frame built by records_to_frame
FRAME_COLUMNS = [
    "student_id", "country", "major", "ai_tools", "ai_usage_hours", "study_hours",
    "gpa", "stress_level", "satisfaction_score", "impact_score", "impact_text",
]
NUMERIC_COLUMNS = [
    "ai_usage_hours", "study_hours", "gpa", "stress_level", "satisfaction_score", "impact_score",
]

_NESTED_SECTIONS = ("country_specific", "country_specific_fields")

TOOL_ALIASES = {
    'chatgpt': 'ChatGPT', 'chat gpt': 'ChatGPT', 'chat-gpt': 'ChatGPT', 'chat_gpt': 'ChatGPT',
    'claude': 'Claude', 'claude ai': 'Claude', 'anthropic claude': 'Claude',
    'gemini': 'Gemini', 'bard': 'Gemini', 'google bard': 'Gemini',
    'copilot': 'Copilot', 'co-pilot': 'Copilot', 'co pilot': 'Copilot',
    'bing chat': 'Copilot', 'bingchat': 'Copilot',
    'perplexity': 'Perplexity', 'perplexity ai': 'Perplexity',
    "google's ai studio models": 'Google AI Studio', 'googlesaistudiomodels': 'Google AI Studio',
    'grok': 'Grok', 'grok beta': 'Grok',
    'black box': 'Black Box', 'blackbox': 'Black Box',
}
# Longest keys first so "perplexity ai" wins over "perplexity" on partial matches
_ALIASES_BY_LENGTH = sorted(TOOL_ALIASES.items(), key=lambda kv: len(kv[0]), reverse=True)


# ----------------
# FIELD CLEANERS
# ----------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _clean_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value).strip()


def _clean_number(value: Any, field: str) -> Optional[float]:
    """Parse a numeric answer; missing answers become None."""
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        raise InvalidRecordError(f"{field} must be numeric, got boolean {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRecordError(f"{field} must be numeric, got {value!r}") from None
    if math.isnan(number):
        return None
    return number


def _clean_int(value: Any, field: str) -> Optional[int]:
    number = _clean_number(value, field)
    if number is None:
        return None
    if not number.is_integer():
        raise InvalidRecordError(f"{field} must be a whole number, got {value!r}")
    return int(number)


def normalize_tool(tool: Any) -> Optional[str]:
    """Map a raw AI tool answer to its canonical name.

    Examples:
        >>> normalize_tool("chat gpt")
        'ChatGPT'
        >>> normalize_tool("None") is None
        True
        >>> normalize_tool("notion ai")
        'Notion Ai'
    """
    if _is_missing(tool) or str(tool).strip() == "None":
        return None
    cleaned = str(tool).strip()
    lower = cleaned.lower()

    if lower in TOOL_ALIASES:
        return TOOL_ALIASES[lower]
    for key, value in _ALIASES_BY_LENGTH:
        if key in lower:
            return value

    # Title-case answers typed in a single case, keep deliberate casing
    if cleaned == cleaned.lower() or cleaned == cleaned.upper():
        return " ".join(w[:1].upper() + w[1:].lower() for w in cleaned.split())
    return cleaned


def _resolve_tools(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    value = raw.get("ai_tools")
    if _is_missing(value):
        value = raw.get("ai_tool")
    if _is_missing(value):
        return ()
    candidates = value if isinstance(value, (list, tuple)) else [value]

    tools: List[str] = []
    for candidate in candidates:
        tool = normalize_tool(candidate)
        if tool and tool not in tools:
            tools.append(tool)
    return tuple(tools)


def _resolve_impact(raw: Mapping[str, Any]) -> Tuple[Optional[float], Optional[str]]:
    """Split the impact-on-grades answer into its numeric and text forms."""
    score: Optional[float] = None
    text: Optional[str] = None

    top_level = raw.get("impact_on_grades")
    if isinstance(top_level, numbers.Number) and not isinstance(top_level, bool):
        score = _clean_number(top_level, "impact_on_grades")
    elif isinstance(top_level, str):
        text = _clean_text(top_level)

    if text is None:
        for section in _NESTED_SECTIONS:
            nested = raw.get(section)
            if isinstance(nested, Mapping):
                text = _clean_text(nested.get("impact_on_grades"))
                if text is not None:
                    break
    return score, text


def _first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if not _is_missing(value):
            return value
    return None


# ----------------
# NORMALIZATION
# ----------------

def normalize_record(raw: Mapping[str, Any], row_index: Optional[int] = None) -> StudentRecord:
    """Resolve aliases in one raw survey row and build a StudentRecord.

    Raises:
        InvalidRecordError: if a field cannot be parsed or is out of range
    """
    try:
        student_id = _first_present(raw, "student_id", "id")
        if student_id is None:
            student_id = f"ROW{row_index}" if row_index is not None else None
        if student_id is None:
            raise InvalidRecordError("record has no identifier")

        impact_score, impact_text = _resolve_impact(raw)
        return StudentRecord(
            student_id=str(student_id).strip(),
            country=_clean_text(raw.get("country")),
            major=_clean_text(_first_present(raw, "field_of_study", "major")),
            ai_tools=_resolve_tools(raw),
            ai_usage_hours=_clean_number(raw.get("ai_usage_hours"), "ai_usage_hours"),
            study_hours=_clean_number(
                _first_present(raw, "study_hours_per_week", "study_hours"), "study_hours"),
            gpa=_clean_number(raw.get("gpa"), "gpa"),
            stress_level=_clean_int(raw.get("stress_level"), "stress_level"),
            satisfaction_score=_clean_int(raw.get("satisfaction_score"), "satisfaction_score"),
            impact_score=impact_score,
            impact_text=impact_text,
        )
    except InvalidRecordError as e:
        if e.row_index is None and row_index is not None:
            raise InvalidRecordError(str(e), row_index) from None
        raise
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise InvalidRecordError(errors, row_index) from e


def normalize_records(rows: Iterable[Mapping[str, Any]]) -> List[StudentRecord]:
    """Normalize every raw row, failing fast on the first malformed one."""
    records = [normalize_record(row, index) for index, row in enumerate(rows)]
    logger.debug("Normalized survey rows", extra={"record_count": len(records)})
    return records


def records_from_frame(df: pd.DataFrame) -> List[StudentRecord]:
    """Normalize a DataFrame of survey answers (one row per respondent)."""
    if df is None or df.empty:
        return []
    rows = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    return normalize_records(rows)


def records_to_frame(records: Sequence[StudentRecord]) -> pd.DataFrame:
    """Build a DataFrame with numeric columns coerced to float (None -> NaN)."""
    df = pd.DataFrame([r.model_dump() for r in records], columns=FRAME_COLUMNS)
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    return df
