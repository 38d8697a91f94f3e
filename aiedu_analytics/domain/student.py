"""Domain models for survey respondents and record selection."""
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

WILDCARD = "all"

GPA_DOMAIN: Tuple[float, float] = (0.0, 4.0)
# Hours in a week; a range covering this lets records without usage data through.
AI_USAGE_DOMAIN: Tuple[float, float] = (0.0, 168.0)


class StudentRecord(BaseModel):
    """One survey respondent in canonical shape.

    Aliases found in raw survey exports (``field_of_study``, ``ai_tool``,
    ``study_hours_per_week`` ...) are resolved once at ingestion, see
    ``aiedu_analytics.infrastructure.ingest``. Numeric fields that were not
    answered are ``None``.
    """
    student_id: str
    country: Optional[str] = None
    major: Optional[str] = None
    ai_tools: Tuple[str, ...] = ()
    ai_usage_hours: Optional[float] = Field(default=None, ge=0, description="Weekly AI tool usage in hours")
    study_hours: Optional[float] = Field(default=None, ge=0, description="Weekly study hours")
    gpa: Optional[float] = Field(default=None, ge=0, le=4.0, description="Grade point average 0.0-4.0")
    stress_level: Optional[int] = Field(default=None, ge=1, le=10)
    satisfaction_score: Optional[int] = Field(default=None, ge=1, le=10)
    impact_score: Optional[float] = Field(default=None, description="Numeric impact-on-grades signal")
    impact_text: Optional[str] = Field(default=None, description="Categorical impact-on-grades answer")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "student_id": "STU42",
                "country": "India",
                "major": "Computer Science",
                "ai_tools": ["ChatGPT", "Copilot"],
                "ai_usage_hours": 9.5,
                "study_hours": 22,
                "gpa": 3.41,
                "stress_level": 6,
                "satisfaction_score": 8,
                "impact_score": 1,
            }
        }

    @field_validator("country", "major", "impact_text", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("ai_tools", mode="before")
    @classmethod
    def _unique_tools(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = (value,)
        cleaned = [t.strip() if isinstance(t, str) else t for t in value]
        # One entry per tool, first-seen order
        return tuple(dict.fromkeys(t for t in cleaned if t != ""))

    @property
    def uses_ai(self) -> bool:
        return self.ai_usage_hours is not None and self.ai_usage_hours > 0


def is_wildcard(value: Optional[str]) -> bool:
    """True when a selector value imposes no constraint ("all", empty or unset)."""
    if value is None:
        return True
    text = str(value).strip()
    return not text or text.lower() == WILDCARD


class FilterCriteria(BaseModel):
    """Field constraints selecting a subset of records.

    String selectors accept the wildcard sentinel (``None``, ``""`` or
    ``"all"``). Ranges are inclusive ``(low, high)`` pairs.
    """
    country: Optional[str] = WILDCARD
    major: Optional[str] = WILDCARD
    tool: Optional[str] = WILDCARD
    gpa_range: Optional[Tuple[float, float]] = None
    ai_usage_range: Optional[Tuple[float, float]] = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "country": "Bangladesh",
                "major": "all",
                "tool": "ChatGPT",
                "gpa_range": [2.5, 4.0],
            }
        }

    @field_validator("gpa_range", "ai_usage_range")
    @classmethod
    def _check_range(cls, value: Optional[Tuple[float, float]]):
        if value is not None and value[0] > value[1]:
            raise ValueError(f"range low bound {value[0]} exceeds high bound {value[1]}")
        return value

    def is_empty(self) -> bool:
        """True when no criterion constrains the selection."""
        return (
            is_wildcard(self.country)
            and is_wildcard(self.major)
            and is_wildcard(self.tool)
            and self.gpa_range is None
            and self.ai_usage_range is None
        )
