"""Pytest configuration and shared fixtures."""
import pytest

from aiedu_analytics.domain.student import StudentRecord


@pytest.fixture
def make_record():
    """Factory for StudentRecord with an auto-generated identifier."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        fields.setdefault("student_id", f"T{counter['n']}")
        return StudentRecord(**fields)

    return _make


@pytest.fixture
def sample_records():
    """Eight respondents across four countries, with a few unanswered fields."""
    return [
        StudentRecord(student_id="S1", country="India", major="Computer Science",
                      ai_tools=("ChatGPT",), ai_usage_hours=10, study_hours=20,
                      gpa=3.6, stress_level=5, satisfaction_score=8),
        StudentRecord(student_id="S2", country="India", major="Business",
                      ai_tools=("ChatGPT", "Gemini"), ai_usage_hours=12, study_hours=15,
                      gpa=3.4, stress_level=6, satisfaction_score=7),
        StudentRecord(student_id="S3", country="Bangladesh", major="Computer Science",
                      ai_tools=(), ai_usage_hours=0, study_hours=25,
                      gpa=2.8, stress_level=8, satisfaction_score=4),
        StudentRecord(student_id="S4", country="Bangladesh", major="Arts",
                      ai_tools=("Claude",), ai_usage_hours=5, study_hours=10,
                      gpa=None, stress_level=4),
        StudentRecord(student_id="S5", country="Turkey", major="Medicine",
                      ai_tools=("ChatGPT",), ai_usage_hours=None, study_hours=30,
                      gpa=3.9, stress_level=9),
        StudentRecord(student_id="S6", country="Egypt", major="Computer Science",
                      ai_tools=("Copilot",), ai_usage_hours=14, study_hours=18,
                      gpa=3.2),
        StudentRecord(student_id="S7", country=None, major="Business",
                      ai_tools=(), ai_usage_hours=1, study_hours=12,
                      gpa=2.5),
        StudentRecord(student_id="S8", country="India", major="Arts",
                      ai_tools=("Gemini",), ai_usage_hours=8, study_hours=None,
                      gpa=3.0),
    ]


@pytest.fixture
def raw_rows():
    """Raw survey rows as delivered by exporters, aliases unresolved."""
    return [
        {"id": "STU1", "country": "India", "major": "Engineering", "ai_tool": "chat gpt",
         "ai_usage_hours": 9, "study_hours_per_week": 21, "gpa": 3.45,
         "stress_level": 6, "satisfaction_score": 7, "impact_on_grades": 1},
        {"student_id": "STU2", "country": "Bangladesh", "field_of_study": "Medicine",
         "major": "Biology", "ai_tools": ["Bard", "gemini", "None"], "ai_usage_hours": "",
         "study_hours": 18, "gpa": None,
         "country_specific": {"impact_on_grades": "Grades improved"}},
        {"id": "STU3", "country": "Egypt", "ai_tool": "None", "ai_usage_hours": 0,
         "gpa": "2.75", "impact_on_grades": "No change"},
    ]
