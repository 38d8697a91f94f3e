"""Engine configuration and settings.

Settings are read from environment variables (and an optional ``.env`` file)
by the hosting application. Computation modules never import this module:
values such as the outlier thresholds are handed to them as explicit
arguments.
"""
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from aiedu_analytics.domain.metrics import OutlierThresholds


ROOT = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=ROOT / ".env")

GPA_SCALE_MAX = 4.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # Outlier policy (defaults are policy, not law)
    gpa_outlier_low: float = Field(default=2.9, alias="GPA_OUTLIER_LOW")
    gpa_outlier_high: float = Field(default=3.8, alias="GPA_OUTLIER_HIGH")

    class Config:
        case_sensitive = False
        env_file = ".env"
        populate_by_name = True
        extra = "ignore"

    def validate_required_settings(self):
        """Validate that settings are usable."""
        for name in ("gpa_outlier_low", "gpa_outlier_high"):
            value = getattr(self, name)
            if not 0.0 <= value <= GPA_SCALE_MAX:
                raise ValueError(
                    f"{name.upper()} must lie on the 0.0-{GPA_SCALE_MAX} GPA scale, got {value}."
                )
        if self.gpa_outlier_low > self.gpa_outlier_high:
            raise ValueError(
                "GPA_OUTLIER_LOW must not exceed GPA_OUTLIER_HIGH "
                f"({self.gpa_outlier_low} > {self.gpa_outlier_high})."
            )
        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL '{self.log_level}' is not a valid logging level.")

    def outlier_thresholds(self) -> OutlierThresholds:
        """Return the configured GPA outlier band as an explicit value."""
        return OutlierThresholds(gpa_low=self.gpa_outlier_low, gpa_high=self.gpa_outlier_high)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and validate settings once per process."""
    settings = Settings()
    settings.validate_required_settings()
    return settings
