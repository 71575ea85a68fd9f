"""
Configuration Module
====================

Application settings loaded from environment variables and the ``.env``
file: expected total-row positions, sheet mapping policy and dashboard
thresholds.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

from census.ir import SheetCategory

load_dotenv()

_MAPPING_MODES = {"name", "positional"}


class Settings(BaseSettings):
    """
    Application settings backed by Pydantic BaseSettings.

    Attributes:
        EXPECTED_TOTAL_ROW_*: 1-based spreadsheet row holding the daily grand
            total of each flat sheet; only a tie-break hint, never required
        SHEET_MAPPING_MODE: ``name`` (match sheet names) or ``positional``
        SHEET_MATCH_THRESHOLD: minimum rapidfuzz score for a sheet name
        BUSY_THRESHOLD: department load above which it is flagged busy
        TOP_DEPARTMENTS: size of the dashboard's top-departments ranking
        MAX_UPLOAD_MB: upload size limit for the API and dashboard
    """
    EXPECTED_TOTAL_ROW_OPD_TIME: int = 48
    EXPECTED_TOTAL_ROW_OPD_SPECIAL: int = 21
    EXPECTED_TOTAL_ROW_OPD_PREMIUM: int = 12
    SHEET_MAPPING_MODE: str = "name"
    SHEET_MATCH_THRESHOLD: int = 80
    BUSY_THRESHOLD: int = 40
    TOP_DEPARTMENTS: int = 10
    MAX_UPLOAD_MB: int = 50
    LOG_LEVEL: str = "INFO"

    @field_validator("SHEET_MAPPING_MODE")
    @classmethod
    def validate_mapping_mode(cls, v: str) -> str:
        mode = (v or "").strip().lower()
        if mode not in _MAPPING_MODES:
            raise ValueError(
                f"SHEET_MAPPING_MODE must be one of {sorted(_MAPPING_MODES)}, got {v!r}"
            )
        return mode

    @field_validator("SHEET_MATCH_THRESHOLD")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("SHEET_MATCH_THRESHOLD must be between 0 and 100")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def expected_total_row(self, category: SheetCategory) -> Optional[int]:
        """Configured total-row hint for a flat category, ``None`` for the banded one."""
        return {
            SheetCategory.OPD_TIME: self.EXPECTED_TOTAL_ROW_OPD_TIME,
            SheetCategory.OPD_SPECIAL: self.EXPECTED_TOTAL_ROW_OPD_SPECIAL,
            SheetCategory.OPD_PREMIUM: self.EXPECTED_TOTAL_ROW_OPD_PREMIUM,
        }.get(SheetCategory(category))


# Module-level singleton to avoid re-reading the environment
_settings_instance = None


def get_settings() -> Settings:
    """
    Return the cached settings instance, creating it on first use.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached instance so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
