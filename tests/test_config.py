import pytest
from pydantic import ValidationError

from census.config import Settings, get_settings
from census.ir import SheetCategory


def test_defaults(settings):
    assert settings.SHEET_MAPPING_MODE == "name"
    assert settings.SHEET_MATCH_THRESHOLD == 80
    assert settings.expected_total_row(SheetCategory.OPD_TIME) == settings.EXPECTED_TOTAL_ROW_OPD_TIME
    assert settings.expected_total_row(SheetCategory.IPD) is None


def test_env_overrides(monkeypatch, settings):
    monkeypatch.setenv("EXPECTED_TOTAL_ROW_OPD_PREMIUM", "15")
    monkeypatch.setenv("SHEET_MAPPING_MODE", " Positional ")
    monkeypatch.setenv("BUSY_THRESHOLD", "25")
    s = Settings()
    assert s.expected_total_row(SheetCategory.OPD_PREMIUM) == 15
    assert s.SHEET_MAPPING_MODE == "positional"
    assert s.BUSY_THRESHOLD == 25


def test_invalid_mapping_mode(monkeypatch, settings):
    monkeypatch.setenv("SHEET_MAPPING_MODE", "index")
    with pytest.raises(ValidationError):
        Settings()


def test_invalid_threshold(monkeypatch, settings):
    monkeypatch.setenv("SHEET_MATCH_THRESHOLD", "150")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached(settings):
    assert get_settings() is settings
