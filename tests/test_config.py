from pathlib import Path

import pytest
from pydantic import ValidationError

from orgrollup.config import Settings, get_settings
from orgrollup.logging_setup import configure_logging


def test_defaults_point_at_project_data():
    s = Settings()
    assert s.default_max_depth == 2
    assert s.unit_field == "Organization"
    assert s.sections_path.name == "sections.json"
    assert s.sections_path.exists()


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ORGROLLUP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ORGROLLUP_DEFAULT_MAX_DEPTH", "4")
    monkeypatch.setenv("ORGROLLUP_UNIT_FIELD", "Org")
    s = Settings()
    assert s.data_dir == Path(tmp_path)
    assert s.units_path == Path(tmp_path) / "org_structure.json"
    assert s.default_max_depth == 4
    assert s.unit_field == "Org"


def test_negative_depth_rejected(monkeypatch):
    monkeypatch.setenv("ORGROLLUP_DEFAULT_MAX_DEPTH", "-1")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("LOUD")
