"""Tests for settings."""

import pytest
from pydantic import ValidationError

from py_terrapath.config import DEFAULT_BANDS, Settings, get_settings
from py_terrapath.core.terrain import TerrainCategory


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("TERRAPATH_LOG_LEVEL", "TERRAPATH_SNOW_TRAVERSABLE"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.default_zoom == 120.0
        assert settings.default_octaves == 8
        assert settings.default_height_scale == 1000.0
        assert settings.snow_traversable is False
        assert settings.default_connectivity == 8
        assert settings.default_teleport_cost == 1.0

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("TERRAPATH_DEFAULT_GRID_WIDTH", "64")
        monkeypatch.setenv("TERRAPATH_SNOW_TRAVERSABLE", "true")
        settings = Settings(_env_file=None)

        assert settings.default_grid_width == 64
        assert settings.snow_traversable is True

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("TERRAPATH_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_connectivity_must_be_four_or_eight(self, monkeypatch):
        monkeypatch.setenv("TERRAPATH_DEFAULT_CONNECTIVITY", "6")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_default_bands(self):
        assert [band.category for band in DEFAULT_BANDS] == list(TerrainCategory)
        assert [band.max_height for band in DEFAULT_BANDS[:-1]] == [0.4, 0.6, 0.75]
