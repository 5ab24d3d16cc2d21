"""Tests for settings loading."""

from pathlib import Path

from runnerforge.config import Settings, get_settings
from runnerforge.models import new_character


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, settings):
        assert settings.default_build_points == 400
        assert settings.default_max_availability == 12
        assert settings.default_allow_forbidden is False
        assert settings.log_level == "INFO"
        assert settings.log_format == "console"

    def test_bundled_metatype_path(self, settings):
        assert settings.metatype_path.name == "metatypes.yaml"
        assert settings.metatype_path.exists()

    def test_env_override(self, monkeypatch):
        """Test RUNNERFORGE_ variables override defaults."""
        monkeypatch.setenv("RUNNERFORGE_DEFAULT_BUILD_POINTS", "500")
        monkeypatch.setenv("RUNNERFORGE_DEFAULT_ALLOW_FORBIDDEN", "true")
        monkeypatch.setenv("RUNNERFORGE_METATYPE_FILE", "/tmp/custom.yaml")

        settings = Settings(_env_file=None)

        assert settings.default_build_points == 500
        assert settings.default_allow_forbidden is True
        assert settings.metatype_path == Path("/tmp/custom.yaml")

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_new_character_reads_cached_settings(self, monkeypatch):
        """Test new characters pick up environment defaults."""
        monkeypatch.setenv("RUNNERFORGE_DEFAULT_MAX_AVAILABILITY", "20")
        get_settings.cache_clear()

        assert new_character("Ghost").settings.max_availability == 20
