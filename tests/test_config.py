"""Tests for the configuration manager."""

import pytest

from config import ConfigurationManager, get_config
from racecard_extraction.utils.exceptions import ConfigurationError


class TestConfigurationManager:
    """Tests for loading and access."""

    def test_bundled_settings(self, config):
        assert config.get("parsing.lookahead_lines") == 4
        assert config.get("parsing.min_purse") == 1000
        assert config.get("input.pdf.ocr_fallback_on_sparse_text") is False
        assert "SANTA ANITA" in config.get("parsing.tracks")

    def test_singleton(self):
        assert ConfigurationManager() is ConfigurationManager()

    def test_missing_key_default(self):
        assert get_config("nope.not.here", "fallback") == "fallback"

    def test_set_creates_sections(self, config):
        config.set("new.section.value", 7)
        assert get_config("new.section.value") == 7

    def test_reload_discards_in_memory_changes(self, config):
        config.set("parsing.min_purse", 5)
        config.reload()
        assert config.get("parsing.min_purse") == 1000

    def test_custom_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("parsing:\n  lookahead_lines: 2\n", encoding="utf-8")

        config = ConfigurationManager(str(path))
        assert config.get("parsing.lookahead_lines") == 2
        assert config.get("parsing.min_purse", 1000) == 1000

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert ConfigurationManager(str(path)).get_all() == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigurationManager(str(tmp_path / "missing.yaml"))


class TestEnvironmentOverrides:
    """Tests for environment variables layered over the file."""

    def test_max_file_size(self, monkeypatch):
        monkeypatch.setenv("MAX_FILE_SIZE", "2048")
        assert get_config("input.max_file_size") == 2048

    def test_malformed_value_keeps_file_value(self, monkeypatch):
        monkeypatch.setenv("MAX_FILE_SIZE", "ten megabytes")
        assert get_config("input.max_file_size") == 10485760

    def test_cloud_credentials(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLOUD_API_KEY", "abc123")
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT_ID", "railbird-dev")

        assert get_config("ocr.cloud.api_key") == "abc123"
        assert get_config("ocr.cloud.project_id") == "railbird-dev"

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert get_config("logging.level") == "DEBUG"

    def test_empty_variable_is_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "")
        assert get_config("logging.level") == "INFO"
