"""
Tests for configuration loading and migration settings.
"""

import pytest

from constants import MigrationDefaults
from core.config import MigrationSettings, load_config, logging_settings
from core.errors import ConfigError
from fixtures import INVALID_CONFIGS


@pytest.mark.unit
class TestLoadConfig:

    def test_loads_json_object(self, config_file, sample_config):
        assert load_config(config_file) == sample_config

    def test_empty_path(self):
        with pytest.raises(ConfigError):
            load_config("")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "missing.json"))

    def test_invalid_json_reports_position(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{\n  "fedora": }', encoding="utf-8")
        with pytest.raises(ConfigError, match="line 2"):
            load_config(str(path))

    def test_non_object_root(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="JSON object"):
            load_config(str(path))


@pytest.mark.unit
class TestMigrationSettings:

    def test_from_dict(self, sample_config):
        settings = MigrationSettings.from_dict(sample_config)
        assert settings.source_dir == "export"
        assert settings.root_path == "/migrated"
        assert settings.import_external is False
        assert settings.import_redirect is True
        assert settings.limit == 25

    def test_defaults(self):
        settings = MigrationSettings.from_dict({})
        assert settings.source_dir is None
        assert settings.root_path == ""
        assert settings.limit == MigrationDefaults.NO_LIMIT
        assert not settings.import_external and not settings.import_redirect

    @pytest.mark.parametrize("name", ["bad_limit", "bool_limit", "bad_flag", "bad_section"])
    def test_invalid(self, name):
        with pytest.raises(ConfigError):
            MigrationSettings.from_dict(INVALID_CONFIGS[name])

    def test_logging_settings(self, sample_config):
        assert logging_settings(sample_config) == {"level": "DEBUG", "file": "logs/test.log"}
        assert logging_settings({}) == {"level": "INFO", "file": None}
