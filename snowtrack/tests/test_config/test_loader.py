"""Tests for config loading, saving, and get/set."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from snowtrack.config.defaults import DEFAULT_RESORT
from snowtrack.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from snowtrack.config.schema import AppConfig, StorageBackend


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.history.max_entries == 20
        assert config.fetch.cache_ttl_seconds == 0
        assert config.storage.backend == StorageBackend.LOCAL_JSON

    def test_default_resort_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.resort == DEFAULT_RESORT
        assert config.resort.timezone == "America/Vancouver"

    def test_explicit_resort_not_overridden(self, tmp_path: Path):
        data = {
            "resort": {
                "name": "Test Hill",
                "slug": "test",
                "timezone": "America/Denver",
                "snow_report_url": "https://test-hill.example.com/report",
            }
        }
        path = tmp_path / "custom.yaml"
        with open(path, "w") as f:
            yaml.dump(data, f)
        config = load_config(path)
        assert config.resort.slug == "test"
        assert config.resort.timezone == "America/Denver"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.history.max_entries == 30
        assert config.history.key_prefix == "forecast:"

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "nope.yaml")
        assert config.resort == DEFAULT_RESORT

    def test_invalid_yaml_value_raises(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("history:\n  max_entries: 0\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestSaveConfig:
    def test_round_trips(self, default_config: AppConfig, tmp_path: Path):
        path = tmp_path / "out" / "snowtrack.yaml"
        changed = set_config_value(default_config, "ops.interval_seconds", "600")
        save_config(changed, path)
        assert load_config(path) == changed

    def test_enum_written_as_plain_string(self, default_config: AppConfig, tmp_path: Path):
        path = tmp_path / "snowtrack.yaml"
        save_config(default_config, path)
        assert yaml.safe_load(path.read_text())["storage"]["backend"] == "local-json"


class TestGetConfigValue:
    def test_dotted_key(self, default_config: AppConfig):
        assert get_config_value(default_config, "history.max_entries") == 30

    def test_top_level(self, default_config: AppConfig):
        val = get_config_value(default_config, "fetch")
        assert val.cache_ttl_seconds == 300

    def test_invalid_key(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            get_config_value(default_config, "nonexistent.key")


class TestSetConfigValue:
    def test_set_and_revalidate(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "history.key_prefix", "revy:")
        assert new_config.history.key_prefix == "revy:"
        assert default_config.history.key_prefix == "forecast:"

    def test_set_string_coercion(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "history.max_entries", "12")
        assert new_config.history.max_entries == 12

    def test_float_coercion(self, default_config: AppConfig):
        new_config = set_config_value(default_config, "fetch.timeout_seconds", "2.5")
        assert new_config.fetch.timeout_seconds == 2.5

    def test_unknown_key_raises(self, default_config: AppConfig):
        with pytest.raises(KeyError):
            set_config_value(default_config, "history.bogus", "1")

    def test_invalid_value_raises(self, default_config: AppConfig):
        with pytest.raises(ValidationError):
            set_config_value(default_config, "history.max_entries", "0")
