"""Tests for config schema validation."""

import pytest
from pydantic import ValidationError

from snowtrack.config.defaults import DEFAULT_RESORT
from snowtrack.config.schema import (
    AppConfig,
    FetchConfig,
    HistoryConfig,
    ResortConfig,
    StorageBackend,
    StorageConfig,
)


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig(resort=DEFAULT_RESORT)
        assert config.history.max_entries == 30
        assert config.storage.backend == StorageBackend.LOCAL_JSON
        assert config.ops.interval_seconds == 1200

    def test_resort_required(self):
        with pytest.raises(ValidationError):
            AppConfig()

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            AppConfig(resort=DEFAULT_RESORT, unknown_field="bad")

    def test_nested_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            HistoryConfig(max_entries=10, bogus=True)


class TestHistoryConfig:
    def test_cap_at_least_one(self):
        with pytest.raises(ValidationError):
            HistoryConfig(max_entries=0)


class TestStorageConfig:
    def test_backend_from_string(self):
        assert StorageConfig(backend="sqlite").backend == StorageBackend.SQLITE

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            StorageConfig(backend="postgres")


class TestFetchConfig:
    def test_defaults(self):
        config = FetchConfig()
        assert config.cache_ttl_seconds == 300
        assert config.cache_key == "snow-report:cache"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            FetchConfig(timeout_seconds=0.0)

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValidationError):
            FetchConfig(cache_ttl_seconds=-1)


class TestResortConfig:
    def test_valid(self):
        resort = ResortConfig(
            name="Test Hill",
            slug="test",
            timezone="America/Edmonton",
            snow_report_url="https://test-hill.example.com/report",
        )
        assert resort.timezone == "America/Edmonton"

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError, match="Unknown IANA timezone"):
            ResortConfig(
                name="Test Hill",
                slug="test",
                timezone="Mars/Olympus_Mons",
                snow_report_url="https://test-hill.example.com/report",
            )

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            ResortConfig(**DEFAULT_RESORT.model_dump(), vertical_m=1713)
