"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class StorageBackend(StrEnum):
    LOCAL_JSON = "local-json"
    SQLITE = "sqlite"
    UPSTASH = "upstash"


class ResortConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    slug: str
    timezone: str
    snow_report_url: str

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown IANA timezone: {value}") from e
        return value


class HistoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    key_prefix: str = "forecast:"
    max_entries: int = Field(default=30, ge=1)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    backend: StorageBackend = StorageBackend.LOCAL_JSON
    json_path: str = "data/forecast-history.json"
    sqlite_path: str = "data/snowtrack.db"
    upstash_url: str = ""    # falls back to UPSTASH_REDIS_REST_URL
    upstash_token: str = ""  # falls back to UPSTASH_REDIS_REST_TOKEN


class FetchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    user_agent: str = "Mozilla/5.0 (compatible; snowtrack/0.1.0)"
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay_seconds: float = Field(default=5.0, ge=0.0)
    cache_ttl_seconds: int = Field(default=300, ge=0)
    cache_key: str = "snow-report:cache"


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    interval_seconds: int = Field(default=1200, ge=1)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    resort: ResortConfig
    history: HistoryConfig = HistoryConfig()
    storage: StorageConfig = StorageConfig()
    fetch: FetchConfig = FetchConfig()
    ops: OpsConfig = OpsConfig()
