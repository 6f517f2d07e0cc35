"""Builds the configured store backend."""

import logging

from snowtrack.config.schema import StorageBackend, StorageConfig
from snowtrack.storage.json_file_store import JsonFileStore
from snowtrack.storage.sqlite_store import SqliteStore
from snowtrack.storage.store import ForecastStore
from snowtrack.storage.upstash_store import UpstashStore

logger = logging.getLogger(__name__)


def build_store(config: StorageConfig) -> ForecastStore:
    logger.info("Using %s forecast store", config.backend.value)
    if config.backend == StorageBackend.SQLITE:
        return SqliteStore(config.sqlite_path)
    if config.backend == StorageBackend.UPSTASH:
        return UpstashStore(config.upstash_url, config.upstash_token)
    return JsonFileStore(config.json_path)
