"""Upstash Redis store over its REST API."""

import json
import logging
import os
from typing import Any

import httpx

from snowtrack.storage.store import StoreError

logger = logging.getLogger(__name__)

URL_ENV = "UPSTASH_REDIS_REST_URL"
TOKEN_ENV = "UPSTASH_REDIS_REST_TOKEN"
MGET_BATCH = 100


class UpstashStore:
    """Each record is kept as a JSON string value under its key."""

    def __init__(self, url: str = "", token: str = "", timeout: float = 10.0):
        self.url = (url or os.environ.get(URL_ENV, "")).rstrip("/")
        self.token = token or os.environ.get(TOKEN_ENV, "")
        self.timeout = timeout
        if not self.url or not self.token:
            raise ValueError(
                f"Upstash store needs a URL and token (config or {URL_ENV}/{TOKEN_ENV})"
            )

    def get(self, key: str) -> dict[str, Any] | None:
        return _decode(self._command("GET", key))

    def set(self, key: str, record: dict[str, Any]) -> None:
        self._command("SET", key, json.dumps(record))

    def get_all_by_prefix(self, prefix: str) -> dict[str, Any]:
        keys = sorted(self._command("KEYS", _escape_glob(prefix) + "*") or [])
        results: dict[str, Any] = {}
        for start in range(0, len(keys), MGET_BATCH):
            batch = keys[start : start + MGET_BATCH]
            values = self._command("MGET", *batch) or []
            for key, value in zip(batch, values):
                results[key] = _decode(value)
        return results

    def _command(self, *args: str) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            resp = httpx.post(self.url, json=list(args), headers=headers, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StoreError(f"Upstash {args[0]} failed: {e}") from e
        if "error" in body:
            raise StoreError(f"Upstash {args[0]} failed: {body['error']}")
        return body.get("result")


def _decode(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Skipping non-JSON value %.40r", value)
            return None
    return value


def _escape_glob(text: str) -> str:
    for ch in "\\*?[]":
        text = text.replace(ch, "\\" + ch)
    return text
