"""Tests for the Upstash REST store with mocked httpx."""

import json

import httpx
import pytest
import respx

from snowtrack.storage.store import StoreError
from snowtrack.storage.upstash_store import UpstashStore

URL = "https://test-upstash.example.com/redis"
RECORD = {"date": "2026-02-14", "history": []}


@pytest.fixture
def upstash() -> UpstashStore:
    return UpstashStore(url=URL + "/", token="secret")


def _command(request: httpx.Request) -> list[str]:
    return json.loads(request.content)


class TestConstruction:
    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("UPSTASH_REDIS_REST_URL", URL)
        monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "from-env")
        store = UpstashStore()
        assert store.url == URL
        assert store.token == "from-env"

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("UPSTASH_REDIS_REST_URL", raising=False)
        monkeypatch.delenv("UPSTASH_REDIS_REST_TOKEN", raising=False)
        with pytest.raises(ValueError):
            UpstashStore()


class TestCommands:
    @respx.mock
    def test_get(self, upstash: UpstashStore):
        route = respx.post(URL).mock(
            return_value=httpx.Response(200, json={"result": json.dumps(RECORD)})
        )

        assert upstash.get("forecast:2026-02-14") == RECORD
        request = route.calls[0].request
        assert _command(request) == ["GET", "forecast:2026-02-14"]
        assert request.headers["authorization"] == "Bearer secret"

    @respx.mock
    def test_get_missing(self, upstash: UpstashStore):
        respx.post(URL).mock(return_value=httpx.Response(200, json={"result": None}))
        assert upstash.get("forecast:2026-02-14") is None

    @respx.mock
    def test_set(self, upstash: UpstashStore):
        route = respx.post(URL).mock(return_value=httpx.Response(200, json={"result": "OK"}))

        upstash.set("forecast:2026-02-14", RECORD)
        cmd = _command(route.calls[0].request)
        assert cmd[:2] == ["SET", "forecast:2026-02-14"]
        assert json.loads(cmd[2]) == RECORD

    @respx.mock
    def test_prefix_scan(self, upstash: UpstashStore):
        def handler(request: httpx.Request) -> httpx.Response:
            cmd = _command(request)
            if cmd[0] == "KEYS":
                assert cmd[1] == "forecast:*"
                return httpx.Response(
                    200, json={"result": ["forecast:2026-02-15", "forecast:2026-02-14"]}
                )
            assert cmd == ["MGET", "forecast:2026-02-14", "forecast:2026-02-15"]
            return httpx.Response(200, json={"result": [json.dumps(RECORD), "not json"]})

        respx.post(URL).mock(side_effect=handler)

        assert upstash.get_all_by_prefix("forecast:") == {
            "forecast:2026-02-14": RECORD,
            "forecast:2026-02-15": None,
        }

    @respx.mock
    def test_prefix_glob_chars_escaped(self, upstash: UpstashStore):
        route = respx.post(URL).mock(return_value=httpx.Response(200, json={"result": []}))
        assert upstash.get_all_by_prefix("f*x:") == {}
        assert _command(route.calls[0].request) == ["KEYS", "f\\*x:*"]

    @respx.mock
    def test_error_body_raises(self, upstash: UpstashStore):
        respx.post(URL).mock(
            return_value=httpx.Response(200, json={"error": "WRONGPASS invalid password"})
        )
        with pytest.raises(StoreError):
            upstash.get("forecast:2026-02-14")

    @respx.mock
    def test_http_error_raises(self, upstash: UpstashStore):
        respx.post(URL).mock(return_value=httpx.Response(500))
        with pytest.raises(StoreError):
            upstash.set("forecast:2026-02-14", RECORD)

    @respx.mock
    def test_connect_error_raises(self, upstash: UpstashStore):
        respx.post(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(StoreError):
            upstash.get("forecast:2026-02-14")
