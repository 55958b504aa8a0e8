"""Tests for the Cloudflare purge client."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from cdnheaders.exceptions import AuthError, ConnectionError_, InvalidUsageError, PurgeError
from cdnheaders.models import CloudflareConfig
from cdnheaders.purge import CloudflarePurgeClient, PurgeResult


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _recording_transport(
    status_code: int = 200,
    body: Any = None,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport answering every request with *body*, recording requests."""
    if body is None:
        body = {"success": True, "errors": [], "result": {"id": "purge-1"}}

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


def _client(transport: httpx.BaseTransport) -> CloudflarePurgeClient:
    return CloudflarePurgeClient("zone-1", "secret", transport=transport)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    @pytest.mark.parametrize("zone,token", [(None, "t"), ("z", None), ("", "")])
    def test_missing_credentials(self, zone, token) -> None:
        with pytest.raises(InvalidUsageError, match="zone ID and API token"):
            CloudflarePurgeClient(zone, token)

    def test_from_config_explicit_wins(self) -> None:
        config = CloudflareConfig(zone_id="cfg-zone", api_token="cfg-token")
        calls: list[httpx.Request] = []
        client = CloudflarePurgeClient.from_config(
            config, zone_id="cli-zone", transport=_recording_transport(calls=calls)
        )
        with client:
            client.purge(purge_everything=True)
        assert calls[0].url.path.endswith("/zones/cli-zone/purge_cache")
        assert calls[0].headers["Authorization"] == "Bearer cfg-token"

    def test_requires_context_manager(self) -> None:
        client = _client(_recording_transport())
        with pytest.raises(RuntimeError):
            client.purge(purge_everything=True)

    def test_context_manager_closes(self) -> None:
        client = _client(_recording_transport())
        with client:
            assert client._client is not None
        assert client._client is None


# ---------------------------------------------------------------------------
# Successful purges
# ---------------------------------------------------------------------------


class TestPurge:
    def test_urls(self) -> None:
        calls: list[httpx.Request] = []
        with _client(_recording_transport(calls=calls)) as client:
            result = client.purge(urls=["https://example.com/a", "https://example.com/b"])

        assert result == PurgeResult(
            purge_everything=False,
            urls=["https://example.com/a", "https://example.com/b"],
            purge_id="purge-1",
        )
        request = calls[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.cloudflare.com/client/v4/zones/zone-1/purge_cache"
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content) == {
            "files": ["https://example.com/a", "https://example.com/b"]
        }

    def test_everything(self) -> None:
        calls: list[httpx.Request] = []
        with _client(_recording_transport(calls=calls)) as client:
            result = client.purge(urls=["https://example.com/ignored"], purge_everything=True)

        assert result.purge_everything is True
        assert result.urls == []
        assert json.loads(calls[0].content) == {"purge_everything": True}

    def test_missing_result_id(self) -> None:
        with _client(_recording_transport(body={"success": True})) as client:
            assert client.purge(urls=["https://example.com/"]).purge_id is None

    @pytest.mark.parametrize("urls", [None, [], [""]])
    def test_nothing_to_purge(self, urls) -> None:
        calls: list[httpx.Request] = []
        with _client(_recording_transport(calls=calls)) as client:
            with pytest.raises(InvalidUsageError):
                client.purge(urls=urls)
        assert calls == []


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_auth_rejected(self) -> None:
        body = {
            "success": False,
            "errors": [{"code": 10000, "message": "Authentication error"}],
        }
        with _client(_recording_transport(403, body)) as client:
            with pytest.raises(AuthError) as excinfo:
                client.purge(purge_everything=True)

        assert excinfo.value.exit_code == 3
        assert excinfo.value.errors == ["Authentication error (code 10000)"]
        assert isinstance(excinfo.value, PurgeError)

    def test_api_error_status(self) -> None:
        body = {"success": False, "errors": [{"code": 1012, "message": "Zone not found"}]}
        with _client(_recording_transport(400, body)) as client:
            with pytest.raises(PurgeError, match="HTTP 400") as excinfo:
                client.purge(purge_everything=True)
        assert excinfo.value.exit_code == 4
        assert excinfo.value.errors == ["Zone not found (code 1012)"]

    def test_success_false_with_200(self) -> None:
        body = {"success": False, "errors": [{"message": "Rate limited"}, "raw text"]}
        with _client(_recording_transport(200, body)) as client:
            with pytest.raises(PurgeError) as excinfo:
                client.purge(urls=["https://example.com/"])
        assert excinfo.value.errors == ["Rate limited", "raw text"]

    def test_non_json_error_body(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
        with _client(transport) as client:
            with pytest.raises(PurgeError) as excinfo:
                client.purge(purge_everything=True)
        assert excinfo.value.errors == []

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with _client(httpx.MockTransport(handler)) as client:
            with pytest.raises(ConnectionError_, match="Timed out"):
                client.purge(purge_everything=True)

    def test_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _client(httpx.MockTransport(handler)) as client:
            with pytest.raises(ConnectionError_) as excinfo:
                client.purge(purge_everything=True)
        assert excinfo.value.exit_code == 6
