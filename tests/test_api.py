"""Tests for the task platform API client."""

import pytest
from curl_cffi.requests import errors

from daily_task_bot.clients import api as api_module
from daily_task_bot.clients.api import TaskApiClient
from daily_task_bot.config.constants import ApiPath
from daily_task_bot.core.errors import TransientRemoteFailure


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    """Stands in for curl_cffi AsyncSession and records requests."""

    requests: list[dict] = []
    response: FakeResponse | Exception = FakeResponse(payload={"data": {}})

    def __init__(self, **kwargs):
        self.kwargs = kwargs

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def request(self, method, url, **kwargs):
        FakeSession.requests.append({"method": method, "url": url, **kwargs})
        if isinstance(FakeSession.response, Exception):
            raise FakeSession.response
        return FakeSession.response


@pytest.fixture()
def client(settings_env, monkeypatch):
    FakeSession.requests = []
    monkeypatch.setattr(api_module, "AsyncSession", FakeSession)
    return TaskApiClient(base_url="https://api.example.test/")


def respond(status_code=200, payload=None, text=""):
    FakeSession.response = FakeResponse(status_code, payload, text)


@pytest.mark.asyncio
async def test_get_nonce_extracts_data(client):
    respond(payload={"data": {"nonce": "abc"}})

    assert await client.get_nonce("0x1") == "abc"
    sent = FakeSession.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == f"https://api.example.test{ApiPath.NONCE}"
    assert sent["params"] == {"address": "0x1"}


@pytest.mark.asyncio
async def test_get_nonce_without_data_is_none(client):
    respond(payload={"message": "no"})

    assert await client.get_nonce("0x1") is None


@pytest.mark.asyncio
async def test_authenticated_calls_send_bearer_token(client):
    respond(payload={"data": {"id": 7}})

    assert await client.create_agent("tok", "Name", "Desc") == {"id": 7}
    sent = FakeSession.requests[0]
    assert sent["headers"]["Authorization"] == "Bearer tok"
    assert sent["json"] == {"name": "Name", "description": "Desc"}


@pytest.mark.asyncio
async def test_http_error_is_transient(client):
    respond(status_code=502, payload={})

    with pytest.raises(TransientRemoteFailure):
        await client.verify_daily_task("tok", "0x1")


@pytest.mark.asyncio
async def test_non_json_body_is_transient(client):
    respond(text="<html>")

    with pytest.raises(TransientRemoteFailure):
        await client.get_user_data("tok")


@pytest.mark.asyncio
async def test_network_error_is_transient(client):
    FakeSession.response = errors.RequestsError("connection reset")

    with pytest.raises(TransientRemoteFailure):
        await client.create_request("tok", "T", "D")
