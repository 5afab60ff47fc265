import asyncio

import pytest
from fastapi.testclient import TestClient

from chat_proxy.api.main import create_app, run_until_disconnect
from chat_proxy.models import HttpResult


@pytest.fixture
def client(settings, provider):
    with TestClient(create_app(settings=settings, provider=provider)) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_chat_round_trip(client, provider):
    response = client.post(
        "/api/chat",
        json={"message": "Do you offer enterprise compliance reporting?", "history": [{"sender": "user", "text": "hi"}]},
    )
    assert response.status_code == 200
    assert response.json() == {"reply": "Happy to help!", "model": "test/complex", "complexity": "complex"}
    assert [item.role for item in provider.last_request.messages] == ["system", "user", "user"]


@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_chat_rejects_other_methods(client, provider, method):
    response = client.request(method.upper(), "/api/chat")
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert not provider.requests


def test_chat_invalid_message(client):
    response = client.post("/api/chat", json={"history": []})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid message"}


def test_chat_malformed_json_is_generic_error(client):
    response = client.post("/api/chat", content=b"{broken", headers={"Content-Type": "application/json"})
    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong. Please try again."}


def test_missing_key_reported_per_request(unconfigured_settings, provider):
    with TestClient(create_app(settings=unconfigured_settings, provider=provider)) as test_client:
        response = test_client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "API key not configured"}
    assert not provider.requests


def test_upstream_failure_hides_details(settings, failing_provider):
    with TestClient(create_app(settings=settings, provider=failing_provider)) as test_client:
        response = test_client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong. Please try again."}
    assert "upstream exploded" not in response.text


class _FakeRequest:
    def __init__(self, disconnected: bool) -> None:
        self.disconnected = disconnected

    async def is_disconnected(self) -> bool:
        return self.disconnected


@pytest.mark.asyncio
async def test_disconnect_cancels_in_flight_work():
    cancelled = asyncio.Event()

    async def slow_work() -> HttpResult:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return HttpResult(status_code=200)

    result = await run_until_disconnect(_FakeRequest(disconnected=True), slow_work(), poll_interval=0.01)
    assert result is None
    assert cancelled.is_set()


@pytest.mark.asyncio
async def test_connected_request_returns_work_result():
    async def quick_work() -> HttpResult:
        return HttpResult(status_code=200, body={"reply": "ok"})

    result = await run_until_disconnect(_FakeRequest(disconnected=False), quick_work(), poll_interval=0.01)
    assert result == HttpResult(status_code=200, body={"reply": "ok"})
