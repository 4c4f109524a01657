"""
Tests for the PurrPal API.
"""

import json

import pytest
from fastapi.testclient import TestClient

from purrpal.api.app import create_app
from purrpal.errors import ProviderError
from purrpal.services import PurrPalChatbot


@pytest.fixture
def make_client(settings, fake_provider):
    """Build a test client whose chatbot uses the fake provider."""

    def factory(settings=settings):
        app = create_app(lambda: PurrPalChatbot(settings=settings, provider=fake_provider))
        return TestClient(app)

    return factory


@pytest.fixture
def client(make_client):
    """Create a test client with the lifespan running."""
    with make_client() as client:
        yield client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "PurrPal API"
    assert "chat" in data["endpoints"]


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["model"] == "fake-model"


def test_chat(client):
    """Test chat endpoint with a normal question."""
    response = client.post(
        "/chat",
        json={"message": "Bagaimana cara merawat kucing yang sedang hamil?", "session_id": "s1"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["urgency_level"] == "normal"
    assert data["cached"] is False
    assert data["session_id"] == "s1"
    assert "recommendations" not in data


def test_chat_cached(client):
    """Test that a repeated question is served from the cache."""
    client.post("/chat", json={"message": "Kucing saya bersin terus"})
    response = client.post("/chat", json={"message": "Kucing saya bersin terus"})
    assert response.json()["cached"] is True


def test_chat_emergency(client):
    """Test that emergencies carry recommendations."""
    response = client.post("/chat", json={"message": "Kucing saya tidak bernapas!"})
    assert response.status_code == 200
    data = response.json()
    assert data["urgency_level"] == "emergency"
    assert len(data["recommendations"]) == 3


def test_chat_invalid_message(client):
    """Test that short messages are rejected with a failure envelope."""
    response = client.post("/chat", json={"message": "Hi"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error_code"] == "VALIDATION_FAILED"
    assert data["errors"] == ["input too short"]
    assert data["error_id"]


def test_chat_rate_limited(make_client, make_settings):
    """Test that exhausted quota returns 429."""
    with make_client(make_settings(rate_limit_requests=1)) as client:
        client.post("/chat", json={"message": "Kucing saya bersin terus", "session_id": "s1"})
        response = client.post("/chat", json={"message": "Kucing saya batuk", "session_id": "s1"})

    assert response.status_code == 429
    data = response.json()
    assert data["error_code"] == "RATE_LIMITED"
    assert data["reset_time"] > 0


def test_chat_stream(client):
    """Test streaming endpoint (newline-delimited JSON)."""
    response = client.post("/chat/stream", json={"message": "Kucing saya bersin terus"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")

    lines = [json.loads(line) for line in response.text.splitlines() if line]
    chunks = [line for line in lines if line["type"] == "chunk"]
    final = lines[-1]

    assert [c["index"] for c in chunks] == [1, 2, 3]
    assert final["type"] == "final"
    assert final["response"]["success"] is True
    assert final["response"]["streaming"] is True
    assert final["response"]["message"] == "Halo dari PurrPal"


def test_chat_stream_failure(client):
    """Test that a rejected streaming request still ends with a final line."""
    response = client.post("/chat/stream", json={"message": "Hi"})
    lines = [json.loads(line) for line in response.text.splitlines() if line]

    assert len(lines) == 1
    assert lines[0]["response"]["error_code"] == "VALIDATION_FAILED"


def test_metrics(client):
    """Test metrics endpoint."""
    client.post("/chat", json={"message": "Kucing saya bersin terus"})
    client.post("/chat", json={"message": "Hi"})

    data = client.get("/metrics").json()
    assert data["total_requests"] == 2
    assert data["successful_requests"] == 1
    assert data["failed_requests"] == 1
    assert data["cache_size"] == 1
    assert data["initialized"] is True


def test_reset_metrics(client):
    """Test metrics reset endpoint."""
    client.post("/chat", json={"message": "Kucing saya bersin terus"})
    assert client.post("/metrics/reset").status_code == 200
    assert client.get("/metrics").json()["total_requests"] == 0


def test_conversation_endpoints(client):
    """Test reading and clearing a session's last turn."""
    client.post("/chat", json={"message": "Kucing saya bersin terus", "session_id": "s1"})

    response = client.get("/conversations/s1")
    assert response.status_code == 200
    data = response.json()
    assert data["last_message"] == "Kucing saya bersin terus"
    assert data["urgency_level"] == "normal"

    assert client.delete("/conversations/s1").status_code == 200
    assert client.get("/conversations/s1").status_code == 404


def test_unknown_conversation(client):
    """Test that unknown sessions return 404."""
    assert client.get("/conversations/unknown").status_code == 404


def test_clear_cache(client):
    """Test cache clear endpoint."""
    client.post("/chat", json={"message": "Kucing saya bersin terus"})
    assert client.delete("/cache").json()["success"] is True
    assert client.get("/metrics").json()["cache_size"] == 0


def test_degraded_when_initialization_fails(make_client, fake_provider):
    """Test that the app still serves when the model is unreachable at startup."""
    fake_provider.error = ProviderError("unreachable", category="connection")

    with make_client() as client:
        health = client.get("/health")
        chat = client.post("/chat", json={"message": "Kucing saya bersin terus"})

    assert health.status_code == 503
    assert health.json()["status"] == "not_initialized"
    assert chat.status_code == 503
    assert chat.json()["error_code"] == "NOT_INITIALIZED"
