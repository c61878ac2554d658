"""Tests for the HTTP API."""
import asyncio

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_briefings_cache, get_service, get_trending_cache
from api.main import app
from api.routes import (
    BRIEFINGS_FETCH_FAILURE_MESSAGE,
    CHAT_SIMPLE_FAILURE_MESSAGE,
    CONFIGURATION_ERROR_MESSAGE,
    EMPTY_QUERY_MESSAGE,
    INTEL_FAILURE_MESSAGE,
    INVALID_QUERY_MESSAGE,
)
from config import settings
from llm import ConfigurationError, RetryExhaustedError, UpstreamServerError
from processor import IntelligenceService
from utils.cache import InMemoryTTLCache
from tests.conftest import FakeLLMClient, TIKTOK_COMPLETION
from tests.test_briefings import BRIEFINGS_COMPLETION
from tests.test_trending import TOPICS_COMPLETION


class SlowClient(FakeLLMClient):
    async def chat(self, *args, **kwargs):
        await asyncio.sleep(1)
        return await super().chat(*args, **kwargs)


@pytest.fixture
def fake_client():
    return FakeLLMClient(TIKTOK_COMPLETION, citations=["https://reuters.com/y"])


@pytest.fixture
def caches():
    return {
        "briefings": InMemoryTTLCache(ttl=settings.cache_ttl_seconds, name="briefings"),
        "trending": InMemoryTTLCache(ttl=settings.cache_ttl_seconds, name="trending"),
    }


@pytest.fixture
def client(fake_client, caches, fixed_today):
    app.dependency_overrides[get_service] = lambda: IntelligenceService(
        client_factory=lambda: fake_client, today=fixed_today
    )
    app.dependency_overrides[get_briefings_cache] = lambda: caches["briefings"]
    app.dependency_overrides[get_trending_cache] = lambda: caches["trending"]
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"


class TestChatIntel:
    """Test suite for POST /chat-intel."""

    def test_returns_brief(self, client):
        response = client.post("/chat-intel", json={"query": "TikTok Shop?", "audience": "CMO"})

        assert response.status_code == 200
        data = response.json()
        assert data["signals"][0]["title"] == "TikTok Shop Surge"
        assert data["signals"][0]["sourceUrl"] == "https://bloomberg.com/x"
        assert data["implications"] == ["Brands must adjust budget"]
        assert data["actions"] == ["Test TikTok Shop with 5 SKUs"]
        assert data["citations"] == ["https://reuters.com/y"]
        assert data["graphData"]["metrics"][0]["value"] == 340

    @pytest.mark.parametrize("body, message", [
        ({}, INVALID_QUERY_MESSAGE),
        ({"query": 123}, INVALID_QUERY_MESSAGE),
        ({"query": ["a"]}, INVALID_QUERY_MESSAGE),
        ({"query": ""}, EMPTY_QUERY_MESSAGE),
        ({"query": "   "}, EMPTY_QUERY_MESSAGE),
    ])
    def test_invalid_queries(self, client, fake_client, body, message):
        response = client.post("/chat-intel", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert fake_client.calls == []

    def test_missing_body(self, client):
        response = client.post("/chat-intel")
        assert response.status_code == 400
        assert response.json() == {"error": INVALID_QUERY_MESSAGE}

    def test_missing_api_key(self, client):
        def factory():
            raise ConfigurationError("PPLX_API_KEY not set in environment")

        app.dependency_overrides[get_service] = lambda: IntelligenceService(client_factory=factory)
        response = client.post("/chat-intel", json={"query": "q"})

        assert response.status_code == 500
        assert response.json() == {"error": CONFIGURATION_ERROR_MESSAGE}

    def test_upstream_failure(self, client, fake_client):
        fake_client.error = RetryExhaustedError(
            "Failed Perplexity request after 3 attempts: Perplexity API error (503): unavailable",
            attempts=3,
            last_error=UpstreamServerError("Perplexity API error (503): unavailable", 503),
        )
        response = client.post("/chat-intel", json={"query": "q"})

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == INTEL_FAILURE_MESSAGE
        assert "3 attempts" in data["details"]

    def test_request_deadline(self, client, monkeypatch, fixed_today):
        slow = SlowClient(TIKTOK_COMPLETION)
        app.dependency_overrides[get_service] = lambda: IntelligenceService(
            client_factory=lambda: slow, today=fixed_today
        )
        monkeypatch.setattr(settings, "REQUEST_DEADLINE_SECONDS", 0.01)

        response = client.post("/chat-intel", json={"query": "q"})

        assert response.status_code == 500
        assert response.json()["details"] == "Request timeout after 0.01s: chat-intel"


class TestBriefings:
    """Test suite for the briefings endpoints."""

    def test_cache_miss_then_hit(self, client, fake_client, caches):
        fake_client.content = BRIEFINGS_COMPLETION

        first = client.get("/briefings/latest", params={"audience": "CMO"})
        second = client.get("/briefings/latest", params={"audience": "CMO", "limit": 1})

        assert first.status_code == 200
        assert first.json()["cached"] is False
        assert len(first.json()["briefings"]) == 2
        assert first.json()["briefings"][0]["date"] == "19.10.2026"

        assert second.json()["cached"] is True
        assert second.json()["generatedAt"] == first.json()["generatedAt"]
        assert len(second.json()["briefings"]) == 1
        assert len(fake_client.calls) == 1
        assert "CMO" in caches["briefings"]

    def test_audiences_cached_separately(self, client, fake_client, caches):
        fake_client.content = BRIEFINGS_COMPLETION

        client.get("/briefings/latest", params={"audience": "CMO"})
        client.get("/briefings/latest", params={"audience": "Chief Revenue Officer"})

        assert len(fake_client.calls) == 2
        assert "Chief Revenue Officer" in caches["briefings"]

    def test_generate_overwrites_cache(self, client, fake_client, caches):
        fake_client.content = "nothing parseable"
        client.get("/briefings/latest")

        fake_client.content = BRIEFINGS_COMPLETION
        generated = client.post("/briefings/generate", json={"audience": "CMO"})
        latest = client.get("/briefings/latest")

        assert generated.status_code == 200
        assert generated.json()["cached"] is False
        assert generated.json()["briefings"][0]["theme"] == "AI Strategy"
        assert latest.json()["cached"] is True
        assert latest.json()["briefings"][0]["title"] == "62% of CMOs shift budget to AI agents"

    def test_generate_without_body(self, client, fake_client):
        fake_client.content = BRIEFINGS_COMPLETION
        response = client.post("/briefings/generate")

        assert response.status_code == 200
        assert len(response.json()["briefings"]) == 2

    def test_invalid_limit(self, client):
        response = client.get("/briefings/latest", params={"limit": "abc"})

        assert response.status_code == 400
        assert "limit" in response.json()["error"]

    def test_upstream_failure_is_not_cached(self, client, fake_client, caches):
        fake_client.error = UpstreamServerError("Perplexity API error (500): boom", 500)
        response = client.get("/briefings/latest")

        assert response.status_code == 500
        assert response.json()["error"] == BRIEFINGS_FETCH_FAILURE_MESSAGE
        assert len(caches["briefings"]) == 0


class TestTrending:

    def test_topics_cached(self, client, fake_client):
        fake_client.content = TOPICS_COMPLETION

        first = client.get("/trending/topics", params={"limit": 2})
        second = client.get("/trending/topics", params={"limit": 2})

        assert first.json()["cached"] is False
        assert first.json()["topics"][0] == {
            "label": "AI Strategy",
            "trending": True,
            "sampleQuery": "How are CMOs budgeting for AI agents in 2026?",
        }
        assert second.json()["cached"] is True
        assert len(fake_client.calls) == 1


class TestChatSimple:

    def test_answer(self, client, fake_client):
        fake_client.content = "Short answer."
        response = client.post("/chat-simple", json={"query": "Follow up?"})

        assert response.status_code == 200
        assert response.json() == {"response": "Short answer.", "citations": ["https://reuters.com/y"]}

    def test_empty_query(self, client):
        response = client.post("/chat-simple", json={"query": " "})
        assert response.status_code == 400
        assert response.json() == {"error": EMPTY_QUERY_MESSAGE}

    def test_failure(self, client, fake_client):
        fake_client.error = UpstreamServerError("boom", 500)
        response = client.post("/chat-simple", json={"query": "q"})

        assert response.status_code == 500
        assert response.json() == {"error": CHAT_SIMPLE_FAILURE_MESSAGE, "details": "boom"}
