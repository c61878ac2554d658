"""Tests for the Perplexity HTTP client."""
import asyncio

import httpx
import pytest

from config import settings
from llm import (
    ConfigurationError,
    EmptyCompletionError,
    Message,
    PerplexityClient,
    UpstreamSchemaError,
    get_client,
)
from tests.conftest import ScriptedTransport, completion_body, make_perplexity_client


class TestPerplexityClient:
    """Test suite for PerplexityClient."""

    def test_payload_fields(self):
        transport = ScriptedTransport(httpx.Response(200, json=completion_body("answer")))
        client = make_perplexity_client(transport)

        asyncio.run(client.chat(
            [Message(role="user", content="What changed?")],
            system="You are an analyst.",
            max_tokens=2000,
            temperature=0.3,
            model="sonar-pro",
            search_recency_filter="day",
        ))

        payload = transport.payloads[0]
        assert payload["model"] == "sonar-pro"
        assert payload["messages"] == [
            {"role": "system", "content": "You are an analyst."},
            {"role": "user", "content": "What changed?"},
        ]
        assert payload["temperature"] == 0.3
        assert payload["max_tokens"] == 2000
        assert payload["search_recency_filter"] == "day"
        assert payload["return_citations"] is True

        request = transport.requests[0]
        assert request.headers["Authorization"] == "Bearer test-key"
        assert str(request.url) == PerplexityClient.API_URL

    def test_recency_filter_omitted_by_default(self):
        transport = ScriptedTransport(httpx.Response(200, json=completion_body("answer")))
        client = make_perplexity_client(transport)

        asyncio.run(client.generate("q"))

        payload = transport.payloads[0]
        assert "search_recency_filter" not in payload
        assert payload["model"] == "sonar"

    def test_parses_content_citations_and_usage(self):
        body = completion_body("## SIGNALS\n- A", citations=["https://a.com/1", "https://b.com/2"])
        client = make_perplexity_client(ScriptedTransport(httpx.Response(200, json=body)))

        response = asyncio.run(client.generate("q"))

        assert response.content == "## SIGNALS\n- A"
        assert response.citations == ["https://a.com/1", "https://b.com/2"]
        assert response.usage == {"input_tokens": 12, "output_tokens": 34}
        assert response.total_tokens == 46
        assert response.finish_reason == "stop"

    def test_missing_citations_become_empty_list(self):
        body = completion_body("text")
        body["citations"] = "not-a-list"
        client = make_perplexity_client(ScriptedTransport(httpx.Response(200, json=body)))

        assert asyncio.run(client.generate("q")).citations == []

    def test_missing_choices_is_schema_error(self, recording_sleep):
        transport = ScriptedTransport(httpx.Response(200, json={"choices": []}))
        client = make_perplexity_client(transport, sleep=recording_sleep)

        with pytest.raises(UpstreamSchemaError, match="missing choices"):
            asyncio.run(client.generate("q"))
        assert len(transport.requests) == 1
        assert recording_sleep.delays == []

    def test_empty_content_is_error(self):
        client = make_perplexity_client(ScriptedTransport(httpx.Response(200, json=completion_body("   "))))

        with pytest.raises(EmptyCompletionError):
            asyncio.run(client.generate("q"))

    def test_non_json_body_is_schema_error(self):
        client = make_perplexity_client(ScriptedTransport(httpx.Response(200, text="<html>oops</html>")))

        with pytest.raises(UpstreamSchemaError, match="not JSON"):
            asyncio.run(client.generate("q"))


class TestGetClient:
    """Test suite for the client factory."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "PPLX_API_KEY", "")
        with pytest.raises(ConfigurationError, match="PPLX_API_KEY"):
            get_client()

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown LLM provider"):
            get_client(provider="nope", api_key="k")

    def test_builds_perplexity_client_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "PPLX_API_KEY", "secret")
        client = get_client()

        assert isinstance(client, PerplexityClient)
        assert client.model == settings.PPLX_MODEL_FAST
        assert client.retry_policy.max_attempts == settings.PPLX_MAX_RETRIES
        asyncio.run(client.aclose())
