"""Shared test fixtures for the intelligence API tests."""
import json
from datetime import date

import httpx
import pytest

from llm import LLMClient, LLMResponse, PerplexityClient, RetryPolicy


TIKTOK_COMPLETION = (
    "## SIGNALS\n"
    "- TikTok Shop Surge\n"
    "Summary: Up 340% YoY\n"
    "Source: Bloomberg | https://bloomberg.com/x\n"
    "\n"
    "## IMPLICATIONS\n"
    "- Brands must adjust budget\n"
    "\n"
    "## ACTIONS\n"
    "- Test TikTok Shop with 5 SKUs"
)

FULL_COMPLETION = """## SIGNALS
- **Retail Media Spend Climbs**
Summary: Retail media ad spend reached $1.2B in Q1, up 25% from last year.
Source: eMarketer | https://www.emarketer.com/retail

- Creator Budgets Shift
Summary: 62% of CMOs plan to move budget into creator partnerships.
Source: Gartner

## IMPLICATIONS
- Retail media is now a core channel
- Creator programs need measurement frameworks

## ACTIONS
- Audit retail media partners this quarter
- Pilot two creator partnerships with clear KPIs

## FRAMEWORKS
### Media Strategy (e.g., Media Strategy)
- Rebalance spend toward retail media networks
- Negotiate first-party data access
- Set incrementality tests

### Growth Strategy
- Map creator content to funnel stages
- Track assisted conversions
"""


class FakeLLMClient(LLMClient):
    """In-memory client that records every chat call."""

    def __init__(self, content="", citations=None, error=None):
        super().__init__(api_key="test-key", model="sonar")
        self.content = content
        self.citations = citations or []
        self.error = error
        self.calls = []
        self.closed = False

    async def chat(self, messages, system=None, max_tokens=1500, temperature=0.2, model=None, **options):
        self.calls.append({
            "messages": messages,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "model": model,
            "options": options,
        })
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, model=model or self.model, citations=list(self.citations))

    async def aclose(self):
        self.closed = True


class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def completion_body(content, citations=None):
    return {
        "id": "cmpl-1",
        "model": "sonar",
        "choices": [{"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": content}}],
        "citations": citations or [],
        "usage": {"prompt_tokens": 12, "completion_tokens": 34},
    }


def make_perplexity_client(handler, sleep=None, max_attempts=3):
    """PerplexityClient wired to an httpx.MockTransport handler."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PerplexityClient(
        api_key="test-key",
        model="sonar",
        http_client=http_client,
        retry_policy=RetryPolicy(max_attempts=max_attempts, base_delay=1.0),
        sleep=sleep,
    )


class ScriptedTransport:
    """MockTransport handler returning queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fixed_today():
    return lambda: date(2026, 10, 19)
