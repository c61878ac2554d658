"""
Perplexity Client - Sonar chat completions over HTTP.

Uses the OpenAI-compatible /chat/completions endpoint directly via httpx so
that status codes, timeouts and the top-level `citations` list are all
visible to the caller.
API docs: https://docs.perplexity.ai/api-reference/chat-completions
"""
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from loguru import logger

from .base import LLMClient, LLMResponse, Message, get_llm_context
from .errors import (
    EmptyCompletionError,
    UpstreamClientError,
    UpstreamConnectionError,
    UpstreamSchemaError,
    UpstreamServerError,
    UpstreamTimeoutError,
)
from .retry import RetryPolicy, call_with_retry


class PerplexityClient(LLMClient):
    """
    Perplexity Sonar client with retry and timeout handling.

    - 4xx responses fail immediately
    - 5xx responses and network errors are retried with exponential backoff
    - Timeouts fail immediately
    - A 200 without choices, or with empty content, fails immediately
    """

    API_URL = "https://api.perplexity.ai/chat/completions"

    def __init__(
        self,
        api_key: str,
        model: str = "sonar",
        api_url: Optional[str] = None,
        timeout: float = 45.0,
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Initialize Perplexity client.

        Args:
            api_key: Perplexity API key
            model: Default model name (sonar, sonar-pro, ...)
            api_url: Chat completions endpoint
            timeout: Per-attempt HTTP timeout in seconds
            retry_policy: Attempt budget and backoff schedule
            http_client: Pre-built httpx client (for testing)
            sleep: Awaitable sleep used between retries (for testing)
        """
        super().__init__(api_key, model)
        self.api_url = api_url or self.API_URL
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def chat(
        self,
        messages: List[Message],
        system: Optional[str] = None,
        max_tokens: int = 1500,
        temperature: float = 0.2,
        model: Optional[str] = None,
        search_recency_filter: Optional[str] = None,
        return_citations: bool = True,
        **options: Any,
    ) -> LLMResponse:
        """Generate response from conversation, retrying transient failures."""
        payload: Dict[str, Any] = {
            "model": model or self.model,
            "messages": self._build_messages(messages, system),
            "temperature": temperature,
            "max_tokens": max_tokens,
            "return_citations": return_citations,
        }
        if search_recency_filter:
            payload["search_recency_filter"] = search_recency_filter
        payload.update(options)

        task_type = get_llm_context().get("task_type") or "unknown"
        logger.debug(
            f"Perplexity request: model={payload['model']}, messages={len(payload['messages'])}, task={task_type}"
        )

        retry_kwargs = {"sleep": self._sleep} if self._sleep else {}
        return await call_with_retry(
            lambda: self._post_once(payload),
            policy=self.retry_policy,
            description="Perplexity request",
            **retry_kwargs,
        )

    async def _post_once(self, payload: Dict[str, Any]) -> LLMResponse:
        """Single HTTP attempt, mapping every failure to an LLM error kind."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        started = time.monotonic()

        try:
            response = await self._http.post(
                self.api_url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Request timeout: Perplexity did not respond within {self.timeout:g}s"
            ) from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(f"Perplexity request failed: {e}") from e

        if not response.is_success:
            message = f"Perplexity API error ({response.status_code}): {response.text}"
            if 400 <= response.status_code < 500:
                logger.error(message)
                raise UpstreamClientError(message, status_code=response.status_code)
            raise UpstreamServerError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamSchemaError("Invalid Perplexity API response: body is not JSON") from e

        latency_ms = int((time.monotonic() - started) * 1000)
        return self._parse_completion(data, payload["model"], latency_ms)

    def _parse_completion(self, data: Any, model: str, latency_ms: Optional[int] = None) -> LLMResponse:
        """Validate the completion payload and convert it to LLMResponse."""
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or len(choices) == 0:
            raise UpstreamSchemaError("Invalid Perplexity API response: missing choices")

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") or ""
        if not isinstance(content, str) or not content.strip():
            raise EmptyCompletionError("Perplexity API returned empty content")

        citations = data.get("citations") or []
        if not isinstance(citations, list):
            citations = []

        usage = data.get("usage") or {}
        return LLMResponse(
            content=content,
            model=data.get("model") or model,
            citations=citations,
            usage={
                "input_tokens": usage.get("prompt_tokens", 0),
                "output_tokens": usage.get("completion_tokens", 0),
            },
            finish_reason=first.get("finish_reason"),
            latency_ms=latency_ms,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
