"""
LLM Module - Unified interface for LLM providers.

Usage:
    from llm import get_client

    client = get_client()  # Uses config settings
    response = await client.generate("Your prompt here")
    print(response.content, response.citations)

Supported providers:
- perplexity: Perplexity Sonar chat completions
"""
from typing import Optional

from config import settings
from .base import LLMClient, LLMResponse, Message, set_llm_context, get_llm_context
from .errors import (
    LLMError,
    ConfigurationError,
    UpstreamError,
    UpstreamClientError,
    UpstreamServerError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
    UpstreamSchemaError,
    EmptyCompletionError,
    RetryExhaustedError,
)
from .perplexity import PerplexityClient
from .retry import RetryPolicy, call_with_retry, run_with_deadline


# Provider mapping
_PROVIDERS = {
    "perplexity": PerplexityClient,
}


def get_client(
    provider: str = "perplexity",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> LLMClient:
    """
    Get an LLM client instance.

    Args:
        provider: Provider name ("perplexity")
        api_key: API key. Defaults to settings.PPLX_API_KEY
        model: Model name. Defaults to settings.PPLX_MODEL_FAST

    Returns:
        Configured LLMClient instance

    Raises:
        ConfigurationError: If the provider is unknown or no API key is set
    """
    provider = provider.lower()

    if provider not in _PROVIDERS:
        raise ConfigurationError(f"Unknown LLM provider: {provider}. Available: {list(_PROVIDERS.keys())}")

    api_key = api_key if api_key is not None else settings.PPLX_API_KEY
    if not api_key:
        raise ConfigurationError("PPLX_API_KEY not set in environment")

    client_class = _PROVIDERS[provider]
    return client_class(
        api_key=api_key,
        model=model or settings.PPLX_MODEL_FAST,
        api_url=settings.PPLX_API_URL,
        timeout=settings.PPLX_TIMEOUT_SECONDS,
        retry_policy=RetryPolicy(
            max_attempts=settings.PPLX_MAX_RETRIES,
            base_delay=settings.PPLX_RETRY_DELAY_SECONDS,
        ),
    )


__all__ = [
    "get_client",
    "LLMClient",
    "LLMResponse",
    "Message",
    "PerplexityClient",
    "RetryPolicy",
    "call_with_retry",
    "run_with_deadline",
    "set_llm_context",
    "get_llm_context",
    "LLMError",
    "ConfigurationError",
    "UpstreamError",
    "UpstreamClientError",
    "UpstreamServerError",
    "UpstreamConnectionError",
    "UpstreamTimeoutError",
    "UpstreamSchemaError",
    "EmptyCompletionError",
    "RetryExhaustedError",
]
