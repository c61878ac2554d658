"""
LLM Errors - Failure kinds raised by LLM clients.

The retry wrapper only retries UpstreamServerError and
UpstreamConnectionError. Everything else is surfaced to the caller
on the first occurrence.
"""
from typing import Optional


class LLMError(Exception):
    """Base class for all LLM client errors."""
    pass


class ConfigurationError(LLMError):
    """Raised when the client cannot be built (e.g. missing API key)."""
    pass


class UpstreamError(LLMError):
    """Raised when the upstream completion API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamClientError(UpstreamError):
    """4xx response from the upstream API. Never retried."""
    pass


class UpstreamServerError(UpstreamError):
    """5xx response from the upstream API. Retried with backoff."""
    pass


class UpstreamConnectionError(UpstreamError):
    """Network failure other than a timeout. Retried with backoff."""
    pass


class UpstreamTimeoutError(UpstreamError):
    """Deadline exceeded. Never retried."""
    pass


class UpstreamSchemaError(UpstreamError):
    """Upstream returned 200 with a malformed payload (e.g. no choices)."""
    pass


class EmptyCompletionError(UpstreamSchemaError):
    """Upstream returned 200 with an empty completion text."""
    pass


class RetryExhaustedError(UpstreamError):
    """All retry attempts failed with retryable errors."""

    def __init__(self, message: str, attempts: int, last_error: Optional[Exception] = None):
        status_code = getattr(last_error, "status_code", None)
        super().__init__(message, status_code=status_code)
        self.attempts = attempts
        self.last_error = last_error


def is_retryable(error: BaseException) -> bool:
    """Classify an error as retryable (5xx or network) or fatal."""
    return isinstance(error, (UpstreamServerError, UpstreamConnectionError))
