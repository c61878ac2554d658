"""
Retry Policy - Exponential backoff around async upstream calls.

Attempt loop:
    Attempting -> Success            (return result)
               -> RetryableFailure   (sleep base_delay * 2^attempt, try again)
               -> FatalFailure       (raise immediately)

After the last attempt a RetryableFailure becomes RetryExhaustedError,
which names the attempt count and chains the last error.
"""
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from loguru import logger

from .errors import RetryExhaustedError, UpstreamTimeoutError, is_retryable


T = TypeVar("T")

MAX_RETRIES = 3
RETRY_DELAY_SECONDS = 1.0


@dataclass
class RetryPolicy:
    """Attempt budget and backoff schedule."""
    max_attempts: int = MAX_RETRIES
    base_delay: float = RETRY_DELAY_SECONDS

    def delay_for(self, attempt: int) -> float:
        """Delay before the attempt after `attempt` (0-based): 1s, 2s, 4s..."""
        return self.base_delay * (2 ** attempt)


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    classify: Callable[[BaseException], bool] = is_retryable,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    description: str = "upstream request",
) -> T:
    """
    Run an async operation under a retry policy.

    Args:
        operation: Zero-arg coroutine factory, called once per attempt
        policy: Attempt budget and backoff (defaults to 3 attempts, 1s base)
        classify: Returns True when an error may be retried
        sleep: Awaitable sleep, injectable for tests
        description: Label used in log and error messages

    Returns:
        The operation's result

    Raises:
        The first non-retryable error, or RetryExhaustedError
    """
    policy = policy or RetryPolicy()
    last_error: Optional[Exception] = None

    for attempt in range(policy.max_attempts):
        try:
            return await operation()
        except Exception as e:
            if not classify(e):
                raise

            last_error = e
            logger.warning(
                f"{description} failed (attempt {attempt + 1}/{policy.max_attempts}): {e}"
            )
            if attempt < policy.max_attempts - 1:
                delay = policy.delay_for(attempt)
                logger.info(f"Retrying {description} in {delay:.1f}s...")
                await sleep(delay)

    error_msg = f"Failed {description} after {policy.max_attempts} attempts: {last_error}"
    logger.error(error_msg)
    raise RetryExhaustedError(error_msg, attempts=policy.max_attempts, last_error=last_error) from last_error


async def run_with_deadline(awaitable: Awaitable[T], timeout: float, description: str = "request") -> T:
    """
    Await with an outer deadline.

    Raises:
        UpstreamTimeoutError: If the deadline passes first
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise UpstreamTimeoutError(f"Request timeout after {timeout:g}s: {description}") from e
