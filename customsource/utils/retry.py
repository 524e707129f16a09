"""Opt-in retry configuration built on tenacity.

Sources never retry on their own; a fetcher created with ``max_attempts``
greater than one wraps its requests in the retryer built here.
"""

from collections.abc import Callable
from typing import Any

import logfire
from tenacity import (
    BaseRetrying,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)


def get_retryer(
    max_attempts: int = 1,
    wait_min: float = 1.0,
    wait_max: float = 10.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    log_callback: Callable[[Any], None] | None = None,
) -> BaseRetrying:
    """Create a tenacity Retrying object.

    Args:
        max_attempts: Total attempts, 1 means no retry.
        wait_min: Minimum wait between attempts in seconds.
        wait_max: Maximum wait between attempts in seconds.
        exceptions: Exception types that trigger another attempt.
        log_callback: Called before sleeping with the retry state.

    Returns:
        A configured Retrying object that re-raises the last error.

    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1.0, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_callback,
        reraise=True,
    )


def log_retry(retry_state: Any) -> None:
    """Log a retry attempt with logfire."""
    exception = retry_state.outcome.exception()
    logfire.warn(
        'Retrying request',
        attempt=retry_state.attempt_number,
        error=str(exception) if exception else 'Unknown error',
    )
