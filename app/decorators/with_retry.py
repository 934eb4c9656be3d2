"""Exponential-backoff retries for transient failures, built on tenacity."""

from collections.abc import Awaitable, Callable

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.monitoring import get_logger

logger = get_logger(__name__)

type RetryOn = type[BaseException] | tuple[type[BaseException], ...]

# Raised by drivers while the database is still starting or briefly unreachable
TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (ConnectionError, TimeoutError, OSError)


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    logger.warning(
        "Retrying after transient failure",
        function=retry_state.fn.__name__ if retry_state.fn else "unknown",
        attempt=retry_state.attempt_number,
        sleep=round(retry_state.next_action.sleep, 2) if retry_state.next_action else 0,
        error=repr(outcome.exception()) if outcome else None,
    )


def with_retry[**P, T](
    attempts: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    retry_on: RetryOn = TRANSIENT_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async callable on ``retry_on`` with exponential backoff.

    The last exception is re-raised once ``attempts`` is exhausted.

    Args:
        attempts: Total number of calls, the first one included.
        base_delay: First backoff in seconds; doubles on every retry.
        max_delay: Upper bound for a single backoff.
        retry_on: Exception type(s) worth retrying.
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=True,
    )
