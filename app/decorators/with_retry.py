from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import ParamSpec, TypeVar

from pymongo.errors import ConnectionFailure
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.configs import file_logger

logger = file_logger(getLogger(__name__))

P = ParamSpec("P")
T = TypeVar("T")

# ServerSelectionTimeoutError and AutoReconnect are ConnectionFailure subclasses
RETRIABLE_EXCEPTIONS: tuple[type[Exception], ...] = (ConnectionFailure, ConnectionError, TimeoutError)


def _log_attempt(attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0
        target = state.fn.__qualname__ if state.fn else "unknown"
        logger.warning(
            "%s failed (attempt %d/%d), retrying in %.2fs: %s",
            target,
            state.attempt_number,
            attempts,
            delay,
            error,
        )

    return before_sleep


def with_retry(
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async call on connectivity errors with exponential backoff.

    Only the startup ping goes through this; request-path operations rely on
    the driver's ``retryReads``/``retryWrites``. Errors outside ``exec_retry``
    (e.g. authentication failures) propagate on the first attempt, and the last
    error is re-raised once ``max_retries`` attempts are spent.

    Args:
        max_retries: Total number of attempts.
        base_delay: First backoff delay in seconds; doubles per attempt.
        max_delay: Backoff ceiling in seconds.
        exec_retry: Exception types worth retrying.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_log_attempt(max_retries),
        reraise=True,
    )
