from __future__ import annotations

import time
from typing import Any, Callable, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from bootloader.core.errors import RetriesExhaustedError

logger = structlog.get_logger()

DEFAULT_ATTEMPTS = 5
DEFAULT_DELAY = 10.0

T = TypeVar("T")


class Retrier:
    """Fixed-count, fixed-delay retry for transport-level failures.

    Only exceptions in ``retry_on`` are retried. Anything else, including a
    well-formed but unexpected HTTP status, propagates on the first attempt.
    """

    def __init__(
        self,
        attempts: int = DEFAULT_ATTEMPTS,
        delay: float = DEFAULT_DELAY,
        *,
        retry_on: tuple[type[BaseException], ...] = (httpx.TransportError,),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.delay = delay
        self._retry_on = retry_on
        self._sleep = sleep

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(self._retry_on),
            sleep=self._sleep,
            before_sleep=_log_retry,
        )
        try:
            return retrying(func, *args, **kwargs)
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            raise RetriesExhaustedError(self.attempts, last_error) from last_error


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "transient_failure_retry",
        attempt=retry_state.attempt_number,
        error=str(error),
    )
