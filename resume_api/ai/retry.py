"""Retry controller around a single model invocation.

Attempt ``a`` runs from 0 to ``max_retries``. A retryable failure
(status 429 or 503) with attempts left sleeps ``initial_delay_ms * 2**a``
and tries again; any other failure, or a retryable one once attempts are
exhausted, propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from resume_api.ai.errors import LLMBackendError
from resume_api.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
SleepFn = Callable[[float], Awaitable[None]]


class RetryState(str, Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED_RETRYABLE = "failed_retryable"
    FAILED_FATAL = "failed_fatal"


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    initial_delay_ms: int = 1000

    def delay_ms(self, attempt: int) -> int:
        return self.initial_delay_ms * (2**attempt)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_retries=settings.llm_max_retries,
            initial_delay_ms=settings.llm_initial_delay_ms,
        )


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, LLMBackendError) and exc.retryable


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy | None = None,
    sleep: SleepFn = asyncio.sleep,
    label: str = "llm",
) -> T:
    """Run ``operation`` under ``policy``; ``sleep`` receives delays in seconds."""
    policy = policy or RetryPolicy()
    attempts = 0

    def before(retry_state: RetryCallState) -> None:
        nonlocal attempts
        attempts = retry_state.attempt_number
        logger.debug("llm_attempt state=%s task=%s attempt=%s", RetryState.ATTEMPTING.value, label, attempts - 1)

    def before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception()
        logger.warning(
            "llm_retry_scheduled state=%s task=%s attempt=%s status=%s delay_ms=%s",
            RetryState.FAILED_RETRYABLE.value,
            label,
            retry_state.attempt_number - 1,
            getattr(exc, "status_code", None),
            policy.delay_ms(retry_state.attempt_number - 1),
        )

    retrying = AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(policy.max_retries + 1),
        wait=wait_exponential(multiplier=policy.initial_delay_ms / 1000, exp_base=2),
        retry=retry_if_exception(_is_retryable),
        before=before,
        before_sleep=before_sleep,
        reraise=True,
    )
    try:
        result = await retrying(operation)
    except LLMBackendError as exc:
        if exc.retryable:
            logger.error(
                "llm_retries_exhausted state=%s task=%s attempts=%s status=%s: %s",
                RetryState.FAILED_RETRYABLE.value,
                label,
                attempts,
                exc.status_code,
                exc,
            )
        else:
            logger.error(
                "llm_call_failed state=%s task=%s attempt=%s status=%s: %s",
                RetryState.FAILED_FATAL.value,
                label,
                attempts - 1,
                exc.status_code,
                exc,
            )
        raise
    logger.debug("llm_attempt state=%s task=%s attempt=%s", RetryState.SUCCEEDED.value, label, attempts - 1)
    return result
