"""Retry helpers for store reads."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shared_kernel.document_store.exceptions import TransientStoreError

T = TypeVar("T")

logger = structlog.get_logger()


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "store_read_retry",
        attempt=retry_state.attempt_number,
        delay_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


async def retry_read(
    operation: Callable[[], Awaitable[T]],
    attempts: int = 3,
    base_delay: float = 0.2,
) -> T:
    """Run a read operation, retrying TransientStoreError with exponential backoff.

    Args:
        operation: Zero-argument coroutine factory performing the read
        attempts: Total number of attempts (at least 1)
        base_delay: Delay before the second attempt; doubles each retry

    Raises:
        TransientStoreError: If every attempt failed transiently
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    retrying = AsyncRetrying(
        retry=retry_if_exception_type(TransientStoreError),
        wait=wait_exponential(multiplier=base_delay),
        stop=stop_after_attempt(attempts),
        before_sleep=_log_retry,
        sleep=asyncio.sleep,
        reraise=True,
    )
    return await retrying(operation)
