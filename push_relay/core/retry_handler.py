"""Retry handler for transient provider failures."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _always(exc: Exception) -> bool:
    return True


class RetryHandler:
    """Handler for retrying failed operations with exponential backoff."""

    @staticmethod
    async def with_retry(
        func: Callable[..., Coroutine[Any, Any, T]],
        *args: Any,
        max_retries: int = 3,
        delay: float = 1.0,
        backoff: float = 2.0,
        retry_if: Callable[[Exception], bool] = _always,
        **kwargs: Any,
    ) -> T:
        """
        Execute async function with exponential backoff retry.

        Args:
            func: Async function to execute
            *args: Positional arguments for func
            max_retries: Maximum number of attempts
            delay: Initial delay between retries in seconds
            backoff: Backoff multiplier for exponential delay
            retry_if: Predicate deciding whether an exception is retryable;
                      non-retryable exceptions are raised immediately
            **kwargs: Keyword arguments for func

        Returns:
            Result from successful function execution

        Raises:
            Last exception if all retries fail
        """
        name = getattr(func, "__name__", repr(func))
        last_exception: Exception | None = None

        for attempt in range(max_retries):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if not retry_if(e):
                    raise
                last_exception = e
                if attempt < max_retries - 1:
                    wait_time = delay * (backoff**attempt)
                    logger.warning(
                        f"Attempt {attempt + 1} failed for {name}: {e}. "
                        f"Retrying in {wait_time}s..."
                    )
                    await asyncio.sleep(wait_time)
                else:
                    logger.error(f"All {max_retries} attempts failed for {name}: {e}")

        if last_exception is not None:
            raise last_exception
        raise RuntimeError("Retry failed but no exception was captured")
