"""Retry helper for async calls."""

import asyncio
import logging
from functools import wraps
from typing import Callable

logger = logging.getLogger(__name__)


def async_retry(
    max_attempts: int = 2,
    delay: float = 0.5,
    backoff: float = 2.0,
    exceptions: tuple = (Exception,),
):
    """Retry decorator for coroutine functions.

    Args:
        max_attempts: total attempts, first call included
        delay: wait before the first retry (seconds)
        backoff: multiplier applied to the delay after each failed retry
        exceptions: exception types that trigger a retry; others propagate at once
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error("Failed after %s attempts: %s", max_attempts, func.__name__)
                        raise

                    logger.warning(
                        "Attempt %s/%s failed for %s: %s. Retrying in %ss...",
                        attempt,
                        max_attempts,
                        func.__name__,
                        e,
                        current_delay,
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff

        return wrapper

    return decorator
