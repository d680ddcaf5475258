"""Optional retry layer around a CopyGenerator."""

import functools
import random
import time
from typing import Any, Callable, Optional, TypeVar

from launchcraft.core.errors import ProviderError
from launchcraft.core.generation_client import CopyGenerator
from launchcraft.core.logging import get_logger
from launchcraft.schemas.copy import GenerationRequest, GenerationResult

T = TypeVar("T")

logger = get_logger("launchcraft.retry")


def is_retryable(error: Exception) -> bool:
    """Only provider errors flagged retryable (429, 5xx, network) are retried."""
    return isinstance(error, ProviderError) and error.retryable


def retry_with_exponential_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    should_retry: Callable[[Exception], bool] = is_retryable,
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for retrying function calls with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts after the first call
        initial_delay: Initial delay in seconds before first retry
        max_delay: Maximum delay in seconds between retries
        exponential_base: Base for exponential backoff calculation
        jitter: If True, add up to 10% random jitter to each delay
        should_retry: Predicate deciding whether an exception is worth retrying
        sleep: Sleep function (tests pass a no-op)

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e) or attempt == max_retries:
                        raise

                    actual_delay = delay + (delay * 0.1 * random.random() if jitter else 0.0)
                    logger.warning(
                        f"Attempt {attempt + 1}/{max_retries + 1} failed: {e}. "
                        f"Retrying in {actual_delay:.2f}s...",
                        context={
                            "function": getattr(func, "__name__", repr(func)),
                            "attempt": attempt + 1,
                            "max_retries": max_retries,
                            "delay": actual_delay,
                        },
                    )
                    sleep(actual_delay)
                    delay = min(delay * exponential_base, max_delay)

            raise AssertionError("unreachable")

        return wrapper

    return decorator


class RetryingGenerationClient:
    """
    CopyGenerator decorator that retries retryable provider failures.

    The wrapped client keeps its single-call contract; all retry policy lives here.
    """

    def __init__(
        self,
        client: CopyGenerator,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.client = client
        self.max_retries = max_retries
        self._generate = retry_with_exponential_backoff(
            max_retries=max_retries,
            initial_delay=initial_delay,
            max_delay=max_delay,
            exponential_base=exponential_base,
            sleep=sleep or time.sleep,
        )(client.generate)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        return self._generate(request)
