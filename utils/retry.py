"""Async retry decorator with configurable backoff."""

import asyncio
import functools
import re
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar
import structlog

log = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# Patterns that look like secrets in query strings
_SENSITIVE_PARAMS = re.compile(
    r"((?:token|api_?key|api_?token|secret|password|authorization)=)[^&\s'\")]+",
    re.IGNORECASE,
)

# user:password@ in connection strings (mongodb://, mongodb+srv://, ...)
_URL_CREDENTIALS = re.compile(r"([a-z][a-z0-9+.-]*://)[^/@\s:]+:[^/@\s]+@", re.IGNORECASE)


def sanitize_error(error: str) -> str:
    """Strip credentials and tokens from error messages and URLs."""
    error = _URL_CREDENTIALS.sub(r"\1[REDACTED]@", error)
    return _SENSITIVE_PARAMS.sub(r"\1[REDACTED]", error)


def async_retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    max_delay: float = 60.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator for async functions that retries on failure.

    ``max_attempts`` counts the first call. The wait before attempt ``n + 1``
    is ``delay * backoff ** (n - 1)`` capped at ``max_delay``; ``backoff=1``
    gives a fixed delay. The last exception is re-raised once attempts run out.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            last_exception: Exception | None = None
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    log.warning(
                        "retry_attempt_failed",
                        func=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        error=sanitize_error(str(e)),
                    )
                    if attempt == max_attempts:
                        break
                    wait = min(delay * (backoff ** (attempt - 1)), max_delay)
                    log.info("retrying", func=func.__name__, delay=wait)
                    await asyncio.sleep(wait)
            raise last_exception  # type: ignore[misc]

        return wrapper

    return decorator
