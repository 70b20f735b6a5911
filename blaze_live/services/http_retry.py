# blaze_live/services/http_retry.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, NamedTuple, Optional

import httpx

from blaze_live.core.config import RETRY_ATTEMPTS, RETRY_BACKOFF

logger = logging.getLogger("blaze_live.http")


def linear_backoff(step: float = 1.0) -> Callable[[int], float]:
    """Delay before the next try: step * attempt (1s, 2s, ...)."""

    def _delay(attempt: int) -> float:
        return step * attempt

    return _delay


class RetryPolicy(NamedTuple):
    max_attempts: int = RETRY_ATTEMPTS
    backoff: Callable[[int], float] = linear_backoff(RETRY_BACKOFF)
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep


DEFAULT_POLICY = RetryPolicy()


async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    policy: RetryPolicy = DEFAULT_POLICY,
) -> Any:
    """
    GET a JSON document with bounded retries.

    Non-2xx responses, transport errors (timeouts included) and bodies that
    fail to decode all count as a failed attempt. Between attempts we sleep
    policy.backoff(attempt). After the last attempt the error is re-raised
    untouched so the caller can decide what to fall back to.

    Timeout and headers come from the client.
    """
    last: Optional[Exception] = None
    attempts = max(1, policy.max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            r = await client.get(url, params=params)
            r.raise_for_status()
            return r.json()
        except (httpx.HTTPError, ValueError) as e:
            last = e
            logger.warning("fetch attempt %d/%d failed for %s: %r", attempt, attempts, url, e)
            if attempt < attempts:
                await policy.sleep(policy.backoff(attempt))

    logger.error("giving up on %s after %d attempts: %r", url, attempts, last)
    raise last or RuntimeError("unknown http error")
