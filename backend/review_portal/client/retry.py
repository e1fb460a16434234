# review_portal/client/retry.py
"""
Bounded retry for client requests.

Server errors (5xx) and transport failures are retried; client errors (4xx)
are returned immediately. The policy is passed in explicitly so callers can
tune it per client instead of relying on constants.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger("review_portal.client")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-interval retry policy.

    Attributes:
        max_attempts: Total attempts including the first one (>= 1)
        interval: Seconds to wait between attempts
        jitter: Upper bound (seconds) of a random delay added to `interval`
    """
    max_attempts: int = 3
    interval: float = 1.0
    jitter: float = 0.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.interval < 0 or self.jitter < 0:
            raise ValueError("interval and jitter must not be negative")

    def delay(self, rng: random.Random | None = None) -> float:
        if not self.jitter:
            return self.interval
        return self.interval + (rng or random).uniform(0, self.jitter)


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500


async def send_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    policy: RetryPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """
    Call `send` until it yields a non-5xx response or attempts run out.

    Returns:
        The first response below 500, or the last 5xx response once
        `policy.max_attempts` is exhausted.

    Raises:
        httpx.TransportError: If the final attempt fails at the network level
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            response = await send()
        except httpx.TransportError as exc:
            if attempt >= policy.max_attempts:
                logger.warning("[retry] giving up after %d attempts: %s", attempt, exc)
                raise
            logger.info("[retry] attempt %d/%d failed: %s", attempt, policy.max_attempts, exc)
        else:
            if not is_retryable_status(response.status_code) or attempt >= policy.max_attempts:
                return response
            logger.info("[retry] attempt %d/%d got HTTP %d",
                        attempt, policy.max_attempts, response.status_code)
        await sleep(policy.delay())
