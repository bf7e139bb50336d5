"""Backoff policy for retrying Graph API requests."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass


@dataclass
class RetryPolicy:
    """Retry bounds and delay parameters shared by all platform clients.

    ``max_retries=2`` means three attempts in total. Delays are milliseconds.
    """

    max_retries: int = 2
    base_delay_ms: int = 500
    jitter_ms: int = 250
    max_delay_ms: int = 10_000

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")
        if self.jitter_ms < 1:
            raise ValueError("jitter_ms must be >= 1")
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be >= base_delay_ms")


def is_retryable_status(status_code: int | None) -> bool:
    """Server errors and HTTP 429 are transient; everything else is final."""
    if status_code is None:
        return False
    return status_code == 429 or 500 <= status_code <= 599


def parse_retry_after(value: str | None) -> float | None:
    """Return the ``Retry-After`` header as seconds, or None if unusable.

    Only the delta-seconds form is honoured. Missing, non-numeric, or
    non-positive values yield None so the exponential delay applies.
    """
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds <= 0:
        return None
    return seconds


def backoff_delay(
    attempt: int,
    retry_after: float | None = None,
    *,
    base_delay_ms: int = 500,
    jitter_ms: int = 250,
    max_delay_ms: int = 10_000,
    rng: random.Random | None = None,
) -> int:
    """Milliseconds to wait before retry number ``attempt + 1``.

    A server hint wins over the computed value. Both are clamped to
    ``max_delay_ms``.
    """
    if retry_after is not None:
        return min(int(retry_after * 1000), max_delay_ms)
    jitter = (rng or random).randrange(jitter_ms)
    return min(base_delay_ms * 2**attempt + jitter, max_delay_ms)


def policy_delay(policy: RetryPolicy, attempt: int, retry_after: float | None, rng: random.Random) -> int:
    return backoff_delay(
        attempt,
        retry_after,
        base_delay_ms=policy.base_delay_ms,
        jitter_ms=policy.jitter_ms,
        max_delay_ms=policy.max_delay_ms,
        rng=rng,
    )
