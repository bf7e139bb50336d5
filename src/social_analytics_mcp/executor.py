"""Retrying executor for Graph API GET requests."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Union

import httpx

from .errors import SocialAnalyticsError, normalize
from .retry import RetryPolicy, is_retryable_status, parse_retry_after, policy_delay

logger = logging.getLogger(__name__)

GRAPH_API_BASE_URL = "https://graph.facebook.com"

ParamValue = Union[str, int, float]


@dataclass(frozen=True)
class RequestSpec:
    """One outbound Graph API call. ``path`` already carries the API version."""

    path: str
    params: Mapping[str, ParamValue] = field(default_factory=dict)
    access_token: str | None = None
    method: str = "GET"

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def query(self) -> dict[str, ParamValue]:
        query = dict(self.params)
        if self.access_token:
            query["access_token"] = self.access_token
        return query


class RequestExecutor:
    """Issue a ``RequestSpec`` with retries on 5xx/429.

    Returns the decoded JSON body untouched, or raises ``SocialAnalyticsError``.
    ``sleep`` and ``rng`` are injectable so tests can observe exact delays.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self._http = http_client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._rng = rng or random.Random()

    async def execute(self, spec: RequestSpec, max_retries: int | None = None) -> Any:
        retries = self.policy.max_retries if max_retries is None else max_retries
        attempt = 0
        while True:
            try:
                return await self._send(spec)
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if is_retryable_status(status) and attempt < retries:
                    retry_after = parse_retry_after(exc.response.headers.get("retry-after"))
                    delay_ms = policy_delay(self.policy, attempt, retry_after, self._rng)
                    logger.warning(
                        "GET %s returned %s, retrying in %d ms (attempt %d/%d)",
                        spec.path, status, delay_ms, attempt + 1, retries,
                    )
                    await self._sleep(delay_ms / 1000)
                    attempt += 1
                    continue
                raise self._fail(spec, exc) from exc
            except Exception as exc:
                raise self._fail(spec, exc) from exc

    async def _send(self, spec: RequestSpec) -> Any:
        logger.debug("GET %s params=%s", spec.path, sorted(spec.params))
        response = await self._http.request(spec.method, spec.path, params=spec.query())
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _fail(spec: RequestSpec, exc: Exception) -> SocialAnalyticsError:
        normalized = normalize(exc)
        logger.error("GET %s failed: %s %s", spec.path, normalized.code, normalized.message)
        return SocialAnalyticsError(normalized)


def build_http_client(timeout: float = 30.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=GRAPH_API_BASE_URL, timeout=timeout)
