"""Resolve-once cell for the default Instagram account id."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from .errors import AccountSelectionRequired, SocialAnalyticsError

logger = logging.getLogger(__name__)

DiscoverAccounts = Callable[[], Awaitable[list[dict[str, Any]]]]


class DefaultAccountResolver:
    """Hold the default account id, discovering it on first use.

    A configured id short-circuits discovery. Concurrent first calls may each
    run discovery; they all store the same id, so no lock is taken.
    """

    def __init__(self, configured_id: str | None = None):
        self._account_id = configured_id or None

    @property
    def cached(self) -> str | None:
        return self._account_id

    def reset(self) -> None:
        self._account_id = None

    async def resolve(self, discover: DiscoverAccounts) -> str:
        if self._account_id:
            return self._account_id

        accounts = await discover()
        if not accounts:
            raise SocialAnalyticsError.validation("No Instagram Business accounts found")
        if len(accounts) == 1:
            account = accounts[0]
            self._account_id = account["id"]
            logger.info("Using Instagram account: @%s", account.get("username", "Unknown"))
            return self._account_id

        raise AccountSelectionRequired(accounts)
