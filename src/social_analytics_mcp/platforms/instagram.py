"""Instagram Graph API client (Business/Creator accounts)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from ..accounts import DefaultAccountResolver
from ..errors import ErrorCode, NormalizedError, SocialAnalyticsError
from ..executor import RequestExecutor
from .base import GraphClient, cursor_params, require, require_metrics

logger = logging.getLogger(__name__)

PROFILE_FIELDS = "id,username,name,profile_picture_url,followers_count,follows_count,media_count,biography,website"
MEDIA_FIELDS = (
    "id,caption,media_type,media_url,permalink,timestamp,like_count,comments_count,"
    "media_product_type,thumbnail_url"
)
STORY_FIELDS = "id,caption,media_type,media_url,permalink,timestamp"
TAGGED_MEDIA_FIELDS = "id,caption,media_type,media_url,permalink,timestamp,like_count,comments_count"

DEMOGRAPHIC_METRICS = frozenset({
    "engaged_audience_demographics",
    "follower_demographics",
    "reached_audience_demographics",
    "threads_follower_demographics",
})
DEFAULT_DEMOGRAPHIC_BREAKDOWN = "country"


def _page_id(page: Any) -> Any:
    return page.get("id") if isinstance(page, dict) else page


class InstagramClient(GraphClient):
    platform = "instagram"
    default_api_version = "v23.0"
    token_hint = "Instagram access token (INSTAGRAM_ACCESS_TOKEN)"

    def __init__(
        self,
        executor: RequestExecutor,
        access_token: str | None = None,
        account_id: str | None = None,
        api_version: str | None = None,
        resolver: DefaultAccountResolver | None = None,
    ):
        super().__init__(executor, access_token=access_token, api_version=api_version)
        self.resolver = resolver or DefaultAccountResolver(account_id)

    # -- Account discovery ----------------------------------------------------

    async def list_accounts(self) -> list[dict[str, Any]]:
        """Instagram Business accounts linked to the token's Facebook Pages.

        Pages without a linked account (or that fail to load) are skipped.
        """
        response = await self.get("me/accounts", {"fields": "id,name"})
        pages = response.get("data") or []
        if not pages:
            raise SocialAnalyticsError.validation(
                "No Facebook pages found. Please connect a Facebook page to your "
                "Instagram Business account.",
                raw=response,
            )

        linked = await asyncio.gather(*(self._linked_account(page) for page in pages))
        accounts = [account for account in linked if account is not None]
        if not accounts:
            raise SocialAnalyticsError.validation(
                "No Instagram Business accounts found. Please ensure at least one "
                "Instagram account is connected to your Facebook pages."
            )
        return accounts

    async def _linked_account(self, page: dict[str, Any]) -> dict[str, Any] | None:
        # Any failure for one page drops that page, never the whole listing.
        try:
            response = await self.get(
                page["id"], {"fields": "instagram_business_account{id,username,name}"}
            )
            account = response.get("instagram_business_account")
            if not account:
                return None
            return {
                "id": account["id"],
                "username": account.get("username") or "Unknown",
                "name": account.get("name") or "Unknown",
                "pageId": page["id"],
                "pageName": page.get("name"),
            }
        except SocialAnalyticsError as exc:
            logger.debug("Skipping page %s: %s", _page_id(page), exc.normalized.message)
        except (KeyError, TypeError, AttributeError) as exc:
            logger.debug("Skipping page %s: malformed response (%r)", _page_id(page), exc)
        return None

    async def get_account_id(self, account_id: str | None = None) -> str:
        if account_id:
            return account_id
        return await self.resolver.resolve(self.list_accounts)

    # -- Profile & media ------------------------------------------------------

    async def get_profile(self, account_id: str | None = None) -> dict[str, Any]:
        target = await self.get_account_id(account_id)
        return await self.get(target, {"fields": PROFILE_FIELDS})

    async def list_media(
        self,
        limit: int = 25,
        *,
        after: str | None = None,
        before: str | None = None,
        account_id: str | None = None,
    ) -> dict[str, Any]:
        target = await self.get_account_id(account_id)
        return await self.get(
            f"{target}/media",
            {"fields": MEDIA_FIELDS, "limit": limit, **cursor_params(after, before)},
        )

    async def get_media_details(self, media_id: str) -> dict[str, Any]:
        require(media_id, "media_id")
        return await self.get(media_id, {"fields": MEDIA_FIELDS})

    async def get_stories(self, account_id: str | None = None) -> dict[str, Any]:
        target = await self.get_account_id(account_id)
        return await self.get(f"{target}/stories", {"fields": STORY_FIELDS})

    async def get_mentioned_media(
        self, limit: int = 25, *, account_id: str | None = None
    ) -> dict[str, Any]:
        target = await self.get_account_id(account_id)
        return await self.get(f"{target}/tags", {"fields": TAGGED_MEDIA_FIELDS, "limit": limit})

    # -- Insights -------------------------------------------------------------

    async def get_account_insights(
        self,
        metrics: Sequence[str],
        period: str,
        *,
        metric_type: str | None = None,
        since: int | None = None,
        until: int | None = None,
        breakdown: str | None = None,
        timeframe: str | None = None,
        account_id: str | None = None,
    ) -> dict[str, Any]:
        metrics = require_metrics(metrics)
        require(period, "period")
        target = await self.get_account_id(account_id)

        if breakdown is None and DEMOGRAPHIC_METRICS.intersection(metrics):
            breakdown = DEFAULT_DEMOGRAPHIC_BREAKDOWN

        return await self.get(
            f"{target}/insights",
            {
                "metric": ",".join(metrics),
                "period": period,
                "metric_type": metric_type,
                "breakdown": breakdown,
                "timeframe": timeframe,
                "since": since,
                "until": until,
            },
        )

    async def get_media_insights(
        self, media_id: str, metrics: Sequence[str], period: str = "lifetime"
    ) -> dict[str, Any]:
        require(media_id, "media_id")
        metrics = require_metrics(metrics)
        return await self.get(
            f"{media_id}/insights", {"metric": ",".join(metrics), "period": period}
        )

    # -- Hashtags & limits ----------------------------------------------------

    async def search_hashtag(self, hashtag: str, account_id: str | None = None) -> dict[str, str]:
        name = (hashtag or "").lstrip("#").strip()
        require(name, "hashtag")
        target = await self.get_account_id(account_id)
        response = await self.get("ig_hashtag_search", {"q": name, "user_id": target})
        matches = response.get("data") or []
        if not matches:
            raise SocialAnalyticsError(
                NormalizedError(
                    code=ErrorCode.GRAPH,
                    message=f'No hashtag found for "{name}"',
                    raw=response,
                )
            )
        return {"id": matches[0]["id"], "hashtag": name}

    async def get_hashtag_media(
        self,
        hashtag_id: str,
        media_type: str = "top_media",
        *,
        limit: int = 25,
        account_id: str | None = None,
    ) -> dict[str, Any]:
        require(hashtag_id, "hashtag_id")
        if media_type not in ("top_media", "recent_media"):
            raise SocialAnalyticsError.validation("type must be top_media or recent_media")
        target = await self.get_account_id(account_id)
        return await self.get(
            f"{hashtag_id}/{media_type}",
            {"user_id": target, "fields": TAGGED_MEDIA_FIELDS, "limit": limit},
        )

    async def get_content_publishing_limit(self, account_id: str | None = None) -> dict[str, Any]:
        target = await self.get_account_id(account_id)
        return await self.get(
            f"{target}/content_publishing_limit", {"fields": "config,quota_usage"}
        )
