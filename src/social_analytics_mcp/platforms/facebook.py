"""Facebook Page Graph API client."""

from __future__ import annotations

from typing import Any, Sequence

from ..errors import SocialAnalyticsError
from ..executor import RequestExecutor
from ..metrics import known_metrics
from .base import GraphClient, cursor_params, require, require_metrics

DEFAULT_POST_FIELDS = "message,created_time,permalink_url"
PAGE_DETAIL_FIELDS = (
    "id,name,username,category,about,description,fan_count,followers_count,"
    "link,website,phone,emails,verification_status"
)
FEED_FIELDS = (
    "id,message,created_time,permalink_url,status_type,shares,"
    "reactions.summary(total_count).limit(0),comments.summary(total_count).limit(0)"
)
MISSING_PERIOD_WARNING = "No period provided. Some metrics may require a period parameter."


class FacebookClient(GraphClient):
    platform = "facebook"
    default_api_version = "v22.0"
    token_hint = "Facebook Page access token (FACEBOOK_PAGE_ACCESS_TOKEN)"

    def __init__(
        self,
        executor: RequestExecutor,
        access_token: str | None = None,
        page_id: str | None = None,
        api_version: str | None = None,
    ):
        super().__init__(executor, access_token=access_token, api_version=api_version)
        self.page_id = page_id

    def _page(self, page_id: str | None) -> str:
        resolved = page_id or self.page_id
        require(resolved, "page_id")
        return resolved

    async def list_pages(self, access_token: str | None = None) -> dict[str, Any]:
        return await self.get(
            "me/accounts",
            {"fields": "id,name,access_token,category,tasks"},
            access_token=access_token,
        )

    async def get_page_details(
        self,
        page_id: str | None = None,
        *,
        api_version: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        page = self._page(page_id)
        return await self.get(
            page,
            {"fields": PAGE_DETAIL_FIELDS},
            access_token=access_token,
            api_version=api_version,
        )

    async def get_page_insights(
        self,
        metrics: Sequence[str],
        *,
        page_id: str | None = None,
        period: str | None = None,
        since: str | None = None,
        until: str | None = None,
        limit: int | None = None,
        after: str | None = None,
        before: str | None = None,
        api_version: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        page = self._page(page_id)
        metrics = require_metrics(metrics)

        response = await self.get(
            f"{page}/insights",
            {
                "metric": ",".join(metrics),
                "period": period,
                "since": since,
                "until": until,
                "limit": limit,
                **cursor_params(after, before),
            },
            access_token=access_token,
            api_version=api_version,
        )

        result: dict[str, Any] = {"data": response.get("data"), "paging": response.get("paging")}
        if not period:
            result["warnings"] = [MISSING_PERIOD_WARNING]
        return result

    async def get_post_insights(
        self,
        post_id: str,
        metrics: Sequence[str],
        *,
        period: str | None = None,
        api_version: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        require(post_id, "post_id")
        metrics = require_metrics(metrics)
        return await self.get(
            f"{post_id}/insights",
            {"metric": ",".join(metrics), "period": period},
            access_token=access_token,
            api_version=api_version,
        )

    async def list_posts_with_insights(
        self,
        post_metrics: Sequence[str],
        *,
        page_id: str | None = None,
        limit: int = 25,
        after: str | None = None,
        before: str | None = None,
        api_version: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        page = self._page(page_id)
        post_metrics = require_metrics(post_metrics, "post metric")
        fields = f"{DEFAULT_POST_FIELDS},insights.metric({','.join(post_metrics)})"
        return await self.get(
            f"{page}/posts",
            {"fields": fields, "limit": limit, **cursor_params(after, before)},
            access_token=access_token,
            api_version=api_version,
        )

    async def get_page_feed(
        self,
        *,
        page_id: str | None = None,
        limit: int = 25,
        after: str | None = None,
        before: str | None = None,
        api_version: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        page = self._page(page_id)
        return await self.get(
            f"{page}/feed",
            {"fields": FEED_FIELDS, "limit": limit, **cursor_params(after, before)},
            access_token=access_token,
            api_version=api_version,
        )

    def list_known_metrics(self) -> dict[str, list[dict[str, Any]]]:
        return known_metrics()

    async def validate_access_token(
        self,
        access_token: str,
        *,
        fields: Sequence[str] | None = None,
        api_version: str | None = None,
    ) -> dict[str, Any]:
        """Check a token against ``/me``. Graph failures report ``isValid: False``."""
        require(access_token, "access_token")
        try:
            response = await self.get(
                "me",
                {"fields": ",".join(fields) if fields else "id,name"},
                access_token=access_token,
                api_version=api_version,
            )
        except SocialAnalyticsError as exc:
            return {
                "isValid": False,
                "error": {"code": exc.code, "subcode": exc.subcode, "message": str(exc)},
                "raw": exc.normalized.raw,
            }
        return {
            "isValid": True,
            "id": response.get("id"),
            "name": response.get("name"),
            "raw": response,
        }
