"""Tests for InstagramClient: request building, validation, account discovery."""

from __future__ import annotations

import pytest

from social_analytics_mcp.errors import AccountSelectionRequired, ErrorCode, SocialAnalyticsError
from social_analytics_mcp.platforms import InstagramClient

from conftest import connect_error, graph_error, reply

V = "/v23.0"
PAGES = {"data": [{"id": "p1", "name": "Page One"}, {"id": "p2", "name": "Page Two"}, {"id": "p3", "name": "Page Three"}]}


def _linked(account_id: str, username: str = "shop") -> dict:
    return {"id": "page", "instagram_business_account": {"id": account_id, "username": username, "name": username.title()}}


class TestListAccounts:
    @pytest.mark.asyncio
    async def test_skips_pages_that_error(self, instagram, graph):
        """Three pages, one linked account: two lookups fail and are skipped."""
        graph.on(f"{V}/me/accounts", reply(200, PAGES))
        graph.on(f"{V}/p1", graph_error(400, 100, "Unsupported get request"))
        graph.on(f"{V}/p2", reply(200, _linked("17841")))
        graph.on(f"{V}/p3", connect_error())

        accounts = await instagram.list_accounts()

        assert accounts == [
            {"id": "17841", "username": "shop", "name": "Shop", "pageId": "p2", "pageName": "Page Two"},
        ]

    @pytest.mark.asyncio
    async def test_skips_malformed_linked_account(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": [{"id": "p1", "name": "One"}, {"id": "p2", "name": "Two"}]}))
        graph.on(f"{V}/p1", reply(200, {"instagram_business_account": {"id": "1"}}))
        graph.on(f"{V}/p2", reply(200, {"instagram_business_account": {"username": "orphan"}}))

        accounts = await instagram.list_accounts()

        assert accounts == [{"id": "1", "username": "Unknown", "name": "Unknown", "pageId": "p1", "pageName": "One"}]

    @pytest.mark.asyncio
    async def test_skips_non_object_response_and_page_without_id(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": [{"name": "No id"}, {"id": "p1", "name": "One"}, {"id": "p2", "name": "Two"}]}))
        graph.on(f"{V}/p1", reply(200, ["unexpected"]))
        graph.on(f"{V}/p2", reply(200, _linked("2")))

        accounts = await instagram.list_accounts()

        assert [a["id"] for a in accounts] == ["2"]

    @pytest.mark.asyncio
    async def test_skips_pages_without_linked_account(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": [{"id": "p1", "name": "One"}]}))
        graph.on(f"{V}/p1", reply(200, {"id": "p1"}))
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await instagram.list_accounts()
        assert exc_info.value.code == ErrorCode.VALIDATION
        assert "No Instagram Business accounts found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_no_pages(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": []}))
        with pytest.raises(SocialAnalyticsError, match="No Facebook pages found"):
            await instagram.list_accounts()

    @pytest.mark.asyncio
    async def test_missing_username_defaults(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": [{"id": "p1", "name": "One"}]}))
        graph.on(f"{V}/p1", reply(200, {"instagram_business_account": {"id": "9"}}))
        accounts = await instagram.list_accounts()
        assert accounts[0]["username"] == "Unknown"
        assert accounts[0]["name"] == "Unknown"

    @pytest.mark.asyncio
    async def test_page_listing_failure_propagates(self, instagram, graph):
        graph.on(f"{V}/me/accounts", graph_error(401, 190, "Invalid OAuth access token", type_="OAuthException"))
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await instagram.list_accounts()
        assert exc_info.value.code == ErrorCode.OAUTH


class TestAccountResolution:
    @pytest.mark.asyncio
    async def test_single_account_discovered_once(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": [{"id": "p1", "name": "One"}]}))
        graph.on(f"{V}/p1", reply(200, _linked("17841")))
        graph.on(f"{V}/17841", reply(200, {"id": "17841", "username": "shop"}))

        await instagram.get_profile()
        await instagram.get_profile()

        assert len(graph.calls(f"{V}/me/accounts")) == 1
        assert len(graph.calls(f"{V}/17841")) == 2

    @pytest.mark.asyncio
    async def test_multiple_accounts_ask_for_selection(self, instagram, graph):
        graph.on(f"{V}/me/accounts", reply(200, {"data": [{"id": "p1", "name": "One"}, {"id": "p2", "name": "Two"}]}))
        graph.on(f"{V}/p1", reply(200, _linked("1", "alpha")))
        graph.on(f"{V}/p2", reply(200, _linked("2", "beta")))
        with pytest.raises(AccountSelectionRequired) as exc_info:
            await instagram.get_profile()
        assert [c["id"] for c in exc_info.value.candidates] == ["1", "2"]
        assert "@alpha" in str(exc_info.value) and "@beta" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_configured_account_skips_discovery(self, executor, graph):
        client = InstagramClient(executor, access_token="t", account_id="42")
        graph.on(f"{V}/42", reply(200, {"id": "42"}))
        assert await client.get_profile() == {"id": "42"}
        assert graph.calls(f"{V}/me/accounts") == []

    @pytest.mark.asyncio
    async def test_missing_token_is_oauth_error(self, executor, graph):
        client = InstagramClient(executor, account_id="42")
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await client.get_profile()
        assert exc_info.value.code == ErrorCode.OAUTH
        assert graph.requests == []


class TestAccountInsights:
    @pytest.mark.asyncio
    async def test_empty_metrics_fails_without_network(self, instagram, graph):
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await instagram.get_account_insights([], "day", account_id="42")
        assert exc_info.value.code == ErrorCode.VALIDATION
        assert graph.requests == []

    @pytest.mark.asyncio
    async def test_builds_query(self, instagram, graph):
        payload = {"data": [{"name": "reach", "period": "day", "values": []}]}
        graph.on(f"{V}/42/insights", reply(200, payload))
        result = await instagram.get_account_insights(
            ["reach", "views"], "day", metric_type="total_value", since=1700000000, until=1700086400, account_id="42"
        )
        assert result == payload
        params = graph.requests[0].url.params
        assert params["metric"] == "reach,views"
        assert params["period"] == "day"
        assert params["metric_type"] == "total_value"
        assert params["since"] == "1700000000"
        assert params["until"] == "1700086400"
        assert params["access_token"] == "ig-token"
        assert "breakdown" not in params
        assert "timeframe" not in params

    @pytest.mark.asyncio
    async def test_demographic_metrics_default_breakdown(self, instagram, graph):
        graph.on(f"{V}/42/insights", reply(200, {"data": []}))
        await instagram.get_account_insights(
            ["follower_demographics"], "lifetime", metric_type="total_value", timeframe="this_month", account_id="42"
        )
        params = graph.requests[0].url.params
        assert params["breakdown"] == "country"
        assert params["timeframe"] == "this_month"

    @pytest.mark.asyncio
    async def test_explicit_breakdown_kept(self, instagram, graph):
        graph.on(f"{V}/42/insights", reply(200, {"data": []}))
        await instagram.get_account_insights(["follower_demographics"], "lifetime", breakdown="age", account_id="42")
        assert graph.requests[0].url.params["breakdown"] == "age"


class TestMedia:
    @pytest.mark.asyncio
    async def test_list_media_with_cursor(self, instagram, graph):
        payload = {"data": [{"id": "m1"}], "paging": {"cursors": {"before": "B", "after": "A"}, "next": "https://next"}}
        graph.on(f"{V}/42/media", reply(200, payload))
        result = await instagram.list_media(10, after="A0", account_id="42")
        assert result == payload
        params = graph.requests[0].url.params
        assert params["limit"] == "10"
        assert params["after"] == "A0"
        assert "before" not in params

    @pytest.mark.asyncio
    async def test_media_insights_default_period(self, instagram, graph):
        graph.on(f"{V}/m1/insights", reply(200, {"data": []}))
        await instagram.get_media_insights("m1", ["views", "likes"])
        params = graph.requests[0].url.params
        assert params["metric"] == "views,likes"
        assert params["period"] == "lifetime"

    @pytest.mark.asyncio
    async def test_media_insights_requires_metrics(self, instagram, graph):
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await instagram.get_media_insights("m1", [])
        assert exc_info.value.code == ErrorCode.VALIDATION
        assert graph.requests == []

    @pytest.mark.asyncio
    async def test_media_details_requires_id(self, instagram, graph):
        with pytest.raises(SocialAnalyticsError, match="media_id is required"):
            await instagram.get_media_details("")
        assert graph.requests == []

    @pytest.mark.asyncio
    async def test_stories_and_mentions(self, instagram, graph):
        graph.on(f"{V}/42/stories", reply(200, {"data": [{"id": "s1"}]}))
        graph.on(f"{V}/42/tags", reply(200, {"data": [{"id": "t1"}]}))
        assert (await instagram.get_stories("42"))["data"] == [{"id": "s1"}]
        assert (await instagram.get_mentioned_media(5, account_id="42"))["data"] == [{"id": "t1"}]
        assert graph.calls(f"{V}/42/tags")[0].url.params["limit"] == "5"


class TestHashtags:
    @pytest.mark.asyncio
    async def test_search_strips_hash(self, instagram, graph):
        graph.on(f"{V}/ig_hashtag_search", reply(200, {"data": [{"id": "h1"}]}))
        result = await instagram.search_hashtag("#coffee", account_id="42")
        assert result == {"id": "h1", "hashtag": "coffee"}
        params = graph.requests[0].url.params
        assert params["q"] == "coffee"
        assert params["user_id"] == "42"

    @pytest.mark.asyncio
    async def test_search_no_match(self, instagram, graph):
        graph.on(f"{V}/ig_hashtag_search", reply(200, {"data": []}))
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await instagram.search_hashtag("nothing", account_id="42")
        assert exc_info.value.code == ErrorCode.GRAPH
        assert exc_info.value.normalized.raw == {"data": []}

    @pytest.mark.asyncio
    async def test_hashtag_media_type_validated(self, instagram, graph):
        with pytest.raises(SocialAnalyticsError) as exc_info:
            await instagram.get_hashtag_media("h1", "popular", account_id="42")
        assert exc_info.value.code == ErrorCode.VALIDATION
        assert graph.requests == []

    @pytest.mark.asyncio
    async def test_hashtag_recent_media(self, instagram, graph):
        graph.on(f"{V}/h1/recent_media", reply(200, {"data": []}))
        await instagram.get_hashtag_media("h1", "recent_media", limit=3, account_id="42")
        params = graph.requests[0].url.params
        assert params["user_id"] == "42"
        assert params["limit"] == "3"

    @pytest.mark.asyncio
    async def test_publishing_limit(self, instagram, graph):
        payload = {"data": [{"config": {"quota_total": 50, "quota_duration": 86400}, "quota_usage": 2}]}
        graph.on(f"{V}/42/content_publishing_limit", reply(200, payload))
        assert await instagram.get_content_publishing_limit("42") == payload


class TestApiVersion:
    @pytest.mark.asyncio
    async def test_configured_version_used_in_path(self, executor, graph):
        client = InstagramClient(executor, access_token="t", account_id="42", api_version="v21.0")
        graph.on("/v21.0/42", reply(200, {"id": "42"}))
        assert await client.get_profile() == {"id": "42"}
