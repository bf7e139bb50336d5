"""Facebook Page tools — pages, page details, insights, posts, feed, metrics, token validation."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from ..server import mcp, _error_response, _success_response, get_facebook_client

Period = Literal["day", "week", "days_28", "lifetime"]

_PAGE_ID = Field(description="Facebook Page ID. Optional if set via FACEBOOK_PAGE_ID.")
_API_VERSION = Field(description="Graph API version, defaults to v22.0.")
_ACCESS_TOKEN = Field(description="Override Page access token.")
_AFTER = Field(description="Pagination cursor for the next page.")
_BEFORE = Field(description="Pagination cursor for the previous page.")


@mcp.tool()
async def facebook_list_pages(
    access_token: Annotated[str | None, _ACCESS_TOKEN] = None,
) -> str:
    """List all Facebook Pages accessible with the current access token. Use this first to discover page IDs."""
    try:
        return _success_response(await get_facebook_client().list_pages(access_token))
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def facebook_get_page_details(
    page_id: Annotated[str | None, _PAGE_ID] = None,
    api_version: Annotated[str | None, _API_VERSION] = None,
    access_token: Annotated[str | None, _ACCESS_TOKEN] = None,
) -> str:
    """Get name, category, follower count, about section and contact info for a Facebook Page."""
    try:
        result = await get_facebook_client().get_page_details(
            page_id, api_version=api_version, access_token=access_token
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def facebook_get_page_insights(
    metrics: Annotated[list[str], Field(description="Page insight metric names, e.g. page_impressions, page_engaged_users.")],
    page_id: Annotated[str | None, _PAGE_ID] = None,
    period: Annotated[Period | None, Field(description="Period to aggregate metrics, varies per metric.")] = None,
    since: Annotated[str | None, Field(description="Start of date range: YYYY-MM-DD or UNIX timestamp.")] = None,
    until: Annotated[str | None, Field(description="End of date range: YYYY-MM-DD or UNIX timestamp.")] = None,
    limit: Annotated[int | None, Field(description="Limit for the number of insight values returned (1-200).")] = None,
    after: Annotated[str | None, _AFTER] = None,
    before: Annotated[str | None, _BEFORE] = None,
    api_version: Annotated[str | None, _API_VERSION] = None,
    access_token: Annotated[str | None, _ACCESS_TOKEN] = None,
) -> str:
    """Fetch page-level insights for a Facebook Page using the Graph API insights edge."""
    try:
        result = await get_facebook_client().get_page_insights(
            metrics,
            page_id=page_id,
            period=period,
            since=since,
            until=until,
            limit=limit,
            after=after,
            before=before,
            api_version=api_version,
            access_token=access_token,
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def facebook_get_post_insights(
    post_id: Annotated[str, Field(description="Facebook Post ID.")],
    metrics: Annotated[list[str], Field(description="Post insight metric names, e.g. post_impressions, post_engaged_users.")],
    period: Annotated[Period | None, Field(description="Period to aggregate metrics, varies per metric.")] = None,
    api_version: Annotated[str | None, _API_VERSION] = None,
    access_token: Annotated[str | None, _ACCESS_TOKEN] = None,
) -> str:
    """Fetch insights for a specific Facebook Page post."""
    try:
        result = await get_facebook_client().get_post_insights(
            post_id, metrics, period=period, api_version=api_version, access_token=access_token
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def facebook_list_posts_with_insights(
    post_metrics: Annotated[list[str], Field(description="Post metrics to include inline.")],
    page_id: Annotated[str | None, _PAGE_ID] = None,
    limit: Annotated[int, Field(description="Number of posts to retrieve (1-100).")] = 25,
    after: Annotated[str | None, _AFTER] = None,
    before: Annotated[str | None, _BEFORE] = None,
    api_version: Annotated[str | None, _API_VERSION] = None,
    access_token: Annotated[str | None, _ACCESS_TOKEN] = None,
) -> str:
    """List Facebook Page posts including selected inline insight metrics in a single request."""
    try:
        result = await get_facebook_client().list_posts_with_insights(
            post_metrics,
            page_id=page_id,
            limit=limit,
            after=after,
            before=before,
            api_version=api_version,
            access_token=access_token,
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def facebook_get_page_feed(
    page_id: Annotated[str | None, _PAGE_ID] = None,
    limit: Annotated[int, Field(description="Number of posts to retrieve (1-100).")] = 25,
    after: Annotated[str | None, _AFTER] = None,
    before: Annotated[str | None, _BEFORE] = None,
    api_version: Annotated[str | None, _API_VERSION] = None,
    access_token: Annotated[str | None, _ACCESS_TOKEN] = None,
) -> str:
    """Get the Page feed with reactions, comments and shares counts per post."""
    try:
        result = await get_facebook_client().get_page_feed(
            page_id=page_id,
            limit=limit,
            after=after,
            before=before,
            api_version=api_version,
            access_token=access_token,
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
def facebook_list_known_metrics() -> str:
    """List known Facebook Page and Post metrics with their valid periods."""
    try:
        return _success_response(get_facebook_client().list_known_metrics())
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def facebook_validate_token(
    access_token: Annotated[str, Field(description="The access token to validate.")],
    fields: Annotated[list[str] | None, Field(description="Fields to request from /me (default: id, name).")] = None,
    api_version: Annotated[str | None, _API_VERSION] = None,
) -> str:
    """Validate a Facebook access token against the /me endpoint. Returns validity, user ID and name."""
    try:
        result = await get_facebook_client().validate_access_token(
            access_token, fields=fields, api_version=api_version
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)
