"""Instagram tools — accounts, profile, insights, media, stories, hashtags, publishing limit."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from ..server import mcp, _error_response, _success_response, get_instagram_client

Period = Literal["day", "week", "days_28", "lifetime"]

_ACCOUNT_ID = Field(
    description="Instagram account ID. Optional if set via INSTAGRAM_ACCOUNT_ID or if only one account exists."
)


@mcp.tool()
async def instagram_list_accounts() -> str:
    """List all available Instagram Business accounts. Use this first to discover account IDs."""
    try:
        return _success_response(await get_instagram_client().list_accounts())
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_profile(
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Get Instagram business account profile information (username, followers, media count, etc.).

    If account_id is not provided, it is taken from the environment or discovered automatically.
    """
    try:
        return _success_response(await get_instagram_client().get_profile(account_id))
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_account_insights(
    metrics: Annotated[list[str], Field(description="Metrics to retrieve, e.g. reach, views, accounts_engaged, total_interactions, likes, comments, shares, saved, replies, follows_and_unfollows, profile_links_taps, follower_demographics, engaged_audience_demographics.")],
    period: Annotated[Period, Field(description="Time period for insights.")],
    metric_type: Annotated[Literal["time_series", "total_value"] | None, Field(description="How to aggregate results.")] = None,
    since: Annotated[int | None, Field(description="Unix timestamp for start of date range.")] = None,
    until: Annotated[int | None, Field(description="Unix timestamp for end of date range.")] = None,
    timeframe: Annotated[str | None, Field(description="Required for demographic metrics: this_month, this_week, last_14_days, last_30_days, last_90_days, prev_month.")] = None,
    breakdown: Annotated[str | None, Field(description="Break down results by: contact_button_type, follow_type, media_product_type, age, city, country, gender (only with metric_type=total_value).")] = None,
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Get account-level insights for Instagram. Supports demographic breakdowns and time series data."""
    try:
        result = await get_instagram_client().get_account_insights(
            metrics,
            period,
            metric_type=metric_type,
            since=since,
            until=until,
            breakdown=breakdown,
            timeframe=timeframe,
            account_id=account_id,
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_list_media(
    limit: Annotated[int, Field(description="Number of media items to retrieve (max 100).")] = 25,
    after: Annotated[str | None, Field(description="Pagination cursor for the next page.")] = None,
    before: Annotated[str | None, Field(description="Pagination cursor for the previous page.")] = None,
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Get recent media posts from the Instagram account with basic engagement data."""
    try:
        result = await get_instagram_client().list_media(
            limit, after=after, before=before, account_id=account_id
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_media_details(
    media_id: Annotated[str, Field(description="The ID of the media item.")],
) -> str:
    """Get caption, type, URL, permalink and engagement counts for one media post."""
    try:
        return _success_response(await get_instagram_client().get_media_details(media_id))
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_media_insights(
    media_id: Annotated[str, Field(description="The ID of the media item.")],
    metrics: Annotated[list[str], Field(description="Metrics for the media type, e.g. views, likes, comments, shares, reach, saved, total_interactions; Reels also avg_time_watched, total_time_watched; Stories also replies, navigation.")],
    period: Annotated[Period, Field(description="Time period (default: lifetime).")] = "lifetime",
) -> str:
    """Get insights for a specific Instagram media post. Available metrics depend on media type."""
    try:
        result = await get_instagram_client().get_media_insights(media_id, metrics, period)
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_stories(
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Get the account's current Stories (available for 24 hours after posting)."""
    try:
        return _success_response(await get_instagram_client().get_stories(account_id))
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_hashtag_search(
    hashtag: Annotated[str, Field(description="Hashtag name to search for, without the # symbol.")],
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Search for an Instagram hashtag ID by name.

    Limited to 30 unique hashtag searches per 7-day rolling window per account.
    """
    try:
        return _success_response(await get_instagram_client().search_hashtag(hashtag, account_id))
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_hashtag_media(
    hashtag_id: Annotated[str, Field(description="The hashtag ID from instagram_get_hashtag_search.")],
    type: Annotated[Literal["top_media", "recent_media"], Field(description="Top or recent media.")] = "top_media",
    limit: Annotated[int, Field(description="Number of media items to retrieve.")] = 25,
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Get top or recent media for a hashtag. Use instagram_get_hashtag_search first to get the ID."""
    try:
        result = await get_instagram_client().get_hashtag_media(
            hashtag_id, type, limit=limit, account_id=account_id
        )
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_content_publishing_limit(
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Check the content publishing quota usage and limits for the account."""
    try:
        return _success_response(await get_instagram_client().get_content_publishing_limit(account_id))
    except Exception as exc:
        return _error_response(exc)


@mcp.tool()
async def instagram_get_mentioned_media(
    limit: Annotated[int, Field(description="Number of media items to retrieve.")] = 25,
    account_id: Annotated[str | None, _ACCOUNT_ID] = None,
) -> str:
    """Get media where the Instagram account is mentioned or tagged by other users."""
    try:
        result = await get_instagram_client().get_mentioned_media(limit, account_id=account_id)
        return _success_response(result)
    except Exception as exc:
        return _error_response(exc)
