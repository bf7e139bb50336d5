"""Known Facebook insight metrics and the periods each one accepts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class KnownMetric(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    periods: tuple[str, ...]
    notes: str | None = None


_ROLLING = ("day", "week", "days_28")

KNOWN_PAGE_METRICS: tuple[KnownMetric, ...] = (
    KnownMetric(name="page_impressions", periods=_ROLLING),
    KnownMetric(name="page_impressions_unique", periods=_ROLLING),
    KnownMetric(name="page_engaged_users", periods=_ROLLING),
    KnownMetric(name="page_post_engagements", periods=_ROLLING),
    KnownMetric(name="page_views_total", periods=_ROLLING),
    KnownMetric(name="page_fans", periods=_ROLLING + ("lifetime",)),
    KnownMetric(
        name="page_fan_adds_unique",
        periods=_ROLLING + ("lifetime",),
        notes="Requires period when not lifetime",
    ),
)

KNOWN_POST_METRICS: tuple[KnownMetric, ...] = (
    KnownMetric(name="post_impressions", periods=_ROLLING),
    KnownMetric(name="post_impressions_unique", periods=_ROLLING),
    KnownMetric(name="post_engaged_users", periods=_ROLLING),
)


def known_metrics() -> dict[str, list[dict[str, Any]]]:
    return {
        "page": [m.model_dump(mode="json", exclude_none=True) for m in KNOWN_PAGE_METRICS],
        "post": [m.model_dump(mode="json", exclude_none=True) for m in KNOWN_POST_METRICS],
    }
