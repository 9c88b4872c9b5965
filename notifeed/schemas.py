from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# BASE SCHEMAS
# ============================================================================


class Problem(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs."""

    type: str = Field(default="about:blank")
    title: str
    status: int
    detail: str | None = None


# ============================================================================
# HEALTH
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"
    uptime_s: float | None = None


# ============================================================================
# NOTIFICATIONS
# ============================================================================


class Notification(BaseModel):
    """A stored notification with every field its variant populates."""

    model_config = ConfigDict(extra="allow")

    type: str
    user_id: int | str | None = None
    time: float

    actor_id: int | str | None = None
    actor_name: str | None = None
    actor_pic_url: str | None = None

    post_id: int | str | None = None
    post_type: Literal["Status", "Photo", "Video"] | None = None
    post_thumbnail_url: str | None = None
    post_user_id: int | str | None = None
    post_user_name: str | None = None

    comment_id: int | str | None = None
    comment_preview: str | None = None


class FeedItem(BaseModel):
    notification: Notification
    is_new: bool


class FeedResponse(BaseModel):
    """Notifications page, newest first."""

    items: list[FeedItem]
    skipped: int = Field(0, description="Stored entries that could not be decoded")


class NotificationCounts(BaseModel):
    total: int
    new: int
    new_display: str = Field(..., description="New count for badges, capped like '30+'")
    has_new: bool


class LastReadResponse(BaseModel):
    last_read: float
    confirmed: bool
