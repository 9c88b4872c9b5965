"""Notification feed endpoints."""

from __future__ import annotations

import logging

import redis
from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from .. import schemas, settings
from ..codec import to_fields
from ..deps import get_feed, get_redis
from ..lifecycle import delete_user_notifications
from ..retention import MaxCountPolicy
from ..services.notification_feed import NotificationFeed

router = APIRouter(prefix="/users/{user_id}/notifications", tags=["Notifications"])
logger = logging.getLogger(__name__)


def display_count(count: int, cap: int | None = None) -> str:
    """Badge text: the count itself up to ``cap``, then '<cap>+'."""
    cap = settings.NEW_COUNT_DISPLAY_CAP if cap is None else cap
    return str(count) if count <= cap else f"{cap}+"


@router.get("", response_model=schemas.FeedResponse)
def list_notifications(
    unread_only: bool = Query(False, description="Only return notifications newer than the last read"),
    max_num: int | None = Query(
        None, ge=0, description="Feed size kept after cleanup (default: NOTIFICATIONS_MAX_NUM)"
    ),
    feed: NotificationFeed = Depends(get_feed),
) -> schemas.FeedResponse:
    """
    List the user's notifications, newest first.

    Trims the stored feed to its newest entries before reading, then records
    the view as the pending last read. Entries that cannot be decoded are skipped.
    """
    keep = settings.NOTIFICATIONS_MAX_NUM if max_num is None else max_num
    page = feed.notifications(unread_only=unread_only, retention=MaxCountPolicy(keep))
    feed.mark_viewed()

    items = []
    invalid = 0
    for entry in page.entries:
        try:
            notification = schemas.Notification.model_validate(to_fields(entry.notification))
        except ValidationError as e:
            invalid += 1
            logger.warning(
                f"Notification at {entry.notification.time} for user {feed.user_id} does not fit the response: {e}"
            )
            continue
        items.append(schemas.FeedItem(notification=notification, is_new=entry.is_new))

    skipped = len(page.failures) + invalid
    if skipped:
        logger.warning(f"Skipped {skipped} notifications for user {feed.user_id}")

    return schemas.FeedResponse(items=items, skipped=skipped)


@router.get("/count", response_model=schemas.NotificationCounts)
def count_notifications(
    feed: NotificationFeed = Depends(get_feed),
) -> schemas.NotificationCounts:
    """Total and new notification counts for header badges."""
    new = feed.count_new_notifications()
    return schemas.NotificationCounts(
        total=feed.count_notifications(),
        new=new,
        new_display=display_count(new),
        has_new=new > 0,
    )


@router.post("/last-read/confirm", response_model=schemas.LastReadResponse)
def confirm_last_read(
    feed: NotificationFeed = Depends(get_feed),
) -> schemas.LastReadResponse:
    """Promote the pending last read (set when the feed was shown) to confirmed."""
    confirmed = feed.confirm_last_read()
    return schemas.LastReadResponse(last_read=feed.watermark.last_read(), confirmed=confirmed)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_notifications(
    user_id: int,
    client: redis.Redis = Depends(get_redis),
) -> None:
    """Delete the feed and read markers of a removed user."""
    delete_user_notifications(client, user_id)
