"""Cleanup of a user's feed data when the user is removed."""

from __future__ import annotations

import logging

import redis

from .cache import store_errors
from .feed_store import feed_key
from .watermark import last_read_key, pending_last_read_key

logger = logging.getLogger(__name__)


def user_keys(user_id: int | str) -> list[str]:
    return [feed_key(user_id), last_read_key(user_id), pending_last_read_key(user_id)]


def delete_user_notifications(client: redis.Redis, user_id: int | str) -> int:
    """
    Delete the feed and both watermarks of a user.

    Safe to call again: missing keys are ignored.

    Returns:
        Number of keys that existed and were deleted
    """
    keys = user_keys(user_id)
    with store_errors("delete", keys[0]):
        deleted = client.delete(*keys)
    logger.info(f"Deleted {deleted} notification keys for user {user_id}")
    return deleted
