from __future__ import annotations

import redis
from fastapi import Depends

from .cache import get_redis_client
from .services.notification_feed import NotificationFeed


def get_redis() -> redis.Redis:
    return get_redis_client()


def get_feed(user_id: int, client: redis.Redis = Depends(get_redis)) -> NotificationFeed:
    """A fresh feed per request, so cached counts never outlive it."""
    return NotificationFeed(client, user_id)
