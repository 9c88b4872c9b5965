"""
Per-user read watermarks.

``last_read`` is the confirmed boundary between seen and new notifications.
``pending_last_read`` is set when a feed page is rendered and only becomes the
confirmed value on ``confirm_last_read``, so showing a page does not by itself
mark anything as read.
"""

from __future__ import annotations

import logging
from datetime import datetime

import redis

from .cache import store_errors

logger = logging.getLogger(__name__)

LAST_READ_KEY = "user:{user_id}:last_read"
PENDING_LAST_READ_KEY = "user:{user_id}:pending_last_read"


def last_read_key(user_id: int | str) -> str:
    return LAST_READ_KEY.format(user_id=user_id)


def pending_last_read_key(user_id: int | str) -> str:
    return PENDING_LAST_READ_KEY.format(user_id=user_id)


def to_timestamp(value: float | int | datetime) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return float(value)


class ReadWatermark:
    """
    Confirmed and pending watermarks for one user.

    Values are cached on first read and only replaced by writes made through
    this instance, so keep one per request.
    """

    def __init__(self, client: redis.Redis, user_id: int | str) -> None:
        self.client = client
        self.user_id = user_id
        self.last_read_key = last_read_key(user_id)
        self.pending_last_read_key = pending_last_read_key(user_id)
        self._cache: dict[str, float | None] = {}

    def _fetch(self, key: str) -> float | None:
        if key not in self._cache:
            with store_errors("get", key):
                raw = self.client.get(key)
            self._cache[key] = float(raw) if raw is not None else None
        return self._cache[key]

    def _store(self, key: str, value: float | int | datetime) -> bool:
        timestamp = to_timestamp(value)
        with store_errors("set", key):
            stored = bool(self.client.set(key, repr(timestamp)))
        if stored:
            self._cache[key] = timestamp
        else:
            logger.warning(f"Redis refused to set '{key}' to {timestamp}")
        return stored

    def last_read(self) -> float:
        """Confirmed watermark, 0.0 when never set."""
        return self._fetch(self.last_read_key) or 0.0

    def set_last_read(self, value: float | int | datetime) -> bool:
        return self._store(self.last_read_key, value)

    def pending_last_read(self) -> float:
        """Pending watermark, 0.0 when never set."""
        return self._fetch(self.pending_last_read_key) or 0.0

    def set_pending_last_read(self, value: float | int | datetime) -> bool:
        return self._store(self.pending_last_read_key, value)

    def confirm_last_read(self) -> bool:
        """
        Copy the pending watermark into the confirmed one.

        Two separate round trips: a failure in between leaves the confirmed
        value untouched. Without a stored pending value nothing is written.
        """
        pending = self._fetch(self.pending_last_read_key)
        if pending is None:
            logger.debug(f"No pending last read for user {self.user_id}, nothing to confirm")
            return False
        return self.set_last_read(pending)

    def refresh(self) -> None:
        """Forget cached values so the next read goes to Redis."""
        self._cache.clear()
