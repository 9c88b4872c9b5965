"""
Notification Feed Service.

Per-request access to one user's feed: saving, windowed reads with optional
retention cleanup, counts, and the read watermarks.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import redis

from ..codec import DecodeFailure, decode_many
from ..counters import CounterSnapshot
from ..errors import InvalidRetentionConfig
from ..feed_store import FeedStore
from ..lifecycle import delete_user_notifications
from ..models import Notification
from ..retention import CleanupCallback, RetentionPolicy
from ..watermark import ReadWatermark

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedEntry:
    notification: Notification
    is_new: bool


@dataclass
class FeedPage:
    """A decoded window of the feed, newest first."""

    entries: list[FeedEntry] = field(default_factory=list)
    failures: list[DecodeFailure] = field(default_factory=list)

    @property
    def notifications(self) -> list[Notification]:
        return [entry.notification for entry in self.entries]

    def raise_for_failures(self) -> None:
        """Raise the first decode error, for callers that cannot skip bad entries."""
        if self.failures:
            raise self.failures[0].error

    def __len__(self) -> int:
        return len(self.entries)


class NotificationFeed:
    """
    One user's feed for the duration of a request.

    Counts and watermarks are cached on this object; do not share it between
    requests or users.
    """

    def __init__(self, client: redis.Redis, user_id: int | str) -> None:
        self.client = client
        self.user_id = user_id
        self.store = FeedStore(client, user_id)
        self.watermark = ReadWatermark(client, user_id)
        self.counters = CounterSnapshot(self.store, self.watermark)

    def save(self, notification: Notification) -> bool:
        if notification.user_id != self.user_id:
            raise ValueError(
                f"Notification belongs to user {notification.user_id}, not {self.user_id}"
            )
        return notification.save(self.client)

    def notifications(
        self,
        unread_only: bool = False,
        retention: RetentionPolicy | Mapping[str, Any] | None = None,
        cleanup: CleanupCallback | None = None,
        limit: int | None = None,
    ) -> FeedPage:
        """
        Read the feed, newest first.

        Args:
            unread_only: Only entries newer than the confirmed watermark
            retention: Policy (or its configuration) applied before reading
            cleanup: Custom retention callback, exclusive with ``retention``
            limit: Maximum number of entries returned

        Returns:
            FeedPage with the decoded entries and any payloads that failed to decode
        """
        policy = self._resolve_policy(retention, cleanup)
        if policy is not None:
            removed = policy.apply(self.store)
            if removed:
                logger.info(f"Retention removed {removed} notifications for user {self.user_id}")

        last_read = self.watermark.last_read()
        if unread_only:
            payloads = self.store.read(last_read, min_exclusive=True, limit=limit)
        else:
            payloads = self.store.read(limit=limit)

        notifications, failures = decode_many(payloads)
        for failure in failures:
            logger.warning(
                f"Undecodable notification #{failure.index} for user {self.user_id}: {failure.error}"
            )

        entries = [FeedEntry(n, n.time > last_read) for n in notifications]
        return FeedPage(entries=entries, failures=failures)

    @staticmethod
    def _resolve_policy(
        retention: RetentionPolicy | Mapping[str, Any] | None,
        cleanup: CleanupCallback | None,
    ) -> RetentionPolicy | None:
        if isinstance(retention, RetentionPolicy):
            if cleanup is not None:
                raise InvalidRetentionConfig("Retention strategies are exclusive, got: policy, callback")
            return retention
        if retention is None and cleanup is None:
            return None
        return RetentionPolicy.from_config(retention, cleanup)

    def count_notifications(self) -> int:
        return self.counters.count_notifications()

    def count_new_notifications(self) -> int:
        return self.counters.count_new_notifications()

    def has_new_notifications(self) -> bool:
        return self.counters.has_new_notifications()

    def mark_viewed(self, now: float | datetime | None = None) -> bool:
        """Record that the feed was shown; confirmed later by ``confirm_last_read``."""
        return self.watermark.set_pending_last_read(time.time() if now is None else now)

    def confirm_last_read(self) -> bool:
        return self.watermark.confirm_last_read()

    def flush_notifications(self) -> bool:
        """Remove every notification, keeping the watermarks."""
        return self.store.delete_all()

    def delete(self) -> int:
        """Remove the feed and watermarks (user removal)."""
        return delete_user_notifications(self.client, self.user_id)
