"""
Sorted-set storage for one user's notification feed.

Every entry is a serialized notification whose score is its timestamp, so
Redis keeps the feed ordered and range queries map onto ZRANGEBYSCORE.

Two entries may share a score. They are kept as distinct members, but any
removal by score (``remove_score``, ``trim_by_score``) takes out all of them.
Two byte-identical payloads are a single member: appending one again is a no-op.
"""

from __future__ import annotations

import logging

import redis

from .cache import store_errors

logger = logging.getLogger(__name__)

FEED_KEY = "user:{user_id}:notifications"

Score = float | str


def feed_key(user_id: int | str) -> str:
    return FEED_KEY.format(user_id=user_id)


def _lower_bound(score: Score, exclusive: bool) -> str | float:
    if exclusive and score not in ("-inf", "+inf"):
        return f"({float(score)!r}"
    return score


class FeedStore:
    """Feed operations scoped to a single owner's sorted set."""

    def __init__(self, client: redis.Redis, user_id: int | str) -> None:
        if user_id is None:
            raise ValueError("FeedStore requires a user_id")
        self.client = client
        self.user_id = user_id
        self.key = feed_key(user_id)

    def append(self, payload: str, score: float) -> bool:
        """Insert a payload; returns False when the identical member was already stored."""
        with store_errors("append", self.key):
            added = self.client.zadd(self.key, {payload: float(score)})
        return added == 1

    def read(
        self,
        min_score: Score = "-inf",
        max_score: Score = "+inf",
        *,
        min_exclusive: bool = False,
        limit: int | None = None,
    ) -> list[str]:
        """Return payloads with scores in range, newest first."""
        start, num = (0, limit) if limit is not None else (None, None)
        with store_errors("read", self.key):
            return self.client.zrevrangebyscore(
                self.key,
                max_score,
                _lower_bound(min_score, min_exclusive),
                start=start,
                num=num,
            )

    def count(
        self,
        min_score: Score = "-inf",
        max_score: Score = "+inf",
        *,
        min_exclusive: bool = False,
    ) -> int:
        with store_errors("count", self.key):
            return int(self.client.zcount(self.key, _lower_bound(min_score, min_exclusive), max_score))

    def trim_by_rank(self, keep_newest: int) -> int:
        """Remove everything but the newest ``keep_newest`` entries."""
        if keep_newest < 0:
            raise ValueError("keep_newest must be >= 0")
        # Rank 0 is the oldest entry; -(n + 1) is the last one outside the newest n.
        with store_errors("trim_by_rank", self.key):
            removed = self.client.zremrangebyrank(self.key, 0, -(keep_newest + 1))
        if removed:
            logger.info(f"Trimmed {removed} notifications from {self.key} (kept newest {keep_newest})")
        return removed

    def trim_by_score(self, min_score_exclusive: float) -> int:
        """Remove entries scored strictly below the boundary."""
        with store_errors("trim_by_score", self.key):
            removed = self.client.zremrangebyscore(self.key, "-inf", f"({float(min_score_exclusive)!r}")
        if removed:
            logger.info(f"Trimmed {removed} notifications older than {min_score_exclusive} from {self.key}")
        return removed

    def remove_score(self, score: float) -> int:
        """Remove every entry at exactly this score, however many share it."""
        with store_errors("remove_score", self.key):
            return self.client.zremrangebyscore(self.key, float(score), float(score))

    def delete_all(self) -> bool:
        with store_errors("delete_all", self.key):
            return bool(self.client.delete(self.key))

    def exists(self) -> bool:
        with store_errors("exists", self.key):
            return bool(self.client.exists(self.key))
