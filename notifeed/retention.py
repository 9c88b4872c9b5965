"""
Feed retention policies.

A policy is chosen from a configuration mapping with exactly one of
``max_num`` or ``max_time``, or from a callback that gets the raw Redis
client and the feed key. Anything else is rejected before Redis is touched.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

import redis

from .cache import store_errors
from .errors import InvalidRetentionConfig
from .feed_store import FeedStore
from .watermark import to_timestamp

logger = logging.getLogger(__name__)

RECOGNIZED_KEYS = ("max_num", "max_time")

CleanupCallback = Callable[[redis.Redis, str], Any]


class RetentionPolicy:
    """Base class; ``apply`` returns the number of entries removed when known."""

    def apply(self, store: FeedStore) -> int:
        raise NotImplementedError

    @staticmethod
    def from_config(
        options: Mapping[str, Any] | None = None,
        callback: CleanupCallback | None = None,
    ) -> RetentionPolicy:
        """
        Validate a retention configuration and return the matching policy.

        Raises:
            InvalidRetentionConfig: no strategy, more than one, an unknown key,
                or a value of the wrong type
        """
        options = dict(options or {})

        unknown = sorted(set(options) - set(RECOGNIZED_KEYS))
        if unknown:
            raise InvalidRetentionConfig(f"Unknown retention option(s): {', '.join(unknown)}")

        chosen = [key for key in RECOGNIZED_KEYS if key in options]
        if callback is not None:
            chosen.append("callback")

        if not chosen:
            raise InvalidRetentionConfig("Retention requires one of max_num, max_time or a callback")
        if len(chosen) > 1:
            raise InvalidRetentionConfig(
                f"Retention strategies are exclusive, got: {', '.join(chosen)}"
            )

        if callback is not None:
            if not callable(callback):
                raise InvalidRetentionConfig("Retention callback must be callable")
            return CustomPolicy(callback)

        if "max_num" in options:
            max_num = options["max_num"]
            if isinstance(max_num, bool) or not isinstance(max_num, int) or max_num < 0:
                raise InvalidRetentionConfig(f"max_num must be a non-negative integer, got {max_num!r}")
            return MaxCountPolicy(max_num)

        max_time = options["max_time"]
        if isinstance(max_time, bool) or not isinstance(max_time, (int, float, datetime)):
            raise InvalidRetentionConfig(f"max_time must be a timestamp or datetime, got {max_time!r}")
        boundary = to_timestamp(max_time)
        if not math.isfinite(boundary):
            raise InvalidRetentionConfig(f"max_time must be finite, got {max_time!r}")
        return MaxAgePolicy(boundary)


@dataclass(frozen=True)
class MaxCountPolicy(RetentionPolicy):
    """Keep only the newest ``max_num`` entries."""

    max_num: int

    def apply(self, store: FeedStore) -> int:
        count = store.count()
        if count <= self.max_num:
            return 0
        return store.trim_by_rank(self.max_num)


@dataclass(frozen=True)
class MaxAgePolicy(RetentionPolicy):
    """Drop entries older than ``max_time``; entries at exactly ``max_time`` stay."""

    max_time: float

    def apply(self, store: FeedStore) -> int:
        return store.trim_by_score(self.max_time)


@dataclass(frozen=True)
class CustomPolicy(RetentionPolicy):
    """Caller-supplied cleanup with direct access to Redis."""

    callback: CleanupCallback

    def apply(self, store: FeedStore) -> int:
        logger.debug(f"Running custom retention on {store.key}")
        with store_errors("custom retention", store.key):
            result = self.callback(store.client, store.key)
        return result if isinstance(result, int) and not isinstance(result, bool) else 0
