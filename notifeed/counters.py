"""Per-request notification counts."""

from __future__ import annotations

from .feed_store import FeedStore
from .watermark import ReadWatermark


class CounterSnapshot:
    """
    Total and new counts, each fetched once and then held.

    Notifications saved after a count was taken are not reflected; build a new
    snapshot (a new request) to see them.
    """

    def __init__(self, store: FeedStore, watermark: ReadWatermark) -> None:
        self.store = store
        self.watermark = watermark
        self._total: int | None = None
        self._new: int | None = None

    def count_notifications(self) -> int:
        if self._total is None:
            self._total = self.store.count()
        return self._total

    def count_new_notifications(self) -> int:
        """Entries strictly newer than the confirmed watermark."""
        if self._new is None:
            self._new = self.store.count(self.watermark.last_read(), min_exclusive=True)
        return self._new

    def has_new_notifications(self) -> bool:
        return self.count_new_notifications() > 0
