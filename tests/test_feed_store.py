"""Test sorted-set feed storage."""

import pytest

from notifeed.errors import StoreUnavailable
from notifeed.feed_store import FeedStore, feed_key


@pytest.fixture
def store(redis_client) -> FeedStore:
    store = FeedStore(redis_client, 1)
    for score in (1.0, 2.0, 3.0, 4.0, 5.0):
        store.append(f"entry-{score}", score)
    return store


def test_feed_key():
    assert feed_key(1) == "user:1:notifications"


def test_requires_user(redis_client):
    with pytest.raises(ValueError):
        FeedStore(redis_client, None)


def test_read_newest_first(store):
    assert store.read() == ["entry-5.0", "entry-4.0", "entry-3.0", "entry-2.0", "entry-1.0"]


def test_read_order_is_non_increasing_regardless_of_insert_order(redis_client):
    store = FeedStore(redis_client, 2)
    for score in (3.5, 1.25, 9.0, 2.0, 7.75, 0.5):
        store.append(f"e{score}", score)
    scores = [float(payload[1:]) for payload in store.read()]
    assert scores == sorted(scores, reverse=True)


def test_read_range_inclusive(store):
    assert store.read(2.0, 4.0) == ["entry-4.0", "entry-3.0", "entry-2.0"]


def test_read_min_exclusive(store):
    assert store.read(3.0, min_exclusive=True) == ["entry-5.0", "entry-4.0"]


def test_read_limit(store):
    assert store.read(limit=2) == ["entry-5.0", "entry-4.0"]


def test_read_empty_feed(redis_client):
    assert FeedStore(redis_client, 42).read() == []


def test_count(store):
    assert store.count() == 5
    assert store.count(3.0) == 3
    assert store.count(3.0, min_exclusive=True) == 2
    assert store.count(2.0, 3.0) == 2


def test_same_score_entries_are_distinct(redis_client):
    store = FeedStore(redis_client, 1)
    assert store.append("a", 10.0) is True
    assert store.append("b", 10.0) is True
    assert sorted(store.read()) == ["a", "b"]


def test_identical_payload_is_not_duplicated(redis_client):
    store = FeedStore(redis_client, 1)
    assert store.append("a", 10.0) is True
    assert store.append("a", 10.0) is False
    assert store.count() == 1


@pytest.mark.parametrize("keep,remaining", [(3, 3), (5, 5), (10, 5), (0, 0)])
def test_trim_by_rank_keeps_newest(store, keep, remaining):
    store.trim_by_rank(keep)
    assert store.count() == remaining
    assert store.read() == ["entry-5.0", "entry-4.0", "entry-3.0", "entry-2.0", "entry-1.0"][:remaining]


def test_trim_by_rank_rejects_negative(store):
    with pytest.raises(ValueError):
        store.trim_by_rank(-1)


def test_trim_by_score_is_exclusive(store):
    assert store.trim_by_score(3.0) == 2
    assert store.read() == ["entry-5.0", "entry-4.0", "entry-3.0"]


def test_remove_score_removes_all_ties(redis_client):
    store = FeedStore(redis_client, 1)
    store.append("a", 10.0)
    store.append("b", 10.0)
    store.append("c", 11.0)
    assert store.remove_score(10.0) == 2
    assert store.read() == ["c"]


def test_delete_all(store):
    assert store.exists() is True
    assert store.delete_all() is True
    assert store.exists() is False
    assert store.delete_all() is False


def test_sub_second_scores_kept(redis_client):
    store = FeedStore(redis_client, 1)
    store.append("early", 1700000000.123456)
    store.append("late", 1700000000.123457)
    assert store.read(1700000000.123456, min_exclusive=True) == ["late"]


def test_store_unavailable(store, redis_server):
    redis_server.connected = False
    with pytest.raises(StoreUnavailable):
        store.read()
    with pytest.raises(StoreUnavailable):
        store.append("x", 1.0)
    with pytest.raises(StoreUnavailable):
        store.count()
