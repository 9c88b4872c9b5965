"""Test retention policy selection and cleanup."""

from datetime import datetime, timezone

import pytest

from notifeed.errors import InvalidRetentionConfig
from notifeed.feed_store import FeedStore
from notifeed.retention import CustomPolicy, MaxAgePolicy, MaxCountPolicy, RetentionPolicy


def _fill(store: FeedStore, scores) -> None:
    for score in scores:
        store.append(f"entry-{score}", score)


class TestFromConfig:
    def test_max_num(self):
        assert RetentionPolicy.from_config({"max_num": 30}) == MaxCountPolicy(30)

    def test_max_time(self):
        assert RetentionPolicy.from_config({"max_time": 100.5}) == MaxAgePolicy(100.5)

    def test_max_time_datetime(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert RetentionPolicy.from_config({"max_time": moment}) == MaxAgePolicy(moment.timestamp())

    def test_callback(self):
        def cleanup(client, key):
            return 0

        policy = RetentionPolicy.from_config(callback=cleanup)
        assert isinstance(policy, CustomPolicy)
        assert policy.callback is cleanup

    @pytest.mark.parametrize(
        "options,callback",
        [
            (None, None),
            ({}, None),
            ({"max_num": 1, "max_time": 2.0}, None),
            ({"max_num": 1}, lambda client, key: None),
            ({"max_count": 1}, None),
            ({"max_num": -1}, None),
            ({"max_num": "30"}, None),
            ({"max_num": True}, None),
            ({"max_time": "yesterday"}, None),
            ({"max_time": float("nan")}, None),
            ({"max_time": float("inf")}, None),
            ({"max_time": float("-inf")}, None),
        ],
    )
    def test_rejected(self, options, callback):
        with pytest.raises(InvalidRetentionConfig):
            RetentionPolicy.from_config(options, callback)

    def test_rejection_is_a_value_error(self):
        with pytest.raises(ValueError):
            RetentionPolicy.from_config({})


class TestMaxCount:
    def test_trims_to_newest(self, redis_client):
        store = FeedStore(redis_client, 1)
        _fill(store, range(1, 11))

        assert MaxCountPolicy(4).apply(store) == 6
        assert store.read() == ["entry-10", "entry-9", "entry-8", "entry-7"]

    @pytest.mark.parametrize("size", [0, 3, 4])
    def test_small_feed_untouched(self, redis_client, size):
        store = FeedStore(redis_client, 1)
        _fill(store, range(1, size + 1))

        assert MaxCountPolicy(4).apply(store) == 0
        assert store.count() == size


class TestMaxAge:
    def test_removes_strictly_older(self, redis_client):
        store = FeedStore(redis_client, 1)
        _fill(store, [1.0, 2.0, 3.0, 3.0001, 4.0])

        assert MaxAgePolicy(3.0).apply(store) == 2
        assert store.read() == ["entry-4.0", "entry-3.0001", "entry-3.0"]


class TestCustom:
    def test_gets_raw_client_and_key(self, redis_client):
        store = FeedStore(redis_client, 1)
        _fill(store, [1.0, 2.0])
        seen = {}

        def wipe(client, key):
            seen["key"] = key
            return client.zremrangebyrank(key, 0, -1)

        assert CustomPolicy(wipe).apply(store) == 2
        assert seen["key"] == "user:1:notifications"
        assert store.count() == 0

    def test_non_integer_result(self, redis_client):
        store = FeedStore(redis_client, 1)
        assert CustomPolicy(lambda client, key: None).apply(store) == 0
