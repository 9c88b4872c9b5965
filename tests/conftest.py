from __future__ import annotations

from typing import Generator

import fakeredis
import pytest
from fastapi.testclient import TestClient

from notifeed.cache import set_redis_client
from notifeed.models import ActorRef, PostRef, PostType


@pytest.fixture()
def redis_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture()
def redis_client(redis_server: fakeredis.FakeServer) -> Generator[fakeredis.FakeRedis, None, None]:
    """An empty in-memory Redis, also installed as the shared client."""
    client = fakeredis.FakeRedis(server=redis_server, decode_responses=True)
    set_redis_client(client)
    try:
        yield client
    finally:
        set_redis_client(None)


@pytest.fixture()
def client(redis_client: fakeredis.FakeRedis) -> Generator[TestClient, None, None]:
    from notifeed.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def owner() -> ActorRef:
    return ActorRef(id=1, name="Giovanni Rossi", pic_url="https://cdn.example.com/u/1.png")


@pytest.fixture()
def actor() -> ActorRef:
    return ActorRef(id=2, name="Stefano Uli", pic_url="https://cdn.example.com/u/2.png")


@pytest.fixture()
def photo(owner: ActorRef) -> PostRef:
    return PostRef(
        id=10,
        post_type=PostType.PHOTO,
        user=owner,
        thumbnail_url="https://cdn.example.com/p/10_thumb.jpg",
    )
