"""Redis client utility functions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import redis

from . import settings
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Redis connection
_redis_client: redis.Redis | None = None


def create_redis_client(url: str | None = None, timeout: float | None = None) -> redis.Redis:
    """
    Build a Redis client for the feed keys.

    Args:
        url: Redis URL (default: settings.REDIS_URL)
        timeout: Per round trip timeout in seconds (default: settings.REDIS_SOCKET_TIMEOUT)

    Returns:
        Client returning str values
    """
    redis_url = url or settings.REDIS_URL
    socket_timeout = settings.REDIS_SOCKET_TIMEOUT if timeout is None else timeout

    return redis.from_url(
        redis_url,
        decode_responses=True,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )


def get_redis_client() -> redis.Redis:
    """
    Get or create the shared Redis client instance.

    The client is created lazily; connectivity is checked on the first command,
    so an unreachable server surfaces as StoreUnavailable at call time.
    """
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    _redis_client = create_redis_client()
    logger.info(f"Redis client created for {settings.REDIS_URL}")
    return _redis_client


def set_redis_client(client: redis.Redis | None) -> None:
    """Replace the shared client (None drops it so the next call rebuilds it)."""
    global _redis_client
    _redis_client = client


@contextmanager
def store_errors(operation: str, key: str) -> Iterator[None]:
    """
    Translate Redis transport failures into StoreUnavailable.

    Errors are never retried here; the caller decides what to do.
    """
    try:
        yield
    except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
        logger.error(f"Redis {operation} failed for key '{key}': {e}")
        raise StoreUnavailable(f"Redis {operation} failed for key '{key}': {e}") from e


def ping() -> bool:
    """Return True if Redis answers a PING."""
    client = get_redis_client()
    with store_errors("ping", "-"):
        return bool(client.ping())
