"""Redis client factory."""

from functools import lru_cache

import redis

from fluxfeed.domain.config import get_config


@lru_cache
def get_redis() -> redis.Redis:
    """Process-wide Redis client (singleton).

    Tests call get_redis.cache_clear() before swapping in a fake.
    """
    config = get_config()
    return redis.Redis.from_url(
        config.redis.url,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
