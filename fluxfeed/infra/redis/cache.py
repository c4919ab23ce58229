"""TypedCache — Redis cache that round-trips Pydantic models.

Usage:
    from fluxfeed.domain import SignalResponse
    cache = TypedCache(redis_client, "fluxfeed:signal:BTC:1h:60", SignalResponse, ttl=30)
    cache.set(response)
    cached = cache.get()  # -> SignalResponse | None
"""

import logging
from typing import Generic, TypeVar

import redis
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class TypedCache(Generic[T]):
    """Redis cache with guaranteed Pydantic (de)serialisation for one key."""

    def __init__(
        self,
        client: redis.Redis,
        key: str,
        model_class: type[T],
        ttl: int | None = None,
    ):
        self._client = client
        self._key = key
        self._model_class = model_class
        self._ttl = ttl

    def get(self) -> T | None:
        """Read from cache. None when missing or unparsable."""
        raw = self._client.get(self._key)
        if raw is None:
            return None
        try:
            return self._model_class.model_validate_json(raw)
        except Exception:
            logger.warning("Cache parse failed for key=%s", self._key)
            return None

    def set(self, value: T) -> None:
        """Write to cache."""
        data = value.model_dump_json(by_alias=True)
        if self._ttl:
            self._client.setex(self._key, self._ttl, data)
        else:
            self._client.set(self._key, data)
