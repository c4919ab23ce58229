"""Redis infrastructure — client, typed cache."""

from .cache import TypedCache
from .client import get_redis

__all__ = ["get_redis", "TypedCache"]
