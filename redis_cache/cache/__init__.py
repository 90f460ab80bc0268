"""Cache module for Redis-Cache."""

from .interface import CacheInterface, GetResult, KeyState, ResultCollector
from .redis_cache import RedisCache

__all__ = ["CacheInterface", "GetResult", "KeyState", "RedisCache", "ResultCollector"]
