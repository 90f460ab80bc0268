"""
Redis-Cache: Redis Backend for a Synchronous Cache Interface

A thread-safe, blocking cache backend that keeps its entries in a Redis
server, with lazy connection and delayed reconnection after failures.
"""

from .cache import CacheInterface, GetResult, KeyState, RedisCache, ResultCollector
from .config.settings import CacheConfig

__version__ = "1.0.0"

__all__ = [
    "CacheConfig",
    "CacheInterface",
    "GetResult",
    "KeyState",
    "RedisCache",
    "ResultCollector",
]
