"""Configuration module for Redis-Cache."""

from .settings import CacheConfig, Settings, settings

__all__ = ["CacheConfig", "Settings", "settings"]
