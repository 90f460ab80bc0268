"""
Redis-Cache Configuration Settings

This module contains the configuration for the Redis cache adapter:
environment-driven defaults (Settings) and the immutable per-adapter
configuration (CacheConfig).
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass
class Settings:
    """Adapter configuration settings."""

    # Remote store
    HOST: str = os.environ.get("REDIS_CACHE_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("REDIS_CACHE_PORT", "6379"))

    # Reconnection settings
    RECONNECTION_DELAY_MS: int = int(
        os.environ.get("REDIS_CACHE_RECONNECTION_DELAY_MS", "1000")
    )

    # Whether error replies from the server fail the operation
    SERVER_ERRORS_ARE_FAILURES: bool = _env_bool("REDIS_CACHE_SERVER_ERRORS_ARE_FAILURES")

    # Logging settings
    DEBUG: bool = _env_bool("REDIS_CACHE_DEBUG")
    LOG_LEVEL: str = os.environ.get("REDIS_CACHE_LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class CacheConfig:
    """
    Immutable configuration of a single RedisCache instance.

    Attributes:
        host: Remote store host name or address
        port: Remote store TCP port
        reconnection_delay_ms: Minimum wait between failed connection attempts
        server_errors_are_failures: If True, an error reply from the server
            fails the operation; otherwise it is only logged
    """
    host: str
    port: int
    reconnection_delay_ms: int = 1000
    server_errors_are_failures: bool = False

    def __post_init__(self):
        if not self.host:
            raise ValueError("host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")
        if self.reconnection_delay_ms < 0:
            raise ValueError("reconnection_delay_ms must be non-negative")

    @property
    def reconnection_delay(self) -> float:
        """Reconnection delay in seconds."""
        return self.reconnection_delay_ms / 1000.0

    @classmethod
    def from_settings(cls, source: Settings = None) -> "CacheConfig":
        """Build a CacheConfig from a Settings instance (default: global settings)."""
        source = source if source is not None else settings
        return cls(
            host=source.HOST,
            port=source.PORT,
            reconnection_delay_ms=source.RECONNECTION_DELAY_MS,
            server_errors_are_failures=source.SERVER_ERRORS_ARE_FAILURES,
        )


# Global settings instance
settings = Settings()
