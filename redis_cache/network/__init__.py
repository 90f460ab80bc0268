"""Network module for Redis-Cache."""

from .connection import ConnectionManager, default_connection_factory
from .executor import CommandExecutor

__all__ = ["CommandExecutor", "ConnectionManager", "default_connection_factory"]
