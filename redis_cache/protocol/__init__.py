"""Protocol module for Redis-Cache."""

from .commands import Command, Reply, ReplyType
from .validator import ReplyValidator

__all__ = [
    "Command",
    "Reply",
    "ReplyType",
    "ReplyValidator",
]
