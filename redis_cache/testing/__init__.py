"""Test support: a stub Redis server for exercising RedisCache."""

from .protocol import RequestType, RespParser, Response
from .server import StubRedisServer, StubServerThread, read_frame
from .store import StubStore

__all__ = [
    "RequestType",
    "RespParser",
    "Response",
    "StubRedisServer",
    "StubServerThread",
    "StubStore",
    "read_frame",
]
