"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import asyncio
import socket
import threading
import time
from contextlib import closing
from typing import AsyncGenerator, Generator, Optional
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from redis_cache.cache.redis_cache import RedisCache
from redis_cache.config.settings import CacheConfig
from redis_cache.testing.protocol import RespParser
from redis_cache.testing.server import StubRedisServer, StubServerThread
from redis_cache.testing.store import StubStore


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll predicate until it returns True or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class FakeClock:
    """Manually advanced time source, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Unit Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_config() -> CacheConfig:
    """Config pointing nowhere in particular; unit tests mock the connection."""
    return CacheConfig(host="redis.test", port=6379, reconnection_delay_ms=1000)


@pytest.fixture
def connection() -> MagicMock:
    """A connected redis-py Connection double answering +OK."""
    conn = MagicMock(name="connection")
    conn.read_response.return_value = b"OK"
    return conn


@pytest.fixture
def connection_factory(connection: MagicMock) -> MagicMock:
    return MagicMock(name="connection_factory", return_value=connection)


@pytest.fixture
def mocked_cache(cache_config, clock, connection_factory) -> Generator[RedisCache, None, None]:
    """A started RedisCache whose connections come from connection_factory."""
    cache = RedisCache(
        cache_config,
        threading.Lock(),
        clock=clock,
        connection_factory=connection_factory,
    )
    cache.start_up()
    yield cache
    cache.shut_down()


# ============================================================================
# Stub Server Fixtures
# ============================================================================

@pytest.fixture
def parser() -> RespParser:
    return RespParser()


@pytest.fixture
def stub_store() -> StubStore:
    return StubStore()


@pytest.fixture
def stub() -> Generator[StubServerThread, None, None]:
    """A stub Redis server running on a background thread."""
    with StubServerThread() as srv:
        yield srv


def make_cache(port: int, clock=None, delay_ms: int = 1000, **config) -> RedisCache:
    return RedisCache(
        CacheConfig(host="127.0.0.1", port=port, reconnection_delay_ms=delay_ms, **config),
        threading.Lock(),
        clock=clock,
    )


@pytest.fixture
def cache(stub: StubServerThread, clock: FakeClock) -> Generator[RedisCache, None, None]:
    """A started RedisCache connected (lazily) to the stub server."""
    cache = make_cache(stub.port, clock=clock)
    cache.start_up()
    yield cache
    cache.shut_down()


@pytest_asyncio.fixture
async def stub_server() -> AsyncGenerator[StubRedisServer, None]:
    """A stub server on the test's own event loop."""
    srv = StubRedisServer(host='127.0.0.1', port=0)
    await srv.start()

    yield srv

    await srv.stop()


# ============================================================================
# Client Fixtures
# ============================================================================

class RespClient:
    """
    Helper class for talking raw RESP to a server.

    Usage:
        async with RespClient('127.0.0.1', port) as client:
            reply = await client.send_command("SET", "key", "value")
            assert reply == b"+OK\\r\\n"
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    async def connect(self) -> None:
        self.reader, self.writer = await asyncio.open_connection(self.host, self.port)

    async def disconnect(self) -> None:
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass

    async def send_raw(self, data: bytes) -> bytes:
        """Send raw bytes and return one raw reply."""
        self.writer.write(data)
        await self.writer.drain()
        return await self.read_reply()

    async def send_command(self, *args) -> bytes:
        """Send a command as a RESP array and return the raw reply."""
        parts = [arg if isinstance(arg, bytes) else str(arg).encode() for arg in args]
        data = b"*%d\r\n" % len(parts)
        for part in parts:
            data += b"$%d\r\n%s\r\n" % (len(part), part)
        return await self.send_raw(data)

    async def read_reply(self) -> bytes:
        line = await self.reader.readline()
        if line.startswith(b"$") and not line.startswith(b"$-1"):
            length = int(line[1:].strip())
            line += await self.reader.readexactly(length + 2)
        return line

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
