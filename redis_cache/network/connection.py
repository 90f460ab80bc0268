"""
Connection Lifecycle

Owns the single connection to the remote store and the reconnection
policy:

1. If a (re-)connection attempt fails, try again on a later operation,
   but not before reconnection_delay has passed since the attempt.
2. If an operation fails with a communication or protocol error, drop
   the connection and allow the very next operation to reconnect with
   no delay.

This keeps an unreachable server from being hammered while still
recovering quickly from network glitches on a healthy link.

All methods expect the caller to hold the adapter's guard.
"""

import logging
import time
from typing import Callable, Optional

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from ..config.settings import CacheConfig
from ..errors import CacheConnectionError

logger = logging.getLogger(__name__)


def default_connection_factory(host: str, port: int) -> redis.Connection:
    """
    Create an unconnected redis-py Connection.

    The connection speaks RESP2 and skips the HELLO and CLIENT SETINFO
    handshakes, so the only commands on the wire are the cache's own.
    Retries inside the client library are disabled. No timeouts are set.
    """
    return redis.Connection(
        host=host,
        port=port,
        socket_timeout=None,
        socket_connect_timeout=None,
        retry=Retry(NoBackoff(), 0),
        protocol=2,
        lib_name=None,
        lib_version=None,
    )


class ConnectionManager:
    """
    Tracks the connection handle, the retry deadline and the started flag.

    Attributes:
        config: Immutable adapter configuration
        handle: The live connection, or None while disconnected
        next_reconnect_at: Clock time before which no connection attempt is
            made; meaningful only while handle is None
        started: Set by start_up(), cleared by shut_down()
        reconnect_attempts: Number of connection attempts made so far
    """

    def __init__(
            self,
            config: CacheConfig,
            clock: Callable[[], float] = None,
            connection_factory: Callable[[str, int], redis.Connection] = None,
            message_handler: logging.Logger = None,
    ):
        self.config = config
        self.clock = clock if clock is not None else time.monotonic
        self.connection_factory = (
            connection_factory if connection_factory is not None else default_connection_factory
        )
        self.message_handler = message_handler if message_handler is not None else logger

        self.handle: Optional[redis.Connection] = None
        self.next_reconnect_at = 0.0
        self.started = False
        self.reconnect_attempts = 0

    def start_up(self) -> None:
        """Enable the connection; the first operation connects lazily."""
        if self.started:
            return
        self.started = True
        self.next_reconnect_at = 0.0
        self.message_handler.info(
            f"RedisCache started for {self.config.host}:{self.config.port}"
        )

    def ensure_connected(self) -> bool:
        """
        Make sure a usable connection exists.

        Returns:
            True if a connection is available, False if the adapter is not
            started, the retry deadline has not passed, or the attempt failed.
        """
        if not self.started:
            return False
        if self.handle is not None:
            return True
        if self.clock() < self.next_reconnect_at:
            return False

        try:
            self.handle = self._connect()
        except CacheConnectionError as exc:
            self.message_handler.warning(f"Error connecting to Redis: {exc.cause}")
            self.next_reconnect_at = self.clock() + self.config.reconnection_delay
            return False
        return True

    def _connect(self) -> redis.Connection:
        """Open a new connection or raise CacheConnectionError."""
        self.reconnect_attempts += 1
        address = f"{self.config.host}:{self.config.port}"
        self.message_handler.debug(f"Connecting to Redis at {address}")

        connection = self.connection_factory(self.config.host, self.config.port)
        try:
            connection.connect()
        except (redis.RedisError, OSError) as exc:
            self._close(connection)
            raise CacheConnectionError("CONNECT", f"{address}: {exc}") from exc

        self.message_handler.info(f"Connected to Redis at {address}")
        return connection

    def discard(self) -> None:
        """
        Drop the current connection after a communication or protocol error.

        The retry deadline is left alone so the next operation may
        reconnect immediately.
        """
        if self.handle is None:
            return
        self.message_handler.info("Dropping Redis connection; will reconnect on next operation")
        self._close(self.handle)
        self.handle = None

    def shut_down(self) -> None:
        """Disable the connection and release it. Safe to call repeatedly."""
        was_started = self.started
        self.started = False
        if self.handle is not None:
            self._close(self.handle)
            self.handle = None
        if was_started:
            self.message_handler.info("RedisCache shut down")

    def is_healthy(self) -> bool:
        """Check whether the adapter is started and holds a connection."""
        return self.started and self.handle is not None

    def _close(self, connection) -> None:
        try:
            connection.disconnect()
        except (redis.RedisError, OSError) as exc:
            self.message_handler.debug(f"Error closing Redis connection: {exc}")
