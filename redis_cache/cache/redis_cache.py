"""
Redis Cache Backend

RedisCache implements CacheInterface on top of a single connection to a
Redis server. It is thread-safe: every operation, including any reconnect
attempt it triggers, runs while holding the guard supplied at
construction, so commands reach the server strictly one at a time and in
the order callers acquired the guard.

Calls block on network I/O. There are no timeouts and no authentication.
"""

import logging
from typing import Any, Callable, ContextManager, Dict, Iterable, Optional, Tuple

from ..config.settings import CacheConfig, Settings
from ..errors import ProtocolError, ServerReportedError, TransportError
from ..network.connection import ConnectionManager
from ..network.executor import CommandExecutor
from ..protocol.commands import Command, Reply, ReplyType
from ..protocol.validator import ReplyValidator
from .interface import Callback, CacheInterface, GetResult, Key, Value

logger = logging.getLogger(__name__)

_OK = b"OK"
_PONG = b"PONG"


class RedisCache(CacheInterface):
    """
    Cache backend storing entries in Redis.

    Lifecycle: call start_up() before the first operation and shut_down()
    when done. Until the first operation after start_up() nothing is
    connected; after shut_down() every operation fails fast until
    start_up() is called again.

    Reconnection strategy:
    - A failed connection attempt is retried on a later Get/Put/Delete,
      but not until reconnection_delay_ms has passed.
    - An operation that fails with a communication or protocol error drops
      the connection, and the next operation reconnects without delay.

    Usage:
        cache = RedisCache(CacheConfig("127.0.0.1", 6379), threading.Lock())
        cache.start_up()
        cache.put("key", b"value")
        cache.get("key", callback)
        cache.shut_down()
    """

    def __init__(
            self,
            config: CacheConfig,
            mutex: ContextManager,
            message_handler: logging.Logger = None,
            clock: Callable[[], float] = None,
            connection_factory: Callable = None,
    ):
        """
        Initialize the cache.

        Args:
            config: Host, port, reconnection delay and error policy
            mutex: Guard serializing all operations (e.g. threading.Lock);
                owned by the cache from now on
            message_handler: Logger for diagnostics; not owned
            clock: Time source in seconds, used for retry deadlines
                (default time.monotonic)
            connection_factory: Callable (host, port) -> unconnected
                redis-py Connection (default: plain TCP connection)
        """
        if mutex is None:
            raise ValueError("mutex is required")
        self.config = config
        self.message_handler = message_handler if message_handler is not None else logger
        self._mutex = mutex
        self._connection = ConnectionManager(
            config,
            clock=clock,
            connection_factory=connection_factory,
            message_handler=self.message_handler,
        )
        self._executor = CommandExecutor(self.message_handler)
        self._validator = ReplyValidator(self.message_handler)
        self._stats = {
            "gets": 0,
            "hits": 0,
            "misses": 0,
            "puts": 0,
            "deletes": 0,
            "failures": 0,
            "server_errors": 0,
        }

    @classmethod
    def from_settings(
            cls,
            mutex: ContextManager,
            source: Settings = None,
            **kwargs: Any,
    ) -> "RedisCache":
        """Create a cache configured from Settings (default: global settings)."""
        return cls(CacheConfig.from_settings(source), mutex, **kwargs)

    @staticmethod
    def format_name() -> str:
        return "RedisCache"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_up(self) -> None:
        """Enable the cache; the connection is opened by the first operation."""
        with self._mutex:
            self._connection.start_up()

    def shut_down(self) -> None:
        """Disable the cache and close the connection. Idempotent."""
        with self._mutex:
            self._connection.shut_down()

    def __enter__(self) -> "RedisCache":
        self.start_up()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shut_down()

    # ------------------------------------------------------------------
    # CacheInterface
    # ------------------------------------------------------------------

    def get(self, key: Key, callback: Callback) -> None:
        """
        Look up key and invoke callback with the result before returning.

        The callback receives GetResult.found(value), GetResult.not_found()
        or GetResult.failure(). It runs after the guard is released.
        """
        with self._mutex:
            self._stats["gets"] += 1
            ok, reply = self._run(Command.get(key), (ReplyType.STRING, ReplyType.NIL))
            if not ok:
                result = GetResult.failure()
            elif reply is None or reply.is_nil:
                self._stats["misses"] += 1
                result = GetResult.not_found()
            else:
                self._stats["hits"] += 1
                result = GetResult.found(reply.value)
        callback(result)

    def put(self, key: Key, value: Value) -> bool:
        """
        Store value under key.

        The value is handed to the client library as is, without copying.

        Returns:
            True on success, False on failure
        """
        with self._mutex:
            self._stats["puts"] += 1
            ok, _ = self._run(Command.set(key, value), (ReplyType.STATUS,), _OK)
            return ok

    def delete(self, key: Key) -> None:
        """Remove key. Failures are logged; a missing key is not an error."""
        self.try_delete(key)

    def try_delete(self, key: Key) -> bool:
        """
        Remove key and report the outcome.

        Returns:
            True on success (including a missing key), False on failure
        """
        with self._mutex:
            self._stats["deletes"] += 1
            ok, _ = self._run(Command.delete(key), (ReplyType.INTEGER,))
            return ok

    def flush_all(self) -> bool:
        """
        Remove ALL data from the Redis server. Intended for tests only.

        Returns:
            True on success, False on failure
        """
        with self._mutex:
            ok, _ = self._run(Command.flushall(), (ReplyType.STATUS,), _OK)
            return ok

    def ping(self) -> bool:
        """Round-trip a PING, connecting first if allowed."""
        with self._mutex:
            ok, _ = self._run(Command.ping(), (ReplyType.STATUS,), _PONG)
            return ok

    def name(self) -> str:
        return self.format_name()

    def is_blocking(self) -> bool:
        return True

    def is_healthy(self) -> bool:
        with self._mutex:
            return self._connection.is_healthy()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache.

        Returns:
            Dictionary containing operation counters (gets, hits, misses,
            puts, deletes, failures, server_errors), reconnect_attempts,
            and the started/connected flags.
        """
        with self._mutex:
            stats = dict(self._stats)
            stats["reconnect_attempts"] = self._connection.reconnect_attempts
            stats["started"] = self._connection.started
            stats["connected"] = self._connection.handle is not None
            return stats

    # ------------------------------------------------------------------
    # Internals (guard held)
    # ------------------------------------------------------------------

    def _run(
            self,
            command: Command,
            valid_types: Iterable[ReplyType],
            expected_payload: Optional[bytes] = None,
    ) -> Tuple[bool, Optional[Reply]]:
        """
        Execute one command and validate its reply.

        Returns:
            (ok, reply). ok is False when the operation failed. reply is None
            when the server answered with an error that the configured policy
            does not treat as a failure.
        """
        if not self._connection.ensure_connected():
            self._stats["failures"] += 1
            return False, None

        try:
            reply = self._executor.execute(self._connection.handle, command)
            reply = self._validator.validate(reply, valid_types, command.name, expected_payload)
        except ServerReportedError:
            self._stats["server_errors"] += 1
            if self.config.server_errors_are_failures:
                self._stats["failures"] += 1
                return False, None
            return True, None
        except (TransportError, ProtocolError):
            self._stats["failures"] += 1
            self._connection.discard()
            return False, None

        return True, reply
