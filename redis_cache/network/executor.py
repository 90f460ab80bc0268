"""
Command Execution

Sends one command over an established connection and reads its reply.
The caller must hold the adapter's guard and must already have a
connection; retry policy belongs to the ConnectionManager.
"""

import logging

import redis
from redis.exceptions import InvalidResponse

from ..errors import ProtocolError, ServerReportedError, TransportError
from ..protocol.commands import Command, Reply

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Executes commands against a redis-py connection, one at a time."""

    def __init__(self, message_handler: logging.Logger = None):
        self.message_handler = message_handler if message_handler is not None else logger

    def execute(self, connection, command: Command) -> Reply:
        """
        Send a command and block until its reply arrives.

        Args:
            connection: Active redis-py Connection
            command: The command to send

        Returns:
            The classified reply.

        Raises:
            TransportError: The connection failed while sending or receiving
            ProtocolError: The reply could not be parsed or classified
            ServerReportedError: The server answered with an error reply
        """
        try:
            connection.send_command(*command.wire_args())
            raw = connection.read_response()
        except redis.ResponseError as exc:
            self.message_handler.warning(f"Redis returned error to {command.name}: {exc}")
            raise ServerReportedError(command.name, str(exc)) from exc
        except InvalidResponse as exc:
            self.message_handler.error(f"Malformed reply to {command.name}: {exc}")
            raise ProtocolError(command.name, str(exc)) from exc
        except (redis.RedisError, OSError) as exc:
            self.message_handler.error(f"Redis communication error during {command.name}: {exc}")
            raise TransportError(command.name, str(exc)) from exc

        reply = Reply.from_raw(raw, status_reply=command.status_reply)
        if reply is None:
            self.message_handler.error(
                f"Unknown reply shape to {command.name}: {type(raw).__name__}"
            )
            raise ProtocolError(command.name, f"unknown reply shape {type(raw).__name__}")
        return reply
