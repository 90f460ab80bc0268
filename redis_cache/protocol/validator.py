"""
Reply Validation

Checks that a reply's type is one the issuing command can legally
produce. A mismatch means the connection is out of step with the server,
so it is reported as a ProtocolError and the caller drops the connection.
"""

import logging
from typing import Iterable, Optional

from ..errors import ProtocolError
from .commands import Reply, ReplyType

logger = logging.getLogger(__name__)


class ReplyValidator:
    """
    Validator for replies received from the remote store.

    Usage:
        validator = ReplyValidator()
        reply = validator.validate(reply, (ReplyType.STRING, ReplyType.NIL), "GET")
    """

    def __init__(self, message_handler: logging.Logger = None):
        """
        Args:
            message_handler: Logger used for mismatch reports (default: module logger)
        """
        self.message_handler = message_handler if message_handler is not None else logger

    def validate(
            self,
            reply: Optional[Reply],
            valid_types: Iterable[ReplyType],
            command_name: str,
            expected_payload: Optional[bytes] = None,
    ) -> Reply:
        """
        Validate a reply against the types the command accepts.

        Args:
            reply: The classified reply (None if it could not be classified)
            valid_types: Reply types acceptable for this command
            command_name: Name of the command executed, for diagnostics
            expected_payload: If given, the reply value must equal it

        Returns:
            The reply unchanged when valid.

        Raises:
            ProtocolError: If the reply type or payload is unexpected.
        """
        valid_types = tuple(valid_types)

        if reply is None:
            self.message_handler.error(
                f"Unclassifiable reply to {command_name}"
            )
            raise ProtocolError(command_name, "unclassifiable reply")

        if reply.type not in valid_types:
            expected = ", ".join(t.value for t in valid_types)
            self.message_handler.error(
                f"Unexpected reply type to {command_name}: {reply.type.value} "
                f"(expected {expected})"
            )
            raise ProtocolError(command_name, f"unexpected reply type {reply.type.value}")

        if expected_payload is not None and reply.value != expected_payload:
            self.message_handler.error(
                f"Unexpected reply to {command_name}: {reply.value!r}"
            )
            raise ProtocolError(command_name, f"unexpected reply {reply.value!r}")

        return reply
