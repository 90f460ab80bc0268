"""
Protocol Command and Reply Definitions

This module defines the data structures for commands sent to the remote
store and the typed replies received back.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

Argument = Union[str, int, bytes, memoryview]

_ARGUMENT_TYPES = (str, int, bytes, memoryview)


class ReplyType(Enum):
    """Enumeration of reply types a command can produce."""
    STRING = "string"
    INTEGER = "integer"
    ARRAY = "array"
    NIL = "nil"
    STATUS = "status"
    ERROR = "error"


@dataclass(frozen=True)
class Command:
    """
    A single command for the remote store.

    Attributes:
        name: Command name as sent on the wire (e.g. "GET")
        args: Ordered arguments; each is str, int, bytes or a contiguous
            byte-sized memoryview
        status_reply: True if the command answers with a status line
            (e.g. "+OK") rather than a bulk string
    """
    name: str
    args: Tuple[Argument, ...] = field(default_factory=tuple)
    status_reply: bool = False

    def __post_init__(self):
        if not self.name:
            raise ValueError("command name must not be empty")
        for arg in self.args:
            # bool is an int subclass but has no wire representation
            if isinstance(arg, bool) or not isinstance(arg, _ARGUMENT_TYPES):
                raise TypeError(
                    f"unsupported argument type for {self.name}: {type(arg).__name__}"
                )
            # the client library sizes bulk strings with len(), which counts
            # elements, not bytes
            if isinstance(arg, memoryview) and not (arg.contiguous and arg.nbytes == len(arg)):
                raise TypeError(
                    f"memoryview argument for {self.name} must be a contiguous byte view "
                    f"(format {arg.format!r}, itemsize {arg.itemsize})"
                )

    @classmethod
    def build(cls, name: str, *args: Argument, status_reply: bool = False) -> "Command":
        """Create a command from a name and its arguments."""
        return cls(name=name.upper(), args=tuple(args), status_reply=status_reply)

    @classmethod
    def get(cls, key: Union[str, bytes]) -> "Command":
        """Create a GET command."""
        return cls.build("GET", key)

    @classmethod
    def set(cls, key: Union[str, bytes], value: Union[bytes, memoryview]) -> "Command":
        """Create a SET command."""
        return cls.build("SET", key, value, status_reply=True)

    @classmethod
    def delete(cls, key: Union[str, bytes]) -> "Command":
        """Create a DEL command."""
        return cls.build("DEL", key)

    @classmethod
    def flushall(cls) -> "Command":
        """Create a FLUSHALL command."""
        return cls.build("FLUSHALL", status_reply=True)

    @classmethod
    def ping(cls) -> "Command":
        """Create a PING command."""
        return cls.build("PING", status_reply=True)

    def wire_args(self) -> Tuple[Argument, ...]:
        """Name followed by arguments, in send order."""
        return (self.name,) + self.args


@dataclass(frozen=True)
class Reply:
    """
    Represents one reply from the remote store.

    Attributes:
        type: The declared reply type
        value: The payload (bytes, int, list or None)
    """
    type: ReplyType
    value: Any = None

    @classmethod
    def from_raw(cls, raw: Any, status_reply: bool = False) -> Optional["Reply"]:
        """
        Classify a raw reply as returned by the client library.

        Simple strings and bulk strings both arrive as bytes; the command
        decides which one it expects.

        Args:
            raw: Reply object from the client library
            status_reply: Whether the command answers with a status line

        Returns:
            The classified Reply, or None if the raw value has no known shape.
        """
        if raw is None:
            return cls(ReplyType.NIL)
        if isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return cls(ReplyType.INTEGER, raw)
        if isinstance(raw, (list, tuple)):
            return cls(ReplyType.ARRAY, list(raw))
        if isinstance(raw, str):
            raw = raw.encode()
        if isinstance(raw, bytes):
            return cls(ReplyType.STATUS if status_reply else ReplyType.STRING, raw)
        if isinstance(raw, Exception):
            return cls(ReplyType.ERROR, str(raw))
        return None

    @property
    def is_nil(self) -> bool:
        """Check if the reply is nil (key absent)."""
        return self.type == ReplyType.NIL
