"""
Error Taxonomy

Failures observed while talking to the remote store. These never cross
the public RedisCache boundary: every operation catches them and resolves
to a plain result.
"""


class CacheError(Exception):
    """Base class for adapter failures."""

    def __init__(self, command: str, cause: str):
        super().__init__(f"{command}: {cause}")
        self.command = command
        self.cause = cause


class CacheConnectionError(CacheError):
    """A connection to the remote store could not be established."""


class TransportError(CacheError):
    """An established connection stopped responding correctly."""


class ProtocolError(CacheError):
    """A reply arrived with a shape the command cannot produce."""


class ServerReportedError(CacheError):
    """The remote store answered a valid command with an error reply."""
