"""
Cache Interface

The synchronous contract a cache backend exposes to the surrounding
caching framework.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

Key = Union[str, bytes]
Value = Union[bytes, memoryview]


class KeyState(Enum):
    """Outcome of a cache lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILURE = "failure"


@dataclass(frozen=True)
class GetResult:
    """
    Result delivered to a Get callback.

    Attributes:
        state: FOUND, NOT_FOUND or FAILURE
        value: The cached bytes when state is FOUND, None otherwise
    """
    state: KeyState
    value: Optional[bytes] = None

    @classmethod
    def found(cls, value: bytes) -> "GetResult":
        return cls(state=KeyState.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "GetResult":
        return cls(state=KeyState.NOT_FOUND)

    @classmethod
    def failure(cls) -> "GetResult":
        return cls(state=KeyState.FAILURE)

    @property
    def is_found(self) -> bool:
        return self.state == KeyState.FOUND


Callback = Callable[[GetResult], None]


class ResultCollector:
    """
    Callback that records every result it receives.

    Usage:
        collector = ResultCollector()
        cache.get("key", collector)
        collector.last.state  # KeyState.FOUND
    """

    def __init__(self):
        self.results: List[GetResult] = []

    def __call__(self, result: GetResult) -> None:
        self.results.append(result)

    @property
    def last(self) -> Optional[GetResult]:
        return self.results[-1] if self.results else None


class CacheInterface(ABC):
    """Abstract cache backend."""

    @abstractmethod
    def get(self, key: Key, callback: Callback) -> None:
        """Look up key and report the result through callback."""

    @abstractmethod
    def put(self, key: Key, value: Value) -> bool:
        """Store value under key."""

    @abstractmethod
    def delete(self, key: Key) -> None:
        """Remove key; a missing key is not an error."""

    @abstractmethod
    def name(self) -> str:
        """Identifier for diagnostics."""

    @abstractmethod
    def is_blocking(self) -> bool:
        """Whether calls may stall on I/O."""

    @abstractmethod
    def is_healthy(self) -> bool:
        """Current reachability snapshot."""

    @abstractmethod
    def shut_down(self) -> None:
        """Stop serving requests and release resources."""
