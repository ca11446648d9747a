"""
Result wrapper for read paths that must not raise
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """The value of a read, plus the error that replaced it if the read failed.

    A failed read still carries a usable value (empty list or None), so
    callers that only render can ignore `error`; callers that need to tell
    "nothing there" from "could not look" check `degraded`.
    """

    value: T
    error: Optional[Exception] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, value: T) -> "ReadResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, fallback: T, error: Exception) -> "ReadResult[T]":
        return cls(value=fallback, error=error)
