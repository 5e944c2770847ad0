"""
Outcome - explicit success/failure value for fail-open operations.

Cache reads and cancellation never raise to their callers. They return an
Outcome so tests can still see what went wrong before the caller decides to
ignore it.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an operation that is allowed to fail silently."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome[T]":
        return cls(error=error)

    def unwrap_or(self, default: Optional[T] = None) -> Optional[T]:
        """Return the value on success, else default."""
        return self.value if self.ok else default
