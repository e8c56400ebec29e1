"""
Result type for explicit success/failure handling.

Validation in backup-spine never raises for an invalid policy: it returns
``Ok(None)`` or ``Err(ValidationError)`` so a reconciler can copy the
outcome onto the resource status. Callers that prefer exceptions use
``unwrap()`` or the ``check()`` helpers, which raise the carried error.

Manifesto:
    - **Errors as values:** An invalid policy is an expected outcome
    - **Immutable:** Frozen dataclasses, equal when their payloads are equal
    - **Escape hatch:** ``unwrap()`` raises the original typed error

Examples:
    >>> from backup_spine.policy.timefmt import validate_time
    >>> validate_time("10:30")
    Ok(None)
    >>> validate_time("25:00").is_err()
    True

Tags:
    result-pattern, error-handling, functional-programming, backup-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from backup_spine.core.errors import BackupSpineError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing an error.

    ``map`` and ``and_then`` pass the error through unchanged, so a chain of
    checks stops at the first failing one.
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Err(self.error)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        return Err(self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if isinstance(self.error, BackupSpineError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


OK: Ok[None] = Ok(None)


__all__ = ["Ok", "Err", "Result", "OK"]
