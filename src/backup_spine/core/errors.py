"""
Structured error types for backup-spine.

Every failure this package reports is a typed error carrying a category,
a retry flag and structured context, so a reconciler can surface it on the
resource status or reject it at admission without string matching.

Manifesto:
    - **Typed hierarchy:** One class per failure kind the operator can act on
    - **Never retryable validation:** A bad policy stays bad until edited
    - **All offenders at once:** Validation errors enumerate every value
    - **Serializable:** ``to_dict()`` for structured logs and status fields

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                     BackupSpineError                          │
        │        (category, retryable, context, cause)                  │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ValidationError          ScheduleError        ResourceError  │
        │  (VALIDATION)             (ORCHESTRATION)      (STORAGE)      │
        │       │                        │                    │         │
        │  FormatError             InvalidTransitionError  NotFoundError│
        │  RangeError              PolicyNotFoundError     ConflictError│
        │  InvalidTokenError       PolicyInUseError                     │
        │  DuplicateValueError                                          │
        │  VariantError                                                 │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> err = RangeError("minutes out of range", field="minutes", values=[60])
    >>> err.retryable
    False
    >>> err.to_dict()["values"]
    [60]

Tags:
    error-handling, exception-hierarchy, validation, backup-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    ORCHESTRATION = "ORCHESTRATION"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        policy: Name of the schedule policy involved
        schedule: Name of the backup schedule involved
        backup_name: Name of the backup run involved
        metadata: Additional key-value pairs
    """

    policy: str | None = None
    schedule: str | None = None
    backup_name: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["policy", "schedule", "backup_name"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BackupSpineError(Exception):
    """
    Base exception for all backup-spine errors.

    Subclasses set ``default_category`` and ``default_retryable`` so callers
    rarely pass them explicitly.

    Examples:
        >>> error = BackupSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(schedule="nightly").context.schedule
        'nightly'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BackupSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise PolicyNotFoundError("nightly").with_context(schedule="db-backup")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.context:
            context_dict = self.context.to_dict()
            if context_dict:
                result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(BackupSpineError):
    """
    Policy validation error.

    Never retryable - the policy must be fixed. ``values`` holds every
    offending value of the error's category, in input order.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        values: list[Any] | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.values = list(values) if values is not None else []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.field == other.field
            and self.values == other.values
        )

    __hash__ = Exception.__hash__

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.values:
            result["values"] = list(self.values)
        return result


class FormatError(ValidationError):
    """Malformed ``HH:MM`` time string."""

    def __init__(self, reason: str, offending_value: str, *, field: str = "time", **kwargs: Any):
        message = (
            f"time is {offending_value!r}: {reason}, "
            "you should provide the time in the 00:00-23:59 format"
        )
        super().__init__(message, field=field, values=[offending_value], **kwargs)
        self.reason = reason
        self.offending_value = offending_value


class RangeError(ValidationError):
    """Value outside its declared numeric bounds."""

    pass


class InvalidTokenError(ValidationError):
    """Unrecognized day-of-week token."""

    pass


class DuplicateValueError(ValidationError):
    """
    Repeated weekday or date.

    ``groups`` maps the first-seen value to the later values that repeat it,
    e.g. ``{"Mon": ["Monday"]}`` for weekly days.
    """

    def __init__(self, message: str, *, groups: dict[Any, list[Any]] | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.groups = dict(groups) if groups else {}

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.groups:
            result["groups"] = {str(k): list(v) for k, v in self.groups.items()}
        return result


class VariantError(ValidationError):
    """Zero or several recurrence kinds populated in one policy spec."""

    pass


# =============================================================================
# SCHEDULE ERRORS
# =============================================================================


class ScheduleError(BackupSpineError):
    """Schedule configuration or lifecycle error."""

    default_category = ErrorCategory.ORCHESTRATION
    default_retryable = False


class InvalidTransitionError(ScheduleError):
    """A lifecycle transition the state machine does not allow."""

    def __init__(self, kind: str, current: str, target: str, **kwargs: Any):
        super().__init__(f"invalid {kind} transition: {current} -> {target}", **kwargs)
        self.current = current
        self.target = target


class PolicyNotFoundError(ScheduleError):
    """A schedule references a policy that does not exist."""

    default_category = ErrorCategory.CONFIG

    def __init__(self, name: str, **kwargs: Any):
        super().__init__(f"schedule policy not found: {name}", **kwargs)
        self.name = name


class PolicyInUseError(ScheduleError):
    """A policy cannot be deleted while schedules reference it."""

    def __init__(self, name: str, schedules: list[str], **kwargs: Any):
        super().__init__(
            f"schedule policy {name} is referenced by: {', '.join(schedules)}", **kwargs
        )
        self.name = name
        self.schedules = list(schedules)


# =============================================================================
# RESOURCE ERRORS
# =============================================================================


class ResourceError(BackupSpineError):
    """Named-record store error."""

    default_category = ErrorCategory.STORAGE
    default_retryable = False


class NotFoundError(ResourceError):
    """Record does not exist."""

    def __init__(self, kind: str, name: str, **kwargs: Any):
        super().__init__(f"{kind} not found: {name}", **kwargs)
        self.kind = kind
        self.name = name


class ConflictError(ResourceError):
    """Record already exists or its version moved on."""

    pass


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "BackupSpineError",
    # Validation
    "ValidationError",
    "FormatError",
    "RangeError",
    "InvalidTokenError",
    "DuplicateValueError",
    "VariantError",
    # Schedule
    "ScheduleError",
    "InvalidTransitionError",
    "PolicyNotFoundError",
    "PolicyInUseError",
    # Resource
    "ResourceError",
    "NotFoundError",
    "ConflictError",
]
