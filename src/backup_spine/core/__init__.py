"""
backup_spine.core - shared primitives.

Errors, the Result type, enums, logging, settings and timestamps used by
the policy and schedule packages.
"""

from backup_spine.core.enums import (
    ConcurrencyPolicy,
    ExecutionStatus,
    PolicyKind,
    ReclaimPolicy,
    ScheduleStatus,
)
from backup_spine.core.errors import (
    BackupSpineError,
    ConflictError,
    DuplicateValueError,
    ErrorCategory,
    ErrorContext,
    FormatError,
    InvalidTokenError,
    InvalidTransitionError,
    NotFoundError,
    PolicyInUseError,
    PolicyNotFoundError,
    RangeError,
    ResourceError,
    ScheduleError,
    ValidationError,
    VariantError,
)
from backup_spine.core.logging import (
    LogContext,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from backup_spine.core.result import Err, Ok, Result
from backup_spine.core.settings import BackupSpineSettings, get_settings

__all__ = [
    # enums
    "ConcurrencyPolicy",
    "ExecutionStatus",
    "PolicyKind",
    "ReclaimPolicy",
    "ScheduleStatus",
    # errors
    "BackupSpineError",
    "ConflictError",
    "DuplicateValueError",
    "ErrorCategory",
    "ErrorContext",
    "FormatError",
    "InvalidTokenError",
    "InvalidTransitionError",
    "NotFoundError",
    "PolicyInUseError",
    "PolicyNotFoundError",
    "RangeError",
    "ResourceError",
    "ScheduleError",
    "ValidationError",
    "VariantError",
    # logging
    "LogContext",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    # result
    "Err",
    "Ok",
    "Result",
    # settings
    "BackupSpineSettings",
    "get_settings",
]
