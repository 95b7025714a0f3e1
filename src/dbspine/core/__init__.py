"""
dbspine core - errors and structured logging shared by every module.

``EngineSettings`` lives in :mod:`dbspine.core.settings` and is imported
from there directly.
"""

from dbspine.core.errors import (
    AlreadyOwnedError,
    ConfigError,
    ConfigResolutionError,
    DbSpineError,
    ErrorCategory,
    ErrorContext,
    InvalidInputError,
    OwnershipError,
    StatusCheckError,
    StatusCheckTimeoutError,
    StorageClassUnresolvedError,
    TransientError,
    UnknownPlatformError,
    UnsupportedAttributeError,
)
from dbspine.core.logging import LogContext, configure_logging, get_logger

__all__ = [
    "AlreadyOwnedError",
    "ConfigError",
    "ConfigResolutionError",
    "DbSpineError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidInputError",
    "LogContext",
    "OwnershipError",
    "StatusCheckError",
    "StatusCheckTimeoutError",
    "StorageClassUnresolvedError",
    "TransientError",
    "UnknownPlatformError",
    "UnsupportedAttributeError",
    "configure_logging",
    "get_logger",
]
