"""
Structured error types for dbspine.

Every failure raised by the manifest builders is a ``DbSpineError`` carrying
a category, a retry hint, structured context and an optional chained cause.
The reconciler that calls the engine uses the category to decide what to do:
configuration and ownership errors are permanent and must abort the build,
while status-check errors are transient and may be retried by the caller.

Manifesto:
    - **Typed hierarchy:** one subclass per failure mode
    - **Explicit retry semantics:** only transient errors are retryable
    - **Diagnosable:** every resolution failure names the offending
      attribute, platform or disk
    - **Chained:** wrapped exceptions are preserved as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        DbSpineError                           │
        │        (category, retryable, context, cause)                  │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ConfigError              OwnershipError     TransientError   │
        │  (CONFIG)                 (OWNERSHIP)        (NETWORK)        │
        │      │                        │                   │           │
        │  ConfigResolutionError    AlreadyOwnedError  StatusCheckError │
        │      │                                            │           │
        │  UnknownPlatformError                StatusCheckTimeoutError  │
        │  UnsupportedAttributeError                                    │
        │  StorageClassUnresolvedError                                  │
        └──────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Apply a partially built resource set after a ConfigError
    ✅ DO: Abort the whole build and surface the error

    ❌ DON'T: Retry status checks inside the engine
    ✅ DO: Let the reconciler own retry policy using ``retryable``

Tags:
    error-handling, exception-hierarchy, retry-logic, dbspine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"  # Unresolvable platform/attribute/storage class
    OWNERSHIP = "OWNERSHIP"  # Owner reference rejected
    NETWORK = "NETWORK"  # Status-check dial/timeout/remote failure
    VALIDATION = "VALIDATION"  # Malformed input entity
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Only non-None fields are emitted by ``to_dict()`` so that log lines stay
    short.
    """

    instance: str | None = None
    namespace: str | None = None
    resource_kind: str | None = None
    resource_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["instance", "namespace", "resource_kind", "resource_name"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DbSpineError(Exception):
    """
    Base exception for all dbspine errors.

    Subclasses set ``default_category`` and ``default_retryable`` so call
    sites only pass a message (and usually a cause).

    Examples:
        >>> error = DbSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False

        >>> error = ConfigResolutionError("no storage class").with_context(
        ...     instance="orcl1", disk="DataDisk"
        ... )
        >>> error.context.metadata["disk"]
        'DataDisk'
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

    def with_context(self, **kwargs: Any) -> DbSpineError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS (never retryable)
# =============================================================================


class ConfigError(DbSpineError):
    """Configuration error. Fatal to the current build call."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class ConfigResolutionError(ConfigError):
    """No precedence layer produced a usable value for an attribute."""


class UnknownPlatformError(ConfigResolutionError):
    """The deployment platform identifier is not in the default table."""

    def __init__(self, platform: str, **kwargs: Any):
        super().__init__(
            f"the current release doesn't support deployment platform {platform!r}",
            **kwargs,
        )
        self.platform = platform


class UnsupportedAttributeError(ConfigResolutionError):
    """An attribute other than the storage/snapshot class was requested."""

    def __init__(self, attribute: str, supported: list[str], **kwargs: Any):
        super().__init__(
            f"unknown attribute requested (presently supported: {', '.join(supported)}): "
            f"{attribute!r}",
            **kwargs,
        )
        self.attribute = attribute


class StorageClassUnresolvedError(ConfigResolutionError):
    """A disk has no resolvable storage class and cannot be provisioned."""

    def __init__(self, disk: str, **kwargs: Any):
        super().__init__(f"failed to identify a storageClassName for disk {disk!r}", **kwargs)
        self.disk = disk


class InvalidInputError(DbSpineError):
    """An input document could not be parsed into an entity."""

    default_category = ErrorCategory.VALIDATION
    default_retryable = False


# =============================================================================
# OWNERSHIP ERRORS
# =============================================================================


class OwnershipError(DbSpineError):
    """Linking a generated resource to its owner was rejected."""

    default_category = ErrorCategory.OWNERSHIP
    default_retryable = False


class AlreadyOwnedError(OwnershipError):
    """The resource already has a different controller owner."""


# =============================================================================
# TRANSIENT ERRORS (retryable by the caller)
# =============================================================================


class TransientError(DbSpineError):
    """Temporary failure that may succeed if the caller retries later."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class StatusCheckError(TransientError):
    """The status-check call failed to dial or the remote reported an error."""


class StatusCheckTimeoutError(StatusCheckError):
    """The status-check call did not complete within the dial timeout."""


__all__ = [
    "AlreadyOwnedError",
    "ConfigError",
    "ConfigResolutionError",
    "DbSpineError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidInputError",
    "OwnershipError",
    "StatusCheckError",
    "StatusCheckTimeoutError",
    "StorageClassUnresolvedError",
    "TransientError",
    "UnknownPlatformError",
    "UnsupportedAttributeError",
]
