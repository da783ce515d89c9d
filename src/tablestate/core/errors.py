"""
Structured error types for tablestate.

The engine itself is lenient: out-of-range page indices are clamped,
unknown column ids resolve to missing values and column-definition problems
come back as a diagnostic list. The errors below cover the few places where
something genuinely cannot proceed (bad option values) and the URL sync
boundary, where adapter failures are wrapped so they can be logged with
context and then absorbed.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────┐
        │                  TableStateError                       │
        │        (category, context, cause, to_dict)             │
        ├───────────────────────────────────────────────────────┤
        │                                                        │
        │  ConfigError          UrlSyncError      StateError     │
        │  (CONFIG)             (URL_SYNC)        (STATE)        │
        │                                                        │
        └───────────────────────────────────────────────────────┘

Examples:
    >>> err = UrlSyncError("adapter failed").with_context(operation="write")
    >>> err.context.operation
    'write'
    >>> err.to_dict()["category"]
    'URL_SYNC'

Guardrails:
    ❌ DON'T: Raise for a page index that is out of range
    ✅ DO: Clamp it with ``clamp_page_index``

    ❌ DON'T: Let a URL adapter failure escape the coordinator
    ✅ DO: Wrap it in UrlSyncError, log a warning and keep going

Tags:
    error-handling, exception-hierarchy, tablestate, url-sync, config
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification in logs."""

    CONFIG = "CONFIG"  # Invalid options or column definitions
    STATE = "STATE"  # Impossible state transition
    URL_SYNC = "URL_SYNC"  # Router adapter read/write failures
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        operation: What was being attempted (``"read_url"``, ``"create_table"``, ...)
        option: Constructor option at fault, if any
        column_id: Column involved, if any
        metadata: Anything else, flattened into the log record
    """

    operation: str | None = None
    option: str | None = None
    column_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Set fields plus metadata, for a structured log record."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "metadata" and getattr(self, f.name) is not None
        }
        return {**result, **self.metadata}


class TableStateError(Exception):
    """
    Base exception for all tablestate errors.

    Subclasses set ``default_category``. Every instance carries a message,
    a category, an :class:`ErrorContext` and an optional chained cause.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TableStateError:
        """
        Add context to this error (fluent API).

        Usage:
            raise UrlSyncError("Failed").with_context(operation="write")
        """
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
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ConfigError(TableStateError):
    """Invalid table options (selection mode, debounce interval, option types)."""

    default_category = ErrorCategory.CONFIG


class StateError(TableStateError):
    """A state configuration that cannot be resolved to an owner."""

    default_category = ErrorCategory.STATE


class UrlSyncError(TableStateError):
    """
    Router adapter failure while reading or writing the query string.

    Never escapes the coordinator: URL sync is best-effort.
    """

    default_category = ErrorCategory.URL_SYNC


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TableStateError",
    "ConfigError",
    "StateError",
    "UrlSyncError",
]
