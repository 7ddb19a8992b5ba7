"""
Structured error types for sqlbridge.

Every failure raised by the access layer is a typed ``SqlBridgeError``
carrying a category, a retry hint, structured context (SQL text, dialect,
column) and the chained driver exception. Callers receive exactly one typed
error per failed operation.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure mode of the access layer
    - **Explicit Retry Semantics:** Only connectivity faults are retryable
    - **Rich Context:** Errors carry the statement and dialect for logging
    - **Error Chaining:** The driver exception is kept as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       SqlBridgeError                             │
        │  (category, retryable, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  BindError         ExecutionError      NoGeneratedKeysError     │
        │  (BIND)            (EXECUTION)         (KEYS)                   │
        │                                              │                   │
        │                                        InvalidKeyTypeError      │
        │  UnknownTypeError  NoResultError       TypeMismatchError        │
        │  (TYPE)            AmbiguousResultError CursorClosedError       │
        │                    (CARDINALITY)       (CURSOR)                 │
        │                                                                  │
        │  SchemaError       UnsupportedFeatureError                      │
        │  (SCHEMA)          ConfigError (CONFIG)                         │
        │                    DatabaseConnectionError (CONNECTION, retry)  │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = ExecutionError("no such table: users").with_context(sql="SELECT 1")
    >>> error.context.sql
    'SELECT 1'
    >>> error.retryable
    False

Guardrails:
    ❌ DON'T: Return a default value when a key or row is missing
    ✅ DO: Raise the matching typed error

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, sqlbridge, database-access
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories for classification and routing."""

    BIND = "BIND"                 # Argument/type-tag mismatch, impossible coercion
    EXECUTION = "EXECUTION"       # Engine rejected or failed a statement
    KEYS = "KEYS"                 # Generated key retrieval
    TYPE = "TYPE"                 # Unknown SQL type identifiers
    CARDINALITY = "CARDINALITY"   # Single-row query saw zero or many rows
    CURSOR = "CURSOR"             # Row cursor misuse
    SCHEMA = "SCHEMA"             # Invalid column metadata
    CONFIG = "CONFIG"             # Missing drivers, bad settings
    CONNECTION = "CONNECTION"     # Could not obtain a connection
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        sql: Statement text that was being executed
        dialect: Name of the dialect in use
        column: Column involved (key extraction, cursor access)
        metadata: Additional key-value pairs
    """

    sql: str | None = None
    dialect: str | None = None
    column: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["sql", "dialect", "column"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SqlBridgeError(Exception):
    """
    Base exception for all sqlbridge errors.

    Subclasses set ``default_category`` and ``default_retryable``; both can be
    overridden per instance.

    Usage:
        raise ExecutionError("Insert failed", cause=exc).with_context(sql=sql)
    """

    default_category: ErrorCategory = ErrorCategory.UNKNOWN
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

    def with_context(self, **kwargs: Any) -> SqlBridgeError:
        """
        Add context to this error (fluent API).

        Known fields (``sql``, ``dialect``, ``column``) are set directly,
        anything else lands in ``context.metadata``.
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
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
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# STATEMENT ERRORS
# =============================================================================


class BindError(SqlBridgeError):
    """Arguments cannot be bound (count mismatch or impossible coercion)."""

    default_category = ErrorCategory.BIND

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.position = position

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.position is not None:
            result["position"] = self.position
        return result


class ExecutionError(SqlBridgeError):
    """
    The engine rejected or failed a statement.

    Covers syntax errors, constraint violations and connectivity loss.
    The message always includes the driver's message.
    """

    default_category = ErrorCategory.EXECUTION


# =============================================================================
# KEY / TYPE ERRORS
# =============================================================================


class NoGeneratedKeysError(SqlBridgeError):
    """Key retrieval was requested but the engine produced no keys."""

    default_category = ErrorCategory.KEYS


class InvalidKeyTypeError(SqlBridgeError):
    """A generated key cannot be represented as an integer."""

    default_category = ErrorCategory.KEYS


class UnknownTypeError(SqlBridgeError):
    """A SQL type identifier is not in the column type registry."""

    default_category = ErrorCategory.TYPE

    def __init__(self, sql_type_id: Any, message: str | None = None):
        self.sql_type_id = sql_type_id
        super().__init__(message or f"Unknown SQL type id: {sql_type_id!r}")


# =============================================================================
# RESULT / CURSOR ERRORS
# =============================================================================


class NoResultError(SqlBridgeError):
    """A single-result query produced no rows."""

    default_category = ErrorCategory.CARDINALITY


class AmbiguousResultError(SqlBridgeError):
    """A single-result query produced more than one row."""

    default_category = ErrorCategory.CARDINALITY


class TypeMismatchError(SqlBridgeError):
    """A cursor column cannot be coerced to the requested type."""

    default_category = ErrorCategory.CURSOR


class CursorClosedError(SqlBridgeError):
    """The row cursor is closed, exhausted or not positioned on a row."""

    default_category = ErrorCategory.CURSOR


# =============================================================================
# SCHEMA / CONFIGURATION ERRORS
# =============================================================================


class SchemaError(SqlBridgeError):
    """Column metadata violates a model invariant."""

    default_category = ErrorCategory.SCHEMA


class UnsupportedFeatureError(SqlBridgeError):
    """The dialect does not support the requested SQL feature."""

    default_category = ErrorCategory.CONFIG


class ConfigError(SqlBridgeError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG


class DatabaseConnectionError(SqlBridgeError):
    """Could not obtain a connection from the data source."""

    default_category = ErrorCategory.CONNECTION
    default_retryable = True


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, SqlBridgeError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, SqlBridgeError):
        return error.category
    if isinstance(error, ConnectionError):
        return ErrorCategory.CONNECTION
    if isinstance(error, (TypeError, ValueError)):
        return ErrorCategory.BIND
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SqlBridgeError",
    "BindError",
    "ExecutionError",
    "NoGeneratedKeysError",
    "InvalidKeyTypeError",
    "UnknownTypeError",
    "NoResultError",
    "AmbiguousResultError",
    "TypeMismatchError",
    "CursorClosedError",
    "SchemaError",
    "UnsupportedFeatureError",
    "ConfigError",
    "DatabaseConnectionError",
    "is_retryable",
    "categorize_error",
]
