"""Logical column model consumed by the dialect renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from sqlbridge.core.errors import SchemaError
from sqlbridge.core.types import ColumnType


@dataclass(frozen=True)
class LogicalColumn:
    """
    Engine-neutral description of one table column.

    Instances are immutable; they are normally produced by a metadata
    resolver (reflection or configuration) and handed to a dialect.

    Attributes:
        name: Column name (unquoted)
        column_type: Logical field semantics
        nullable: Whether NULL is allowed
        is_primary_key: Column is the table's primary key
        is_generated_id: Value is assigned by the engine at insert time
        width: VARCHAR width, or DECIMAL precision
        scale: DECIMAL scale
        default: Python literal rendered as the column's DEFAULT

    Raises:
        SchemaError: If a generated id is not an id-capable primary key.
    """

    name: str
    column_type: ColumnType
    nullable: bool = True
    is_primary_key: bool = False
    is_generated_id: bool = False
    width: int | None = None
    scale: int | None = None
    default: Any = field(default=None)

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Column name must not be empty")
        if self.is_generated_id:
            if not self.is_primary_key:
                raise SchemaError(
                    f"Generated id column {self.name!r} must also be the primary key"
                ).with_context(column=self.name)
            if not self.column_type.is_id_type:
                raise SchemaError(
                    f"Generated id column {self.name!r} has non-id type {self.column_type.label}"
                ).with_context(column=self.name)
        if self.width is not None and self.width <= 0:
            raise SchemaError(f"Column {self.name!r} width must be positive, got {self.width}")

    @classmethod
    def generated_id(cls, name: str = "id", column_type: ColumnType = ColumnType.LONG) -> LogicalColumn:
        """Shortcut for an engine-assigned primary key column."""
        return cls(
            name,
            column_type,
            nullable=False,
            is_primary_key=True,
            is_generated_id=True,
        )


class ColumnDefinition(NamedTuple):
    """Result of rendering one column for a CREATE TABLE statement.

    ``constraints`` stay separate from ``fragment`` because some engines
    require them outside the per-column syntax.
    """

    fragment: str
    statements_before: list[str]
    constraints: list[str]


__all__ = [
    "LogicalColumn",
    "ColumnDefinition",
]
