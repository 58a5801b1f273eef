"""Abstract base dialect for database backends."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from sink_dialects.expression import ExpressionBuilder
from sink_dialects.identifiers import ColumnId, IdentifierRules, TableId
from sink_dialects.schema import SchemaFieldDescriptor
from sink_dialects.statement import PreparedStatement


class BindResult(Enum):
    """Outcome of a dialect-specific binding attempt.

    Failures are not a result value; they raise BindFailure.
    """

    HANDLED = "handled"
    NOT_HANDLED = "not_handled"


class DatabaseDialect(ABC):
    """Abstract base class for database dialects.

    A dialect translates record schemas into one engine's SQL: column types,
    parameter binding, DDL and DML text. Instances are configured once and
    never mutated afterwards, so a single instance can be shared by every
    worker of a connector.

    Subclasses normally extend GenericDialect and override only the
    operations where their engine diverges from ANSI SQL.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the dialect name.

        Returns:
            Dialect name (e.g., "GenericDialect", "GriddbDialect")
        """
        ...

    @property
    @abstractmethod
    def identifier_rules(self) -> IdentifierRules:
        """Get the quoting rules for table and column names."""
        ...

    @abstractmethod
    def expression_builder(self) -> ExpressionBuilder:
        """Create a new builder using this dialect's identifier rules."""
        ...

    @abstractmethod
    def sql_type_for(self, field: SchemaFieldDescriptor) -> str:
        """Get the SQL column type for a field.

        Raises:
            UnsupportedTypeError: If the field's type has no mapping
        """
        ...

    @abstractmethod
    def bind_logical_value(
        self,
        statement: PreparedStatement,
        index: int,
        field: SchemaFieldDescriptor,
        value: Any,
    ) -> BindResult:
        """Bind a value whose schema carries a logical type.

        Returns:
            BindResult.NOT_HANDLED when the field has no logical type this
            dialect binds specially

        Raises:
            BindFailure: If the value cannot be bound
        """
        ...

    @abstractmethod
    def bind_field(
        self,
        statement: PreparedStatement,
        index: int,
        field: SchemaFieldDescriptor,
        value: Any,
    ) -> None:
        """Bind any value, logical binding first and primitive binding second."""
        ...

    @abstractmethod
    def bind_record(
        self,
        statement: PreparedStatement,
        key_fields: Sequence[SchemaFieldDescriptor],
        non_key_fields: Sequence[SchemaFieldDescriptor],
        values: Mapping[str, Any],
        start_index: int = 1,
    ) -> int:
        """Bind one record's values, keys first, in statement column order.

        Returns:
            The next unused parameter index
        """
        ...

    @abstractmethod
    def build_alter_table(self, table: TableId, fields: Iterable[SchemaFieldDescriptor]) -> list[str]:
        """Build the ALTER TABLE statements adding the given fields."""
        ...

    @abstractmethod
    def build_upsert_query_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        """Build an insert-or-update statement.

        Placeholders follow the order: key columns, then non-key columns.
        """
        ...

    def current_timestamp_query(self) -> str:
        """Get the query returning the database's current timestamp."""
        return "SELECT CURRENT_TIMESTAMP"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
