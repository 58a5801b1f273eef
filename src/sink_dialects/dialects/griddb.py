"""GridDB dialect implementation."""

from typing import Any, Iterable, Optional, Sequence

from sink_dialects.config import DialectConfig
from sink_dialects.dialects.base import BindResult
from sink_dialects.dialects.generic import (
    UTC,
    GenericDialect,
    to_date,
    to_decimal,
    to_time,
    to_timestamp,
)
from sink_dialects.identifiers import ColumnId, IdentifierRules, TableId
from sink_dialects.logger import get_logger
from sink_dialects.schema import LogicalType, PrimitiveType, SchemaFieldDescriptor
from sink_dialects.statement import PreparedStatement

logger = get_logger(__name__)


class GriddbDialect(GenericDialect):
    """GridDB database dialect.

    GridDB speaks a small SQL subset reached through the ``gs`` subprotocol.

    Features:
    - Backtick-quoted identifiers
    - All logical types stored in TIMESTAMP columns
    - One ALTER TABLE statement per added column
    - No native upsert; upserts are plain INSERT statements
    """

    def __init__(self, config: Optional[DialectConfig] = None):
        super().__init__(config, IdentifierRules(".", "`", "`"))

    def sql_type_for(self, field: SchemaFieldDescriptor) -> str:
        match field.logical:
            case LogicalType.DECIMAL | LogicalType.DATE | LogicalType.TIME | LogicalType.TIMESTAMP:
                return "TIMESTAMP"
            case None:
                pass  # fall through to the primitive mapping

        match field.primitive_type:
            case (
                PrimitiveType.BOOLEAN | PrimitiveType.INT8 | PrimitiveType.INT16
                | PrimitiveType.INT32 | PrimitiveType.INT64
            ):
                return "INTEGER"
            case PrimitiveType.FLOAT32 | PrimitiveType.FLOAT64:
                return "REAL"
            case PrimitiveType.STRING:
                return "TEXT"
            case PrimitiveType.BYTES:
                return "BLOB"
            case _:
                return super().sql_type_for(field)

    def bind_logical_value(
        self,
        statement: PreparedStatement,
        index: int,
        field: SchemaFieldDescriptor,
        value: Any,
    ) -> BindResult:
        # Instants are bound as-is in UTC; the configured timezone is not applied.
        match field.logical:
            case LogicalType.DATE:
                statement.set_date(index, to_date(value))
            case LogicalType.DECIMAL:
                statement.set_decimal(index, to_decimal(value))
            case LogicalType.TIME:
                statement.set_time(index, to_time(value))
            case LogicalType.TIMESTAMP:
                statement.set_timestamp(index, to_timestamp(value, UTC))
            case None:
                return BindResult.NOT_HANDLED
        return BindResult.HANDLED

    def build_alter_table(self, table: TableId, fields: Iterable[SchemaFieldDescriptor]) -> list[str]:
        queries: list[str] = []
        for field in fields:
            queries.extend(super().build_alter_table(table, [field]))
        return queries

    def build_upsert_query_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        sql = self.build_insert_statement(table, key_columns, non_key_columns)
        logger.debug(f"Built upsert statement: {sql}")
        return sql

    def boolean_literal(self, value: bool) -> str:
        # booleans live in INTEGER columns
        return "1" if value else "0"

    def current_timestamp_query(self) -> str:
        return "SELECT NOW()"
