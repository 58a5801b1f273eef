"""SQLite dialect implementation."""

from typing import Iterable, Sequence

from sink_dialects.dialects.generic import GenericDialect, require_columns
from sink_dialects.expression import column_names
from sink_dialects.identifiers import ColumnId, TableId
from sink_dialects.schema import LogicalType, PrimitiveType, SchemaFieldDescriptor


class SQLiteDialect(GenericDialect):
    """SQLite database dialect.

    Features:
    - Type affinities (INTEGER, REAL, TEXT, BLOB, NUMERIC)
    - ALTER TABLE adds one column per statement
    - Native upsert through INSERT OR REPLACE
    """

    def sql_type_for(self, field: SchemaFieldDescriptor) -> str:
        match field.logical:
            case LogicalType.DECIMAL | LogicalType.DATE | LogicalType.TIME | LogicalType.TIMESTAMP:
                return "NUMERIC"
            case None:
                pass

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

    def build_alter_table(self, table: TableId, fields: Iterable[SchemaFieldDescriptor]) -> list[str]:
        """SQLite's ALTER TABLE accepts a single ADD COLUMN clause."""
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
        count = require_columns(table, key_columns, non_key_columns)
        builder = self.expression_builder()
        builder.append("INSERT OR REPLACE INTO ").append(table).append("(")
        builder.append_list().delimited_by(",").transformed_by(column_names()).of(
            key_columns, non_key_columns
        )
        builder.append(") VALUES(")
        builder.append_multiple(",", self.placeholder, count)
        builder.append(")")
        return str(builder)

    def current_timestamp_query(self) -> str:
        return "SELECT strftime('%Y-%m-%d %H:%M:%f', 'now')"
