"""PostgreSQL dialect implementation."""

from typing import Sequence

from sink_dialects.dialects.generic import GenericDialect
from sink_dialects.expression import column_names, column_names_with_prefix
from sink_dialects.identifiers import ColumnId, TableId
from sink_dialects.schema import LogicalType, PrimitiveType, SchemaFieldDescriptor


class PostgreSQLDialect(GenericDialect):
    """PostgreSQL database dialect.

    Features:
    - Native BOOLEAN and BYTEA types
    - Upsert through INSERT ... ON CONFLICT
    - ``format`` paramstyle placeholders (psycopg)
    """

    placeholder = "%s"

    def sql_type_for(self, field: SchemaFieldDescriptor) -> str:
        match field.logical:
            case LogicalType.DECIMAL:
                return "DECIMAL"
            case LogicalType.DATE:
                return "DATE"
            case LogicalType.TIME:
                return "TIME"
            case LogicalType.TIMESTAMP:
                return "TIMESTAMP"
            case None:
                pass

        match field.primitive_type:
            case PrimitiveType.INT32:
                return "INT"
            case PrimitiveType.STRING:
                return "TEXT"
            case PrimitiveType.BYTES:
                return "BYTEA"
            case _:
                return super().sql_type_for(field)

    def build_upsert_query_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        """Build ``INSERT ... ON CONFLICT (keys) DO UPDATE SET``.

        Without key columns there is no conflict target, so a plain INSERT
        is returned.
        """
        insert = self.build_insert_statement(table, key_columns, non_key_columns)
        if not key_columns:
            return insert

        builder = self.expression_builder()
        builder.append(insert)
        builder.append(" ON CONFLICT (")
        builder.append_list().delimited_by(",").transformed_by(column_names()).of(key_columns)
        builder.append(")")
        if non_key_columns:
            builder.append(" DO UPDATE SET ")
            builder.append_list().delimited_by(",").transformed_by(_excluded_assignment).of(
                non_key_columns
            )
        else:
            builder.append(" DO NOTHING")
        return str(builder)


def _excluded_assignment(builder, column: ColumnId) -> None:
    builder.append_column_name(column.name)
    builder.append("=")
    column_names_with_prefix("EXCLUDED.")(builder, column)
