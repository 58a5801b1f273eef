"""MySQL dialect implementation."""

from typing import Optional, Sequence

from sink_dialects.config import DialectConfig
from sink_dialects.dialects.generic import GenericDialect
from sink_dialects.identifiers import ColumnId, IdentifierRules, TableId
from sink_dialects.schema import LogicalType, PrimitiveType, SchemaFieldDescriptor


class MySQLDialect(GenericDialect):
    """MySQL database dialect.

    Also serves MariaDB, which shares its upsert syntax.

    Features:
    - Backtick-quoted identifiers
    - Bounded VARCHAR/VARBINARY for key columns (TEXT/BLOB cannot be keys)
    - Upsert through ON DUPLICATE KEY UPDATE
    - ``format`` paramstyle placeholders (PyMySQL)
    """

    placeholder = "%s"

    def __init__(self, config: Optional[DialectConfig] = None):
        super().__init__(config, IdentifierRules(".", "`", "`"))

    def sql_type_for(self, field: SchemaFieldDescriptor) -> str:
        match field.logical:
            case LogicalType.DECIMAL:
                return f"DECIMAL(65,{field.scale or 0})"
            case LogicalType.DATE:
                return "DATE"
            case LogicalType.TIME:
                return "TIME(3)"
            case LogicalType.TIMESTAMP:
                return "DATETIME(3)"
            case None:
                pass

        match field.primitive_type:
            case PrimitiveType.BOOLEAN | PrimitiveType.INT8:
                return "TINYINT"
            case PrimitiveType.INT32:
                return "INT"
            case PrimitiveType.FLOAT32:
                return "FLOAT"
            case PrimitiveType.FLOAT64:
                return "DOUBLE"
            case PrimitiveType.STRING:
                return "VARCHAR(256)" if field.is_primary_key else "TEXT"
            case PrimitiveType.BYTES:
                return "VARBINARY(1024)" if field.is_primary_key else "BLOB"
            case _:
                return super().sql_type_for(field)

    def build_upsert_query_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        insert = self.build_insert_statement(table, key_columns, non_key_columns)
        # Every column is a key: re-assign the keys so duplicates are a no-op.
        update_columns = non_key_columns or key_columns

        builder = self.expression_builder()
        builder.append(insert)
        builder.append(" ON DUPLICATE KEY UPDATE ")
        builder.append_list().delimited_by(",").transformed_by(_values_assignment).of(update_columns)
        return str(builder)

    def current_timestamp_query(self) -> str:
        return "SELECT UTC_TIMESTAMP()"


def _values_assignment(builder, column: ColumnId) -> None:
    builder.append_column_name(column.name)
    builder.append("=VALUES(")
    builder.append_column_name(column.name)
    builder.append(")")
