"""Generic ANSI-SQL dialect implementation."""

import datetime
from decimal import Decimal, InvalidOperation
from itertools import chain
from typing import Any, Iterable, Mapping, Optional, Sequence, assert_never
from zoneinfo import ZoneInfo

from sink_dialects.config import DialectConfig, get_config
from sink_dialects.dialects.base import BindResult, DatabaseDialect
from sink_dialects.errors import BindFailure, DialectConfigurationError, UnsupportedTypeError
from sink_dialects.expression import (
    ExpressionBuilder,
    column_names,
    column_names_with,
)
from sink_dialects.identifiers import ColumnId, IdentifierRules, QuoteMethod, TableId
from sink_dialects.logger import get_logger
from sink_dialects.schema import LogicalType, PrimitiveType, SchemaFieldDescriptor
from sink_dialects.statement import PreparedStatement

logger = get_logger(__name__)

UTC = datetime.timezone.utc


def to_utc(value: datetime.datetime) -> datetime.datetime:
    """Normalize an instant to an aware UTC datetime. Naive values are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_date(value: Any) -> datetime.date:
    """Get the UTC calendar date of an epoch-based value."""
    if isinstance(value, datetime.datetime):
        return to_utc(value).date()
    if isinstance(value, datetime.date):
        return value
    raise BindFailure(f"Expected a date or datetime for a DATE value, got {type(value).__name__}")


def to_time(value: Any) -> datetime.time:
    """Get the UTC time of day of an epoch-based value."""
    if isinstance(value, datetime.datetime):
        return to_utc(value).time()
    if isinstance(value, datetime.time):
        return value
    raise BindFailure(f"Expected a time or datetime for a TIME value, got {type(value).__name__}")


def to_timestamp(value: Any, zone: datetime.tzinfo = UTC) -> datetime.datetime:
    """Express an instant in ``zone`` without changing the instant."""
    if isinstance(value, datetime.datetime):
        return to_utc(value).astimezone(zone)
    raise BindFailure(f"Expected a datetime for a TIMESTAMP value, got {type(value).__name__}")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    raise BindFailure(f"Expected a Decimal for a DECIMAL value, got {type(value).__name__}")


class GenericDialect(DatabaseDialect):
    """ANSI-SQL dialect used when no engine-specific dialect matches.

    Every operation here is the default that engine-specific dialects fall
    back to. Upserts are plain INSERT statements, which are not idempotent:
    re-inserting an existing key fails or duplicates the row.
    """

    #: DB-API paramstyle placeholder
    placeholder = "?"

    def __init__(
        self,
        config: Optional[DialectConfig] = None,
        identifier_rules: Optional[IdentifierRules] = None,
    ):
        """Create a dialect from connector configuration.

        Args:
            config: Dialect options; defaults to the ``dialect`` section of
                the global configuration
            identifier_rules: Quoting rules; ANSI double quotes by default
        """
        self._config = config if config is not None else get_config().dialect
        self._rules = identifier_rules or IdentifierRules.DEFAULT
        self._quote_method = QuoteMethod.parse(self._config.quote_identifiers)
        self._zone: ZoneInfo = self._config.zone
        logger.debug(
            f"Initialized {self.name} (quoting={self._quote_method.value}, "
            f"timezone={self._config.db_timezone})"
        )

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def config(self) -> DialectConfig:
        return self._config

    @property
    def identifier_rules(self) -> IdentifierRules:
        return self._rules

    def expression_builder(self) -> ExpressionBuilder:
        return ExpressionBuilder(self._rules, self._quote_method)

    # Type mapping

    def sql_type_for(self, field: SchemaFieldDescriptor) -> str:
        logical = field.logical
        if logical is not None:
            match logical:
                case LogicalType.DECIMAL:
                    return "DECIMAL"
                case LogicalType.DATE:
                    return "DATE"
                case LogicalType.TIME:
                    return "TIME"
                case LogicalType.TIMESTAMP:
                    return "TIMESTAMP"
                case _:
                    assert_never(logical)

        match field.primitive_type:
            case PrimitiveType.BOOLEAN:
                return "BOOLEAN"
            case PrimitiveType.INT8 | PrimitiveType.INT16:
                return "SMALLINT"
            case PrimitiveType.INT32:
                return "INTEGER"
            case PrimitiveType.INT64:
                return "BIGINT"
            case PrimitiveType.FLOAT32:
                return "REAL"
            case PrimitiveType.FLOAT64:
                return "DOUBLE PRECISION"
            case PrimitiveType.STRING:
                return f"VARCHAR({self._config.string_type_length})"
            case PrimitiveType.BYTES:
                return "BLOB"
            case PrimitiveType.STRUCT | PrimitiveType.ARRAY | PrimitiveType.MAP:
                raise UnsupportedTypeError(
                    f"{field.name} ({field.logical_type or field.primitive_type.value}) "
                    f"type doesn't have a mapping to a {self.name} column type"
                )
            case _:
                assert_never(field.primitive_type)

    # Binding

    def bind_logical_value(
        self,
        statement: PreparedStatement,
        index: int,
        field: SchemaFieldDescriptor,
        value: Any,
    ) -> BindResult:
        logical = field.logical
        if logical is None:
            return BindResult.NOT_HANDLED
        match logical:
            case LogicalType.DATE:
                statement.set_date(index, to_date(value))
            case LogicalType.DECIMAL:
                statement.set_decimal(index, to_decimal(value))
            case LogicalType.TIME:
                statement.set_time(index, to_time(value))
            case LogicalType.TIMESTAMP:
                statement.set_timestamp(index, to_timestamp(value, self._zone))
            case _:
                assert_never(logical)
        return BindResult.HANDLED

    def bind_primitive_value(
        self,
        statement: PreparedStatement,
        index: int,
        field: SchemaFieldDescriptor,
        value: Any,
    ) -> BindResult:
        match field.primitive_type:
            case PrimitiveType.INT8 | PrimitiveType.INT16 | PrimitiveType.INT32 | PrimitiveType.INT64:
                statement.set_int(index, value)
            case PrimitiveType.FLOAT32 | PrimitiveType.FLOAT64:
                statement.set_float(index, value)
            case PrimitiveType.BOOLEAN:
                statement.set_boolean(index, value)
            case PrimitiveType.STRING:
                statement.set_string(index, value)
            case PrimitiveType.BYTES:
                statement.set_bytes(index, value)
            case PrimitiveType.STRUCT | PrimitiveType.ARRAY | PrimitiveType.MAP:
                return BindResult.NOT_HANDLED
            case _:
                assert_never(field.primitive_type)
        return BindResult.HANDLED

    def bind_field(
        self,
        statement: PreparedStatement,
        index: int,
        field: SchemaFieldDescriptor,
        value: Any,
    ) -> None:
        try:
            if value is None:
                statement.set_null(index)
                return
            if self.bind_logical_value(statement, index, field, value) is BindResult.HANDLED:
                return
            if self.bind_primitive_value(statement, index, field, value) is BindResult.HANDLED:
                return
        except BindFailure:
            raise
        except (TypeError, ValueError, OverflowError) as e:
            raise BindFailure(f"Failed to bind {field.name} at parameter {index}: {e}") from e
        raise UnsupportedTypeError(
            f"Unsupported source data type: {field.primitive_type.value} for field {field.name}"
        )

    def bind_record(
        self,
        statement: PreparedStatement,
        key_fields: Sequence[SchemaFieldDescriptor],
        non_key_fields: Sequence[SchemaFieldDescriptor],
        values: Mapping[str, Any],
        start_index: int = 1,
    ) -> int:
        index = start_index
        for field in chain(key_fields, non_key_fields):
            self.bind_field(statement, index, field, values.get(field.name))
            index += 1
        return index

    def convert_column_value(self, field: SchemaFieldDescriptor, raw: Any) -> Any:
        """Convert a value read back from the database into its record form.

        Temporal values come back in UTC so a bound DATE reads back as the
        same calendar date.
        """
        if raw is None:
            return None
        logical = field.logical
        if logical is not None:
            try:
                return self._convert_logical(logical, raw)
            except (TypeError, ValueError, InvalidOperation) as e:
                raise UnsupportedTypeError(
                    f"Cannot read {field.name} ({logical.name}) from {raw!r}"
                ) from e
        match field.primitive_type:
            case PrimitiveType.BOOLEAN:
                return bool(raw)
            case PrimitiveType.BYTES:
                return bytes(raw)
            case _:
                return raw

    def _convert_logical(self, logical: LogicalType, raw: Any) -> Any:
        if isinstance(raw, str):
            raw = _parse_temporal(logical, raw)
        match logical:
            case LogicalType.DATE:
                return to_date(raw)
            case LogicalType.TIME:
                return to_time(raw)
            case LogicalType.TIMESTAMP:
                return to_utc(raw)
            case LogicalType.DECIMAL:
                return raw if isinstance(raw, Decimal) else Decimal(str(raw))
            case _:
                assert_never(logical)

    # DDL

    def build_create_table(self, table: TableId, fields: Iterable[SchemaFieldDescriptor]) -> str:
        """Build a CREATE TABLE statement with a primary key over the key fields."""
        fields = list(fields)
        if not fields:
            raise DialectConfigurationError(f"Cannot create table {table} without columns")
        keys = [f.name for f in fields if f.is_primary_key]

        builder = self.expression_builder()
        builder.append("CREATE TABLE ").append(table).append(" (")
        builder.append_list().delimited_by(",").transformed_by(self._column_spec).of(fields)
        if keys:
            builder.append(",PRIMARY KEY(")
            builder.append_list().delimited_by(",").transformed_by(
                lambda b, name: b.append_column_name(name)
            ).of(keys)
            builder.append(")")
        builder.append(")")
        return str(builder)

    def build_drop_table(self, table: TableId, if_exists: bool = True) -> str:
        builder = self.expression_builder()
        builder.append("DROP TABLE ")
        if if_exists:
            builder.append("IF EXISTS ")
        builder.append(table)
        return str(builder)

    def build_alter_table(self, table: TableId, fields: Iterable[SchemaFieldDescriptor]) -> list[str]:
        fields = list(fields)
        if not fields:
            return []
        builder = self.expression_builder()
        builder.append("ALTER TABLE ").append(table).append(" ")
        builder.append_list().delimited_by(", ").transformed_by(self._add_column).of(fields)
        return [str(builder)]

    def _add_column(self, builder: ExpressionBuilder, field: SchemaFieldDescriptor) -> None:
        builder.append("ADD ")
        self._column_spec(builder, field)

    def _column_spec(self, builder: ExpressionBuilder, field: SchemaFieldDescriptor) -> None:
        builder.append_column_name(field.name)
        builder.append(" ")
        builder.append(self.sql_type_for(field))
        if field.default_value is not None:
            builder.append(" DEFAULT ")
            self.format_column_value(builder, field, field.default_value)
        elif field.optional:
            builder.append(" NULL")
        else:
            builder.append(" NOT NULL")

    def boolean_literal(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"

    def format_column_value(self, builder: ExpressionBuilder, field: SchemaFieldDescriptor, value: Any) -> None:
        """Append a column default as a SQL literal."""
        logical = field.logical
        if logical is not None:
            match logical:
                case LogicalType.DECIMAL:
                    builder.append(str(to_decimal(value)))
                case LogicalType.DATE:
                    builder.append(_string_literal(to_date(value).isoformat()))
                case LogicalType.TIME:
                    builder.append(_string_literal(to_time(value).isoformat()))
                case LogicalType.TIMESTAMP:
                    ts = to_timestamp(value, self._zone)
                    builder.append(_string_literal(ts.isoformat(sep=" ")))
                case _:
                    assert_never(logical)
            return
        match field.primitive_type:
            case PrimitiveType.BOOLEAN:
                builder.append(self.boolean_literal(bool(value)))
            case (
                PrimitiveType.INT8 | PrimitiveType.INT16 | PrimitiveType.INT32
                | PrimitiveType.INT64 | PrimitiveType.FLOAT32 | PrimitiveType.FLOAT64
            ):
                builder.append(str(value))
            case PrimitiveType.STRING:
                builder.append(_string_literal(str(value)))
            case PrimitiveType.BYTES:
                builder.append(f"x'{bytes(value).hex()}'")
            case PrimitiveType.STRUCT | PrimitiveType.ARRAY | PrimitiveType.MAP:
                raise UnsupportedTypeError(
                    f"Cannot format a default value for {field.name} ({field.primitive_type.value})"
                )
            case _:
                assert_never(field.primitive_type)

    # DML

    def build_insert_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        count = require_columns(table, key_columns, non_key_columns)
        builder = self.expression_builder()
        builder.append("INSERT INTO ").append(table).append("(")
        builder.append_list().delimited_by(",").transformed_by(column_names()).of(
            key_columns, non_key_columns
        )
        builder.append(") VALUES(")
        builder.append_multiple(",", self.placeholder, count)
        builder.append(")")
        return str(builder)

    def build_upsert_query_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        sql = self.build_insert_statement(table, key_columns, non_key_columns)
        logger.debug(f"{self.name} has no native upsert, using plain INSERT: {sql}")
        return sql

    def build_update_statement(
        self,
        table: TableId,
        key_columns: Sequence[ColumnId],
        non_key_columns: Sequence[ColumnId],
    ) -> str:
        """Build ``UPDATE t SET n=? WHERE k=?``; non-key placeholders come first."""
        if not non_key_columns:
            raise DialectConfigurationError(f"Cannot update table {table} without non-key columns")
        if not key_columns:
            raise DialectConfigurationError(f"Cannot update table {table} without key columns")
        assign = column_names_with(f"={self.placeholder}")
        builder = self.expression_builder()
        builder.append("UPDATE ").append(table).append(" SET ")
        builder.append_list().delimited_by(",").transformed_by(assign).of(non_key_columns)
        builder.append(" WHERE ")
        builder.append_list().delimited_by(" AND ").transformed_by(assign).of(key_columns)
        return str(builder)

    def build_delete_statement(self, table: TableId, key_columns: Sequence[ColumnId]) -> str:
        if not key_columns:
            raise DialectConfigurationError(f"Cannot delete from table {table} without key columns")
        builder = self.expression_builder()
        builder.append("DELETE FROM ").append(table).append(" WHERE ")
        builder.append_list().delimited_by(" AND ").transformed_by(
            column_names_with(f"={self.placeholder}")
        ).of(key_columns)
        return str(builder)


def require_columns(
    table: TableId,
    key_columns: Sequence[ColumnId],
    non_key_columns: Sequence[ColumnId],
) -> int:
    count = len(key_columns) + len(non_key_columns)
    if count == 0:
        raise DialectConfigurationError(f"Table {table} must have at least one column")
    return count


def _string_literal(text: str) -> str:
    escaped = text.replace("'", "''")
    return f"'{escaped}'"


def _parse_temporal(logical: LogicalType, raw: str) -> Any:
    match logical:
        case LogicalType.DATE:
            if len(raw) > 10:
                return datetime.datetime.fromisoformat(raw)
            return datetime.date.fromisoformat(raw)
        case LogicalType.TIME:
            return datetime.time.fromisoformat(raw)
        case LogicalType.TIMESTAMP:
            return datetime.datetime.fromisoformat(raw)
        case LogicalType.DECIMAL:
            return Decimal(raw)
        case _:
            assert_never(logical)
