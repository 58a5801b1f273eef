"""Tests for the GridDB dialect."""

import datetime
from decimal import Decimal

import pytest

from sink_dialects.config import DialectConfig
from sink_dialects.dialects import BindResult, GenericDialect, GriddbDialect
from sink_dialects.errors import BindFailure, DialectConfigurationError, UnsupportedTypeError
from sink_dialects.identifiers import ColumnId, TableId
from sink_dialects.schema import LogicalType, PrimitiveType, SchemaFieldDescriptor
from sink_dialects.statement import ParameterList

UTC = datetime.timezone.utc
TABLE = TableId.of("t")


def columns(*names: str) -> list[ColumnId]:
    return [ColumnId(TABLE, name) for name in names]


@pytest.fixture
def dialect() -> GriddbDialect:
    """Create a GridDB dialect with default options."""
    return GriddbDialect(DialectConfig())


class TestGriddbTypes:
    """Tests for GridDB type mapping."""

    @pytest.mark.parametrize("logical", list(LogicalType))
    def test_logical_types_are_timestamps(self, dialect, logical):
        """Test every logical type maps to TIMESTAMP."""
        assert dialect.sql_type_for(SchemaFieldDescriptor.of("f", logical)) == "TIMESTAMP"

    @pytest.mark.parametrize("primitive", list(PrimitiveType))
    def test_logical_wins_over_any_primitive(self, dialect, primitive):
        """Test the primitive is ignored when the logical type is known."""
        field = SchemaFieldDescriptor("f", primitive, LogicalType.DATE.value)
        assert dialect.sql_type_for(field) == "TIMESTAMP"

    @pytest.mark.parametrize(
        "primitive, expected",
        [
            (PrimitiveType.BOOLEAN, "INTEGER"),
            (PrimitiveType.INT8, "INTEGER"),
            (PrimitiveType.INT16, "INTEGER"),
            (PrimitiveType.INT32, "INTEGER"),
            (PrimitiveType.INT64, "INTEGER"),
            (PrimitiveType.FLOAT32, "REAL"),
            (PrimitiveType.FLOAT64, "REAL"),
            (PrimitiveType.STRING, "TEXT"),
            (PrimitiveType.BYTES, "BLOB"),
        ],
    )
    def test_primitive_mapping(self, dialect, primitive, expected):
        """Test the GridDB primitive table."""
        assert dialect.sql_type_for(SchemaFieldDescriptor("f", primitive)) == expected

    @pytest.mark.parametrize("primitive", [PrimitiveType.STRUCT, PrimitiveType.ARRAY, PrimitiveType.MAP])
    def test_uncovered_primitives_fall_back_to_generic(self, dialect, primitive):
        """Test uncovered primitives behave exactly like the generic dialect."""
        field = SchemaFieldDescriptor("f", primitive)
        with pytest.raises(UnsupportedTypeError):
            GenericDialect(DialectConfig()).sql_type_for(field)
        with pytest.raises(UnsupportedTypeError):
            dialect.sql_type_for(field)

    def test_example_fields(self, dialect):
        """Test a DATE field and an INT32 field."""
        day = SchemaFieldDescriptor.of("day", LogicalType.DATE)
        count = SchemaFieldDescriptor("count", PrimitiveType.INT32)
        assert [dialect.sql_type_for(f) for f in (day, count)] == ["TIMESTAMP", "INTEGER"]


class TestGriddbBinding:
    """Tests for GridDB logical binding."""

    def test_bind_date(self, dialect):
        """Test DATE binds a date."""
        stmt = ParameterList()
        field = SchemaFieldDescriptor.of("d", LogicalType.DATE)
        result = dialect.bind_logical_value(stmt, 1, field, datetime.datetime(2024, 3, 1, tzinfo=UTC))
        assert result is BindResult.HANDLED
        assert stmt[1] == datetime.date(2024, 3, 1)

    def test_bind_time(self, dialect):
        """Test TIME binds a time of day."""
        stmt = ParameterList()
        field = SchemaFieldDescriptor.of("t", LogicalType.TIME)
        dialect.bind_logical_value(stmt, 1, field, datetime.time(8, 30))
        assert stmt[1] == datetime.time(8, 30)

    def test_bind_timestamp_stays_utc(self):
        """Test TIMESTAMP is bound in UTC regardless of the configured zone."""
        dialect = GriddbDialect(DialectConfig(db_timezone="Asia/Tokyo"))
        stmt = ParameterList()
        field = SchemaFieldDescriptor.of("ts", LogicalType.TIMESTAMP)
        instant = datetime.datetime(2024, 3, 1, 23, 30, tzinfo=UTC)
        dialect.bind_logical_value(stmt, 1, field, instant)
        assert stmt[1] == instant
        assert stmt[1].utcoffset() == datetime.timedelta(0)

    def test_bind_decimal(self, dialect):
        """Test DECIMAL binds the exact value."""
        stmt = ParameterList()
        field = SchemaFieldDescriptor.of("amount", LogicalType.DECIMAL)
        dialect.bind_logical_value(stmt, 2, field, Decimal("0.10"))
        assert stmt[2] == Decimal("0.10")

    def test_bind_without_logical_type(self, dialect):
        """Test plain fields are left to primitive binding."""
        stmt = ParameterList()
        field = SchemaFieldDescriptor("n", PrimitiveType.INT32)
        assert dialect.bind_logical_value(stmt, 1, field, 1) is BindResult.NOT_HANDLED
        dialect.bind_field(stmt, 1, field, 1)
        assert stmt.parameters == (1,)

    def test_bind_failure_propagates(self, dialect):
        """Test a wrong host type is not swallowed."""
        field = SchemaFieldDescriptor.of("ts", LogicalType.TIMESTAMP)
        with pytest.raises(BindFailure):
            dialect.bind_field(ParameterList(), 1, field, 1709251200000)


class TestGriddbStatements:
    """Tests for GridDB DDL and DML."""

    def test_alter_table_one_statement_per_field(self, dialect):
        """Test each field gets its own ALTER TABLE, in input order."""
        fields = [
            SchemaFieldDescriptor("f1", PrimitiveType.INT32),
            SchemaFieldDescriptor("f2", PrimitiveType.STRING, optional=True),
        ]
        assert dialect.build_alter_table(TABLE, fields) == [
            "ALTER TABLE `t` ADD `f1` INTEGER NOT NULL",
            "ALTER TABLE `t` ADD `f2` TEXT NULL",
        ]

    def test_alter_table_empty(self, dialect):
        """Test no fields means no statements."""
        assert dialect.build_alter_table(TABLE, []) == []

    def test_upsert(self, dialect):
        """Test the upsert is a backtick-quoted plain INSERT."""
        sql = dialect.build_upsert_query_statement(TABLE, columns("id"), columns("name"))
        assert sql == "INSERT INTO `t`(`id`,`name`) VALUES(?,?)"

    def test_upsert_order_and_placeholders(self, dialect):
        """Test keys then non-keys, one placeholder per column."""
        sql = dialect.build_upsert_query_statement(TABLE, columns("k1", "k2"), columns("n1"))
        assert sql == "INSERT INTO `t`(`k1`,`k2`,`n1`) VALUES(?,?,?)"

    def test_upsert_only_non_keys(self, dialect):
        """Test an upsert without key columns."""
        sql = dialect.build_upsert_query_statement(TABLE, [], columns("a"))
        assert sql == "INSERT INTO `t`(`a`) VALUES(?)"

    def test_upsert_without_columns(self, dialect):
        """Test zero columns fails instead of emitting empty lists."""
        with pytest.raises(DialectConfigurationError):
            dialect.build_upsert_query_statement(TABLE, [], [])

    def test_current_timestamp_query(self, dialect):
        """Test GridDB's current timestamp query."""
        assert dialect.current_timestamp_query() == "SELECT NOW()"

    def test_identifier_rules(self, dialect):
        """Test GridDB quotes with backticks."""
        rules = dialect.identifier_rules
        assert (rules.identifier_delimiter, rules.leading_quote, rules.trailing_quote) == (".", "`", "`")

    def test_name(self, dialect):
        """Test the dialect name."""
        assert dialect.name == "GriddbDialect"

    def test_upsert_ignores_column_alias(self, dialect):
        """Test aliased columns are inserted under their column name."""
        sql = dialect.build_upsert_query_statement(TABLE, [ColumnId(TABLE, "id", alias="key")], [])
        assert sql == "INSERT INTO `t`(`id`) VALUES(?)"

    def test_upsert_matches_plain_insert(self, dialect):
        """Test the upsert is the same statement as a plain insert."""
        keys, non_keys = columns("id"), columns("name", "score")
        assert dialect.build_upsert_query_statement(TABLE, keys, non_keys) == (
            dialect.build_insert_statement(TABLE, keys, non_keys)
        )

    def test_boolean_default_is_integer(self, dialect):
        """Test boolean defaults are written as integers for INTEGER columns."""
        fields = [
            SchemaFieldDescriptor("on", PrimitiveType.BOOLEAN, default_value=True),
            SchemaFieldDescriptor("off", PrimitiveType.BOOLEAN, default_value=False),
        ]
        assert dialect.build_alter_table(TABLE, fields) == [
            "ALTER TABLE `t` ADD `on` INTEGER DEFAULT 1",
            "ALTER TABLE `t` ADD `off` INTEGER DEFAULT 0",
        ]
