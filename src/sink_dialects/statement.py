"""Prepared-statement parameter slots that dialects bind values into."""

import datetime
from decimal import Decimal
from typing import Any, Protocol

from sink_dialects.errors import BindFailure


class PreparedStatement(Protocol):
    """Positional parameter slots of an already-prepared statement.

    Indexes are 1-based. Implementations are owned by a single caller and
    are not shared across threads.
    """

    def set_null(self, index: int) -> None: ...

    def set_boolean(self, index: int, value: bool) -> None: ...

    def set_int(self, index: int, value: int) -> None: ...

    def set_float(self, index: int, value: float) -> None: ...

    def set_string(self, index: int, value: str) -> None: ...

    def set_bytes(self, index: int, value: bytes) -> None: ...

    def set_decimal(self, index: int, value: Decimal) -> None: ...

    def set_date(self, index: int, value: datetime.date) -> None: ...

    def set_time(self, index: int, value: datetime.time) -> None: ...

    def set_timestamp(self, index: int, value: datetime.datetime) -> None: ...


class ParameterList:
    """In-memory PreparedStatement holding SQL text and positional parameters.

    The collected parameters can be passed straight to a DB-API cursor or to
    SQLAlchemy's ``Connection.exec_driver_sql``:

        >>> stmt = ParameterList(dialect.build_upsert_query_statement(table, keys, non_keys))
        >>> dialect.bind_record(stmt, key_fields, non_key_fields, record)
        >>> connection.exec_driver_sql(stmt.sql, stmt.parameters)
    """

    def __init__(self, sql: str = ""):
        self.sql = sql
        self._values: dict[int, Any] = {}

    def _set(self, index: int, value: Any, expected: type | tuple[type, ...] | None = None) -> None:
        if index < 1:
            raise BindFailure(f"Parameter index must be 1-based, got {index}")
        if expected is not None and not isinstance(value, expected):
            raise BindFailure(
                f"Cannot bind {type(value).__name__} to parameter {index}; "
                f"expected {_type_names(expected)}"
            )
        self._values[index] = value

    def set_null(self, index: int) -> None:
        self._set(index, None)

    def set_boolean(self, index: int, value: bool) -> None:
        self._set(index, value, bool)

    def set_int(self, index: int, value: int) -> None:
        if isinstance(value, bool):
            value = int(value)
        self._set(index, value, int)

    def set_float(self, index: int, value: float) -> None:
        self._set(index, value, (float, int))

    def set_string(self, index: int, value: str) -> None:
        self._set(index, value, str)

    def set_bytes(self, index: int, value: bytes) -> None:
        self._set(index, bytes(value) if isinstance(value, (bytearray, memoryview)) else value, bytes)

    def set_decimal(self, index: int, value: Decimal) -> None:
        self._set(index, value, Decimal)

    def set_date(self, index: int, value: datetime.date) -> None:
        if isinstance(value, datetime.datetime):
            raise BindFailure(f"Cannot bind datetime to date parameter {index}")
        self._set(index, value, datetime.date)

    def set_time(self, index: int, value: datetime.time) -> None:
        self._set(index, value, datetime.time)

    def set_timestamp(self, index: int, value: datetime.datetime) -> None:
        self._set(index, value, datetime.datetime)

    def clear(self) -> None:
        """Drop all bound values so the statement can be reused."""
        self._values.clear()

    @property
    def parameters(self) -> tuple[Any, ...]:
        """Bound values in index order.

        Raises:
            BindFailure: If any slot up to the highest bound index is unset
        """
        if not self._values:
            return ()
        count = max(self._values)
        missing = [i for i in range(1, count + 1) if i not in self._values]
        if missing:
            raise BindFailure(f"Parameters {missing} were never bound")
        return tuple(self._values[i] for i in range(1, count + 1))

    def __getitem__(self, index: int) -> Any:
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterList(sql={self.sql!r}, bound={len(self._values)})"


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


__all__ = ["PreparedStatement", "ParameterList"]
