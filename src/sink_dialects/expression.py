"""
Composable SQL text builder.

Only identifiers are quoted here. Values are never written into the text;
they are always bound as parameters.
"""

from typing import Any, Callable, Iterable, Optional

from sink_dialects.errors import DialectConfigurationError
from sink_dialects.identifiers import ColumnId, IdentifierRules, QuoteMethod, TableId

Transform = Callable[["ExpressionBuilder", Any], None]


def column_names() -> Transform:
    """Render each ColumnId as its (quoted) column name. Aliases are ignored."""

    def transform(builder: "ExpressionBuilder", column: ColumnId) -> None:
        builder.append_column_name(column.name)

    return transform


def column_names_with_prefix(prefix: str) -> Transform:
    """Render each ColumnId as ``<prefix><quoted name>``, e.g. ``EXCLUDED."col"``."""

    def transform(builder: "ExpressionBuilder", column: ColumnId) -> None:
        builder.append(prefix)
        builder.append_column_name(column.name)

    return transform


def column_names_with(suffix: str) -> Transform:
    """Render each ColumnId as ``<quoted name><suffix>``, e.g. ``"col"=?``."""

    def transform(builder: "ExpressionBuilder", column: ColumnId) -> None:
        builder.append_column_name(column.name)
        builder.append(suffix)

    return transform


def placeholder_in_place_of_column(placeholder: str) -> Transform:
    """Render a placeholder for every column."""

    def transform(builder: "ExpressionBuilder", column: ColumnId) -> None:
        builder.append(placeholder)

    return transform


class ListBuilder:
    """Fluent helper returned by ExpressionBuilder.append_list()."""

    def __init__(self, builder: "ExpressionBuilder"):
        self._builder = builder
        self._delimiter = ","
        self._transform: Optional[Transform] = None

    def delimited_by(self, delimiter: str) -> "ListBuilder":
        self._delimiter = delimiter
        return self

    def transformed_by(self, transform: Transform) -> "ListBuilder":
        self._transform = transform
        return self

    def of(self, *iterables: Iterable[Any]) -> "ExpressionBuilder":
        """Append every item of every iterable, in the order given.

        Returns:
            The owning ExpressionBuilder
        """
        first = True
        for iterable in iterables:
            for item in iterable:
                if not first:
                    self._builder.append(self._delimiter)
                first = False
                if self._transform is not None:
                    self._transform(self._builder, item)
                else:
                    self._builder.append(item)
        return self._builder


class ExpressionBuilder:
    """Mutable SQL text accumulator.

    Examples:
        >>> builder = ExpressionBuilder(IdentifierRules())
        >>> builder.append("INSERT INTO ").append(TableId.of("t")).append("(")
        >>> builder.append_list().transformed_by(column_names()).of(cols)
        >>> builder.append(") VALUES(").append_multiple(",", "?", 2).append(")")
    """

    def __init__(
        self,
        rules: Optional[IdentifierRules] = None,
        quote_method: QuoteMethod = QuoteMethod.ALWAYS,
    ):
        self.rules = rules or IdentifierRules.DEFAULT
        self.quote_method = quote_method
        self._parts: list[str] = []

    def append(self, obj: Any) -> "ExpressionBuilder":
        """Append literal text, or a TableId/ColumnId as quoted identifiers."""
        if isinstance(obj, TableId):
            self._append_qualified(obj.parts)
        elif isinstance(obj, ColumnId):
            if obj.table is not None:
                self._append_qualified(obj.table.parts)
                self._parts.append(self.rules.identifier_delimiter)
            self.append_column_name(obj.name)
        else:
            self._parts.append(str(obj))
        return self

    def append_identifier(self, name: str, quote: Optional[QuoteMethod] = None) -> "ExpressionBuilder":
        quote = quote or self.quote_method
        if quote is QuoteMethod.ALWAYS:
            self._parts.append(self.rules.quote(name))
        else:
            self._parts.append(name)
        return self

    def append_column_name(self, name: str) -> "ExpressionBuilder":
        return self.append_identifier(name)

    def append_table_name(self, name: str) -> "ExpressionBuilder":
        return self.append(TableId(*_pad(self.rules.parse_qualified(name))))

    def append_list(self) -> ListBuilder:
        return ListBuilder(self)

    def append_multiple(self, delimiter: str, text: str, times: int) -> "ExpressionBuilder":
        """Append ``times`` copies of ``text`` joined by ``delimiter``."""
        self._parts.append(delimiter.join([text] * times))
        return self

    def _append_qualified(self, parts: list[str]) -> None:
        for i, part in enumerate(parts):
            if i:
                self._parts.append(self.rules.identifier_delimiter)
            self.append_identifier(part)

    def __str__(self) -> str:
        return "".join(self._parts)

    def __repr__(self) -> str:
        return f"ExpressionBuilder({str(self)!r})"


def _pad(parts: list[str]) -> list[Optional[str]]:
    """Left-pad name segments to (catalog, schema, table)."""
    if len(parts) > 3:
        raise DialectConfigurationError(f"Too many segments in table name: {parts!r}")
    return [None] * (3 - len(parts)) + parts


__all__ = [
    "ExpressionBuilder",
    "ListBuilder",
    "column_names",
    "column_names_with",
    "column_names_with_prefix",
    "placeholder_in_place_of_column",
]
