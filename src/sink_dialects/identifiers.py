"""
SQL identifier handling.

Provides the per-dialect quoting rules and the table/column references
rendered by the expression builder.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class QuoteMethod(Enum):
    """When identifiers are wrapped in the dialect's quote characters."""

    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def parse(cls, value: str) -> "QuoteMethod":
        return cls(value.lower().strip())


@dataclass(frozen=True)
class IdentifierRules:
    """Quoting characters and qualified-name delimiter of one dialect.

    Examples:
        >>> IdentifierRules().quote("order")
        '"order"'
        >>> IdentifierRules(".", "`", "`").quote("order")
        '`order`'
    """

    DEFAULT: ClassVar["IdentifierRules"]

    identifier_delimiter: str = "."
    leading_quote: str = '"'
    trailing_quote: Optional[str] = None

    def __post_init__(self) -> None:
        if self.trailing_quote is None:
            object.__setattr__(self, "trailing_quote", self.leading_quote)

    def quote(self, name: str) -> str:
        """Quote a single identifier segment.

        Embedded trailing quote characters are doubled.
        """
        if not self.leading_quote or self.is_quoted(name):
            return name
        escaped = name.replace(self.trailing_quote, self.trailing_quote * 2)
        return f"{self.leading_quote}{escaped}{self.trailing_quote}"

    def is_quoted(self, name: str) -> bool:
        return (
            len(name) >= 2
            and name.startswith(self.leading_quote)
            and name.endswith(self.trailing_quote)
        )

    def unquote(self, name: str) -> str:
        if not self.is_quoted(name):
            return name
        inner = name[len(self.leading_quote):len(name) - len(self.trailing_quote)]
        return inner.replace(self.trailing_quote * 2, self.trailing_quote)

    def parse_qualified(self, fqn: str) -> list[str]:
        """Split a qualified name into unquoted segments.

        Delimiters inside quoted segments are kept.

        Examples:
            >>> IdentifierRules().parse_qualified('db."my.table"')
            ['db', 'my.table']
        """
        parts: list[str] = []
        current: list[str] = []
        in_quotes = False
        i = 0
        while i < len(fqn):
            if not in_quotes and fqn.startswith(self.identifier_delimiter, i):
                parts.append("".join(current))
                current = []
                i += len(self.identifier_delimiter)
                continue
            ch = fqn[i]
            if not in_quotes and self.leading_quote and ch == self.leading_quote:
                in_quotes = True
            elif in_quotes and ch == self.trailing_quote:
                if fqn.startswith(self.trailing_quote * 2, i):
                    current.append(ch)
                    i += 1
                else:
                    in_quotes = False
            current.append(ch)
            i += 1
        parts.append("".join(current))
        return [self.unquote(part) for part in parts]


IdentifierRules.DEFAULT = IdentifierRules()


@dataclass(frozen=True)
class TableId:
    """Qualified table reference."""

    catalog: Optional[str]
    schema: Optional[str]
    table: str

    @classmethod
    def of(cls, table: str, schema: Optional[str] = None, catalog: Optional[str] = None) -> "TableId":
        return cls(catalog, schema, table)

    @property
    def parts(self) -> list[str]:
        """Non-empty name segments, outermost first."""
        return [p for p in (self.catalog, self.schema, self.table) if p]

    def __str__(self) -> str:
        return ".".join(self.parts)


@dataclass(frozen=True)
class ColumnId:
    """Qualified column reference."""

    table: Optional[TableId]
    name: str
    alias: Optional[str] = None

    def alias_or_name(self) -> str:
        return self.alias or self.name

    def __str__(self) -> str:
        if self.table is None:
            return self.name
        return f"{self.table}.{self.name}"


__all__ = ["QuoteMethod", "IdentifierRules", "TableId", "ColumnId"]
