"""Database dialect system for sink connectors.

This module provides the dialect abstraction that lets many SQL engines
share one statement-generation pipeline while overriding only the points
where they diverge from ANSI SQL.
"""

from sink_dialects.dialects.base import BindResult, DatabaseDialect
from sink_dialects.dialects.generic import GenericDialect
from sink_dialects.dialects.griddb import GriddbDialect
from sink_dialects.dialects.mysql import MySQLDialect
from sink_dialects.dialects.postgresql import PostgreSQLDialect
from sink_dialects.dialects.registry import (
    DialectProvider,
    DialectRegistry,
    SubprotocolBasedProvider,
    default_registry,
    extract_subprotocol,
)
from sink_dialects.dialects.sqlite import SQLiteDialect

__all__ = [
    "BindResult",
    "DatabaseDialect",
    "GenericDialect",
    "GriddbDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "DialectProvider",
    "DialectRegistry",
    "SubprotocolBasedProvider",
    "default_registry",
    "extract_subprotocol",
]
