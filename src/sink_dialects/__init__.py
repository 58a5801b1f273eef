"""
Sink Dialects - SQL dialect abstraction layer for data-sink connectors.

This package maps record schemas to dialect-correct SQL types, binds logical
values into prepared parameter slots, and builds DDL and upsert statements
for a range of database engines.
"""

__version__ = "0.1.0"
