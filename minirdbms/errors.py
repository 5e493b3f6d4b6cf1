"""
Exception types raised by the RDBMS.

Each error also derives from the builtin it refines, so callers that already
catch SyntaxError/ValueError/TypeError keep working.
"""


class DatabaseError(Exception):
    """Base class for all database errors."""


class QuerySyntaxError(DatabaseError, SyntaxError):
    """The query text does not match any supported statement shape."""


class SchemaError(DatabaseError, ValueError):
    """A table or column is missing, duplicated or declared inconsistently."""


class ConstraintError(DatabaseError, ValueError):
    """A NOT NULL, PRIMARY KEY or UNIQUE constraint would be violated."""


class ColumnTypeError(DatabaseError, TypeError):
    """A value does not match the declared type of its column."""
