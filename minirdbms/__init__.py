"""
minirdbms: a minimal in-memory relational database.
"""

from .config import Settings
from .engine import DatabaseEngine
from .errors import ColumnTypeError, ConstraintError, DatabaseError, QuerySyntaxError, SchemaError
from .repl import DatabaseREPL, format_result
from .results import QueryResult

__all__ = [
    'DatabaseEngine',
    'DatabaseREPL',
    'QueryResult',
    'Settings',
    'format_result',
    'DatabaseError',
    'QuerySyntaxError',
    'SchemaError',
    'ConstraintError',
    'ColumnTypeError',
]
