"""
Structured query descriptions produced by the parser.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from .types import DataType


class QueryType(Enum):
    """Types of statements we support."""
    CREATE_TABLE = "CREATE_TABLE"
    DROP_TABLE = "DROP_TABLE"
    INSERT = "INSERT"
    SELECT = "SELECT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SHOW_TABLES = "SHOW_TABLES"
    DESCRIBE = "DESCRIBE"


class JoinType(Enum):
    INNER = "INNER"
    LEFT = "LEFT"


@dataclass(frozen=True)
class ColumnDefinition:
    """One column of a CREATE TABLE statement."""
    name: str
    dtype: DataType
    primary_key: bool = False
    unique: bool = False
    nullable: bool = True


@dataclass(frozen=True)
class Condition:
    """`column OP value`; `table` is set when the column was qualified."""
    column: str
    operator: str
    value: Any
    table: Optional[str] = None


@dataclass(frozen=True)
class JoinClause:
    """`<join_type> JOIN table ON left_table.left_column = right_table.right_column`"""
    join_type: JoinType
    table: str
    left_table: str
    left_column: str
    right_table: str
    right_column: str


@dataclass(frozen=True)
class CreateTableQuery:
    table_name: str
    columns: Tuple[ColumnDefinition, ...]
    type: QueryType = field(default=QueryType.CREATE_TABLE, init=False)


@dataclass(frozen=True)
class DropTableQuery:
    table_name: str
    type: QueryType = field(default=QueryType.DROP_TABLE, init=False)


@dataclass(frozen=True)
class InsertQuery:
    table_name: str
    values: Tuple[Any, ...]
    columns: Optional[Tuple[str, ...]] = None
    type: QueryType = field(default=QueryType.INSERT, init=False)


@dataclass(frozen=True)
class SelectQuery:
    table_name: str
    columns: Tuple[str, ...] = ("*",)
    where: Optional[Tuple[Condition, ...]] = None
    join: Optional[JoinClause] = None
    type: QueryType = field(default=QueryType.SELECT, init=False)


@dataclass(frozen=True)
class UpdateQuery:
    table_name: str
    assignments: Tuple[Tuple[str, Any], ...]
    where: Optional[Tuple[Condition, ...]] = None
    type: QueryType = field(default=QueryType.UPDATE, init=False)

    @property
    def set(self):
        """Assignments as an ordered column -> value mapping."""
        return dict(self.assignments)


@dataclass(frozen=True)
class DeleteQuery:
    table_name: str
    where: Optional[Tuple[Condition, ...]] = None
    type: QueryType = field(default=QueryType.DELETE, init=False)


@dataclass(frozen=True)
class ShowTablesQuery:
    type: QueryType = field(default=QueryType.SHOW_TABLES, init=False)


@dataclass(frozen=True)
class DescribeQuery:
    table_name: str
    type: QueryType = field(default=QueryType.DESCRIBE, init=False)
