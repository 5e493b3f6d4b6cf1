"""
Query executor that processes parsed queries.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from .database import Database
from .errors import SchemaError
from .query import (
    Condition,
    CreateTableQuery,
    DeleteQuery,
    DescribeQuery,
    DropTableQuery,
    InsertQuery,
    JoinClause,
    JoinType,
    QueryType,
    SelectQuery,
    UpdateQuery,
)
from .results import QueryResult
from .table import Table
from .types import Column, Row, TableSchema, is_number, values_equal


def _compare(row_value: Any, operator: str, value: Any) -> bool:
    if operator == "=":
        return values_equal(row_value, value)
    if operator == "!=":
        return not values_equal(row_value, value)

    # Ordering applies to two numbers or two strings; anything else never matches.
    both_numbers = is_number(row_value) and is_number(value)
    both_strings = isinstance(row_value, str) and isinstance(value, str)
    if not (both_numbers or both_strings):
        return False
    if operator == ">":
        return row_value > value
    if operator == "<":
        return row_value < value
    if operator == ">=":
        return row_value >= value
    if operator == "<=":
        return row_value <= value
    return False


def evaluate_where(row: Row, conditions: Sequence[Condition]) -> bool:
    """True when the row satisfies every condition (AND semantics)."""
    return all(_compare(row.get(cond.column), cond.operator, cond.value) for cond in conditions)


def build_predicate(conditions: Optional[Sequence[Condition]]) -> Callable[[Row], bool]:
    """Turn a WHERE clause into a row predicate; no clause matches every row."""
    if not conditions:
        return lambda row: True
    return lambda row: evaluate_where(row, conditions)


def _qualify(table_name: str, row: Row) -> Row:
    return {f"{table_name}.{key}": value for key, value in row.items()}


def nested_loop_join(left_rows: List[Row], right_rows: List[Row], left_table: str,
                     right_table: str, left_column: str, right_column: str,
                     join_type: JoinType = JoinType.INNER) -> List[Row]:
    """
    Join every left row against every right row on left_column = right_column.

    Output keys are qualified as <table>.<column>. A LEFT join keeps left rows
    without a match, carrying only their own columns. Keys match on exact
    equality, so a NULL key joins only a NULL key.
    """
    result = []
    for left_row in left_rows:
        left_value = left_row.get(left_column)
        matched = False

        for right_row in right_rows:
            if values_equal(left_value, right_row.get(right_column)):
                matched = True
                merged_row = _qualify(left_table, left_row)
                merged_row.update(_qualify(right_table, right_row))
                result.append(merged_row)

        if not matched and join_type == JoinType.LEFT:
            result.append(_qualify(left_table, left_row))

    return result


class QueryExecutor:
    """Executes parsed queries against the database."""

    def __init__(self, database: Database, strict_updates: bool = False):
        self.database = database
        self.strict_updates = strict_updates
        self._handlers: Dict[QueryType, Callable[[Any], QueryResult]] = {
            QueryType.CREATE_TABLE: self._execute_create_table,
            QueryType.DROP_TABLE: self._execute_drop_table,
            QueryType.INSERT: self._execute_insert,
            QueryType.SELECT: self._execute_select,
            QueryType.UPDATE: self._execute_update,
            QueryType.DELETE: self._execute_delete,
            QueryType.SHOW_TABLES: self._execute_show_tables,
            QueryType.DESCRIBE: self._execute_describe,
        }

    def execute(self, parsed_query) -> QueryResult:
        """Execute a parsed query."""
        handler = self._handlers.get(getattr(parsed_query, "type", None))
        if handler is None:
            raise ValueError(f"Unsupported query type: {parsed_query!r}")
        return handler(parsed_query)

    def _execute_create_table(self, query: CreateTableQuery) -> QueryResult:
        """Execute CREATE TABLE query."""
        columns = [
            Column(
                name=col_def.name,
                dtype=col_def.dtype,
                is_primary=col_def.primary_key,
                is_unique=col_def.unique,
                nullable=col_def.nullable,
            )
            for col_def in query.columns
        ]
        self.database.create_table(TableSchema(name=query.table_name, columns=columns))
        return QueryResult.with_message(f"Table {query.table_name} created")

    def _execute_drop_table(self, query: DropTableQuery) -> QueryResult:
        self.database.drop_table(query.table_name)
        return QueryResult.with_message(f"Table {query.table_name} dropped")

    def _execute_insert(self, query: InsertQuery) -> QueryResult:
        """Execute INSERT query."""
        table = self.database.require_table(query.table_name)
        schema = table.schema
        values = list(query.values)

        if query.columns is not None:
            col_names = list(query.columns)
            if len(col_names) != len(values):
                raise SchemaError(
                    f"Column count ({len(col_names)}) doesn't match value count ({len(values)})"
                )
            for col_name in col_names:
                if schema.get_column(col_name) is None:
                    raise SchemaError(f"Column {col_name} does not exist in table {table.name}")
        else:
            col_names = schema.column_names
            if len(values) > len(col_names):
                raise SchemaError(
                    f"Table {table.name} has {len(col_names)} columns but {len(values)} values were supplied"
                )

        table.insert(dict(zip(col_names, values)))
        return QueryResult.with_message("1 row inserted", row_count=1)

    def _execute_select(self, query: SelectQuery) -> QueryResult:
        """Execute SELECT query."""
        table = self.database.get_table(query.table_name)
        if table is None:
            raise SchemaError(f"Table {query.table_name} does not exist")

        for cond in query.where or ():
            if cond.table is not None and cond.table != table.name:
                raise SchemaError(
                    f"WHERE may only reference columns of {table.name}, not {cond.table}.{cond.column}"
                )

        # WHERE filters the FROM table's rows before any join
        predicate = build_predicate(query.where)

        if query.join is None:
            self._check_columns(table.schema, query.columns)
            rows = table.select(list(query.columns), predicate)
            return QueryResult.with_rows(rows)

        join_table = self.database.get_table(query.join.table)
        if join_table is None:
            raise SchemaError(f"Join table {query.join.table} does not exist")

        rows = self._execute_join(table, join_table, query.join, table.select(None, predicate))
        return QueryResult.with_rows(self._project_joined(rows, query.columns))

    def _execute_join(self, left: Table, right: Table, join: JoinClause,
                      left_rows: List[Row]) -> List[Row]:
        left_column, right_column = join.left_column, join.right_column
        # ON may name the joined table first: ... JOIN b ON b.x = a.y
        if join.left_table == right.name and join.right_table == left.name and left.name != right.name:
            left_column, right_column = right_column, left_column

        for col_name, schema in ((left_column, left.schema), (right_column, right.schema)):
            if schema.get_column(col_name) is None:
                raise SchemaError(f"Column {col_name} does not exist in table {schema.name}")

        return nested_loop_join(
            left_rows,
            right.select(),
            left.name,
            right.name,
            left_column,
            right_column,
            join.join_type,
        )

    @staticmethod
    def _check_columns(schema: TableSchema, columns: Sequence[str]) -> None:
        if not columns or columns[0] == "*":
            return
        for col_name in columns:
            if schema.get_column(col_name) is None:
                raise SchemaError(f"Column {col_name} does not exist in table {schema.name}")

    @staticmethod
    def _project_joined(rows: List[Row], columns: Sequence[str]) -> List[Row]:
        """Keep qualified keys requested either as table.column or bare column."""
        if not columns or columns[0] == "*":
            return rows
        wanted = set(columns)
        return [
            {
                key: value
                for key, value in row.items()
                if key in wanted or key.split(".", 1)[-1] in wanted
            }
            for row in rows
        ]

    def _execute_update(self, query: UpdateQuery) -> QueryResult:
        """Execute UPDATE query."""
        table = self.database.require_table(query.table_name)
        outcome = table.update(query.set, build_predicate(query.where), strict=self.strict_updates)
        return QueryResult.with_message(
            f"{outcome.count} row(s) updated",
            row_count=outcome.count,
            warnings=outcome.warnings or None,
        )

    def _execute_delete(self, query: DeleteQuery) -> QueryResult:
        """Execute DELETE query."""
        table = self.database.require_table(query.table_name)
        count = table.delete(build_predicate(query.where))
        return QueryResult.with_message(f"{count} row(s) deleted", row_count=count)

    def _execute_show_tables(self, query) -> QueryResult:
        return QueryResult.with_rows(
            [{"table_name": name} for name in self.database.list_tables()]
        )

    def _execute_describe(self, query: DescribeQuery) -> QueryResult:
        table = self.database.require_table(query.table_name)
        rows = [
            {
                "column": col.name,
                "type": col.dtype.value,
                "nullable": "YES" if col.nullable else "NO",
                "key": col.key_marker,
            }
            for col in table.schema.columns
        ]
        return QueryResult.with_rows(rows)
