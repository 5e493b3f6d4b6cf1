"""
In-memory table storage with constraint-backed indexes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import ColumnTypeError, ConstraintError
from .types import Column, Index, Row, TableSchema, values_equal

logger = logging.getLogger(__name__)

Predicate = Callable[[Row], bool]


@dataclass
class UpdateOutcome:
    """Rows matched by an UPDATE and the fields it had to ignore."""
    count: int = 0
    warnings: List[str] = field(default_factory=list)


class Table:
    """
    Ordered rows conforming to a schema.

    A row's position in the row list is its only identity; every primary key
    and unique column owns an Index mapping values to those positions.
    """

    def __init__(self, schema: TableSchema):
        self.schema = schema
        self.rows: List[Row] = []
        self.indexes: Dict[str, Index] = {
            col.name: Index(col.name) for col in schema.columns if col.is_indexed
        }

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def insert(self, row: Dict[str, Any]) -> Row:
        """
        Insert one row built from a partial column->value mapping.

        Missing columns become NULL and unknown keys are ignored.

        Raises:
            ConstraintError: NULL into a non-nullable column or a duplicate key
            ColumnTypeError: value does not match the column type
        """
        new_row: Row = {}

        for col in self.schema.columns:
            value = row.get(col.name)

            if value is None:
                if not col.nullable:
                    raise ConstraintError(f"Column {col.name} cannot be null")
                new_row[col.name] = None
                continue

            if not col.validate_value(value):
                raise ColumnTypeError(
                    f"Invalid type for column {col.name}: expected {col.dtype.value}"
                )

            if col.is_indexed and self.indexes[col.name].has_value(value):
                kind = "primary key" if col.is_primary else "unique"
                raise ConstraintError(f"Duplicate value for {kind} column {col.name}")

            new_row[col.name] = value

        position = len(self.rows)
        self.rows.append(new_row)
        for col_name, index in self.indexes.items():
            index.add(new_row[col_name], position)

        return dict(new_row)

    def select(self, columns: Optional[List[str]] = None,
               predicate: Optional[Predicate] = None) -> List[Row]:
        """Return copies of the matching rows projected to `columns`."""
        rows = [row for row in self.rows if predicate is None or predicate(row)]

        if not columns or columns[0] == "*":
            return [dict(row) for row in rows]

        wanted = set(columns)
        return [{k: v for k, v in row.items() if k in wanted} for row in rows]

    def update(self, updates: Dict[str, Any], predicate: Predicate,
               strict: bool = False) -> UpdateOutcome:
        """
        Apply `updates` to every row matching `predicate`.

        Unknown columns are skipped. A value that fails validation is skipped
        for that field and reported as a warning, unless `strict` is set, in
        which case the error is raised before anything changes. The returned
        count is the number of matched rows, not the number of changed fields.
        """
        outcome = UpdateOutcome()
        accepted: Dict[str, Any] = {}

        for col_name, value in updates.items():
            col = self.schema.get_column(col_name)
            if col is None:
                continue
            problem = self._field_problem(col, value)
            if problem is None:
                accepted[col_name] = value
                continue
            if strict:
                raise problem
            outcome.warnings.append(f"ignored field '{col_name}': {problem}")

        matched = [pos for pos, row in enumerate(self.rows) if predicate(row)]
        outcome.count = len(matched)
        if matched:
            self._check_unique_updates(accepted, matched)

        for position in matched:
            row = self.rows[position]
            for col_name, value in accepted.items():
                index = self.indexes.get(col_name)
                if index is not None and not values_equal(value, row[col_name]):
                    index.remove(row[col_name], position)
                    index.add(value, position)
                row[col_name] = value

        for warning in outcome.warnings:
            logger.warning("UPDATE %s: %s", self.name, warning)
        return outcome

    def delete(self, predicate: Predicate) -> int:
        """Delete matching rows and rebuild the indexes; returns the count."""
        to_delete = [pos for pos, row in enumerate(self.rows) if predicate(row)]

        for position in reversed(to_delete):
            row = self.rows[position]
            for col_name, index in self.indexes.items():
                index.remove(row[col_name], position)
            del self.rows[position]

        # Later rows shifted down, so positions held by the indexes are stale.
        if to_delete:
            self.rebuild_indexes()
        return len(to_delete)

    def find_by_index(self, column: str, value: Any) -> List[Row]:
        """Rows whose indexed `column` holds `value`; empty if not indexed."""
        index = self.indexes.get(column)
        if index is None:
            return []
        return [dict(self.rows[pos]) for pos in index.find(value)]

    def rebuild_indexes(self) -> None:
        """Re-scan all rows into freshly cleared indexes."""
        for index in self.indexes.values():
            index.clear()
        for position, row in enumerate(self.rows):
            for col_name, index in self.indexes.items():
                index.add(row[col_name], position)

    def _field_problem(self, col: Column, value: Any) -> Optional[Exception]:
        if value is None:
            if not col.nullable:
                return ConstraintError(f"Column {col.name} cannot be null")
            return None
        if not col.validate_value(value):
            return ColumnTypeError(
                f"Invalid type for column {col.name}: expected {col.dtype.value}"
            )
        return None

    def _check_unique_updates(self, accepted: Dict[str, Any], matched: List[int]) -> None:
        """Raise ConstraintError if the update would duplicate an indexed value."""
        for col_name, value in accepted.items():
            index = self.indexes.get(col_name)
            if index is None or value is None:
                continue
            col = self.schema.get_column(col_name)
            kind = "primary key" if col.is_primary else "unique"
            if len(matched) > 1:
                raise ConstraintError(f"Duplicate value for {kind} column {col_name}")
            holders = set(index.find(value)) - set(matched)
            if holders:
                raise ConstraintError(f"Duplicate value for {kind} column {col_name}")
