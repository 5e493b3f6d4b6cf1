"""
Core data types and constants for the RDBMS.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field

Value = Union[str, int, float, bool, None]
Row = Dict[str, Value]


class DataType(Enum):
    """Supported column data types."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


def is_number(value: Any) -> bool:
    """True for int/float values; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_kind(value: Any) -> Optional[str]:
    """Classify a runtime value as 'string', 'number', 'boolean' or None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return DataType.BOOLEAN.value
    if is_number(value):
        return DataType.NUMBER.value
    if isinstance(value, str):
        return DataType.STRING.value
    return type(value).__name__


def values_equal(left: Any, right: Any) -> bool:
    """Exact equality: both value and kind must match (True never equals 1)."""
    return value_kind(left) == value_kind(right) and left == right


@dataclass
class Column:
    """Represents a table column definition."""
    name: str
    dtype: DataType
    is_primary: bool = False
    is_unique: bool = False
    nullable: bool = True

    def __post_init__(self):
        if self.is_primary:
            self.nullable = False

    @property
    def is_indexed(self) -> bool:
        return self.is_primary or self.is_unique

    def validate_value(self, value: Any) -> bool:
        """Validate a non-NULL value against the column's data type."""
        if self.dtype == DataType.STRING:
            return isinstance(value, str)
        elif self.dtype == DataType.NUMBER:
            return is_number(value)
        elif self.dtype == DataType.BOOLEAN:
            return isinstance(value, bool)
        return False

    @property
    def key_marker(self) -> str:
        if self.is_primary:
            return "PRI"
        if self.is_unique:
            return "UNI"
        return ""


@dataclass
class TableSchema:
    """Table name, ordered columns and the resolved primary key column."""
    name: str
    columns: List[Column] = field(default_factory=list)
    primary_key: Optional[str] = None

    def get_column(self, name: str) -> Optional[Column]:
        return next((col for col in self.columns if col.name == name), None)

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]


class Index:
    """Basic hash-based index implementation."""

    def __init__(self, column_name: str = ""):
        self.column_name = column_name
        self._index: Dict[Tuple[Optional[str], Any], List[int]] = {}  # key -> positions

    @staticmethod
    def _key(value: Any) -> Tuple[Optional[str], Any]:
        # Typed keys keep True, 1 and "1" apart while 1 and 1.0 still collide.
        return value_kind(value), value

    def add(self, value: Any, position: int) -> None:
        """Record that the row at `position` holds `value`."""
        if value is None:
            return  # Don't index NULL values

        positions = self._index.setdefault(self._key(value), [])
        if position not in positions:
            positions.append(position)

    def remove(self, value: Any, position: int) -> None:
        """Forget that the row at `position` holds `value`."""
        if value is None:
            return

        key = self._key(value)
        positions = self._index.get(key)
        if positions is None:
            return
        if position in positions:
            positions.remove(position)
        if not positions:
            del self._index[key]

    def find(self, value: Any) -> List[int]:
        """Find row positions for a given value."""
        if value is None:
            return []
        return list(self._index.get(self._key(value), []))

    def has_value(self, value: Any) -> bool:
        """Check if value exists in index."""
        return value is not None and self._key(value) in self._index

    def clear(self) -> None:
        self._index.clear()

    def __contains__(self, value: Any) -> bool:
        return self.has_value(value)

    def __len__(self) -> int:
        return len(self._index)
