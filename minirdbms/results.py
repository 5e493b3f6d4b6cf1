"""
Uniform result value returned for every query.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .types import Row


@dataclass
class QueryResult:
    """
    Outcome of one statement.

    A successful result carries either rows (SELECT, SHOW TABLES, DESCRIBE)
    or a message (everything else); a failed one carries only `error`.
    """
    success: bool
    rows: Optional[List[Row]] = None
    row_count: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None
    warnings: Optional[List[str]] = None

    @classmethod
    def with_rows(cls, rows: List[Row]) -> "QueryResult":
        return cls(success=True, rows=rows, row_count=len(rows))

    @classmethod
    def with_message(cls, message: str, row_count: Optional[int] = None,
                     warnings: Optional[List[str]] = None) -> "QueryResult":
        return cls(success=True, message=message, row_count=row_count, warnings=warnings)

    @classmethod
    def failure(cls, error: str) -> "QueryResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: {success, rows?, rowCount?, message?, error?, warnings?}."""
        data: Dict[str, Any] = {"success": self.success}
        if self.rows is not None:
            data["rows"] = self.rows
        if self.row_count is not None:
            data["rowCount"] = self.row_count
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
        if self.warnings:
            data["warnings"] = self.warnings
        return data
