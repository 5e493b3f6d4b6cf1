"""
Table catalog: maps table names to in-memory tables.
"""

import logging
from typing import Dict, List, Optional

from .errors import SchemaError
from .table import Table
from .types import TableSchema

logger = logging.getLogger(__name__)


class Database:
    """Owns every table of one engine instance."""

    def __init__(self):
        self._tables: Dict[str, Table] = {}

    def create_table(self, schema: TableSchema) -> Table:
        """Register a new table; resolves the schema's primary key column."""
        if schema.name in self._tables:
            raise SchemaError(f"Table {schema.name} already exists")

        primary_keys = [col.name for col in schema.columns if col.is_primary]
        if len(primary_keys) > 1:
            raise SchemaError("Multiple primary keys not supported")

        seen = set()
        for col in schema.columns:
            if col.name in seen:
                raise SchemaError(f"Duplicate column {col.name} in table {schema.name}")
            seen.add(col.name)

        schema.primary_key = primary_keys[0] if primary_keys else None
        table = Table(schema)
        self._tables[schema.name] = table
        logger.info("Created table %s (%d columns)", schema.name, len(schema.columns))
        return table

    def drop_table(self, name: str) -> None:
        if name not in self._tables:
            raise SchemaError(f"Table {name} does not exist")
        del self._tables[name]
        logger.info("Dropped table %s", name)

    def get_table(self, name: str) -> Optional[Table]:
        return self._tables.get(name)

    def require_table(self, name: str) -> Table:
        """Like get_table, but raises SchemaError for an unknown name."""
        table = self._tables.get(name)
        if table is None:
            raise SchemaError(f"Table {name} does not exist")
        return table

    def list_tables(self) -> List[str]:
        return list(self._tables)

    def has_table(self, name: str) -> bool:
        return name in self._tables
