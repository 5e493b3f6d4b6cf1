"""
Main database engine class.
"""

import logging
from typing import Any, Dict, List, Optional

from .config import Settings
from .database import Database
from .executor import QueryExecutor
from .parser import QueryParser
from .results import QueryResult

logger = logging.getLogger(__name__)


class DatabaseEngine:
    """
    Main database engine interface.

    Each instance owns an independent in-memory database, so several engines
    can live side by side in one process.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.database = Database()
        self.parser = QueryParser()
        self.executor = QueryExecutor(self.database, strict_updates=self.settings.strict_updates)

    def execute(self, query: str) -> QueryResult:
        """
        Execute a SQL-like query.

        Args:
            query: SQL-like query string

        Returns:
            Successful QueryResult

        Raises:
            QuerySyntaxError: If query syntax is invalid
            SchemaError, ConstraintError, ColumnTypeError: If the statement cannot be applied
        """
        logger.debug("Executing query: %s", query)

        # Parse the query
        parsed_query = self.parser.parse(query)

        # Execute the query
        return self.executor.execute(parsed_query)

    def run(self, query: str) -> QueryResult:
        """Execute a query, reporting every failure as an unsuccessful result."""
        try:
            return self.execute(query)
        except Exception as e:
            logger.info("Query failed: %s (%s: %s)", query, type(e).__name__, e)
            return QueryResult.failure(str(e) or type(e).__name__)

    def list_tables(self) -> List[str]:
        """List all tables in the database."""
        return self.database.list_tables()

    def get_table_info(self, table_name: str) -> Dict[str, Any]:
        """Get information about a table."""
        table = self.database.require_table(table_name)
        return {
            'name': table.name,
            'schema': [
                {
                    'name': col.name,
                    'type': col.dtype.value,
                    'is_primary': col.is_primary,
                    'is_unique': col.is_unique,
                    'nullable': col.nullable,
                }
                for col in table.schema.columns
            ],
            'primary_key': table.schema.primary_key,
            'row_count': table.row_count,
        }
