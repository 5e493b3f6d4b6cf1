"""
Interactive REPL for the database, plus the text rendering of results.
"""

import argparse
import logging
from typing import Any, List, Optional

from .config import Settings
from .engine import DatabaseEngine
from .results import QueryResult
from .sample import load_library_sample
from .types import Row


def format_value(value: Any) -> str:
    """Render one cell the way the console shows it."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_table(rows: List[Row]) -> str:
    """Render rows as a bordered ASCII table followed by a row count line."""
    if not rows:
        return "Empty result set"

    columns = list(rows[0].keys())
    widths = [
        max([len(col)] + [len(format_value(row.get(col))) for row in rows])
        for col in columns
    ]

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    header = "|" + "|".join(f" {col:<{w}} " for col, w in zip(columns, widths)) + "|"
    lines = [separator, header, separator]
    for row in rows:
        lines.append(
            "|" + "|".join(f" {format_value(row.get(col)):<{w}} " for col, w in zip(columns, widths)) + "|"
        )
    lines.append(separator)
    lines.append(f"{len(rows)} row(s)")
    return "\n".join(lines)


def format_result(result: QueryResult) -> str:
    """Render a result as an error line, a message or a table."""
    if not result.success:
        return f"ERROR: {result.error}"
    if result.message:
        return result.message
    if result.rows is not None:
        return format_table(result.rows)
    return "OK"


class DatabaseREPL:
    """Command-line REPL for interacting with the database."""

    def __init__(self, engine: Optional[DatabaseEngine] = None, settings: Optional[Settings] = None):
        self.settings = settings or (engine.settings if engine else Settings())
        self.engine = engine or DatabaseEngine(self.settings)
        self.history: List[str] = []
        self.running = False

    def execute(self, query: str) -> str:
        """Record the query in the history, run it and return the rendered output."""
        if not query.strip():
            return ""

        self.history.append(query)
        limit = self.settings.history_limit
        if limit is not None and len(self.history) > limit:
            del self.history[:len(self.history) - limit]

        return format_result(self.engine.run(query))

    def get_history(self) -> List[str]:
        return list(self.history)

    def clear_history(self) -> None:
        self.history = []

    def run(self):
        """Run the REPL."""
        self.running = True
        print("minirdbms REPL")
        print("Type 'exit' or 'quit' to exit")
        print("Type 'help' for help\n")

        while self.running:
            try:
                # Get input
                line = input("db> ").strip()

                # Handle special commands
                if line.lower() in ('exit', 'quit'):
                    break
                elif line.lower() == 'help':
                    self._print_help()
                    continue
                elif line.lower() in ('tables', '.tables'):
                    self._list_tables()
                    continue
                elif line.lower() == 'history':
                    self._print_history()
                    continue
                elif line.lower() == '.clear':
                    self.clear_history()
                    print("History cleared")
                    continue

                # Handle multi-line input
                query = line
                while query and not query.endswith(';'):
                    next_line = input("... ").strip()
                    if not next_line:
                        break
                    query += " " + next_line

                if not query:
                    continue

                print(self.execute(query))

            except KeyboardInterrupt:
                print("\nInterrupted")
                break
            except EOFError:
                print()
                break

        self.running = False

    def _print_help(self):
        """Print help information."""
        help_text = """
Available commands:
  exit, quit           - Exit the REPL
  help                 - Show this help
  tables, .tables      - List all tables
  history              - Show executed queries
  .clear               - Clear the query history

Queries (end with ';', or an empty line):
  CREATE TABLE         - Create a new table
  DROP TABLE           - Drop a table
  INSERT INTO          - Insert data into a table
  SELECT               - Query data, optionally with INNER/LEFT JOIN
  UPDATE               - Update data in a table
  DELETE FROM          - Delete data from a table
  SHOW TABLES          - List tables as a result set
  DESCRIBE, DESC       - Show the columns of a table

Examples:
  CREATE TABLE users (id number PRIMARY KEY, name string NOT NULL, age number);
  INSERT INTO users VALUES (1, 'Alice', 30);
  SELECT name, age FROM users WHERE age > 25;
  UPDATE users SET age = 31 WHERE name = 'Alice';
  DELETE FROM users WHERE id = 1;
        """
        print(help_text)

    def _list_tables(self):
        """List all tables."""
        tables = self.engine.list_tables()
        if not tables:
            print("No tables in database.")
            return

        print("Tables:")
        for table in tables:
            info = self.engine.get_table_info(table)
            print(f"  {table} ({info['row_count']} rows)")
            for col in info['schema']:
                constraints = []
                if col['is_primary']:
                    constraints.append("PRIMARY KEY")
                if col['is_unique']:
                    constraints.append("UNIQUE")
                if not col['nullable'] and not col['is_primary']:
                    constraints.append("NOT NULL")
                constraint_str = f" ({', '.join(constraints)})" if constraints else ""
                print(f"    {col['name']} {col['type']}{constraint_str}")

    def _print_history(self):
        if not self.history:
            print("History is empty.")
            return
        for number, query in enumerate(self.history, start=1):
            print(f"{number:>4}  {query}")


def main(argv: Optional[List[str]] = None):
    """Main entry point for the REPL."""
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="minirdbms REPL")
    parser.add_argument("--sample", action="store_true", default=settings.load_sample,
                        help="Load the authors/books sample tables")
    parser.add_argument("--strict-updates", action="store_true", default=settings.strict_updates,
                        help="Fail UPDATE statements with invalid field values instead of skipping them")
    parser.add_argument("--history-limit", type=int, default=settings.history_limit,
                        help="Keep at most this many queries in the history")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    settings.load_sample = args.sample
    settings.strict_updates = args.strict_updates
    settings.history_limit = args.history_limit

    engine = DatabaseEngine(settings)
    if settings.load_sample:
        load_library_sample(engine)

    repl = DatabaseREPL(engine)
    repl.run()


if __name__ == "__main__":
    main()
