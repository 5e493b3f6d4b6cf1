"""
Sample library data: authors and the books they wrote.
"""

from typing import List

from .engine import DatabaseEngine
from .results import QueryResult

LIBRARY_SCHEMA = [
    "CREATE TABLE authors (id number PRIMARY KEY, name string NOT NULL, country string NOT NULL)",
    "CREATE TABLE books (id number PRIMARY KEY, title string NOT NULL, author_id number NOT NULL, "
    "year number NOT NULL, available boolean NOT NULL)",
]

LIBRARY_ROWS = [
    "INSERT INTO authors (id, name, country) VALUES (1, 'George Orwell', 'UK')",
    "INSERT INTO authors (id, name, country) VALUES (2, 'Jane Austen', 'UK')",
    "INSERT INTO authors (id, name, country) VALUES (3, 'Mark Twain', 'USA')",
    "INSERT INTO books (id, title, author_id, year, available) VALUES (1, '1984', 1, 1949, true)",
    "INSERT INTO books (id, title, author_id, year, available) VALUES (2, 'Animal Farm', 1, 1945, true)",
    "INSERT INTO books (id, title, author_id, year, available) "
    "VALUES (3, 'Pride and Prejudice', 2, 1813, true)",
    "INSERT INTO books (id, title, author_id, year, available) VALUES (4, 'Emma', 2, 1815, false)",
    "INSERT INTO books (id, title, author_id, year, available) "
    "VALUES (5, 'The Adventures of Tom Sawyer', 3, 1876, true)",
]


def load_library_sample(engine: DatabaseEngine) -> List[QueryResult]:
    """Create and fill the authors/books tables; returns one result per statement."""
    return [engine.run(query) for query in LIBRARY_SCHEMA + LIBRARY_ROWS]
