"""
FastAPI server exposing the database as a REST API.
"""

import argparse
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from minirdbms.config import Settings
from minirdbms.engine import DatabaseEngine
from minirdbms.repl import format_result
from minirdbms.sample import LIBRARY_SCHEMA, load_library_sample

logger = logging.getLogger(__name__)


# Pydantic models for request validation
class QueryRequest(BaseModel):
    query: str


class AuthorCreate(BaseModel):
    name: str
    country: str


class BookCreate(BaseModel):
    title: str
    author_id: int
    year: int
    available: bool = True


class AvailabilityUpdate(BaseModel):
    available: bool


def quote(text: str) -> str:
    """Quote text as a string literal; the query language has no escapes."""
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    raise HTTPException(status_code=400, detail="Text may not contain both ' and \" quotes")


def create_app(engine: Optional[DatabaseEngine] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around one engine instance."""
    settings = settings or (engine.settings if engine else Settings.from_env())
    engine = engine or DatabaseEngine(settings)
    if settings.load_sample:
        load_library_sample(engine)

    app = FastAPI(title="minirdbms API", version="1.0.0")
    app.state.engine = engine

    # Enable CORS for browser front-ends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def run(query: str) -> List[Dict[str, Any]]:
        """Run a statement for an endpoint; failures become HTTP 400."""
        result = engine.run(query)
        if not result.success:
            raise HTTPException(status_code=400, detail=result.error)
        return result.rows or []

    def ensure_library() -> None:
        for statement in LIBRARY_SCHEMA:
            table_name = statement.split()[2]
            if not engine.database.has_table(table_name):
                run(statement)

    def next_id(table_name: str) -> int:
        rows = run(f"SELECT id FROM {table_name}")
        return max([row["id"] for row in rows], default=0) + 1

    def require_row(table_name: str, row_id: int, label: str) -> Dict[str, Any]:
        rows = run(f"SELECT * FROM {table_name} WHERE id = {row_id}")
        if not rows:
            raise HTTPException(status_code=404, detail=f"{label} with ID {row_id} not found")
        return rows[0]

    # ========== GENERAL PURPOSE ENDPOINTS ==========

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "minirdbms API",
            "version": "1.0.0",
            "endpoints": {
                "general": {
                    "POST /query": "Execute a query, returns the structured result",
                    "POST /query/text": "Execute a query, returns console output",
                    "GET /tables": "List all tables",
                    "GET /tables/{name}": "Get table info",
                },
                "library": {
                    "GET /authors": "List authors",
                    "POST /authors": "Create author",
                    "DELETE /authors/{id}": "Delete author without books",
                    "GET /books": "List books",
                    "POST /books": "Create book",
                    "PATCH /books/{id}/availability": "Set book availability",
                    "DELETE /books/{id}": "Delete book",
                    "GET /books-with-authors": "Books LEFT JOIN authors",
                },
            },
        }

    @app.post("/query")
    async def execute_query(request: QueryRequest):
        """Execute a raw SQL-like query."""
        if not request.query.strip():
            raise HTTPException(status_code=400, detail="Query string is required")
        return engine.run(request.query).to_dict()

    @app.post("/query/text")
    async def execute_query_text(request: QueryRequest):
        """Execute a query and render the result as console text."""
        if not request.query.strip():
            raise HTTPException(status_code=400, detail="Query string is required")
        return {"output": format_result(engine.run(request.query))}

    @app.get("/tables")
    async def list_tables():
        """List all tables in the database."""
        return {"tables": engine.list_tables()}

    @app.get("/tables/{table_name}")
    async def get_table_info(table_name: str):
        """Get information about a specific table."""
        if not engine.database.has_table(table_name):
            raise HTTPException(status_code=404, detail=f"Table {table_name} does not exist")
        return engine.get_table_info(table_name)

    # ========== LIBRARY ENDPOINTS ==========

    @app.get("/authors")
    async def get_authors():
        ensure_library()
        return {"authors": run("SELECT * FROM authors")}

    @app.post("/authors", status_code=201)
    async def create_author(author: AuthorCreate):
        ensure_library()
        author_id = next_id("authors")
        run(
            f"INSERT INTO authors (id, name, country) "
            f"VALUES ({author_id}, {quote(author.name)}, {quote(author.country)})"
        )
        return {"status": "OK", "id": author_id, "message": "Author created successfully"}

    @app.delete("/authors/{author_id}")
    async def delete_author(author_id: int):
        """Delete an author that no book refers to."""
        ensure_library()
        require_row("authors", author_id, "Author")
        if run(f"SELECT id FROM books WHERE author_id = {author_id}"):
            raise HTTPException(status_code=400, detail="Cannot delete author with existing books")
        run(f"DELETE FROM authors WHERE id = {author_id}")
        return {"status": "OK", "message": "Author deleted successfully"}

    @app.get("/books")
    async def get_books():
        ensure_library()
        return {"books": run("SELECT * FROM books")}

    @app.post("/books", status_code=201)
    async def create_book(book: BookCreate):
        ensure_library()
        require_row("authors", book.author_id, "Author")
        book_id = next_id("books")
        available = "true" if book.available else "false"
        run(
            f"INSERT INTO books (id, title, author_id, year, available) "
            f"VALUES ({book_id}, {quote(book.title)}, {book.author_id}, {book.year}, {available})"
        )
        return {"status": "OK", "id": book_id, "message": "Book created successfully"}

    @app.patch("/books/{book_id}/availability")
    async def set_availability(book_id: int, update: AvailabilityUpdate):
        ensure_library()
        require_row("books", book_id, "Book")
        available = "true" if update.available else "false"
        run(f"UPDATE books SET available = {available} WHERE id = {book_id}")
        return {"status": "OK", "id": book_id, "available": update.available}

    @app.delete("/books/{book_id}")
    async def delete_book(book_id: int):
        ensure_library()
        require_row("books", book_id, "Book")
        run(f"DELETE FROM books WHERE id = {book_id}")
        return {"status": "OK", "message": "Book deleted successfully"}

    @app.get("/books-with-authors")
    async def get_books_with_authors():
        """Books with their author (LEFT JOIN keeps books whose author is gone)."""
        ensure_library()
        return {
            "data": run("SELECT * FROM books LEFT JOIN authors ON books.author_id = authors.id")
        }

    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str):
    # `uvicorn api.server:app` builds the app on first access, not at import.
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def main(argv: Optional[List[str]] = None):
    """Run the API under uvicorn."""
    import uvicorn

    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="minirdbms API server")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--sample", action="store_true", default=settings.load_sample,
                        help="Load the authors/books sample tables")
    parser.add_argument("--strict-updates", action="store_true", default=settings.strict_updates,
                        help="Fail UPDATE statements with invalid field values instead of skipping them")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    settings.host = args.host
    settings.port = args.port
    settings.load_sample = args.sample
    settings.strict_updates = args.strict_updates

    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
