"""
Recursive-descent parser for the SQL-like query language.

Accepted statements:

    CREATE TABLE <name> (<col> <type> [PRIMARY KEY] [UNIQUE] [NOT NULL], ...)
    DROP TABLE <name>
    INSERT INTO <name> [(<col>, ...)] VALUES (<value>, ...)
    SELECT * | <col>, ... FROM <name>
        [(INNER | LEFT) JOIN <name> ON <name>.<col> = <name>.<col>]
        [WHERE <col> <op> <value> [AND ...]]
    UPDATE <name> SET <col> = <value>, ... [WHERE ...]
    DELETE FROM <name> [WHERE ...]
    SHOW TABLES
    DESCRIBE <name> | DESC <name>
"""

import re
from typing import Any, List, Optional, Tuple

from .errors import QuerySyntaxError
from .lexer import Token, TokenType, tokenize
from .query import (
    ColumnDefinition,
    Condition,
    CreateTableQuery,
    DeleteQuery,
    DescribeQuery,
    DropTableQuery,
    InsertQuery,
    JoinClause,
    JoinType,
    SelectQuery,
    ShowTablesQuery,
    UpdateQuery,
)
from .types import DataType

# Declared column types are matched against these rules in order; the first
# hit wins and anything unmatched falls back to DEFAULT_TYPE.
TYPE_RULES: List[Tuple[re.Pattern, DataType]] = [
    (re.compile(r"^varchar\(", re.IGNORECASE), DataType.STRING),
    (re.compile(r"^char\(", re.IGNORECASE), DataType.STRING),
    (re.compile(r"^text$", re.IGNORECASE), DataType.STRING),
    (re.compile(r"^timestamp", re.IGNORECASE), DataType.STRING),
    (re.compile(r"^serial", re.IGNORECASE), DataType.NUMBER),
    (re.compile(r"^int(eger)?$", re.IGNORECASE), DataType.NUMBER),
    (re.compile(r"^number$", re.IGNORECASE), DataType.NUMBER),
    (re.compile(r"^bigint", re.IGNORECASE), DataType.NUMBER),
    (re.compile(r"^bool(ean)?$", re.IGNORECASE), DataType.BOOLEAN),
]
DEFAULT_TYPE = DataType.STRING

OPERATORS = {"=", "!=", "<>", ">", "<", ">=", "<="}

# Words that start a constraint, so they are never read as a column type.
CONSTRAINT_WORDS = {"PRIMARY", "UNIQUE", "NOT", "NULL"}


def normalize_type(raw_type: str) -> DataType:
    """Map a declared column type such as 'varchar(255)' onto a DataType."""
    for pattern, dtype in TYPE_RULES:
        if pattern.search(raw_type):
            return dtype
    return DEFAULT_TYPE


def literal_value(token: Token) -> Any:
    """
    Convert a literal token into a Python value.

    - quoted text -> str (quotes stripped, no escape processing)
    - true/false in any case -> bool
    - NULL -> None
    - numeric literal -> int, or float when it has a fraction or exponent
    - any other bare word or unquoted run such as 2024-01-01 -> the text as a str
    """
    if token.type in (TokenType.STRING, TokenType.BARE):
        return token.text
    if token.type == TokenType.NUMBER:
        text = token.text
        if any(ch in text for ch in ".eE"):
            return float(text)
        return int(text)
    if token.type == TokenType.WORD:
        upper = token.upper
        if upper == "TRUE":
            return True
        if upper == "FALSE":
            return False
        if upper == "NULL":
            return None
        return token.text
    raise QuerySyntaxError(f"Expected a value but found {token.text or 'end of query'!r}")


class QueryParser:
    """Parses SQL-like queries into structured query objects."""

    def parse(self, query: str):
        """Parse exactly one statement; a trailing semicolon is optional."""
        stream = _TokenStream(tokenize(query))
        first = stream.peek()
        if first.type != TokenType.WORD:
            raise QuerySyntaxError(f"Unsupported query: {query.strip()}")

        keyword = first.upper
        second = stream.peek(1).upper
        if keyword == "CREATE" and second == "TABLE":
            parsed = self._parse_create_table(stream)
        elif keyword == "DROP" and second == "TABLE":
            parsed = self._parse_drop_table(stream)
        elif keyword == "INSERT" and second == "INTO":
            parsed = self._parse_insert(stream)
        elif keyword == "SELECT":
            parsed = self._parse_select(stream)
        elif keyword == "UPDATE":
            parsed = self._parse_update(stream)
        elif keyword == "DELETE" and second == "FROM":
            parsed = self._parse_delete(stream)
        elif keyword == "SHOW" and second == "TABLES":
            stream.advance(2)
            parsed = ShowTablesQuery()
        elif keyword in ("DESCRIBE", "DESC"):
            parsed = self._parse_describe(stream)
        else:
            raise QuerySyntaxError(f"Unsupported query: {query.strip()}")

        stream.accept(TokenType.SEMI)
        if stream.peek().type != TokenType.EOF:
            raise QuerySyntaxError(
                f"Unexpected {stream.peek().text!r} after end of {parsed.type.value} statement"
            )
        return parsed

    def _parse_create_table(self, stream: "_TokenStream") -> CreateTableQuery:
        """Parse CREATE TABLE query."""
        stream.advance(2)
        table_name = stream.identifier("Invalid CREATE TABLE syntax: expected table name")
        stream.expect(TokenType.LPAREN, "Invalid CREATE TABLE syntax: expected '('")

        columns = [self._parse_column_definition(stream)]
        while stream.accept(TokenType.COMMA):
            columns.append(self._parse_column_definition(stream))

        stream.expect(TokenType.RPAREN, "Invalid CREATE TABLE syntax: expected ')'")
        return CreateTableQuery(table_name=table_name, columns=tuple(columns))

    def _parse_column_definition(self, stream: "_TokenStream") -> ColumnDefinition:
        name = stream.identifier("Invalid column definition: expected column name")

        raw_type = ""
        if stream.peek().type == TokenType.WORD and stream.peek().upper not in CONSTRAINT_WORDS:
            raw_type = stream.advance().text
            if stream.peek().type == TokenType.LPAREN:
                raw_type += "(" + self._skip_parenthesized(stream) + ")"

        primary_key = unique = not_null = False
        while stream.peek().type not in (TokenType.COMMA, TokenType.RPAREN, TokenType.EOF):
            token = stream.advance()
            upper = token.upper if token.type == TokenType.WORD else ""
            if upper == "PRIMARY" and stream.accept_word("KEY"):
                primary_key = True
            elif upper == "UNIQUE":
                unique = True
            elif upper == "NOT" and stream.accept_word("NULL"):
                not_null = True
            elif token.type == TokenType.LPAREN:
                self._skip_parenthesized(stream, opened=True)
            # anything else (DEFAULT 0, NULL, ...) is accepted and ignored

        return ColumnDefinition(
            name=name,
            dtype=normalize_type(raw_type),
            primary_key=primary_key,
            unique=unique,
            nullable=not (primary_key or not_null),
        )

    def _skip_parenthesized(self, stream: "_TokenStream", opened: bool = False) -> str:
        """Consume a balanced (...) group and return its inner text."""
        if not opened:
            stream.expect(TokenType.LPAREN, "Expected '('")
        depth = 1
        parts = []
        while True:
            token = stream.advance()
            if token.type == TokenType.EOF:
                raise QuerySyntaxError("Unbalanced parentheses")
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                depth -= 1
                if depth == 0:
                    return "".join(parts)
            parts.append(token.text)

    def _parse_drop_table(self, stream: "_TokenStream") -> DropTableQuery:
        stream.advance(2)
        table_name = stream.identifier("Invalid DROP TABLE syntax: expected table name")
        return DropTableQuery(table_name=table_name)

    def _parse_insert(self, stream: "_TokenStream") -> InsertQuery:
        """Parse INSERT INTO query."""
        stream.advance(2)
        table_name = stream.identifier("Invalid INSERT syntax: expected table name")

        columns = None
        if stream.accept(TokenType.LPAREN):
            names = [stream.identifier("Invalid INSERT syntax: expected column name")]
            while stream.accept(TokenType.COMMA):
                names.append(stream.identifier("Invalid INSERT syntax: expected column name"))
            stream.expect(TokenType.RPAREN, "Invalid INSERT syntax: expected ')'")
            columns = tuple(names)

        stream.expect_word("VALUES", "Invalid INSERT syntax: expected VALUES")
        stream.expect(TokenType.LPAREN, "Invalid INSERT syntax: expected '(' after VALUES")
        values = [self._parse_value(stream)]
        while stream.accept(TokenType.COMMA):
            values.append(self._parse_value(stream))
        stream.expect(TokenType.RPAREN, "Invalid INSERT syntax: expected ')'")

        return InsertQuery(table_name=table_name, columns=columns, values=tuple(values))

    def _parse_select(self, stream: "_TokenStream") -> SelectQuery:
        """Parse SELECT query."""
        stream.advance()

        if stream.accept(TokenType.STAR):
            columns: Tuple[str, ...] = ("*",)
        else:
            names = [self._parse_column_reference(stream)]
            while stream.accept(TokenType.COMMA):
                names.append(self._parse_column_reference(stream))
            columns = tuple(names)

        stream.expect_word("FROM", "Invalid SELECT syntax: expected FROM")
        table_name = stream.identifier("Invalid SELECT syntax: expected table name")

        join = None
        if stream.peek().upper in ("INNER", "LEFT") and stream.peek(1).upper == "JOIN":
            join = self._parse_join(stream)

        where = self._parse_optional_where(stream)
        return SelectQuery(table_name=table_name, columns=columns, where=where, join=join)

    def _parse_join(self, stream: "_TokenStream") -> JoinClause:
        join_type = JoinType(stream.advance().upper)
        stream.advance()  # JOIN
        table = stream.identifier("Invalid JOIN syntax: expected table name")
        stream.expect_word("ON", "Invalid JOIN syntax: expected ON")

        left_table, left_column = self._parse_qualified_column(stream)
        operator = stream.expect(TokenType.OPERATOR, "Invalid JOIN condition: expected '='")
        if operator.text != "=":
            raise QuerySyntaxError("Invalid JOIN condition: only '=' is supported")
        right_table, right_column = self._parse_qualified_column(stream)

        return JoinClause(
            join_type=join_type,
            table=table,
            left_table=left_table,
            left_column=left_column,
            right_table=right_table,
            right_column=right_column,
        )

    def _parse_qualified_column(self, stream: "_TokenStream") -> Tuple[str, str]:
        table = stream.identifier("Invalid JOIN condition: expected <table>.<column>")
        stream.expect(TokenType.DOT, "Invalid JOIN condition: expected <table>.<column>")
        column = stream.identifier("Invalid JOIN condition: expected <table>.<column>")
        return table, column

    def _parse_column_reference(self, stream: "_TokenStream") -> str:
        name = stream.identifier("Invalid SELECT syntax: expected column name")
        if stream.accept(TokenType.DOT):
            name += "." + stream.identifier("Invalid SELECT syntax: expected column name")
        return name

    def _parse_update(self, stream: "_TokenStream") -> UpdateQuery:
        """Parse UPDATE query."""
        stream.advance()
        table_name = stream.identifier("Invalid UPDATE syntax: expected table name")
        stream.expect_word("SET", "Invalid UPDATE syntax: expected SET")

        assignments = [self._parse_assignment(stream)]
        while stream.accept(TokenType.COMMA):
            assignments.append(self._parse_assignment(stream))

        where = self._parse_optional_where(stream)
        return UpdateQuery(table_name=table_name, assignments=tuple(assignments), where=where)

    def _parse_assignment(self, stream: "_TokenStream") -> Tuple[str, Any]:
        column = stream.identifier("Invalid UPDATE syntax: expected column name")
        operator = stream.expect(TokenType.OPERATOR, "Invalid UPDATE syntax: expected '='")
        if operator.text != "=":
            raise QuerySyntaxError("Invalid UPDATE syntax: expected '='")
        return column, self._parse_value(stream)

    def _parse_delete(self, stream: "_TokenStream") -> DeleteQuery:
        """Parse DELETE query."""
        stream.advance(2)
        table_name = stream.identifier("Invalid DELETE syntax: expected table name")
        where = self._parse_optional_where(stream)
        return DeleteQuery(table_name=table_name, where=where)

    def _parse_describe(self, stream: "_TokenStream") -> DescribeQuery:
        stream.advance()
        table_name = stream.identifier("Invalid DESCRIBE syntax: expected table name")
        return DescribeQuery(table_name=table_name)

    def _parse_optional_where(self, stream: "_TokenStream") -> Optional[Tuple[Condition, ...]]:
        """Parse `WHERE cond [AND cond]...` if present."""
        if not stream.accept_word("WHERE"):
            return None

        conditions = [self._parse_condition(stream)]
        while stream.accept_word("AND"):
            conditions.append(self._parse_condition(stream))
        return tuple(conditions)

    def _parse_condition(self, stream: "_TokenStream") -> Condition:
        table = None
        column = stream.identifier("Invalid WHERE condition: expected column name")
        if stream.accept(TokenType.DOT):
            table = column
            column = stream.identifier("Invalid WHERE condition: expected column name")

        operator = stream.expect(TokenType.OPERATOR, f"Invalid WHERE condition on {column}")
        if operator.text not in OPERATORS:
            raise QuerySyntaxError(f"Unsupported operator {operator.text}")
        op = "!=" if operator.text == "<>" else operator.text

        return Condition(column=column, operator=op, value=self._parse_value(stream), table=table)

    def _parse_value(self, stream: "_TokenStream") -> Any:
        token = stream.peek()
        if token.type not in (TokenType.STRING, TokenType.BARE, TokenType.NUMBER, TokenType.WORD):
            raise QuerySyntaxError(f"Expected a value but found {token.text or 'end of query'!r}")
        stream.advance()
        return literal_value(token)


class _TokenStream:
    """Cursor over a token list."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.i = 0

    def peek(self, offset: int = 0) -> Token:
        j = min(self.i + offset, len(self.tokens) - 1)
        return self.tokens[j]

    def advance(self, n: int = 1) -> Token:
        """Consume n tokens and return the last one consumed."""
        token = self.peek()
        for _ in range(n):
            token = self.peek()
            self.i = min(self.i + 1, len(self.tokens) - 1)
        return token

    def accept(self, token_type: TokenType) -> bool:
        if self.peek().type == token_type:
            self.advance()
            return True
        return False

    def accept_word(self, word: str) -> bool:
        token = self.peek()
        if token.type == TokenType.WORD and token.upper == word:
            self.advance()
            return True
        return False

    def expect(self, token_type: TokenType, message: str) -> Token:
        token = self.peek()
        if token.type != token_type:
            raise QuerySyntaxError(message)
        return self.advance()

    def expect_word(self, word: str, message: str) -> Token:
        token = self.peek()
        if token.type != TokenType.WORD or token.upper != word:
            raise QuerySyntaxError(message)
        return self.advance()

    def identifier(self, message: str) -> str:
        return self.expect(TokenType.WORD, message).text
