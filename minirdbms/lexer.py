"""
Tokenizer for the SQL-like query language.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import QuerySyntaxError


class TokenType(Enum):
    """Token categories recognized by the lexer."""
    WORD = "WORD"          # identifiers and keywords
    NUMBER = "NUMBER"
    STRING = "STRING"
    BARE = "BARE"          # unquoted text such as 2024-01-01 or a@b.com
    OPERATOR = "OPERATOR"  # = != <> < > <= >=
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    DOT = "."
    STAR = "*"
    SEMI = ";"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token; `text` excludes the quotes of string literals."""
    type: TokenType
    text: str
    pos: int

    @property
    def upper(self) -> str:
        return self.text.upper()


TOKEN_PATTERN = re.compile(r"""
    (?P<ws>\s+)
  | (?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?(?![\w.]))
  | (?P<word>\w+)
  | (?P<string>'[^']*'|"[^"]*")
  | (?P<operator><=|>=|!=|<>|=|<|>)
  | (?P<punct>[(),.*;])
""", re.VERBOSE)

# A run of characters with no delimiters in it. Runs that are a plain number,
# word, qualified name or star lex normally; any other run is bare text.
BARE_RUN = re.compile(r"""[^\s(),;'"=<>!]+""")
CLEAN_RUN = re.compile(r"""
    [-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?
  | \w+(?:\.(?:\w+|\*))?
  | \*
  | \.
""", re.VERBOSE)

PUNCTUATION = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "*": TokenType.STAR,
    ";": TokenType.SEMI,
}


def tokenize(query: str) -> List[Token]:
    """Split query text into tokens, always terminated by an EOF token."""
    tokens = []
    pos = 0

    while pos < len(query):
        bare = BARE_RUN.match(query, pos)
        if bare and not CLEAN_RUN.fullmatch(bare.group()):
            tokens.append(Token(TokenType.BARE, bare.group(), pos))
            pos = bare.end()
            continue

        match = TOKEN_PATTERN.match(query, pos)
        if not match:
            if query[pos] in "'\"":
                raise QuerySyntaxError(f"Unterminated string literal at position {pos}")
            raise QuerySyntaxError(f"Unexpected character {query[pos]!r} at position {pos}")

        kind = match.lastgroup
        text = match.group()
        if kind == "number":
            tokens.append(Token(TokenType.NUMBER, text, pos))
        elif kind == "word":
            tokens.append(Token(TokenType.WORD, text, pos))
        elif kind == "string":
            tokens.append(Token(TokenType.STRING, text[1:-1], pos))
        elif kind == "operator":
            tokens.append(Token(TokenType.OPERATOR, text, pos))
        elif kind == "punct":
            tokens.append(Token(PUNCTUATION[text], text, pos))
        pos = match.end()

    tokens.append(Token(TokenType.EOF, "", pos))
    return tokens
