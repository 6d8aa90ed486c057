"""
Lexer/Tokenizer for Geode shorthand.

Converts raw shorthand text into a list of classified tokens with source
location tracking. Whitespace and comments never become tokens; the
whitespace in front of a token is kept on the token itself so that
pass-through text can be re-emitted with its original layout.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import LexicalError, extract_snippet, make_parse_error

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Token types in Geode shorthand."""

    # Structural openers
    LPAREN = "("
    LBRACE = "{"
    LBRACKET = "["
    MAP_OPEN = "\\h{"
    ARRAY_OPEN = "\\a["

    # Structural closers
    RPAREN = ")"
    RBRACE = "}"
    RBRACKET = "]"

    ARROW = "->"
    INCREMENT = "++"
    DECREMENT = "--"

    STRING = "STRING"
    OPERATOR = "OPERATOR"
    ATOM = "ATOM"


OPENERS = frozenset(
    {
        TokenType.LPAREN,
        TokenType.LBRACE,
        TokenType.LBRACKET,
        TokenType.MAP_OPEN,
        TokenType.ARRAY_OPEN,
    }
)

CLOSERS = frozenset({TokenType.RPAREN, TokenType.RBRACE, TokenType.RBRACKET})

# Closing delimiter expected by each opener
MATCHING_CLOSER: dict[TokenType, TokenType] = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.MAP_OPEN: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.ARRAY_OPEN: TokenType.RBRACKET,
}

# Alternatives are tried in order; the first one that matches wins.
_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<comment>\#[^\n]*)
    | (?P<arrow>->)
    | (?P<map_open>\\h\{)
    | (?P<array_open>\\a\[)
    | (?P<delimiter>[()\[\]{}])
    | (?P<compare>\*\*|<=>|[<>][<>=]?|!~|=[=~]?)
    | (?P<increment>\+\+)
    | (?P<decrement>--)
    | (?P<symbol_ref>&:[\w.?!]+)
    | (?P<operator>[!+\-*/^&|]=?)
    | (?P<string>"(?:\\.|[^\\"])*")
    | (?P<comma>,)
    | (?P<atom>[\w.?!&:@$]+)
    | (?P<other>[^\s"])
    """,
    re.VERBOSE | re.DOTALL,
)

_GROUP_TYPES: dict[str, TokenType] = {
    "arrow": TokenType.ARROW,
    "map_open": TokenType.MAP_OPEN,
    "array_open": TokenType.ARRAY_OPEN,
    "compare": TokenType.OPERATOR,
    "increment": TokenType.INCREMENT,
    "decrement": TokenType.DECREMENT,
    "symbol_ref": TokenType.ATOM,
    "operator": TokenType.OPERATOR,
    "string": TokenType.STRING,
    "comma": TokenType.ATOM,
    "atom": TokenType.ATOM,
    "other": TokenType.OPERATOR,
}


@dataclass(frozen=True)
class Token:
    """
    A single token of shorthand source.

    Attributes:
        type: Type of token
        value: Exact source text of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        leading: Whitespace that preceded the token in the source
    """

    type: TokenType
    value: str
    line: int
    column: int
    leading: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for Geode shorthand.

    Converts source text into a list of tokens. After ``tokenize`` runs,
    ``trailing`` holds the whitespace found after the last token.
    """

    def __init__(self, text: str, file: Path | None = None):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        self.trailing = ""

    def advance(self, chunk: str) -> None:
        """Move past ``chunk``, updating line/column."""
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rfind("\n")
        else:
            self.column += len(chunk)
        self.pos += len(chunk)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens, without whitespace, comments or empty entries

        Raises:
            LexicalError: If a double quote does not start a terminated string
        """
        leading: list[str] = []

        while self.pos < len(self.text):
            match = _TOKEN_RE.match(self.text, self.pos)
            if match is None:
                # Only a quote without a matching close gets here
                raise make_parse_error(
                    f"Unexpected {self.text[self.pos]!r}",
                    self.file,
                    self.line,
                    self.column,
                    snippet=extract_snippet(self.text, self.line),
                    cls=LexicalError,
                )

            kind = match.lastgroup
            value = match.group()

            if kind == "space":
                leading.append(value)
            elif kind == "comment":
                pass
            else:
                if kind == "delimiter":
                    token_type = TokenType(value)
                else:
                    token_type = _GROUP_TYPES[kind]
                self.tokens.append(
                    Token(token_type, value, self.line, self.column, "".join(leading))
                )
                leading = []

            self.advance(value)

        self.trailing = "".join(leading)
        logger.debug("Tokenized %s into %d tokens", self.file or "<input>", len(self.tokens))
        return self.tokens


def tokenize(text: str, file: Path | None = None) -> list[Token]:
    """
    Convenience function to tokenize shorthand text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
