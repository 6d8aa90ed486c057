"""Shared cursor over a token list."""

from collections.abc import Iterable

from .lexer import Token


class TokenStream:
    """
    Forward-only cursor over tokens.

    One instance is shared by every nested expansion call, so a group
    consumed by an inner call is never seen again by its parent.
    """

    def __init__(self, tokens: Iterable[Token]):
        self.tokens = list(tokens)
        self.position = 0

    def peek(self) -> Token | None:
        """Return the next token without consuming it."""
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def next(self) -> Token | None:
        """Consume and return the next token, or None at end of input."""
        token = self.peek()
        if token is not None:
            self.position += 1
        return token

    @property
    def has_more(self) -> bool:
        return self.position < len(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens) - self.position
