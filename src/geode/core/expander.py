"""
Shorthand expander for Geode.

Consumes the token stream in one pass, keeping open groups on a stack. Each
bracket group is expanded as soon as its closer is found and reduced to a
single piece of output text according to the rule for its opening delimiter:

    (.sym ...)          => {|it|it.sym ...}
    (&:sym)             => {|it|it.sym}
    (a, b -> body)      => {|a, b|body}
    {sym}               => {|it|it.respond_to?(:"sym") ? it.send(:"sym") : sym(it)}
    {a -> body}         => {|it, a|body}
    {body}              => {|it|body}
    \\h{[k, v] [k, v]}  => [[k, v], [k, v]].to_h
    \\a[1 2 3]          => [1, 2, 3]
    x++ / x--           => x.succ / x.pred
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import (
    ParseError,
    UnexpectedCloserError,
    UnterminatedStructureError,
    extract_snippet,
    make_parse_error,
)
from .lexer import CLOSERS, MATCHING_CLOSER, OPENERS, Token, TokenType
from .token_stream import TokenStream

logger = logging.getLogger(__name__)

# No nesting limit unless one is configured
DEFAULT_MAX_DEPTH: int | None = None

IMPLICIT_PARAM = "it"

_SUFFIXES = {
    TokenType.INCREMENT: ".succ",
    TokenType.DECREMENT: ".pred",
}


@dataclass
class Fragment:
    """
    A piece of expanded output.

    Attributes:
        text: Output text, including the whitespace that preceded it
        kind: Type of the token the text came from, or None for an expanded group
    """

    text: str
    kind: TokenType | None = None


@dataclass
class _Frame:
    opener: Token | None
    fragments: list[Fragment] = field(default_factory=list)


def _join(fragments: list[Fragment]) -> str:
    return "".join(fragment.text for fragment in fragments).strip()


def _elements(fragments: list[Fragment]) -> str:
    items = (fragment.text.strip() for fragment in fragments)
    return ", ".join(item for item in items if item)


def _find_arrow(fragments: list[Fragment]) -> int | None:
    for index, fragment in enumerate(fragments):
        if fragment.kind is TokenType.ARROW:
            return index
    return None


def expand_parens(fragments: list[Fragment], tail: str) -> str:
    """
    Rewrite a parenthesized group.

    A leading method chain or ``&:sym`` becomes a one-parameter block on
    ``it``; an arrow splits parameters from body; anything else stays a
    plain parenthesized group.
    """
    if fragments and fragments[0].text.lstrip().startswith("."):
        return f"{{|{IMPLICIT_PARAM}|{IMPLICIT_PARAM}{_join(fragments)}}}"

    if len(fragments) == 1 and fragments[0].text.lstrip().startswith("&:"):
        name = fragments[0].text.strip()[2:]
        return f"{{|{IMPLICIT_PARAM}|{IMPLICIT_PARAM}.{name}}}"

    arrow = _find_arrow(fragments)
    if arrow is not None:
        params = _join(fragments[:arrow])
        body = _join(fragments[arrow + 1 :])
        return f"{{|{params}|{body}}}"

    return "(" + "".join(fragment.text for fragment in fragments) + tail + ")"


def expand_curlies(fragments: list[Fragment], tail: str) -> str:
    """
    Rewrite a block group.

    ``{sym}`` calls the method ``sym`` on ``it`` when the receiver has one
    and falls back to the function ``sym(it)`` otherwise.
    """
    if len(fragments) == 1 and fragments[0].kind is TokenType.ATOM:
        name = fragments[0].text.strip()
        it = IMPLICIT_PARAM
        return f'{{|{it}|{it}.respond_to?(:"{name}") ? {it}.send(:"{name}") : {name}({it})}}'

    arrow = _find_arrow(fragments)
    if arrow is not None:
        params = _join(fragments[:arrow])
        body = _join(fragments[arrow + 1 :])
        if params:
            return f"{{|{IMPLICIT_PARAM}, {params}|{body}}}"
        return f"{{|{IMPLICIT_PARAM}|{body}}}"

    return f"{{|{IMPLICIT_PARAM}|{_join(fragments)}}}"


def expand_map(fragments: list[Fragment], tail: str) -> str:
    """Rewrite ``\\h{...}`` into an array of pairs folded with ``to_h``."""
    return f"[{_elements(fragments)}].to_h"


def expand_array(fragments: list[Fragment], tail: str) -> str:
    """Rewrite ``\\a[...]`` into a comma-separated array literal."""
    return f"[{_elements(fragments)}]"


def expand_index(fragments: list[Fragment], tail: str) -> str:
    return "[" + "".join(fragment.text for fragment in fragments) + tail + "]"


GroupRule = Callable[[list[Fragment], str], str]

GROUP_RULES: dict[TokenType, GroupRule] = {
    TokenType.LPAREN: expand_parens,
    TokenType.LBRACE: expand_curlies,
    TokenType.MAP_OPEN: expand_map,
    TokenType.ARRAY_OPEN: expand_array,
    TokenType.LBRACKET: expand_index,
}


class Expander:
    """
    Expands a token stream into output text.

    Open groups are kept on an explicit stack of frames, so nesting depth
    is bounded only by memory. Every token is consumed exactly once.
    """

    def __init__(
        self,
        tokens: TokenStream | Iterable[Token],
        file: Path | None = None,
        source: str | None = None,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
    ):
        """
        Initialize expander.

        Args:
            tokens: Token stream (or plain token list) to consume
            file: Source file path (for error reporting)
            source: Original source text, used for error snippets
            max_depth: Deepest group nesting accepted, or None for no limit
        """
        self.stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
        self.file = file
        self.source = source
        self.max_depth = max_depth

    def expand(self) -> str:
        """
        Expand every remaining token.

        Returns:
            The output text

        Raises:
            UnexpectedCloserError: If a closer does not match the open group
            UnterminatedStructureError: If input ends inside a group
            ParseError: If groups nest deeper than ``max_depth``
        """
        fragments = self._expand_groups()
        logger.debug("Expanded %s into %d top-level fragments", self.file or "<input>", len(fragments))
        return "".join(fragment.text for fragment in fragments)

    def _expand_groups(self) -> list[Fragment]:
        """
        Consume the stream and return the top-level fragments.

        Each frame pairs an open group's opener with the fragments collected
        inside it so far; the bottom frame is the top level (opener None).
        """
        stack: list[_Frame] = [_Frame(None)]

        while (token := self.stream.next()) is not None:
            frame = stack[-1]

            if token.type in OPENERS:
                if self.max_depth is not None and len(stack) > self.max_depth:
                    raise self._error(f"Groups nested deeper than {self.max_depth} levels", token)
                stack.append(_Frame(token))

            elif token.type in CLOSERS:
                opener = frame.opener
                if opener is None or token.type is not MATCHING_CLOSER[opener.type]:
                    raise self._error(f"Unexpected {token.value!r}", token, UnexpectedCloserError)
                stack.pop()
                text = GROUP_RULES[opener.type](frame.fragments, token.leading)
                stack[-1].fragments.append(Fragment(opener.leading + text))

            elif token.type in _SUFFIXES:
                self._attach_suffix(frame.fragments, token)

            else:
                frame.fragments.append(Fragment(token.leading + token.value, token.type))

        opener = stack[-1].opener
        if opener is not None:
            expected = MATCHING_CLOSER[opener.type]
            raise self._error(
                f"Expected {expected.value!r}, got EOF",
                opener,
                UnterminatedStructureError,
            )
        return stack[0].fragments

    @staticmethod
    def _attach_suffix(fragments: list[Fragment], token: Token) -> None:
        suffix = _SUFFIXES[token.type]
        # An arrow is never a receiver; it must keep splitting params from body
        if fragments and fragments[-1].kind is not TokenType.ARROW:
            fragments[-1] = Fragment(fragments[-1].text + suffix)
        else:
            fragments.append(Fragment(token.leading + suffix))

    def _error(
        self, message: str, token: Token, cls: type[ParseError] = ParseError
    ) -> ParseError:
        snippet = extract_snippet(self.source, token.line) if self.source else None
        return make_parse_error(message, self.file, token.line, token.column, snippet, cls)


def expand(
    tokens: TokenStream | Iterable[Token],
    file: Path | None = None,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
) -> str:
    """
    Convenience function to expand a token sequence.

    Args:
        tokens: Tokens produced by the lexer
        file: Source file path
        max_depth: Deepest group nesting accepted, or None for no limit

    Returns:
        Expanded output text
    """
    return Expander(tokens, file, max_depth=max_depth).expand()
