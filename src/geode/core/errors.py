"""
Error types for Geode lexing, expansion, configuration and process runs.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class GeodeError(Exception):
    """Base exception for all Geode errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(GeodeError):
    """
    Raised when shorthand source cannot be expanded.

    Every expansion failure is a ParseError; the subclasses below name
    the specific kind.
    """

    pass


class LexicalError(ParseError):
    """
    Raised when the lexer meets text it cannot classify.

    Examples:
    - Unterminated string literal
    - A lone double quote
    """

    pass


class UnexpectedCloserError(ParseError):
    """
    Raised when a closing delimiter does not match the innermost open group.

    Examples:
    - ``a)`` (closer at top level)
    - ``(a]`` (closer of the wrong kind)
    """

    pass


class UnterminatedStructureError(ParseError):
    """Raised when input ends while one or more groups are still open."""

    pass


class ConfigError(GeodeError):
    """
    Raised when geode.toml cannot be loaded.

    Examples:
    - Invalid TOML syntax
    - Wrongly typed settings (e.g. ``max_depth = "deep"``)
    """

    pass


class RunnerError(GeodeError):
    """Raised when the interpreter or REPL process cannot be started."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred (None for in-memory text)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines surrounding the error
    """

    file: Path | None
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "script.geode:10:5"
        """
        location = f"{self.file or '<input>'}:{self.line}:{self.column}"

        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippets start at most 2 lines before the error
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def extract_snippet(text: str, line: int, before: int = 2) -> str:
    """Return the source lines from ``line - before`` up to ``line``."""
    lines = text.split("\n")
    start = max(1, line - before)
    return "\n".join(lines[start - 1 : line])


def make_parse_error(
    message: str,
    file: Path | None,
    line: int,
    column: int,
    snippet: str | None = None,
    cls: type[ParseError] = ParseError,
) -> ParseError:
    """
    Helper to create a ParseError (or subclass) with context.

    Args:
        message: Error description
        file: Source file path, or None for in-memory text
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet
        cls: ParseError subclass to instantiate

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return cls(message, context)
