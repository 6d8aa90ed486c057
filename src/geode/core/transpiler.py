"""
File-level driver: shorthand source in, expanded Ruby out.
"""

import logging
from pathlib import Path

from .errors import LexicalError, make_parse_error
from .expander import DEFAULT_MAX_DEPTH, Expander
from .lexer import Lexer

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".rb"


def expand_text(
    text: str,
    file: Path | None = None,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
) -> str:
    """
    Expand shorthand text.

    Whitespace after the last token (usually the final newline) is kept.

    Args:
        text: Shorthand source
        file: Source file path (for error reporting)
        max_depth: Deepest group nesting accepted, or None for no limit

    Returns:
        Expanded text

    Raises:
        ParseError: If the text cannot be lexed or expanded
    """
    lexer = Lexer(text, file)
    tokens = lexer.tokenize()
    expanded = Expander(tokens, file, source=text, max_depth=max_depth).expand()
    return expanded + lexer.trailing


def default_output_path(
    input_path: Path, started_at: int, suffix: str = DEFAULT_SUFFIX
) -> Path:
    """
    Derive the output path for ``input_path``.

    The start time (Unix timestamp) and suffix are appended to the full
    input filename: ``prog.geode`` started at 1700000000 becomes
    ``prog.geode1700000000.rb``.
    """
    return input_path.with_name(f"{input_path.name}{started_at}{suffix}")


def transpile_file(
    input_path: Path,
    output_path: Path,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
) -> str:
    """
    Expand a shorthand file and write the result.

    Nothing is written unless the whole file expands successfully.

    Args:
        input_path: Shorthand source file
        output_path: Destination for the expanded text
        max_depth: Deepest group nesting accepted, or None for no limit

    Returns:
        Expanded text

    Raises:
        ParseError: If expansion fails
        LexicalError: If the input is not valid UTF-8
        FileNotFoundError: If input file doesn't exist
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    text = _read_source(input_path)
    expanded = expand_text(text, input_path, max_depth=max_depth)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(expanded, encoding="utf-8")
    logger.debug("Wrote %s (%d chars)", output_path, len(expanded))
    return expanded


def _read_source(path: Path) -> str:
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line = data.count(b"\n", 0, e.start) + 1
        column = e.start - (data.rfind(b"\n", 0, e.start) + 1) + 1
        raise make_parse_error(
            f"Invalid UTF-8 at byte {e.start}: {e.reason}",
            path,
            line,
            column,
            cls=LexicalError,
        ) from e
    # Same newline translation as Path.read_text
    return text.replace("\r\n", "\n").replace("\r", "\n")
