"""Core Geode functionality: lexer, expander, file driver, runner, configuration."""

from .errors import (
    ConfigError,
    ErrorContext,
    GeodeError,
    LexicalError,
    ParseError,
    RunnerError,
    UnexpectedCloserError,
    UnterminatedStructureError,
)
from .expander import Expander, expand
from .lexer import Lexer, Token, TokenType, tokenize
from .manifest import GeodeConfig, find_config, load_config
from .token_stream import TokenStream
from .transpiler import default_output_path, expand_text, transpile_file

__all__ = [
    "GeodeError",
    "ParseError",
    "LexicalError",
    "UnexpectedCloserError",
    "UnterminatedStructureError",
    "ConfigError",
    "RunnerError",
    "ErrorContext",
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "TokenStream",
    "Expander",
    "expand",
    "expand_text",
    "default_output_path",
    "transpile_file",
    "GeodeConfig",
    "find_config",
    "load_config",
]
