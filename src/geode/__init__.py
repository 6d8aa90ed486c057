"""
Geode - bracket shorthand for Ruby.

Expands compact lambda, collection and operator shorthand into plain
Ruby source.
"""

from __future__ import annotations

from ._version import get_version
from .core.errors import (
    ConfigError,
    GeodeError,
    LexicalError,
    ParseError,
    RunnerError,
    UnexpectedCloserError,
    UnterminatedStructureError,
)
from .core.transpiler import expand_text

__version__ = get_version()

__all__ = [
    "__version__",
    "expand_text",
    "GeodeError",
    "ParseError",
    "LexicalError",
    "UnexpectedCloserError",
    "UnterminatedStructureError",
    "ConfigError",
    "RunnerError",
]
