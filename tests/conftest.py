"""Shared pytest fixtures for Geode tests."""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes shorthand text to a file in tmp_path."""

    def _write(text: str, name: str = "prog.geode") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_source() -> str:
    """A small program exercising every kind of sugar."""
    return (
        "# word lengths\n"
        "words = \\a[\"apple\" \"kiwi\" \"fig\"]\n"
        "lengths = words.map(.size)\n"
        "table = \\h{[:a, 1] [:b, 2]}\n"
        "total = lengths.reduce((acc, n -> acc + n))\n"
        "puts words.map{upcase}.inspect\n"
        "count = 0\n"
        "count = count++\n"
    )
