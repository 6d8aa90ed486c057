"""Tests for file-level expansion."""

from pathlib import Path

import pytest

from geode.core.errors import LexicalError, UnexpectedCloserError
from geode.core.transpiler import default_output_path, expand_text, transpile_file


class TestExpandText:
    def test_keeps_final_newline(self) -> None:
        assert expand_text("(.upcase)\n") == "{|it|it.upcase}\n"

    def test_sample_program(self, sample_source: str) -> None:
        expected = (
            "\n"
            'words = ["apple", "kiwi", "fig"]\n'
            "lengths = words.map{|it|it.size}\n"
            "table = [[:a, 1], [:b, 2]].to_h\n"
            "total = lengths.reduce({|acc, n|acc + n})\n"
            'puts words.map{|it|it.respond_to?(:"upcase") ? it.send(:"upcase") : upcase(it)}.inspect\n'
            "count = 0\n"
            "count = count.succ\n"
        )
        assert expand_text(sample_source) == expected


class TestDefaultOutputPath:
    def test_appends_timestamp_and_suffix(self) -> None:
        path = default_output_path(Path("src/prog.geode"), 1700000000)
        assert path == Path("src/prog.geode1700000000.rb")

    def test_custom_suffix(self) -> None:
        assert default_output_path(Path("a"), 5, ".txt") == Path("a5.txt")


class TestTranspileFile:
    def test_writes_output(self, write_source, tmp_path: Path) -> None:
        source = write_source("xs.map(.to_s)\n")
        output = tmp_path / "out" / "prog.rb"

        result = transpile_file(source, output)

        assert result == "xs.map{|it|it.to_s}\n"
        assert output.read_text(encoding="utf-8") == result

    def test_no_output_on_failure(self, write_source, tmp_path: Path) -> None:
        source = write_source("puts (1 + 2]]\n")
        output = tmp_path / "prog.rb"

        with pytest.raises(UnexpectedCloserError) as exc_info:
            transpile_file(source, output)

        assert not output.exists()
        assert exc_info.value.context.file == source
        assert str(source) in str(exc_info.value)

    def test_missing_input(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            transpile_file(tmp_path / "missing.geode", tmp_path / "out.rb")

    def test_invalid_utf8_is_a_lexical_error(self, tmp_path: Path) -> None:
        source = tmp_path / "prog.geode"
        source.write_bytes(b"a = 1\nputs \xff\xfe\n")
        output = tmp_path / "prog.rb"

        with pytest.raises(LexicalError, match="Invalid UTF-8 at byte 11") as exc_info:
            transpile_file(source, output)

        assert not output.exists()
        assert exc_info.value.context.line == 2
        assert exc_info.value.context.column == 6

    def test_crlf_newlines_are_normalized(self, tmp_path: Path) -> None:
        source = tmp_path / "prog.geode"
        source.write_bytes(b"x = \\a[1 2]\r\ny = 2\r\n")

        assert transpile_file(source, tmp_path / "prog.rb") == "x = [1, 2]\ny = 2\n"
