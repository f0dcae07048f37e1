"""Tests for reading formula sources."""

import pytest

from formula_compile.sources import (
    parse_formula_json,
    parse_formula_lines,
    read_formula_file,
)


class TestParseFormulaJson:
    """Test parsing JSON formula arrays."""

    def test_array_of_strings(self):
        """Parse a list of formulas."""
        formulas = parse_formula_json('["a + b", "a * b + c/d"]')
        assert formulas == ["a + b", "a * b + c/d"]

    def test_invalid_json(self):
        """Raise error for invalid JSON."""
        with pytest.raises(ValueError, match="Invalid formula JSON"):
            parse_formula_json("not valid json")

    def test_not_an_array(self):
        """Raise error for a JSON object."""
        with pytest.raises(ValueError, match="array of strings"):
            parse_formula_json('{"f": "a + b"}')

    def test_non_string_entry(self):
        """Raise error for non-string entries."""
        with pytest.raises(ValueError, match="must be a string"):
            parse_formula_json('["a + b", 3]')


class TestParseFormulaLines:
    """Test parsing one formula per line."""

    def test_skips_blank_and_comment_lines(self):
        """Blank lines and comments are ignored."""
        text = "# pricing rules\na + b\n\n  # disabled\nc * d\n"
        assert parse_formula_lines(text) == ["a + b", "c * d"]

    def test_keeps_formula_text(self):
        """Formula text is kept as written."""
        assert parse_formula_lines("a  +  b\r\n") == ["a  +  b"]


class TestReadFormulaFile:
    """Test reading formulas from files."""

    def test_text_file(self, tmp_path):
        """Read a plain text file."""
        path = tmp_path / "formulas.txt"
        path.write_text("a + b\nc - d\n")
        assert read_formula_file(path) == ["a + b", "c - d"]

    def test_json_file(self, tmp_path):
        """Read a JSON file."""
        path = tmp_path / "formulas.json"
        path.write_text('["a + b", "a + b"]')
        assert read_formula_file(path) == ["a + b", "a + b"]
