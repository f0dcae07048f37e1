"""Tests for AST-based formula parsing."""

import pytest

from formula_compile.ast_parser import (
    BinaryOp,
    Identifier,
    Number,
    ParseError,
    UnaryOp,
    extract_formula_variables,
    extract_variables,
    parse_formula,
)


class TestParseFormula:
    """Test parsing formula text into an expression tree."""

    def test_simple_addition(self):
        """Parse a left-associative chain."""
        tree = parse_formula("a + b - c")
        assert tree == BinaryOp(
            "-",
            BinaryOp("+", Identifier("a"), Identifier("b")),
            Identifier("c"),
        )

    def test_precedence(self):
        """Multiplication binds tighter than addition."""
        tree = parse_formula("a + b * c")
        assert tree == BinaryOp(
            "+",
            Identifier("a"),
            BinaryOp("*", Identifier("b"), Identifier("c")),
        )

    def test_parentheses(self):
        """Parentheses override precedence."""
        tree = parse_formula("(a + b) * c")
        assert tree == BinaryOp(
            "*",
            BinaryOp("+", Identifier("a"), Identifier("b")),
            Identifier("c"),
        )

    def test_integer_literals(self):
        """Parse integer literals as Number leaves."""
        tree = parse_formula("x / 100")
        assert tree == BinaryOp("/", Identifier("x"), Number(100))

    def test_unary_minus(self):
        """Parse unary minus."""
        tree = parse_formula("-a + 3")
        assert tree == BinaryOp(
            "+", UnaryOp("-", Identifier("a")), Number(3)
        )

    def test_surrounding_whitespace(self):
        """Leading and trailing whitespace is accepted."""
        assert parse_formula("  a + b  ") == parse_formula("a + b")


class TestParseErrors:
    """Test rejection of malformed formulas."""

    @pytest.mark.parametrize(
        "text",
        [
            "a + )",
            "(a + b",
            "a +",
            "a b",
            "",
            "   ",
        ],
    )
    def test_malformed_syntax(self, text):
        """Reject unbalanced parens, dangling operators and empty input."""
        with pytest.raises(ParseError):
            parse_formula(text)

    @pytest.mark.parametrize(
        "text",
        [
            "a ** b",
            "a // b",
            "a % b",
            "1.5 * a",
            "f(a)",
            "a.b",
            "'x' + a",
            "a < b",
            "True + a",
            "not a",
            "a if b else c",
            "a + b # comment",
            "a +\n b",
            "(a +\r\n b)",
        ],
    )
    def test_outside_grammar(self, text):
        """Reject anything beyond integer arithmetic."""
        with pytest.raises(ParseError):
            parse_formula(text)

    def test_error_carries_text_and_cause(self):
        """ParseError keeps the offending text and underlying cause."""
        with pytest.raises(ParseError) as exc_info:
            parse_formula("a + )")

        err = exc_info.value
        assert err.text == "a + )"
        assert isinstance(err.cause, SyntaxError)
        assert "a + )" in str(err)

    def test_line_break_rejected(self):
        """Formulas must fit on one line."""
        with pytest.raises(ParseError, match="single line"):
            parse_formula("(a +\n b)")

    def test_is_value_error(self):
        """ParseError can be caught as ValueError."""
        with pytest.raises(ValueError, match="Failed to parse formula"):
            parse_formula("a ** 2")


class TestExtractVariables:
    """Test extracting variables in binding order."""

    def test_first_seen_order(self):
        """Variables come out in order of first appearance."""
        assert extract_formula_variables("a + b - c") == ["a", "b", "c"]
        assert extract_formula_variables("c - a + b") == ["c", "a", "b"]

    def test_not_alphabetical(self):
        """Order follows the formula, not the alphabet."""
        assert extract_formula_variables("z * y + x") == ["z", "y", "x"]

    def test_mixed_precedence(self):
        """Traversal is left to right regardless of precedence."""
        assert extract_formula_variables("a + b * c - d") == [
            "a",
            "b",
            "c",
            "d",
        ]
        assert extract_formula_variables("a * b + c/d") == [
            "a",
            "b",
            "c",
            "d",
        ]

    def test_duplicates_collapse(self):
        """Repeated identifiers appear once, at their first position."""
        assert extract_formula_variables("(d + a) * (b - d) + a") == [
            "d",
            "a",
            "b",
        ]

    def test_literals_ignored(self):
        """Numeric literals are not variables."""
        assert extract_formula_variables("2 * rate + 10") == ["rate"]

    def test_no_variables(self):
        """A constant formula has no variables."""
        assert extract_formula_variables("1 + 2") == []

    def test_unary_operand(self):
        """Variables under unary operators are collected."""
        assert extract_formula_variables("-(x - y)") == ["x", "y"]

    def test_deterministic(self):
        """Re-parsing the same text yields the same list."""
        text = "q * (p + r) - p / s"
        first = extract_variables(parse_formula(text))
        second = extract_variables(parse_formula(text))
        assert first == second == ["q", "p", "r", "s"]
