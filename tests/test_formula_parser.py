#!/usr/bin/env python3
"""
Tests for the formula parser.
"""

import pytest

from roundme.errors import ParseError
from roundme.expression import BinaryOp, Identifier, Negative, Number, Operator
from roundme.formula_parser import FormulaParser, normalize_formula, parse


class TestParsing:
    """Well formed formulas"""

    @pytest.mark.parametrize("formula,expected", [
        ("a", "a"),
        ("42", "42"),
        ("a + b * c", "(a + (b * c))"),
        ("a * b + c", "((a * b) + c)"),
        ("a - b - c", "((a - b) - c)"),
        ("a / b / c", "((a / b) / c)"),
        ("a * b / c", "((a * b) / c)"),
        ("(a + b) * c", "((a + b) * c)"),
        ("a ** b ** c", "(a ** (b ** c))"),
        ("a * b ** c", "(a * (b ** c))"),
        ("-a ** b", "-(a ** b)"),
        ("a ** -b", "(a ** -b)"),
        ("2 * -3", "(2 * -3)"),
        ("--a", "--a"),
        ("((a * b)**(e/f)) / (c * d)", "(((a * b) ** (e / f)) / (c * d))"),
    ])
    def test_structure(self, formula, expected):
        assert str(parse(formula)) == expected

    def test_nodes(self):
        assert parse("-a * 2") == BinaryOp(Negative(Identifier("a")), Operator.MUL, Number(2))

    def test_multi_letter_identifiers(self):
        assert parse("price * amount") == BinaryOp(Identifier("price"), Operator.MUL, Identifier("amount"))

    def test_case_and_whitespace_are_normalized(self):
        assert str(parse("  A *B  ")) == "(a * b)"
        assert normalize_formula("  A *B  ") == "a *b"

    def test_parsed_nodes_have_no_rounding(self):
        expr = parse("(a * b) / c")
        assert "↑" not in str(expr) and "↓" not in str(expr)

    def test_parser_is_reusable(self):
        parser = FormulaParser()
        assert str(parser.parse("a * b")) == "(a * b)"
        assert str(parser.parse("c / d")) == "(c / d)"


class TestParseErrors:
    """Malformed formulas"""

    def parse_error(self, formula) -> ParseError:
        with pytest.raises(ParseError) as exc_info:
            parse(formula)
        return exc_info.value

    def test_caret_power(self):
        error = self.parse_error("a ^ b")
        assert error.message == "Use ** for power (and not ^)"
        assert error.position == 2
        assert error.formula == "a ^ b"

    def test_digit_in_identifier(self):
        error = self.parse_error("a0 * b")
        assert error.message == "Unexpected token '0'"
        assert error.position == 1

    def test_unexpected_character(self):
        error = self.parse_error("a $ b")
        assert error.message == "Unexpected character '$'"

    def test_missing_closing_paren(self):
        error = self.parse_error("(a + b")
        assert error.message == "Missing ')'"
        assert error.position == 6

    def test_missing_opening_paren(self):
        error = self.parse_error("a + b)")
        assert error.message == "Missing '('"
        assert error.position == 5

    @pytest.mark.parametrize("formula", ["", "   "])
    def test_empty(self, formula):
        assert self.parse_error(formula).message == "Empty formula"

    def test_trailing_operator(self):
        assert self.parse_error("a +").message == "Unexpected end of formula"

    def test_leading_operator(self):
        assert self.parse_error("* a").message == "Unexpected token '*'"

    def test_empty_parens(self):
        assert self.parse_error("()").message == "Unexpected token ')'"

    def test_str_points_at_position(self):
        error = self.parse_error("a ^ b")
        assert str(error) == "Use ** for power (and not ^) at position 2\n  a ^ b\n    ^"
