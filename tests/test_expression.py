"""
Unit tests for solid_revolution.expression.

Tests:
- Rewrite pipeline (abs bars, power, indexed log, implicit multiplication)
- Parser precedence and the name whitelist
- Numeric semantics (NaN for domain errors, inf for division by zero)
- Malformed formulas never raise
"""

import math

import numpy as np
import pytest

from solid_revolution.expression import (
    ArityError,
    FormulaSyntaxError,
    UnknownIdentifierError,
    compile_formula,
    evaluate_at,
    rewrite,
)
from solid_revolution.expression.compiler import (
    insert_implicit_multiplication,
    rewrite_abs_bars,
    rewrite_indexed_log,
)
from solid_revolution.expression.lexer import TokenType, tokenize
from solid_revolution.config import MAX_FORMULA_DEPTH
from solid_revolution.expression.parser import parse


class TestRewrite:
    """Tests for the text rewrite steps."""

    def test_empty_formula_is_zero(self):
        """Empty, blank and None formulas become the constant 0."""
        assert rewrite("") == "0"
        assert rewrite("   ") == "0"
        assert rewrite(None) == "0"

    def test_lower_case_and_trim(self):
        """Input is lower-cased and trimmed."""
        assert rewrite("  SIN(X) ") == "sin(x)"

    def test_abs_bars(self):
        """Each |...| pair becomes abs(...)."""
        assert rewrite_abs_bars("|x-1|") == "abs(x-1)"
        assert rewrite_abs_bars("|x|+|x-2|") == "abs(x)+abs(x-2)"

    def test_power(self):
        """Caret becomes the power operator."""
        assert rewrite("x^2") == "x**2"

    def test_indexed_log(self):
        """logN(...) becomes log_base(N, ...)."""
        assert rewrite_indexed_log("log3(9)") == "log_base(3,9)"
        assert rewrite_indexed_log("log(100)") == "log(100)"

    def test_implicit_multiplication(self):
        """Digit-letter, digit-paren, paren-digit and paren-letter get '*'."""
        assert insert_implicit_multiplication("2x") == "2*x"
        assert insert_implicit_multiplication("2(x+1)") == "2*(x+1)"
        assert insert_implicit_multiplication("(x+1)2") == "(x+1)*2"
        assert insert_implicit_multiplication("(x+1)x") == "(x+1)*x"
        assert insert_implicit_multiplication("2sin(x)") == "2*sin(x)"

    def test_indexed_log_survives_implicit_multiplication(self):
        """Base digits are consumed before implicit multiplication runs."""
        assert rewrite("log3(9)") == "log_base(3,9)"

    def test_aliases(self):
        """arcsin/arccos/arctan map onto the whitelist names."""
        assert rewrite("arcsin(x)+arctan(x)") == "asin(x)+atan(x)"


class TestLexerAndParser:
    """Tests for tokenizing and parsing rewritten text."""

    def test_tokens(self):
        """Power is a single token and the stream ends with EOF."""
        types = [t.type for t in tokenize("2.5**x")]
        assert types == [TokenType.NUMBER, TokenType.POWER, TokenType.IDENTIFIER, TokenType.EOF]

    def test_unexpected_character(self):
        """Characters outside the grammar are rejected with a position."""
        with pytest.raises(FormulaSyntaxError) as exc_info:
            tokenize("x $ 2")
        assert exc_info.value.position == 2

    def test_unknown_identifier(self):
        """Names outside the whitelist are rejected."""
        with pytest.raises(UnknownIdentifierError):
            parse("__import__(x)")
        with pytest.raises(UnknownIdentifierError):
            parse("y+1")

    def test_arity(self):
        """Functions are called with their declared argument count."""
        with pytest.raises(ArityError):
            parse("sin(x,2)")
        with pytest.raises(ArityError):
            parse("log_base(2)")

    def test_function_without_call(self):
        """A bare function name is not a value."""
        with pytest.raises(FormulaSyntaxError):
            parse("sin+1")

    def test_unbalanced_parentheses(self):
        with pytest.raises(FormulaSyntaxError):
            parse("(x+1")
        with pytest.raises(FormulaSyntaxError):
            parse("x+1)")


class TestEvaluation:
    """Tests for numeric results of compiled formulas."""

    @pytest.mark.parametrize("formula,x,expected", [
        ("2+3*4", 0.0, 14.0),
        ("2^3^2", 0.0, 512.0),
        ("-x^2", 3.0, -9.0),
        ("-2+3", 0.0, 1.0),
        ("x^-1", 4.0, 0.25),
        ("2*-3", 0.0, -6.0),
        ("(1+2)3", 0.0, 9.0),
        ("2pi", 0.0, 2 * math.pi),
        ("e", 0.0, math.e),
        ("|x-1|", -2.0, 3.0),
        ("sqrt(16)", 0.0, 4.0),
        ("ln(e)", 0.0, 1.0),
        ("exp(0)", 0.0, 1.0),
        ("arctan(1)", 0.0, math.pi / 4),
    ])
    def test_values(self, formula, x, expected):
        """Operator precedence, constants and functions."""
        assert compile_formula(formula)(x) == pytest.approx(expected)

    def test_log_base_10(self):
        """log without an explicit base is base 10."""
        assert evaluate_at("log(100)") == pytest.approx(2.0)

    def test_indexed_log(self):
        """logN(...) is the base-N logarithm."""
        assert evaluate_at("log3(9)") == pytest.approx(2.0)
        assert evaluate_at("log2(x)", 8.0) == pytest.approx(3.0)

    def test_implicit_multiplication_matches_explicit(self):
        """2sin(x) and 2*sin(x) agree everywhere."""
        xs = np.linspace(-5, 5, 101)
        assert np.array_equal(compile_formula("2sin(x)")(xs), compile_formula("2*sin(x)")(xs))

    def test_compilation_is_idempotent(self):
        """Compiling the same text twice gives identical functions."""
        xs = np.linspace(-3, 3, 61)
        first = compile_formula("x^3 - 2|x| + log2(x+4)")
        second = compile_formula("x^3 - 2|x| + log2(x+4)")
        assert np.array_equal(first(xs), second(xs), equal_nan=True)

    def test_scalar_in_scalar_out(self):
        """A scalar x gives a Python float."""
        assert isinstance(compile_formula("x^2")(2.0), float)

    def test_array_in_array_out(self):
        """An array of sites gives an array of the same shape."""
        xs = np.array([0.0, 1.0, 2.0])
        assert np.allclose(compile_formula("x^2")(xs), [0.0, 1.0, 4.0])

    def test_constant_broadcasts(self):
        """A formula without x still yields one value per site."""
        result = compile_formula("3")(np.zeros(5))
        assert result.shape == (5,)
        assert np.all(result == 3.0)

    def test_domain_error_is_nan(self):
        """sqrt of a negative number is NaN, not an exception."""
        assert math.isnan(evaluate_at("sqrt(-1)"))
        assert math.isnan(evaluate_at("asin(2)"))

    def test_division_by_zero_is_infinite(self):
        """1/x at 0 is infinite, not an exception."""
        assert math.isinf(evaluate_at("1/x", 0.0))


class TestMalformedFormulas:
    """Malformed text compiles to NaN everywhere."""

    @pytest.mark.parametrize("formula", [
        "2+",
        "sin(",
        "x y",
        "foo(x)",
        "1e5",
        "import os",
        "x..2",
    ])
    def test_nan_everywhere(self, formula):
        """Compilation does not raise, every evaluation is NaN."""
        fn = compile_formula(formula)
        assert not fn.is_valid
        assert fn.error
        assert np.all(np.isnan(fn(np.linspace(0, 1, 5))))

    def test_valid_formula_has_no_error(self):
        fn = compile_formula("x+1")
        assert fn.is_valid
        assert fn.error is None

    def test_empty_formula_is_constant_zero(self):
        fn = compile_formula("")
        assert fn.is_constant_zero
        assert fn(7.0) == 0.0


class TestFormulaDepth:
    """Very long or deeply nested formulas are rejected, not crashed on."""

    @pytest.mark.parametrize("formula", [
        "+".join(["x"] * 1500),
        "(" * 3000 + "x" + ")" * 3000,
        "-" * 3000 + "x",
        "sin(" * 500 + "x" + ")" * 500,
        "^".join(["x"] * 500),
    ])
    def test_nan_everywhere(self, formula):
        """Compilation does not raise, every evaluation is NaN."""
        fn = compile_formula(formula)
        assert not fn.is_valid
        assert "nested deeper" in fn.error
        assert np.all(np.isnan(fn(np.linspace(0, 1, 5))))

    def test_parse_raises_syntax_error(self):
        with pytest.raises(FormulaSyntaxError):
            parse("(" * (MAX_FORMULA_DEPTH + 1) + "x" + ")" * (MAX_FORMULA_DEPTH + 1))

    def test_formulas_within_limit(self):
        """Moderate chains and nesting still evaluate."""
        assert evaluate_at("+".join(["x"] * 50), 2.0) == pytest.approx(100.0)
        assert evaluate_at("(" * 30 + "x+1" + ")" * 30, 2.0) == pytest.approx(3.0)
        assert evaluate_at("-" * 20 + "x", 2.0) == pytest.approx(2.0)
