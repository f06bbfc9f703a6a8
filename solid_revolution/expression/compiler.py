"""
Formula compilation: user text -> CompiledExpression.

Pipeline (order matters, each step assumes the previous ones ran):
  1. lower-case and trim; empty text compiles to the constant 0
  2. |expr| bars -> abs(expr), left to right, single level
  3. '^' -> '**'
  4. logN(...) -> log_base(N, ...)  (before step 5 eats the digits)
  5. implicit multiplication: 2x, 2(, )2, )x
  6. alias names -> canonical whitelist names (arcsin -> asin, ...)
  7. tokenize, parse against the whitelist, evaluate with numpy

Compilation never raises: malformed text produces an expression that
evaluates to NaN for every x, with the reason kept in .error.
"""

import logging
import re
from typing import Optional, Union

import numpy as np

from solid_revolution.expression.errors import FormulaError
from solid_revolution.expression.functions import ALIASES, known_names
from solid_revolution.expression.parser import Node, Number, parse

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]

_ABS_BARS = re.compile(r'\|([^|]*)\|')
_INDEXED_LOG = re.compile(r'(?<![a-z_])log(\d+)\s*\(')
_DIGIT_THEN_LETTER_OR_PAREN = re.compile(r'(\d)([a-z(])')
_PAREN_THEN_DIGIT_OR_LETTER = re.compile(r'(\))([0-9a-z])')
_ALIAS_NAMES = re.compile(
    r'\b(' + '|'.join(n for n in known_names() if n in ALIASES) + r')\b'
)


# ---------------------------------------------------------------------------
# Rewrite pipeline
# ---------------------------------------------------------------------------

def normalize_text(formula: Optional[str]) -> str:
    """Step 1: lower-case and trim. Empty/blank/None becomes '0'."""
    if formula is None:
        return "0"
    text = str(formula).lower().strip()
    return text or "0"


def rewrite_abs_bars(text: str) -> str:
    """Step 2: |expr| -> abs(expr); each non-nested pair independently."""
    return _ABS_BARS.sub(r'abs(\1)', text)


def rewrite_power(text: str) -> str:
    """Step 3: '^' -> '**'."""
    return text.replace('^', '**')


def rewrite_indexed_log(text: str) -> str:
    """Step 4: log3(9) -> log_base(3,9)."""
    return _INDEXED_LOG.sub(r'log_base(\1,', text)


def insert_implicit_multiplication(text: str) -> str:
    """Step 5: 2x -> 2*x, 2(x) -> 2*(x), (x)2 -> (x)*2, (x)y -> (x)*y."""
    text = _DIGIT_THEN_LETTER_OR_PAREN.sub(r'\1*\2', text)
    return _PAREN_THEN_DIGIT_OR_LETTER.sub(r'\1*\2', text)


def canonicalize_names(text: str) -> str:
    """Step 6: map accepted spellings onto whitelist names."""
    return _ALIAS_NAMES.sub(lambda m: ALIASES[m.group(1)], text)


def rewrite(formula: Optional[str]) -> str:
    """Run rewrite steps 1-6 and return text ready for the parser."""
    text = normalize_text(formula)
    text = rewrite_abs_bars(text)
    text = rewrite_power(text)
    text = rewrite_indexed_log(text)
    text = insert_implicit_multiplication(text)
    return canonicalize_names(text)


# ---------------------------------------------------------------------------
# Compiled expression
# ---------------------------------------------------------------------------

class CompiledExpression:
    """Pure numeric function f(x) compiled from formula text.

    Accepts a scalar or an array of x-sites. Never raises: evaluation
    failures and malformed formulas produce NaN, division by zero
    produces +/-inf.

    Attributes:
        source: Original formula text
        rewritten: Text after the rewrite pipeline
        error: Compilation error message, None if the formula compiled
    """

    def __init__(self, source: Optional[str], rewritten: str,
                 tree: Optional[Node], error: Optional[str] = None):
        self.source = source
        self.rewritten = rewritten
        self._tree = tree
        self.error = error

    @property
    def is_valid(self) -> bool:
        """True if the formula parsed successfully."""
        return self._tree is not None

    @property
    def is_constant_zero(self) -> bool:
        """True for the canonical empty-formula function."""
        return isinstance(self._tree, Number) and self._tree.value == 0.0

    def __call__(self, x: ArrayLike) -> ArrayLike:
        scalar_input = np.ndim(x) == 0
        xs = np.asarray(x, dtype=np.float64)

        if self._tree is None:
            result = np.full(xs.shape, np.nan)
        else:
            with np.errstate(all='ignore'):
                try:
                    raw = self._tree.evaluate(xs)
                    result = np.broadcast_to(
                        np.asarray(raw, dtype=np.float64), xs.shape
                    ).copy()
                except (ArithmeticError, ValueError, TypeError, RecursionError) as exc:
                    logger.debug("Evaluation of %r failed: %s", self.source, exc)
                    result = np.full(xs.shape, np.nan)

        if scalar_input:
            return float(result)
        return result

    def __repr__(self) -> str:
        status = "ok" if self.is_valid else f"error={self.error!r}"
        return f"CompiledExpression({self.source!r}, {status})"


def compile_formula(formula: Optional[str]) -> CompiledExpression:
    """Compile formula text into a CompiledExpression.

    Args:
        formula: User formula, e.g. "2sin(x)", "|x-1|", "log3(x)". Empty or
            None compiles to the constant 0.

    Returns:
        CompiledExpression (NaN everywhere if the formula is malformed)
    """
    rewritten = rewrite(formula)
    try:
        tree = parse(rewritten)
    except FormulaError as exc:
        logger.debug("Formula %r rejected: %s", formula, exc)
        return CompiledExpression(formula, rewritten, None, error=str(exc))
    return CompiledExpression(formula, rewritten, tree)


def evaluate_at(formula: Optional[str], x: float = 0.0) -> float:
    """Compile formula and evaluate it once (used for bounds and domains)."""
    return compile_formula(formula)(x)
