"""
Whitelist of names a formula may reference.

This table is the whole capability surface of the formula language:
one variable, two constants and a fixed set of numeric functions. All
implementations are numpy ufuncs so that a compiled formula evaluates a
full array of x-sites in one pass.
"""

from typing import Callable, Dict, NamedTuple

import numpy as np

VARIABLE = "x"


def _log_base(base, value):
    """Logarithm of value in an arbitrary base: ln(value) / ln(base)."""
    return np.log(value) / np.log(base)


class FunctionSpec(NamedTuple):
    """Whitelisted function: arity and numpy implementation."""
    arity: int
    impl: Callable


FUNCTIONS: Dict[str, FunctionSpec] = {
    "sin": FunctionSpec(1, np.sin),
    "cos": FunctionSpec(1, np.cos),
    "tan": FunctionSpec(1, np.tan),
    "sqrt": FunctionSpec(1, np.sqrt),
    "abs": FunctionSpec(1, np.abs),
    "exp": FunctionSpec(1, np.exp),
    "ln": FunctionSpec(1, np.log),
    "log": FunctionSpec(1, np.log10),
    "asin": FunctionSpec(1, np.arcsin),
    "acos": FunctionSpec(1, np.arccos),
    "atan": FunctionSpec(1, np.arctan),
    "log_base": FunctionSpec(2, _log_base),
}

CONSTANTS: Dict[str, float] = {
    "pi": float(np.pi),
    "e": float(np.e),
}

# Spellings accepted in user input and their canonical whitelist names
ALIASES: Dict[str, str] = {
    "arcsin": "asin",
    "arccos": "acos",
    "arctan": "atan",
}


def known_names():
    """All names accepted in user input, longest first.

    Longest-first order keeps alternation regexes from matching a short
    name inside a longer one.
    """
    names = set(FUNCTIONS) | set(CONSTANTS) | set(ALIASES) | {VARIABLE}
    return sorted(names, key=lambda n: (-len(n), n))
