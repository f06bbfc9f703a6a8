"""Errors raised while compiling a formula.

They never leave compile_formula(): the compiler converts them into a
CompiledExpression that evaluates to NaN everywhere.
"""

from typing import Optional


class FormulaError(ValueError):
    """Base class for formula compilation errors."""


class FormulaSyntaxError(FormulaError):
    """Formula text could not be tokenized or parsed."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class UnknownIdentifierError(FormulaError):
    """Formula references a name outside the function/constant whitelist."""

    def __init__(self, name: str, position: Optional[int] = None):
        self.name = name
        self.position = position
        super().__init__(f"Unknown identifier {name!r}")


class ArityError(FormulaError):
    """Whitelisted function called with the wrong number of arguments."""

    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(
            f"Function {name!r} takes {expected} argument(s), got {got}"
        )
