"""Formula compilation and sandboxed numeric evaluation."""

from solid_revolution.expression.compiler import (
    CompiledExpression,
    compile_formula,
    evaluate_at,
    rewrite,
)
from solid_revolution.expression.errors import (
    ArityError,
    FormulaError,
    FormulaSyntaxError,
    UnknownIdentifierError,
)

__all__ = [
    "CompiledExpression",
    "compile_formula",
    "evaluate_at",
    "rewrite",
    "FormulaError",
    "FormulaSyntaxError",
    "UnknownIdentifierError",
    "ArityError",
]
